"""Transient translation balloon anchored to a text range in a Qt editor."""
from __future__ import annotations

__version__ = "0.3.0"
