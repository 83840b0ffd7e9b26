"""Development-mode switch for verbose balloon logging."""

from __future__ import annotations

import os
from typing import Mapping, Optional

DEV_MODE_ENV_VAR = "TRANSLATION_BALLOON_DEV_MODE"
PROPAGATE_ENV_VAR = "TRANSLATION_BALLOON_PROPAGATE_LOGS"

_TRUE_TOKENS = {"1", "true", "yes", "on"}
_FALSE_TOKENS = {"0", "false", "no", "off"}


def _flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    token = value.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    return False


def is_dev_mode(env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    return _flag(source.get(DEV_MODE_ENV_VAR))


def propagate_logs(env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    return _flag(source.get(PROPAGATE_ENV_VAR))


DEBUG_CONFIG_ENABLED = is_dev_mode()
