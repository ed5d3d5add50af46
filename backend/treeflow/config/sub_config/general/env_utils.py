"""
Environment helpers shared by the general configs.

``read_env_defaults`` builds constructor kwargs from environment
variables, falling back to the dataclass defaults. ``env_sync`` returns
an ``apply_change`` hook that mirrors a field into ``os.environ``.
"""

from __future__ import annotations

import os
from dataclasses import MISSING
from logging import getLogger
from typing import Any, Callable, Dict

logger = getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in _TRUE_VALUES
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def read_env_defaults(env_map: Dict[str, str], dataclass_fields: Dict[str, Any]) -> Dict[str, Any]:
    """Read env overrides for the mapped fields.

    Values that fail to convert keep the field default and log a warning.
    """
    values: Dict[str, Any] = {}
    for field_name, env_var in env_map.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        f = dataclass_fields.get(field_name)
        default = f.default if f is not None and f.default is not MISSING else ""
        try:
            values[field_name] = _coerce(raw, default)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_var}: {raw!r}")
    return values


def env_sync(env_var: str) -> Callable[[Any, Any], None]:
    """Return a hook that writes the new value into ``os.environ``."""

    def _apply(old_value: Any, new_value: Any) -> None:
        if new_value is None or new_value == "":
            os.environ.pop(env_var, None)
        else:
            os.environ[env_var] = str(new_value)

    return _apply
