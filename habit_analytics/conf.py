"""
Settings for the analytics engine.

Defaults live in DEFAULT_SETTINGS and can be overridden per process with
HABIT_ANALYTICS_<NAME> environment variables, e.g.:

    HABIT_ANALYTICS_LOG_LEVEL=DEBUG
    HABIT_ANALYTICS_LOG_FORMAT=plain

Only ambient behaviour is configurable. Computation constants are fixed in
habit_analytics.utils.constants.
"""
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = 'HABIT_ANALYTICS_'

DEFAULT_SETTINGS = {
    'LOG_LEVEL': 'WARNING',
    'LOG_FORMAT': 'json',        # 'json' (StructuredFormatter) or 'plain'
    'LOG_FUNCTION_CALLS': True,  # timing logs from log_function_call
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _coerce(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of the default."""
    if isinstance(default, bool):
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        logger.warning("Ignoring unrecognized boolean setting value %r", raw)
        return default
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer setting value %r", raw)
            return default
    return raw.strip()


def get_setting(name: str, default: Any = None) -> Any:
    """
    Get a setting value.

    Args:
        name: Setting name without prefix, e.g. 'LOG_LEVEL'
        default: Used when the name is not in DEFAULT_SETTINGS

    Returns:
        The environment override if set, else the built-in default
    """
    base = DEFAULT_SETTINGS.get(name, default)
    raw = os.environ.get(f'{ENV_PREFIX}{name}')
    if raw is None:
        return base
    return _coerce(raw, base)
