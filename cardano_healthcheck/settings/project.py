# -*- coding: utf-8 -*-
import math
from datetime import timedelta

import environ

from cardano_healthcheck.exceptions import ConfigError
from cardano_healthcheck.utils.durations import parse_duration

env = environ.Env()

# Timeout in seconds for the single request to the prometheus endpoint
DEFAULT_HTTP_TIMEOUT = 5.0
DEFAULT_MAX_TIME_SINCE_LAST_BLOCK = timedelta(minutes=10)
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# Environment lookups happen on use, so a bad value surfaces as a ConfigError
# the CLI can report instead of failing at import.
def http_timeout() -> float:
    raw = env.str("HEALTHCHECK_HTTP_TIMEOUT", default="")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = math.nan
    if not (timeout > 0 and math.isfinite(timeout)):
        raise ConfigError(f"HEALTHCHECK_HTTP_TIMEOUT must be a positive number of seconds, got '{raw}'")
    return timeout


def max_time_since_last_block() -> timedelta:
    raw = env.str("HEALTHCHECK_MAX_TIME_SINCE_LAST_BLOCK", default="")
    if not raw:
        return DEFAULT_MAX_TIME_SINCE_LAST_BLOCK
    try:
        return parse_duration(raw)
    except (ValueError, OverflowError) as e:
        raise ConfigError(f"HEALTHCHECK_MAX_TIME_SINCE_LAST_BLOCK is not a valid duration: {e}")


def log_level() -> str:
    level = env.str("HEALTHCHECK_LOG_LEVEL", default=DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"HEALTHCHECK_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{level}'")
    return level


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": ("%(levelname)s %(asctime)s |" "%(pathname)s:%(lineno)d (in %(funcName)s) |" " %(message)s ")
        },
        "simple": {"format": "%(levelname)s %(asctime)s %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
        "console_verbose": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "cardano_healthcheck": {
            "handlers": ["console"],
            "level": DEFAULT_LOG_LEVEL,
            "propagate": False,
        },
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}


def logging_config(level: str = DEFAULT_LOG_LEVEL, verbose: bool = False) -> dict:
    """LOGGING at the given level, switched to DEBUG with source locations when verbose."""
    config = dict(LOGGING, loggers=dict(LOGGING["loggers"]))
    config["loggers"]["cardano_healthcheck"] = {
        "handlers": ["console_verbose" if verbose else "console"],
        "level": "DEBUG" if verbose else level,
        "propagate": False,
    }
    return config
