"""
Readers for the cardano-node configuration and genesis files.
Only the handful of fields the healthcheck needs are extracted.
"""

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from cardano_healthcheck.exceptions import ConfigError
from .slots import TimeSettings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_FRACTION = re.compile(r"\.([0-9]+)")


def _read_text(path: PathLike, kind: str) -> str:
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"the {kind} at '{path}' cannot be read: {e}", path=str(path))


def _positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{field}' must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"'{field}' must be positive, got {value}")
    return value


def _positive_number(value: Any, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"'{field}' must be a number, got {value!r}")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"'{field}' must be a number, got {value!r}")
    if not number.is_finite() or number <= 0:
        raise ValueError(f"'{field}' must be positive, got {value}")
    return number


def _slot_duration(microseconds: Decimal, field: str) -> timedelta:
    duration = timedelta(microseconds=int(microseconds))
    if duration <= timedelta(0):
        raise ValueError(f"'{field}' is shorter than one microsecond")
    return duration


def _parse_system_start(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"'systemStart' must be a timestamp, got {value!r}")
    # before Python 3.11 fromisoformat rejects a trailing "Z" and fractions
    # that are not 3 or 6 digits long
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    value = _FRACTION.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), value, count=1)
    start = datetime.fromisoformat(value)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start


def _shelley_time_settings(genesis: Dict[str, Any]) -> TimeSettings:
    slot_seconds = _positive_number(genesis['slotLength'], 'slotLength')
    return TimeSettings(
        genesis_time=_parse_system_start(genesis['systemStart']),
        slots_per_epoch=_positive_int(genesis['epochLength'], 'epochLength'),
        slot_duration=_slot_duration(slot_seconds * 1_000_000, 'slotLength'),
    )


def _byron_time_settings(genesis: Dict[str, Any]) -> TimeSettings:
    k = _positive_int(genesis['protocolConsts']['k'], 'protocolConsts.k')
    slot_ms = _positive_number(genesis['blockVersionData']['slotDuration'], 'blockVersionData.slotDuration')
    start_time = genesis['startTime']
    if isinstance(start_time, bool) or not isinstance(start_time, int):
        raise ValueError(f"'startTime' must be unix seconds, got {start_time!r}")
    return TimeSettings(
        genesis_time=datetime.fromtimestamp(start_time, tz=timezone.utc),
        slots_per_epoch=10 * k,
        slot_duration=_slot_duration(slot_ms * 1000, 'blockVersionData.slotDuration'),
    )


def parse_time_settings(genesis: Dict[str, Any]) -> TimeSettings:
    """Extract time settings from a decoded Shelley or Byron genesis document."""
    if 'systemStart' in genesis:
        return _shelley_time_settings(genesis)
    if 'startTime' in genesis:
        return _byron_time_settings(genesis)
    raise KeyError('systemStart')


def load_time_settings(genesis_path: PathLike) -> TimeSettings:
    """Read the blockchain time settings from a genesis file."""
    text = _read_text(genesis_path, 'genesis')
    try:
        genesis = json.loads(text)
        if not isinstance(genesis, dict):
            raise ValueError('expected a JSON object')
        settings = parse_time_settings(genesis)
    except KeyError as e:
        raise ConfigError(
            f"the genesis at '{genesis_path}' cannot be parsed: missing field {e}", path=str(genesis_path)
        )
    except (ValueError, TypeError, OverflowError, OSError) as e:
        raise ConfigError(f"the genesis at '{genesis_path}' cannot be parsed: {e}", path=str(genesis_path))

    logger.debug(
        f"Genesis {genesis_path}: start={settings.genesis_time.isoformat()}, "
        f"slots/epoch={settings.slots_per_epoch}, slot={settings.slot_duration.total_seconds()}s"
    )
    return settings


def load_prometheus_url(node_config_path: PathLike) -> str:
    """Assemble the metrics URL from the node's 'hasPrometheus' setting."""
    text = _read_text(node_config_path, 'node configuration')
    try:
        node_config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"the node configuration at '{node_config_path}' cannot be parsed: {e}", path=str(node_config_path)
        )

    prometheus = node_config.get('hasPrometheus') if isinstance(node_config, dict) else None
    if not isinstance(prometheus, (list, tuple)) or len(prometheus) != 2:
        raise ConfigError(
            f"the node configuration at '{node_config_path}' has no valid 'hasPrometheus' "
            f"entry (expected [host, port]), got {prometheus!r}",
            path=str(node_config_path),
        )

    host, port = prometheus
    return f"http://{host}:{port}/metrics"
