"""
Health check for a cardano-node.

The node is healthy when the slot of the most recently received block has
ended no longer ago than a configured threshold.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Mapping, Optional

from cardano_healthcheck.apps.chains.slots import SlotDate, SlotPosition, TimeSettings, slot_date_for
from cardano_healthcheck.exceptions import MalformedMetric, MetricNotFound
from cardano_healthcheck.settings import project
from .metrics import fetch_metric_table

logger = logging.getLogger(__name__)

SLOT_NUMBER_METRIC = 'cardano_node_metrics_slotNum_int'

_DECIMAL_DIGITS = re.compile(r'[0-9]+')

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Verdict(Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class HealthConfig:
    """Everything needed to check one cardano-node instance."""

    prometheus_url: str
    time_settings: TimeSettings
    max_time_since_last_block: timedelta = project.DEFAULT_MAX_TIME_SINCE_LAST_BLOCK
    # Accepted but not evaluated: no peer count metric is checked yet.
    min_peer_connections: Optional[int] = None
    timeout: float = project.DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True)
class HealthReport:
    verdict: Verdict
    slot_number: int
    position: SlotPosition
    slot_date: SlotDate
    checked_at: datetime
    time_since_last_block: timedelta
    max_time_since_last_block: timedelta

    @property
    def healthy(self) -> bool:
        return self.verdict is Verdict.HEALTHY


def parse_slot_number(metrics: Mapping[str, str]) -> int:
    """Read the slot number of the most recent block from a metric table."""
    raw = metrics.get(SLOT_NUMBER_METRIC)
    if raw is None:
        raise MetricNotFound(
            f"could not find '{SLOT_NUMBER_METRIC}' in the prometheus endpoint output",
            key=SLOT_NUMBER_METRIC,
        )
    if not _DECIMAL_DIGITS.fullmatch(raw):
        raise MalformedMetric(
            f"'{SLOT_NUMBER_METRIC}' isn't a valid non-negative integer: '{raw}'",
            key=SLOT_NUMBER_METRIC,
            value=raw,
        )
    try:
        return int(raw)
    except ValueError as e:
        # int() refuses digit strings above sys.get_int_max_str_digits()
        raise MalformedMetric(
            f"'{SLOT_NUMBER_METRIC}' cannot be converted: {e}",
            key=SLOT_NUMBER_METRIC,
            value=raw,
        )


def check_max_time_since_last_block(
    max_time_since_last_block: timedelta,
    metrics: Mapping[str, str],
    settings: TimeSettings,
    clock: Clock = utc_now,
) -> HealthReport:
    """
    Judge the node by how long ago the slot of its latest block ended.

    Raises MetricNotFound or MalformedMetric when the slot number is missing or
    unusable. InvariantViolation from the slot arithmetic is left to propagate,
    since it means the time settings themselves are inconsistent.
    """
    slot_number = parse_slot_number(metrics)
    try:
        slot_date = slot_date_for(slot_number, settings)
    except OverflowError:
        raise MalformedMetric(
            f"'{SLOT_NUMBER_METRIC}' lies outside the representable time range: {slot_number}",
            key=SLOT_NUMBER_METRIC,
            value=metrics[SLOT_NUMBER_METRIC],
        )

    now = clock()
    lag = now - slot_date.end
    verdict = Verdict.HEALTHY if lag <= max_time_since_last_block else Verdict.UNHEALTHY

    logger.debug(
        f"Slot {slot_number} (epoch.slot {slot_date.position}) ended at {slot_date.end.isoformat()}, "
        f"{lag.total_seconds():.1f}s ago (max {max_time_since_last_block.total_seconds():.1f}s): {verdict.value}"
    )

    return HealthReport(
        verdict=verdict,
        slot_number=slot_number,
        position=slot_date.position,
        slot_date=slot_date,
        checked_at=now,
        time_since_last_block=lag,
        max_time_since_last_block=max_time_since_last_block,
    )


def check(config: HealthConfig, clock: Clock = utc_now) -> HealthReport:
    """
    Check whether the node described by `config` is healthy.

    Performs a single fetch without retries; any CheckError means no verdict
    could be reached.
    """
    if config.min_peer_connections is not None:
        logger.debug(f"min_peer_connections={config.min_peer_connections} is not evaluated")

    metrics = fetch_metric_table(config.prometheus_url, timeout=config.timeout)
    return check_max_time_since_last_block(
        config.max_time_since_last_block, metrics, config.time_settings, clock=clock
    )
