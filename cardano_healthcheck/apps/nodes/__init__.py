from .health import HealthConfig, HealthReport, Verdict, check, check_max_time_since_last_block
from .metrics import build_metric_table, fetch_metric_table

__all__ = [
    'HealthConfig',
    'HealthReport',
    'Verdict',
    'check',
    'check_max_time_since_last_block',
    'build_metric_table',
    'fetch_metric_table',
]
