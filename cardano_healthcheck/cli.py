#!/usr/bin/env python3
"""
Healthcheck CLI - decide whether a cardano-node is healthy.
Exit status 0 means healthy, anything else means it isn't (or couldn't be told).
"""

import logging
import logging.config
import sys

import click

from cardano_healthcheck.apps.chains.config import load_prometheus_url, load_time_settings
from cardano_healthcheck.apps.nodes.health import HealthConfig, check
from cardano_healthcheck.exceptions import CheckError, ConfigError, InvariantViolation
from cardano_healthcheck.settings import project
from cardano_healthcheck.utils.durations import parse_duration

logger = logging.getLogger('cardano_healthcheck.cli')

EXIT_HEALTHY = 0
EXIT_UNHEALTHY = 1
EXIT_INVARIANT_VIOLATION = 2


class DurationType(click.ParamType):
    name = "duration"

    def convert(self, value, param, ctx):
        if not isinstance(value, str):
            return value
        try:
            return parse_duration(value)
        except (ValueError, OverflowError) as e:
            self.fail(str(e), param, ctx)


DURATION = DurationType()


@click.command()
@click.option('--config-file', envvar='CARDANO_NODE_CONFIG', required=True,
              type=click.Path(dir_okay=False), help='path to the configuration file of cardano-node')
@click.option('--genesis-file', envvar='CARDANO_NODE_GENESIS', required=True,
              type=click.Path(dir_okay=False), help='path to the genesis file of cardano-node')
@click.option('--max-time-since-last-block', type=DURATION, default=None,
              help='threshold for duration between now and the creation date of the most recently received block '
                   '[default: HEALTHCHECK_MAX_TIME_SINCE_LAST_BLOCK or 10m]')
@click.option('--prometheus-url', default=None,
              help='metrics URL to query instead of the one derived from the configuration file')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='timeout in seconds for the request to the prometheus endpoint '
                   '[default: HEALTHCHECK_HTTP_TIMEOUT or 5]')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.version_option(package_name='cardano-node-healthcheck')
def main(config_file, genesis_file, max_time_since_last_block, prometheus_url, timeout, verbose):
    """Check whether a cardano-node is healthy."""
    try:
        log_level = project.log_level()
        settings_error = None
    except ConfigError as e:
        log_level, settings_error = project.DEFAULT_LOG_LEVEL, e
    logging.config.dictConfig(project.logging_config(log_level, verbose))

    try:
        if settings_error is not None:
            raise settings_error
        if max_time_since_last_block is None:
            max_time_since_last_block = project.max_time_since_last_block()
        if timeout is None:
            timeout = project.http_timeout()

        time_settings = load_time_settings(genesis_file)
        if prometheus_url is None:
            prometheus_url = load_prometheus_url(config_file)

        config = HealthConfig(
            prometheus_url=prometheus_url,
            time_settings=time_settings,
            max_time_since_last_block=max_time_since_last_block,
            timeout=timeout,
        )
        report = check(config)
    except CheckError as e:
        logger.error(f"error: {e}")
        sys.exit(EXIT_UNHEALTHY)
    except InvariantViolation as e:
        logger.critical(f"epoch/slot date does not match blockchain details: {e}")
        sys.exit(EXIT_INVARIANT_VIOLATION)

    if report.healthy:
        logger.info("node is healthy")
        sys.exit(EXIT_HEALTHY)

    logger.info(
        f"node isn't healthy: last block slot {report.slot_number} ended "
        f"{report.time_since_last_block.total_seconds():.0f}s ago"
    )
    sys.exit(EXIT_UNHEALTHY)


if __name__ == '__main__':
    main()
