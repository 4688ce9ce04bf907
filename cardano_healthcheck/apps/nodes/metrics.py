"""
Prometheus endpoint access for cardano-node.
Fetches the plain-text exposition output and turns it into a name -> value table.
"""

import logging
import math
import time
from typing import Dict, Iterable, Iterator, Union

import requests

from cardano_healthcheck.exceptions import FetchError, ParseError

logger = logging.getLogger(__name__)

MetricTable = Dict[str, str]


def build_metric_table(lines: Iterable[Union[bytes, str]]) -> MetricTable:
    """
    Build a table of metric names and raw values from exposition lines.

    Only lines made of exactly two whitespace separated tokens are kept, so
    comments, HELP/TYPE annotations, labelled samples with spaces and samples
    carrying a timestamp are skipped. Later duplicates overwrite earlier ones.
    Errors raised while reading `lines` propagate unchanged.
    """
    table: MetricTable = {}
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode('utf-8')
        if line.startswith('#'):
            continue
        tokens = line.split()
        if len(tokens) == 2:
            table[tokens[0]] = tokens[1]
    return table


def _lines_before_deadline(lines: Iterable[bytes], deadline: float, url: str, status_code: int) -> Iterator[bytes]:
    for line in lines:
        if time.monotonic() > deadline:
            raise FetchError(
                f"prometheus endpoint at '{url}' did not finish sending metrics in time",
                url=url,
                status_code=status_code,
            )
        yield line


def fetch_metric_table(url: str, timeout: float = 5.0) -> MetricTable:
    """
    GET the metrics endpoint and parse its body.

    `timeout` bounds the whole request, body included. Raises FetchError when
    the endpoint cannot be reached, answers with a non-2xx status or runs past
    the timeout, and ParseError when the body breaks off while being read.
    """
    if not (timeout > 0 and math.isfinite(timeout)):
        raise FetchError(f"timeout for prometheus endpoint at '{url}' must be a positive number of seconds, "
                         f"got {timeout}", url=url)

    logger.debug(f"Fetching metrics from {url} (timeout {timeout}s)")
    deadline = time.monotonic() + timeout
    try:
        response = requests.get(url, timeout=timeout, stream=True)
    except requests.RequestException as e:
        raise FetchError(f"not able to reach prometheus endpoint at '{url}': {e}", url=url)

    with response:
        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"prometheus endpoint at '{url}' reported status code '{response.status_code} {response.reason}'",
                url=url,
                status_code=response.status_code,
            )
        try:
            table = build_metric_table(
                _lines_before_deadline(response.iter_lines(), deadline, url, response.status_code)
            )
        except (OSError, UnicodeDecodeError) as e:
            # requests.RequestException is an OSError subclass
            raise ParseError(
                f"error reading response from prometheus endpoint at '{url}': {e}",
                url=url,
                status_code=response.status_code,
            )

    logger.debug(f"Parsed {len(table)} metrics from {url}")
    return table
