# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
import argparse

from prometheus_client import Counter, start_http_server

from .common.flag import flags
from .common.constants import DEFAULT_ENABLE_METRICS, DEFAULT_METRICS_PORT


logger = logging.getLogger(__name__)


flags.add_argument(
    '--enable-metrics',
    action='store_true',
    default=DEFAULT_ENABLE_METRICS,
    help='Default: False.  Enables prometheus metrics endpoint.',
)

flags.add_argument(
    '--metrics-port',
    type=int,
    default=DEFAULT_METRICS_PORT,
    help='Default: %d.  Port to serve prometheus metrics on.' % DEFAULT_METRICS_PORT,
)


REQUESTS = Counter(
    'sockspy_requests',
    'Total number of valid SOCKS requests received',
    ['command'],
)
INVALID_REQUESTS = Counter(
    'sockspy_invalid_requests',
    'Total number of malformed or unsupported handshakes',
)
REPLIES = Counter(
    'sockspy_replies',
    'Total number of replies sent to clients',
    ['status'],
)
UPSTREAM_CONNECT_FAILURES = Counter(
    'sockspy_upstream_connect_failures',
    'Total number of failed CONNECT dials',
)


def start_metrics_server(flags: argparse.Namespace) -> None:
    """Expose default registry over HTTP on --metrics-port."""
    start_http_server(flags.metrics_port, addr=str(flags.hostname))
    logger.info(
        'Serving metrics on %s:%d' %
        (flags.hostname, flags.metrics_port),
    )
