# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
from typing import Any, Dict, Optional

from .constants import DEFAULT_LOG_FILE, DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT


# --log-level accepts level names as well as their first letter
LOG_LEVELS = {
    'D': logging.DEBUG,
    'I': logging.INFO,
    'W': logging.WARNING,
    'E': logging.ERROR,
    'C': logging.CRITICAL,
}


def single_char_to_level(char: str) -> int:
    level = LOG_LEVELS.get(char[:1].upper())
    if level is None:
        raise ValueError('Unknown log level %r' % char)
    return level


def setup_logging(
        log_file: Optional[str] = DEFAULT_LOG_FILE,
        log_level: str = DEFAULT_LOG_LEVEL,
        log_format: str = DEFAULT_LOG_FORMAT,
) -> None:
    """Configures the root logger.  Only the first call has any
    effect, same as :func:`logging.basicConfig`."""
    config: Dict[str, Any] = {
        'level': single_char_to_level(log_level),
        'format': log_format,
    }
    if log_file:    # pragma: no cover
        config.update(filename=log_file, filemode='a')
    logging.basicConfig(**config)
