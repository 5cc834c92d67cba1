# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import NamedTuple


SOCKS4_VERSION = 4

Socks4Operations = NamedTuple(
    'Socks4Operations', [
        ('CONNECT', int),
        ('BIND', int),
        ('UDP_ASSOCIATE', int),
    ],
)

socks4Operations = Socks4Operations(1, 2, 3)


def command_name(command: int) -> str:
    """Returns lowercase name of the command, empty string if unknown."""
    for name, code in socks4Operations._asdict().items():
        if code == command:
            return name.lower().replace('_', '')
    return ''
