# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .proxy import Proxy, main, sleep_loop, entry_point


__all__ = [
    # PyPi package entry_point.
    'entry_point',
    # Embed sockspy.
    'main',
    'Proxy',
    # Utility exposed for demos
    'sleep_loop',
]
