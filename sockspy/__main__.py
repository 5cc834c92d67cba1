# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .proxy import entry_point


if __name__ == '__main__':
    entry_point()
