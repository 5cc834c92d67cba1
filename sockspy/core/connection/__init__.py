# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .types import tcpConnectionTypes
from .client import TcpClientConnection
from .server import TcpServerConnection
from .connection import TcpConnection, TcpConnectionUninitializedException


__all__ = [
    'TcpConnection',
    'TcpConnectionUninitializedException',
    'TcpServerConnection',
    'TcpClientConnection',
    'tcpConnectionTypes',
]
