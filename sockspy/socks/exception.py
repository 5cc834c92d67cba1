# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import Any, Optional


class SocksProtocolException(Exception):
    """Top level :exc:`SocksProtocolException` exception class.

    All errors surfaced by a SOCKS request lifecycle inherit
    from this class."""

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message or 'Reason unknown')


class SocksConnectionError(SocksProtocolException):
    """Transport error on the client connection."""
    pass


class HandshakeAlreadyCompleted(SocksProtocolException):
    """Raised when accept or reject is attempted on a request
    whose handshake has already completed."""
    pass


class UnsupportedCommand(SocksProtocolException):
    pass


class UpstreamConnectionFailed(SocksProtocolException):
    """Exception raised when unable to establish connection to
    the host requested by a CONNECT command."""

    def __init__(self, host: str, port: int, reason: str, **kwargs: Any):
        self.host: str = host
        self.port: int = port
        self.reason: str = reason
        super().__init__(
            '%s %s:%d %s' % (self.__class__.__name__, host, port, reason),
            **kwargs,
        )
