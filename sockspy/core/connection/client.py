# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import time
from typing import Optional

from .types import tcpConnectionTypes
from .connection import TcpConnection, TcpConnectionUninitializedException
from ...common.types import HostPort, TcpSocket


class TcpClientConnection(TcpConnection):
    """A buffered client connection object."""

    def __init__(
        self,
        conn: TcpSocket,
        addr: Optional[HostPort] = None,
    ) -> None:
        super().__init__(tcpConnectionTypes.CLIENT)
        self._conn: Optional[TcpSocket] = conn
        self.addr: Optional[HostPort] = addr
        # Absolute time after which connection is considered timed out
        self.deadline: Optional[float] = None

    @property
    def address(self) -> str:
        return 'unknown' if not self.addr else '{0}:{1}'.format(self.addr[0], self.addr[1])

    @property
    def connection(self) -> TcpSocket:
        if self._conn is None:
            raise TcpConnectionUninitializedException()
        return self._conn

    def set_timeout(self, timeout: Optional[float]) -> None:
        """Arm (or with None, disarm) connection timeout."""
        self.deadline = None if timeout is None else time.time() + timeout

    def is_timed_out(self) -> bool:
        return self.deadline is not None and time.time() > self.deadline
