# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
from typing import Optional

from .types import tcpConnectionTypes
from .connection import TcpConnection, TcpConnectionUninitializedException
from ...common.types import HostPort, TcpSocket
from ...common.utils import new_socket_connection, get_socket_error

logger = logging.getLogger(__name__)


class TcpServerConnection(TcpConnection):
    """A buffered server connection object.

    Connection is established in non-blocking fashion.  Until
    :meth:`finish_connect` has been called, :attr:`connecting` is True
    and the socket must only be watched for write readiness."""

    def __init__(self, host: str, port: int) -> None:
        super().__init__(tcpConnectionTypes.SERVER)
        self._conn: Optional[TcpSocket] = None
        self.addr: HostPort = (host, port)
        self.closed = True
        self.connecting = False

    @property
    def connection(self) -> TcpSocket:
        if self._conn is None:
            raise TcpConnectionUninitializedException()
        return self._conn

    def connect(
            self,
            addr: Optional[HostPort] = None,
            source_address: Optional[HostPort] = None,
    ) -> None:
        if self._conn is not None:
            return
        self._conn = new_socket_connection(
            addr or self.addr, source_address=source_address,
        )
        self.closed = False
        self.connecting = True

    def finish_connect(self) -> int:
        """Returns 0 when connection was established, otherwise the errno."""
        err = get_socket_error(self.connection)
        if err == 0:
            self.connecting = False
            logger.debug('Connection established with upstream %s:%d' % self.addr)
        return err
