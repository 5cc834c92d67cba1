# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import logging
import argparse
from typing import Any, Optional

from ...common.flag import flags
from ...common.constants import (
    DEFAULT_BACKLOG, DEFAULT_PORT, DEFAULT_PORT_FILE, DEFAULT_IPV4_HOSTNAME,
)


flags.add_argument(
    '--hostname',
    type=str,
    default=str(DEFAULT_IPV4_HOSTNAME),
    help='Default: 127.0.0.1. Server IP address.',
)

flags.add_argument(
    '--port',
    type=int,
    default=DEFAULT_PORT,
    help='Default: 1080.  Server port.  Use 0 for an ephemeral port.',
)

flags.add_argument(
    '--port-file',
    type=str,
    default=DEFAULT_PORT_FILE,
    help='Default: None. Save server port number. Useful when using --port=0 ephemeral mode.',
)

flags.add_argument(
    '--backlog',
    type=int,
    default=DEFAULT_BACKLOG,
    help='Default: 100. Maximum number of pending SOCKS client connections.',
)

logger = logging.getLogger(__name__)


class TcpSocketListener:
    """Non-blocking listening socket for SOCKS clients.

    Bound address is taken from ``--hostname`` and ``--port``.
    With ``--port 0`` the kernel picks a port, which is then
    available as :attr:`port` after :meth:`setup`.
    """

    def __init__(self, flags: argparse.Namespace) -> None:
        self.flags = flags
        self.port: Optional[int] = None
        self._socket: Optional[socket.socket] = None

    def __enter__(self) -> 'TcpSocketListener':
        self.setup()
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    @property
    def sock(self) -> Optional[socket.socket]:
        return self._socket

    def fileno(self) -> Optional[int]:
        if not self._socket:
            return None
        return self._socket.fileno()

    def setup(self) -> None:
        hostname = self.flags.hostname
        sock = socket.socket(
            socket.AF_INET6 if hostname.version == 6 else socket.AF_INET,
            socket.SOCK_STREAM,
        )
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.bind((str(hostname), self.flags.port))
        sock.listen(self.flags.backlog)
        sock.setblocking(False)
        self.port = sock.getsockname()[1]
        self._socket = sock
        logger.info('Listening on %s:%s' % (hostname, self.port))

    def shutdown(self) -> None:
        assert self._socket
        self._socket.close()
        self._socket = None
