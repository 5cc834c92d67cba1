# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import os
import socket
import logging
import argparse
import selectors

from typing import Optional

from .client import SocksClientConnection
from .request import SocksRequest, requestEvents
from .exception import SocksProtocolException, UpstreamConnectionFailed
from .operations import socks4Operations
from ..core.connection import TcpServerConnection
from ..common.types import Deferrer, Readables, Writables, SelectableEvents
from ..metrics import UPSTREAM_CONNECT_FAILURES

logger = logging.getLogger(__name__)


class ProxyCoordinator:
    """Executes the command of a valid request.

    For CONNECT, a non-blocking connection is started towards the
    requested host.  Once established, request is accepted (unless
    already accepted) and, in direct mode, data is tunneled between
    client and upstream without inspection.  BIND is rejected.

    Coordinator owns the upstream connection.  Owning work must fold
    :meth:`get_events` and :meth:`handle_events` into its event loop
    and call :meth:`shutdown` when done.
    """

    def __init__(
            self,
            flags: argparse.Namespace,
            client: SocksClientConnection,
            defer: Deferrer,
    ) -> None:
        self.flags = flags
        self.client = client
        self.defer = defer
        self.request: Optional[SocksRequest] = None
        self.upstream: Optional[TcpServerConnection] = None
        self.direct: bool = True
        self.piping: bool = False

    def proxy_request(
            self,
            request: SocksRequest,
            direct: bool = True,
    ) -> Optional[TcpServerConnection]:
        """Returns upstream connection for CONNECT requests.

        When ``direct`` is False, data is not tunneled.  Instead client
        data is emitted as DATA and upstream data as UPSTREAM_DATA events
        on the request.  Use ``request.client.queue`` and ``upstream.queue``
        to satisfy the request."""
        self.request = request
        self.direct = direct
        if request.command == socks4Operations.CONNECT:
            return self._connect()
        if request.command == socks4Operations.BIND:
            logger.info(
                '%s - BIND not implemented, rejecting' % self.client.address,
            )
            request.reject()
            return None
        raise SocksProtocolException(
            'Cannot proxy request with command %r' % request.command,
        )

    def end_upstream(self) -> None:
        """Half-closes upstream once pending client data is flushed."""
        assert self.upstream
        self.upstream.end()

    def shutdown(self) -> None:
        if self.upstream:
            logger.debug(
                'Connection closed with upstream {0}:{1}'.format(
                    *self.upstream.addr,
                ),
            )
            self.upstream.close()

    async def get_events(self) -> SelectableEvents:
        events: SelectableEvents = {}
        if self.upstream is None or self.upstream.closed:
            return events
        fileno = self.upstream.connection.fileno()
        # Connection is established once upstream becomes writable
        if self.upstream.connecting:
            events[fileno] = selectors.EVENT_WRITE
            return events
        events[fileno] = selectors.EVENT_READ
        if self.upstream.has_buffer():
            events[fileno] |= selectors.EVENT_WRITE
        return events

    async def handle_events(
            self,
            readables: Readables,
            writables: Writables,
    ) -> bool:
        """Return True to shutdown work."""
        if self.upstream is None or self.upstream.closed:
            return False
        fileno = self.upstream.connection.fileno()
        if self.upstream.connecting:
            if fileno in writables:
                err = self.upstream.finish_connect()
                if err == 0:
                    self._connected()
                else:
                    self._connect_failed(os.strerror(err))
            return False
        # Errors from upstream are expected once tunnel is established,
        # they simply end the tunnel.
        if fileno in writables and self.upstream.has_buffer():
            try:
                self.upstream.flush(self.flags.max_sendbuf_size)
            except OSError as e:
                logger.debug('Error when flushing to upstream %r' % e)
                return True
        if self.upstream.ending and not self.upstream.has_buffer():
            try:
                self.upstream.connection.shutdown(socket.SHUT_WR)
            except OSError as e:
                logger.debug('Error when half-closing upstream %r' % e)
                return True
            self.upstream.ending = False
            logger.debug('Client data flushed, upstream half-closed')
        if fileno in readables:
            try:
                data = self.upstream.recv(self.flags.server_recvbuf_size)
            except OSError as e:
                logger.debug('Error when receiving from upstream %r' % e)
                return True
            if data is None:
                logger.debug('Connection closed by upstream')
                return True
            if self.piping:
                self.client.queue(data)
            else:
                assert self.request
                self.request.emit(requestEvents.UPSTREAM_DATA, data)
        return False

    def _connect(self) -> Optional[TcpServerConnection]:
        assert self.request
        if self.upstream is not None:
            return self.upstream
        self.upstream = TcpServerConnection(self.request.host, self.request.port)
        try:
            self.upstream.connect()
        except OSError as e:
            self._connect_failed(str(e))
            return None
        logger.debug(
            'Connecting to upstream {0}:{1}'.format(*self.upstream.addr),
        )
        return self.upstream

    def _connected(self) -> None:
        assert self.request and self.upstream
        logger.info(
            '%s - CONNECT %s:%d' %
            (self.client.address, self.request.host, self.request.port),
        )
        if not self.request.handshake_complete:
            self.request.accept(self.upstream)
        if self.direct:
            self.piping = True

    def _connect_failed(self, reason: str) -> None:
        assert self.request
        request = self.request
        UPSTREAM_CONNECT_FAILURES.inc()
        logger.info(
            '%s - CONNECT %s:%d failed, %s' %
            (self.client.address, request.host, request.port, reason),
        )
        if self.upstream is not None:
            self.upstream.close()
            self.upstream = None
        if not request.handshake_complete:
            request.reject()
        else:
            self.client.end()
        exc = UpstreamConnectionFailed(request.host, request.port, reason)
        self.defer(lambda: request.emit_error(exc))
