# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import errno
import logging

from typing import Any, Optional

from .client import SocksClientConnection
from .packet import extract_request_length
from .request import SocksRequest, requestEvents
from .dispatcher import SocksRequestDispatcher
from .coordinator import ProxyCoordinator
from .operations import command_name
from ..core.base import BaseTcpServerHandler
from ..common.flag import flags
from ..common.types import Readables, Writables, SelectableEvents
from ..common.constants import DEFAULT_HANDSHAKE_TIMEOUT
from ..metrics import REQUESTS, INVALID_REQUESTS

logger = logging.getLogger(__name__)


flags.add_argument(
    '--handshake-timeout',
    type=float,
    default=DEFAULT_HANDSHAKE_TIMEOUT,
    help='Default: ' + str(DEFAULT_HANDSHAKE_TIMEOUT) +
    '.  Number of seconds after which a client that has not '
    'completed the handshake is disconnected.',
)


class SocksProtocolHandler(BaseTcpServerHandler[SocksClientConnection]):
    """SOCKS4 and SOCKS4a protocol handler.

    First chunk received from the client is parsed as the request.
    Invalid requests are dropped without a reply.  Valid requests are
    offered to dispatcher subscribers and, when nobody is subscribed,
    proxied directly.

    Reference:
       https://www.openssh.com/txt/socks4.protocol
       https://www.openssh.com/txt/socks4a.protocol
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.request: Optional[SocksRequest] = None
        self.dispatcher: SocksRequestDispatcher = \
            getattr(self.flags, 'dispatcher', None) or SocksRequestDispatcher()
        self.coordinator = ProxyCoordinator(
            self.flags, self.work, self.call_soon,
        )

    @staticmethod
    def create(*args: Any, **kwargs: Any) -> SocksClientConnection:
        return SocksClientConnection(*args, **kwargs)

    def initialize(self) -> None:
        super().initialize()
        self.work.set_timeout(self.flags.handshake_timeout)

    def is_inactive(self) -> bool:
        if self.request is not None and self.request.handshake_complete:
            return False
        return self.work.is_timed_out()

    def shutdown(self) -> None:
        try:
            self.coordinator.shutdown()
            super().shutdown()
        finally:
            if self.request is not None:
                self.request.handle_close()

    async def get_events(self) -> SelectableEvents:
        events = await super().get_events()
        events.update(await self.coordinator.get_events())
        return events

    async def handle_events(
            self,
            readables: Readables,
            writables: Writables,
    ) -> bool:
        teardown = await super().handle_events(readables, writables)
        if teardown:
            return True
        return await self.coordinator.handle_events(readables, writables)

    async def handle_writables(self, writables: Writables) -> bool:
        try:
            return await super().handle_writables(writables)
        except OSError as e:
            self._client_error(e)
            return True

    async def handle_readables(self, readables: Readables) -> bool:
        try:
            return await super().handle_readables(readables)
        except OSError as e:
            self._client_error(e)
            return True

    def handle_eof(self) -> bool:
        upstream = self.coordinator.upstream
        if self.request is None or not self.coordinator.direct or \
                upstream is None or upstream.closed:
            return True
        # Tunnel stays open until upstream closes its side
        self.coordinator.end_upstream()
        return False

    def handle_data(self, data: memoryview) -> Optional[bool]:
        if self.request is None:
            return self._handle_request(data)
        upstream = self.coordinator.upstream
        if self.coordinator.direct and upstream is not None:
            upstream.queue(data)
        else:
            self.request.emit(requestEvents.DATA, data)
        return None

    def _handle_request(self, data: memoryview) -> Optional[bool]:
        length = extract_request_length(data)
        self.request = SocksRequest(
            data[:length], self.work, self.call_soon,
            timeout=self.flags.handshake_timeout,
        )
        if not self.request.valid:
            INVALID_REQUESTS.inc()
            logger.warning(
                'Invalid request from %s, closing connection' %
                self.work.address,
            )
            return True
        REQUESTS.labels(command=command_name(self.request.command)).inc()
        logger.debug(
            'Request from %s for %s:%d' %
            (self.work.address, self.request.host, self.request.port),
        )
        if not self.dispatcher.dispatch(self.request, self.coordinator):
            self.coordinator.proxy_request(self.request)
        # Client data sent along with the request
        if len(data) > length and not self.work.ending:
            self.handle_data(data[length:])
        return None

    def _client_error(self, e: OSError) -> None:
        if e.errno in (errno.ECONNRESET, errno.EPIPE):
            logger.debug('%r' % e)
        else:
            logger.warning(
                'Exception while handling client %s with reason %r' %
                (self.work.address, e),
            )
        if self.request is not None:
            self.request.handle_error(e)
