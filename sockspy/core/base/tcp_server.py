# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import asyncio
import logging
import selectors
from abc import abstractmethod
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from ...core.work import Work
from ...common.flag import flags
from ...common.types import Readables, Writables, SelectableEvents
from ...core.connection import TcpClientConnection
from ...common.constants import (
    DEFAULT_MAX_SEND_SIZE, DEFAULT_CLIENT_RECVBUF_SIZE,
    DEFAULT_SERVER_RECVBUF_SIZE, DEFAULT_SELECTOR_SELECT_TIMEOUT,
)


logger = logging.getLogger(__name__)


flags.add_argument(
    '--client-recvbuf-size',
    type=int,
    default=DEFAULT_CLIENT_RECVBUF_SIZE,
    help='Default: ' + str(int(DEFAULT_CLIENT_RECVBUF_SIZE / 1024)) +
    ' KB. Maximum amount of data received from the '
    'client in a single recv() operation.',
)

flags.add_argument(
    '--server-recvbuf-size',
    type=int,
    default=DEFAULT_SERVER_RECVBUF_SIZE,
    help='Default: ' + str(int(DEFAULT_SERVER_RECVBUF_SIZE / 1024)) +
    ' KB. Maximum amount of data received from the '
    'server in a single recv() operation.',
)

flags.add_argument(
    '--max-sendbuf-size',
    type=int,
    default=DEFAULT_MAX_SEND_SIZE,
    help='Default: ' + str(int(DEFAULT_MAX_SEND_SIZE / 1024)) +
    ' KB. Maximum amount of data to dispatch in a single send() operation.',
)


T = TypeVar('T', bound=TcpClientConnection)


class BaseTcpServerHandler(Work[T]):
    """BaseTcpServerHandler implements Work interface.

    An instance of BaseTcpServerHandler is created for each client
    connection.  BaseTcpServerHandler ensures that server is always
    ready to accept new data from the client.  It also ensures, client
    is ready to accept new data before flushing data to it.

    Most importantly, BaseTcpServerHandler ensures that pending buffers
    to the client are flushed before connection is closed.  This also
    holds when client connection was ended via ``end()``.

    Callbacks scheduled with :meth:`call_soon` are executed at the
    beginning of next loop iteration, never within the call that
    scheduled them.

    Implementations must provide::

       a. handle_data(data: memoryview) implementation
       b. Optionally, also implement other Work method
          e.g. initialize, is_inactive, shutdown
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.must_flush_before_shutdown = False
        # Set once client has half-closed its side of the connection
        self.client_eof = False
        self.selector: Optional[selectors.DefaultSelector] = selectors.DefaultSelector()
        self._deferred: List[Callable[[], None]] = []
        logger.debug(
            'Work#%d accepted from %s',
            self.work.connection.fileno(),
            self.work.address,
        )

    def initialize(self) -> None:
        """Sets ``conn`` in non-blocking mode."""
        self.work.connection.setblocking(False)
        logger.debug('Handling connection %s' % self.work.address)

    def shutdown(self) -> None:
        try:
            # Flush pending buffer before closing the connection
            if self.selector and self.work.has_buffer():
                self._flush()
            logger.debug(
                'Closing client connection %s has buffer %s' %
                (self.work.address, self.work.has_buffer()),
            )
            self.work.connection.shutdown(socket.SHUT_WR)
        except OSError:
            pass
        finally:
            self.work.close()
            logger.debug('Client connection closed')
            super().shutdown()

    def handle_eof(self) -> bool:
        """Called when client has closed its writing side.  Return
        False to keep serving the half-closed client."""
        return True

    @abstractmethod
    def handle_data(self, data: memoryview) -> Optional[bool]:
        """Optionally return True to close client connection."""
        pass    # pragma: no cover

    def call_soon(self, callback: Callable[[], None]) -> None:
        """Schedule callback for the next loop iteration."""
        self._deferred.append(callback)

    def run_deferred(self) -> None:
        """Runs callbacks scheduled before this call.  Callbacks
        scheduled by these callbacks wait for the next iteration."""
        deferred, self._deferred = self._deferred, []
        for callback in deferred:
            callback()

    async def get_events(self) -> SelectableEvents:
        events = {}
        # We always want to read from client
        # Register for EVENT_READ events
        if self.must_flush_before_shutdown is False and not self.client_eof:
            events[self.work.connection.fileno()] = selectors.EVENT_READ
        # If there is pending buffer for client
        # also register for EVENT_WRITE events
        if self.work.has_buffer():
            if self.work.connection.fileno() in events:
                events[self.work.connection.fileno()] |= selectors.EVENT_WRITE
            else:
                events[self.work.connection.fileno()] = selectors.EVENT_WRITE
        return events

    async def handle_events(
            self,
            readables: Readables,
            writables: Writables,
    ) -> bool:
        """Return True to shutdown work."""
        teardown = await self.handle_writables(
            writables,
        ) or await self.handle_readables(readables)
        if not teardown:
            teardown = self._client_ended()
        if teardown:
            logger.debug(
                'Shutting down client {0} connection'.format(
                    self.work.address,
                ),
            )
        return teardown

    async def handle_writables(self, writables: Writables) -> bool:
        teardown = False
        if self.work.connection.fileno() in writables and self.work.has_buffer():
            logger.debug(
                'Flushing buffer to client {0}'.format(self.work.address),
            )
            self.work.flush(self.flags.max_sendbuf_size)
            if self.must_flush_before_shutdown is True and \
                    not self.work.has_buffer():
                teardown = True
                self.must_flush_before_shutdown = False
        return teardown

    async def handle_readables(self, readables: Readables) -> bool:
        teardown = False
        if self.work.connection.fileno() in readables:
            data = self.work.recv(self.flags.client_recvbuf_size)
            if data is None:
                logger.debug(
                    'Connection closed by client {0}'.format(
                        self.work.address,
                    ),
                )
                self.client_eof = True
                teardown = self.handle_eof()
            else:
                r = self.handle_data(data)
                if isinstance(r, bool) and r is True:
                    logger.debug(
                        'Implementation signaled shutdown for client {0}'.format(
                            self.work.address,
                        ),
                    )
                    if self.work.has_buffer():
                        logger.debug(
                            'Client {0} has pending buffer, will be flushed before shutting down'.format(
                                self.work.address,
                            ),
                        )
                        self.must_flush_before_shutdown = True
                    else:
                        teardown = True
        return teardown

    def _client_ended(self) -> bool:
        """Returns True when an ended client has nothing left to flush."""
        if not self.work.ending or self.must_flush_before_shutdown:
            return False
        if self.work.has_buffer():
            self.must_flush_before_shutdown = True
            return False
        return True

    ##
    # run() and _run_once() drive the work within its own thread.
    ##

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            self.initialize()
            while True:
                self.run_deferred()
                if self.is_inactive():
                    logger.debug(
                        'Client {0} inactive, tearing down...'.format(
                            self.work.address,
                        ),
                    )
                    break
                if loop.run_until_complete(self._run_once()):
                    break
        except KeyboardInterrupt:  # pragma: no cover
            pass
        except Exception as e:
            logger.exception(
                'Exception while handling connection %r' %
                self.work.connection, exc_info=e,
            )
        finally:
            # Pending notifications must reach listeners before close
            try:
                self.run_deferred()
            except Exception as e:
                logger.exception(
                    'Exception while running deferred callbacks', exc_info=e,
                )
            self.shutdown()
            if self.selector:
                self.selector.close()
            loop.close()

    async def _run_once(self) -> bool:
        events, readables, writables = await self._selected_events()
        try:
            return await self.handle_events(readables, writables)
        finally:
            assert self.selector
            for fd in events:
                self.selector.unregister(fd)

    async def _selected_events(self) -> Tuple[SelectableEvents, Readables, Writables]:
        assert self.selector
        events = await self.get_events()
        for fd in events:
            self.selector.register(fd, events[fd])
        ev = self.selector.select(timeout=DEFAULT_SELECTOR_SELECT_TIMEOUT)
        readables = []
        writables = []
        for key, mask in ev:
            if mask & selectors.EVENT_READ:
                readables.append(key.fd)
            if mask & selectors.EVENT_WRITE:
                writables.append(key.fd)
        return (events, readables, writables)

    def _flush(self) -> None:
        assert self.selector
        logger.debug('Flushing pending data')
        try:
            self.selector.register(
                self.work.connection,
                selectors.EVENT_WRITE,
            )
            while self.work.has_buffer():
                logger.debug('Waiting for client write ready')
                ev: List[
                    Tuple[selectors.SelectorKey, int]
                ] = self.selector.select(timeout=DEFAULT_SELECTOR_SELECT_TIMEOUT)
                if len(ev) == 0:
                    continue
                self.work.flush(self.flags.max_sendbuf_size)
        except BrokenPipeError:
            pass
        finally:
            self.selector.unregister(self.work.connection)
