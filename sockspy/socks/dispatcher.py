# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging

from typing import TYPE_CHECKING, Callable, Optional

from .operations import command_name
from ..core.event import EventEmitter

if TYPE_CHECKING:   # pragma: no cover
    from .request import SocksRequest
    from .coordinator import ProxyCoordinator

logger = logging.getLogger(__name__)

RequestCallback = Callable[['SocksRequest', 'ProxyCoordinator'], None]

# Channel receiving every request, regardless of command
GENERIC_CHANNEL = 'request'


class SocksRequestDispatcher:
    """Decides whether a valid request is handed over to application
    callbacks or proxied automatically.

    Callbacks can subscribe to a specific command or, by omitting the
    command, to every request.  When a request arrives and there is at
    least one subscriber for its command or for every request, generic
    subscribers are notified first, then command subscribers.  Notified
    callbacks own the request from then on, they must accept, reject or
    proxy it using the coordinator they receive.

    Without any matching subscriber, request is proxied automatically.
    """

    def __init__(self) -> None:
        self._emitter = EventEmitter()

    @staticmethod
    def channel(command: Optional[int]) -> str:
        return GENERIC_CHANNEL if command is None else command_name(command)

    def subscribe(self, callback: RequestCallback, command: Optional[int] = None) -> None:
        self._emitter.on(self.channel(command), callback)

    def unsubscribe(self, callback: RequestCallback, command: Optional[int] = None) -> None:
        self._emitter.off(self.channel(command), callback)

    def has_subscribers(self, command: Optional[int]) -> bool:
        return self._emitter.listener_count(GENERIC_CHANNEL) > 0 or \
            (command is not None and self._emitter.listener_count(self.channel(command)) > 0)

    def dispatch(
            self,
            request: 'SocksRequest',
            coordinator: 'ProxyCoordinator',
    ) -> bool:
        """Returns True if request was handed over to subscribers."""
        if not self.has_subscribers(request.command):
            return False
        logger.debug(
            'Dispatching %s request from %s to subscribers' %
            (self.channel(request.command), request.client.address),
        )
        self._emitter.emit(GENERIC_CHANNEL, request, coordinator)
        self._emitter.emit(self.channel(request.command), request, coordinator)
        return True
