# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging

from typing import Any, NamedTuple, Optional

from .codes import socks4ReplyCodes, DEFAULT_REJECT_CODE
from .client import SocksClientConnection
from .packet import Buffer, extract_command, extract_port, extract_host, extract_user_id
from .exception import (
    SocksProtocolException, SocksConnectionError,
    HandshakeAlreadyCompleted, UnsupportedCommand,
)
from .operations import SOCKS4_VERSION, socks4Operations
from ..core.event import EventEmitter
from ..common.types import Deferrer
from ..common.constants import DEFAULT_HANDSHAKE_TIMEOUT

logger = logging.getLogger(__name__)


RequestEvents = NamedTuple(
    'RequestEvents', [
        ('ERROR', int),
        ('END', int),
        ('DATA', int),
        ('UPSTREAM_DATA', int),
    ],
)
requestEvents = RequestEvents(1, 2, 3, 4)

HandshakeStates = NamedTuple(
    'HandshakeStates', [
        ('PENDING', int),
        ('COMPLETED', int),
    ],
)
handshakeStates = HandshakeStates(1, 2)


class SocksRequest(EventEmitter):
    """Represents the SOCKS request received over a client connection.

    Abstracts the logic of validating a request and then either
    accepting or rejecting it.  Exactly one of accept or reject
    results in a reply.  Once the handshake has completed, further
    attempts are usage errors, reported as ``requestEvents.ERROR``
    through ``defer`` along with closing of the client connection.

    Emits:

       ERROR  - SocksProtocolException
       END    - Client connection has closed, all listeners are removed
       DATA   - Client data, only when request isn't being tunneled directly
       UPSTREAM_DATA - Upstream data, only when request isn't being tunneled directly
    """

    def __init__(
            self,
            raw: Buffer,
            client: SocksClientConnection,
            defer: Deferrer,
            timeout: float = DEFAULT_HANDSHAKE_TIMEOUT,
    ) -> None:
        super().__init__()
        self.client = client
        self.defer = defer
        self.version: Optional[int] = raw[0] if len(raw) > 0 else None
        self.command: Optional[int] = None
        self.port: int = 0
        self.host: str = ''
        self.user_id: str = ''
        self.valid: bool = False
        self._state: int = handshakeStates.PENDING
        # Only version 4 is supported.  For other versions,
        # client connection is left open for the caller to decide.
        if self.version == SOCKS4_VERSION:
            self.command = extract_command(raw)
            self.port = extract_port(raw)
            self.host = extract_host(raw)
            self.user_id = extract_user_id(raw)
            self.valid = self.command is not None and \
                self.port != 0 and \
                self.host != ''
        if self.valid:
            self.client.set_timeout(timeout)

    @property
    def state(self) -> int:
        return self._state

    @property
    def handshake_complete(self) -> bool:
        return self._state == handshakeStates.COMPLETED

    def accept(self, remote: Optional[Any] = None) -> None:
        """Accept the request and send the reply to the client.

        After reply, client is ready and expects data from the remote host.
        ``remote`` is the connection established with the remote host."""
        if not self._complete_handshake():
            self._usage_error(
                HandshakeAlreadyCompleted(
                    'Handshaking has already completed, cannot accept the request.',
                ),
            )
            return
        if self.version != SOCKS4_VERSION:
            self.client.end()
        elif self.command == socks4Operations.CONNECT:
            self.client.reply(socks4ReplyCodes.GRANTED)
        else:
            self._usage_error(
                UnsupportedCommand('SocksRequest does not support accepting bind commands.'),
            )

    def reject(self, reason: Optional[int] = None) -> None:
        """Reject the request, send the reply to the client and end the connection.

        When reason is not passed, :data:`DEFAULT_REJECT_CODE` is used."""
        if not self._complete_handshake():
            self._usage_error(
                HandshakeAlreadyCompleted(
                    'Handshaking has already completed, cannot reject the request.',
                ),
            )
            return
        if self.version == SOCKS4_VERSION:
            self.client.reply(reason or DEFAULT_REJECT_CODE, end=True)
        else:
            self.client.end()

    def emit_error(self, exc: SocksProtocolException) -> None:
        if not self.emit(requestEvents.ERROR, exc):
            logger.warning(
                'Unhandled error for request from %s: %r' %
                (self.client.address, exc),
            )

    def handle_error(self, err: OSError) -> None:
        """Surfaces client transport errors as request errors."""
        if not self.valid:
            return
        exc = SocksConnectionError(str(err))
        exc.__cause__ = err
        self.emit_error(exc)

    def handle_close(self) -> None:
        if not self.valid:
            return
        self.emit(requestEvents.END)
        self.remove_all_listeners()

    def _complete_handshake(self) -> bool:
        """PENDING -> COMPLETED.  Returns False if already COMPLETED."""
        if self._state == handshakeStates.COMPLETED:
            return False
        self._state = handshakeStates.COMPLETED
        return True

    def _usage_error(self, exc: SocksProtocolException) -> None:
        def report() -> None:
            self.client.end()
            self.emit_error(exc)
        self.defer(report)
