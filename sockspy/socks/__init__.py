# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .packet import (
    Socks4Packet, build_socks4_reply, extract_command,
    extract_port, extract_host, extract_user_id, extract_request_length,
    is_socks4a,
)
from .operations import SOCKS4_VERSION, Socks4Operations, socks4Operations, command_name
from .codes import Socks4ReplyCodes, socks4ReplyCodes, DEFAULT_REJECT_CODE
from .exception import (
    SocksProtocolException, SocksConnectionError, HandshakeAlreadyCompleted,
    UnsupportedCommand, UpstreamConnectionFailed,
)
from .client import SocksClientConnection
from .request import SocksRequest, requestEvents, handshakeStates
from .dispatcher import SocksRequestDispatcher
from .coordinator import ProxyCoordinator
from .handler import SocksProtocolHandler

__all__ = [
    'Socks4Packet',
    'build_socks4_reply',
    'extract_command',
    'extract_port',
    'extract_host',
    'extract_user_id',
    'extract_request_length',
    'is_socks4a',
    'SOCKS4_VERSION',
    'Socks4Operations',
    'socks4Operations',
    'command_name',
    'Socks4ReplyCodes',
    'socks4ReplyCodes',
    'DEFAULT_REJECT_CODE',
    'SocksProtocolException',
    'SocksConnectionError',
    'HandshakeAlreadyCompleted',
    'UnsupportedCommand',
    'UpstreamConnectionFailed',
    'SocksClientConnection',
    'SocksRequest',
    'requestEvents',
    'handshakeStates',
    'SocksRequestDispatcher',
    'ProxyCoordinator',
    'SocksProtocolHandler',
]
