# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import ipaddress
from typing import Dict, List, Tuple, Union, Callable


Selectable = int
Selectables = List[Selectable]
SelectableEvents = Dict[Selectable, int]    # Values are event masks
Readables = Selectables
Writables = Selectables
IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
HostPort = Tuple[str, int]
TcpSocket = socket.socket
# Schedules a callback for the next iteration of a work loop
Deferrer = Callable[[Callable[[], None]], None]
