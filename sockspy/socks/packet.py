# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import struct

from typing import Optional, Tuple, Union

from .operations import SOCKS4_VERSION, socks4Operations
from ..common.utils import text_
from ..common.constants import NULL


Buffer = Union[bytes, bytearray, memoryview]

# User id starts right after the fixed size header
USERID_OFFSET = 8
# Version field of a reply is always 0
REPLY_VERSION = 0
# Destination ip used by SOCKS4a clients, 0.0.0.x with x nonzero
SOCKS4A_DSTIP = socket.inet_aton('0.0.0.1')


def _terminator(raw: bytes, start: int) -> int:
    """Index of first NULL at or after start.  Buffer length
    is returned when segment is not NULL terminated."""
    index = raw.find(NULL, start)
    return len(raw) if index == -1 else index


def _segment(raw: bytes, start: int) -> Tuple[bytes, int]:
    """Returns NULL terminated segment starting at start and
    the offset right after its terminator."""
    end = _terminator(raw, start)
    return raw[start:end], end + 1


def extract_command(raw: Buffer) -> Optional[int]:
    """Returns command code, None unless it is CONNECT or BIND."""
    if len(raw) < 2:
        return None
    cd = raw[1]
    if cd in (socks4Operations.CONNECT, socks4Operations.BIND):
        return int(cd)
    return None


def extract_port(raw: Buffer) -> int:
    if len(raw) < 4:
        return 0
    return int(struct.unpack('!H', bytes(raw[2:4]))[0])


def is_socks4a(raw: Buffer) -> bool:
    """SOCKS4a requests carry 0.0.0.x (x nonzero) as destination ip."""
    if len(raw) < USERID_OFFSET:
        return False
    return raw[4] == 0 and raw[5] == 0 and raw[6] == 0 and raw[7] > 0


def extract_host(raw: Buffer) -> str:
    """Returns destination ip in dotted-quad notation, or for SOCKS4a
    requests, the domain name following the user id."""
    if len(raw) < USERID_OFFSET:
        return ''
    data = bytes(raw)
    if is_socks4a(data):
        _, start = _segment(data, USERID_OFFSET)
        domain, _ = _segment(data, start)
        return text_(domain, errors='replace')
    return socket.inet_ntoa(data[4:USERID_OFFSET])


def extract_user_id(raw: Buffer) -> str:
    userid, _ = _segment(bytes(raw), USERID_OFFSET)
    return text_(userid, errors='replace')


def extract_request_length(raw: Buffer) -> int:
    """Number of leading bytes taken by the request.  Remaining
    bytes were sent ahead of the reply and belong to the tunnel."""
    data = bytes(raw)
    if len(data) < USERID_OFFSET:
        return len(data)
    _, offset = _segment(data, USERID_OFFSET)
    if is_socks4a(data):
        _, offset = _segment(data, offset)
    return min(offset, len(data))


def build_socks4_reply(status: int) -> bytes:
    """Builds 8 byte reply packet.  Destination port and ip
    fields are not used and always zeroed."""
    return struct.pack('!BBH4s', REPLY_VERSION, status, 0, NULL * 4)


class Socks4Packet:
    """SOCKS4 and SOCKS4a request packet.

    parse() never raises, fields which couldn't be
    found within the raw packet are left as None.

    FIXME: Currently doesn't buffer during parsing and expects
    packet to arrive within a single socket receive event.
    """

    def __init__(self) -> None:
        # 1 byte, must be equal to 4
        self.vn: Optional[int] = None
        # 1 byte
        self.cd: Optional[int] = None
        # 2 bytes
        self.dstport: Optional[int] = None
        # 4 bytes
        self.dstip: Optional[bytes] = None
        # Variable bytes, NULL terminated
        self.userid: Optional[bytes] = None
        # SOCKS4a only, variable bytes, NULL terminated
        self.domain: Optional[bytes] = None

    @property
    def host(self) -> Optional[str]:
        if self.domain is not None:
            return text_(self.domain, errors='replace')
        if self.dstip is None or len(self.dstip) != 4:
            return None
        return socket.inet_ntoa(self.dstip)

    def parse(self, raw: Buffer) -> None:
        data = bytes(raw)
        if len(data) > 0:
            self.vn = data[0]
        if len(data) > 1:
            self.cd = data[1]
        if len(data) >= 4:
            self.dstport = extract_port(data)
        if len(data) < USERID_OFFSET:
            return
        self.dstip = data[4:USERID_OFFSET]
        self.userid, offset = _segment(data, USERID_OFFSET)
        if is_socks4a(data):
            self.domain, _ = _segment(data, offset)

    def pack(self) -> bytes:
        user_id = self.userid or b''
        dstip = SOCKS4A_DSTIP if self.domain is not None else self.dstip
        pkt = struct.pack(
            '!BBH4s%ds' % len(user_id),
            self.vn if self.vn is not None else SOCKS4_VERSION,
            self.cd, self.dstport, dstip,
            user_id,
        ) + NULL
        if self.domain is not None:
            pkt += self.domain + NULL
        return pkt
