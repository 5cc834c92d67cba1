# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from ..core.connection import TcpClientConnection
from ..metrics import REPLIES
from .packet import build_socks4_reply


class SocksClientConnection(TcpClientConnection):
    """A buffered SOCKS client connection object."""

    def reply(self, status: int, end: bool = False) -> None:
        """Queues a reply packet with given status.  With ``end``,
        connection is closed once reply has been flushed."""
        pkt = memoryview(build_socks4_reply(status))
        REPLIES.labels(status='%#x' % status).inc()
        if end:
            self.end(pkt)
        else:
            self.queue(pkt)
