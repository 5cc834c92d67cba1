# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import threading
import unittest

from typing import Any, Optional, Tuple

from sockspy import Proxy
from sockspy.socks import (
    Socks4Packet, socks4Operations, socks4ReplyCodes, build_socks4_reply,
)
from sockspy.common.utils import get_available_port

GRANTED = build_socks4_reply(socks4ReplyCodes.GRANTED)
REJECTED = build_socks4_reply(socks4ReplyCodes.REJECTED)


def socks4_request(command: int, addr: Tuple[str, int]) -> bytes:
    pkt = Socks4Packet()
    pkt.cd = command
    pkt.dstport = addr[1]
    pkt.dstip = socket.inet_aton(addr[0])
    pkt.userid = b'sockspy'
    return pkt.pack()


def recv_exactly(conn: socket.socket, size: int) -> bytes:
    data = b''
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


class EchoServer(threading.Thread):
    """Echoes back whatever a single client sends."""

    def __init__(self) -> None:
        super().__init__()
        self.daemon = True
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.listen(1)
        self.sock.settimeout(5)
        self.port: int = self.sock.getsockname()[1]

    def run(self) -> None:
        conn: Optional[socket.socket] = None
        try:
            conn, _ = self.sock.accept()
            while True:
                data = conn.recv(1024)
                if not data:
                    break
                conn.sendall(data)
        except OSError:
            pass
        finally:
            if conn:
                conn.close()
            self.sock.close()


class SinkServer(threading.Thread):
    """Reads until client closes its side, then closes."""

    def __init__(self) -> None:
        super().__init__()
        self.daemon = True
        self.received = b''
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.listen(1)
        self.sock.settimeout(5)
        self.port: int = self.sock.getsockname()[1]

    def run(self) -> None:
        conn: Optional[socket.socket] = None
        try:
            conn, _ = self.sock.accept()
            conn.settimeout(5)
            while True:
                data = conn.recv(1024)
                if not data:
                    break
                self.received += data
        except OSError:
            pass
        finally:
            if conn:
                conn.close()
            self.sock.close()


class TestSocksProxy(unittest.TestCase):

    def setUp(self) -> None:
        self.proxy = Proxy(hostname='127.0.0.1', port=0)
        self.proxy.setup()
        self.client = socket.create_connection(('127.0.0.1', self.proxy.flags.port))
        self.client.settimeout(5)

    def tearDown(self) -> None:
        self.client.close()
        self.proxy.shutdown()

    def test_connect_tunnels_data(self) -> None:
        echo = EchoServer()
        echo.start()
        self.client.sendall(
            socks4_request(socks4Operations.CONNECT, ('127.0.0.1', echo.port)),
        )
        self.assertEqual(recv_exactly(self.client, 8), GRANTED)
        self.client.sendall(b'hello sockspy')
        self.assertEqual(recv_exactly(self.client, 13), b'hello sockspy')
        self.client.close()
        echo.join(timeout=5)

    def test_half_closed_client_data_reaches_upstream(self) -> None:
        sink = SinkServer()
        sink.start()
        self.client.sendall(
            socks4_request(socks4Operations.CONNECT, ('127.0.0.1', sink.port)),
        )
        self.assertEqual(recv_exactly(self.client, 8), GRANTED)
        self.client.sendall(b'x' * 1000)
        self.client.shutdown(socket.SHUT_WR)
        sink.join(timeout=5)
        self.assertEqual(sink.received, b'x' * 1000)
        # Tunnel closes once upstream is done
        self.assertEqual(self.client.recv(1), b'')

    def test_data_sent_ahead_of_reply_reaches_upstream(self) -> None:
        sink = SinkServer()
        sink.start()
        self.client.sendall(
            socks4_request(socks4Operations.CONNECT, ('127.0.0.1', sink.port)) +
            b'x' * 1000,
        )
        self.client.shutdown(socket.SHUT_WR)
        sink.join(timeout=5)
        self.assertEqual(sink.received, b'x' * 1000)
        self.assertEqual(recv_exactly(self.client, 8), GRANTED)
        self.assertEqual(self.client.recv(1), b'')

    def test_connect_refused(self) -> None:
        self.client.sendall(
            socks4_request(
                socks4Operations.CONNECT,
                ('127.0.0.1', get_available_port()),
            ),
        )
        self.assertEqual(recv_exactly(self.client, 8), REJECTED)
        self.assertEqual(self.client.recv(1), b'')

    def test_bind_is_rejected(self) -> None:
        self.client.sendall(
            socks4_request(socks4Operations.BIND, ('127.0.0.1', 8080)),
        )
        self.assertEqual(recv_exactly(self.client, 8), REJECTED)
        self.assertEqual(self.client.recv(1), b'')

    def test_invalid_request_closed_without_reply(self) -> None:
        self.client.sendall(b'\x04\x09\x00\x50\x7f\x00\x00\x01\x00')
        self.assertEqual(self.client.recv(8), b'')

    def test_subscriber_rejects(self) -> None:
        def on_request(request: Any, coordinator: Any) -> None:
            request.reject(socks4ReplyCodes.REJECTED_USERID_MISMATCH)

        self.proxy.dispatcher.subscribe(on_request)
        self.client.sendall(
            socks4_request(socks4Operations.CONNECT, ('127.0.0.1', 8080)),
        )
        self.assertEqual(
            recv_exactly(self.client, 8),
            build_socks4_reply(socks4ReplyCodes.REJECTED_USERID_MISMATCH),
        )
