# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import re
import socket
import unittest
import binascii

from sockspy.socks import (
    Socks4Packet, socks4Operations, socks4ReplyCodes, build_socks4_reply,
    extract_command, extract_port, extract_host, extract_user_id, is_socks4a,
    extract_request_length,
)


def unhexlify(raw: str) -> bytes:
    # See https://github.com/python/mypy/issues/1533
    # for type ignore rationale
    return binascii.unhexlify(re.sub(r'\s', '', raw))   # type: ignore


# Examples taken from https://en.wikipedia.org/wiki/SOCKS
CLIENT_CONNECT_REQ = unhexlify("04 01 00 50 42 66 07 63 46 72 65 64 00")
SERVER_CONNECT_OK = unhexlify("00 5A 00 00 00 00 00 00")

IPV4_CONNECT_REQ = bytes([4, 1, 0x00, 0x50, 93, 184, 216, 34, 0])
SOCKS4A_CONNECT_REQ = bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1, 0]) + b'ex.com\x00'


class TestSocks4Packet(unittest.TestCase):

    def test_pack(self) -> None:
        pkt = Socks4Packet()
        pkt.vn = 4
        pkt.cd = socks4Operations.CONNECT
        pkt.dstport = 80
        pkt.dstip = socket.inet_aton('66.102.7.99')
        pkt.userid = b'Fred'
        self.assertEqual(
            pkt.pack(),
            CLIENT_CONNECT_REQ,
        )

    def test_parse(self) -> None:
        wiki = memoryview(CLIENT_CONNECT_REQ)
        pkt = Socks4Packet()
        pkt.parse(wiki)
        self.assertEqual(pkt.vn, 4)
        self.assertEqual(pkt.cd, socks4Operations.CONNECT)
        self.assertEqual(pkt.dstport, 80)
        assert pkt.dstip
        self.assertEqual(socket.inet_ntoa(pkt.dstip), '66.102.7.99')
        self.assertEqual(pkt.userid, b'Fred')
        self.assertEqual(pkt.domain, None)
        self.assertEqual(pkt.host, '66.102.7.99')

    def test_pack_socks4a(self) -> None:
        pkt = Socks4Packet()
        pkt.cd = socks4Operations.CONNECT
        pkt.dstport = 80
        pkt.domain = b'ex.com'
        self.assertEqual(pkt.pack(), SOCKS4A_CONNECT_REQ)

    def test_parse_socks4a(self) -> None:
        pkt = Socks4Packet()
        pkt.parse(SOCKS4A_CONNECT_REQ)
        self.assertEqual(pkt.userid, b'')
        self.assertEqual(pkt.domain, b'ex.com')
        self.assertEqual(pkt.host, 'ex.com')

    def test_parse_never_raises_on_short_packets(self) -> None:
        pkt = Socks4Packet()
        pkt.parse(b'\x04')
        self.assertEqual(pkt.vn, 4)
        self.assertEqual(pkt.cd, None)
        self.assertEqual(pkt.dstport, None)
        self.assertEqual(pkt.host, None)

    def test_parse_agrees_with_extractors(self) -> None:
        for raw in (
            CLIENT_CONNECT_REQ,
            SOCKS4A_CONNECT_REQ,
            # empty SOCKS4a domain
            bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1, 0, 0]),
            # unterminated user id and domain
            bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1]) + b'bob',
            bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1, 0]) + b'ex.c',
        ):
            pkt = Socks4Packet()
            pkt.parse(raw)
            self.assertEqual(pkt.dstport, extract_port(raw))
            self.assertEqual(pkt.host, extract_host(raw))
            assert pkt.userid is not None
            self.assertEqual(pkt.userid.decode(), extract_user_id(raw))


class TestExtractors(unittest.TestCase):

    def test_ipv4_connect(self) -> None:
        self.assertEqual(extract_command(IPV4_CONNECT_REQ), socks4Operations.CONNECT)
        self.assertEqual(extract_port(IPV4_CONNECT_REQ), 80)
        self.assertEqual(extract_host(IPV4_CONNECT_REQ), '93.184.216.34')
        self.assertEqual(extract_user_id(IPV4_CONNECT_REQ), '')
        self.assertFalse(is_socks4a(IPV4_CONNECT_REQ))

    def test_socks4a_connect(self) -> None:
        self.assertTrue(is_socks4a(SOCKS4A_CONNECT_REQ))
        self.assertEqual(extract_host(SOCKS4A_CONNECT_REQ), 'ex.com')
        self.assertEqual(extract_port(SOCKS4A_CONNECT_REQ), 80)

    def test_accepts_memoryview(self) -> None:
        raw = memoryview(SOCKS4A_CONNECT_REQ)
        self.assertEqual(extract_command(raw), socks4Operations.CONNECT)
        self.assertEqual(extract_host(raw), 'ex.com')

    def test_user_id(self) -> None:
        self.assertEqual(extract_user_id(CLIENT_CONNECT_REQ), 'Fred')
        raw = bytes([4, 1, 0x01, 0xBB, 0, 0, 0, 7]) + b'bob\x00example.com\x00'
        self.assertEqual(extract_user_id(raw), 'bob')
        self.assertEqual(extract_host(raw), 'example.com')
        self.assertEqual(extract_port(raw), 443)

    def test_unterminated_user_id_runs_till_end(self) -> None:
        raw = bytes([4, 1, 0x00, 0x50, 127, 0, 0, 1]) + b'bob'
        self.assertEqual(extract_user_id(raw), 'bob')
        self.assertEqual(extract_host(raw), '127.0.0.1')

    def test_unterminated_domain_runs_till_end(self) -> None:
        raw = bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1]) + b'bob\x00exam'
        self.assertEqual(extract_host(raw), 'exam')

    def test_socks4a_without_domain(self) -> None:
        raw = bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1]) + b'bob'
        self.assertEqual(extract_host(raw), '')

    def test_zero_destination_ip_is_not_socks4a(self) -> None:
        raw = bytes([4, 1, 0x00, 0x50, 0, 0, 0, 0, 0])
        self.assertFalse(is_socks4a(raw))
        self.assertEqual(extract_host(raw), '0.0.0.0')

    def test_unknown_command(self) -> None:
        self.assertEqual(extract_command(bytes([4, 3, 0x00, 0x50])), None)
        self.assertEqual(extract_command(bytes([4, 0])), None)
        self.assertEqual(extract_command(bytes([4, 2])), socks4Operations.BIND)

    def test_short_buffers(self) -> None:
        self.assertEqual(extract_command(b''), None)
        self.assertEqual(extract_command(b'\x04'), None)
        self.assertEqual(extract_port(b'\x04\x01\x00'), 0)
        self.assertEqual(extract_host(b'\x04\x01\x00\x50\x7f\x00\x00'), '')
        self.assertEqual(extract_user_id(b'\x04\x01\x00\x50'), '')

    def test_request_length(self) -> None:
        self.assertEqual(extract_request_length(CLIENT_CONNECT_REQ), 13)
        self.assertEqual(extract_request_length(CLIENT_CONNECT_REQ + b'GET /'), 13)
        self.assertEqual(
            extract_request_length(SOCKS4A_CONNECT_REQ + b'GET /'),
            len(SOCKS4A_CONNECT_REQ),
        )
        # Unterminated segments take rest of the buffer
        raw = bytes([4, 1, 0x00, 0x50, 0, 0, 0, 1]) + b'bob\x00exam'
        self.assertEqual(extract_request_length(raw), len(raw))
        self.assertEqual(extract_request_length(b'\x04\x01'), 2)


class TestReply(unittest.TestCase):

    def test_granted(self) -> None:
        self.assertEqual(build_socks4_reply(socks4ReplyCodes.GRANTED), SERVER_CONNECT_OK)

    def test_rejected(self) -> None:
        self.assertEqual(
            build_socks4_reply(socks4ReplyCodes.REJECTED),
            bytes([0, 0x5b, 0, 0, 0, 0, 0, 0]),
        )
