# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import selectors

import unittest
from unittest import mock

from sockspy.common.flag import FlagParser
from sockspy.core.acceptor import Acceptor


class TestAcceptor(unittest.TestCase):

    def setUp(self) -> None:
        self.work_klass = mock.MagicMock()
        self.flags = FlagParser.initialize(work_klass=self.work_klass)
        self.listener = mock.MagicMock()
        self.sock = self.listener.sock
        self.acceptor = Acceptor(listener=self.listener, flags=self.flags)

    @mock.patch('selectors.DefaultSelector')
    def test_continues_when_no_events(
            self,
            mock_selector: mock.Mock,
    ) -> None:
        selector = mock_selector.return_value
        selector.select.side_effect = [[], KeyboardInterrupt()]

        self.acceptor.run()

        selector.register.assert_called_with(self.sock, selectors.EVENT_READ)
        self.sock.accept.assert_not_called()
        self.flags.work_klass.assert_not_called()
        selector.close.assert_called_once()

    @mock.patch('threading.Thread')
    @mock.patch('selectors.DefaultSelector')
    def test_accepts_client_from_server_socket(
            self,
            mock_selector: mock.Mock,
            mock_thread: mock.Mock,
    ) -> None:
        conn = mock.MagicMock()
        addr = ('127.0.0.1', 54382)
        self.sock.accept.return_value = (conn, addr)

        mock_thread.return_value.start.side_effect = KeyboardInterrupt()

        selector = mock_selector.return_value
        selector.select.return_value = [(mock.MagicMock(), selectors.EVENT_READ)]

        self.acceptor.run()

        self.sock.accept.assert_called_once()
        self.work_klass.create.assert_called_with(conn=conn, addr=addr)
        self.flags.work_klass.assert_called_with(
            self.work_klass.create.return_value,
            flags=self.flags,
        )
        mock_thread.assert_called_with(
            target=self.flags.work_klass.return_value.run,
            name='socks-client-{0}'.format(addr),
            daemon=True,
        )
        mock_thread.return_value.start.assert_called()

    def test_shutdown_before_start(self) -> None:
        self.acceptor.shutdown()
        self.assertTrue(self.acceptor.running.is_set())
