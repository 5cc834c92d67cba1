# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import selectors

import pytest

from typing import List, Optional
from pytest_mock import MockerFixture

from sockspy.common.flag import FlagParser
from sockspy.core.base import BaseTcpServerHandler
from sockspy.core.connection import TcpClientConnection
from ..test_assertions import Assertions


class EchoServerHandler(BaseTcpServerHandler[TcpClientConnection]):

    def __init__(self, *args, **kwargs) -> None:  # type: ignore
        super().__init__(*args, **kwargs)
        self.inactive = False

    def is_inactive(self) -> bool:
        return self.inactive

    def handle_data(self, data: memoryview) -> Optional[bool]:
        if data.tobytes() == b'bye':
            self.work.end(b'bye')
            return None
        self.work.queue(data)
        return None


class TestBaseTcpServerHandler(Assertions):

    @pytest.fixture(autouse=True)   # type: ignore[misc]
    def _setUp(self, mocker: MockerFixture) -> None:
        self.mock_selector = mocker.patch('selectors.DefaultSelector')
        self.fileno = 10
        self._conn = mocker.MagicMock()
        self._conn.fileno.return_value = self.fileno
        self._conn.send.side_effect = lambda data: len(data)
        self.flags = FlagParser.initialize()
        self.handler = EchoServerHandler(
            TcpClientConnection(self._conn, ('127.0.0.1', 54382)),
            flags=self.flags,
        )
        self.handler.initialize()

    def test_deferred_callbacks_run_on_next_iteration(self) -> None:
        calls: List[str] = []

        def first() -> None:
            calls.append('first')
            self.handler.call_soon(lambda: calls.append('second'))

        self.handler.call_soon(first)
        self.assertEqual(calls, [])
        self.handler.run_deferred()
        self.assertEqual(calls, ['first'])
        self.handler.run_deferred()
        self.assertEqual(calls, ['first', 'second'])

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_echo(self) -> None:
        self._conn.recv.return_value = b'hello'
        self.assertFalse(await self.handler.handle_events([self.fileno], []))
        self.assertEqual(
            await self.handler.get_events(),
            {self.fileno: selectors.EVENT_READ | selectors.EVENT_WRITE},
        )
        self.assertFalse(await self.handler.handle_events([], [self.fileno]))
        self._conn.send.assert_called_once_with(b'hello')

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_ended_connection_is_flushed_before_teardown(self) -> None:
        self._conn.recv.return_value = b'bye'
        self.assertFalse(await self.handler.handle_events([self.fileno], []))
        self.assertTrue(self.handler.must_flush_before_shutdown)
        # No more reads once connection has ended
        self.assertEqual(
            await self.handler.get_events(),
            {self.fileno: selectors.EVENT_WRITE},
        )
        self.assertTrue(await self.handler.handle_events([], [self.fileno]))

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_client_close_tears_down(self) -> None:
        self._conn.recv.return_value = b''
        self.assertTrue(await self.handler.handle_events([self.fileno], []))

    def test_run_stops_when_inactive(self) -> None:
        self.handler.inactive = True
        self.handler.run()
        self._conn.shutdown.assert_called_once()
        self._conn.close.assert_called_once()
        self.mock_selector.return_value.close.assert_called_once()

    def test_run_delivers_pending_callbacks_before_shutdown(self) -> None:
        closed_when_called: List[bool] = []

        def inactive() -> bool:
            # Scheduled during last iteration, after run_deferred
            self.handler.call_soon(
                lambda: closed_when_called.append(self.handler.work.closed),
            )
            return True

        self.handler.is_inactive = inactive     # type: ignore[method-assign]
        self.handler.run()
        self.assertEqual(closed_when_called, [False])
        self._conn.close.assert_called_once()
