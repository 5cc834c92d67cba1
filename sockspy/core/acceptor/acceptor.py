# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import logging
import argparse
import selectors
import threading

from typing import List, Optional, Tuple

from ..listener import TcpSocketListener
from ..work import start_threaded_work
from ...common.constants import DEFAULT_ACCEPTOR_SELECT_TIMEOUT

logger = logging.getLogger(__name__)


class Acceptor(threading.Thread):
    """Work acceptor thread.

    `Acceptor` waits for new connections over the listener socket.
    Each accepted connection is handed to an instance of
    ``flags.work_klass`` running within a new thread.
    """

    def __init__(
            self,
            listener: TcpSocketListener,
            flags: argparse.Namespace,
    ) -> None:
        super().__init__()
        self.daemon = True
        self.flags = flags
        self.listener = listener
        self.running = threading.Event()
        self.selector: Optional[selectors.DefaultSelector] = None
        self._total = 0

    def accept(
            self,
            events: List[Tuple[selectors.SelectorKey, int]],
    ) -> List[Tuple[socket.socket, Optional[Tuple[str, int]]]]:
        works = []
        sock = self.listener.sock
        for _, mask in events:
            if mask & selectors.EVENT_READ and sock is not None:
                try:
                    conn, addr = sock.accept()
                    logger.debug(
                        'Accepting new work#{0}'.format(conn.fileno()),
                    )
                    works.append((conn, addr or None))
                except BlockingIOError:
                    pass
        return works

    def run_once(self) -> None:
        assert self.selector is not None
        events = self.selector.select(timeout=DEFAULT_ACCEPTOR_SELECT_TIMEOUT)
        if len(events) == 0:
            return
        for work in self.accept(events):
            self._work(*work)

    def run(self) -> None:
        self.selector = selectors.DefaultSelector()
        assert self.listener.sock is not None
        self.selector.register(self.listener.sock, selectors.EVENT_READ)
        try:
            while not self.running.is_set():
                self.run_once()
        except KeyboardInterrupt:   # pragma: no cover
            pass
        finally:
            self.selector.close()
            logger.debug('Acceptor shutdown')

    def shutdown(self) -> None:
        self.running.set()
        if self.is_alive():
            self.join()

    def _work(self, conn: socket.socket, addr: Optional[Tuple[str, int]]) -> None:
        _, thread = start_threaded_work(self.flags, conn, addr)
        logger.debug(
            'Started work#{0}.{1} in thread#{2}'.format(
                conn.fileno(), self._total, thread.ident,
            ),
        )
        self._total += 1
