# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import os
import sys
import time
import pprint
import signal
import logging
import threading
from typing import Any, List, Optional

from .common.flag import FlagParser, flags
from .common.utils import bytes_
from .core.acceptor import Acceptor
from .core.listener import TcpSocketListener
from .socks import SocksRequestDispatcher
from .metrics import start_metrics_server
from .common.constants import (
    IS_WINDOWS, DEFAULT_VERSION, DEFAULT_LOG_FILE, DEFAULT_PID_FILE,
    DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_WORK_KLASS,
    DEFAULT_OPEN_FILE_LIMIT,
)


logger = logging.getLogger(__name__)


flags.add_argument(
    '--version',
    '-v',
    action='store_true',
    default=DEFAULT_VERSION,
    help='Prints sockspy version.',
)

flags.add_argument(
    '--log-level',
    type=str,
    default=DEFAULT_LOG_LEVEL,
    help='Valid options: DEBUG, INFO (default), WARNING, ERROR, CRITICAL. '
    'Both upper and lowercase values are allowed. '
    'You may also simply use the leading character e.g. --log-level d',
)

flags.add_argument(
    '--log-file',
    type=str,
    default=DEFAULT_LOG_FILE,
    help='Default: sys.stdout. Log file destination.',
)

flags.add_argument(
    '--log-format',
    type=str,
    default=DEFAULT_LOG_FORMAT,
    help='Log format for Python logger.',
)

flags.add_argument(
    '--open-file-limit',
    type=int,
    default=DEFAULT_OPEN_FILE_LIMIT,
    help='Default: 1024. Maximum number of files (TCP connections) '
    'that sockspy can open concurrently.',
)

flags.add_argument(
    '--work-klass',
    type=str,
    default=DEFAULT_WORK_KLASS,
    help='Default: ' + DEFAULT_WORK_KLASS +
    '.  Work klass to use for work execution.',
)

flags.add_argument(
    '--pid-file',
    type=str,
    default=DEFAULT_PID_FILE,
    help='Default: None. Save "parent" process ID to a file.',
)


class Proxy:
    """Proxy is a context manager to control sockspy core.

    On setup, a :class:`~sockspy.core.listener.TcpSocketListener` is bound
    and an :class:`~sockspy.core.acceptor.Acceptor` thread is started.
    Every accepted client connection is handled by an instance of
    ``--work-klass``, by default
    :class:`~sockspy.socks.SocksProtocolHandler`, within its own thread.

    :attr:`dispatcher` is shared by all client connections.  Subscribe to
    it for taking over requests, otherwise requests are proxied directly.
    """

    def __init__(self, input_args: Optional[List[str]] = None, **opts: Any) -> None:
        self.opts = opts
        self.flags = FlagParser.initialize(input_args, **opts)
        if self.flags.dispatcher is None:
            self.flags.dispatcher = SocksRequestDispatcher()
        self.listener: Optional[TcpSocketListener] = None
        self.acceptor: Optional[Acceptor] = None

    def __enter__(self) -> 'Proxy':
        self.setup()
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    @property
    def dispatcher(self) -> SocksRequestDispatcher:
        return self.flags.dispatcher

    def setup(self) -> None:
        self._write_pid_file()
        # We setup listener first because of flags.port override
        # in case of ephemeral port being used
        self.listener = TcpSocketListener(flags=self.flags)
        self.listener.setup()
        # Override flags.port to match the actual port
        # we are listening upon.  This is necessary to preserve
        # the server port when `--port=0` is used.
        assert self.listener.port is not None
        self.flags.port = self.listener.port
        self._write_port_file()
        if self.flags.enable_metrics:
            start_metrics_server(self.flags)
        self.acceptor = Acceptor(listener=self.listener, flags=self.flags)
        self.acceptor.start()
        logger.debug('Started acceptor thread#%s', self.acceptor.ident)
        if threading.current_thread() == threading.main_thread():
            self._register_signals()

    def shutdown(self) -> None:
        if self.acceptor:
            self.acceptor.shutdown()
        if self.listener:
            self.listener.shutdown()
            self._delete_port_file()
            self._delete_pid_file()

    def _write_pid_file(self) -> None:
        if self.flags.pid_file:
            with open(self.flags.pid_file, 'wb') as pid_file:
                pid_file.write(bytes_(os.getpid()))

    def _delete_pid_file(self) -> None:
        if self.flags.pid_file \
                and os.path.exists(self.flags.pid_file):
            os.remove(self.flags.pid_file)

    def _write_port_file(self) -> None:
        if self.flags.port_file:
            with open(self.flags.port_file, 'wb') as port_file:
                port_file.write(bytes_(self.flags.port))
                port_file.write(b'\n')

    def _delete_port_file(self) -> None:
        if self.flags.port_file \
                and os.path.exists(self.flags.port_file):
            os.remove(self.flags.port_file)

    def _register_signals(self) -> None:
        signal.signal(signal.SIGINT, self._handle_exit_signal)
        signal.signal(signal.SIGTERM, self._handle_exit_signal)
        if not IS_WINDOWS:
            if hasattr(signal, 'SIGINFO'):
                signal.signal(      # pragma: no cover
                    signal.SIGINFO,       # pylint: disable=E1101
                    self._handle_siginfo,
                )
            signal.signal(signal.SIGHUP, self._handle_exit_signal)
            signal.signal(signal.SIGQUIT, self._handle_exit_signal)

    @staticmethod
    def _handle_exit_signal(signum: int, _frame: Any) -> None:
        logger.debug('Received signal %d' % signum)
        sys.exit(0)

    def _handle_siginfo(self, _signum: int, _frame: Any) -> None:
        pprint.pprint(self.flags.__dict__)  # pragma: no cover


def sleep_loop(p: Optional[Proxy] = None) -> None:
    while True:
        try:
            time.sleep(1)
        except KeyboardInterrupt:
            break


def main(**opts: Any) -> None:
    with Proxy(sys.argv[1:], **opts) as p:
        sleep_loop(p)


def entry_point() -> None:
    main()
