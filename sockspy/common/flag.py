# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import sys
import socket
import argparse
import ipaddress

from typing import Any, List, Optional, cast

from .types import IpAddress
from .utils import import_klass, set_open_file_limit
from .logger import setup_logging
from .version import __version__

__homepage__ = 'https://github.com/abhinavsingh/proxy.py'


class FlagParser:
    """Wrapper around argparse module.

    Import `flag.flags` and use `add_argument` API
    to define custom flags within respective Python files.

    Best Practice:
    1. Define flags at the top of your class files.
    2. DO NOT add flags within your class `__init__` method OR
       within class methods.  It MAY result into runtime exception,
       especially if your class is initialized multiple times or if
       class method registering the flag gets invoked multiple times.
    """

    def __init__(self) -> None:
        self.args: Optional[argparse.Namespace] = None
        self.actions: List[str] = []
        self.parser = argparse.ArgumentParser(
            description='sockspy v%s' % __version__,
            epilog='sockspy not working? Report at: %s/issues/new' % __homepage__,
        )

    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action:
        """Register a flag."""
        action = self.parser.add_argument(*args, **kwargs)
        self.actions.append(action.dest)
        return action

    def parse_args(
            self, input_args: Optional[List[str]],
    ) -> argparse.Namespace:
        """Parse flags from input arguments."""
        self.args = self.parser.parse_args(input_args)
        return self.args

    @staticmethod
    def initialize(
        input_args: Optional[List[str]] = None,
        **opts: Any,
    ) -> argparse.Namespace:
        if input_args is None:
            input_args = []

        # Parse flags
        args = flags.parse_args(input_args)

        # Print version and exit
        if args.version:
            print(__version__)
            sys.exit(0)

        # Setup logging module
        setup_logging(args.log_file, args.log_level, args.log_format)

        # Setup limits
        set_open_file_limit(args.open_file_limit)

        # Load work_klass
        work_klass = opts.get('work_klass', args.work_klass)
        args.work_klass = import_klass(work_klass) \
            if isinstance(work_klass, (str, bytes)) \
            else work_klass

        args.hostname = cast(
            IpAddress,
            ipaddress.ip_address(opts.get('hostname', args.hostname)),
        )
        args.family = socket.AF_INET6 if args.hostname.version == 6 else socket.AF_INET
        args.port = cast(int, opts.get('port', args.port))
        args.port_file = cast(
            Optional[str], opts.get('port_file', args.port_file),
        )
        args.backlog = cast(int, opts.get('backlog', args.backlog))
        args.pid_file = cast(
            Optional[str], opts.get('pid_file', args.pid_file),
        )
        args.handshake_timeout = cast(
            float,
            opts.get('handshake_timeout', args.handshake_timeout),
        )
        args.client_recvbuf_size = cast(
            int,
            opts.get('client_recvbuf_size', args.client_recvbuf_size),
        )
        args.server_recvbuf_size = cast(
            int,
            opts.get('server_recvbuf_size', args.server_recvbuf_size),
        )
        args.max_sendbuf_size = cast(
            int,
            opts.get('max_sendbuf_size', args.max_sendbuf_size),
        )
        args.enable_metrics = cast(
            bool,
            opts.get('enable_metrics', args.enable_metrics),
        )
        args.metrics_port = cast(
            int,
            opts.get('metrics_port', args.metrics_port),
        )
        # Application level request dispatcher, if any.
        # Shared by all client connections.
        args.dispatcher = opts.get('dispatcher', None)

        return args


flags = FlagParser()
