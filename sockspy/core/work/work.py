# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import argparse

from abc import ABC, abstractmethod
from uuid import uuid4
from typing import Optional, Dict, TypeVar, Generic

from ...common.types import Readables, Writables

T = TypeVar('T')


class Work(ABC, Generic[T]):
    """Implement Work to hook into the selector driven event loop."""

    def __init__(
            self,
            work: T,
            flags: argparse.Namespace,
            uid: Optional[str] = None,
    ) -> None:
        # Work uuid
        self.uid: str = uid if uid is not None else uuid4().hex
        self.flags = flags
        # Accept work
        self.work = work

    @abstractmethod
    async def get_events(self) -> Dict[int, int]:
        """Return sockets and events (read or write) that we are interested in."""
        return {}   # pragma: no cover

    @abstractmethod
    async def handle_events(
            self,
            readables: Readables,
            writables: Writables,
    ) -> bool:
        """Handle readable and writable sockets.

        Return True to shutdown work."""
        return False    # pragma: no cover

    def initialize(self) -> None:
        """Perform any resource initialization."""
        pass    # pragma: no cover

    def is_inactive(self) -> bool:
        """Return True if connection should be considered inactive."""
        return False    # pragma: no cover

    def shutdown(self) -> None:
        """Implementation must close any opened resources here
        and call super().shutdown()."""
        pass

    def run(self) -> None:
        """Drives the work until it signals shutdown.  Invoked
        within a dedicated thread by :func:`start_threaded_work`."""
        pass    # pragma: no cover
