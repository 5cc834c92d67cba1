# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
from typing import Any, Dict, List, Callable, Hashable, Optional

logger = logging.getLogger(__name__)

Listener = Callable[..., None]


class EventEmitter:
    """In-process, synchronous event emitter.

    Listeners are invoked in registration order within the
    thread calling :meth:`emit`.  Listeners registered with
    :meth:`once` are removed before they are invoked.
    """

    def __init__(self) -> None:
        self._listeners: Dict[Hashable, List[Listener]] = {}
        self._once: Dict[Hashable, List[Listener]] = {}

    def on(self, event_name: Hashable, listener: Listener) -> None:
        self._listeners.setdefault(event_name, []).append(listener)

    def once(self, event_name: Hashable, listener: Listener) -> None:
        self.on(event_name, listener)
        self._once.setdefault(event_name, []).append(listener)

    def off(self, event_name: Hashable, listener: Listener) -> None:
        if listener in self._listeners.get(event_name, []):
            self._listeners[event_name].remove(listener)
        if listener in self._once.get(event_name, []):
            self._once[event_name].remove(listener)

    def listener_count(self, event_name: Hashable) -> int:
        return len(self._listeners.get(event_name, []))

    def remove_all_listeners(self, event_name: Optional[Hashable] = None) -> None:
        if event_name is None:
            self._listeners.clear()
            self._once.clear()
            return
        self._listeners.pop(event_name, None)
        self._once.pop(event_name, None)

    def emit(self, event_name: Hashable, *args: Any) -> bool:
        """Returns True if event had listeners."""
        listeners = list(self._listeners.get(event_name, []))
        if not listeners:
            return False
        for listener in self._once.pop(event_name, []):
            self._listeners[event_name].remove(listener)
        for listener in listeners:
            listener(*args)
        return True
