# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import argparse
import threading

from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:   # pragma: no cover
    from .work import Work


def start_threaded_work(
        flags: argparse.Namespace,
        conn: socket.socket,
        addr: Optional[Tuple[str, int]],
) -> Tuple['Work[Any]', threading.Thread]:
    """Runs ``flags.work_klass`` for an accepted client in a new thread.

    Threads are daemonic and never joined, open tunnels go down
    along with the server process."""
    work = flags.work_klass(
        flags.work_klass.create(conn=conn, addr=addr),
        flags=flags,
    )
    thread = threading.Thread(
        target=work.run,
        name='socks-client-{0}'.format(addr),
        daemon=True,
    )
    thread.start()
    return (work, thread)
