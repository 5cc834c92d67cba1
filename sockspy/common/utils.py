# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import errno
import socket
import inspect
import logging
import importlib
import contextlib

from typing import Any, List, Optional, Tuple, Union

from .constants import IS_WINDOWS, DOT

if not IS_WINDOWS:
    import resource

logger = logging.getLogger(__name__)


def text_(s: Any, encoding: str = 'utf-8', errors: str = 'strict') -> Any:
    """Utility to ensure text-like usability.

    If s is of type bytes or int, return s.decode(encoding, errors),
    otherwise return s as it is."""
    if isinstance(s, int):
        return str(s)
    if isinstance(s, bytes):
        return s.decode(encoding, errors)
    return s


def bytes_(s: Any, encoding: str = 'utf-8', errors: str = 'strict') -> Any:
    """Utility to ensure binary-like usability.

    If s is type str or int, return s.encode(encoding, errors),
    otherwise return s as it is."""
    if isinstance(s, int):
        s = str(s)
    if isinstance(s, str):
        return s.encode(encoding, errors)
    return s


def new_socket_connection(
        addr: Tuple[str, int],
        source_address: Optional[Tuple[str, int]] = None,
) -> socket.socket:
    """Starts a non-blocking connection attempt towards addr.

    Returned socket may still be connecting.  Caller must wait
    for it to become writable and then inspect ``SO_ERROR``
    to find out whether connection succeeded.

    Name resolution happens synchronously and raises
    :exc:`socket.gaierror` on failure."""
    family, socktype, proto, _, sockaddr = socket.getaddrinfo(
        addr[0], addr[1], 0, socket.SOCK_STREAM,
    )[0]
    conn = socket.socket(family, socktype, proto)
    try:
        conn.setblocking(False)
        if source_address:
            conn.bind(source_address)
        err = conn.connect_ex(sockaddr)
        if err not in (0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY):
            raise OSError(err, errno.errorcode.get(err, 'connect failed'))
    except OSError:
        conn.close()
        raise
    return conn


def get_socket_error(conn: socket.socket) -> int:
    """Returns pending error of a non-blocking socket, 0 if none."""
    return conn.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)


def get_available_port() -> int:
    """Finds and returns an available port on the system."""
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.bind(('', 0))
        _, port = sock.getsockname()
    return int(port)


def set_open_file_limit(soft_limit: int) -> None:
    """Configure open file description soft limit on supported OS."""
    if IS_WINDOWS:  # resource module not available on Windows OS
        return

    curr_soft_limit, curr_hard_limit = resource.getrlimit(
        resource.RLIMIT_NOFILE,
    )
    if curr_soft_limit < soft_limit < curr_hard_limit:
        resource.setrlimit(
            resource.RLIMIT_NOFILE, (soft_limit, curr_hard_limit),
        )
        logger.debug(
            'Open file soft limit set to %d', soft_limit,
        )


def import_klass(klass: Union[bytes, str, type]) -> type:
    """Import and returns the class referenced by a dotted path."""
    if isinstance(klass, type):
        return klass
    klass_ = text_(klass).strip()
    assert klass_ != ''
    path: List[str] = klass_.split(text_(DOT))
    for module_name_parts in range(len(path) - 1, 0, -1):
        module_name = '.'.join(path[0:module_name_parts])
        try:
            container: Any = importlib.import_module(module_name)
        except ModuleNotFoundError:
            continue
        try:
            for part in path[module_name_parts:]:
                container = getattr(container, part)
        except AttributeError:
            continue
        if inspect.isclass(container):
            return container
    raise ValueError('%s is not resolvable as a class' % klass_)
