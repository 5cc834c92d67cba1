# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import Tuple, Union


__version__ = '0.1.0'


def _to_int_or_str(inp: str) -> Union[int, str]:
    try:
        return int(inp)
    except ValueError:
        return inp


def _split_version_parts(inp: str) -> Tuple[str, ...]:
    public_version, _plus, local_version = inp.partition('+')
    return (*public_version.split('.'), local_version)


VERSION = tuple(map(_to_int_or_str, _split_version_parts(__version__)))


__all__ = '__version__', 'VERSION'
