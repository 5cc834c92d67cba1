# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import NamedTuple


Socks4ReplyCodes = NamedTuple(
    'Socks4ReplyCodes', [
        ('GRANTED', int),
        ('REJECTED', int),
        ('REJECTED_IDENT_CONNECT', int),
        ('REJECTED_USERID_MISMATCH', int),
    ],
)

socks4ReplyCodes = Socks4ReplyCodes(0x5a, 0x5b, 0x5c, 0x5d)

# Used for every rejection which doesn't carry an explicit reason
DEFAULT_REJECT_CODE = socks4ReplyCodes.REJECTED
