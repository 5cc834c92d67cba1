# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import platform
import ipaddress


SYS_PLATFORM = platform.system()
IS_WINDOWS = SYS_PLATFORM == 'Windows'

DOT = b'.'
NULL = b'\x00'

# Defaults
DEFAULT_BACKLOG = 100
DEFAULT_BUFFER_SIZE = 128 * 1024
DEFAULT_MAX_SEND_SIZE = 64 * 1024
DEFAULT_CLIENT_RECVBUF_SIZE = DEFAULT_BUFFER_SIZE
DEFAULT_SERVER_RECVBUF_SIZE = DEFAULT_BUFFER_SIZE
DEFAULT_IPV4_HOSTNAME = ipaddress.IPv4Address('127.0.0.1')
DEFAULT_IPV6_HOSTNAME = ipaddress.IPv6Address('::1')
DEFAULT_PORT = 1080
DEFAULT_PORT_FILE = None
DEFAULT_PID_FILE = None
DEFAULT_LOG_FILE = None
DEFAULT_LOG_FORMAT = '%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DEFAULT_LOG_LEVEL = 'INFO'
DEFAULT_OPEN_FILE_LIMIT = 1024
DEFAULT_VERSION = False
DEFAULT_WORK_KLASS = 'sockspy.socks.SocksProtocolHandler'
# Protocol recommends 2 minutes for both CONNECT and BIND commands
DEFAULT_HANDSHAKE_TIMEOUT = 120.0
DEFAULT_ENABLE_METRICS = False
DEFAULT_METRICS_PORT = 9109
# 25 milliseconds to keep the loops hot
DEFAULT_SELECTOR_SELECT_TIMEOUT = 25 / 1000
DEFAULT_ACCEPTOR_SELECT_TIMEOUT = 1
