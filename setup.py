# -*- coding: utf-8 -*-
"""
    sockspy
    ~~~~~~~
    Lightweight, event driven SOCKS4 and SOCKS4a proxy server.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from setuptools import setup, find_packages

VERSION = (0, 1, 0)
__version__ = '.'.join(map(str, VERSION[0:3]))
__description__ = '''Lightweight, event driven SOCKS4 and SOCKS4a proxy server
    with hooks for taking over requests from Python code.'''
__author__ = 'Abhinav Singh'
__author_email__ = 'mailsforabhinav@gmail.com'
__homepage__ = 'https://github.com/abhinavsingh/proxy.py'
__download_url__ = '%s/archive/master.zip' % __homepage__
__license__ = 'BSD'

if __name__ == '__main__':
    setup(
        name='sockspy',
        version=__version__,
        author=__author__,
        author_email=__author_email__,
        url=__homepage__,
        description=__description__,
        long_description=open(
            'README.md', 'r', encoding='utf-8').read().strip(),
        long_description_content_type='text/markdown',
        download_url=__download_url__,
        license=__license__,
        python_requires='>=3.7',
        zip_safe=False,
        packages=find_packages(exclude=['tests', 'tests.*']),
        package_data={'sockspy': ['py.typed']},
        install_requires=open('requirements.txt', 'r').read().strip().split(),
        extras_require={
            'testing': open('requirements-testing.txt', 'r').read().strip().split(),
        },
        entry_points={
            'console_scripts': [
                'sockspy = sockspy:entry_point'
            ]
        },
        classifiers=[
            'Development Status :: 3 - Alpha',
            'Environment :: Console',
            'Environment :: No Input/Output (Daemon)',
            'Intended Audience :: Developers',
            'Intended Audience :: System Administrators',
            'License :: OSI Approved :: BSD License',
            'Natural Language :: English',
            'Operating System :: MacOS :: MacOS X',
            'Operating System :: POSIX :: Linux',
            'Operating System :: OS Independent',
            'Programming Language :: Python :: 3 :: Only',
            'Programming Language :: Python :: 3',
            'Topic :: Internet',
            'Topic :: Internet :: Proxy Servers',
            'Topic :: System :: Networking',
            'Topic :: Utilities',
            'Typing :: Typed',
        ],
        keywords=(
            'socks, socks4, socks4a, proxy, proxy server, socks proxy server, Python3'
        )
    )
