#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/tests/__init__.py

'''
SerLog tests

Run `pytest` in project root, against either the source tree or an
installed (`pip install -e .[test]`) package. Serial ports are emulated by
pyserial's `loop://` handler so no hardware is needed. Test modules mirror
the package: `serlog/io` -> `tests/test_io.py`, `serlog/utils` ->
`tests/utils/test_utils.py` and so on.
'''

# built-in
import os
import time

# requirements-dev.txt: testing: pytest
import pytest


posixonly = pytest.mark.skipif(
    os.name != 'posix', reason='Only test it on POSIX system.'
)


def wait_until(condition, timeout=3, interval=0.01):
    '''Poll `condition` until it returns True or timeout.'''
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return bool(condition())


def send(recorder, data, counter='lines_read'):
    '''Write bytes to loopback port and wait until recorder has read them.'''
    num = getattr(recorder, counter)
    recorder.reader.write(data)
    assert wait_until(lambda: getattr(recorder, counter) > num)


# THE END
