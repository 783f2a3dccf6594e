#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/tests/utils/test_utils.py

# built-in
import os
import re
import time
import logging
from io import StringIO

# requirements-dev.txt: testing: pytest
# requirements.txt: necessary: pyserial
import pytest
import serial

from .. import posixonly, wait_until

from serlog.utils import (
    get_boolean, get_func_args, load_configs, get_config, timestamp,
    TempLogLevel, config_logger, duration, input, TimeoutException,
    virtual_serial, format_size, ensure_unicode,
    LoopTaskInThread, SkipIteration
)

logmsg = StringIO()
# redirect logging stream to a StringIO so that we can check log messages
logger = config_logger(level=logging.INFO, format='{message}', stream=logmsg)


def get_log_msg(f=logmsg):
    msg = f.getvalue(); f.truncate(0); f.seek(0)  # noqa: E702
    return msg.strip()


def test_temploglevel():
    with TempLogLevel(logging.ERROR):
        logger.warning('foo')
        assert get_log_msg() == ''
        logger.error('bar')
        assert get_log_msg() == 'bar'
    assert logger.level == logging.INFO


def test_duration():
    @duration(1.5, '%s.test_duration' % __name__)
    def echo(msg):
        '''this function only can be called every 1.5 second'''
        logger.info(msg)
    # first time
    echo(__file__)
    assert get_log_msg() == __file__
    # too frequently, `echo` will not run
    echo(__file__)
    assert get_log_msg() == ''
    time.sleep(1.5)
    echo(__file__)
    assert get_log_msg() == __file__


def test_get_func_args():
    assert get_func_args(lambda: None) == ([], ())
    assert get_func_args(lambda x, y=1, verbose=None, *a, **k: None) == (
        ['x', 'y', 'verbose'], (1, None)
    )


def test_get_boolean():
    assert (
        get_boolean('True') and
        get_boolean('yes') and
        not get_boolean('No') and
        not get_boolean('off') and
        get_boolean(' 1 ') and
        get_boolean(True)
    )
    with pytest.raises(ValueError):
        get_boolean('maybe')


@pytest.fixture
def configfile(tmp_path):
    fn = str(tmp_path / 'serlog.conf')
    with open(fn, 'w') as f:
        f.write('[Serial]\n'
                'SERIAL_BAUDRATE = 9600\n'
                '[Payload]\n'
                'MARKER_TOKEN = TLM:\n'
                'PAYLOAD_FIELDS = 6\n')
    return fn


def test_load_configs(configfile):
    cfg = load_configs(configfile)
    assert cfg['Serial']['SERIAL_BAUDRATE'] == '9600'
    assert cfg['Payload']['MARKER_TOKEN'] == 'TLM:'


def test_get_config(configfile, monkeypatch):
    monkeypatch.delenv('PAYLOAD_FIELDS', raising=False)
    assert get_config('NO_SUCH_KEY', 'dft') == 'dft'
    assert get_config('NO_SUCH_KEY', type=int) is None
    assert get_config('PAYLOAD_FIELDS', configfiles=configfile, type=int) == 6
    assert get_config('SERIAL_BAUDRATE', configfiles=configfile,
                      section='Serial', type=float) == 9600.0
    monkeypatch.setenv('PAYLOAD_FIELDS', '5')
    assert get_config('PAYLOAD_FIELDS', configfiles=configfile, type=int) == 5


def test_timestamp():
    assert re.match(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$', timestamp())
    assert timestamp(0, '%Y') in ('1969', '1970')


def test_input(tmp_path):
    fn = str(tmp_path / 'stdin.txt')
    with open(fn, 'w') as f:
        f.write('start\r\n  stop \n')
    with open(fn, 'r') as f:
        assert input(flist=f) == 'start'
        assert input(flist=[f]) == '  stop '
        with pytest.raises(EOFError):
            input(flist=f)


def test_input_buffered_lines():
    '''Lines arriving together are returned one by one, no descriptor.'''
    f = StringIO('start\nstop\nexit\n')
    assert [input(flist=f) for _ in range(3)] == ['start', 'stop', 'exit']
    with pytest.raises(EOFError):
        input(flist=f)


def test_input_prompt(capsys):
    assert input('cmd> ', flist=StringIO('start\n')) == 'start'
    assert capsys.readouterr().out == 'cmd> '


@posixonly
def test_input_timeout():
    rfd, wfd = os.pipe()
    with os.fdopen(rfd) as f, os.fdopen(wfd, 'w') as w:
        with pytest.raises(TimeoutException):
            input(timeout=0.1, flist=f)
        w.write('start\n')
        w.flush()
        assert input(timeout=1, flist=f) == 'start'


def test_timeout_exception():
    e = TimeoutException('read failed', 3, 'serlog.utils.input')
    assert str(e) == 'Timeout(3s): read failed within `serlog.utils.input`.'
    assert str(TimeoutException()) == 'Timeout'


@posixonly
def test_virtual_serial():
    flag_close, port1, port2 = virtual_serial(verbose=False, timeout=10)
    try:
        with serial.Serial(port1, 115200, timeout=0.1) as s1, \
                serial.Serial(port2, 115200, timeout=0.1) as s2:
            s2.write(b'UDP packet contents: 1,2,3,4\n')
            assert wait_until(lambda: s1.in_waiting >= 29)
            assert s1.readline() == b'UDP packet contents: 1,2,3,4\n'
    finally:
        flag_close.set()


def test_format_size():
    assert format_size(2**10 - 1) == '1023 B'
    assert format_size(2**10) == '1.0 KB'
    assert format_size(0, 2**10) == ['0 Byte', '1.0 KB']


def test_ensure_unicode():
    assert ensure_unicode(b'start') == 'start'
    assert ensure_unicode('a', b'b', 1) == ['a', 'b', '1']


def test_looptask(caplog):
    count = []

    def step():
        count.append(None)
        if len(count) == 3:
            raise SkipIteration('skip the third one')
        time.sleep(0.01)

    task = LoopTaskInThread(step, name='Counter')
    assert repr(task) == '<Counter closed daemon>'
    with caplog.at_level(logging.WARNING):
        assert task.start()
        assert wait_until(lambda: len(count) > 5)
    assert 'skip the third one' in caplog.text
    assert task.status == 'started'
    assert task.start() is False
    assert task.close()
    assert task.close() is False
    assert task.status == 'closed'
    time.sleep(0.1)
    num = len(count)
    time.sleep(0.1)
    assert len(count) == num
    assert task.start()
    assert wait_until(lambda: len(count) > num)
    assert task.close()
