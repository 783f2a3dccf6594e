# coding=utf-8
#
# File: SerLog/tests/conftest.py

'''Define some fixtures here.'''

# requirements-dev.txt: testing: pytest
import pytest

from serlog.io import SerialLineReader, CSVRecordWriter
from serlog.recorder import Recorder


@pytest.fixture
def output(tmp_path):
    return str(tmp_path / 'output.csv')


@pytest.fixture
def reader():
    '''Reader on a loopback port: bytes written are read back.'''
    reader = SerialLineReader('loop://', 115200, timeout=0.05)
    reader.open()
    yield reader
    reader.close()


@pytest.fixture
def writer(output):
    writer = CSVRecordWriter(output)
    yield writer
    writer.close()


@pytest.fixture
def recorder(reader, writer):
    recorder = Recorder(reader, writer, interval=0.001)
    recorder.start()
    yield recorder
    recorder.close()
