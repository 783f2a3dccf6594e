#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/io/readers.py

'''
Readers represent line streams that can be opened, read and closed. Currently
the only source is a serial port, either a real device like `/dev/ttyUSB0`,
`COM3`, or any URL supported by pyserial, for example:
    - loop://               (bytes written are read back, used in testing)
    - socket://host:port    (raw TCP serial server)
    - rfc2217://host:port   (telnet COM port control)
'''

# built-in
import threading

# requirements.txt: necessary: pyserial
import serial

from ..configs import SERIAL_BAUDRATE, SERIAL_TIMEOUT
from . import logger

__all__ = ['SerialLineReader']


class SerialLineReader(object):
    '''
    Read lines from a serial port with bounded timeout.

    Parameters
    ----------
    port : str
        Device name or pyserial URL.
    baudrate : int, optional
        Transmission rate. Default `configs.SERIAL_BAUDRATE`.
    timeout : float, optional
        Read timeout in seconds. A read never blocks longer than this so the
        reading loop stays responsive. Default `configs.SERIAL_TIMEOUT`.
    encoding : str, optional
        Lines are decoded with this codec, undecodable bytes are replaced.
    max_line : int, optional
        Bytes of an unterminated line kept before it's dropped.
    '''
    name = 'SerialLineReader'

    def __init__(self, port, baudrate=SERIAL_BAUDRATE, timeout=SERIAL_TIMEOUT,
                 encoding='utf8', max_line=2**16):
        baudrate = int(baudrate)
        if baudrate <= 0:
            raise ValueError('Invalid baudrate: {}'.format(baudrate))
        self.port = port
        self.baudrate = baudrate
        self.timeout = float(timeout)
        self.encoding = encoding
        self.max_line = max_line
        self.input_source = 'Serial@{}'.format(port)
        self._serial = None
        self._buffer = bytearray()
        self._read_lock = threading.Lock()

    def __repr__(self):
        return '<%s %s (%s) at 0x%x>' % (
            self.name, self.input_source,
            'opened' if self.is_open else 'closed', id(self))

    @property
    def serial(self):
        '''Underlying `serial.Serial` instance, None if not opened.'''
        return self._serial

    @property
    def is_open(self):
        return self._serial is not None and self._serial.is_open

    def open(self):
        '''
        Open the port. `serial.SerialException` or `ValueError` is raised if
        the port cannot be opened or configured.
        '''
        if self.is_open:
            return False
        self._serial = serial.serial_for_url(
            self.port, baudrate=self.baudrate, timeout=self.timeout)
        logger.debug('{} `{}` opened at {} baud.'.format(
            self.name, self.input_source, self.baudrate))
        return True

    def close(self):
        if self._serial is None:
            return False
        self._serial.close()
        del self._buffer[:]
        logger.debug('{} `{}` closed.'.format(self.name, self.input_source))
        return True

    def next_line(self, timeout=None):
        '''
        Read one line.

        Returns
        -------
        line : str | None
            Decoded line including its line delimiter, or None if no complete
            line arrived within timeout. Bytes of an incomplete line are kept
            and prefixed to the next line.

        Raises
        ------
        serial.SerialException, OSError
            Read failed, e.g. device unplugged. Buffered bytes are kept.
        '''
        if not self.is_open:
            raise serial.SerialException(
                '{} is not opened'.format(self.input_source))
        with self._read_lock:
            if timeout is not None and timeout != self._serial.timeout:
                self._serial.timeout = timeout
            data = self._serial.readline()
            if not data:
                return None
            self._buffer.extend(data)
            if not data.endswith(b'\n'):
                if len(self._buffer) > self.max_line:
                    logger.warning('{} dropped {} bytes without newline'
                                   .format(self.name, len(self._buffer)))
                    del self._buffer[:]
                return None
            line = self._buffer.decode(self.encoding, 'replace')
            del self._buffer[:]
            return line

    def write(self, data):
        '''Write bytes to the port (mostly for debugging and loop://).'''
        return self._serial.write(data)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *a):
        self.close()


# THE END
