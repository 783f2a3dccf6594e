#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/recorder/__main__.py

'''
This file provides a command line interface for user to record telemetry
lines from a serial port into a CSV file.

Type `python -m serlog.recorder -p /dev/ttyUSB0` and hit return to start this
program. Append '-v' if you need verbose log output. You can control the
recorder by commands like below:
    Enter a command (start, stop, exit):
    start
    Recording started.
    Enter a command (start, stop, exit):
    stop
    Recording stopped.
    Enter a command (start, stop, exit):
    exit
    Exiting...

Serial port, baudrate and output file not given on command line are read
from configuration files (see `serlog.configs`) or environment variables.
'''

# built-in
import sys
import signal
import logging
import argparse
import threading

# requirements.txt: necessary: pyserial
import serial

from .. import version
from ..io import SerialLineReader, CSVRecordWriter
from ..utils import (
    config_logger, debug_helper, get_config, get_boolean, find_serial_ports,
    input,
)
from ..constants import COMMAND_PROMPT
from . import logger
from .base import Recorder, RecorderConsole

LOGGERS = ('serlog.utils', 'serlog.io', 'serlog.recorder')


def positive_int(v):
    try:
        v = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError('invalid int value: %r' % v)
    if v <= 0:
        raise argparse.ArgumentTypeError('must be positive: %d' % v)
    return v


def make_parser():
    parser = argparse.ArgumentParser(prog='serlog', description=(
        'Record telemetry lines from a serial port into a CSV file. '
        'Recording is controlled by commands typed on stdin: '
        '`start`, `stop` and `exit`.'
    ))
    parser.add_argument(
        '-p', '--port', type=str,
        help='serial port name or pyserial URL, e.g. /dev/ttyUSB0, COM3, '
             'loop://. Default from configs or select interactively')
    parser.add_argument(
        '-b', '--baud', type=positive_int, dest='baudrate',
        help='serial port baudrate, default %s' % get_config(
            'SERIAL_BAUDRATE'))
    parser.add_argument(
        '-o', '--output', type=str,
        help='output CSV filename, default `%s`' % get_config('OUTPUT_FILE'))
    parser.add_argument(
        '--fsync', nargs='?', const=True, type=get_boolean,
        help='boolean, whether to fsync output file after each row')
    parser.add_argument(
        '-v', '--verbose', default=0, action='count',
        help='output more information')
    parser.add_argument(
        '-l', '--log', type=str, dest='logfile',
        help='log output to a file instead of stderr')
    parser.add_argument('-V', '--version', action='version', version=version())
    return parser


def config_logging(verbose=0, logfile=None):
    level = logging.DEBUG if verbose else logging.INFO
    for name in LOGGERS:
        if logfile is None:
            debug_helper(bool(verbose), name)
        else:
            config_logger(name, level, addhdlr=False, filename=logfile)


def _interrupt(signum, frame):
    raise KeyboardInterrupt('Received signal %d' % signum)


def install_signals():
    '''Let SIGTERM and SIGHUP exit as gracefully as Ctrl-C does.'''
    if threading.current_thread() is not threading.main_thread():
        return {}
    saved = {}
    for name in ('SIGTERM', 'SIGHUP'):
        signum = getattr(signal, name, None)
        if signum is not None:
            saved[signum] = signal.signal(signum, _interrupt)
    return saved


def restore_signals(saved):
    for signum, handler in saved.items():
        signal.signal(signum, handler)


def main_cli(console, flist=None):
    '''
    Read commands line by line and pass them to console until `exit`.
    Reading blocks until a whole line arrives. End of input and
    interruption are treated as `exit`.
    '''
    while not console.exited:
        try:
            command = input(COMMAND_PROMPT, flist=flist)
            print(console.handle(command), flush=True)
        except (EOFError, KeyboardInterrupt) as e:
            logger.debug('Stop listening for commands: %r' % e)
            print(console.exit(), flush=True)
            break
    logger.debug('Main thread listening for commands terminated.')


def main(args=None, stdin=None):
    parser = make_parser()
    args = parser.parse_args(args)
    config_logging(args.verbose, args.logfile)

    try:
        baudrate = args.baudrate or get_config('SERIAL_BAUDRATE', type=int)
        timeout = get_config('SERIAL_TIMEOUT', type=float)
        output = args.output or get_config('OUTPUT_FILE')
        fsync = args.fsync
        if fsync is None:
            fsync = get_config('OUTPUT_FSYNC', type=get_boolean)
        options = {
            'marker': get_config('MARKER_TOKEN'),
            'separator': get_config('PAYLOAD_SEPARATOR'),
            'num_fields': get_config('PAYLOAD_FIELDS', type=int),
            'interval': get_config('LOOP_INTERVAL', type=float),
        }
        if baudrate <= 0:
            raise ValueError('baudrate must be positive: %d' % baudrate)
    except (ValueError, TypeError) as e:
        logger.error('Invalid configuration: {}'.format(e))
        return 1

    port = args.port or get_config('SERIAL_PORT')
    if not port:
        try:
            port = find_serial_ports()
        except RuntimeError as e:
            logger.error(e)
            return 1
    reader = SerialLineReader(port, baudrate, timeout)
    try:
        reader.open()
    except (serial.SerialException, OSError, ValueError) as e:
        logger.error('Failed to open serial port `{}`: {}'.format(port, e))
        return 1

    try:
        writer = CSVRecordWriter(output, fsync=fsync)
    except OSError as e:
        logger.error('Failed to create output file `{}`: {}'.format(
            output, e))
        reader.close()
        return 1

    recorder = Recorder(reader, writer, **options)
    if not recorder.start():
        writer.close()
        reader.close()
        return 1
    logger.info('Recording {} at {} baud into `{}`'.format(
        port, baudrate, writer.filename))

    saved = install_signals()
    try:
        main_cli(RecorderConsole(recorder), stdin)
    finally:
        restore_signals(saved)
        recorder.close()
        writer.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
