#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/recorder/base.py

'''`serlog.recorder.Recorder` is defined in this source file.'''

# built-in
import time
import threading

# requirements.txt: necessary: pyserial
import serial

from ..io import (
    clean_line, is_marker_line, parse_payload,
    create_data_record, create_marker_record
)
from ..utils import duration, LoopTaskInThread
from ..configs import (
    MARKER_TOKEN, PAYLOAD_SEPARATOR, PAYLOAD_FIELDS, LOOP_INTERVAL
)
from ..constants import (
    RECORD_START, RECORD_STOP, RUN_LABEL, STOP_LABEL,
    COMMANDS, COMMAND_HELP
)
from . import logger


class RecordingGate(object):
    '''
    Recording on/off switch. It is written by the command thread and read by
    the recording thread. Reads and writes are atomic, a reader sees a new
    state no later than its next iteration.
    '''
    def __init__(self, active=False):
        self._flag = threading.Event()
        if active:
            self._flag.set()

    def __repr__(self):
        return '<RecordingGate (%s)>' % ('on' if self.is_active() else 'off')

    def is_active(self):
        return self._flag.is_set()

    def set(self, active):
        if active:
            self._flag.set()
        else:
            self._flag.clear()


class Recorder(LoopTaskInThread):
    '''See more at serlog.recorder.__doc__'''

    def __init__(self, reader, writer, gate=None, marker=MARKER_TOKEN,
                 num_fields=PAYLOAD_FIELDS, separator=PAYLOAD_SEPARATOR,
                 interval=LOOP_INTERVAL, **k):
        '''
        Parameters
        ----------
        reader : SerialLineReader
            Line source, see `serlog.io.readers`. Opened on start if needed.
        writer : CSVRecordWriter
            Sink of data rows, shared with the command thread.
        gate : RecordingGate, optional
            Data rows are written only while the gate is active. A new
            inactive gate is created by default.
        marker : str, optional
            Token identifying telemetry lines.
        num_fields : int, optional
            Number of payload fields of a valid telemetry line.
        separator : str, optional
            Payload starts after this separator following the marker.
        interval : float, optional
            Seconds to sleep between two iterations. Default 10 ms.
        '''
        self._reader = reader
        self._writer = writer
        self.gate = gate if gate is not None else RecordingGate()
        self.marker = marker
        self.num_fields = int(num_fields)
        self.separator = separator
        self.interval = float(interval)

        self.lines_read      = 0
        self.lines_rejected  = 0
        self.records_written = 0
        self.read_errors     = 0

        k.setdefault('name', 'Rec_' + reader.input_source)
        super(Recorder, self).__init__(self._recording, **k)

    @property
    def reader(self):
        return self._reader

    @property
    def writer(self):
        return self._writer

    def is_recording(self):
        '''Return whether recorder is running and writing data rows.'''
        return self.started and self.gate.is_active()

    def hook_before(self):
        if not self._reader.is_open:
            self._reader.open()
        super(Recorder, self).hook_before()

    def loop_before(self):
        '''Hook function executed after start and before looping.'''
        logger.debug('Recorder %s started on %s.' % (self.name, self._reader))

    def loop_after(self):
        '''Hook function executed after looping but before close.'''
        self._reader.close()
        logger.debug('Recorder %s closed after %d lines, %d records.' % (
            self.name, self.lines_read, self.records_written))

    def loop_actions(self):
        time.sleep(self.interval)

    @duration(1)
    def _report_read_error(self, e):
        logger.error('Error reading from {}: {} ({} errors)'.format(
            self._reader.input_source, e, self.read_errors))

    def _recording(self):
        try:
            line = self._reader.next_line()
        except (serial.SerialException, OSError) as e:
            self.read_errors += 1
            self._report_read_error(e)
            return
        if line is None:
            return
        self.lines_read += 1
        line = clean_line(line)
        if not is_marker_line(line, self.marker):
            return
        if not self.gate.is_active():
            return
        fields = parse_payload(
            line, self.marker, self.num_fields, self.separator)
        if fields is None:
            self.lines_rejected += 1
            return
        if self._writer.append(create_data_record(fields)):
            self.records_written += 1


class RecorderConsole(object):
    '''
    Operator commands controlling a recorder: `start`, `stop` and `exit`.

    Each method returns a message for the operator. Runs are numbered from
    0 and the number only grows during the life of the console.

    Examples
    --------
    >>> console = RecorderConsole(recorder)
    >>> console.handle('start')
    'Recording started.'
    >>> console.handle('start')
    'Recording is already started.'
    >>> console.handle('status')
    "Unknown command. Use 'start', 'stop', or 'exit'."
    >>> console.handle('exit')
    'Exiting...\\nRecording stopped.'
    >>> console.exited
    True
    '''
    def __init__(self, recorder, writer=None):
        self.recorder = recorder
        self.gate = recorder.gate
        self.writer = writer or recorder.writer
        self.run_num = 0
        self.exited = False

    def start(self):
        '''Write a start row and open the gate.'''
        if self.gate.is_active():
            return 'Recording is already started.'
        label = RUN_LABEL.format(self.run_num)
        self.run_num += 1
        self.writer.append(create_marker_record(RECORD_START, label))
        self.gate.set(True)
        logger.debug('Recording %s started.' % label)
        return 'Recording started.'

    def stop(self):
        '''Close the gate and write a stop row.'''
        if not self.gate.is_active():
            return 'Recording is not active.'
        self.gate.set(False)
        self.writer.append(create_marker_record(RECORD_STOP, STOP_LABEL))
        logger.debug('Recording stopped.')
        return 'Recording stopped.'

    def exit(self):
        '''Stop recording if needed and mark console as exited.'''
        msg = ['Exiting...']
        if self.gate.is_active():
            msg.append(self.stop())
        self.exited = True
        return '\n'.join(msg)

    def handle(self, command):
        command = command.strip()
        logger.debug('Received command: `%s`' % command)
        if command not in COMMANDS:
            return COMMAND_HELP
        return getattr(self, command)()


# THE END
