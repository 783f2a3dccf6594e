#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/recorder/__init__.py

'''
Why you need a recorder?
------------------------
Devices print a lot on their serial console: boot messages, debug output and,
among them, telemetry lines like::

    UDP packet contents: 7551870,-2.45,-3.69,-9.15

Usually only some periods of telemetry are interesting. The recorder keeps
reading the port all the time in background, but only writes telemetry into
the CSV file between an operator's `start` and `stop`. Each period is a `run`
surrounded by a start row (`run 0`, `run 1`, ...) and a stop row
(`end of run`).

Develop target of subpackage `recorder`
---------------------------------------
- [x] Reading serial port never blocks the command prompt
- [x] Recording can be started and stopped any times
- [x] Let command listener occupy main thread
- [x] Rows from both threads never interleave, each row is flushed at once

This file will make recorder a module and provide class `Recorder`
'''

from ..utils import config_logger
logger = config_logger(__name__)
del config_logger

from .base import RecordingGate, Recorder, RecorderConsole  # noqa: W611

__all__ = ['RecordingGate', 'Recorder', 'RecorderConsole']
