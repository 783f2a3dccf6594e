#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/configs.py

'''
Everything about configuration. When imported, this module will automatically
load configs from local configuration files.

Configuration files are INI-style, section names are ignored::

    [serial]
    SERIAL_PORT = /dev/ttyUSB0
    SERIAL_BAUDRATE = 115200

    [output]
    OUTPUT_FILE = ~/telemetry.csv
'''

# built-in
import os
import sys
import configparser

from . import __basedir__
__module__ = sys.modules[__name__]  # reference to this module


# =============================================================================
# Default configuration

# example: [C 12:26:33.120 serlog.recorder.base:445] abort!
LOGFORMAT = (
    '{start}'
    '[{levelname[0]} {asctime}.{msecs:03.0f} {name}.{module}:{lineno}]'
    '{reset}'
    ' {message}'
)
DATEFORMAT = '%H:%M:%S'

# Timestamp written into every CSV row (local time)
TIMEFORMAT = '%Y-%m-%d %H:%M:%S'

# Serial connection. Port is `None` until the user or a config file tells.
SERIAL_PORT = None
SERIAL_BAUDRATE = 115200
SERIAL_TIMEOUT = 0.1

# Recording
OUTPUT_FILE = 'output.csv'
OUTPUT_FSYNC = False
MARKER_TOKEN = 'UDP packet contents:'
PAYLOAD_SEPARATOR = ':'
PAYLOAD_FIELDS = 4
LOOP_INTERVAL = 0.01

DIR_SRC = __basedir__
DIR_BASE = os.path.dirname(__basedir__)  # Suppose `serlog` is not installed


# =============================================================================
# Update runtime configurations from config files.

DEFAULT_CONFIG_FILES = list(filter(os.path.exists, [
    os.path.join(DIR_BASE, 'files/serlog.conf'),
    (os.path.expandvars('${APPDATA}/serlog.conf') if os.name == 'nt'
     else '/etc/serlog/serlog.conf'),
    os.path.expanduser('~/.serlog/serlog.conf')
]))

cp = configparser.ConfigParser()
cp.optionxform = str
cp.read(DEFAULT_CONFIG_FILES)

# DO NOT use `globals().update(cp.items)` here. It may cause recursive loop
for _ in cp.sections():
    __module__.__dict__.update(cp.items(_))

del os, sys, cp, configparser
