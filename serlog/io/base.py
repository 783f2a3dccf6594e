#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/io/base.py

'''
Parse telemetry lines and build CSV rows.

A telemetry line looks like::

    [noise ...]UDP packet contents: 7551870,-2.45,-3.69,-9.15

Everything after the first separator (`:`) following the marker token is
the payload, which must split into exactly `PAYLOAD_FIELDS` comma separated
fields. Fields are kept as raw text.
'''

# built-in
import csv

from ..utils import timestamp
from ..configs import MARKER_TOKEN, PAYLOAD_SEPARATOR, PAYLOAD_FIELDS
from ..constants import (
    CSV_HEADER, RECORD_DATA, RECORD_START, RECORD_STOP
)
from . import logger

__all__ = [
    'clean_line', 'is_marker_line', 'parse_payload',
    'create_data_record', 'create_marker_record', 'load_records',
]


def clean_line(line):
    '''Strip surrounding whitespace and drop all tab characters.'''
    return line.strip().replace('\t', '')


def is_marker_line(line, marker=MARKER_TOKEN):
    return marker in line


def parse_payload(line, marker=MARKER_TOKEN, num_fields=PAYLOAD_FIELDS,
                  separator=PAYLOAD_SEPARATOR):
    '''
    Extract payload fields from a raw line.

    Parameters
    ----------
    line : str
        Raw line read from data stream, newline may be included.
    marker : str, optional
        Token identifying telemetry lines. Default `configs.MARKER_TOKEN`.
    num_fields : int, optional
        Expected number of comma separated fields. Default 4.
    separator : str, optional
        Payload starts after the first separator found at or after the
        marker. Default `:`.

    Returns
    -------
    fields : list of str | None
        None if the line is noise (no marker) or the payload is malformed.
        Malformed payloads are reported by a warning.

    Examples
    --------
    >>> parse_payload('UDP packet contents: 100,1.0,2.0,3.0')
    ['100', '1.0', '2.0', '3.0']
    >>> parse_payload('boot ok') is None
    True
    >>> parse_payload('UDP packet contents: 1,2,3') is None
    Unexpected number of fields (expected 4, got 3). Data: 1,2,3
    True
    '''
    num_fields = int(num_fields)
    data = clean_line(line)
    idx = data.find(marker)
    if idx < 0:
        return None
    _, sep, payload = data[idx:].partition(separator)
    if not sep:
        logger.warning('Separator `{}` not found in data: {}'.format(
            separator, data))
        return None
    payload = payload.strip()
    fields = payload.split(',')
    if len(fields) != num_fields:
        logger.warning(
            'Unexpected number of fields (expected {}, got {}). Data: {}'
            .format(num_fields, len(fields), payload))
        return None
    return fields


def create_data_record(fields, ts=None):
    '''
    Build a `data` row: type, timestamp, empty run label and the values.
    '''
    return [RECORD_DATA, ts or timestamp(), ''] + list(fields)


def create_marker_record(kind, label, ts=None, num_fields=PAYLOAD_FIELDS):
    '''
    Build a `start` / `stop` row: type, timestamp, label and empty values.
    '''
    if kind not in (RECORD_START, RECORD_STOP):
        raise ValueError('Invalid marker record type: `{}`'.format(kind))
    return [kind, ts or timestamp(), label] + [''] * int(num_fields)


def load_records(fn):
    '''
    Load rows recorded by `serlog.io.CSVRecordWriter`.

    Returns
    -------
    header : list of str
    rows : list of list of str
    '''
    with open(fn, 'r', newline='') as f:
        rows = list(csv.reader(f))
    if not rows:
        return [], []
    header, rows = rows[0], rows[1:]
    if header != CSV_HEADER:
        logger.warning('Unknown header in `{}`: {}'.format(fn, header))
    return header, rows


# THE END
