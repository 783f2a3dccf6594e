#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/io/writers.py

'''Append-only record writers shared by several threads.'''

# built-in
import os
import csv
import threading

from ..configs import OUTPUT_FSYNC
from ..constants import CSV_HEADER
from ..utils import get_boolean
from . import logger

__all__ = ['CSVRecordWriter']


class CSVRecordWriter(object):
    '''
    Write rows into a freshly created CSV file. Old content is discarded.

    Only one row is written at a time across all threads: each `append`
    holds the lock for exactly one row and returns after the row has been
    flushed to the operating system (and fsync-ed to disk if `fsync`).

    Parameters
    ----------
    filename : str
        Output CSV filename. Parent directory must exist.
    header : list of str, optional
        Written once as the first row. Default `constants.CSV_HEADER`.
    fsync : bool, optional
        Whether to call `os.fsync` after each flush.

    Raises
    ------
    OSError
        If the file cannot be created or the header cannot be written.

    Examples
    --------
    >>> writer = CSVRecordWriter('/tmp/output.csv')
    >>> writer.append(['start', '2024-10-19 12:00:00', 'run 0', '', '', '', ''])
    True
    >>> writer.close()
    >>> print(open('/tmp/output.csv').read())
    Type,Timestamp,Run/End,Value1,Value2,Value3,Value4
    start,2024-10-19 12:00:00,run 0,,,,
    '''
    name = 'CSVRecordWriter'

    def __init__(self, filename, header=CSV_HEADER, fsync=OUTPUT_FSYNC):
        self.filename = os.path.abspath(os.path.expanduser(filename))
        self.fsync = get_boolean(fsync)
        self.records = 0
        self.write_errors = 0
        self._lock = threading.Lock()
        self._fobj = open(self.filename, 'w', newline='')
        self._writer = csv.writer(self._fobj, lineterminator='\n')
        try:
            self._write(header)
        except Exception:
            self._fobj.close()
            raise
        logger.debug('{} `{}` created.'.format(self.name, self.filename))

    def __repr__(self):
        return '<%s %s (%d records) at 0x%x>' % (
            self.name, self.filename, self.records, id(self))

    @property
    def closed(self):
        return self._fobj.closed

    def _write(self, row):
        self._writer.writerow(row)
        self._fobj.flush()
        if self.fsync:
            os.fsync(self._fobj.fileno())

    def append(self, record):
        '''
        Write one row and flush. Failure is logged and returns False so
        callers can go on with next record.
        '''
        with self._lock:
            try:
                self._write(record)
            except (OSError, ValueError, csv.Error) as e:
                self.write_errors += 1
                logger.error('{} failed to write record {} to `{}`: {}'
                             .format(self.name, record, self.filename, e))
                return False
            self.records += 1
            return True

    def close(self):
        with self._lock:
            if self._fobj.closed:
                return
            self._fobj.close()
        logger.debug('{} `{}` closed with {} records.'.format(
            self.name, self.filename, self.records))

    def __enter__(self):
        return self

    def __exit__(self, *a):
        self.close()


# THE END
