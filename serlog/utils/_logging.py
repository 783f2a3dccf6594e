#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/utils/_logging.py

'''Logger configuration shared by all SerLog subpackages.'''

# built-in
import os
import sys
import types
import logging

from ..configs import LOGFORMAT, DATEFORMAT
from ..constants import TERMINAL_COLOR2VALUE
from ._resolve import get_caller_globals

__all__ = ['SerLogFormatter', 'TempLogLevel', 'config_logger']


class SerLogFormatter(logging.Formatter):
    '''
    Formatter understanding two extra fields in `{`-style format strings:
    `{start}` and `{reset}`, replaced by ANSI color codes chosen by record
    level. Without color they are replaced by empty strings.
    '''
    LEVEL2COLOR = {
        logging.DEBUG:    'white',
        logging.INFO:     'yellow',
        logging.WARNING:  'orange',
        logging.ERROR:    'bb-red',
        logging.CRITICAL: 'red',
    }

    def __init__(self, fmt=None, datefmt=DATEFORMAT, style='{', useColor=True):
        fmt = fmt or '{message}'
        if style == '{':
            if not useColor:
                fmt = fmt.replace('{start}', '').replace('{reset}', '')
            elif '{start}' not in fmt:
                fmt = '{start}' + fmt + '{reset}'
        self._useColor = useColor and style == '{'
        super(SerLogFormatter, self).__init__(fmt, datefmt, style)

    def formatMessage(self, record):
        if not self._useColor:
            return super(SerLogFormatter, self).formatMessage(record)
        color = self.LEVEL2COLOR.get(record.levelno, 'white')
        fields = types.SimpleNamespace(**record.__dict__)
        fields.start = TERMINAL_COLOR2VALUE[color]
        fields.reset = TERMINAL_COLOR2VALUE['reset']
        return self._style.format(fields)


def config_logger(name=None, level=logging.INFO, format=LOGFORMAT, **kwargs):
    '''
    Get a logger and give it a handler with SerLog's format.

    Parameters
    ----------
    name : str | Logger, optional
        Default `__name__` of the caller's module, so a plain
        `logger = config_logger()` at module level does the right thing.
        Call it directly, a wrapper function would name the logger after
        the module defining the wrapper.
    level : int | str, optional
        Logger level, default INFO.
    format : str, optional
        Handler format, default `serlog.configs.LOGFORMAT`.

    Keyword arguments (similar to `logging.basicConfig`):
        datefmt, style, filename, filemode, stream, handler, hdlrlevel,
        addhdlr: append the new handler (default) or replace all handlers.

    Colorful output is used only when logging to a terminal.

    Examples
    --------
    >>> logger = config_logger(level='DEBUG', filename='~/serlog.log')
    >>> logger = config_logger('serlog.io', addhdlr=False, stream=sys.stdout)
    '''
    if isinstance(name, logging.Logger):
        logger = name
    elif name is None or isinstance(name, str):
        logger = logging.getLogger(
            name or get_caller_globals(1).get('__name__'))
    else:
        raise TypeError('Invalid name of logger: {}'.format(name))
    logger.setLevel(level)

    datefmt   = kwargs.pop('datefmt', DATEFORMAT)
    style     = kwargs.pop('style', '{')
    addhdlr   = kwargs.pop('addhdlr', True)
    hdlrlevel = kwargs.pop('hdlrlevel', None)
    filename  = kwargs.pop('filename', None)
    handler   = kwargs.pop('handler', None)

    if filename is not None:
        filename = os.path.abspath(os.path.expanduser(filename))
        os.makedirs(os.path.dirname(filename), 0o775, exist_ok=True)
        hdlr = (handler or logging.FileHandler)(
            filename, mode=kwargs.pop('filemode', 'a'), **kwargs)
    elif handler is not None:
        hdlr = handler(**kwargs)
    else:
        hdlr = logging.StreamHandler(kwargs.pop('stream', sys.stderr))
    if hdlrlevel is not None:
        hdlr.setLevel(hdlrlevel)

    isatty = getattr(getattr(hdlr, 'stream', None), 'isatty', bool)
    hdlr.setFormatter(SerLogFormatter(
        format, datefmt, style, filename is None and isatty()))
    if addhdlr:
        logger.addHandler(hdlr)
    else:
        logger.handlers = [hdlr]
    return logger


class TempLogLevel(object):
    '''
    Context manager changing level of a logger and restoring it on exit.

    Examples
    --------
    >>> with TempLogLevel(logger, 'WARNING'):
    ...     logger.info('muted')
    ...     logger.warning('still shown')
    still shown

    Logger can be omitted, then the logger named after the caller's module
    is used:
    >>> with TempLogLevel('DEBUG'):
    ...     pass
    '''
    __slots__ = ('_logger', '_level', '_saved')

    def __init__(self, logger=None, level='INFO'):
        if not isinstance(logger, logging.Logger):
            logger, level = None, logger if logger is not None else level
        self._logger = logger or logging.getLogger(
            get_caller_globals(1)['__name__'])
        self._level = logging._checkLevel(level)
        self._saved = None

    def __enter__(self):
        self._saved = self._logger.level
        self._logger.setLevel(self._level)
        return self._logger

    def __exit__(self, *a):
        self._logger.setLevel(self._saved)


# THE END
