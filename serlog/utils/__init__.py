#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/utils/__init__.py

'''
Helpers shared by `serlog.io` and `serlog.recorder`: configuration lookup,
logging decorators, stdin reading with timeout and a virtual serial pair.
'''

# built-in
import os
import sys
import math
import time
import select
import logging
import threading
import configparser

# requirements.txt: necessary: decorator
from decorator import decorator

from .. import constants, configs

__basedir__ = os.path.dirname(os.path.abspath(__file__))

# log to the original stderr, tests and shells may replace sys.stderr
stderr = sys.stderr

# plain handler until `config_logger` is importable (see bottom of file)
logger = logging.getLogger(__name__)
_hdlr = logging.StreamHandler(stderr)
_hdlr.setFormatter(logging.Formatter('[{levelname}] {message}', style='{'))
logger.handlers = [_hdlr]
logger.setLevel(logging.INFO)
del _hdlr


# =============================================================================
# Values & strings

def debug_helper(v, name=None):
    '''Switch logger `name` (default caller's module) to DEBUG or INFO.'''
    name = name or get_caller_globals(1)['__name__']
    logging.getLogger(name).setLevel(
        logging.DEBUG if get_boolean(v) else logging.INFO)


def timestamp(ctime=None, fmt=configs.TIMEFORMAT):
    '''Local time string, default `%Y-%m-%d %H:%M:%S`'''
    return time.strftime(fmt, time.localtime(ctime))


def ensure_unicode(*a):
    '''
    ensure_unicode(s0, s1, ..., sn) ==> (u0, u1, ..., un)

    Bytes are decoded as UTF-8, other objects are passed to `str`.
    '''
    rst = [
        s.decode('utf8') if isinstance(s, bytes) else str(s) for s in a
    ]
    return rst[0] if len(rst) == 1 else rst


def format_size(*a, **k):
    '''
    Human-readable string of byte counts.

    Examples
    --------
    >>> format_size(1023)
    '1023 B'
    >>> format_size(0, 2048, base=1000)
    ['0 Byte', '2.0 KB']
    '''
    base = k.pop('base', 1024)
    units = k.pop('units', ('B', 'KB', 'MB', 'GB', 'TB'))
    decimals = k.pop('decimals', (0, 1, 2, 2, 2))
    rst = []
    for num in map(float, a):
        if not num:
            rst.append('0 Byte')
            continue
        exp = min(int(math.log(num, base)), len(units) - 1)
        rst.append('{:.{}f} {}'.format(
            num / base ** exp, decimals[exp], units[exp]))
    return rst[0] if len(rst) == 1 else rst


def get_boolean(v, table=constants.BOOLEAN_TABLE):
    '''Convert strings like `yes`, `Off`, `1` to boolean.'''
    if isinstance(v, bool):
        return v
    key = str(v).strip().lower()
    try:
        return table[key]
    except KeyError:
        raise ValueError('Invalid boolean value: {}'.format(v))


# =============================================================================
# Configuration

def load_configs(fn=None, *fns):
    '''
    Parse INI-style configuration files into `{section: {key: value}}`.

    Filenames may be given one by one or as a list. Missing files are
    skipped; if none of them exists, `configs.DEFAULT_CONFIG_FILES` are
    loaded instead.

    >>> load_configs('~/.serlog/serlog.conf')
    {'Serial': {'SERIAL_PORT': '/dev/ttyUSB0'}}
    '''
    filenames = list(fn) if isinstance(fn, (tuple, list)) else [fn]
    filenames = [
        os.path.expanduser(_) for _ in filenames + list(fns)
        if isinstance(_, str)
    ]
    filenames = list(filter(os.path.exists, filenames))
    parser = configparser.ConfigParser()
    parser.optionxform = str  # keys are case sensitive
    for fn in filenames or configs.DEFAULT_CONFIG_FILES:
        logger.debug('Loading config file `%s`' % fn)
        if fn not in parser.read(fn):
            logger.warning('Cannot load config file `%s`' % fn)
    return {s: dict(parser.items(s)) for s in parser.sections()}


def get_config(key, default=None, type=None, configfiles=None, section=None):
    '''
    Resolve a configuration value.

    Parameters
    ----------
    key : str
        Upper-case name such as `SERIAL_BAUDRATE`.
    default : optional
        Used when `key` is found nowhere.
    type : callable, optional
        Conversion applied on the result (int, float, get_boolean ...).
        A `None` result is never converted.
    configfiles : str | list of str, optional
        Extra configuration files to search.
    section : str, optional
        Only look into this section of `configfiles`.

    Notes
    -----
    Later sources override earlier ones:
    1. `serlog.configs` (defaults and default configuration files)
    2. `configfiles`
    3. environment variable named `key`
    '''
    value = getattr(configs, key, default)
    if configfiles is not None:
        sections = load_configs(configfiles)
        if section is not None:
            value = sections.get(section, {}).get(key, value)
        else:
            for options in sections.values():
                value = options.get(key, value)
    value = os.getenv(key, value)
    if type is None or value is None:
        return value
    return type(value)


# =============================================================================
# Decorators

@decorator
def verbose(func, *args, **kwargs):
    '''
    Let a function accept `verbose=LEVEL` to change level of
    `serlog.utils.logger` while it runs. LEVEL can be a level name or number;
    `True` means DEBUG and `False` means errors only.

    >>> @verbose
    ... def scan(verbose=None):
    ...     logger.debug('scanning')
    >>> scan(verbose='DEBUG')
    scanning
    >>> scan(verbose=False)
    '''
    level = None
    argnames, defaults = get_func_args(func)
    if 'verbose' in argnames:
        idx = argnames.index('verbose')
        offset = idx - len(argnames) + len(defaults)
        if offset >= 0:
            level = defaults[offset]
        if idx < len(args):
            level = args[idx]
    level = kwargs.pop('verbose', level)
    if level is None:
        return func(*args, **kwargs)
    if isinstance(level, bool):
        level = logging.DEBUG if level else logging.ERROR
    with TempLogLevel(logger, level):
        return func(*args, **kwargs)


def duration(sec, name=None, warning=None):
    '''
    Drop calls made within `sec` seconds since the last executed one.
    Dropped calls return None. Calls are grouped by `name` (default the
    decorated function itself) and `warning`, if given, is logged for each
    dropped call.

    >>> @duration(1)
    ... def report(e):
    ...     logger.error('read failed: %s' % e)
    >>> for _ in range(100):
    ...     report('device disconnected')
    ...     time.sleep(0.01)
    read failed: device disconnected
    '''
    last = {}

    @decorator
    def wrapper(func, *args, **kwargs):
        key = name or id(func)
        now = time.time()
        if key in last and now - last[key] < sec:
            if warning:
                logger.warning(warning)
            return
        last[key] = now
        return func(*args, **kwargs)
    return wrapper


# =============================================================================
# I/O

class TimeoutException(Exception):
    def __init__(self, msg=None, sec=None, src=None):
        self.msg, self.sec, self.src = msg, sec, src
        super(TimeoutException, self).__init__(msg, sec, src)

    def __str__(self):
        rst = 'Timeout'
        if self.sec:
            rst += '({}s)'.format(self.sec)
        if self.msg:
            rst += ': {}'.format(self.msg)
        if self.src:
            rst += ' within `{}`.'.format(self.src)
        return rst


def input(prompt=None, timeout=None, flist=None):
    '''
    input([prompt[, timeout[, flist]]]) -> str

    Like builtin `input`, but read from one of the file-like objects in
    `flist` (default stdin). With `timeout` None the first file is read
    directly and the call blocks until a whole line or end of file. With a
    timeout, wait at most `timeout` seconds for one of the files to become
    readable; this needs files backed by a descriptor `select` accepts.
    Trailing newline is removed.

    Raises
    ------
    TimeoutException
        Nothing to read within timeout.
    EOFError
        The readable file reached its end.
    '''
    if prompt is not None:
        sys.stdout.write(prompt)
        sys.stdout.flush()
    if flist is None:
        flist = [sys.stdin]
    elif not isinstance(flist, (tuple, list)):
        flist = [flist]
    if timeout is None:
        f = flist[0]
    else:
        readable = select.select(flist, [], [], timeout)[0]
        if not readable:
            raise TimeoutException(
                'nothing to read from {}'.format(flist), timeout,
                'serlog.utils.input')
        f = readable[0]
    if isinstance(f, int):
        f = os.fdopen(f)
    line = ensure_unicode(f.readline())
    if not line:
        raise EOFError('`%s` closed' % f)
    return line.rstrip('\r\n')


def check_input(prompt, answer={'y': True, 'n': False, '': True},
                timeout=60, times=3):
    '''
    Ask user until a valid answer is typed. Return the value mapped by the
    answer, the raw answer if `answer` is empty, or '' after `times` failed
    or timed out attempts.

    >>> check_input('Use port /dev/ttyUSB0? [Y/n] ')
    [1/3] Use port /dev/ttyUSB0? [Y/n] what
    Invalid input `what`! Choose from [ y | n |  ]
    [2/3] Use port /dev/ttyUSB0? [Y/n] y
    True
    '''
    choices = list(answer)
    for t in range(1, times + 1):
        try:
            rst = input('[%d/%d] %s' % (t, times, prompt), timeout / times)
        except TimeoutException:
            continue
        if not choices:
            return rst
        if rst in answer:
            return answer[rst]
        print('Invalid input `%s`! Choose from [ %s ]' % (
            rst, ' | '.join(choices)))
    return ''


@verbose
def virtual_serial(verbose=logging.INFO, timeout=120):
    '''
    Create two linked pseudo terminals, /dev/pts/X <==> /dev/pts/Y, acting
    like two serial ports connected by a cable. Handy for running the
    recorder without a device.

    Parameters
    ----------
    verbose : bool | int | str
        Log level while the link is alive. Transferred bytes are logged at
        DEBUG level.
    timeout : int
        Seconds before the link is broken automatically, -1 for never.

    Returns
    -------
    flag_close : threading.Event
        Set it to break the link.
    port1, port2 : str
        Names of the two ends.

    Examples
    --------
    >>> flag, port1, port2 = virtual_serial(timeout=-1)
    >>> # serlog -p /dev/pts/X
    >>> s = serial.Serial(port2, 115200)
    >>> s.write(b'UDP packet contents: 100,1.0,2.0,3.0\\n')
    37
    >>> flag.set()
    '''
    master1, slave1 = os.openpty()
    master2, slave2 = os.openpty()
    port1, port2 = os.ttyname(slave1), os.ttyname(slave2)
    peer = {master1: master2, master2: master1}
    name = {master1: port1, master2: port2}
    count = {master1: 0, master2: 0}
    logger.info('[Virtual Serial] %s <==> %s' % (port1, port2))

    def forward(flag_close):
        while not flag_close.is_set():
            for src in select.select(list(peer), [], [], 1)[0]:
                data = os.read(src, 1024)
                count[src] += os.write(peer[src], data)
                logger.debug('[%s --> %s] %r' % (
                    name[src], name[peer[src]], data))
        for fd in (master1, slave1, master2, slave2):
            os.close(fd)
        logger.info('[Virtual Serial] closed after %s / %s forwarded' % tuple(
            format_size(count[master1], count[master2])))

    flag_close = threading.Event()
    threading.Thread(target=forward, args=(flag_close, ), daemon=True).start()
    if timeout > 0:
        killer = threading.Timer(timeout, flag_close.set)
        killer.daemon = True
        killer.start()
    return flag_close, port1, port2


# =============================================================================
# Local Modules

from ._looptask import *                                           # noqa: W401

from ._logging import *                                            # noqa: W401
from ._logging import TempLogLevel, config_logger
logger = config_logger(logger, addhdlr=False, stream=stderr)

from ._resolve import *                                            # noqa: W401
from ._resolve import get_func_args, get_caller_globals

# THE END
