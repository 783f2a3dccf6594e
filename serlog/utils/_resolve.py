#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/utils/_resolve.py

'''Find things at runtime: serial devices, caller's namespace, arguments.'''

# built-in
import time
import inspect
import warnings

# requirements.txt: necessary: pyserial
from serial.tools.list_ports import comports

from . import check_input, logger

__all__ = [
    'find_serial_ports', 'get_caller_globals', 'get_func_args',
]


def find_serial_ports(timeout=3):
    '''
    Scan serial devices for at most `timeout` seconds and return the device
    name. If several devices are found, user chooses one of them on stdin.

    Raises
    ------
    RuntimeError
        No serial device found.
    '''
    NAME = '[Find Serial Ports] '
    ports = comports()
    while not ports and timeout > 0:
        logger.debug('{}no device yet, rescan in 1s ({}s left)'.format(
            NAME, timeout))
        time.sleep(1)
        timeout -= 1
        ports = comports()
    if not ports:
        raise RuntimeError(NAME + 'No serial port available! Abort.')
    if len(ports) == 1:
        port = ports[0]
    else:
        answer = {str(i): p for i, p in enumerate(ports)}
        answer[''] = ports[0]
        port = check_input(
            '{}Choose one of the available ports:\n{}\nport num (default 0): '
            .format(NAME, '\n'.join(
                '    %d %s - %s' % (i, p.device, p.description)
                for i, p in enumerate(ports))),
            answer) or ports[0]
    logger.info('{}Select port `{}` -- {}'.format(
        NAME, port.device, port.description))
    return port.device


def get_caller_globals(depth=0):
    '''
    Global namespace of the frame `depth` levels above the function calling
    this one. CPython only.

    >>> def whoami():
    ...     return get_caller_globals()['__name__']
    >>> whoami()
    '__main__'
    '''
    frame = inspect.currentframe()
    if frame is None:
        warnings.warn(RuntimeWarning('Only CPython implements stack frame.'))
        return globals()
    for i in range(depth + 1):
        if frame.f_back is None:
            warnings.warn(RuntimeWarning(
                'No outer frame of {} at depth {}!'.format(frame, i)))
            break
        frame = frame.f_back
    return frame.f_globals


def get_func_args(func):
    '''
    Names of positional-or-keyword arguments and their default values.

    >>> get_func_args(lambda x, y=1, verbose=None, *a, **k: None)
    (['x', 'y', 'verbose'], (1, None))
    '''
    names, defaults = [], []
    for name, param in inspect.signature(func).parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        names.append(name)
        if param.default is not param.empty:
            defaults.append(param.default)
    return names, tuple(defaults)


# THE END
