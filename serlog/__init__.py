# coding=utf-8

'''
Serial telemetry Logger (SerLog)

Capture marker lines from a serial port and record their comma separated
payload into a CSV file while an operator keeps recording switched on.
'''

import os

__basedir__   = os.path.dirname(os.path.abspath(__file__))
__title__     = 'SerLog'
__summary__   = 'Serial telemetry to CSV recorder'
__url__       = 'https://github.com/serlog/serlog'
__author__    = 'SerLog contributors'
__email__     = 'serlog@users.noreply.github.com'
__version__   = '1.0.0'
__date__      = '2024.10.19'
__license__   = 'MIT'
__copyright__ = 'Copyright 2024 SerLog contributors'
__keywords__  = (
    'serial '
    'telemetry '
    'data-logger '
    'csv '
    'pyserial '
)


def version():
    return '{} {} ({})'.format(__title__, __version__, __date__)


from . import configs
from . import utils
from . import io

__all__ = ('io', 'utils', 'configs', 'version')

del os
