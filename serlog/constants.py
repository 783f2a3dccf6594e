#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/constants.py

'''Define some constants here'''

__all__ = []

# =============================================================================
# CSV layout

CSV_HEADER = [
    'Type', 'Timestamp', 'Run/End', 'Value1', 'Value2', 'Value3', 'Value4'
]

RECORD_DATA  = 'data'
RECORD_START = 'start'
RECORD_STOP  = 'stop'

RUN_LABEL = 'run {:d}'
STOP_LABEL = 'end of run'

__all__ += [
    'CSV_HEADER', 'RECORD_DATA', 'RECORD_START', 'RECORD_STOP',
    'RUN_LABEL', 'STOP_LABEL',
]

# =============================================================================
# Operator commands

COMMAND_START = 'start'
COMMAND_STOP  = 'stop'
COMMAND_EXIT  = 'exit'
COMMANDS = (COMMAND_START, COMMAND_STOP, COMMAND_EXIT)

COMMAND_PROMPT = 'Enter a command ({}):\n'.format(', '.join(COMMANDS))
COMMAND_HELP = "Unknown command. Use 'start', 'stop', or 'exit'."

__all__ += [
    'COMMAND_START', 'COMMAND_STOP', 'COMMAND_EXIT', 'COMMANDS',
    'COMMAND_PROMPT', 'COMMAND_HELP',
]

# =============================================================================
# Terminal colors (ANSI escape sequences)

TERMINAL_COLOR2VALUE = {
    'reset':  '\033[0m',
    'white':  '\033[37m',
    'yellow': '\033[33m',
    'orange': '\033[38;5;208m',
    'bb-red': '\033[1;91m',
    'red':    '\033[31m',
}

__all__ += ['TERMINAL_COLOR2VALUE']

# =============================================================================
# Misc

BOOLEAN_TABLE = {
    u'0': False, u'1': True,
    u'no': False, u'yes': True,
    u'n': False, u'y': True,
    u'off': False, u'on': True,
    u'false': False, u'true': True,
    u'none': None,
}

__all__ += ['BOOLEAN_TABLE']

# THE END
