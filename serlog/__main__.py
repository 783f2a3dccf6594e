#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/__main__.py

'''Type `python -m serlog -h` for usage, see `serlog.recorder.__main__`.'''

import sys

from .recorder.__main__ import main

if __name__ == '__main__':
    sys.exit(main())
