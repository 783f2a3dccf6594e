#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/io/__init__.py

from ..utils import config_logger
logger = config_logger()
del config_logger

from .base import *                                                # noqa: W401
from .readers import *                                             # noqa: W401
from .writers import *                                             # noqa: W401
