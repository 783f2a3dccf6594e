# coding=utf-8
#
# File: SerLog/tests/utils/__init__.py
