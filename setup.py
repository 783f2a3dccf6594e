#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/setup.py

from setuptools import setup, find_packages
import os
import re

__basedir__ = os.path.dirname(os.path.abspath(__file__))


def extract_requirements(fn):
    if not os.path.isfile(fn):
        return []
    with open(fn, 'r') as f:
        return [
            _.strip() for _ in f.readlines()
            if not _.startswith('#') and len(_.strip())
        ]


def extract_metadata(fn):
    '''Read `__xxx__ = '...'` lines without importing the package.'''
    with open(fn, 'r') as f:
        content = f.read()
    meta = dict(re.findall(r"^__(\w+)__\s*=\s*'([^']*)'", content, re.M))
    meta['doc'] = re.search(r"'''\n(.*?)'''", content, re.S).group(1)
    meta['keywords'] = ' '.join(re.findall(r"^\s+'(\S+) '$", content, re.M))
    return meta


serlog = extract_metadata(os.path.join(__basedir__, 'serlog', '__init__.py'))
reqmods = extract_requirements(os.path.join(__basedir__, 'requirements.txt'))
devmods = list(set(
    extract_requirements(os.path.join(__basedir__, 'requirements-dev.txt'))
).difference(reqmods))


extras = dict(
    install_requires=reqmods,
    extras_require={
        'test': devmods,
    },
    project_urls={
        'Source Code': serlog['url'],
        'Bug Tracker': os.path.join(serlog['url'], 'issues')
    },
    entry_points={
        'console_scripts': [
            'serlog = serlog.recorder.__main__:main',
        ]
    },
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.6',
)


setup(
    name         = serlog['title'],
    version      = serlog['version'],
    url          = serlog['url'],
    author       = serlog['author'],
    author_email = serlog['email'],
    license      = serlog['license'],
    description  = serlog['summary'],
    long_description = serlog['doc'].strip(),
    keywords     = serlog['keywords'],
    **extras
)
