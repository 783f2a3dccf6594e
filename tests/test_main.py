#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/tests/test_main.py

# built-in
import os
import re
import signal
import threading
from io import StringIO

# requirements-dev.txt: testing: pytest
import pytest

from serlog.io import load_records
from serlog.constants import COMMAND_HELP, COMMAND_PROMPT
from serlog.recorder import __main__ as cli
from serlog.recorder.__main__ import main, make_parser
from . import send, wait_until

TS = r'\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}'


def types(output):
    if not os.path.exists(output):
        return []
    return [row[0] for row in load_records(output)[1]]


def run_in_thread(args, stdin):
    '''Run `main` in background, return the thread and a list for result.'''
    result = []
    thread = threading.Thread(
        target=lambda: result.append(main(args, stdin=stdin)), daemon=True)
    thread.start()
    return thread, result


@pytest.fixture
def commands(tmp_path):
    '''Write operator commands into a file used as stdin.'''
    files = []

    def make_stdin(*lines):
        fn = str(tmp_path / ('stdin-%d.txt' % len(files)))
        with open(fn, 'w') as f:
            f.write(''.join(_ + '\n' for _ in lines))
        files.append(open(fn, 'r'))
        return files[-1]
    yield make_stdin
    for f in files:
        f.close()


@pytest.fixture
def pipe():
    '''Stdin as a pipe kept open between writes, like a terminal.'''
    rfd, wfd = os.pipe()
    stdin, w = os.fdopen(rfd), os.fdopen(wfd, 'w')

    def write(*lines):
        w.write(''.join(_ + '\n' for _ in lines))
        w.flush()
    yield stdin, write
    w.close()
    stdin.close()


@pytest.fixture
def recorders(monkeypatch):
    '''Keep recorders created by `main` so that tests can feed them lines.'''
    instances = []

    class Recorder(cli.Recorder):
        def __init__(self, *a, **k):
            super(Recorder, self).__init__(*a, **k)
            instances.append(self)
    monkeypatch.setattr(cli, 'Recorder', Recorder)
    return instances


def test_parser():
    args = make_parser().parse_args(['-p', 'COM3', '-b', '9600', '--fsync'])
    assert args.port == 'COM3'
    assert args.baudrate == 9600
    assert args.fsync is True
    args = make_parser().parse_args([])
    assert args.port is None and args.baudrate is None and args.fsync is None


@pytest.mark.parametrize('baudrate', ['0', '-1', 'fast', '1.5'])
def test_invalid_baudrate(baudrate, output):
    with pytest.raises(SystemExit) as e:
        main(['-p', 'loop://', '-b', baudrate, '-o', output])
    assert e.value.code == 2
    assert not os.path.exists(output)


def test_invalid_config(monkeypatch, output):
    monkeypatch.setenv('SERIAL_BAUDRATE', 'fast')
    assert main(['-p', 'loop://', '-o', output]) == 1
    monkeypatch.setenv('SERIAL_BAUDRATE', '-9600')
    assert main(['-p', 'loop://', '-o', output]) == 1
    assert not os.path.exists(output)


def test_invalid_port(output):
    port = os.path.join(os.sep, 'dev', 'serlog-no-port')
    assert main(['-p', port, '-o', output]) == 1
    assert not os.path.exists(output)


def test_invalid_output(tmp_path):
    output = str(tmp_path / 'no' / 'such' / 'output.csv')
    assert main(['-p', 'loop://', '-o', output]) == 1


def test_session(commands, output, capsys):
    stdin = commands('start', 'start', 'Start', '  stop  ', 'start', 'exit')
    assert main(['-p', 'loop://', '-o', output], stdin=stdin) == 0
    out = capsys.readouterr().out
    assert 'Recording started.' in out
    assert 'Recording is already started.' in out
    assert COMMAND_HELP in out
    assert 'Recording stopped.' in out
    assert 'Exiting...' in out
    assert out.count(COMMAND_PROMPT) == 6

    header, rows = load_records(output)
    assert header == [
        'Type', 'Timestamp', 'Run/End', 'Value1', 'Value2', 'Value3', 'Value4']
    assert [row[0] for row in rows] == ['start', 'stop', 'start', 'stop']
    assert [row[2] for row in rows] == [
        'run 0', 'end of run', 'run 1', 'end of run']


def test_end_of_input(commands, output):
    '''Closing stdin works as `exit`.'''
    stdin = commands('start')
    assert main(['-p', 'loop://', '-o', output], stdin=stdin) == 0
    assert [row[0] for row in load_records(output)[1]] == ['start', 'stop']


def test_signal_restored(commands, output):
    handler = signal.getsignal(signal.SIGTERM)
    assert main(['-p', 'loop://', '-o', output], stdin=commands('exit')) == 0
    assert signal.getsignal(signal.SIGTERM) == handler
    assert load_records(output)[1] == []


def test_version(capsys):
    with pytest.raises(SystemExit) as e:
        main(['-V'])
    assert e.value.code == 0
    assert 'SerLog' in capsys.readouterr().out


@pytest.mark.parametrize('argv, fsync', [
    (['--fsync'], True), (['--fsync', 'no'], False), ([], None)])
def test_parser_fsync(argv, fsync):
    assert make_parser().parse_args(argv).fsync is fsync


def test_string_stdin(output, capsys):
    '''Stdin without a file descriptor is read as well.'''
    stdin = StringIO('start\nexit\n')
    assert main(['-p', 'loop://', '-o', output], stdin=stdin) == 0
    assert types(output) == ['start', 'stop']
    assert capsys.readouterr().out.count(COMMAND_PROMPT) == 2


def test_batched_commands(pipe, output):
    '''Commands arriving in one write are all handled without more input.'''
    stdin, write = pipe
    thread, result = run_in_thread(['-p', 'loop://', '-o', output], stdin)
    write('start', 'stop')
    assert wait_until(lambda: types(output) == ['start', 'stop'])
    write('start', 'exit')
    thread.join(5)
    assert not thread.is_alive()
    assert result == [0]
    assert types(output) == ['start', 'stop', 'start', 'stop']


def test_scenario(pipe, output, recorders):
    stdin, write = pipe
    thread, result = run_in_thread(['-p', 'loop://', '-o', output], stdin)
    assert wait_until(lambda: bool(recorders) and recorders[0].started)
    recorder = recorders[0]
    send(recorder, b'boot: wifi connected\n')
    write('start')
    assert wait_until(lambda: types(output) == ['start'])
    send(recorder, b'UDP packet contents: 100,1.0,2.0,3.0\n',
         'records_written')
    write('stop')
    assert wait_until(lambda: types(output) == ['start', 'data', 'stop'])
    write('exit')
    thread.join(5)
    assert not thread.is_alive()
    assert result == [0]

    with open(output) as f:
        lines = f.read().splitlines()
    assert len(lines) == 4
    assert lines[0] == 'Type,Timestamp,Run/End,Value1,Value2,Value3,Value4'
    assert re.match(r'^start,%s,run 0,,,,$' % TS, lines[1])
    assert re.match(r'^data,%s,,100,1\.0,2\.0,3\.0$' % TS, lines[2])
    assert re.match(r'^stop,%s,end of run,,,,$' % TS, lines[3])
