#!/usr/bin/env python3
# coding=utf-8
#
# File: SerLog/serlog/utils/_looptask.py

'''Background tasks repeating one function until closed.'''

# built-in
import atexit
import weakref
import threading
import traceback

from . import logger

__all__ = ['LoopTaskMixin', 'LoopTaskInThread', 'SkipIteration']

_tasks = weakref.WeakSet()


@atexit.register
def _close_tasks():
    '''Close tasks still running at interpreter exit.'''
    for task in list(_tasks):
        if not task.started:
            continue
        logger.debug('Close %s at exit' % task)
        try:
            task.close()
        except Exception:
            logger.error(traceback.format_exc())


class SkipIteration(Exception):
    '''Raise inside a loop function to end current iteration with warning.'''
    pass


class LoopTaskMixin(object):
    '''
    Stream control for a function called over and over: `start` and
    `close`. Status is either `closed` or `started`.

    Where the loop runs is up to subclasses: `hook_before` is called by
    `start` and should arrange `loop(func)` to be called, in current thread
    or another one. Remember to call `LoopTaskMixin.__init__(self)` if you
    define your own `__init__`.

    Hooks
    -----
    hook_before / hook_after : outside the loop, by `start` / `close`
    loop_before / loop_after : inside the loop, before first and after last
    loop_actions             : after each iteration, even a skipped one

    See Also
    --------
    serlog.utils.LoopTaskInThread
    serlog.recorder.Recorder
    '''

    def __init__(self):
        self._loop_closing = threading.Event()
        self._loop_status = 'closed'
        _tasks.add(self)

    @property
    def status(self):
        return self._loop_status

    @property
    def started(self):
        return self._loop_status != 'closed'

    def start(self):
        if self.started:
            return False
        self._loop_closing.clear()
        self._loop_status = 'started'
        try:
            self.hook_before()
        except Exception:
            logger.error(traceback.format_exc())
            self.close()
            return False
        return True

    def close(self):
        if not self.started:
            return False
        try:
            self.hook_after()
        except Exception:
            logger.error(traceback.format_exc())
        self._loop_status = 'closed'
        self._loop_closing.set()
        return True

    def hook_before(self):
        pass

    def hook_after(self):
        pass

    def loop_before(self):
        pass

    def loop_after(self):
        pass

    def loop_actions(self):
        pass

    def loop(self, func, args=(), kwargs={}):
        try:
            self.loop_before()
        except Exception:
            logger.error(traceback.format_exc())
            return self.close()
        try:
            while not self._loop_closing.is_set():
                try:
                    func(*args, **kwargs)
                except SkipIteration as e:
                    logger.warning(e)
                self.loop_actions()
        except KeyboardInterrupt:
            logger.info('KeyboardInterrupt detected.')
        except Exception:
            logger.error(traceback.format_exc())
        try:
            self.loop_after()
        except Exception:
            logger.error(traceback.format_exc())
        if self.started:
            self.close()


class LoopTaskInThread(threading.Thread, LoopTaskMixin):
    '''
    Call a function repeatedly in a thread.

    Parameters
    ----------
    func : callable
        Called with `args` and `kwargs` in each iteration, return value is
        ignored.
    before, after : callable, optional
        Replace `loop_before` / `loop_after` hooks.
    name : str, optional
        Thread name. Default `LoopTask(<function name>)`.
    daemon : bool, optional
        Default True, so that an unclosed task never blocks interpreter exit.

    Examples
    --------
    >>> task = LoopTaskInThread(lambda: time.sleep(1) or print('tick'))
    >>> task
    <LoopTask(<lambda>) closed daemon>
    >>> task.start()
    True
    tick
    tick
    >>> task.start()
    False
    >>> task.close()
    True

    Notes
    -----
    A closed task can be started again, a new thread is created for it.
    '''

    def __init__(self, func, before=None, after=None, args=(), kwargs={},
                 name=None, daemon=True):
        if callable(before):
            self.loop_before = before
        if callable(after):
            self.loop_after = after
        self._loop_func = func
        self._loop_args = (args, kwargs)
        self._thread_kwargs = {
            'name': name or 'LoopTask(%s)' % getattr(func, '__name__', func),
            'daemon': daemon,
        }
        threading.Thread.__init__(self, **self._thread_kwargs)
        LoopTaskMixin.__init__(self)

    def __repr__(self):
        extra = ' daemon' if self.daemon else ''
        if self.ident is not None:
            extra += ' %s' % self.ident
        return '<%s %s%s>' % (self.name, self.status, extra)

    def start(self):
        return LoopTaskMixin.start(self)

    def hook_before(self):
        if self.ident is not None:  # thread of last run has been used
            threading.Thread.__init__(self, **self._thread_kwargs)
        threading.Thread.start(self)

    def run(self):
        self.loop(self._loop_func, *self._loop_args)
        logger.debug('%s stopped.' % self)


# THE END
