"""Process-relative monotonic clock.

Every reading is an integer count of nanoseconds since this module was first
imported. ``time.monotonic_ns()`` is immune to wall-clock changes, so readings
never go backwards.
"""

import threading
import time

from et.common.logger import log


NANOS_PER_SECOND = 10 ** 9
BASE_SLEEP_TIME = 1.0

# Saved once, when the program (well, this module) started
PROGRAM_START_TIME = time.monotonic_ns()

_default_sleep = BASE_SLEEP_TIME

# One event per thread currently inside sleep(); interrupt_sleep() sets them all. An interrupt that finds nobody
# asleep stays pending and cuts the next sleep() short instead.
_sleepers = set()
_sleepers_lock = threading.Lock()
_pending_interrupt = False


def to_seconds(ns):
    return ns / NANOS_PER_SECOND


def to_nanos(seconds):
    """Convert seconds to nanoseconds, truncating toward zero like an int cast."""
    return int(seconds * NANOS_PER_SECOND)


def now():
    """Nanoseconds elapsed since the clock origin."""
    return time.monotonic_ns() - PROGRAM_START_TIME


def now_seconds():
    return to_seconds(now())


def get_default_sleep():
    return _default_sleep


def set_default_sleep(seconds):
    global _default_sleep
    if seconds < 0:
        raise ValueError("Sleep time must be non-negative.")
    _default_sleep = float(seconds)
    log.debug(f"Default sleep time set to {_default_sleep} seconds")


def sleep(seconds=None):
    """Block the calling thread for at least ``seconds``.

    With no argument the configured default (1 second unless changed) is used.
    If another thread calls ``interrupt_sleep()`` the wait ends early (or does not
    happen at all, when the interrupt arrived while nobody was sleeping); that is
    logged and otherwise ignored, the caller is not told the sleep was cut short.
    """
    global _pending_interrupt
    if seconds is None:
        seconds = _default_sleep
    if seconds < 0:
        raise ValueError("Sleep time must be non-negative.")

    wake = threading.Event()
    with _sleepers_lock:
        interrupted = _pending_interrupt
        _pending_interrupt = False
        if not interrupted:
            _sleepers.add(wake)
    if interrupted:
        log.warning("Sleep interrupted")
        return
    try:
        # Event.wait can return a hair early on some platforms, so keep waiting out the remainder
        deadline = time.monotonic() + seconds
        remaining = seconds
        while remaining > 0:
            # Event.wait rejects timeouts above TIMEOUT_MAX, longer sleeps just go round the loop again
            if wake.wait(min(remaining, threading.TIMEOUT_MAX)):
                log.warning("Sleep interrupted")
                return
            remaining = deadline - time.monotonic()
    finally:
        with _sleepers_lock:
            _sleepers.discard(wake)


def interrupt_sleep():
    """Wake every thread blocked in ``sleep()``. Returns how many were woken.

    When no thread is sleeping the interrupt is kept and the next ``sleep()``
    returns immediately, much like a thread's interrupt flag.
    """
    global _pending_interrupt
    with _sleepers_lock:
        woken = len(_sleepers)
        for wake in _sleepers:
            wake.set()
        if not woken:
            _pending_interrupt = True
    if woken:
        log.debug(f"Interrupted {woken} sleeping thread(s)")
    else:
        log.debug("No thread sleeping, interrupt left pending")
    return woken


def clear_interrupt():
    """Drop a pending interrupt, if any. Returns whether one was pending."""
    global _pending_interrupt
    with _sleepers_lock:
        was_pending = _pending_interrupt
        _pending_interrupt = False
    return was_pending
