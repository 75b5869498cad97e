"""Bookkeeping of which timers are listed and which are running.

A registry holds two insertion-ordered lists: every timer that has not been
completed yet, and the subset that is currently active.  It only decides what
shows up in listings; callers keep their own references to their timers.

Timers change the lists themselves as they move through their states, through
the underscore methods below.  Nothing else is expected to call those.
"""

import threading

from et.common.logger import log


class TimerRegistry:

    def __init__(self, name="default"):
        self.name = name
        self._timers = []
        self._active = []
        self._count = 0
        # Guards both lists and the counter
        self._lock = threading.RLock()

    def __repr__(self):
        return f"TimerRegistry(name={self.name!r}, count={self._count}, live={len(self._timers)}, active={len(self._active)})"

    #region === Queries ===

    def count(self):
        """Total number of timers ever created in this registry.

        This is a creation counter, it is never decremented when a timer completes.
        """
        return self._count

    def timers(self):
        with self._lock:
            return tuple(self._timers)

    def active_timers(self):
        with self._lock:
            return tuple(self._active)

    # Every non-completed timer's description, in the order they were created.
    def describe_all(self):
        with self._lock:
            return "".join(str(timer) for timer in self._timers)

    # Same as describe_all(), but only for the timers currently running, in the order they were (re)activated.
    def describe_active(self):
        with self._lock:
            return "".join(str(timer) for timer in self._active)

    #endregion === Queries ===

    #region === Membership, driven by Timer transitions ===

    def _register(self, timer):
        with self._lock:
            self._timers.append(timer)
            self._count += 1

    def _activate(self, timer):
        with self._lock:
            if timer not in self._active:
                self._active.append(timer)

    def _deactivate(self, timer):
        with self._lock:
            if timer in self._active:
                self._active.remove(timer)

    def _retire(self, timer):
        with self._lock:
            if timer in self._timers:
                self._timers.remove(timer)
            if timer in self._active:
                self._active.remove(timer)
        log.debug(f"Retired timer {timer.id} from registry '{self.name}'")

    #endregion === Membership, driven by Timer transitions ===


#region === Process-wide default registry ===

_default = TimerRegistry()

def default_registry():
    return _default

# Swaps in a brand new default registry (empty lists, count back to 0). Timers created before the reset keep pointing
# at the old registry.
def reset_default_registry():
    global _default
    _default = TimerRegistry()
    log.debug("Default timer registry reset")
    return _default

def count():
    return _default.count()

def describe_all():
    return _default.describe_all()

def describe_active():
    return _default.describe_active()

#endregion === Process-wide default registry ===
