import itertools
from enum import Enum

from et.common.logger import log
from et.core import clock
from et.core.registry import default_registry


# INACTIVE: listed in its registry, not running.
# ACTIVE: listed in its registry and in the registry's active list, running.
# COMPLETED: finished for good and dropped from both lists. Nothing changes after this.
class TimerState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    COMPLETED = "completed"


# Ids come from one process-wide sequence, so they are never reused, even across registry resets.
_ids = itertools.count(1)


# This object tracks one span of monotonic time. Times are stored as nanosecond offsets from the clock origin
# (see et.core.clock), 0 meaning "never happened".
class Timer:

    # Creates an INACTIVE timer and lists it in the registry. When a state is given, the timer is immediately driven
    # there through the normal transitions.
    def __init__(self, state=None, registry=None):
        self._registry = registry if registry is not None else default_registry()
        self._state = TimerState.INACTIVE
        self._start_time = 0
        self._end_time = 0
        self._id = next(_ids)
        self._registry._register(self)
        log.debug(f"Initialized new timer {self._id} in registry '{self._registry.name}'")

        if state == TimerState.ACTIVE:
            self.start()
        elif state == TimerState.INACTIVE:
            self.end()
        elif state == TimerState.COMPLETED:
            self.complete()

    # Builds a new timer (new id, same registry) that reproduces other's state and timestamps. The timestamps are
    # written straight into the fields on purpose: this copies a snapshot, it is not a transition, so the usual
    # rules about when start/end may change do not apply. Copying a running timer captures its end time as of now.
    @classmethod
    def copy_of(cls, other):
        copy = cls(other.state, registry=other.registry)
        copy._start_time = other.start_time
        copy._end_time = other.end_time
        return copy

    #region === Transitions ===

    # Starts (or restarts) the timer. A running timer is ended first, so restarting begins a brand new span.
    def start(self):
        if self._state == TimerState.COMPLETED:
            log.debug(f"Ignored start() on completed timer {self._id}")
            return
        self.end()
        self._registry._activate(self)
        self._state = TimerState.ACTIVE
        self._start_time = clock.now()
        log.debug(f"Started timer {self._id} at {self._start_time}")

    # Picks a paused timer back up. The start time is shifted back by the elapsed time so far, which keeps that time
    # counted.
    def resume(self):
        if self._state in (TimerState.COMPLETED, TimerState.ACTIVE):
            log.debug(f"Ignored resume() on {self._state.name} timer {self._id}")
            return
        self._start_time = clock.now() - self.elapsed
        self._state = TimerState.ACTIVE
        self._registry._activate(self)
        log.debug(f"Resumed timer {self._id}, start shifted to {self._start_time}")

    # Stops a running timer and records the end time. Does nothing unless the timer is ACTIVE.
    def end(self):
        if self._state != TimerState.ACTIVE:
            return
        self._registry._deactivate(self)
        self._state = TimerState.INACTIVE
        self._end_time = clock.now()
        log.debug(f"Ended timer {self._id} at {self._end_time}")

    # Ends the timer and retires it for good; it disappears from its registry's listings.
    def complete(self):
        if self._state == TimerState.COMPLETED:
            return
        self.end()
        self._state = TimerState.COMPLETED
        self._registry._retire(self)
        log.debug(f"Completed timer {self._id}")

    #endregion === Transitions ===

    #region === Queries ===

    @property
    def id(self):
        return self._id

    @property
    def state(self):
        return self._state

    @property
    def registry(self):
        return self._registry

    @property
    def start_time(self):
        return self._start_time

    @property
    def start_time_seconds(self):
        return clock.to_seconds(self.start_time)

    # While running, the end is "now". The stored value is left alone, so reading never changes the timer.
    @property
    def end_time(self):
        if self._state == TimerState.ACTIVE:
            return clock.now()
        return self._end_time

    @property
    def end_time_seconds(self):
        return clock.to_seconds(self.end_time)

    # Time so far. While ACTIVE this keeps growing, so two reads in a row will differ.
    @property
    def elapsed(self):
        return self.end_time - self._start_time

    @property
    def elapsed_seconds(self):
        return clock.to_seconds(self.elapsed)

    #endregion === Queries ===

    #region === Dunder methods ===

    def __eq__(self, other):
        if not isinstance(other, Timer):
            return NotImplemented
        return self._id == other._id

    def __hash__(self):
        return hash(self._id)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.end()

    def __repr__(self):
        return f"Timer(id={self._id}, state={self._state.name})"

    def __str__(self):
        # One end_time reading feeds both the End and Elapsed columns, so they agree on a running timer
        end_time = self.end_time
        return (
            f"Timer: {self._id}\n"
            f"\t[Start(s): {clock.to_seconds(self._start_time)} | End(s): {clock.to_seconds(end_time)} | "
            f"Elapsed(s): {clock.to_seconds(end_time - self._start_time)}]\n"
            f"\t[State: {self._state.name}]\n"
        )

    #endregion === Dunder methods ===
