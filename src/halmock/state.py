"""
Completion Detector State Machine
=================================
State machine ensuring an expectation queue is verified exactly once per
load cycle.

The detector shares its lifetime with the queue it guards: every cloned
handle sees the same detector, so checking through any one of them retires
the obligation for all of them.

States:
    RESET --LOAD--> PENDING --CHECK--> CHECKED
    {PENDING, CHECKED} --LOAD--> PENDING
    CHECKED --CHECK--> fatal (DoneCallError)
    PENDING --RELEASE--> fatal (MissingDoneError), unless unwinding
    PENDING --ABANDON--> ABANDONED (scope left because of an exception)

Module: halmock.state
Version: 1.0.0
"""

from enum import Enum

from halmock.core.errors import DoneCallError, MissingDoneError
from halmock.utils.log import get_logger

logger = get_logger(__name__)


class DetectorState(Enum):
    """Completion detector states."""
    RESET = "reset"
    PENDING = "pending"
    CHECKED = "checked"
    ABANDONED = "abandoned"


class DetectorTrigger:
    """
    Detector transition triggers.

    These represent events that cause state transitions.
    """
    # Expectations installed (create, replace, append)
    LOAD = "LOAD"

    # Completion check performed
    CHECK = "CHECK"

    # Implicit check performed by a replace; never fails on a second check
    IMPLICIT_CHECK = "IMPLICIT_CHECK"

    # Owning scope exited with an exception in flight
    ABANDON = "ABANDON"

    # Last handle released
    RELEASE = "RELEASE"


class DetectorTransition:
    """
    Represents a detector state transition event.

    Attributes:
        from_state: Previous state
        to_state: New state
        trigger: Event that caused the transition
    """

    def __init__(self, from_state, to_state, trigger):
        self.from_state = from_state
        self.to_state = to_state
        self.trigger = trigger

    def __repr__(self):
        return (
            f"DetectorTransition({self.from_state.value} -> "
            f"{self.to_state.value} [{self.trigger}])"
        )


class CompletionDetector:
    """
    Tracks whether done() was called since the last load.

    The detector itself performs no locking; it is always driven while the
    owning SharedExpectations lock is held.

    Usage:
        >>> detector = CompletionDetector()
        >>> detector.load()
        >>> detector.check()
        >>> detector.is_checked()
        True
        >>> detector.check()
        Traceback (most recent call last):
        ...
        halmock.core.errors.DoneCallError: The .done() method was called twice!
    """

    def __init__(self, description="mock"):
        """
        Initialize detector in the RESET state.

        Args:
            description: Human-readable name used in diagnostics
        """
        self.description = description
        self._state = DetectorState.RESET
        self._callbacks = []

    def get_current_state(self):
        """Get current DetectorState."""
        return self._state

    def is_checked(self):
        """Check whether the obligation for the current load is retired."""
        return self._state in (DetectorState.CHECKED, DetectorState.ABANDONED)

    def is_pending(self):
        """Check whether a completion check is still owed."""
        return self._state == DetectorState.PENDING

    def on_state_change(self, callback):
        """
        Register callback for state change events.

        Args:
            callback: Function(transition: DetectorTransition) to call on changes
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def load(self):
        """Expectations were (re)installed; a new check is owed."""
        self._transition(DetectorTrigger.LOAD, DetectorState.PENDING)

    def check(self, explicit=True):
        """
        Record a completion check.

        Args:
            explicit: False for the implicit check performed by a replace,
                which tolerates an earlier explicit check

        Raises:
            DoneCallError: If explicit and the current load was already checked
        """
        if explicit and self._state == DetectorState.CHECKED:
            raise DoneCallError()
        trigger = DetectorTrigger.CHECK if explicit else DetectorTrigger.IMPLICIT_CHECK
        self._transition(trigger, DetectorState.CHECKED)

    def abandon(self):
        """The owning scope is unwinding; drop the obligation silently."""
        if self._state == DetectorState.PENDING:
            self._transition(DetectorTrigger.ABANDON, DetectorState.ABANDONED)

    def release(self):
        """
        The last handle over the queue is going away.

        Raises:
            MissingDoneError: If a check is still owed
        """
        if self._state == DetectorState.PENDING:
            logger.error(
                "%s released without calling done(); expectations were never verified",
                self.description,
            )
            raise MissingDoneError(self.description)

    def _transition(self, trigger, new_state):
        old_state = self._state
        if new_state == old_state:
            return

        self._state = new_state
        transition = DetectorTransition(old_state, new_state, trigger)
        logger.debug("%s detector %r", self.description, transition)

        for callback in self._callbacks:
            callback(transition)
