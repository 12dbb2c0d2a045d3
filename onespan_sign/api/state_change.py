"""
State Change Polling

Blocks after a mutating API call until a subsequent read reflects the
expected value. Some OneSpan Sign settings are applied asynchronously,
and reads may flap between old and new values for a while, so
convergence requires several consecutive matching reads.

Usage:
    conf = StateChangeConf(
        refresh=refresh_fn,
        pending=['waiting'],
        target=['complete'],
        timeout=180,
        delay=10,
        min_timeout=0.3,
        continuous_target_occurence=5,
    )
    outcome = conf.wait_for_state(cancel_event)
    if not outcome.success:
        error = outcome.error
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, Sequence

from .exceptions import (
    ApiError,
    StateChangeCancelledError,
    StateChangeTimeoutError,
    UnexpectedStateError,
)

logger = logging.getLogger(__name__)

STATE_WAITING = 'waiting'
STATE_COMPLETE = 'complete'

# Only plain 500s are known to be spurious. Other 5xx codes indicate
# real outages and stay fatal.
TRANSIENT_STATUS_CODES = frozenset({500})


class PollState(Enum):
    """States of a convergence wait."""
    WAITING = "waiting"
    CONFIRMING = "confirming"
    COMPLETE = "complete"
    TIMEOUT = "timeout"
    FATAL = "fatal"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (PollState.WAITING, PollState.CONFIRMING)


class RefreshResult(NamedTuple):
    """What one read reported: the value read, its logical state, and any error."""
    result: Any
    state: str
    error: Optional[Exception] = None


@dataclass(frozen=True)
class WaitResult:
    """Outcome of StateChangeConf.wait_for_state()."""
    state: PollState
    result: Any = None
    error: Optional[Exception] = None
    polls: int = 0

    @property
    def success(self) -> bool:
        return self.state == PollState.COMPLETE


def is_transient_fault(error: Optional[Exception]) -> bool:
    """Check if an error is a spurious server fault worth polling through."""
    return isinstance(error, ApiError) and error.status_code in TRANSIENT_STATUS_CODES


@dataclass
class StateChangeConf:
    """
    Configuration of a convergence wait.

    Attributes:
        refresh: Reads the remote state and compares it with the expected value
        pending: States meaning "keep waiting"
        target: States meaning "matches the expected value"
        timeout: Seconds before giving up, counted from the start of the
            wait and including the initial delay
        delay: Seconds to wait before the first read
        min_timeout: Seconds between two reads
        continuous_target_occurence: Consecutive target reads needed to finish
        tolerate_transient_faults: Treat transient read faults (HTTP 500)
            as pending instead of fatal
        clock: Monotonic time source
        sleep: Sleep function; when unset, waits on the cancel event
    """
    refresh: Callable[[], RefreshResult]
    pending: Sequence[str]
    target: Sequence[str]
    timeout: float
    delay: float
    min_timeout: float
    continuous_target_occurence: int
    tolerate_transient_faults: bool = False
    clock: Callable[[], float] = time.monotonic
    sleep: Optional[Callable[[float], None]] = None

    def _pause(self, seconds: float, cancel_event: Optional[threading.Event]) -> bool:
        """Sleep for up to ``seconds``. Returns True when cancelled."""
        if seconds > 0:
            if self.sleep is not None:
                self.sleep(seconds)
            elif cancel_event is not None:
                return cancel_event.wait(seconds)
            else:
                time.sleep(seconds)
        return cancel_event is not None and cancel_event.is_set()

    def wait_for_state(self, cancel_event: Optional[threading.Event] = None) -> WaitResult:
        """
        Poll ``refresh`` until the target state has been seen
        ``continuous_target_occurence`` times in a row.

        Never raises for read failures. A read error is fatal unless it
        is a transient fault and ``tolerate_transient_faults`` is set.

        Args:
            cancel_event: Optional event that stops the wait early when set

        Returns:
            WaitResult with state COMPLETE, TIMEOUT, FATAL or CANCELLED
        """
        deadline = self.clock() + self.timeout
        state = PollState.WAITING
        matches = 0
        polls = 0
        last_result = None
        last_state = None

        def cancelled() -> WaitResult:
            logger.debug(f"State change wait cancelled after {polls} poll(s)")
            return WaitResult(
                PollState.CANCELLED,
                last_result,
                StateChangeCancelledError("wait for state change was cancelled", last_state),
                polls
            )

        def timed_out() -> WaitResult:
            logger.debug(f"State change wait timed out after {polls} poll(s), last state: {last_state}")
            return WaitResult(
                PollState.TIMEOUT,
                last_result,
                StateChangeTimeoutError(
                    f"timeout while waiting for state to become '{', '.join(self.target)}' "
                    f"(last state: '{last_state}', timeout: {self.timeout}s)",
                    last_state,
                    self.timeout
                ),
                polls
            )

        if self.delay > 0:
            if self._pause(min(self.delay, max(deadline - self.clock(), 0)), cancel_event):
                return cancelled()
        elif cancel_event is not None and cancel_event.is_set():
            return cancelled()

        while True:
            if self.clock() >= deadline:
                return timed_out()

            polls += 1
            refreshed = self.refresh()

            if refreshed.error is not None:
                if not (self.tolerate_transient_faults and is_transient_fault(refreshed.error)):
                    logger.debug(f"State change read failed: {refreshed.error!r}")
                    return WaitResult(PollState.FATAL, refreshed.result, refreshed.error, polls)
                logger.debug("Transient fault while reading state, continuing to wait")
                last_state = STATE_WAITING
                matches = 0
                state = PollState.WAITING
            else:
                last_result = refreshed.result
                last_state = refreshed.state

                if refreshed.state in self.target:
                    matches += 1
                    if matches >= self.continuous_target_occurence:
                        logger.debug(f"State change complete after {polls} poll(s)")
                        return WaitResult(PollState.COMPLETE, last_result, None, polls)
                    state = PollState.CONFIRMING
                elif refreshed.state in self.pending:
                    matches = 0
                    state = PollState.WAITING
                else:
                    return WaitResult(
                        PollState.FATAL,
                        last_result,
                        UnexpectedStateError(f"unexpected state '{refreshed.state}'", refreshed.state),
                        polls
                    )

            logger.debug(f"Poll {polls}: {state.value} ({matches}/{self.continuous_target_occurence})")

            remaining = deadline - self.clock()
            if remaining <= 0:
                return timed_out()
            if self._pause(min(self.min_timeout, remaining), cancel_event):
                return cancelled()
