"""
Debouncer

Turns the stream of probe outcomes into stable mode decisions.

Thresholds are asymmetric: FOLLOW is emitted only when the failure
streak reaches failure_threshold exactly, while DETACHED is emitted
on the first success of a streak. Both are edge-triggered, so a
long streak emits once.
"""

from relay_failover.common.config import Mode
from relay_failover.common.logging_setup import get_service_logger, log_threshold_crossing
from relay_failover.services.probe.prober import ProbeResult

from .state import DebounceState

logger = get_service_logger("control.debouncer")

# Successes needed to restore DETACHED
SUCCESS_THRESHOLD = 1


class Debouncer:
    """Consecutive-outcome debouncer with alternation reset"""

    def __init__(self, failure_threshold: int):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self.failure_threshold = failure_threshold
        self.state = DebounceState()

    def observe(self, result: ProbeResult) -> Mode | None:
        """
        Feed one probe result.

        Returns:
            The newly decided mode, or None when no threshold fired
        """
        if result.success:
            self.state.consecutive_successes += 1
            self.state.consecutive_failures = 0
            decision = Mode.DETACHED if self.state.consecutive_successes == SUCCESS_THRESHOLD else None
        else:
            self.state.consecutive_failures += 1
            self.state.consecutive_successes = 0
            decision = Mode.FOLLOW if self.state.consecutive_failures == self.failure_threshold else None

        if decision is not None:
            log_threshold_crossing(
                logger,
                decision.value,
                self.state.consecutive_failures,
                self.state.consecutive_successes,
                self.failure_threshold,
            )
        else:
            logger.debug(
                "No debounce decision",
                extra={"event": "debounce", **self.state.to_dict()},
            )

        return decision

    def reset(self) -> None:
        self.state = DebounceState()
