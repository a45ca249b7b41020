"""
Mode Controller

Applies debounced mode decisions to the actuator.

Idempotence: a decision equal to the last applied mode never reaches
the actuator. Otherwise the live device mode is read first so an
out-of-band change that already matches is adopted without a write.
A failed write leaves last_applied_mode untouched, which makes the
next reconcile() retry it.
"""

from datetime import datetime, timezone

from relay_failover.common.config import Mode
from relay_failover.common.exceptions import ActuatorError
from relay_failover.common.logging_setup import get_service_logger, log_actuator_call
from relay_failover.services.actuator.base import Actuator

from .state import ControllerState

logger = get_service_logger("control.mode")


class ModeController:
    """Owns ControllerState and the actuator channel"""

    def __init__(self, actuator: Actuator, channel_id: int = 0):
        self.actuator = actuator
        self.channel_id = channel_id
        self.state = ControllerState()

    @property
    def current_mode(self) -> Mode:
        return self.state.current_mode

    @property
    def last_applied_mode(self) -> Mode:
        return self.state.last_applied_mode

    async def apply_if_changed(self, desired: Mode) -> bool:
        """
        Drive the actuator towards desired.

        Returns:
            True if the actuator is known to be in desired afterwards
        """
        self.state.current_mode = desired

        if desired == self.state.last_applied_mode:
            logger.debug(
                f"Mode {desired.value} already applied, no actuator call",
                extra={"event": "actuator", "mode": desired.value},
            )
            return True

        try:
            reported = await self.actuator.get_mode(self.channel_id)
        except ActuatorError as e:
            self._record_failure("get_mode", desired, e.message)
            return False

        if reported == desired:
            logger.info(
                f"Actuator already in {desired.value}, adopting without write",
                extra={"event": "actuator", "mode": desired.value, "channel_id": self.channel_id},
            )
            self._record_applied(desired)
            return True

        self.state.actuator_calls += 1
        log_actuator_call(
            logger, "set_mode", self.channel_id, desired.value,
            attempt=self.state.actuator_calls,
        )

        try:
            result = await self.actuator.set_mode(self.channel_id, desired)
        except ActuatorError as e:
            self._record_failure("set_mode", desired, e.message)
            return False

        if not result.success:
            self._record_failure("set_mode", desired, result.error or "rejected")
            return False

        log_actuator_call(logger, "set_mode", self.channel_id, desired.value, success=True)
        self._record_applied(desired)
        return True

    async def reconcile(self) -> bool:
        """Retry the desired mode if it has not reached the actuator"""
        if not self.state.pending:
            return True
        logger.info(
            f"Retrying pending transition to {self.state.current_mode.value}",
            extra={"event": "actuator", "actuator_failures": self.state.actuator_failures},
        )
        return await self.apply_if_changed(self.state.current_mode)

    def _record_applied(self, mode: Mode) -> None:
        previous = self.state.last_applied_mode
        self.state.last_applied_mode = mode
        self.state.last_error = None
        if previous != mode:
            self.state.transitions += 1
            self.state.last_transition_at = datetime.now(timezone.utc)
            logger.info(
                f"Mode transition {previous.value} -> {mode.value}",
                extra={
                    "event": "transition",
                    "from_mode": previous.value,
                    "to_mode": mode.value,
                    "transitions": self.state.transitions,
                },
            )

    def _record_failure(self, operation: str, mode: Mode, error: str) -> None:
        self.state.actuator_failures += 1
        self.state.last_error = error
        log_actuator_call(
            logger, operation, self.channel_id, mode.value,
            success=False, error=error,
        )
