"""
Simulated Relay

In-memory relay used for dry runs and tests. It applies the fixed
mode policy table to each channel and derives the output state from
the simulated physical input, the way a real relay would.
"""

from dataclasses import dataclass

from relay_failover.common.config import MODE_POLICY, Mode
from relay_failover.common.exceptions import ActuatorError
from relay_failover.common.logging_setup import get_service_logger

from .base import Actuator, ModeWriteResult

logger = get_service_logger("actuator.simulated")


@dataclass
class ChannelState:
    """Holds the current channel state."""
    input_mode: str = "detached"
    initial_output: str = "on"
    input_on: bool = False
    output_on: bool = True


class SimulatedRelay(Actuator):
    """
    Simulated multi-channel relay.

    Failure injection:
        fail_reads: get_mode raises ActuatorError
        fail_writes: set_mode raises ActuatorError
        reject_writes: set_mode returns an unsuccessful result
    """

    name = "simulated"

    def __init__(
        self,
        channels: int = 1,
        fail_reads: bool = False,
        fail_writes: bool = False,
        reject_writes: bool = False,
    ):
        self.channels = [ChannelState() for _ in range(channels)]
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.reject_writes = reject_writes

        # Every set_mode call, in order, for inspection
        self.calls: list[tuple[int, Mode]] = []

    def _channel(self, channel_id: int) -> ChannelState:
        if not 0 <= channel_id < len(self.channels):
            raise ActuatorError(
                f"no such channel (device has {len(self.channels)})",
                channel_id=channel_id,
                device_name=self.name,
            )
        return self.channels[channel_id]

    async def get_mode(self, channel_id: int) -> Mode:
        if self.fail_reads:
            raise ActuatorError("device unreachable", channel_id, self.name)
        return Mode(self._channel(channel_id).input_mode)

    async def set_mode(self, channel_id: int, mode: Mode) -> ModeWriteResult:
        self.calls.append((channel_id, mode))

        if self.fail_writes:
            raise ActuatorError("device unreachable", channel_id, self.name)
        if self.reject_writes:
            return ModeWriteResult(success=False, mode=mode, error="configuration rejected")

        channel = self._channel(channel_id)
        params = MODE_POLICY[mode]
        channel.input_mode = params.input_mode
        channel.initial_output = params.output
        self._update_output(channel)

        logger.debug(
            f"Channel {channel_id} -> {mode.value} (output {'on' if channel.output_on else 'off'})",
            extra={"channel_id": channel_id, "input_mode": channel.input_mode},
        )
        return ModeWriteResult(success=True, mode=mode)

    def set_input(self, channel_id: int, on: bool) -> None:
        """Simulate the physical switch"""
        channel = self._channel(channel_id)
        channel.input_on = on
        self._update_output(channel)

    def _update_output(self, channel: ChannelState) -> None:
        if channel.initial_output == "match_input":
            channel.output_on = channel.input_on
        else:
            channel.output_on = channel.initial_output == "on"

    def calls_for(self, channel_id: int) -> list[Mode]:
        return [mode for ch, mode in self.calls if ch == channel_id]
