import asyncio
import random

from relay_failover.common.config import Mode
from relay_failover.services.actuator.simulated import SimulatedRelay
from relay_failover.services.control.debouncer import Debouncer
from relay_failover.services.control.mode_controller import ModeController

from conftest import fail, ok


def test_initial_state_is_detached():
    controller = ModeController(SimulatedRelay())

    assert controller.current_mode == Mode.DETACHED
    assert controller.last_applied_mode == Mode.DETACHED


def test_same_mode_never_reaches_actuator():
    relay = SimulatedRelay(fail_reads=True)
    controller = ModeController(relay)

    assert asyncio.run(controller.apply_if_changed(Mode.DETACHED)) is True
    assert relay.calls == []
    assert controller.state.actuator_failures == 0


def test_transition_calls_set_mode_once():
    relay = SimulatedRelay()
    controller = ModeController(relay)

    async def run():
        await controller.apply_if_changed(Mode.FOLLOW)
        await controller.apply_if_changed(Mode.FOLLOW)
        await controller.apply_if_changed(Mode.FOLLOW)

    asyncio.run(run())

    assert relay.calls == [(0, Mode.FOLLOW)]
    assert controller.last_applied_mode == Mode.FOLLOW
    assert controller.state.transitions == 1


def test_policy_table_drives_output():
    relay = SimulatedRelay()
    controller = ModeController(relay)
    relay.set_input(0, False)

    assert relay.channels[0].output_on is True

    asyncio.run(controller.apply_if_changed(Mode.FOLLOW))
    assert relay.channels[0].output_on is False
    relay.set_input(0, True)
    assert relay.channels[0].output_on is True

    asyncio.run(controller.apply_if_changed(Mode.DETACHED))
    relay.set_input(0, False)
    assert relay.channels[0].output_on is True


def test_out_of_band_change_is_adopted_without_write():
    relay = SimulatedRelay()
    relay.channels[0].input_mode = "follow"
    controller = ModeController(relay)

    assert asyncio.run(controller.apply_if_changed(Mode.FOLLOW)) is True
    assert relay.calls == []
    assert controller.last_applied_mode == Mode.FOLLOW


def test_failed_write_leaves_state_and_retries():
    relay = SimulatedRelay(fail_writes=True)
    controller = ModeController(relay)

    assert asyncio.run(controller.apply_if_changed(Mode.FOLLOW)) is False
    assert controller.last_applied_mode == Mode.DETACHED
    assert controller.current_mode == Mode.FOLLOW
    assert controller.state.pending
    assert controller.state.actuator_failures == 1

    relay.fail_writes = False
    assert asyncio.run(controller.reconcile()) is True
    assert relay.calls == [(0, Mode.FOLLOW), (0, Mode.FOLLOW)]
    assert controller.last_applied_mode == Mode.FOLLOW
    assert controller.state.last_error is None


def test_rejected_write_is_a_failure():
    relay = SimulatedRelay(reject_writes=True)
    controller = ModeController(relay)

    assert asyncio.run(controller.apply_if_changed(Mode.FOLLOW)) is False
    assert controller.last_applied_mode == Mode.DETACHED
    assert controller.state.last_error == "configuration rejected"


def test_unreachable_device_skips_write():
    relay = SimulatedRelay(fail_reads=True)
    controller = ModeController(relay)

    assert asyncio.run(controller.apply_if_changed(Mode.FOLLOW)) is False
    assert relay.calls == []
    assert controller.last_applied_mode == Mode.DETACHED


def test_reconcile_without_pending_is_noop():
    relay = SimulatedRelay(fail_reads=True)
    controller = ModeController(relay)

    assert asyncio.run(controller.reconcile()) is True
    assert relay.calls == []


def test_unknown_channel_is_an_actuator_failure():
    relay = SimulatedRelay(channels=1)
    controller = ModeController(relay, channel_id=3)

    assert asyncio.run(controller.apply_if_changed(Mode.FOLLOW)) is False
    assert controller.state.actuator_failures == 1


def _drive(outcomes: list[bool], threshold: int) -> SimulatedRelay:
    relay = SimulatedRelay()
    debouncer = Debouncer(threshold)
    controller = ModeController(relay)

    async def run():
        for alive in outcomes:
            decision = debouncer.observe(ok() if alive else fail())
            if decision is not None:
                await controller.apply_if_changed(decision)
            else:
                await controller.reconcile()

    asyncio.run(run())
    return relay


def test_random_sequences_never_repeat_a_mode():
    rng = random.Random(1234)
    for _ in range(200):
        threshold = rng.randint(1, 4)
        outcomes = [rng.random() < 0.5 for _ in range(rng.randint(0, 30))]
        modes = _drive(outcomes, threshold).calls_for(0)

        assert all(a != b for a, b in zip(modes, modes[1:]))
        if modes:
            assert modes[0] == Mode.FOLLOW


def test_short_failure_runs_never_leave_detached():
    rng = random.Random(99)
    for _ in range(100):
        threshold = rng.randint(2, 5)
        outcomes: list[bool] = []
        for _ in range(rng.randint(1, 10)):
            outcomes.extend([False] * rng.randint(0, threshold - 1))
            outcomes.append(True)

        assert _drive(outcomes, threshold).calls == []
