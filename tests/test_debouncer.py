import pytest

from relay_failover.common.config import Mode
from relay_failover.services.control.debouncer import Debouncer

from conftest import fail, ok


def test_emits_follow_exactly_at_threshold():
    debouncer = Debouncer(failure_threshold=3)

    assert debouncer.observe(fail()) is None
    assert debouncer.observe(fail()) is None
    assert debouncer.observe(fail()) == Mode.FOLLOW
    assert debouncer.state.consecutive_failures == 3


def test_follow_is_edge_triggered():
    debouncer = Debouncer(failure_threshold=2)
    emitted = [debouncer.observe(fail()) for _ in range(6)]

    assert emitted.count(Mode.FOLLOW) == 1
    assert emitted[1] == Mode.FOLLOW


def test_first_success_emits_detached():
    debouncer = Debouncer(failure_threshold=2)
    for _ in range(5):
        debouncer.observe(fail())

    assert debouncer.observe(ok()) == Mode.DETACHED
    assert debouncer.observe(ok()) is None
    assert debouncer.state.consecutive_failures == 0
    assert debouncer.state.consecutive_successes == 2


def test_success_below_threshold_still_emits_detached():
    debouncer = Debouncer(failure_threshold=5)
    debouncer.observe(fail())

    assert debouncer.observe(ok()) == Mode.DETACHED


def test_alternation_resets_counters():
    debouncer = Debouncer(failure_threshold=2)
    debouncer.observe(ok())

    outcomes = [fail(), ok(), fail(), ok(), fail()]
    emitted = [debouncer.observe(r) for r in outcomes]

    assert Mode.FOLLOW not in emitted
    assert debouncer.state.consecutive_failures == 1
    assert debouncer.state.consecutive_successes == 0


def test_threshold_of_one_fails_over_on_first_failure():
    debouncer = Debouncer(failure_threshold=1)

    assert debouncer.observe(fail()) == Mode.FOLLOW
    assert debouncer.observe(fail()) is None


def test_reset_clears_state():
    debouncer = Debouncer(failure_threshold=2)
    debouncer.observe(fail())
    debouncer.reset()

    assert debouncer.state.consecutive_failures == 0
    assert debouncer.observe(fail()) is None


def test_rejects_invalid_threshold():
    with pytest.raises(ValueError):
        Debouncer(failure_threshold=0)
