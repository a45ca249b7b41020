import asyncio
import json

from relay_failover.common.config import (
    ControlSettings,
    FailoverConfig,
    HealthSettings,
    Mode,
    ProbeSettings,
)
from relay_failover.services.actuator.simulated import SimulatedRelay
from relay_failover.services.control.service import FailoverService

from conftest import ENDPOINT, scripted_client


def make_service(outcomes: list[bool], threshold: int = 2, relay: SimulatedRelay | None = None):
    config = FailoverConfig(
        probe=ProbeSettings(endpoint=ENDPOINT, credential="token", timeout_s=1.0),
        control=ControlSettings(check_interval_s=1.0, failure_threshold=threshold),
        health=HealthSettings(enabled=False),
    )
    relay = relay or SimulatedRelay()
    service = FailoverService(config, relay, http_client=scripted_client(outcomes))
    return service, relay


def run_ticks(service: FailoverService, count: int) -> None:
    async def run():
        for _ in range(count):
            await service.tick()

    asyncio.run(run())


def test_failover_and_restore_scenario():
    service, relay = make_service([False, False, True, False, True, False])

    run_ticks(service, 2)
    assert relay.calls_for(0) == [Mode.FOLLOW]

    run_ticks(service, 1)
    assert relay.calls_for(0) == [Mode.FOLLOW, Mode.DETACHED]

    run_ticks(service, 3)
    assert relay.calls_for(0) == [Mode.FOLLOW, Mode.DETACHED]
    assert service.controller.current_mode == Mode.DETACHED


def test_first_success_at_startup_makes_no_call():
    service, relay = make_service([True, True])

    run_ticks(service, 2)

    assert relay.calls == []
    assert service.controller.last_applied_mode == Mode.DETACHED


def test_failed_transition_is_retried_on_next_tick():
    relay = SimulatedRelay(fail_writes=True)
    service, _ = make_service([False, False, False, False], relay=relay)

    run_ticks(service, 2)
    assert service.controller.last_applied_mode == Mode.DETACHED
    assert service.controller.state.pending

    relay.fail_writes = False
    run_ticks(service, 1)
    assert service.controller.last_applied_mode == Mode.FOLLOW
    assert relay.calls_for(0) == [Mode.FOLLOW, Mode.FOLLOW]

    run_ticks(service, 1)
    assert relay.calls_for(0) == [Mode.FOLLOW, Mode.FOLLOW]


def test_status_snapshot():
    service, _ = make_service([False, False])
    run_ticks(service, 2)

    status = service.get_status()

    assert status["status"] == "unhealthy"
    assert status["mode"]["current_mode"] == "follow"
    assert status["mode"]["last_applied_mode"] == "follow"
    assert status["debounce"]["consecutive_failures"] == 2
    assert status["debounce"]["failure_threshold"] == 2
    assert status["last_probe"]["status_code"] == 503
    assert "uptime_seconds" in status["process"]


def test_health_handler_returns_json():
    service, _ = make_service([True])
    run_ticks(service, 1)

    response = asyncio.run(service._health_handler(None))
    body = json.loads(response.text)

    assert body["service"] == "failover"
    assert body["last_probe"]["success"] is True


def test_unencodable_credential_still_drives_failover():
    service, relay = make_service([False] * 4)
    service.config.probe.credential = "tökén"

    run_ticks(service, 4)

    assert relay.calls_for(0) == [Mode.FOLLOW]
    assert service.debouncer.state.consecutive_failures == 4
    assert "invalid request" in service.get_status()["last_probe"]["error_detail"]
