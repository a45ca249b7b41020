import httpx
import pytest

from relay_failover.services.probe.prober import ProbeResult

ENDPOINT = "http://ha.test/api/"


def ok() -> ProbeResult:
    return ProbeResult(success=True)


def fail(detail: str = "HTTP 503") -> ProbeResult:
    return ProbeResult(success=False, error_detail=detail)


def scripted_client(outcomes: list[bool], seen: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    """AsyncClient answering 200 or 503 per outcome, in order"""
    queue = list(outcomes)

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        alive = queue.pop(0)
        if alive:
            return httpx.Response(200, json={"message": "API running."})
        return httpx.Response(503, text="unavailable")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def _no_credential_env(monkeypatch):
    monkeypatch.delenv("RELAY_FAILOVER_CREDENTIAL", raising=False)
