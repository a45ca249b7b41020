"""
Endpoint Prober

Issues a single authenticated GET against the home-automation endpoint
and reports the outcome as a ProbeResult. Every failure kind (HTTP
status, connection error, timeout, malformed body) becomes a failing
result; nothing is raised to the caller.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from relay_failover.common.exceptions import ProbeError
from relay_failover.common.logging_setup import get_service_logger, log_probe

logger = get_service_logger("probe")


@dataclass
class ProbeResult:
    """Outcome of one liveness check"""
    success: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error_detail: str | None = None
    latency_ms: float = 0.0
    status_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "error_detail": self.error_detail,
            "latency_ms": round(self.latency_ms, 1),
            "status_code": self.status_code,
        }


class Prober:
    """
    Stateless liveness checker.

    The httpx client is reused across probes when one is supplied;
    otherwise a short-lived client is opened per probe.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    async def probe(
        self,
        endpoint: str,
        credential: str | None,
        timeout: float,
        expect_json: bool = False,
    ) -> ProbeResult:
        """
        Run one liveness check.

        Args:
            endpoint: URL to GET
            credential: Bearer token, or None for no Authorization header
            timeout: Overall timeout in seconds
            expect_json: Treat a non-JSON body as a failure

        Returns:
            ProbeResult, success only for a 2xx (and well-formed) response
        """
        headers = {"Accept": "application/json"} if expect_json else {}
        if credential:
            headers["Authorization"] = f"Bearer {credential}"

        started = time.perf_counter()
        status_code: int | None = None

        try:
            if self._client is not None:
                response = await self._client.get(endpoint, headers=headers, timeout=timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(endpoint, headers=headers, timeout=timeout)

            status_code = response.status_code
            self._check_response(endpoint, response, expect_json)
            result = ProbeResult(
                success=True,
                latency_ms=(time.perf_counter() - started) * 1000,
                status_code=status_code,
            )

        except ProbeError as e:
            result = self._failure(e.message, started, e.status_code)
        except httpx.TimeoutException:
            result = self._failure(f"timeout after {timeout}s", started, status_code)
        except httpx.ConnectError as e:
            result = self._failure(f"connection error: {e}", started, status_code)
        except httpx.HTTPError as e:
            result = self._failure(f"{type(e).__name__}: {e}", started, status_code)
        except (httpx.InvalidURL, UnicodeError) as e:
            # Request could not be built (bad URL or header value)
            result = self._failure(f"invalid request: {e}", started, status_code)

        log_probe(
            logger,
            endpoint,
            result.success,
            result.latency_ms,
            error_detail=result.error_detail,
            status_code=result.status_code,
        )
        return result

    def _check_response(
        self,
        endpoint: str,
        response: httpx.Response,
        expect_json: bool,
    ) -> None:
        """Raise ProbeError unless the response counts as alive"""
        if response.status_code in (401, 403):
            raise ProbeError(
                f"auth rejected (HTTP {response.status_code})",
                endpoint=endpoint,
                status_code=response.status_code,
            )
        if not response.is_success:
            raise ProbeError(
                f"HTTP {response.status_code}",
                endpoint=endpoint,
                status_code=response.status_code,
            )
        if expect_json:
            try:
                response.json()
            except ValueError:
                raise ProbeError(
                    "malformed response (body is not JSON)",
                    endpoint=endpoint,
                    status_code=response.status_code,
                )

    def _failure(
        self,
        detail: str,
        started: float,
        status_code: int | None,
    ) -> ProbeResult:
        return ProbeResult(
            success=False,
            error_detail=detail,
            latency_ms=(time.perf_counter() - started) * 1000,
            status_code=status_code,
        )

