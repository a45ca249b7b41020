"""
Failover Service - Control Loop

Responsible for:
- Probing the home-automation endpoint on a fixed interval
- Debouncing probe outcomes into mode decisions
- Applying decisions to the relay actuator
- Serving a health endpoint with the current state
"""

import asyncio
import signal
from datetime import datetime, timezone

import httpx
from aiohttp import web

from relay_failover.common.config import FailoverConfig
from relay_failover.common.logging_setup import get_service_logger
from relay_failover.common.scheduler import ScheduledLoop
from relay_failover.services.actuator.base import Actuator
from relay_failover.services.probe.prober import Prober, ProbeResult
from relay_failover.services.system.metrics_collector import MetricsCollector

from .debouncer import Debouncer
from .mode_controller import ModeController

logger = get_service_logger("control")


class FailoverService:
    """
    Failover Service

    Each tick runs the whole pipeline before returning:
    1. Probe the endpoint
    2. Feed the result to the debouncer
    3. Apply a new decision, or retry a pending one
    The scheduler awaits ticks inline, so at most one is in flight.
    """

    def __init__(
        self,
        config: FailoverConfig,
        actuator: Actuator,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.actuator = actuator

        # Components
        self._http_client = http_client
        self._owns_client = http_client is None
        self.prober = Prober(http_client)
        self.debouncer = Debouncer(config.control.failure_threshold)
        self.controller = ModeController(actuator, config.control.channel_id)
        self.scheduler = ScheduledLoop(
            config.control.check_interval_s,
            self.tick,
            name="failover",
        )
        self.metrics_collector = MetricsCollector()

        # Last probe for the health endpoint
        self._last_probe: ProbeResult | None = None
        self._start_time = datetime.now(timezone.utc)

        # Health server
        self._health_app: web.Application | None = None
        self._health_runner: web.AppRunner | None = None

        # State
        self._running = False
        self._shutdown_event = asyncio.Event()

    async def tick(self) -> None:
        """One probe-and-apply cycle"""
        probe_settings = self.config.probe
        result = await self.prober.probe(
            probe_settings.endpoint,
            probe_settings.credential,
            probe_settings.timeout_s,
            expect_json=probe_settings.expect_json,
        )
        self._last_probe = result

        decision = self.debouncer.observe(result)
        if decision is not None:
            await self.controller.apply_if_changed(decision)
        else:
            await self.controller.reconcile()

    async def start(self) -> None:
        """Start the service and block until shutdown"""
        logger.info(
            "Starting Failover Service",
            extra={"config": self.config.to_dict()},
        )
        self._running = True

        if self._owns_client:
            self._http_client = httpx.AsyncClient()
            self.prober = Prober(self._http_client)

        if self.config.health.enabled:
            await self._start_health_server()

        await self.scheduler.start()

        logger.info(
            f"Failover Service started (interval: {self.config.control.check_interval_s}s, "
            f"threshold: {self.config.control.failure_threshold}, "
            f"mode: {self.controller.current_mode.value})",
            extra={
                "interval_s": self.config.control.check_interval_s,
                "failure_threshold": self.config.control.failure_threshold,
                "mode": self.controller.current_mode.value,
            },
        )

        self._setup_signal_handlers()

        await self._shutdown_event.wait()

    async def stop(self) -> None:
        """Stop the service"""
        logger.info("Stopping Failover Service")
        self._running = False

        await self.scheduler.stop()
        await self._stop_health_server()

        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

        await self.actuator.close()

        logger.info(
            "Failover Service stopped",
            extra={"scheduler": self.scheduler.get_stats()},
        )

    def request_shutdown(self) -> None:
        """Handle shutdown signal"""
        logger.info("Received shutdown signal")
        self._shutdown_event.set()

    def _setup_signal_handlers(self) -> None:
        """Setup graceful shutdown signal handlers"""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except NotImplementedError:
                # Windows doesn't support add_signal_handler
                signal.signal(sig, lambda s, f: self.request_shutdown())

    async def _start_health_server(self) -> None:
        """Start the health check HTTP server"""
        self._health_app = web.Application()
        self._health_app.router.add_get("/health", self._health_handler)

        self._health_runner = web.AppRunner(self._health_app)
        await self._health_runner.setup()

        health = self.config.health
        site = web.TCPSite(self._health_runner, health.host, health.port)
        await site.start()

        logger.info(f"Health server started on {health.host}:{health.port}")

    async def _stop_health_server(self) -> None:
        """Stop the health check HTTP server"""
        if self._health_runner:
            await self._health_runner.cleanup()
            self._health_runner = None

    async def _health_handler(self, request: web.Request) -> web.Response:
        """Handle health check requests"""
        return web.json_response(self.get_status())

    def get_status(self) -> dict:
        """Snapshot of service state for the health endpoint"""
        return {
            "status": "healthy" if self._running and self.scheduler.is_running else "unhealthy",
            "service": "failover",
            "started_at": self._start_time.isoformat(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "mode": self.controller.state.to_dict(),
            "debounce": {
                **self.debouncer.state.to_dict(),
                "failure_threshold": self.debouncer.failure_threshold,
            },
            "last_probe": self._last_probe.to_dict() if self._last_probe else None,
            "scheduler": self.scheduler.get_stats(),
            "process": self.metrics_collector.to_dict(),
        }
