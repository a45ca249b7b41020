"""
Process Metrics Collector

Collects process metrics for the health endpoint:
- CPU usage
- Resident memory
- Uptime
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone

import psutil


@dataclass
class ProcessMetrics:
    """Process metrics data"""
    cpu_usage_pct: float
    memory_rss_mb: float
    uptime_seconds: int
    timestamp: str


class MetricsCollector:
    """Collects metrics for the running controller process"""

    def __init__(self):
        self._start_time = time.time()
        self._process = psutil.Process()

    def collect(self) -> ProcessMetrics:
        """Collect current process metrics"""
        return ProcessMetrics(
            cpu_usage_pct=self._process.cpu_percent(interval=None),
            memory_rss_mb=round(self._process.memory_info().rss / (1024 * 1024), 1),
            uptime_seconds=self.get_uptime_seconds(),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def get_uptime_seconds(self) -> int:
        """Get service uptime in seconds"""
        return int(time.time() - self._start_time)

    def to_dict(self) -> dict:
        """Get metrics as dictionary"""
        metrics = self.collect()
        return {
            "cpu_usage_pct": metrics.cpu_usage_pct,
            "memory_rss_mb": metrics.memory_rss_mb,
            "uptime_seconds": metrics.uptime_seconds,
        }
