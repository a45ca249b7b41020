"""
System Layer - process metrics for the health endpoint
"""

from .metrics_collector import MetricsCollector, ProcessMetrics

__all__ = ["MetricsCollector", "ProcessMetrics"]
