"""
Probe Layer - endpoint liveness checks
"""

from .prober import Prober, ProbeResult

__all__ = ["Prober", "ProbeResult"]
