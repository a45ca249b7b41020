"""
Relay Failover Controller

Switches a relay channel between DETACHED and FOLLOW input handling
based on the reachability of a home-automation server.
"""

__version__ = "1.0.0"
