"""
Relay Failover Services

- probe    - Endpoint liveness checks
- control  - Debouncer, mode controller and the failover loop
- actuator - Relay actuator interface and drivers
- config   - Startup configuration validation
- system   - Process metrics
"""
