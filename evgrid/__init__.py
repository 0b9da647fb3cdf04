"""
EV charger and utility meter telemetry API.

CHANGELOG:
- 2026-10-02: Initial creation (STORY-001)

TODO:
- None
"""

__version__ = "0.1.0"
