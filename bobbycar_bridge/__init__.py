"""WebSocket to line protocol bridge for bobbycar telemetry."""

__version__ = "1.0.0"
