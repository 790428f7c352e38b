"""Logging setup and telemetry sinks for image load events."""

from .logging import LoggingTelemetry, Telemetry, configure_logging, forward_events

__all__ = ["LoggingTelemetry", "Telemetry", "configure_logging", "forward_events"]
