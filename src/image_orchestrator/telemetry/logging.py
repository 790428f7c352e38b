"""Contract for runtime telemetry and structured logging sinks."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from image_orchestrator.events import (
    EventBroadcaster,
    ImageEvent,
    ImageEventType,
    ImageLoadedEvent,
    ImageLoadFailedEvent,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class Telemetry(Protocol):
    """Reports operational events and load outcomes."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink writing one log record per event."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("image_orchestrator.telemetry")

    def emit(self, event_name: str, payload: dict) -> None:
        self._logger.info(event_name, extra=payload)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)


def _event_payload(event: ImageEvent) -> dict:
    if isinstance(event, ImageLoadedEvent):
        return {"image_id": event.image.image_id, "size_bytes": event.image.size_in_bytes}
    if isinstance(event, ImageLoadFailedEvent):
        return {"image_id": event.image_id, "error": f"{type(event.error).__name__}: {event.error}"}
    return {}


def forward_events(broadcaster: EventBroadcaster, telemetry: Telemetry) -> Callable[[], None]:
    """Send every broadcast load event to ``telemetry``; returns an unsubscribe callable."""

    def _handler(event_type: ImageEventType, event: ImageEvent) -> None:
        telemetry.emit(event_type.value.lower(), _event_payload(event))

    unsubscribers = [broadcaster.subscribe(event_type, _handler) for event_type in ImageEventType]

    def _unsubscribe() -> None:
        for unsubscribe in unsubscribers:
            unsubscribe()

    return _unsubscribe
