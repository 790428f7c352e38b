"""Broadcast of image load outcomes to subscribed observers."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from image_orchestrator.models import Image, LoadObject


class ImageEventType(str, Enum):
    """Terminal outcomes of a dispatched image load."""

    IMAGE_LOADED = "IMAGE_LOADED"
    IMAGE_LOAD_FAILED = "IMAGE_LOAD_FAILED"


@dataclass(slots=True, frozen=True)
class ImageLoadedEvent:
    image: Image


@dataclass(slots=True, frozen=True)
class ImageLoadFailedEvent:
    image_id: str
    error: BaseException


ImageEvent = Union[ImageLoadedEvent, ImageLoadFailedEvent]
EventHandler = Callable[[ImageEventType, ImageEvent], None]


class EventBroadcaster:
    """In-process publish/subscribe hub for image load events."""

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[ImageEventType, list[EventHandler]] = defaultdict(list)
        self._logger = logger or logging.getLogger("image_orchestrator.events")

    def subscribe(self, event_type: ImageEventType, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for ``event_type``; returns a callable that removes it."""
        self._handlers[event_type].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers[event_type]
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def listener_count(self, event_type: ImageEventType) -> int:
        return len(self._handlers[event_type])

    def emit(self, event_type: ImageEventType, payload: ImageEvent) -> None:
        """Deliver ``payload`` to every handler; a failing handler does not stop the rest."""
        for handler in list(self._handlers[event_type]):
            try:
                handler(event_type, payload)
            except Exception:  # noqa: BLE001 - observers must not break delivery.
                self._logger.exception("event_handler_failed", extra={"event_type": event_type.value})


def attach_load_events(broadcaster: EventBroadcaster, image_id: str, load_object: LoadObject) -> LoadObject:
    """Emit exactly one outcome event when ``load_object`` settles.

    asyncio schedules done-callbacks through the loop, so the event never fires
    inside the caller's frame, even for an already-settled future. The callback
    only reads the future; callers awaiting it see the original result or error.
    """

    def _on_done(future: asyncio.Future[Image]) -> None:
        if future.cancelled():
            error: BaseException = asyncio.CancelledError()
        else:
            error = future.exception()
            if error is None:
                broadcaster.emit(ImageEventType.IMAGE_LOADED, ImageLoadedEvent(image=future.result()))
                return

        broadcaster.emit(
            ImageEventType.IMAGE_LOAD_FAILED,
            ImageLoadFailedEvent(image_id=image_id, error=error),
        )

    load_object.promise.add_done_callback(_on_done)
    return load_object
