from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Coroutine

if TYPE_CHECKING:
    from image_orchestrator.volume import VolumeHandle

ImageLoaderOptions = dict[str, Any]


@dataclass(slots=True)
class Image:
    image_id: str
    rows: int
    columns: int
    pixel_data: bytes
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def size_in_bytes(self) -> int:
        return len(self.pixel_data)


@dataclass(slots=True, frozen=True)
class LoadObject:
    """Handle for in-flight or settled image work.

    Caches and callers hold references to the same object; only ``promise``
    changes state, and only once.
    """

    promise: asyncio.Future[Image]
    cancel: Callable[[], Any] | None = None

    @classmethod
    def from_coroutine(cls, coro: Coroutine[Any, Any, Image]) -> LoadObject:
        """Schedule ``coro`` on the running loop; the task's cancel is exposed."""
        task = asyncio.get_running_loop().create_task(coro)
        return cls(promise=task, cancel=task.cancel)

    @classmethod
    def resolved(cls, image: Image) -> LoadObject:
        future: asyncio.Future[Image] = asyncio.get_running_loop().create_future()
        future.set_result(image)
        return cls(promise=future)

    @classmethod
    def failed(cls, error: BaseException) -> LoadObject:
        future: asyncio.Future[Image] = asyncio.get_running_loop().create_future()
        future.set_exception(error)
        return cls(promise=future)

    def done(self) -> bool:
        return self.promise.done()


@dataclass(slots=True)
class VolumeLoadStatus:
    loaded: bool = False
    loading: bool = False
    cached_frames: int = 0


@dataclass(slots=True, frozen=True)
class CachedVolumeInfo:
    """Locates an image id inside a cached volume."""

    volume: VolumeHandle
    image_id_index: int
