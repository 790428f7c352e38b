"""Cache contract used by the load pipeline, plus a bounded in-memory store."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Protocol

from image_orchestrator.models import CachedVolumeInfo, Image, LoadObject
from image_orchestrator.volume import VolumeHandle


class ImageCacheError(RuntimeError):
    """Raised on invalid cache writes such as a duplicate image id."""


class ImageCache(Protocol):
    """The three operations the load pipeline needs from a cache."""

    def get_image_load_object(self, image_id: str) -> LoadObject | None:
        """Return the cached load object for ``image_id``, if any."""

    def get_volume_containing_image_id(self, image_id: str) -> CachedVolumeInfo | None:
        """Return the cached volume holding ``image_id`` and its slice index, if any."""

    def put_image_load_object(self, image_id: str, load_object: LoadObject) -> None:
        """Store ``load_object`` under ``image_id``."""


class InMemoryImageCache:
    """Bounded in-memory cache of image load objects and volumes.

    Oldest image entries are evicted first once ``max_images`` is reached. An entry
    whose load fails is dropped so a later request can try again.
    """

    def __init__(self, max_images: int = 512, *, logger: logging.Logger | None = None) -> None:
        if max_images < 1:
            raise ValueError("max_images must be at least 1")
        self._max_images = max_images
        self._images: OrderedDict[str, LoadObject] = OrderedDict()
        self._volume_index: dict[str, CachedVolumeInfo] = {}
        self._logger = logger or logging.getLogger("image_orchestrator.cache")

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, image_id: object) -> bool:
        return image_id in self._images

    def get_image_load_object(self, image_id: str) -> LoadObject | None:
        return self._images.get(image_id)

    def get_volume_containing_image_id(self, image_id: str) -> CachedVolumeInfo | None:
        return self._volume_index.get(image_id)

    def put_image_load_object(self, image_id: str, load_object: LoadObject) -> None:
        if not image_id:
            raise ImageCacheError("put_image_load_object: image_id must not be empty")
        if image_id in self._images:
            raise ImageCacheError(f"put_image_load_object: image id already in cache: {image_id}")

        while len(self._images) >= self._max_images:
            evicted, _ = self._images.popitem(last=False)
            self._logger.debug("image_evicted", extra={"image_id": evicted})

        self._images[image_id] = load_object
        load_object.promise.add_done_callback(lambda future: self._drop_if_failed(image_id, load_object, future))

    def remove_image_load_object(self, image_id: str) -> LoadObject | None:
        return self._images.pop(image_id, None)

    def put_volume(self, volume: VolumeHandle) -> None:
        """Index every image id of ``volume`` so slice requests can be served from it."""
        for index, image_id in enumerate(volume.image_ids):
            self._volume_index[image_id] = CachedVolumeInfo(volume=volume, image_id_index=index)

    def purge(self) -> None:
        self._images.clear()
        self._volume_index.clear()

    def _drop_if_failed(self, image_id: str, load_object: LoadObject, future: asyncio.Future[Image]) -> None:
        if not future.cancelled() and future.exception() is None:
            return
        # A newer object may already sit under the same id.
        if self._images.get(image_id) is load_object:
            del self._images[image_id]
            self._logger.info("failed_image_dropped", extra={"image_id": image_id})
