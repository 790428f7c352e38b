"""Image load resolution: image cache, then cached volumes, then scheme loaders."""

from __future__ import annotations

import asyncio
import logging

from image_orchestrator.cache import ImageCache
from image_orchestrator.events import EventBroadcaster, attach_load_events
from image_orchestrator.models import Image, ImageLoaderOptions, LoadObject
from image_orchestrator.registry import LoaderRegistry


class MissingImageIdError(ValueError):
    """Raised when a load is requested without an image id."""


class ImageLoadPipeline:
    """Resolves image ids to futures, caching on request and broadcasting outcomes.

    Resolution order for both entry points:

    1. a load object already in the image cache;
    2. a slice of a cached volume whose ``load_status.loaded`` is true;
    3. the loader registered for the id's scheme (or the fallback loader).

    Only loads that reach step 3 broadcast ``IMAGE_LOADED`` / ``IMAGE_LOAD_FAILED``.

    Two concurrent requests for the same uncached id each dispatch their own load
    unless ``dedupe_in_flight`` is set, in which case the second request shares
    the first one's unsettled load object.
    """

    def __init__(
        self,
        registry: LoaderRegistry,
        cache: ImageCache,
        broadcaster: EventBroadcaster,
        *,
        dedupe_in_flight: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._broadcaster = broadcaster
        self._dedupe_in_flight = dedupe_in_flight
        self._in_flight: dict[str, LoadObject] = {}
        self._logger = logger or logging.getLogger("image_orchestrator.pipeline")

    @property
    def registry(self) -> LoaderRegistry:
        return self._registry

    @property
    def broadcaster(self) -> EventBroadcaster:
        return self._broadcaster

    def load_image(self, image_id: str, options: ImageLoaderOptions | None = None) -> asyncio.Future[Image]:
        """Resolve ``image_id`` without storing the result in the cache."""
        return self._resolve(image_id, options, persist=False)

    def load_and_cache_image(
        self, image_id: str, options: ImageLoaderOptions | None = None
    ) -> asyncio.Future[Image]:
        """Resolve ``image_id`` and store the load object so later requests hit the cache."""
        return self._resolve(image_id, options, persist=True)

    def dispatch(self, image_id: str, options: ImageLoaderOptions | None = None) -> LoadObject:
        """Start a load through the registry and wire outcome broadcasting.

        Raises:
            NoLoaderError: no loader matches and no fallback is registered.
        """
        if self._dedupe_in_flight:
            pending = self._in_flight.get(image_id)
            if pending is not None:
                self._logger.debug("image_dispatch_deduplicated", extra={"image_id": image_id})
                return pending

        loader = self._registry.resolve_loader(image_id)
        load_object = loader(image_id, options if options is not None else {})
        attach_load_events(self._broadcaster, image_id, load_object)
        self._logger.debug("image_dispatched", extra={"image_id": image_id})

        if self._dedupe_in_flight and not load_object.done():
            self._in_flight[image_id] = load_object
            load_object.promise.add_done_callback(lambda _: self._forget_in_flight(image_id, load_object))
        return load_object

    def _resolve(
        self, image_id: str, options: ImageLoaderOptions | None, *, persist: bool
    ) -> asyncio.Future[Image]:
        if not image_id:
            raise MissingImageIdError("An image id is required to load an image")

        load_object = self._cache.get_image_load_object(image_id)
        if load_object is not None:
            self._logger.debug("image_cache_hit", extra={"image_id": image_id})
            return load_object.promise

        volume_info = self._cache.get_volume_containing_image_id(image_id)
        if volume_info is not None and volume_info.volume.load_status.loaded:
            self._logger.debug(
                "image_volume_hit",
                extra={"image_id": image_id, "image_id_index": volume_info.image_id_index},
            )
            load_object = volume_info.volume.convert_to_slice(image_id, volume_info.image_id_index)
        else:
            load_object = self.dispatch(image_id, options)

        if persist:
            self._cache.put_image_load_object(image_id, load_object)
            self._logger.debug("image_cached", extra={"image_id": image_id})

        return load_object.promise

    def _forget_in_flight(self, image_id: str, load_object: LoadObject) -> None:
        if self._in_flight.get(image_id) is load_object:
            del self._in_flight[image_id]
