"""Image load orchestration: scheme-dispatched loaders behind a layered cache."""

from .cache import ImageCache, ImageCacheError, InMemoryImageCache
from .events import (
    EventBroadcaster,
    ImageEventType,
    ImageLoadedEvent,
    ImageLoadFailedEvent,
    attach_load_events,
)
from .identifiers import ImageIdParts, parse_scheme, split_image_id
from .models import CachedVolumeInfo, Image, ImageLoaderOptions, LoadObject, VolumeLoadStatus
from .pipeline import ImageLoadPipeline, MissingImageIdError
from .registry import ImageLoaderFn, LoaderRegistry, NoLoaderError
from .volume import ImageVolume, VolumeHandle

__all__ = [
    "CachedVolumeInfo",
    "EventBroadcaster",
    "Image",
    "ImageCache",
    "ImageCacheError",
    "ImageEventType",
    "ImageIdParts",
    "ImageLoadFailedEvent",
    "ImageLoadPipeline",
    "ImageLoadedEvent",
    "ImageLoaderFn",
    "ImageLoaderOptions",
    "ImageVolume",
    "InMemoryImageCache",
    "LoadObject",
    "LoaderRegistry",
    "MissingImageIdError",
    "NoLoaderError",
    "VolumeHandle",
    "VolumeLoadStatus",
    "attach_load_events",
    "parse_scheme",
    "split_image_id",
]
