from __future__ import annotations

import asyncio

import pytest

from image_orchestrator.cache import ImageCacheError, InMemoryImageCache
from image_orchestrator.events import EventBroadcaster
from image_orchestrator.models import Image, LoadObject
from image_orchestrator.pipeline import ImageLoadPipeline
from image_orchestrator.registry import LoaderRegistry
from image_orchestrator.volume import ImageVolume


def _image(image_id: str) -> Image:
    return Image(image_id=image_id, rows=1, columns=1, pixel_data=b"\x00")


def test_cache_rejects_duplicate_and_empty_ids() -> None:
    async def _run() -> None:
        cache = InMemoryImageCache()
        cache.put_image_load_object("wadouri:a.dcm", LoadObject.resolved(_image("wadouri:a.dcm")))

        with pytest.raises(ImageCacheError, match="already in cache"):
            cache.put_image_load_object("wadouri:a.dcm", LoadObject.resolved(_image("wadouri:a.dcm")))
        with pytest.raises(ImageCacheError):
            cache.put_image_load_object("", LoadObject.resolved(_image("")))

    asyncio.run(_run())


def test_cache_evicts_oldest_entry_when_full() -> None:
    async def _run() -> InMemoryImageCache:
        cache = InMemoryImageCache(max_images=2)
        for name in ("a", "b", "c"):
            cache.put_image_load_object(f"wadouri:{name}", LoadObject.resolved(_image(f"wadouri:{name}")))
        return cache

    cache = asyncio.run(_run())
    assert len(cache) == 2
    assert "wadouri:a" not in cache
    assert cache.get_image_load_object("wadouri:c") is not None


def test_failed_entry_is_dropped_but_successful_one_kept() -> None:
    async def _run() -> InMemoryImageCache:
        cache = InMemoryImageCache()
        cache.put_image_load_object("wadouri:ok", LoadObject.resolved(_image("wadouri:ok")))
        failing = LoadObject.failed(RuntimeError("boom"))
        cache.put_image_load_object("wadouri:bad", failing)
        await asyncio.sleep(0)
        return cache

    cache = asyncio.run(_run())
    assert "wadouri:ok" in cache
    assert "wadouri:bad" not in cache


def test_volume_index_maps_ids_to_slices() -> None:
    cache = InMemoryImageCache()
    volume = ImageVolume("vol", ["wadouri:s0", "wadouri:s1"], rows=2, columns=2)
    cache.put_volume(volume)

    info = cache.get_volume_containing_image_id("wadouri:s1")
    assert info is not None
    assert info.volume is volume
    assert info.image_id_index == 1
    assert cache.get_volume_containing_image_id("wadouri:s9") is None

    cache.purge()
    assert cache.get_volume_containing_image_id("wadouri:s1") is None


def test_max_images_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InMemoryImageCache(max_images=0)


def test_removed_entry_is_dispatched_again() -> None:
    calls: list[str] = []

    def _loader(image_id: str, options: dict) -> LoadObject:
        calls.append(image_id)
        return LoadObject.resolved(_image(image_id))

    async def _run():
        cache = InMemoryImageCache()
        registry = LoaderRegistry()
        registry.register_loader("wadouri", _loader)
        pipeline = ImageLoadPipeline(registry, cache, EventBroadcaster())

        first = pipeline.load_and_cache_image("wadouri:a.dcm")
        await first
        removed = cache.remove_image_load_object("wadouri:a.dcm")
        missing = cache.remove_image_load_object("wadouri:a.dcm")
        second = pipeline.load_and_cache_image("wadouri:a.dcm")
        await second
        return first, second, removed, missing, cache

    first, second, removed, missing, cache = asyncio.run(_run())
    assert removed is not None
    assert removed.promise is first
    assert missing is None
    assert second is not first
    assert calls == ["wadouri:a.dcm", "wadouri:a.dcm"]
    assert cache.get_image_load_object("wadouri:a.dcm").promise is second
