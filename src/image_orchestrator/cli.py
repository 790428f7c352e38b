"""CLI-side handler wrappers around the async load pipeline."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

from image_orchestrator.models import Image, ImageLoaderOptions
from image_orchestrator.pipeline import ImageLoadPipeline, MissingImageIdError
from image_orchestrator.registry import NoLoaderError


class LoadStatus(str, Enum):
    """Outcome of one CLI load request."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NO_LOADER = "no_loader"
    INVALID_ID = "invalid_id"


@dataclass(slots=True)
class LoadReport:
    image_id: str
    status: LoadStatus
    detail: str
    size_bytes: int | None = None


class CliImageLoader:
    """Simple sync-friendly facade over the async load pipeline."""

    def __init__(self, pipeline: ImageLoadPipeline) -> None:
        self._pipeline = pipeline

    def load_many(
        self,
        image_ids: list[str],
        *,
        cache: bool = True,
        options: ImageLoaderOptions | None = None,
    ) -> list[LoadReport]:
        """Load every id concurrently and report one outcome per id, in input order."""
        return asyncio.run(self.load_many_async(image_ids, cache=cache, options=options))

    async def load_many_async(
        self,
        image_ids: list[str],
        *,
        cache: bool = True,
        options: ImageLoaderOptions | None = None,
    ) -> list[LoadReport]:
        load = self._pipeline.load_and_cache_image if cache else self._pipeline.load_image
        reports: dict[int, LoadReport] = {}
        pending: dict[int, asyncio.Future[Image]] = {}

        for index, image_id in enumerate(image_ids):
            try:
                pending[index] = load(image_id, options)
            except NoLoaderError as exc:
                reports[index] = LoadReport(image_id=image_id, status=LoadStatus.NO_LOADER, detail=str(exc))
            except MissingImageIdError as exc:
                reports[index] = LoadReport(image_id=image_id, status=LoadStatus.INVALID_ID, detail=str(exc))

        results = await asyncio.gather(*pending.values(), return_exceptions=True)
        for index, result in zip(pending, results):
            image_id = image_ids[index]
            if isinstance(result, BaseException):
                reports[index] = LoadReport(
                    image_id=image_id,
                    status=LoadStatus.FAILED,
                    detail=f"{type(result).__name__}: {result}",
                )
            else:
                reports[index] = LoadReport(
                    image_id=image_id,
                    status=LoadStatus.SUCCEEDED,
                    detail=f"{result.rows}x{result.columns}",
                    size_bytes=result.size_in_bytes,
                )

        return [reports[index] for index in range(len(image_ids))]
