"""Loader for ``file:<path>`` image ids.

Pixel decoding is left to downstream consumers: the image carries the file's raw
bytes and the read happens on a worker thread so the event loop stays free.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from image_orchestrator.identifiers import split_image_id
from image_orchestrator.models import Image, ImageLoaderOptions, LoadObject

FILE_SCHEME = "file"


class FileImageLoader:
    """Reads image bytes from the local filesystem."""

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root).expanduser() if root is not None else None

    def resolve_path(self, image_id: str) -> Path:
        path = Path(split_image_id(image_id).body).expanduser()
        if self._root is not None and not path.is_absolute():
            path = self._root / path
        return path

    def __call__(self, image_id: str, options: ImageLoaderOptions) -> LoadObject:
        return LoadObject.from_coroutine(self._load(image_id, options))

    async def _load(self, image_id: str, options: ImageLoaderOptions) -> Image:
        path = self.resolve_path(image_id)
        data = await asyncio.to_thread(self._read, path)
        return Image(
            image_id=image_id,
            rows=int(options.get("rows", 0)),
            columns=int(options.get("columns", 0)),
            pixel_data=data,
            metadata={"path": str(path), "size_bytes": len(data)},
        )

    @staticmethod
    def _read(path: Path) -> bytes:
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        return path.read_bytes()
