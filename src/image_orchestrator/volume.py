"""Multi-slice volumes that can serve individual slices as images."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from image_orchestrator.models import Image, LoadObject, VolumeLoadStatus


class VolumeHandle(Protocol):
    """A cached multi-slice dataset whose slices map to image ids."""

    @property
    def load_status(self) -> VolumeLoadStatus:
        """Load progress; slices are only served once ``loaded`` is true."""

    @property
    def image_ids(self) -> Sequence[str]:
        """Image ids in slice order."""

    def convert_to_slice(self, image_id: str, image_id_index: int) -> LoadObject:
        """Build an image for one slice by copying its pixel data."""


class ImageVolume:
    """Volume held as one contiguous buffer of equally sized slices."""

    def __init__(
        self,
        volume_id: str,
        image_ids: Sequence[str],
        *,
        rows: int,
        columns: int,
        bytes_per_pixel: int = 2,
        pixel_data: bytes | bytearray | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.volume_id = volume_id
        self.rows = rows
        self.columns = columns
        self.bytes_per_pixel = bytes_per_pixel
        self.metadata = metadata or {}
        self._image_ids = list(image_ids)
        expected = self.slice_size * len(self._image_ids)
        if pixel_data is None:
            pixel_data = bytearray(expected)
        if len(pixel_data) != expected:
            raise ValueError(
                f"Volume {volume_id} expects {expected} bytes of pixel data, got {len(pixel_data)}"
            )
        self._pixel_data = bytearray(pixel_data)
        self._load_status = VolumeLoadStatus()
        self._filled: set[int] = set()

    @property
    def load_status(self) -> VolumeLoadStatus:
        return self._load_status

    @property
    def image_ids(self) -> list[str]:
        return list(self._image_ids)

    @property
    def slice_size(self) -> int:
        return self.rows * self.columns * self.bytes_per_pixel

    def write_slice(self, image_id_index: int, data: bytes) -> None:
        """Copy one slice into the buffer and count it as cached."""
        if not 0 <= image_id_index < len(self._image_ids):
            raise IndexError(f"Slice index {image_id_index} out of range for volume {self.volume_id}")
        if len(data) != self.slice_size:
            raise ValueError(f"Slice must be {self.slice_size} bytes, got {len(data)}")
        start = image_id_index * self.slice_size
        self._pixel_data[start : start + self.slice_size] = data
        self._filled.add(image_id_index)
        self._load_status.cached_frames = len(self._filled)
        self._load_status.loading = True

    def mark_loaded(self) -> None:
        self._load_status.loading = False
        self._load_status.loaded = True

    def convert_to_slice(self, image_id: str, image_id_index: int) -> LoadObject:
        if not 0 <= image_id_index < len(self._image_ids):
            return LoadObject.failed(
                IndexError(f"Slice index {image_id_index} out of range for volume {self.volume_id}")
            )

        start = image_id_index * self.slice_size
        image = Image(
            image_id=image_id,
            rows=self.rows,
            columns=self.columns,
            pixel_data=bytes(self._pixel_data[start : start + self.slice_size]),
            metadata={
                **self.metadata,
                "volume_id": self.volume_id,
                "slice_index": image_id_index,
                "bytes_per_pixel": self.bytes_per_pixel,
            },
        )
        return LoadObject.resolved(image)
