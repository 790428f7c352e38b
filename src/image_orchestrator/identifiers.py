"""Image id grammar: ``<scheme>:<body>``, split on the first colon."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ImageIdParts:
    scheme: str | None
    body: str


def split_image_id(image_id: str) -> ImageIdParts:
    """Split an image id into scheme and body.

    The scheme is everything before the first colon. An id without a colon, or
    with nothing before it, has no scheme and the whole id is the body.
    """
    scheme, sep, body = image_id.partition(":")
    if not sep or not scheme:
        return ImageIdParts(scheme=None, body=image_id)
    return ImageIdParts(scheme=scheme, body=body)


def parse_scheme(image_id: str) -> str | None:
    return split_image_id(image_id).scheme
