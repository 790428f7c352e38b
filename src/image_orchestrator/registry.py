"""Scheme-keyed registry of image loaders."""

from __future__ import annotations

import logging
from typing import Protocol

from image_orchestrator.identifiers import parse_scheme
from image_orchestrator.models import ImageLoaderOptions, LoadObject


class ImageLoaderFn(Protocol):
    """Starts loading one image and returns its load object without blocking."""

    def __call__(self, image_id: str, options: ImageLoaderOptions) -> LoadObject:
        """Begin the load for ``image_id``."""


class NoLoaderError(LookupError):
    """Raised when no loader is registered for an image id's scheme and no fallback exists."""

    def __init__(self, image_id: str, scheme: str | None) -> None:
        self.image_id = image_id
        self.scheme = scheme
        label = repr(scheme) if scheme is not None else "<none>"
        super().__init__(f"No image loader for image id {image_id!r} (scheme {label})")


class LoaderRegistry:
    """Maps schemes to loaders, with one optional fallback for unmatched ids."""

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._loaders: dict[str, ImageLoaderFn] = {}
        self._unknown_loader: ImageLoaderFn | None = None
        self._logger = logger or logging.getLogger("image_orchestrator.registry")

    @property
    def schemes(self) -> list[str]:
        return sorted(self._loaders)

    @property
    def has_unknown_loader(self) -> bool:
        return self._unknown_loader is not None

    def register_loader(self, scheme: str, loader: ImageLoaderFn) -> None:
        """Register ``loader`` for ``scheme``, replacing any previous one."""
        if not scheme:
            raise ValueError("Image loader scheme must be a non-empty string")

        replaced = scheme in self._loaders
        self._loaders[scheme] = loader
        self._logger.debug("loader_registered", extra={"scheme": scheme, "replaced": replaced})

    def register_unknown_loader(self, loader: ImageLoaderFn | None) -> ImageLoaderFn | None:
        """Install the fallback loader and return the one it replaces."""
        previous = self._unknown_loader
        self._unknown_loader = loader
        self._logger.debug("unknown_loader_registered", extra={"had_previous": previous is not None})
        return previous

    def unregister_loader(self, scheme: str) -> ImageLoaderFn | None:
        removed = self._loaders.pop(scheme, None)
        self._logger.debug("loader_unregistered", extra={"scheme": scheme, "removed": removed is not None})
        return removed

    def unregister_all(self) -> None:
        """Drop every scheme loader and the fallback."""
        count = len(self._loaders)
        self._loaders.clear()
        self._unknown_loader = None
        self._logger.info("loaders_unregistered", extra={"count": count})

    def resolve_loader(self, image_id: str) -> ImageLoaderFn:
        """Return the loader for ``image_id``'s scheme, else the fallback.

        Raises:
            NoLoaderError: nothing matches and no fallback is installed.
        """
        scheme = parse_scheme(image_id)
        if scheme is not None:
            loader = self._loaders.get(scheme)
            if loader is not None:
                return loader

        if self._unknown_loader is not None:
            return self._unknown_loader

        raise NoLoaderError(image_id, scheme)
