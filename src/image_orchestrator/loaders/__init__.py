"""Concrete image loaders that can be registered with a ``LoaderRegistry``."""

from .file import FILE_SCHEME, FileImageLoader

__all__ = ["FILE_SCHEME", "FileImageLoader"]
