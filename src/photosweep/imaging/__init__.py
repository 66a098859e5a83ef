"""Raster decoding from local files and remote HTTP resources."""

from .decoders import DecoderRegistry, RasterFormat, default_registry
from .loader import ImageLoader, load_from_path, load_from_url

__all__ = [
    "DecoderRegistry",
    "RasterFormat",
    "default_registry",
    "ImageLoader",
    "load_from_path",
    "load_from_url",
]
