"""Local file classification helpers."""

from .filetypes import is_image

__all__ = ["is_image"]
