from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config import DEFAULT_IMAGE_EXTENSIONS

ImageClassifier = Callable[[Path], bool]


def is_image(path: Path | str, extensions: Optional[Iterable[str]] = None) -> bool:
    """Return True if the path's extension names a raster image type (case-insensitive)."""
    allowed = frozenset(ext.lower() for ext in (extensions or DEFAULT_IMAGE_EXTENSIONS))
    return Path(path).suffix.lower() in allowed


def extension_classifier(extensions: Iterable[str]) -> ImageClassifier:
    """Build a classifier bound to a fixed extension set."""
    allowed = frozenset(ext.lower() for ext in extensions)
    return lambda path: is_image(path, allowed)
