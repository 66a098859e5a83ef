from dataclasses import dataclass, field
from typing import FrozenSet

DEFAULT_IMAGE_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif",
    ".bmp", ".tif", ".tiff", ".webp", ".heic",
})


@dataclass
class Settings:
    hash_size: int = 8
    request_timeout: float = 30.0
    image_extensions: FrozenSet[str] = field(default_factory=lambda: DEFAULT_IMAGE_EXTENSIONS)
    dry_run: bool = False
