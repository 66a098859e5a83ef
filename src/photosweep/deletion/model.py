from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class RemoteItemRef(Protocol):
    """Handle to an uploaded item; only a fetchable URL is required."""

    @property
    def base_url(self) -> str:
        ...


@dataclass(frozen=True)
class MediaItem:
    """Uploaded media item as returned by the photo library client."""
    base_url: str
    id: str = ""
    filename: str = ""
    mime_type: str = ""


@dataclass(frozen=True)
class DeletionRequest:
    remote_item: RemoteItemRef
    local_path: Path

    @property
    def url(self) -> str:
        return self.remote_item.base_url
