from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import requests
from PIL import Image

from ..errors import DecodeError, FetchError
from ..logging import get_logger
from .decoders import DecoderRegistry, default_registry

logger = get_logger(__name__)


class ImageLoader:
    """
    Loads images from disk or over HTTP through a decoder registry.

    A single failed fetch or decode is reported to the caller as
    ``FetchError`` / ``DecodeError``; nothing is retried here, and the
    session is used without a retrying adapter.
    """

    def __init__(
        self,
        registry: Optional[DecoderRegistry] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self._registry = registry or default_registry()
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def registry(self) -> DecoderRegistry:
        return self._registry

    def load_from_path(self, path: Path | str) -> Image.Image:
        path = Path(path)
        try:
            with path.open("rb") as fh:
                return self._registry.decode(fh, source=str(path))
        except OSError as exc:
            raise DecodeError(f"Cannot read {path}: {exc}") from exc

    def load_from_url(self, url: str) -> Image.Image:
        try:
            response = self._session.get(url, timeout=self._timeout, stream=True)
        except requests.RequestException as exc:
            raise FetchError(f"GET {url} failed: {exc}") from exc

        with response:
            if response.status_code != 200:
                raise FetchError(f"Expected http status 200 from {url}, got {response.status_code}")
            try:
                body = response.content
            except requests.RequestException as exc:
                raise FetchError(f"Reading body of {url} failed: {exc}") from exc

        logger.debug(f"Fetched {len(body)} bytes from {url}")
        return self._registry.decode(io.BytesIO(body), source=url)

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._session.close()


def load_from_path(path: Path | str, registry: Optional[DecoderRegistry] = None) -> Image.Image:
    """Decode a local image file with a one-off loader."""
    loader = ImageLoader(registry=registry)
    try:
        return loader.load_from_path(path)
    finally:
        loader.close()


def load_from_url(url: str, registry: Optional[DecoderRegistry] = None, timeout: float = 30.0) -> Image.Image:
    """Fetch and decode a remote image with a one-off loader."""
    loader = ImageLoader(registry=registry, timeout=timeout)
    try:
        return loader.load_from_url(url)
    finally:
        loader.close()
