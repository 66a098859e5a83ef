"""
Explicit raster decoder registry.

Formats are matched on their leading magic bytes, in registration order,
and decoded through the matching Pillow format plugin only. Nothing is
registered as a side effect of importing this module; callers build a
registry (usually via ``default_registry``) once and hand it to the loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, List, Optional, Tuple

from PIL import Image

from ..errors import DecodeError
from ..logging import get_logger

logger = get_logger(__name__)

DecodeFunc = Callable[[BinaryIO], Image.Image]


@dataclass(frozen=True)
class RasterFormat:
    """A decodable raster format identified by one or more byte signatures."""
    name: str
    signatures: Tuple[bytes, ...]
    decode: DecodeFunc

    def matches(self, header: bytes) -> bool:
        return any(header.startswith(signature) for signature in self.signatures)


def pillow_decoder(format_name: str) -> DecodeFunc:
    """Build a decode function restricted to a single Pillow format plugin."""
    def decode(stream: BinaryIO) -> Image.Image:
        img = Image.open(stream, formats=[format_name])
        # Force pixel data into memory so the image outlives the stream.
        img.load()
        return img
    return decode


class DecoderRegistry:
    def __init__(self) -> None:
        self._formats: List[RasterFormat] = []

    def register(self, raster_format: RasterFormat) -> None:
        if any(existing.name == raster_format.name for existing in self._formats):
            raise ValueError(f"Format {raster_format.name} is already registered")
        self._formats.append(raster_format)

    @property
    def format_names(self) -> List[str]:
        return [fmt.name for fmt in self._formats]

    @property
    def header_size(self) -> int:
        """Number of leading bytes needed to test every registered signature."""
        return max((len(sig) for fmt in self._formats for sig in fmt.signatures), default=0)

    def match(self, header: bytes) -> Optional[RasterFormat]:
        """Return the first registered format whose signature prefixes ``header``."""
        for fmt in self._formats:
            if fmt.matches(header):
                return fmt
        return None

    def decode(self, stream: BinaryIO, source: str = "<stream>") -> Image.Image:
        """
        Decode a seekable binary stream into an in-memory image.

        Args:
            stream: Seekable stream positioned at the start of the encoded image
            source: Path or URL used in error messages

        Returns:
            Loaded PIL image

        Raises:
            DecodeError: If no registered format matches or decoding fails
        """
        header = stream.read(self.header_size)
        stream.seek(0)

        fmt = self.match(header)
        if fmt is None:
            raise DecodeError(f"{source} is not a supported image (known formats: {', '.join(self.format_names)})")

        try:
            img = fmt.decode(stream)
        except Exception as exc:
            raise DecodeError(f"Failed to decode {source} as {fmt.name}: {exc}") from exc

        logger.debug(f"Decoded {source} as {fmt.name} ({img.width}x{img.height}, mode={img.mode})")
        return img


def default_registry() -> DecoderRegistry:
    """Registry covering GIF, JPEG and PNG."""
    registry = DecoderRegistry()
    registry.register(RasterFormat("GIF", (b"GIF87a", b"GIF89a"), pillow_decoder("GIF")))
    registry.register(RasterFormat("JPEG", (b"\xff\xd8\xff",), pillow_decoder("JPEG")))
    registry.register(RasterFormat("PNG", (b"\x89PNG\r\n\x1a\n",), pillow_decoder("PNG")))
    return registry
