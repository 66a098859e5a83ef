"""Difference-hash fingerprints for decoded images."""

from dataclasses import dataclass

import imagehash
from PIL import Image

from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Fingerprint:
    """Fixed-length perceptual hash rendered as a string of '0'/'1' characters."""
    bits: str

    def __len__(self) -> int:
        return len(self.bits)

    def __str__(self) -> str:
        return self.bits

    @classmethod
    def from_image_hash(cls, image_hash: imagehash.ImageHash) -> "Fingerprint":
        return cls("".join("1" if bit else "0" for bit in image_hash.hash.flatten()))


def fingerprint(img: Image.Image, hash_size: int = 8) -> Fingerprint:
    """
    Compute the difference hash of an image.

    The image is reduced to a ``(hash_size + 1) x hash_size`` grayscale
    grid and each bit records whether brightness increases between
    horizontally adjacent pixels, giving ``hash_size ** 2`` bits.

    Args:
        img: Decoded image in any Pillow mode
        hash_size: Grid height; 8 yields a 64-bit fingerprint

    Returns:
        Fingerprint of the image
    """
    result = Fingerprint.from_image_hash(imagehash.dhash(img, hash_size=hash_size))
    logger.debug(f"dhash({img.width}x{img.height}) = {result}")
    return result
