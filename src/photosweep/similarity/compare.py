"""Hamming-distance comparison of fingerprints."""

from PIL import Image

from .fingerprint import Fingerprint, fingerprint

# Fingerprints closer than len / SIMILARITY_DIVISOR differing positions are
# treated as the same picture.
SIMILARITY_DIVISOR = 16


def hamming_distance(a: Fingerprint, b: Fingerprint) -> int:
    """
    Count the positions at which two equal-length fingerprints differ.

    Raises:
        ValueError: If the fingerprints have different lengths
    """
    if len(a) != len(b):
        raise ValueError(f"Cannot compare fingerprints of length {len(a)} and {len(b)}")
    return sum(1 for x, y in zip(a.bits, b.bits) if x != y)


def similarity_threshold(length: int) -> int:
    """Exclusive upper bound on the distance for fingerprints of ``length`` positions."""
    return length // SIMILARITY_DIVISOR


def are_similar(a: Fingerprint, b: Fingerprint) -> bool:
    # Unequal or empty fingerprints are not comparable: never "same".
    if len(a) != len(b) or len(a) == 0:
        return False
    return hamming_distance(a, b) < similarity_threshold(len(a))


def is_same_image(img_a: Image.Image, img_b: Image.Image, hash_size: int = 8) -> bool:
    return are_similar(fingerprint(img_a, hash_size), fingerprint(img_b, hash_size))
