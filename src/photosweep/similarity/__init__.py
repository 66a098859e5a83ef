"""Perceptual similarity between a remote upload and its local source."""

from .fingerprint import Fingerprint, fingerprint
from .compare import are_similar, hamming_distance, is_same_image, similarity_threshold

__all__ = [
    "Fingerprint",
    "fingerprint",
    "are_similar",
    "hamming_distance",
    "is_same_image",
    "similarity_threshold",
]
