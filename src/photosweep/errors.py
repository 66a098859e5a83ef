"""Exception taxonomy for verify-then-delete processing."""


class PhotosweepError(Exception):
    """Base class for errors raised while handling a deletion request."""


class NotAnImageError(PhotosweepError):
    """Raised when a local path does not classify as a raster image."""


class FetchError(PhotosweepError):
    """Raised when a remote image cannot be fetched (transport or non-200 status)."""


class DecodeError(PhotosweepError):
    """Raised when bytes are missing, unreadable or not a supported image encoding."""


class DeleteError(PhotosweepError):
    """Raised when removing a verified local file fails."""
