"""
Exceptions raised by the media sync adapter.
"""


class MediaSyncError(Exception):
    """Base exception for media sync operations."""
    pass


class StorageError(MediaSyncError):
    """A storage gateway call failed."""
    pass


class TransportError(StorageError):
    """Network, auth or service failure reported by the S3 backend."""
    pass


class ObjectNotFoundError(StorageError):
    """The requested key does not exist in the bucket."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


class CompressionFailure(MediaSyncError):
    """Gzip encoding of a local file produced no usable body."""
    pass


class PartialBatchFailure(MediaSyncError):
    """One or more files of an import batch failed to upload."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"{len(errors)} file(s) failed to sync")
