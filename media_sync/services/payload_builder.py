"""
Builds put_object payloads for local media files.
"""
import gzip
import mimetypes
from pathlib import Path
from typing import Optional

from loguru import logger

from ..exceptions import CompressionFailure
from ..models.data_models import ManagedFile, UploadPayload
from .path_translator import PathTranslator

PUBLIC_READ_ACL = 'public-read'
DEFAULT_CONTENT_TYPE = 'application/octet-stream'
GZIP_COMPRESSION_LEVEL = 9


def guess_content_type(filename: str) -> str:
    """MIME type from the filename extension, or the generic binary type."""
    content_type, _ = mimetypes.guess_type(filename, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def gzip_encode(data: bytes) -> bytes:
    """Compress at maximum level with a zeroed header timestamp."""
    return gzip.compress(data, compresslevel=GZIP_COMPRESSION_LEVEL, mtime=0)


class ObjectPayloadBuilder:
    """Turns a ManagedFile into the body and headers of an upload."""

    def __init__(self, media_base_dir: str, translator: PathTranslator,
                 gzip_enabled: bool = False, cache_control_header: Optional[str] = None):
        self.media_base_dir = media_base_dir
        self.translator = translator
        self.gzip_enabled = gzip_enabled
        self.cache_control_header = cache_control_header or None

    def build(self, file: ManagedFile) -> UploadPayload:
        """
        Build the upload payload for a file.

        With gzip enabled the body is always re-read from the media
        directory on disk, never taken from file.content.

        Args:
            file: File to upload; left untouched

        Returns:
            UploadPayload ready for StorageGateway.put

        Raises:
            CompressionFailure: If gzip is enabled and the file cannot be
                read or compresses to nothing
            OSError: If gzip is disabled, the file carries no content and
                it cannot be read from disk
        """
        key = self.translator.to_key(file.directory, file.filename)
        content_encoding = None

        if self.gzip_enabled:
            body = self._compress(file)
            content_encoding = 'gzip'
        elif file.content is not None:
            body = file.content
        else:
            body = self._local_path(file).read_bytes()

        return UploadPayload(
            key=key,
            body=body,
            content_type=guess_content_type(file.filename),
            acl=PUBLIC_READ_ACL,
            content_encoding=content_encoding,
            cache_control=self.cache_control_header
        )

    def _local_path(self, file: ManagedFile) -> Path:
        return Path(self.media_base_dir) / file.directory / file.filename

    def _compress(self, file: ManagedFile) -> bytes:
        path = self._local_path(file)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise CompressionFailure(f"Cannot read {path} for gzip encoding: {e}") from e

        encoded = gzip_encode(raw)
        if not encoded:
            raise CompressionFailure(f"Gzip encoding of {path} produced no output")

        logger.debug(f"Gzip encoded {path}: {len(raw)} -> {len(encoded)} bytes")
        return encoded
