"""
Translation between local media paths and S3 object keys.
"""
import os
from typing import Tuple

DELIMITER = '/'


class PathTranslator:
    """
    Maps the local media tree onto the flat key space of the bucket.

    Directories exist only as key prefixes ending in '/'; the empty prefix
    stands for the media root and lists the whole bucket.
    """

    def __init__(self, media_base_dir: str):
        # Absolute; relative inputs are resolved the same way before stripping
        base = os.path.abspath(media_base_dir) if media_base_dir else ''
        self.media_base_dir = self._normalize(base).rstrip(DELIMITER)

    @staticmethod
    def _normalize(path: str) -> str:
        return (path or '').replace('\\', DELIMITER)

    def to_key(self, directory: str, filename: str) -> str:
        """Join directory and filename into a key. '..' segments are left as-is."""
        directory = self._normalize(directory)
        filename = self._normalize(filename)
        if not directory:
            return filename
        return f"{directory}{DELIMITER}{filename}"

    def split_key(self, key: str) -> Tuple[str, str]:
        """Split a key on its last '/' into (directory, filename)."""
        directory, _, filename = key.rpartition(DELIMITER)
        return directory, filename

    def media_relative_path(self, path: str) -> str:
        """
        Strip the media base directory from a local path.

        Relative paths are resolved against the working directory, the same
        way the base directory was; a path outside the base is returned
        unchanged.
        """
        path = self._normalize(path)
        base = self.media_base_dir
        if not base or not path:
            return path

        resolved = path
        if not os.path.isabs(path):
            resolved = self._normalize(os.path.abspath(path))

        if resolved == base:
            return ''
        if resolved.startswith(base + DELIMITER):
            return resolved[len(base) + 1:]
        return path

    def to_prefix(self, local_path: str) -> str:
        """
        Map a local directory path to the listing prefix for it.

        The result is either '' or ends in exactly one '/', so applying the
        translation to its own output changes nothing unless the prefix
        itself resolves to a path inside the media base directory.
        """
        relative = self.media_relative_path(local_path).strip(DELIMITER)
        if not relative:
            return ''
        return relative + DELIMITER

    @staticmethod
    def is_placeholder(key: str) -> bool:
        return key.endswith(DELIMITER)
