"""
Local media directory access: the filesystem side of the mirror.
"""
import os
from pathlib import Path
from typing import Iterator

from loguru import logger

from ..models.data_models import ManagedFile


class MediaDirectory:
    """Reads files from the CMS media directory on local disk."""

    def __init__(self, base_dir: str):
        self.base_dir = str(base_dir)

    def get_media_base_dir(self) -> str:
        return self.base_dir

    def collect_file_info(self, base_dir: str, filename: str) -> ManagedFile:
        """
        Read a media file and split its path into directory and filename.

        Args:
            base_dir: Media base directory the filename is relative to
            filename: Path of the file relative to base_dir

        Returns:
            ManagedFile with the file bytes loaded

        Raises:
            OSError: If the file cannot be read
        """
        relative = filename.replace('\\', '/').lstrip('/')
        path = Path(base_dir) / relative
        content = path.read_bytes()

        directory, _, name = relative.rpartition('/')
        logger.debug(f"Collected {len(content)} bytes from {path}")
        return ManagedFile(directory=directory, filename=name, content=content)

    def iter_files(self, relative_dir: str = '') -> Iterator[str]:
        """
        Walk the media directory and yield every file path relative to it.

        Hidden files and directories are skipped.
        """
        root = Path(self.base_dir) / relative_dir.strip('/')
        if not root.is_dir():
            logger.warning(f"Media directory does not exist: {root}")
            return

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
            for name in sorted(filenames):
                if name.startswith('.'):
                    continue
                full_path = Path(dirpath) / name
                yield full_path.relative_to(self.base_dir).as_posix()
