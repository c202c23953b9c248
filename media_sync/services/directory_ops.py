"""
Directory emulation over the flat key space of the bucket.
"""
from typing import Dict, List

from loguru import logger

from ..clients.s3_gateway import StorageGateway
from ..exceptions import ObjectNotFoundError
from ..models.data_models import ManagedFile
from .path_translator import DELIMITER, PathTranslator


class DirectoryOps:
    """
    Lists and deletes "directories" of the mirror.

    A directory is a view over every key sharing its prefix; it is never
    stored as an entity of its own.
    """

    def __init__(self, gateway: StorageGateway, translator: PathTranslator):
        self.gateway = gateway
        self.translator = translator

    def list_subdirectories(self, path: str) -> List[Dict[str, str]]:
        """
        List the immediate child directories of a local media path.

        Returns:
            One {'name': prefix} entry per child, prefix ending in '/'
        """
        prefix = self.translator.to_prefix(path)
        listing = self.gateway.list(prefix=prefix, delimiter=DELIMITER)

        subdirectories = [{'name': common_prefix} for common_prefix in listing.common_prefixes]
        logger.debug(f"Found {len(subdirectories)} subdirectories under '{prefix}'")
        return subdirectories

    def list_files(self, path: str) -> List[ManagedFile]:
        """
        List the files directly inside a local media path, with content.

        Each body is fetched with its own request after the listing.
        """
        prefix = self.translator.to_prefix(path)
        listing = self.gateway.list(prefix=prefix, delimiter=DELIMITER)

        files = []
        for entry in listing.entries:
            if entry.key == prefix or entry.is_placeholder:
                continue

            try:
                content = self.gateway.get(entry.key)
            except ObjectNotFoundError:
                logger.warning(f"Object disappeared during directory listing: {entry.key}")
                continue
            if content is None:
                continue

            directory, filename = self.translator.split_key(entry.key)
            files.append(ManagedFile(directory=directory, filename=filename, content=content))

        logger.debug(f"Found {len(files)} files under '{prefix}'")
        return files

    def delete_directory(self, path: str) -> int:
        """
        Delete every object under the prefix of a local media path.

        The media root maps to the empty prefix, so deleting it empties
        the bucket.

        Returns:
            Number of deleted objects

        Raises:
            TransportError: If the batch delete fails part way
        """
        prefix = self.translator.to_prefix(path)
        if not prefix:
            logger.warning(f"Deleting the media root empties bucket {self.gateway.bucket}")

        logger.info(f"Deleting directory '{prefix}' from bucket {self.gateway.bucket}")
        return self.gateway.delete_all_under_prefix(prefix)
