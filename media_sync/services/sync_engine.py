"""
Sync engine: export from and import into the S3 media mirror.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from loguru import logger

from ..clients.media_directory import MediaDirectory
from ..clients.s3_gateway import StorageGateway
from ..exceptions import ObjectNotFoundError, StorageError
from ..models.data_models import (
    DONE,
    NOT_FOUND,
    ErrorLog,
    ManagedFile,
    ObjectRecord,
    Sentinel,
    SyncCursor
)
from .path_translator import PathTranslator
from .payload_builder import PUBLIC_READ_ACL, ObjectPayloadBuilder

FailureHook = Callable[[str, str, Exception], object]


class SyncEngine:
    """
    Moves media files between the local media directory and the bucket.

    One engine is one sync session: it owns the export cursor and the
    import ErrorLog, and neither is shared with other engines.

    Failure policy:
    - read paths (load_by_key, export) raise TransportError; a missing
      object is NOT_FOUND, not an error
    - import_files never raises for a single file; failures go to the
      ErrorLog and every file is attempted
    - save_file, copy_file, rename_file and delete_file log and suppress
      failures so the CMS operation that triggered them is never blocked;
      suppressed failures are counted and passed to failure_hook
    - clear raises on failure
    """

    storage_name = 'Amazon S3'
    connection_name = None

    def __init__(self, gateway: StorageGateway, translator: PathTranslator,
                 payload_builder: ObjectPayloadBuilder, media_directory: MediaDirectory,
                 failure_hook: Optional[FailureHook] = None, max_workers: int = 1):
        """
        Initialize the engine with its collaborators.

        Args:
            gateway: Storage gateway for the mirror bucket
            translator: Path/key translation rules
            payload_builder: Builds upload payloads for local files
            media_directory: Local media directory collaborator
            failure_hook: Called as hook(operation, key, error) for every
                suppressed failure
            max_workers: Upload concurrency for import_files (1 = sequential)
        """
        self.gateway = gateway
        self.translator = translator
        self.payload_builder = payload_builder
        self.media_directory = media_directory
        self.failure_hook = failure_hook
        self.max_workers = max(1, max_workers)

        self.errors = ErrorLog()
        self.cursor = SyncCursor()
        self.suppressed_failures = 0

    @property
    def degraded(self) -> bool:
        """True once any mirror update has been suppressed."""
        return self.suppressed_failures > 0

    def has_errors(self) -> bool:
        return self.errors.has_errors()

    # Reads

    def load_by_key(self, key: str) -> Union[ObjectRecord, Sentinel]:
        """
        Fetch a single object.

        Returns:
            ObjectRecord, or NOT_FOUND if the key is missing, has no body
            or is a directory placeholder

        Raises:
            TransportError: On any storage failure other than a missing key
        """
        if self.translator.is_placeholder(key):
            return NOT_FOUND

        try:
            content = self.gateway.get(key)
        except ObjectNotFoundError:
            logger.debug(f"Object does not exist yet: {key}")
            return NOT_FOUND

        if content is None:
            return NOT_FOUND
        return ObjectRecord.from_key(key, content)

    def file_exists(self, key: str) -> bool:
        return self.gateway.exists(key)

    def export_page(self, cursor: SyncCursor,
                    page_size: int = 100) -> Tuple[Union[List[ManagedFile], Sentinel], SyncCursor]:
        """
        Fetch the page of files following the cursor.

        Args:
            cursor: Position after the previous page
            page_size: Maximum number of keys to list

        Returns:
            (files, next_cursor); files is DONE once a listing comes back
            empty. A page of only directory placeholders yields an empty
            list, not DONE.
        """
        if cursor.exhausted:
            return DONE, cursor

        listing = self.gateway.list(marker=cursor.marker, max_keys=page_size)
        if not listing.entries:
            logger.info("Export listing exhausted")
            return DONE, cursor.finish()

        files = []
        for entry in listing.entries:
            if entry.is_placeholder:
                continue

            try:
                content = self.gateway.get(entry.key)
            except ObjectNotFoundError:
                logger.warning(f"Object disappeared during export: {entry.key}")
                continue
            if content is None:
                continue

            directory, filename = self.translator.split_key(entry.key)
            files.append(ManagedFile(directory=directory, filename=filename, content=content))

        next_cursor = cursor.advance(listing.entries[-1].key)
        logger.info(f"Exported {len(files)} files, next marker: {next_cursor.marker}")
        return files, next_cursor

    def export_files(self, offset: int = 0, page_size: int = 100) -> Union[List[ManagedFile], Sentinel]:
        """
        Return the next page of files, continuing from the previous call.

        offset is accepted for interface compatibility and ignored;
        position comes from the engine's cursor.
        """
        files, self.cursor = self.export_page(self.cursor, page_size)
        return files

    def iter_export(self, page_size: int = 100) -> Iterator[ManagedFile]:
        """Yield every file in the bucket, one page at a time."""
        cursor = SyncCursor()
        while True:
            files, cursor = self.export_page(cursor, page_size)
            if files is DONE:
                return
            yield from files

    def export_directories(self, offset: int = 0, count: int = 100):
        """Directories are derived from keys, so there is nothing to export."""
        return DONE

    # Writes

    def import_directories(self, dirs: Iterable[dict] = ()) -> None:
        """Directories exist only as key prefixes; nothing is stored for them."""
        return None

    def import_files(self, files: Iterable[ManagedFile]) -> ErrorLog:
        """
        Upload a batch of files, attempting every one.

        Returns:
            The session ErrorLog; inspect it (or has_errors) after the call
        """
        files = list(files)
        logger.info(f"Importing {len(files)} files into bucket {self.gateway.bucket}")
        failed = 0

        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(self._upload, file): file for file in files}
                for future in as_completed(futures):
                    error = future.result()
                    if error:
                        self.errors.append(error, futures[future].key)
                        failed += 1
        else:
            for file in files:
                error = self._upload(file)
                if error:
                    self.errors.append(error, file.key)
                    failed += 1

        logger.info(f"Import completed - Uploaded: {len(files) - failed}, Failed: {failed}")
        return self.errors

    def _upload(self, file: ManagedFile) -> Optional[str]:
        """Upload one file; return an error message instead of raising."""
        try:
            self.gateway.put(self.payload_builder.build(file))
            return None
        except Exception as e:
            error_msg = f"Failed to upload {file.key}: {str(e)}"
            logger.error(error_msg)
            return error_msg

    def save_file(self, filename: str) -> None:
        """Upload one file from the media directory; failures are suppressed."""
        try:
            file = self.media_directory.collect_file_info(
                self.media_directory.get_media_base_dir(), filename
            )
            self.gateway.put(self.payload_builder.build(file))
            logger.info(f"Saved {filename} to bucket {self.gateway.bucket}")
        except Exception as e:
            self._suppress('save_file', filename, e)

    def copy_file(self, old_path: str, new_path: str) -> None:
        try:
            self.gateway.copy(old_path, new_path, PUBLIC_READ_ACL)
        except StorageError as e:
            self._suppress('copy_file', old_path, e)

    def rename_file(self, old_path: str, new_path: str) -> None:
        """Copy to the new key, then delete the old one; failures are suppressed."""
        try:
            self.gateway.copy(old_path, new_path, PUBLIC_READ_ACL)
            self.gateway.delete(old_path)
        except StorageError as e:
            self._suppress('rename_file', old_path, e)

    def delete_file(self, path: str) -> None:
        try:
            self.gateway.delete(path)
        except StorageError as e:
            self._suppress('delete_file', path, e)

    def clear(self) -> int:
        """
        Delete every object in the bucket. Irreversible; callers must confirm.

        Raises:
            TransportError: If the batch delete fails
        """
        logger.warning(f"Clearing all objects from bucket {self.gateway.bucket}")
        return self.gateway.delete_all_under_prefix('')

    def _suppress(self, operation: str, key: str, error: Exception) -> None:
        self.suppressed_failures += 1
        logger.warning(f"Mirror {operation} failed for {key}, continuing: {error}")

        if self.failure_hook is None:
            return
        try:
            self.failure_hook(operation, key, error)
        except Exception as hook_error:
            logger.error(f"Failure hook raised while reporting {operation} for {key}: {hook_error}")
