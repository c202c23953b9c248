"""
Media storage facade wiring the S3 mirror components together.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger

from ..clients.media_directory import MediaDirectory
from ..clients.report_api import SyncReportAPI
from ..clients.s3_gateway import StorageGateway
from ..models.config import MediaSyncConfig
from ..models.data_models import ManagedFile
from .directory_ops import DirectoryOps
from .path_translator import PathTranslator
from .payload_builder import ObjectPayloadBuilder
from .sync_engine import SyncEngine


class MediaStorage:
    """
    Builds the mirror components from configuration and runs full syncs.

    Collaborators may be injected (tests pass a gateway around a fake S3
    client); anything not given is built from the config.
    """

    def __init__(self, config: MediaSyncConfig, gateway: Optional[StorageGateway] = None,
                 media_directory: Optional[MediaDirectory] = None,
                 reporter: Optional[SyncReportAPI] = None, max_workers: int = 1):
        """
        Initialize media storage with configuration.

        Args:
            config: MediaSyncConfig containing all adapter configuration
            gateway: Storage gateway; built with boto3 from config.s3 if omitted
            media_directory: Local media collaborator; defaults to config.media_base_dir
            reporter: Failure/result reporter; built from config.report_url if set
            max_workers: Upload concurrency for batch imports
        """
        self.config = config

        self.gateway = gateway or StorageGateway.from_config(config.s3)
        self.media_directory = media_directory or MediaDirectory(config.media_base_dir)
        if reporter is None and config.report_url:
            reporter = SyncReportAPI(config.report_url)
        self.reporter = reporter

        base_dir = self.media_directory.get_media_base_dir()
        self.translator = PathTranslator(base_dir)
        self.payload_builder = ObjectPayloadBuilder(
            base_dir,
            self.translator,
            gzip_enabled=config.gzip_enabled,
            cache_control_header=config.cache_control_header
        )
        self.engine = SyncEngine(
            self.gateway,
            self.translator,
            self.payload_builder,
            self.media_directory,
            failure_hook=self.reporter.report_failure if self.reporter else None,
            max_workers=max_workers
        )
        self.directories = DirectoryOps(self.gateway, self.translator)

        logger.info(f"MediaStorage initialized for bucket {self.gateway.bucket} "
                    f"(gzip: {config.gzip_enabled}, cache-control: {config.cache_control_header or 'none'})")

    def run_initial_sync(self, batch_size: int = 100) -> Dict[str, Any]:
        """
        Push every file of the local media directory into the bucket.

        Files are read and imported in batches; a file that fails is
        recorded and the sync continues.

        Returns:
            Dictionary containing sync statistics and results
        """
        logger.info(f"Starting initial sync of {self.media_directory.get_media_base_dir()}")

        sync_stats: Dict[str, Any] = {
            'start_time': datetime.now(),
            'files_imported': 0,
            'files_failed': 0,
            'total_size': 0,
            'errors': []
        }
        errors_before = len(self.engine.errors)

        batch: List[ManagedFile] = []
        for relative_path in self.media_directory.iter_files():
            try:
                file = self.media_directory.collect_file_info(
                    self.media_directory.get_media_base_dir(), relative_path
                )
            except OSError as e:
                error_msg = f"Failed to read {relative_path}: {str(e)}"
                sync_stats['errors'].append(error_msg)
                sync_stats['files_failed'] += 1
                logger.error(error_msg)
                continue

            batch.append(file)
            if len(batch) >= batch_size:
                self._import_batch(batch, sync_stats)
                batch = []

        if batch:
            self._import_batch(batch, sync_stats)

        new_errors = list(self.engine.errors)[errors_before:]
        sync_stats['errors'].extend(new_errors)
        sync_stats['files_failed'] += len(new_errors)
        sync_stats['files_imported'] -= len(new_errors)

        sync_stats['end_time'] = datetime.now()
        sync_stats['duration'] = (sync_stats['end_time'] - sync_stats['start_time']).total_seconds()
        sync_stats['success'] = sync_stats['files_failed'] == 0

        logger.info(f"Initial sync completed - Imported: {sync_stats['files_imported']}, "
                    f"Failed: {sync_stats['files_failed']}, "
                    f"Total size: {sync_stats['total_size']} bytes, "
                    f"Duration: {sync_stats['duration']:.2f} seconds")

        if self.reporter:
            try:
                self.reporter.report_results(sync_stats)
            except Exception as e:
                logger.warning(f"Failed to report sync results: {str(e)}")

        return sync_stats

    def _import_batch(self, batch: List[ManagedFile], sync_stats: Dict[str, Any]) -> None:
        failed_before = len(self.engine.errors.failed_keys)
        self.engine.import_files(batch)
        failed_keys = set(self.engine.errors.failed_keys[failed_before:])

        # total_size counts only files that reached the bucket
        sync_stats['files_imported'] += len(batch)
        sync_stats['total_size'] += sum(
            len(file.content or b'') for file in batch if file.key not in failed_keys
        )

    def get_sync_status(self) -> Dict[str, Any]:
        """
        Get current mirror status.

        Returns:
            Dictionary containing bucket, connection and error state
        """
        return {
            'storage_name': self.engine.storage_name,
            'bucket': self.gateway.bucket,
            'media_base_dir': self.media_directory.get_media_base_dir(),
            'connection_ok': self.gateway.test_connection(),
            'import_errors': len(self.engine.errors),
            'suppressed_failures': self.engine.suppressed_failures,
            'degraded': self.engine.degraded
        }
