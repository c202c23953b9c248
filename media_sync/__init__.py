"""
Media S3 Sync - Mirrors a CMS media directory onto an S3 bucket.
"""

from .services.media_storage import MediaStorage
from .services.sync_engine import SyncEngine
from .services.directory_ops import DirectoryOps
from .models.config import MediaSyncConfig, S3Config
from .models.data_models import ManagedFile, ObjectRecord, ErrorLog, NOT_FOUND, DONE
from .logging_setup import setup_logging

__version__ = "1.0.0"
__all__ = [
    "MediaStorage",
    "SyncEngine",
    "DirectoryOps",
    "MediaSyncConfig",
    "S3Config",
    "ManagedFile",
    "ObjectRecord",
    "ErrorLog",
    "NOT_FOUND",
    "DONE",
    "setup_logging"
]
