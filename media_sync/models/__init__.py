"""
Models package for the media sync adapter.
"""
from .data_models import (
    ManagedFile,
    ObjectRecord,
    UploadPayload,
    SyncCursor,
    ErrorLog,
    NOT_FOUND,
    DONE,
    Sentinel
)
from .config import S3Config, MediaSyncConfig

__all__ = [
    'ManagedFile',
    'ObjectRecord',
    'UploadPayload',
    'SyncCursor',
    'ErrorLog',
    'NOT_FOUND',
    'DONE',
    'Sentinel',
    'S3Config',
    'MediaSyncConfig'
]
