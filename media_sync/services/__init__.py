# Services package
from .path_translator import PathTranslator
from .payload_builder import ObjectPayloadBuilder
from .sync_engine import SyncEngine
from .directory_ops import DirectoryOps
from .media_storage import MediaStorage

__all__ = ['PathTranslator', 'ObjectPayloadBuilder', 'SyncEngine', 'DirectoryOps', 'MediaStorage']
