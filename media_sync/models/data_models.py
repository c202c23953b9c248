"""
Core data models for the media sync adapter.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Iterator, List, Optional

from ..exceptions import PartialBatchFailure


class Sentinel:
    """Falsy marker value with a readable repr."""

    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        return False


# Returned by load_by_key when the object does not exist
NOT_FOUND = Sentinel('NOT_FOUND')

# Returned by export_files once the listing is exhausted
DONE = Sentinel('DONE')


@dataclass
class ManagedFile:
    """A media file being synchronized, addressed by directory and filename."""
    directory: str
    filename: str
    content: Optional[bytes] = None

    @property
    def key(self) -> str:
        if not self.directory:
            return self.filename
        return f"{self.directory}/{self.filename}"


@dataclass
class ObjectRecord:
    """An object fetched from the bucket; id and filename are both the key."""
    id: str
    filename: str
    content: bytes

    @classmethod
    def from_key(cls, key: str, content: bytes) -> 'ObjectRecord':
        return cls(id=key, filename=key, content=content)


@dataclass(frozen=True)
class UploadPayload:
    """Arguments for a single put_object call."""
    key: str
    body: bytes
    content_type: str
    acl: str
    content_encoding: Optional[str] = None
    cache_control: Optional[str] = None

    def to_put_kwargs(self, bucket: str) -> Dict[str, Any]:
        """Render the payload as boto3 put_object keyword arguments."""
        kwargs = {
            'Bucket': bucket,
            'Key': self.key,
            'Body': self.body,
            'ContentType': self.content_type,
            'ACL': self.acl
        }
        if self.content_encoding:
            kwargs['ContentEncoding'] = self.content_encoding
        if self.cache_control:
            kwargs['CacheControl'] = self.cache_control
        return kwargs


@dataclass(frozen=True)
class SyncCursor:
    """Position within a paginated export: the last key of the previous page."""
    marker: Optional[str] = None
    exhausted: bool = False

    def advance(self, last_key: str) -> 'SyncCursor':
        return SyncCursor(marker=last_key)

    def finish(self) -> 'SyncCursor':
        return SyncCursor(marker=self.marker, exhausted=True)


@dataclass
class ErrorLog:
    """Append-only list of error messages collected during an import batch."""
    messages: List[str] = field(default_factory=list)
    failed_keys: List[str] = field(default_factory=list)

    def append(self, message: str, key: Optional[str] = None) -> None:
        self.messages.append(message)
        if key is not None:
            self.failed_keys.append(key)

    def has_errors(self) -> bool:
        return bool(self.messages)

    def raise_for_errors(self) -> None:
        """Raise PartialBatchFailure if any error was recorded."""
        if self.messages:
            raise PartialBatchFailure(list(self.messages))

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)
