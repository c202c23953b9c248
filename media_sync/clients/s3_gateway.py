"""
Thin synchronous gateway over the boto3 S3 client.
"""
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..exceptions import ObjectNotFoundError, TransportError
from ..models.config import S3Config
from ..models.data_models import UploadPayload

# Error codes S3 uses for a missing key
NOT_FOUND_CODES = ('404', 'NoSuchKey', 'NotFound')

# delete_objects accepts at most this many keys per request
DELETE_BATCH_SIZE = 1000


class S3Object:
    """Represents an S3 object with metadata."""

    def __init__(self, key: str, size: int, last_modified, etag: str, storage_class: str = 'STANDARD'):
        self.key = key
        self.size = size
        self.last_modified = last_modified
        self.etag = etag
        self.storage_class = storage_class

    @property
    def is_placeholder(self) -> bool:
        """True for directory placeholder keys ending in '/'."""
        return self.key.endswith('/')


class ObjectListing:
    """One page of a list_objects call."""

    def __init__(self, entries: List[S3Object], common_prefixes: List[str], is_truncated: bool = False):
        self.entries = entries
        self.common_prefixes = common_prefixes
        self.is_truncated = is_truncated

    @property
    def keys(self) -> List[str]:
        return [entry.key for entry in self.entries]

    def __bool__(self) -> bool:
        return bool(self.entries or self.common_prefixes)


class StorageGateway:
    """
    Maps each storage primitive 1:1 onto a boto3 S3 call against one bucket.

    Retries and timeouts belong to the boto3 client itself; every failure
    surfaces as a TransportError, except a missing key on get, which raises
    ObjectNotFoundError.
    """

    def __init__(self, client, bucket: str):
        """
        Initialize the gateway with an already constructed client.

        Args:
            client: boto3 S3 client (or any object with the same methods)
            bucket: Name of the bucket holding the media mirror
        """
        self.client = client
        self.bucket = bucket

        logger.info(f"StorageGateway initialized for bucket: {bucket}")

    @classmethod
    def from_config(cls, config: S3Config) -> 'StorageGateway':
        """Create a gateway with a boto3 client built from configuration."""
        return cls(cls._create_s3_client(config), config.bucket)

    @staticmethod
    def _create_s3_client(config: S3Config):
        """Create an S3 client from configuration."""
        boto_config = Config(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            retries={'max_attempts': config.max_attempts, 'mode': 'standard'}
        )
        try:
            client = boto3.client(
                's3',
                endpoint_url=config.endpoint,
                aws_access_key_id=config.access_key,
                aws_secret_access_key=config.secret_key,
                region_name=config.region or 'us-east-1',
                config=boto_config
            )
            logger.debug(f"Created S3 client for region: {config.region}")
            return client
        except Exception as e:
            logger.error(f"Failed to create S3 client for bucket {config.bucket}: {e}")
            raise

    def _call(self, operation: str, key: Optional[str], func: Callable[..., Any], **kwargs) -> Any:
        """Invoke a client method, translating botocore errors."""
        try:
            return func(**kwargs)
        except ClientError as e:
            code = str(e.response.get('Error', {}).get('Code', ''))
            if key is not None and code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            logger.error(f"S3 {operation} failed for {key or self.bucket}: {e}")
            raise TransportError(f"S3 {operation} failed for {key or self.bucket}: {e}") from e
        except BotoCoreError as e:
            logger.error(f"S3 {operation} transport error for {key or self.bucket}: {e}")
            raise TransportError(f"S3 {operation} transport error for {key or self.bucket}: {e}") from e

    def get(self, key: str) -> Optional[bytes]:
        """
        Fetch an object's body.

        Returns:
            The body bytes, or None if the response carried no body

        Raises:
            ObjectNotFoundError: If the key does not exist
            TransportError: On any other failure
        """
        response = self._call('get_object', key, self.client.get_object, Bucket=self.bucket, Key=key)
        body = response.get('Body')
        if body is None:
            return None
        content = body.read()
        logger.debug(f"Retrieved {len(content)} bytes for key: {key}")
        return content

    def put(self, payload: UploadPayload) -> None:
        self._call('put_object', payload.key, self.client.put_object, **payload.to_put_kwargs(self.bucket))
        logger.debug(f"Uploaded key: {payload.key} ({payload.content_type})")

    def delete(self, key: str) -> None:
        self._call('delete_object', key, self.client.delete_object, Bucket=self.bucket, Key=key)
        logger.debug(f"Deleted key: {key}")

    def copy(self, src_key: str, dst_key: str, acl: str) -> None:
        self._call(
            'copy_object', src_key, self.client.copy_object,
            Bucket=self.bucket,
            Key=dst_key,
            CopySource={'Bucket': self.bucket, 'Key': src_key},
            ACL=acl
        )
        logger.debug(f"Copied key: {src_key} -> {dst_key}")

    def exists(self, key: str) -> bool:
        """
        Check if an object exists in the bucket.

        Args:
            key: Object key to check

        Returns:
            bool: True if object exists, False otherwise
        """
        try:
            self._call('head_object', key, self.client.head_object, Bucket=self.bucket, Key=key)
            return True
        except ObjectNotFoundError:
            return False

    def list(self, prefix: Optional[str] = None, delimiter: Optional[str] = None,
             marker: Optional[str] = None, max_keys: int = 1000) -> ObjectListing:
        """
        List one page of objects.

        Args:
            prefix: Only keys starting with this prefix
            delimiter: Group keys sharing a prefix up to this character
            marker: Start listing after this key
            max_keys: Maximum number of entries in the page

        Returns:
            ObjectListing with entries and common prefixes
        """
        params: Dict[str, Any] = {'Bucket': self.bucket, 'MaxKeys': max_keys}
        if prefix:
            params['Prefix'] = prefix
        if delimiter:
            params['Delimiter'] = delimiter
        if marker:
            params['Marker'] = marker

        response = self._call('list_objects', None, self.client.list_objects, **params)

        entries = [
            S3Object(
                key=obj['Key'],
                size=obj.get('Size', 0),
                last_modified=obj.get('LastModified'),
                etag=obj.get('ETag', '').strip('"'),
                storage_class=obj.get('StorageClass', 'STANDARD')
            )
            for obj in response.get('Contents', [])
            if 'Key' in obj
        ]
        common_prefixes = [
            item['Prefix'] for item in response.get('CommonPrefixes', []) if 'Prefix' in item
        ]

        logger.debug(f"Listed {len(entries)} objects and {len(common_prefixes)} prefixes "
                     f"under '{prefix or ''}' after '{marker or ''}'")
        return ObjectListing(entries, common_prefixes, bool(response.get('IsTruncated', False)))

    def delete_all_under_prefix(self, prefix: str = '') -> int:
        """
        Delete every object whose key starts with prefix (the whole bucket for '').

        Returns:
            Number of deleted objects

        Raises:
            TransportError: If a listing or delete request fails, or S3
                reports per-key errors for a batch
        """
        deleted = 0
        marker = None

        while True:
            listing = self.list(prefix=prefix or None, marker=marker, max_keys=DELETE_BATCH_SIZE)
            keys = listing.keys
            if not keys:
                break

            self._delete_batch(keys)
            deleted += len(keys)

            if not listing.is_truncated:
                break
            marker = keys[-1]

        logger.info(f"Deleted {deleted} objects under prefix '{prefix}' in bucket {self.bucket}")
        return deleted

    def _delete_batch(self, keys: List[str]) -> None:
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            chunk = keys[start:start + DELETE_BATCH_SIZE]
            response = self._call(
                'delete_objects', None, self.client.delete_objects,
                Bucket=self.bucket,
                Delete={'Objects': [{'Key': key} for key in chunk], 'Quiet': True}
            )
            errors = response.get('Errors', [])
            if errors:
                failed = ', '.join(f"{err.get('Key')} ({err.get('Code')})" for err in errors)
                logger.error(f"Batch delete left {len(errors)} objects behind: {failed}")
                raise TransportError(f"Batch delete failed for {len(errors)} objects: {failed}")

    def test_connection(self) -> bool:
        """
        Test connection to the bucket.

        Returns:
            bool: True if connection successful, False otherwise
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
            logger.info("S3 connection test successful")
            return True
        except Exception as e:
            logger.error(f"S3 connection test failed: {e}")
            return False
