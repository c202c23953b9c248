"""
Pytest configuration and fixtures for the media sync tests.
"""
from datetime import datetime
from io import BytesIO

import pytest
from botocore.exceptions import ClientError

from media_sync.clients.media_directory import MediaDirectory
from media_sync.clients.s3_gateway import StorageGateway
from media_sync.models.config import MediaSyncConfig, S3Config
from media_sync.services.directory_ops import DirectoryOps
from media_sync.services.path_translator import PathTranslator
from media_sync.services.payload_builder import ObjectPayloadBuilder
from media_sync.services.sync_engine import SyncEngine

BUCKET = 'media-bucket'


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({'Error': {'Code': code, 'Message': code}}, operation)


class FakeS3Client:
    """
    In-memory stand-in for a boto3 S3 client.

    Supports the calls the gateway makes, with list_objects honoring
    Prefix, Delimiter, Marker and MaxKeys the way S3 does. Failures are
    injected per (operation, key) through the failures dict.
    """

    def __init__(self, objects=None):
        self.objects = {}
        self.metadata = {}
        self.calls = []
        self.failures = {}
        self.delete_errors = set()
        for key, body in (objects or {}).items():
            self.objects[key] = body

    def _record(self, operation, **kwargs):
        self.calls.append((operation, kwargs))
        code = self.failures.get((operation, kwargs.get('Key')))
        if code:
            raise client_error(code, operation)

    def calls_to(self, operation):
        return [kwargs for name, kwargs in self.calls if name == operation]

    def get_object(self, Bucket, Key):
        self._record('get_object', Bucket=Bucket, Key=Key)
        if Key not in self.objects:
            raise client_error('NoSuchKey', 'GetObject')
        return {'Body': BytesIO(self.objects[Key]), **self.metadata.get(Key, {})}

    def put_object(self, **kwargs):
        self._record('put_object', **kwargs)
        self.objects[kwargs['Key']] = kwargs['Body']
        self.metadata[kwargs['Key']] = {
            name: value for name, value in kwargs.items() if name not in ('Bucket', 'Key', 'Body')
        }
        return {'ETag': '"etag"'}

    def delete_object(self, Bucket, Key):
        self._record('delete_object', Bucket=Bucket, Key=Key)
        self.objects.pop(Key, None)
        return {}

    def copy_object(self, Bucket, Key, CopySource, ACL):
        self._record('copy_object', Bucket=Bucket, Key=Key, CopySource=CopySource, ACL=ACL)
        source = CopySource['Key']
        if source not in self.objects:
            raise client_error('NoSuchKey', 'CopyObject')
        self.objects[Key] = self.objects[source]
        return {}

    def head_object(self, Bucket, Key):
        self._record('head_object', Bucket=Bucket, Key=Key)
        if Key not in self.objects:
            raise client_error('404', 'HeadObject')
        return {'ContentLength': len(self.objects[Key])}

    def head_bucket(self, Bucket):
        self._record('head_bucket', Bucket=Bucket)
        return {}

    def list_objects(self, Bucket, MaxKeys=1000, Prefix='', Delimiter=None, Marker=None):
        self._record('list_objects', Bucket=Bucket, MaxKeys=MaxKeys, Prefix=Prefix,
                     Delimiter=Delimiter, Marker=Marker)
        keys = sorted(
            key for key in self.objects
            if key.startswith(Prefix) and (Marker is None or key > Marker)
        )

        contents, prefixes = [], []
        truncated = False
        for key in keys:
            common_prefix = None
            if Delimiter:
                rest = key[len(Prefix):]
                index = rest.find(Delimiter)
                if index >= 0:
                    common_prefix = Prefix + rest[:index + 1]
                    if common_prefix in prefixes:
                        continue

            if len(contents) + len(prefixes) >= MaxKeys:
                truncated = True
                break

            if common_prefix:
                prefixes.append(common_prefix)
            else:
                contents.append({
                    'Key': key,
                    'Size': len(self.objects[key]),
                    'LastModified': datetime(2024, 1, 1, 12, 0, 0),
                    'ETag': '"etag"',
                    'StorageClass': 'STANDARD'
                })

        response = {'IsTruncated': truncated, 'MaxKeys': MaxKeys}
        if contents:
            response['Contents'] = contents
        if prefixes:
            response['CommonPrefixes'] = [{'Prefix': prefix} for prefix in prefixes]
        return response

    def delete_objects(self, Bucket, Delete):
        self._record('delete_objects', Bucket=Bucket, Delete=Delete)
        errors = []
        for item in Delete['Objects']:
            key = item['Key']
            if key in self.delete_errors:
                errors.append({'Key': key, 'Code': 'AccessDenied', 'Message': 'Access Denied'})
                continue
            self.objects.pop(key, None)

        response = {}
        if errors:
            response['Errors'] = errors
        return response


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def gateway(fake_s3):
    return StorageGateway(fake_s3, BUCKET)


@pytest.fixture
def media_root(tmp_path):
    """A media directory with a few files on disk."""
    root = tmp_path / 'media'
    (root / 'catalog' / 'images').mkdir(parents=True)
    (root / 'catalog' / 'images' / 'a.jpg').write_bytes(b'\xff\xd8jpeg-bytes')
    (root / 'catalog' / 'readme.txt').write_bytes(b'hello media')
    (root / 'wysiwyg').mkdir()
    (root / 'wysiwyg' / 'banner.png').write_bytes(b'\x89PNG-bytes')
    (root / '.thumbs').mkdir()
    (root / '.thumbs' / 'skip.jpg').write_bytes(b'hidden')
    return root


@pytest.fixture
def translator(media_root):
    return PathTranslator(str(media_root))


@pytest.fixture
def media_directory(media_root):
    return MediaDirectory(str(media_root))


@pytest.fixture
def payload_builder(media_root, translator):
    return ObjectPayloadBuilder(str(media_root), translator)


@pytest.fixture
def engine(gateway, translator, payload_builder, media_directory):
    return SyncEngine(gateway, translator, payload_builder, media_directory)


@pytest.fixture
def directory_ops(gateway, translator):
    return DirectoryOps(gateway, translator)


@pytest.fixture
def sync_config(media_root):
    """Create a test media sync configuration."""
    return MediaSyncConfig(
        s3=S3Config(
            region='us-east-1',
            access_key='test_key',
            secret_key='test_secret',
            bucket=BUCKET
        ),
        media_base_dir=str(media_root)
    )
