"""
Configuration classes for the media sync adapter.
"""
import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class S3Config:
    """Configuration for the S3 bucket connection."""
    region: str
    access_key: str
    secret_key: str
    bucket: str
    endpoint: Optional[str] = None
    connect_timeout: int = 10
    read_timeout: int = 60
    max_attempts: int = 3

    @classmethod
    def from_env(cls, prefix: str = 'MEDIA') -> 'S3Config':
        """Create S3Config from environment variables with given prefix."""
        return cls(
            region=os.getenv(f'{prefix}_S3_REGION', 'us-east-1'),
            access_key=os.getenv(f'{prefix}_S3_ACCESS_KEY', ''),
            secret_key=os.getenv(f'{prefix}_S3_SECRET_KEY', ''),
            bucket=os.getenv(f'{prefix}_S3_BUCKET', ''),
            endpoint=os.getenv(f'{prefix}_S3_ENDPOINT') or None,
            connect_timeout=int(os.getenv(f'{prefix}_S3_CONNECT_TIMEOUT', '10')),
            read_timeout=int(os.getenv(f'{prefix}_S3_READ_TIMEOUT', '60')),
            max_attempts=int(os.getenv(f'{prefix}_S3_MAX_ATTEMPTS', '3'))
        )


@dataclass
class MediaSyncConfig:
    """Main configuration for the media sync adapter."""
    s3: S3Config
    media_base_dir: str
    gzip_enabled: bool = False
    cache_control_header: Optional[str] = None
    report_url: Optional[str] = None
    log_level: str = 'INFO'

    def __post_init__(self):
        # An empty header means "do not send one"
        if not self.cache_control_header:
            self.cache_control_header = None

    @classmethod
    def from_env(cls) -> 'MediaSyncConfig':
        """Create MediaSyncConfig from environment variables."""
        return cls(
            s3=S3Config.from_env('MEDIA'),
            media_base_dir=os.getenv('MEDIA_BASE_DIR', 'pub/media'),
            gzip_enabled=_env_flag('MEDIA_GZIP_ENABLED'),
            cache_control_header=os.getenv('MEDIA_CACHE_CONTROL'),
            report_url=os.getenv('MEDIA_REPORT_URL') or None,
            log_level=os.getenv('MEDIA_LOG_LEVEL', 'INFO').upper()
        )
