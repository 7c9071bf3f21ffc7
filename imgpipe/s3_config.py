"""
S3Config - Connection settings for the S3 thumbnail destination.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from .config import str2bool


@dataclass
class S3Config:
    """
    S3/MinIO connection settings.

    Attributes:
        endpoint: Endpoint URL (e.g. https://minio.example.com:9000)
        bucket: Bucket receiving thumbnails
        prefix: Key prefix prepended to every destination
        access_key: Access key ID
        secret_key: Secret access key
        region: Region name
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = ''
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> 'S3Config':
        """Create configuration from S3_* environment variables."""
        return cls(
            endpoint=os.getenv('S3_ENDPOINT'),
            bucket=os.getenv('S3_BUCKET'),
            prefix=os.getenv('S3_PREFIX', ''),
            access_key=os.getenv('S3_ACCESS_KEY'),
            secret_key=os.getenv('S3_SECRET_KEY'),
            region=os.getenv('S3_REGION'),
            verify_ssl=str2bool(os.getenv('S3_VERIFY_SSL'), True),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if not self.endpoint:
            errors.append("S3 endpoint is required (S3_ENDPOINT)")
        if not self.bucket:
            errors.append("S3 bucket is required (S3_BUCKET)")
        if not self.access_key:
            errors.append("S3 access key is required (S3_ACCESS_KEY)")
        if not self.secret_key:
            errors.append("S3 secret key is required (S3_SECRET_KEY)")
        return errors

    def key_for(self, destination: str) -> str:
        """Full object key for a destination."""
        destination = destination.lstrip('/')
        if not self.prefix:
            return destination
        return f"{self.prefix.strip('/')}/{destination}"
