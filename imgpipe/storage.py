"""
Thumbnail destinations: local filesystem and S3/MinIO.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ImageIOError
from .s3_config import S3Config


class LocalStorage:
    """
    Writes thumbnails to the local filesystem.

    Destinations are paths relative to root, or used as-is when no root is set.
    """

    def __init__(
        self,
        root: Optional[Union[str, os.PathLike]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.root = Path(root) if root is not None else None
        self.logger = logger or logging.getLogger(__name__)

    def path_for(self, key: Union[str, os.PathLike]) -> Path:
        path = Path(key)
        if self.root is None:
            return path
        return self.root / path

    def upload_object(
        self,
        key: Union[str, os.PathLike],
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Write data to the file for key, creating parent directories."""
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ImageIOError(f"Cannot write {path}: {e}") from e
        self.logger.debug(f"Wrote {path} ({len(data)} bytes, {content_type})")

    def object_exists(self, key: Union[str, os.PathLike]) -> bool:
        return self.path_for(key).is_file()

    def download_object(self, key: Union[str, os.PathLike]) -> bytes:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageIOError(f"Cannot read {path}: {e}") from e


class S3Storage:
    """
    Wrapper for S3/MinIO uploads of generated thumbnails.
    """

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 storage.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Upload an object to S3."""
        full_key = self.config.key_for(key)
        try:
            self._client.put_object(
                Bucket=self.config.bucket,
                Key=full_key,
                Body=data,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise ImageIOError(f"Cannot upload s3://{self.config.bucket}/{full_key}: {e}") from e
        self.logger.debug(f"Uploaded s3://{self.config.bucket}/{full_key} ({len(data)} bytes)")

    def download_object(self, key: str) -> bytes:
        """Download an object from S3."""
        full_key = self.config.key_for(key)
        try:
            response = self._client.get_object(Bucket=self.config.bucket, Key=full_key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise ImageIOError(f"Cannot download s3://{self.config.bucket}/{full_key}: {e}") from e

    def object_exists(self, key: str) -> bool:
        """Check if an object exists in S3."""
        return self.get_object_metadata(key) is not None

    def get_object_metadata(self, key: str) -> Optional[dict]:
        """Get metadata for an S3 object."""
        try:
            response = self._client.head_object(
                Bucket=self.config.bucket, Key=self.config.key_for(key)
            )
            return {
                'size': response['ContentLength'],
                'last_modified': response['LastModified'].isoformat(),
                'content_type': response.get('ContentType', 'application/octet-stream'),
            }
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return None
            raise ImageIOError(f"Cannot stat {key}: {e}") from e
