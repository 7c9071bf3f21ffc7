"""
Configuration for the image reader and the thumbnail creator.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


ENV_PREFIX = 'IMGPIPE_'

TRUE_VALUES = {'yes', 'true', 't', 'y', '1', 'on'}
FALSE_VALUES = {'no', 'false', 'f', 'n', '0', 'off'}


def str2bool(value: Optional[str], default: bool) -> bool:
    """Convert an environment string into a boolean, falling back to default."""
    if value is None:
        return default

    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class ReaderConfig:
    """
    Checksum switches for ImageReader.

    Attributes:
        compute_crc: Compute the CRC32 of every source read
        compute_md5: Compute the MD5 of every source read
    """
    compute_crc: bool = True
    compute_md5: bool = True

    @classmethod
    def from_env(cls) -> 'ReaderConfig':
        """Create configuration from IMGPIPE_COMPUTE_CRC / IMGPIPE_COMPUTE_MD5."""
        return cls(
            compute_crc=str2bool(os.getenv(f'{ENV_PREFIX}COMPUTE_CRC'), True),
            compute_md5=str2bool(os.getenv(f'{ENV_PREFIX}COMPUTE_MD5'), True),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if not isinstance(self.compute_crc, bool):
            errors.append("compute_crc must be a boolean")
        if not isinstance(self.compute_md5, bool):
            errors.append("compute_md5 must be a boolean")
        return errors


@dataclass
class ThumbnailConfig:
    """
    Settings for ThumbnailCreator.

    Attributes:
        max_concurrent_operations: Maximum number of thumbnails transcoded at once
        quality: JPEG quality for output (1-95)
    """
    max_concurrent_operations: int = 1
    quality: int = 85

    @classmethod
    def from_env(cls) -> 'ThumbnailConfig':
        """Create configuration from IMGPIPE_MAX_CONCURRENT_OPS / IMGPIPE_THUMBNAIL_QUALITY."""
        return cls(
            max_concurrent_operations=_env_int(f'{ENV_PREFIX}MAX_CONCURRENT_OPS', 1),
            quality=_env_int(f'{ENV_PREFIX}THUMBNAIL_QUALITY', 85),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if (
            isinstance(self.max_concurrent_operations, bool)
            or not isinstance(self.max_concurrent_operations, int)
            or self.max_concurrent_operations < 1
        ):
            errors.append(
                f"max_concurrent_operations must be a positive integer "
                f"(got {self.max_concurrent_operations!r})"
            )
        if not isinstance(self.quality, int) or not 1 <= self.quality <= 95:
            errors.append(f"quality must be between 1 and 95 (got {self.quality!r})")
        return errors
