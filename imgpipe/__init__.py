"""
Image ingestion and thumbnail generation.

Two stages:
    1. Read: detect the format, extract EXIF metadata and checksum the bytes
    2. Thumbnail: rotate upright, then resize to one or more sizes under a
       shared concurrency cap

Thumbnails can be kept in memory, written to disk or uploaded to S3.
"""

__version__ = "1.0.0"

from .exceptions import (
    ImagePipelineError,
    ImageIOError,
    UnsupportedFormatError,
    CorruptImageError,
    InvalidConfigurationError,
    ResourceExhaustedError,
    BatchFailedError,
    PartialBatchFailure,
)
from .config import ReaderConfig, ThumbnailConfig
from .checksum import ChecksumEngine, Checksums
from .image_orientation import ImageOrientation
from .image_format import ImageFormat, ThumbnailFormat
from .flash import Flash, FlashMode
from .light_source import LightSource
from .unit import Unit
from .gps_coordinates import GPSCoordinates
from .image_metadata import ImageMetadata
from .image_reader_result import ImageReaderResult
from .image_reader import ImageReader
from .concurrency import ConcurrencyLimiter
from .batch_result import Thumbnail, ThumbnailFailure, BatchResult
from .s3_config import S3Config
from .storage import LocalStorage, S3Storage
from .thumbnail_creator import ThumbnailCreator

__all__ = [
    "ImagePipelineError",
    "ImageIOError",
    "UnsupportedFormatError",
    "CorruptImageError",
    "InvalidConfigurationError",
    "ResourceExhaustedError",
    "BatchFailedError",
    "PartialBatchFailure",
    "ReaderConfig",
    "ThumbnailConfig",
    "ChecksumEngine",
    "Checksums",
    "ImageOrientation",
    "ImageFormat",
    "ThumbnailFormat",
    "Flash",
    "FlashMode",
    "LightSource",
    "Unit",
    "GPSCoordinates",
    "ImageMetadata",
    "ImageReaderResult",
    "ImageReader",
    "ConcurrencyLimiter",
    "Thumbnail",
    "ThumbnailFailure",
    "BatchResult",
    "S3Config",
    "LocalStorage",
    "S3Storage",
    "ThumbnailCreator",
]
