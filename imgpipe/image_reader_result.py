"""
ImageReaderResult - Outcome of reading a single image.
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .image_format import ImageFormat
from .image_metadata import ImageMetadata


@dataclass(frozen=True)
class ImageReaderResult:
    """
    Everything ImageReader learned about one source.

    Attributes:
        content_type: MIME type of the detected format
        file_length: Size of the source in bytes
        image_format: Format detected from content
        metadata: Dimensions and EXIF attributes
        crc32: Unsigned CRC32 of the source bytes, None when disabled
        md5: 16-byte MD5 digest of the source bytes, None when disabled
        last_modified: Filesystem modification time, None for in-memory sources
        valid: False when decoding failed part-way
        error: Why the result is invalid
    """
    content_type: str
    file_length: int
    image_format: ImageFormat
    metadata: ImageMetadata = field(default_factory=ImageMetadata)
    crc32: Optional[int] = None
    md5: Optional[bytes] = None
    last_modified: Optional[datetime] = None
    valid: bool = True
    error: Optional[str] = None

    @property
    def md5_hex(self) -> Optional[str]:
        return self.md5.hex() if self.md5 is not None else None

    @property
    def md5_base64(self) -> Optional[str]:
        if self.md5 is None:
            return None
        return base64.b64encode(self.md5).decode('ascii')

    @property
    def width(self) -> Optional[int]:
        return self.metadata.width

    @property
    def height(self) -> Optional[int]:
        return self.metadata.height

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'content_type': self.content_type,
            'file_length': self.file_length,
            'image_format': self.image_format.name,
            'metadata': self.metadata.to_dict(),
            'crc32': self.crc32,
            'md5': self.md5_hex,
            'last_modified': self.last_modified.isoformat() if self.last_modified else None,
            'valid': self.valid,
            'error': self.error,
        }
