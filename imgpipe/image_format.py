"""
ImageFormat / ThumbnailFormat - detected container formats and output encodings.
"""

from enum import Enum
from typing import Optional


class ImageFormat(Enum):
    """Container format detected from file content."""
    JPEG = 'jpeg'
    PNG = 'png'
    GIF = 'gif'
    BMP = 'bmp'
    TIFF = 'tiff'
    WEBP = 'webp'
    UNKNOWN = 'unknown'

    @property
    def mime_type(self) -> str:
        """Canonical MIME type."""
        return _MIME_TYPES[self]

    @property
    def pil_format(self) -> Optional[str]:
        """Name of the Pillow plugin that decodes this format."""
        return _PIL_FORMATS.get(self)

    @property
    def supports_exif(self) -> bool:
        """True when the container can carry an EXIF block."""
        return self in (ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.TIFF, ImageFormat.WEBP)

    @property
    def is_supported(self) -> bool:
        return self is not ImageFormat.UNKNOWN

    @classmethod
    def from_value(cls, value: Optional[str]) -> 'ImageFormat':
        """Look up a format by name ('jpg', 'JPEG', 'tif', ...). Defaults to UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        name = value.strip().lower().lstrip('.')
        name = _ALIASES.get(name, name)
        for fmt in cls:
            if fmt.value == name:
                return fmt
        return cls.UNKNOWN


_MIME_TYPES = {
    ImageFormat.JPEG: 'image/jpeg',
    ImageFormat.PNG: 'image/png',
    ImageFormat.GIF: 'image/gif',
    ImageFormat.BMP: 'image/bmp',
    ImageFormat.TIFF: 'image/tiff',
    ImageFormat.WEBP: 'image/webp',
    ImageFormat.UNKNOWN: 'application/octet-stream',
}

_PIL_FORMATS = {
    ImageFormat.JPEG: 'JPEG',
    ImageFormat.PNG: 'PNG',
    ImageFormat.GIF: 'GIF',
    ImageFormat.BMP: 'BMP',
    ImageFormat.TIFF: 'TIFF',
    ImageFormat.WEBP: 'WEBP',
}

_ALIASES = {
    'jpg': 'jpeg',
    'jpe': 'jpeg',
    'tif': 'tiff',
}

# Magic numbers, checked in order against the start of the content
_SIGNATURES = (
    (b'\xff\xd8\xff', ImageFormat.JPEG),
    (b'\x89PNG\r\n\x1a\n', ImageFormat.PNG),
    (b'GIF87a', ImageFormat.GIF),
    (b'GIF89a', ImageFormat.GIF),
    (b'II*\x00', ImageFormat.TIFF),
    (b'MM\x00*', ImageFormat.TIFF),
    (b'BM', ImageFormat.BMP),
)

SNIFF_LENGTH = 16


def sniff_format(header: bytes) -> ImageFormat:
    """
    Detect the container format from the first bytes of an image.

    Args:
        header: At least the first SNIFF_LENGTH bytes of the content

    Returns:
        The detected ImageFormat, UNKNOWN if no signature matches
    """
    if len(header) >= 12 and header[:4] == b'RIFF' and header[8:12] == b'WEBP':
        return ImageFormat.WEBP

    for signature, fmt in _SIGNATURES:
        if header.startswith(signature):
            return fmt

    return ImageFormat.UNKNOWN


class ThumbnailFormat(Enum):
    """Encoding used for generated thumbnails."""
    JPEG = 'jpeg'
    PNG = 'png'
    GIF = 'gif'
    BMP = 'bmp'

    @property
    def pil_format(self) -> str:
        return self.name

    @property
    def content_type(self) -> str:
        return _MIME_TYPES[ImageFormat(self.value)]

    @property
    def extension(self) -> str:
        """File extension, with leading dot."""
        return '.jpg' if self is ThumbnailFormat.JPEG else f'.{self.value}'

    @property
    def supports_alpha(self) -> bool:
        return self in (ThumbnailFormat.PNG, ThumbnailFormat.GIF)

    @classmethod
    def from_value(cls, value: Optional[str]) -> 'ThumbnailFormat':
        """Look up an encoding by name; anything unrecognized uses DEFAULT_THUMBNAIL_FORMAT."""
        if value:
            name = value.strip().lower().lstrip('.')
            name = _ALIASES.get(name, name)
            for fmt in cls:
                if fmt.value == name:
                    return fmt
        return DEFAULT_THUMBNAIL_FORMAT

    @classmethod
    def from_image_format(cls, image_format: Optional[ImageFormat]) -> 'ThumbnailFormat':
        """
        Choose the output encoding for a source format.

        Formats with a same-named encoding keep it; every other format
        (TIFF, WEBP, UNKNOWN, None) uses DEFAULT_THUMBNAIL_FORMAT.
        """
        if image_format in _THUMBNAIL_FORMATS:
            return _THUMBNAIL_FORMATS[image_format]
        return DEFAULT_THUMBNAIL_FORMAT


DEFAULT_THUMBNAIL_FORMAT = ThumbnailFormat.JPEG

_THUMBNAIL_FORMATS = {
    ImageFormat.JPEG: ThumbnailFormat.JPEG,
    ImageFormat.PNG: ThumbnailFormat.PNG,
    ImageFormat.GIF: ThumbnailFormat.GIF,
    ImageFormat.BMP: ThumbnailFormat.BMP,
}
