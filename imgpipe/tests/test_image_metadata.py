"""Tests for ImageMetadata and ImageReaderResult."""

import json
from datetime import datetime

import pytest

from imgpipe.flash import Flash
from imgpipe.gps_coordinates import GPSCoordinates
from imgpipe.image_format import ImageFormat
from imgpipe.image_metadata import ImageMetadata
from imgpipe.image_orientation import ImageOrientation
from imgpipe.image_reader_result import ImageReaderResult


class TestImageMetadata:
    """Tests for ImageMetadata class."""

    def test_all_fields_optional(self):
        metadata = ImageMetadata()

        assert metadata.width is None
        assert metadata.maker is None
        assert not metadata.has_location
        assert not metadata.has_dimensions

    def test_zero_is_a_value(self):
        """Test zero measurements are kept, not treated as missing."""
        metadata = ImageMetadata(width=0, height=0, focal_length=0.0)

        assert metadata.has_dimensions
        assert metadata.focal_length == 0.0

    @pytest.mark.parametrize('field', ['width', 'height'])
    def test_negative_dimension(self, field):
        """Test negative dimensions are rejected."""
        with pytest.raises(ValueError):
            ImageMetadata(**{field: -1})

    def test_to_dict(self):
        """Test conversion to a JSON-friendly dictionary."""
        metadata = ImageMetadata(
            width=80,
            height=120,
            maker='Canon',
            orientation=ImageOrientation.RIGHT_TOP,
            flash=Flash.from_value(1),
            location=GPSCoordinates(-33.5, 151.25),
        )

        data = metadata.to_dict()

        assert data['width'] == 80
        assert data['orientation'] == 'RIGHT_TOP'
        assert data['flash']['fired'] is True
        assert data['location'] == {'latitude': -33.5, 'longitude': 151.25, 'altitude': None}
        assert data['iso'] is None
        json.dumps(data)


class TestImageReaderResult:
    """Tests for ImageReaderResult class."""

    @pytest.fixture
    def result(self):
        return ImageReaderResult(
            content_type='image/jpeg',
            file_length=1234,
            image_format=ImageFormat.JPEG,
            metadata=ImageMetadata(width=10, height=20),
            crc32=0x3610A686,
            md5=bytes.fromhex('5d41402abc4b2a76b9719d911017c592'),
            last_modified=datetime(2026, 1, 1, 12, 0, 0),
        )

    def test_digest_helpers(self, result):
        assert result.md5_hex == '5d41402abc4b2a76b9719d911017c592'
        assert result.md5_base64 == 'XUFAKrxLKna5cZ2REBfFkg=='

    def test_dimensions(self, result):
        assert (result.width, result.height) == (10, 20)

    def test_no_digests(self):
        result = ImageReaderResult(
            content_type='image/png', file_length=1, image_format=ImageFormat.PNG
        )

        assert result.md5_hex is None
        assert result.md5_base64 is None
        assert result.valid

    def test_to_dict(self, result):
        data = result.to_dict()

        assert data['image_format'] == 'JPEG'
        assert data['md5'] == '5d41402abc4b2a76b9719d911017c592'
        assert data['last_modified'] == '2026-01-01T12:00:00'
        assert data['metadata']['height'] == 20
        json.dumps(data)

    def test_frozen(self, result):
        with pytest.raises(AttributeError):
            result.valid = False
