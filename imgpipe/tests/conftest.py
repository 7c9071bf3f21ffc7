"""
Pytest fixtures for imgpipe tests.
"""

import io

import pytest
from PIL import Image


def encode(img, fmt, **kwargs):
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def camera_exif(orientation=6):
    """EXIF block with camera, exposure and GPS tags (33°52'4"S 151°12'30"W)."""
    exif = Image.Exif()
    exif[0x010F] = 'Canon'
    exif[0x0110] = 'EOS 5D'
    exif[0x0112] = orientation
    exif[0x0131] = 'imgpipe-tests'
    exif[0x8769] = {
        0x829A: 0.008,
        0x829D: 5.6,
        0x8827: 400,
        0x9208: 1,
        0x9209: 0x19,
        0x920A: 50.0,
    }
    exif[0x8825] = {
        0x01: 'S',
        0x02: (33.0, 52.0, 4.0),
        0x03: 'W',
        0x04: (151.0, 12.0, 30.0),
        0x06: 12.5,
    }
    return exif


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    img = Image.new('RGB', (100, 100), color='red')
    return encode(img, 'JPEG')


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes."""
    # Semi-transparent, so JPEG output has to flatten it
    img = Image.new('RGBA', (100, 100), color=(255, 0, 0, 128))
    return encode(img, 'PNG')


@pytest.fixture
def exif_jpeg_bytes():
    """Fixture providing a 120x80 JPEG stored rotated (orientation 6) with camera EXIF."""
    img = Image.new('RGB', (120, 80), color='green')
    return encode(img, 'JPEG', exif=camera_exif())


@pytest.fixture
def truncated_jpeg_bytes():
    """Fixture providing a 200x100 JPEG cut off halfway through its pixel data."""
    img = Image.effect_noise((200, 100), 64).convert('RGB')
    data = encode(img, 'JPEG', quality=95, exif=camera_exif(orientation=1))
    return data[:len(data) // 2]


@pytest.fixture
def scene():
    """Fixture providing an asymmetric upright 40x30 scene."""
    img = Image.new('RGB', (40, 30), color=(255, 255, 255))
    img.paste((255, 0, 0), (0, 0, 20, 15))
    img.paste((0, 0, 255), (20, 15, 40, 30))
    img.paste((0, 255, 0), (0, 15, 8, 30))
    return img


@pytest.fixture
def image_file(tmp_path, sample_image_bytes):
    """Fixture providing a JPEG file on disk."""
    path = tmp_path / 'photo.jpg'
    path.write_bytes(sample_image_bytes)
    return path


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from imgpipe.s3_config import S3Config

    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        bucket='test-bucket',
        prefix='thumbnails',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
