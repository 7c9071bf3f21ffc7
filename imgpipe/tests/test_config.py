"""Tests for configuration classes."""

import pytest

from imgpipe.config import ReaderConfig, ThumbnailConfig, str2bool
from imgpipe.s3_config import S3Config


class TestStr2Bool:
    """Tests for str2bool."""

    @pytest.mark.parametrize('value', ['yes', 'TRUE', ' 1 ', 'on'])
    def test_true_values(self, value):
        assert str2bool(value, False) is True

    @pytest.mark.parametrize('value', ['no', 'False', '0', 'off'])
    def test_false_values(self, value):
        assert str2bool(value, True) is False

    def test_default(self):
        """Test missing or unrecognized values use the default."""
        assert str2bool(None, True) is True
        assert str2bool('maybe', False) is False


class TestReaderConfig:
    """Tests for ReaderConfig."""

    def test_defaults(self):
        config = ReaderConfig()

        assert config.compute_crc is True
        assert config.compute_md5 is True
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        """Test switches are read from the environment."""
        monkeypatch.setenv('IMGPIPE_COMPUTE_CRC', 'false')
        monkeypatch.delenv('IMGPIPE_COMPUTE_MD5', raising=False)

        config = ReaderConfig.from_env()

        assert config.compute_crc is False
        assert config.compute_md5 is True

    def test_validate_non_bool(self):
        errors = ReaderConfig(compute_crc='yes').validate()

        assert len(errors) == 1


class TestThumbnailConfig:
    """Tests for ThumbnailConfig."""

    def test_defaults(self):
        config = ThumbnailConfig()

        assert config.max_concurrent_operations == 1
        assert config.quality == 85
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        """Test settings are read from the environment."""
        monkeypatch.setenv('IMGPIPE_MAX_CONCURRENT_OPS', '4')
        monkeypatch.setenv('IMGPIPE_THUMBNAIL_QUALITY', '70')

        config = ThumbnailConfig.from_env()

        assert config.max_concurrent_operations == 4
        assert config.quality == 70

    def test_from_env_invalid_number(self, monkeypatch):
        """Test a malformed number falls back to the default."""
        monkeypatch.setenv('IMGPIPE_MAX_CONCURRENT_OPS', 'many')
        monkeypatch.delenv('IMGPIPE_THUMBNAIL_QUALITY', raising=False)

        config = ThumbnailConfig.from_env()

        assert config.max_concurrent_operations == 1
        assert config.quality == 85

    @pytest.mark.parametrize('cap', [0, -1, True, 2.0])
    def test_validate_cap(self, cap):
        errors = ThumbnailConfig(max_concurrent_operations=cap).validate()

        assert any('max_concurrent_operations' in e for e in errors)

    @pytest.mark.parametrize('quality', [0, 96])
    def test_validate_quality(self, quality):
        errors = ThumbnailConfig(quality=quality).validate()

        assert any('quality' in e for e in errors)


class TestS3Config:
    """Tests for S3Config."""

    def test_from_env(self, monkeypatch):
        """Test loading config from environment variables."""
        monkeypatch.setenv('S3_ENDPOINT', 'https://minio.example.com:9000')
        monkeypatch.setenv('S3_BUCKET', 'assets')
        monkeypatch.setenv('S3_PREFIX', 'thumbs')
        monkeypatch.setenv('S3_ACCESS_KEY', 'key')
        monkeypatch.setenv('S3_SECRET_KEY', 'secret')
        monkeypatch.setenv('S3_VERIFY_SSL', 'false')

        config = S3Config.from_env()

        assert config.endpoint == 'https://minio.example.com:9000'
        assert config.bucket == 'assets'
        assert config.prefix == 'thumbs'
        assert config.verify_ssl is False
        assert config.validate() == []

    def test_validate_missing(self):
        """Test every required setting is reported."""
        errors = S3Config().validate()

        assert len(errors) == 4

    def test_key_for(self, s3_config):
        assert s3_config.key_for('a/b.jpg') == 'thumbnails/a/b.jpg'
        assert s3_config.key_for('/a/b.jpg') == 'thumbnails/a/b.jpg'

    def test_key_for_without_prefix(self):
        assert S3Config().key_for('a/b.jpg') == 'a/b.jpg'
