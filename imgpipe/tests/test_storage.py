"""Tests for LocalStorage and S3Storage classes."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from imgpipe.exceptions import ImageIOError
from imgpipe.storage import LocalStorage, S3Storage


class TestLocalStorage:
    """Tests for LocalStorage class."""

    def test_upload_creates_directories(self, tmp_path):
        storage = LocalStorage(tmp_path)

        storage.upload_object('a/b/thumb.jpg', b'data', 'image/jpeg')

        assert (tmp_path / 'a' / 'b' / 'thumb.jpg').read_bytes() == b'data'
        assert storage.object_exists('a/b/thumb.jpg')
        assert storage.download_object('a/b/thumb.jpg') == b'data'

    def test_without_root(self, tmp_path):
        """Test keys are used as paths when no root is set."""
        path = tmp_path / 'thumb.png'

        LocalStorage().upload_object(path, b'png')

        assert path.read_bytes() == b'png'

    def test_upload_into_file_fails(self, tmp_path):
        """Test writing below a regular file raises ImageIOError."""
        (tmp_path / 'blocker').write_text('x')

        with pytest.raises(ImageIOError):
            LocalStorage(tmp_path).upload_object('blocker/thumb.jpg', b'data')

    def test_download_missing(self, tmp_path):
        storage = LocalStorage(tmp_path)

        assert not storage.object_exists('missing.jpg')
        with pytest.raises(ImageIOError):
            storage.download_object('missing.jpg')


class TestS3Storage:
    """Tests for S3Storage class."""

    @pytest.fixture
    def storage_with_mock(self, s3_config):
        """Fixture providing S3Storage with mocked boto3."""
        mock_boto = MagicMock()
        with patch('imgpipe.storage.boto3.client', return_value=mock_boto) as client_factory:
            storage = S3Storage(s3_config)
            storage._test_mock = mock_boto
            storage._test_factory = client_factory
            yield storage

    def test_client_configuration(self, storage_with_mock, s3_config):
        """Test the boto3 client is built from the config."""
        kwargs = storage_with_mock._test_factory.call_args.kwargs

        assert kwargs['endpoint_url'] == s3_config.endpoint
        assert kwargs['aws_access_key_id'] == s3_config.access_key
        assert kwargs['verify'] is True
        assert storage_with_mock.client is storage_with_mock._test_mock

    def test_upload_object(self, storage_with_mock):
        """Test uploading applies the key prefix and content type."""
        storage_with_mock.upload_object('a/thumb.jpg', b'data', 'image/jpeg')

        storage_with_mock._test_mock.put_object.assert_called_once_with(
            Bucket='test-bucket',
            Key='thumbnails/a/thumb.jpg',
            Body=b'data',
            ContentType='image/jpeg',
        )

    def test_upload_failure(self, storage_with_mock):
        storage_with_mock._test_mock.put_object.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied'}},
            'PutObject'
        )

        with pytest.raises(ImageIOError):
            storage_with_mock.upload_object('a/thumb.jpg', b'data')

    def test_download_object(self, storage_with_mock):
        body = MagicMock()
        body.read.return_value = b'data'
        storage_with_mock._test_mock.get_object.return_value = {'Body': body}

        assert storage_with_mock.download_object('a/thumb.jpg') == b'data'

    def test_object_exists_true(self, storage_with_mock):
        """Test object_exists returns True when object exists."""
        storage_with_mock._test_mock.head_object.return_value = {
            'ContentLength': 100,
            'LastModified': datetime(2026, 1, 1),
            'ContentType': 'image/jpeg',
        }

        assert storage_with_mock.object_exists('a/thumb.jpg') is True

    def test_object_exists_false(self, storage_with_mock):
        """Test object_exists returns False when object doesn't exist."""
        storage_with_mock._test_mock.head_object.side_effect = ClientError(
            {'Error': {'Code': '404'}},
            'HeadObject'
        )

        assert storage_with_mock.object_exists('missing.jpg') is False

    def test_get_object_metadata(self, storage_with_mock):
        storage_with_mock._test_mock.head_object.return_value = {
            'ContentLength': 100,
            'LastModified': datetime(2026, 1, 1),
        }

        metadata = storage_with_mock.get_object_metadata('a/thumb.jpg')

        assert metadata == {
            'size': 100,
            'last_modified': '2026-01-01T00:00:00',
            'content_type': 'application/octet-stream',
        }

    def test_get_object_metadata_error(self, storage_with_mock):
        storage_with_mock._test_mock.head_object.side_effect = ClientError(
            {'Error': {'Code': '403'}},
            'HeadObject'
        )

        with pytest.raises(ImageIOError):
            storage_with_mock.get_object_metadata('a/thumb.jpg')
