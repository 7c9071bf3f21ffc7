"""Tests for CLI module."""

import json

import pytest
from PIL import Image

from imgpipe.cli import cmd_read, create_parser, main, parse_size


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_created(self):
        """Test parser is created successfully."""
        parser = create_parser()
        assert parser is not None

    def test_read_command(self):
        """Test read command parsing."""
        parser = create_parser()
        args = parser.parse_args(['read', 'photo.jpg', '--no-md5'])

        assert args.command == 'read'
        assert args.file == 'photo.jpg'
        assert args.no_md5 is True
        assert args.no_crc is False

    def test_thumbnail_command(self):
        """Test thumbnail command parsing."""
        parser = create_parser()
        args = parser.parse_args([
            'thumbnail', 'photo.jpg', '-s', '200', '-s', '400x300',
            '--max-concurrent', '2', '--quality', '70', '--format', 'png',
        ])

        assert args.command == 'thumbnail'
        assert args.size == [200, (400, 300)]
        assert args.max_concurrent == 2
        assert args.quality == 70
        assert args.format == 'png'
        assert args.output == '.'

    def test_storage_arguments(self):
        parser = create_parser()
        args = parser.parse_args(['thumbnail', 'photo.jpg', '--s3', '--s3-bucket', 'assets'])

        assert args.s3 is True
        assert args.s3_bucket == 'assets'


class TestParseSize:
    """Tests for size argument parsing."""

    def test_square(self):
        assert parse_size('200') == 200

    def test_box(self):
        assert parse_size('200x150') == (200, 150)

    @pytest.mark.parametrize('value', ['0', '-5', 'big', '10x0', '10x'])
    def test_invalid(self, value):
        import argparse
        with pytest.raises(argparse.ArgumentTypeError):
            parse_size(value)


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self):
        """Test running without command shows help."""
        result = main([])
        assert result == 1


class TestCmdRead:
    """Tests for read command."""

    def test_read_prints_json(self, image_file, capsys):
        result = main(['read', str(image_file)])

        assert result == 0
        data = json.loads(capsys.readouterr().out)
        assert data['image_format'] == 'JPEG'
        assert data['metadata']['width'] == 100
        assert len(data['md5']) == 32

    def test_read_without_checksums(self, image_file, capsys):
        result = main(['read', str(image_file), '--no-crc', '--no-md5'])

        assert result == 0
        data = json.loads(capsys.readouterr().out)
        assert data['crc32'] is None
        assert data['md5'] is None

    def test_read_unsupported(self, tmp_path):
        """Test read of a non-image file fails."""
        path = tmp_path / 'notes.txt'
        path.write_text('hello')

        parser = create_parser()
        args = parser.parse_args(['read', str(path)])

        assert cmd_read(args) == 1

    def test_read_corrupt(self, tmp_path, truncated_jpeg_bytes):
        path = tmp_path / 'broken.jpg'
        path.write_bytes(truncated_jpeg_bytes)

        assert main(['read', str(path)]) == 1


class TestCmdThumbnail:
    """Tests for thumbnail command."""

    def test_writes_thumbnails(self, image_file, tmp_path):
        out = tmp_path / 'thumbs'

        result = main([
            'thumbnail', str(image_file), '-s', '50', '-s', '40x20',
            '-o', str(out), '--max-concurrent', '2', '-q',
        ])

        assert result == 0
        assert Image.open(out / 'photo_50.jpg').size == (50, 50)
        assert Image.open(out / 'photo_40x20.jpg').size == (20, 20)

    def test_output_format(self, image_file, tmp_path):
        result = main([
            'thumbnail', str(image_file), '-s', '30', '-o', str(tmp_path), '--format', 'png', '-q',
        ])

        assert result == 0
        assert Image.open(tmp_path / 'photo_30.png').format == 'PNG'

    def test_invalid_quality(self, image_file, tmp_path):
        result = main(['thumbnail', str(image_file), '-o', str(tmp_path), '--quality', '0'])

        assert result == 1

    def test_s3_requires_config(self, image_file, monkeypatch):
        """Test --s3 without S3 settings fails before generating anything."""
        for name in ('S3_ENDPOINT', 'S3_BUCKET', 'S3_ACCESS_KEY', 'S3_SECRET_KEY'):
            monkeypatch.delenv(name, raising=False)

        result = main(['thumbnail', str(image_file), '--s3'])

        assert result == 1

    def test_s3_upload(self, image_file, monkeypatch, mocker):
        """Test thumbnails are uploaded when --s3 is given."""
        monkeypatch.setenv('S3_ENDPOINT', 'https://minio.example.com:9000')
        monkeypatch.setenv('S3_ACCESS_KEY', 'key')
        monkeypatch.setenv('S3_SECRET_KEY', 'secret')
        mock_boto = mocker.MagicMock()
        mocker.patch('imgpipe.storage.boto3.client', return_value=mock_boto)

        result = main(['thumbnail', str(image_file), '-s', '40', '--s3', '--s3-bucket', 'assets', '-q'])

        assert result == 0
        kwargs = mock_boto.put_object.call_args.kwargs
        assert kwargs['Bucket'] == 'assets'
        assert kwargs['Key'].endswith('photo_40.jpg')
        assert kwargs['ContentType'] == 'image/jpeg'

    def test_missing_source(self, tmp_path):
        result = main(['thumbnail', str(tmp_path / 'missing.jpg'), '-o', str(tmp_path)])

        assert result == 1
