"""
ImageReader - Decodes images, extracts EXIF metadata and computes checksums.
"""

import io
import logging
import os
import struct
from contextlib import contextmanager
from datetime import datetime
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .checksum import ChecksumEngine, Checksums
from .config import ReaderConfig
from .exceptions import CorruptImageError, ImageIOError, UnsupportedFormatError
from .exif_parser import extract_ifds, parse_metadata
from .image_format import SNIFF_LENGTH, ImageFormat, sniff_format
from .image_metadata import ImageMetadata
from .image_reader_result import ImageReaderResult


ImageSource = Union[str, os.PathLike, bytes, bytearray, BinaryIO]

# What Pillow raises on damaged data, beyond UnidentifiedImageError
DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, struct.error,
                 KeyError, IndexError, TypeError)


class ImageReader:
    """
    Reads images into ImageReaderResult records.

    The format is detected from the content, never from the file name.
    Checksums are computed on the raw bytes and do not depend on whether
    the pixel data decodes.
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        checksum_engine: Optional[ChecksumEngine] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image reader.

        Args:
            config: Checksum switches (default: both enabled)
            checksum_engine: Engine used for CRC32/MD5
            logger: Optional logger instance
        """
        config = config or ReaderConfig()
        self._compute_crc = config.compute_crc
        self._compute_md5 = config.compute_md5
        self.checksums = checksum_engine or ChecksumEngine()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def compute_crc(self) -> bool:
        return self._compute_crc

    @compute_crc.setter
    def compute_crc(self, enabled: bool) -> None:
        self._compute_crc = bool(enabled)

    @property
    def compute_md5(self) -> bool:
        return self._compute_md5

    @compute_md5.setter
    def compute_md5(self, enabled: bool) -> None:
        self._compute_md5 = bool(enabled)

    def read(self, source: ImageSource, strict: bool = False) -> ImageReaderResult:
        """
        Read an image.

        Args:
            source: File path, binary stream or bytes
            strict: Raise CorruptImageError instead of returning an
                invalid result when the pixel data cannot be decoded

        Returns:
            ImageReaderResult; valid is False if decoding failed part-way

        Raises:
            ImageIOError: If the source cannot be read
            UnsupportedFormatError: If the content is not a supported image
            CorruptImageError: In strict mode, if decoding failed
        """
        # Switches are sampled once so a concurrent toggle only affects later reads
        compute_crc = self._compute_crc
        compute_md5 = self._compute_md5

        with self._open_source(source) as (stream, name, last_modified):
            start = self._tell(stream)
            image_format = self._sniff(stream, start, name)

            checksums = self._checksum(stream, start, compute_crc, compute_md5)
            self._seek(stream, start)

            metadata, error = self._decode(stream, image_format, name)

        if error and strict:
            raise CorruptImageError(f"{name}: {error}")

        if error:
            self.logger.warning(f"Partially decoded {name}: {error}")
        else:
            self.logger.debug(
                f"Read {name}: {image_format.name} {metadata.width}x{metadata.height} "
                f"({checksums.length} bytes)"
            )

        return ImageReaderResult(
            content_type=image_format.mime_type,
            file_length=checksums.length,
            image_format=image_format,
            metadata=metadata,
            crc32=checksums.crc32,
            md5=checksums.md5,
            last_modified=last_modified,
            valid=error is None,
            error=error,
        )

    def check_valid(self, source: ImageSource) -> bool:
        """
        Check whether a source is a supported, structurally sound image.

        Raises:
            ImageIOError: If the source cannot be read
        """
        with self._open_source(source) as (stream, name, _):
            start = self._tell(stream)
            try:
                image_format = self._sniff(stream, start, name)
            except UnsupportedFormatError:
                return False

            try:
                with Image.open(stream, formats=[image_format.pil_format]) as img:
                    img.verify()
            except UnidentifiedImageError:
                return False
            except DECODE_ERRORS as e:
                self.logger.debug(f"Verification failed for {name}: {e}")
                return False
        return True

    @contextmanager
    def _open_source(
        self,
        source: ImageSource
    ) -> Iterator[Tuple[BinaryIO, str, Optional[datetime]]]:
        if isinstance(source, (str, os.PathLike)):
            path = os.fspath(source)
            try:
                f = open(path, 'rb')
            except OSError as e:
                raise ImageIOError(f"Cannot read {path}: {e}") from e
            with f:
                try:
                    stat = os.fstat(f.fileno())
                except OSError as e:
                    raise ImageIOError(f"Cannot read {path}: {e}") from e
                yield f, path, datetime.fromtimestamp(stat.st_mtime)
            return

        if isinstance(source, (bytes, bytearray)):
            yield io.BytesIO(source), '<bytes>', None
            return

        name = getattr(source, 'name', None) or '<stream>'
        last_modified = self._stream_mtime(source)
        if not self._seekable(source):
            try:
                source = io.BytesIO(source.read())
            except OSError as e:
                raise ImageIOError(f"Cannot read {name}: {e}") from e
        yield source, str(name), last_modified

    @staticmethod
    def _stream_mtime(stream) -> Optional[datetime]:
        try:
            return datetime.fromtimestamp(os.fstat(stream.fileno()).st_mtime)
        except (AttributeError, OSError, io.UnsupportedOperation):
            return None

    @staticmethod
    def _seekable(stream) -> bool:
        try:
            return stream.seekable()
        except (AttributeError, ValueError):
            return False

    @staticmethod
    def _tell(stream: BinaryIO) -> int:
        try:
            return stream.tell()
        except OSError as e:
            raise ImageIOError(f"Cannot read stream: {e}") from e

    @staticmethod
    def _seek(stream: BinaryIO, position: int) -> None:
        try:
            stream.seek(position)
        except OSError as e:
            raise ImageIOError(f"Cannot read stream: {e}") from e

    def _sniff(self, stream: BinaryIO, start: int, name: str) -> ImageFormat:
        try:
            header = stream.read(SNIFF_LENGTH)
        except OSError as e:
            raise ImageIOError(f"Cannot read {name}: {e}") from e
        self._seek(stream, start)

        image_format = sniff_format(header)
        if not image_format.is_supported:
            raise UnsupportedFormatError(f"Unrecognized image format: {name}")
        return image_format

    def _checksum(
        self,
        stream: BinaryIO,
        start: int,
        compute_crc: bool,
        compute_md5: bool
    ) -> Checksums:
        if compute_crc or compute_md5:
            return self.checksums.compute(stream, crc=compute_crc, md5=compute_md5)

        try:
            end = stream.seek(0, io.SEEK_END)
        except OSError as e:
            raise ImageIOError(f"Cannot read stream: {e}") from e
        return Checksums(crc32=None, md5=None, length=end - start)

    def _decode(
        self,
        stream: BinaryIO,
        image_format: ImageFormat,
        name: str
    ) -> Tuple[ImageMetadata, Optional[str]]:
        """
        Decode dimensions, EXIF and pixels.

        A container Pillow cannot open is unsupported and nothing is returned.
        Once it is open, EXIF or pixel faults are reported as an error string
        alongside whatever was read before the fault.

        Raises:
            UnsupportedFormatError: If the sniffed container cannot be opened
        """
        tags = None
        error = None

        try:
            img = Image.open(stream, formats=[image_format.pil_format])
        except UnidentifiedImageError as e:
            raise UnsupportedFormatError(
                f"Cannot decode {image_format.name} container: {name}"
            ) from e
        except DECODE_ERRORS as e:
            raise UnsupportedFormatError(
                f"Cannot decode {image_format.name} container: {name}: {e}"
            ) from e

        with img:
            width, height = img.size

            if image_format.supports_exif:
                try:
                    tags = extract_ifds(img.getexif())
                except DECODE_ERRORS as e:
                    error = f"unreadable EXIF data: {e}"

            try:
                img.load()
            except DECODE_ERRORS as e:
                error = f"cannot decode pixel data: {e}"

        if tags is None:
            return ImageMetadata(width=width, height=height), error

        self.logger.debug(
            f"EXIF in {name}: {len(tags[0])} base, {len(tags[1])} exif, {len(tags[2])} gps tags"
        )
        return parse_metadata(*tags, width=width, height=height), error
