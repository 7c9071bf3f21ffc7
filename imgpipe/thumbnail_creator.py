"""
ThumbnailCreator - Generates upright, resized thumbnails under a concurrency cap.
"""

import io
import logging
import os
import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .batch_result import BatchResult, Size, Thumbnail, ThumbnailFailure
from .concurrency import ConcurrencyLimiter
from .config import ThumbnailConfig
from .exceptions import (
    BatchFailedError,
    CorruptImageError,
    ImageIOError,
    InvalidConfigurationError,
    ResourceExhaustedError,
    UnsupportedFormatError,
)
from .exif_parser import TAG_ORIENTATION
from .image_format import ImageFormat, ThumbnailFormat
from .image_orientation import ImageOrientation
from .image_reader import DECODE_ERRORS
from .image_reader_result import ImageReaderResult
from .storage import LocalStorage


ThumbnailSource = Union[Image.Image, str, os.PathLike, bytes, bytearray, BinaryIO]
Destination = Union[str, os.PathLike]


def normalize_size(size: Size) -> Tuple[int, int]:
    """
    Turn a requested size into a (width, height) bounding box.

    Args:
        size: Side of a square box, or a (width, height) pair

    Raises:
        ValueError: If the size is not made of positive integers
    """
    if isinstance(size, int) and not isinstance(size, bool):
        box = (size, size)
    else:
        try:
            box = tuple(size)
        except TypeError:
            raise ValueError(f"Invalid thumbnail size: {size!r}") from None
        if len(box) != 2:
            raise ValueError(f"Invalid thumbnail size: {size!r}")

    for side in box:
        if isinstance(side, bool) or not isinstance(side, int) or side <= 0:
            raise ValueError(f"Thumbnail size must be positive integers: {size!r}")
    return box


def fit_within(width: int, height: int, box: Tuple[int, int]) -> Tuple[int, int]:
    """
    Scale (width, height) to fit inside box, preserving aspect ratio.

    Never upscales: a source smaller than the box keeps its own size.
    """
    box_width, box_height = box
    scale = min(box_width / width, box_height / height, 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))


@dataclass
class _PreparedSource:
    """Decoded, upright, output-ready source shared by all units of a call."""
    image: Image.Image
    format: ThumbnailFormat


class ThumbnailCreator:
    """
    Generates thumbnails from decoded images using Pillow.

    The EXIF orientation is applied once, before resizing. Every transcode
    holds a slot of the shared ConcurrencyLimiter, so no more than
    max_concurrent_operations run at the same time across all callers.
    """

    def __init__(
        self,
        config: Optional[ThumbnailConfig] = None,
        limiter: Optional[ConcurrencyLimiter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail creator.

        Args:
            config: Concurrency cap and JPEG quality
            limiter: Shared limiter; when given, its limit wins over config
            logger: Optional logger instance
        """
        config = config or ThumbnailConfig()
        errors = config.validate()
        if errors:
            raise InvalidConfigurationError('; '.join(errors))

        self.quality = config.quality
        self.limiter = limiter or ConcurrencyLimiter(config.max_concurrent_operations)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def max_concurrent_operations(self) -> int:
        return self.limiter.limit

    @max_concurrent_operations.setter
    def max_concurrent_operations(self, value: int) -> None:
        self.limiter.limit = value
        self.logger.debug(f"Maximum concurrent thumbnail operations set to {value}")

    def generate(
        self,
        source: ThumbnailSource,
        size: Size,
        orientation: Optional[ImageOrientation] = None,
        thumbnail_format: Optional[ThumbnailFormat] = None,
        reader_result: Optional[ImageReaderResult] = None
    ) -> Thumbnail:
        """
        Generate a single thumbnail.

        Args:
            source: Pillow image, path, bytes or binary stream
            size: Bounding box (int for a square, or (width, height))
            orientation: Orientation of the stored pixels; defaults to the
                reader result's metadata, then to the source's own EXIF
            thumbnail_format: Output encoding; defaults to the encoding
                mapped from the source format
            reader_result: Result of ImageReader.read for this source

        Returns:
            Thumbnail

        Raises:
            ValueError: If size is invalid
            ImageIOError: If the source cannot be read
            UnsupportedFormatError: If the source is not an image
            CorruptImageError: If the source pixels cannot be decoded
        """
        box = normalize_size(size)
        try:
            prepared = self._prepare(source, orientation, thumbnail_format, reader_result)
            return self._run_unit(prepared, box)
        except Exception as e:
            self.logger.error(f"Error generating thumbnail: {e}")
            raise

    def generate_and_save(
        self,
        source: ThumbnailSource,
        size: Size,
        destination: Destination,
        storage=None,
        orientation: Optional[ImageOrientation] = None,
        thumbnail_format: Optional[ThumbnailFormat] = None,
        reader_result: Optional[ImageReaderResult] = None
    ) -> Thumbnail:
        """
        Generate a thumbnail and write it to destination.

        Args:
            destination: Path or object key
            storage: Object with upload_object(key, data, content_type);
                defaults to LocalStorage (destination used as a path)

        Raises:
            ImageIOError: If the destination cannot be written
        """
        box = normalize_size(size)
        try:
            prepared = self._prepare(source, orientation, thumbnail_format, reader_result)
            return self._run_unit(prepared, box, destination, storage or LocalStorage(logger=self.logger))
        except Exception as e:
            self.logger.error(f"Error generating thumbnail for {destination}: {e}")
            raise

    def generate_batch(
        self,
        source: ThumbnailSource,
        sizes: Sequence[Size],
        orientation: Optional[ImageOrientation] = None,
        thumbnail_format: Optional[ThumbnailFormat] = None,
        reader_result: Optional[ImageReaderResult] = None
    ) -> BatchResult:
        """
        Generate one thumbnail per requested size.

        Sizes are processed as independent units on a worker pool; the
        result keeps the order of sizes whatever order units finish in.
        A failing unit is recorded in BatchResult.failures and does not
        stop its siblings.

        Raises:
            BatchFailedError: If every unit failed
            ResourceExhaustedError: If a unit ran out of memory; units not
                yet started are skipped
        """
        units = [(size, normalize_size(size), None) for size in sizes]
        prepared = self._prepare(source, orientation, thumbnail_format, reader_result)
        return self._run_batch(prepared, units, None)

    def generate_and_save_batch(
        self,
        source: ThumbnailSource,
        targets: Sequence[Tuple[Size, Destination]],
        storage=None,
        orientation: Optional[ImageOrientation] = None,
        thumbnail_format: Optional[ThumbnailFormat] = None,
        reader_result: Optional[ImageReaderResult] = None
    ) -> BatchResult:
        """
        Generate and save one thumbnail per (size, destination) pair.

        A destination that cannot be written is recorded as a failure of
        its unit only.
        """
        units = [(size, normalize_size(size), destination) for size, destination in targets]
        prepared = self._prepare(source, orientation, thumbnail_format, reader_result)
        return self._run_batch(prepared, units, storage or LocalStorage(logger=self.logger))

    def _run_batch(
        self,
        prepared: _PreparedSource,
        units: List[Tuple[Size, Tuple[int, int], Optional[Destination]]],
        storage
    ) -> BatchResult:
        total = len(units)
        if total == 0:
            return BatchResult()

        thumbnails: List[Optional[Thumbnail]] = [None] * total
        failures: List[ThumbnailFailure] = []
        workers = min(self.limiter.limit, total)
        aborted = threading.Event()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='thumbnail') as executor:
            futures = {
                executor.submit(self._run_batch_unit, aborted, prepared, box, destination, storage): index
                for index, (_, box, destination) in enumerate(units)
            }

            for future in as_completed(futures):
                index = futures[future]
                size, box, destination = units[index]
                try:
                    thumbnails[index] = future.result()
                except MemoryError as e:
                    skipped = sum(1 for pending in futures if pending.cancel())
                    self.logger.error(
                        f"Out of memory generating {box[0]}x{box[1]} thumbnail, "
                        f"skipping {skipped} pending units"
                    )
                    raise ResourceExhaustedError(
                        f"Out of memory generating {box[0]}x{box[1]} thumbnail"
                    ) from e
                except Exception as e:
                    self.logger.error(f"Thumbnail #{index} ({box[0]}x{box[1]}) failed: {e}")
                    failures.append(ThumbnailFailure(
                        index=index,
                        size=size,
                        error=e,
                        destination=str(destination) if destination is not None else None,
                    ))

        failures.sort(key=lambda f: f.index)
        if len(failures) == total:
            raise BatchFailedError(f"All {total} thumbnails failed", failures)

        self.logger.info(
            f"Generated {total - len(failures)}/{total} thumbnails "
            f"({len(failures)} errors)"
        )
        return BatchResult(thumbnails=thumbnails, failures=failures)

    def _run_batch_unit(
        self,
        aborted: threading.Event,
        prepared: _PreparedSource,
        box: Tuple[int, int],
        destination: Optional[Destination],
        storage
    ) -> Thumbnail:
        # Units already handed to a worker when a sibling ran out of memory
        # must not start either
        if aborted.is_set():
            raise CancelledError(f"{box[0]}x{box[1]} thumbnail skipped after out of memory")
        try:
            return self._run_unit(prepared, box, destination, storage)
        except MemoryError:
            aborted.set()
            raise

    def _run_unit(
        self,
        prepared: _PreparedSource,
        box: Tuple[int, int],
        destination: Optional[Destination] = None,
        storage=None
    ) -> Thumbnail:
        with self.limiter.slot():
            thumbnail = self._transcode(prepared.image, box, prepared.format)

        if destination is not None:
            storage.upload_object(destination, thumbnail.data, thumbnail.content_type)
            thumbnail.destination = str(destination)
        return thumbnail

    def _transcode(
        self,
        image: Image.Image,
        box: Tuple[int, int],
        thumbnail_format: ThumbnailFormat
    ) -> Thumbnail:
        """Resize an upright image into box and encode it."""
        target = fit_within(image.width, image.height, box)
        if target == image.size:
            resized = image.copy()
        else:
            resized = image.resize(target, Image.Resampling.LANCZOS)

        output = io.BytesIO()
        if thumbnail_format is ThumbnailFormat.JPEG:
            resized.save(output, format='JPEG', quality=self.quality, optimize=True)
        elif thumbnail_format is ThumbnailFormat.PNG:
            resized.save(output, format='PNG', optimize=True)
        else:
            resized.save(output, format=thumbnail_format.pil_format)

        return Thumbnail(
            data=output.getvalue(),
            content_type=thumbnail_format.content_type,
            format=thumbnail_format,
            width=resized.width,
            height=resized.height,
            requested_size=box,
            image=resized,
        )

    def _prepare(
        self,
        source: ThumbnailSource,
        orientation: Optional[ImageOrientation],
        thumbnail_format: Optional[ThumbnailFormat],
        reader_result: Optional[ImageReaderResult]
    ) -> _PreparedSource:
        image, source_format = self._load(source)

        if orientation is None and reader_result is not None:
            orientation = reader_result.metadata.orientation
        if orientation is None:
            orientation = self._embedded_orientation(image)
        orientation = ImageOrientation.from_value(orientation)

        if thumbnail_format is None:
            if reader_result is not None:
                source_format = reader_result.image_format
            thumbnail_format = ThumbnailFormat.from_image_format(source_format)

        upright = orientation.apply(image)
        upright = self._convert_color_mode(upright, thumbnail_format)
        self.logger.debug(
            f"Prepared {image.width}x{image.height} source "
            f"(orientation {orientation.name}, output {thumbnail_format.name})"
        )
        return _PreparedSource(image=upright, format=thumbnail_format)

    def _load(self, source: ThumbnailSource) -> Tuple[Image.Image, ImageFormat]:
        """Decode a source fully into memory."""
        if isinstance(source, Image.Image):
            return source, ImageFormat.from_value(source.format)

        if isinstance(source, (str, os.PathLike)):
            try:
                fp = open(source, 'rb')
            except OSError as e:
                raise ImageIOError(f"Cannot read {os.fspath(source)}: {e}") from e
        elif isinstance(source, (bytes, bytearray)):
            fp = io.BytesIO(source)
        else:
            fp = source

        try:
            try:
                image = Image.open(fp)
            except UnidentifiedImageError as e:
                raise UnsupportedFormatError(f"Cannot identify image: {e}") from e
            except DECODE_ERRORS as e:
                raise UnsupportedFormatError(f"Cannot open image container: {e}") from e

            try:
                image.load()
            except DECODE_ERRORS as e:
                raise CorruptImageError(f"Cannot decode image: {e}") from e
        finally:
            if fp is not source:
                fp.close()

        return image, ImageFormat.from_value(image.format)

    def _embedded_orientation(self, image: Image.Image) -> ImageOrientation:
        try:
            return ImageOrientation.from_value(image.getexif().get(TAG_ORIENTATION))
        except DECODE_ERRORS as e:
            self.logger.debug(f"Ignoring unreadable EXIF orientation: {e}")
            return ImageOrientation.UNKNOWN

    def _convert_color_mode(self, img: Image.Image, thumbnail_format: ThumbnailFormat) -> Image.Image:
        """Convert image to a colour mode the output encoding can store."""
        has_alpha = img.mode in ('RGBA', 'LA', 'PA') or (
            img.mode == 'P' and 'transparency' in img.info
        )

        if thumbnail_format.supports_alpha:
            if img.mode in ('RGB', 'RGBA', 'L', 'LA'):
                return img
            return img.convert('RGBA' if has_alpha else 'RGB')

        if has_alpha:
            rgba = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if img.mode not in ('RGB', 'L'):
            return img.convert('RGB')
        return img
