"""
Thumbnail, ThumbnailFailure and BatchResult - Outputs of thumbnail generation.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from PIL import Image

from .exceptions import PartialBatchFailure
from .image_format import ThumbnailFormat


Size = Union[int, Tuple[int, int]]


@dataclass
class Thumbnail:
    """
    A generated thumbnail.

    Attributes:
        data: Encoded image bytes
        content_type: MIME type of data
        format: Output encoding
        width: Thumbnail width in pixels
        height: Thumbnail height in pixels
        requested_size: Bounding box the thumbnail was fitted into
        image: Decoded thumbnail
        destination: Where it was saved, if it was
    """
    data: bytes
    content_type: str
    format: ThumbnailFormat
    width: int
    height: int
    requested_size: Tuple[int, int]
    image: Optional[Image.Image] = field(default=None, repr=False, compare=False)
    destination: Optional[str] = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def byte_length(self) -> int:
        return len(self.data)


@dataclass
class ThumbnailFailure:
    """
    One failed unit of a batch.

    Attributes:
        index: Position of the unit in the request
        size: Requested bounding box
        error: The exception raised by the unit
        destination: Target of the unit, for save batches
    """
    index: int
    size: Size
    error: BaseException
    destination: Optional[str] = None

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


@dataclass
class BatchResult:
    """
    Results of a batch, in request order.

    Attributes:
        thumbnails: i-th entry belongs to the i-th requested size, None if that unit failed
        failures: Failed units, ordered by index
    """
    thumbnails: List[Optional[Thumbnail]] = field(default_factory=list)
    failures: List[ThumbnailFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.thumbnails)

    @property
    def succeeded(self) -> List[Thumbnail]:
        """Successful thumbnails, in request order."""
        return [t for t in self.thumbnails if t is not None]

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def is_complete(self) -> bool:
        return not self.failures

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, units failed."""
        return bool(self.failures) and len(self.failures) < self.total

    def raise_for_failures(self) -> None:
        """Raise PartialBatchFailure if any unit failed."""
        if not self.failures:
            return
        details = '; '.join(f"#{f.index} {f.size}: {f.message}" for f in self.failures)
        raise PartialBatchFailure(
            f"{len(self.failures)} of {self.total} thumbnails failed: {details}",
            result=self,
            failures=self.failures,
        )
