"""
ImageOrientation - EXIF orientation codes and the transform bringing them upright.
"""

from enum import IntEnum
from typing import Optional

from PIL import Image


class ImageOrientation(IntEnum):
    """
    EXIF Orientation (tag 0x0112). Names describe where row 0 and column 0
    of the stored buffer sit in the upright scene.
    """
    UNKNOWN = 0
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM_LEFT = 4
    LEFT_TOP = 5
    RIGHT_TOP = 6
    RIGHT_BOTTOM = 7
    LEFT_BOTTOM = 8

    @classmethod
    def from_value(cls, value) -> 'ImageOrientation':
        """Look up an orientation by EXIF code. Unknown codes map to UNKNOWN."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN

    @property
    def transpose(self) -> Optional[Image.Transpose]:
        """Pillow operation that makes a buffer stored this way upright, or None."""
        return _UPRIGHT_TRANSPOSE.get(self)

    @property
    def swaps_dimensions(self) -> bool:
        """True when the upright image exchanges stored width and height."""
        return self in (
            ImageOrientation.LEFT_TOP,
            ImageOrientation.RIGHT_TOP,
            ImageOrientation.RIGHT_BOTTOM,
            ImageOrientation.LEFT_BOTTOM,
        )

    def apply(self, image: Image.Image) -> Image.Image:
        """Return an upright copy of image (the image itself for identity)."""
        method = self.transpose
        if method is None:
            return image
        return image.transpose(method)


_UPRIGHT_TRANSPOSE = {
    ImageOrientation.TOP_RIGHT: Image.Transpose.FLIP_LEFT_RIGHT,
    ImageOrientation.BOTTOM_RIGHT: Image.Transpose.ROTATE_180,
    ImageOrientation.BOTTOM_LEFT: Image.Transpose.FLIP_TOP_BOTTOM,
    ImageOrientation.LEFT_TOP: Image.Transpose.TRANSPOSE,
    ImageOrientation.RIGHT_TOP: Image.Transpose.ROTATE_270,
    ImageOrientation.RIGHT_BOTTOM: Image.Transpose.TRANSVERSE,
    ImageOrientation.LEFT_BOTTOM: Image.Transpose.ROTATE_90,
}
