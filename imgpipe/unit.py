"""
Unit - EXIF resolution units.
"""

from enum import IntEnum


class Unit(IntEnum):
    """Focal-plane resolution unit (EXIF 0xA210)."""
    UNKNOWN = 0
    NOT_AVAILABLE = 1
    INCHES = 2
    CENTIMETERS = 3

    @classmethod
    def from_value(cls, value) -> 'Unit':
        """Look up a unit by EXIF code. Unknown codes map to UNKNOWN."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN
