"""
LightSource - EXIF light source codes.
"""

from enum import IntEnum


class LightSource(IntEnum):
    """Kind of light source (EXIF 0x9208)."""
    UNKNOWN = 0
    DAYLIGHT = 1
    FLUORESCENT = 2
    TUNGSTEN_INCANDESCENT_LIGHT = 3
    FLASH = 4
    FINE_WEATHER = 9
    CLOUDY_WEATHER = 10
    SHADE = 11
    DAYLIGHT_FLUORESCENT_D_5700_7100K = 12
    DAY_WHITE_FLUORESCENT_N_4600_5400K = 13
    COOL_WHITE_FLUORESCENT_W_3900_4500K = 14
    WHITE_FLUORESCENT_WW_3200_3700K = 15
    STANDARD_LIGHT_A = 17
    STANDARD_LIGHT_B = 18
    STANDARD_LIGHT_C = 19
    D55 = 20
    D65 = 21
    D75 = 22
    D50 = 23
    ISO_STUDIO_TUNGSTEN = 24
    OTHER_LIGHT_SOURCE = 255

    @classmethod
    def from_value(cls, value) -> 'LightSource':
        """
        Look up a light source by EXIF code.

        Codes outside the table are reported as OTHER_LIGHT_SOURCE, and
        values that are not integers at all as UNKNOWN.
        """
        try:
            code = int(value)
        except (TypeError, ValueError):
            return cls.UNKNOWN
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER_LIGHT_SOURCE
