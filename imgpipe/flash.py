"""
Flash - EXIF flash status decoded into named facets.
"""

from dataclasses import dataclass
from enum import IntEnum


class FlashMode(IntEnum):
    """Firing mode, bits 3-4 of the EXIF Flash code."""
    UNKNOWN = 0
    COMPULSORY_FIRING = 1
    COMPULSORY_SUPPRESSION = 2
    AUTO = 3


# Bits 1-2: strobe return light status
_RETURN_NOT_DETECTED = 0b10
_RETURN_DETECTED = 0b11

_MAX_CODE = 0x7F
UNKNOWN_VALUE = 0xFFFF


@dataclass(frozen=True)
class Flash:
    """
    Flash status (EXIF 0x9209), decoded once from the raw code.

    Attributes:
        value: Raw EXIF code (UNKNOWN_VALUE when undecodable)
        fired: Flash fired
        return_light_detected: Strobe return light was detected
        return_light_not_detected: Strobe return light was checked and not detected
        mode: Firing mode
        no_flash_function: Camera has no flash
        red_eye_reduction: Red-eye reduction was enabled
    """
    value: int
    fired: bool = False
    return_light_detected: bool = False
    return_light_not_detected: bool = False
    mode: FlashMode = FlashMode.UNKNOWN
    no_flash_function: bool = False
    red_eye_reduction: bool = False

    @property
    def not_fired(self) -> bool:
        """True when the code is known and the flash did not fire."""
        return self.is_known and not self.fired

    @property
    def is_known(self) -> bool:
        return self.value != UNKNOWN_VALUE

    @classmethod
    def from_value(cls, value) -> 'Flash':
        """
        Decode an EXIF flash code.

        Codes outside 0x00-0x7F, and non-integer input, decode to
        Flash.UNKNOWN with every facet false.
        """
        try:
            code = int(value)
        except (TypeError, ValueError):
            return cls.UNKNOWN
        if code < 0 or code > _MAX_CODE:
            return cls.UNKNOWN

        return_bits = (code >> 1) & 0b11
        return cls(
            value=code,
            fired=bool(code & 0x01),
            return_light_detected=return_bits == _RETURN_DETECTED,
            return_light_not_detected=return_bits == _RETURN_NOT_DETECTED,
            mode=FlashMode((code >> 3) & 0b11),
            no_flash_function=bool(code & 0x20),
            red_eye_reduction=bool(code & 0x40),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'value': self.value,
            'fired': self.fired,
            'return_light_detected': self.return_light_detected,
            'return_light_not_detected': self.return_light_not_detected,
            'mode': self.mode.name,
            'no_flash_function': self.no_flash_function,
            'red_eye_reduction': self.red_eye_reduction,
        }


Flash.UNKNOWN = Flash(value=UNKNOWN_VALUE)
