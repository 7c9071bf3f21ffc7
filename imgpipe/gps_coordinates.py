"""
GPSCoordinates - Validated geographic position parsed from EXIF GPS tags.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence


MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


@dataclass(frozen=True)
class GPSCoordinates:
    """
    Position where the image was captured.

    Attributes:
        latitude: Decimal degrees, negative south of the equator
        longitude: Decimal degrees, negative west of Greenwich
        altitude: Metres, negative below sea level, or None when unknown
    """
    latitude: float
    longitude: float
    altitude: Optional[float] = None

    def __post_init__(self):
        if not _finite(self.latitude) or not MIN_LATITUDE <= self.latitude <= MAX_LATITUDE:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not _finite(self.longitude) or not MIN_LONGITUDE <= self.longitude <= MAX_LONGITUDE:
            raise ValueError(f"Longitude out of range: {self.longitude}")
        if self.altitude is not None and not _finite(self.altitude):
            raise ValueError(f"Invalid altitude: {self.altitude}")

    @property
    def has_altitude(self) -> bool:
        return self.altitude is not None

    def to_dict(self) -> dict:
        return {
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
        }

    def __str__(self) -> str:
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def dms_to_decimal(dms: Sequence[float], ref: Optional[str]) -> float:
    """
    Convert a degrees/minutes/seconds triple to signed decimal degrees.

    Args:
        dms: (degrees, minutes, seconds)
        ref: Hemisphere reference ('N', 'S', 'E', 'W'); S and W are negative

    Returns:
        Decimal degrees

    Raises:
        ValueError: If dms does not hold three numbers
    """
    if len(dms) < 3:
        raise ValueError(f"Expected degrees, minutes and seconds, got {dms!r}")

    degrees, minutes, seconds = (float(v) for v in dms[:3])
    decimal = degrees + minutes / 60.0 + seconds / 3600.0

    if ref and ref.strip().upper()[:1] in ('S', 'W'):
        decimal = -decimal

    return decimal
