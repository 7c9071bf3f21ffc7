"""EXIF tag extraction into ImageMetadata."""

import logging
import math
from typing import Any, Callable, Mapping, Optional, Tuple

from PIL import Image
from PIL.ExifTags import GPS, IFD, Base

from .flash import Flash
from .gps_coordinates import GPSCoordinates, dms_to_decimal
from .image_metadata import ImageMetadata
from .image_orientation import ImageOrientation
from .light_source import LightSource
from .unit import Unit

logger = logging.getLogger(__name__)

# IFD pointers
EXIF_IFD_POINTER = IFD.Exif
GPS_IFD_POINTER = IFD.GPSInfo

# IFD0 (TIFF) tags
TAG_DOCUMENT_NAME = Base.DocumentName
TAG_IMAGE_DESCRIPTION = Base.ImageDescription
TAG_MAKE = Base.Make
TAG_MODEL = Base.Model
TAG_ORIENTATION = Base.Orientation
TAG_SOFTWARE = Base.Software
TAG_ARTIST = Base.Artist
TAG_HOST_COMPUTER = Base.HostComputer
TAG_TARGET_PRINTER = Base.TargetPrinter
TAG_COPYRIGHT = Base.Copyright
TAG_UNIQUE_CAMERA_MODEL = Base.UniqueCameraModel

# Exif IFD tags
TAG_EXPOSURE_TIME = Base.ExposureTime
TAG_F_NUMBER = Base.FNumber
TAG_ISO = Base.ISOSpeedRatings
TAG_SHUTTER_SPEED_VALUE = Base.ShutterSpeedValue
TAG_SUBJECT_DISTANCE = Base.SubjectDistance
TAG_LIGHT_SOURCE = Base.LightSource
TAG_FLASH = Base.Flash
TAG_FOCAL_LENGTH = Base.FocalLength
TAG_FLASH_ENERGY = Base.FlashEnergy
TAG_FOCAL_PLANE_X_RESOLUTION = Base.FocalPlaneXResolution
TAG_FOCAL_PLANE_Y_RESOLUTION = Base.FocalPlaneYResolution
TAG_FOCAL_PLANE_RESOLUTION_UNIT = Base.FocalPlaneResolutionUnit
TAG_DIGITAL_ZOOM_RATIO = Base.DigitalZoomRatio
TAG_FOCAL_LENGTH_IN_35MM_FILM = Base.FocalLengthIn35mmFilm
TAG_BODY_SERIAL_NUMBER = Base.BodySerialNumber

# GPS IFD tags
GPS_LATITUDE_REF = GPS.GPSLatitudeRef
GPS_LATITUDE = GPS.GPSLatitude
GPS_LONGITUDE_REF = GPS.GPSLongitudeRef
GPS_LONGITUDE = GPS.GPSLongitude
GPS_ALTITUDE_REF = GPS.GPSAltitudeRef
GPS_ALTITUDE = GPS.GPSAltitude

ALTITUDE_BELOW_SEA_LEVEL = 1


def _first(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        if not value:
            raise ValueError("empty tag value")
        return value[0]
    return value


def to_text(value: Any) -> Optional[str]:
    """Decode an ASCII tag, dropping NUL padding and enclosing quotes."""
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='replace')
    text = str(value).replace('\x00', '').strip()
    if text.startswith("'"):
        text = text[1:]
    if text.endswith("'"):
        text = text[:-1]
    return text or None


def to_float(value: Any) -> Optional[float]:
    """Convert a rational (or integer) tag to float; 0/0 and infinities become None."""
    number = float(_first(value))
    if not math.isfinite(number):
        return None
    return number


def to_int(value: Any) -> int:
    value = _first(value)
    if isinstance(value, bytes):
        return int.from_bytes(value[:2] or b'\x00', 'little')
    return int(value)


# ImageMetadata field -> (tag, converter)
_BASE_FIELDS: Tuple[Tuple[str, int, Callable[[Any], Any]], ...] = (
    ('maker', TAG_MAKE, to_text),
    ('model', TAG_MODEL, to_text),
    ('artist', TAG_ARTIST, to_text),
    ('copyright', TAG_COPYRIGHT, to_text),
    ('document_name', TAG_DOCUMENT_NAME, to_text),
    ('host_computer', TAG_HOST_COMPUTER, to_text),
    ('image_description', TAG_IMAGE_DESCRIPTION, to_text),
    ('software', TAG_SOFTWARE, to_text),
    ('target_printer', TAG_TARGET_PRINTER, to_text),
    ('unique_camera_model', TAG_UNIQUE_CAMERA_MODEL, to_text),
    ('orientation', TAG_ORIENTATION, lambda v: ImageOrientation.from_value(to_int(v))),
)

_EXIF_FIELDS: Tuple[Tuple[str, int, Callable[[Any], Any]], ...] = (
    ('camera_serial_number', TAG_BODY_SERIAL_NUMBER, to_text),
    ('exposure_time', TAG_EXPOSURE_TIME, to_float),
    ('f_number', TAG_F_NUMBER, to_float),
    ('iso', TAG_ISO, to_int),
    ('shutter_speed_value', TAG_SHUTTER_SPEED_VALUE, to_float),
    ('subject_distance', TAG_SUBJECT_DISTANCE, to_float),
    ('light_source', TAG_LIGHT_SOURCE, lambda v: LightSource.from_value(to_int(v))),
    ('flash', TAG_FLASH, lambda v: Flash.from_value(to_int(v))),
    ('focal_length', TAG_FOCAL_LENGTH, to_float),
    ('flash_energy', TAG_FLASH_ENERGY, to_float),
    ('focal_plane_x_resolution', TAG_FOCAL_PLANE_X_RESOLUTION, to_float),
    ('focal_plane_y_resolution', TAG_FOCAL_PLANE_Y_RESOLUTION, to_float),
    ('focal_plane_resolution_unit', TAG_FOCAL_PLANE_RESOLUTION_UNIT,
     lambda v: Unit.from_value(to_int(v))),
    ('digital_zoom_ratio', TAG_DIGITAL_ZOOM_RATIO, to_float),
    ('focal_length_in_35mm_film', TAG_FOCAL_LENGTH_IN_35MM_FILM, to_float),
)


def extract_ifds(exif: Image.Exif) -> Tuple[dict, dict, dict]:
    """
    Split a Pillow Exif block into IFD0, Exif IFD and GPS IFD mappings.

    Raises whatever Pillow raises for an undecodable sub-IFD; callers
    treat that as a partial decode.
    """
    base = {tag: value for tag, value in exif.items()
            if tag not in (EXIF_IFD_POINTER, GPS_IFD_POINTER)}
    exif_ifd = dict(exif.get_ifd(EXIF_IFD_POINTER) or {})
    gps_ifd = dict(exif.get_ifd(GPS_IFD_POINTER) or {})
    return base, exif_ifd, gps_ifd


def _convert(name: str, tag: int, value: Any, converter: Callable[[Any], Any]) -> Any:
    try:
        return converter(value)
    except (TypeError, ValueError, ZeroDivisionError, IndexError) as e:
        logger.debug(f"Ignoring unreadable {name} (tag 0x{tag:04X}): {e}")
        return None


def parse_location(gps_ifd: Mapping[int, Any]) -> Optional[GPSCoordinates]:
    """
    Build GPSCoordinates from GPS IFD tags.

    Latitude and longitude each need their value and hemisphere reference;
    the sign comes from the reference (S/W negative). Altitude is optional,
    negative when its reference says below sea level.

    Returns:
        GPSCoordinates, or None when the tags are incomplete or out of range
    """
    latitude = gps_ifd.get(GPS_LATITUDE)
    latitude_ref = gps_ifd.get(GPS_LATITUDE_REF)
    longitude = gps_ifd.get(GPS_LONGITUDE)
    longitude_ref = gps_ifd.get(GPS_LONGITUDE_REF)

    if not (latitude and longitude and latitude_ref and longitude_ref):
        if gps_ifd:
            logger.debug(
                f"Incomplete GPS data (lat: {latitude}, lon: {longitude}, "
                f"refs: {latitude_ref}/{longitude_ref})"
            )
        return None

    try:
        lat_decimal = dms_to_decimal(latitude, to_text(latitude_ref))
        lon_decimal = dms_to_decimal(longitude, to_text(longitude_ref))
    except (TypeError, ValueError, ZeroDivisionError) as e:
        logger.debug(f"Failed to convert GPS coordinates: {e}")
        return None

    altitude = None
    if gps_ifd.get(GPS_ALTITUDE) is not None:
        altitude = _convert('altitude', GPS_ALTITUDE, gps_ifd[GPS_ALTITUDE], to_float)
        altitude_ref = gps_ifd.get(GPS_ALTITUDE_REF)
        if altitude is not None and altitude_ref is not None:
            if _convert('altitude ref', GPS_ALTITUDE_REF, altitude_ref, to_int) == ALTITUDE_BELOW_SEA_LEVEL:
                altitude = -altitude

    try:
        return GPSCoordinates(lat_decimal, lon_decimal, altitude)
    except ValueError as e:
        logger.warning(f"Discarding GPS position: {e}")
        return None


def parse_metadata(
    base: Mapping[int, Any],
    exif_ifd: Mapping[int, Any],
    gps_ifd: Mapping[int, Any],
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> ImageMetadata:
    """
    Assemble ImageMetadata from raw tag mappings.

    Args:
        base: IFD0 tags
        exif_ifd: Exif sub-IFD tags (also looked up in IFD0 as a fallback)
        gps_ifd: GPS sub-IFD tags
        width: Stored pixel width
        height: Stored pixel height

    Returns:
        ImageMetadata with upright width/height; absent tags are None
    """
    values = {}

    for name, tag, converter in _BASE_FIELDS:
        if base.get(tag) is not None:
            values[name] = _convert(name, tag, base[tag], converter)

    for name, tag, converter in _EXIF_FIELDS:
        raw = exif_ifd.get(tag)
        if raw is None:
            raw = base.get(tag)
        if raw is not None:
            values[name] = _convert(name, tag, raw, converter)

    values['location'] = parse_location(gps_ifd)

    orientation = values.get('orientation')
    if orientation is not None and orientation.swaps_dimensions:
        width, height = height, width

    return ImageMetadata(width=width, height=height, **values)
