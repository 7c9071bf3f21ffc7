"""
ImageMetadata - Camera and capture attributes extracted from an image.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional

from .flash import Flash
from .gps_coordinates import GPSCoordinates
from .image_orientation import ImageOrientation
from .light_source import LightSource
from .unit import Unit


@dataclass
class ImageMetadata:
    """
    Metadata of a single image. Every attribute is None when the image
    does not carry it.

    Attributes:
        width: Upright width in pixels
        height: Upright height in pixels
        maker: Camera manufacturer
        model: Camera model
        focal_length: Lens focal length (mm)
        focal_length_in_35mm_film: 35mm-equivalent focal length (mm)
        focal_plane_x_resolution: Pixels per focal_plane_resolution_unit along X
        focal_plane_y_resolution: Pixels per focal_plane_resolution_unit along Y
        focal_plane_resolution_unit: Unit of the focal plane resolutions
        orientation: EXIF orientation of the stored pixels
        location: GPS position
        artist: Creator of the image
        copyright: Copyright notice
        document_name: Name of the scanned document
        host_computer: Computer used to create the image
        image_description: Title of the image
        software: Software used to create the image
        target_printer: Intended printer
        camera_serial_number: Camera body serial number
        unique_camera_model: Unique, non-localized camera model name
        digital_zoom_ratio: Digital zoom applied when shooting
        exposure_time: Exposure time (seconds)
        f_number: Aperture F-number
        flash: Flash status
        flash_energy: Strobe energy (BCPS)
        light_source: Light source
        subject_distance: Distance to subject (metres)
        shutter_speed_value: Shutter speed (APEX)
        iso: ISO speed rating
    """
    width: Optional[int] = None
    height: Optional[int] = None
    maker: Optional[str] = None
    model: Optional[str] = None
    focal_length: Optional[float] = None
    focal_length_in_35mm_film: Optional[float] = None
    focal_plane_x_resolution: Optional[float] = None
    focal_plane_y_resolution: Optional[float] = None
    focal_plane_resolution_unit: Optional[Unit] = None
    orientation: Optional[ImageOrientation] = None
    location: Optional[GPSCoordinates] = None
    artist: Optional[str] = None
    copyright: Optional[str] = None
    document_name: Optional[str] = None
    host_computer: Optional[str] = None
    image_description: Optional[str] = None
    software: Optional[str] = None
    target_printer: Optional[str] = None
    camera_serial_number: Optional[str] = None
    unique_camera_model: Optional[str] = None
    digital_zoom_ratio: Optional[float] = None
    exposure_time: Optional[float] = None
    f_number: Optional[float] = None
    flash: Optional[Flash] = None
    flash_energy: Optional[float] = None
    light_source: Optional[LightSource] = None
    subject_distance: Optional[float] = None
    shutter_speed_value: Optional[float] = None
    iso: Optional[int] = None

    def __post_init__(self):
        for name in ('width', 'height'):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative (got {value})")

    @property
    def has_location(self) -> bool:
        return self.location is not None

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None and self.height is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.name
            elif isinstance(value, (Flash, GPSCoordinates)):
                value = value.to_dict()
            result[f.name] = value
        return result
