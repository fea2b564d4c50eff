import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

LAT_MIN, LAT_MAX = -90.0, 90.0
LON_MIN, LON_MAX = -180.0, 180.0
COORDINATE_PRECISION = 6


class GpsSource(str, Enum):
    EXIF = "exif"
    MANUAL = "manual"


@dataclass(frozen=True)
class Coordinate:
    """WGS84 decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Gps:
    """In-memory GPS state of an upload form; either field may still be missing."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: Optional[GpsSource] = None

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate, source: GpsSource) -> "Gps":
        return cls(latitude=coordinate.latitude, longitude=coordinate.longitude, source=source)

    @property
    def is_complete(self) -> bool:
        return validate_coordinates(self.latitude, self.longitude)

    def to_coordinate(self) -> Optional[Coordinate]:
        if not self.is_complete:
            return None
        return Coordinate(latitude=float(self.latitude), longitude=float(self.longitude))


def parse_degree(value: Any) -> Optional[float]:
    """Parse a numeric or textual degree value; empty, non-numeric and non-finite input gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_blank(value: Any) -> bool:
    """True for a form field the user left empty."""
    return value is None or (isinstance(value, str) and not value.strip())


def validate_coordinates(lat: Any, lon: Any) -> bool:
    lat_value = parse_degree(lat)
    lon_value = parse_degree(lon)
    if lat_value is None or lon_value is None:
        return False
    return LAT_MIN <= lat_value <= LAT_MAX and LON_MIN <= lon_value <= LON_MAX


def round_degree(value: float) -> float:
    return round(value, COORDINATE_PRECISION)
