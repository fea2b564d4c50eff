import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from geophoto.domain.geo import Coordinate, round_degree, validate_coordinates

logger = logging.getLogger(__name__)

GPS_IFD = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def _to_float(value) -> float:
    # Pillow gives IFDRational; some writers store raw (num, den) pairs.
    if isinstance(value, tuple):
        num, den = value
        return float(num) / float(den)
    return float(value)


def _to_degrees(values, ref) -> Optional[float]:
    if not values or len(values) < 3:
        return None
    degrees = _to_float(values[0]) + _to_float(values[1]) / 60 + _to_float(values[2]) / 3600
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if ref and ref.strip().upper() in ("S", "W"):
        degrees = -degrees
    return degrees


def extract_gps(image_bytes: bytes) -> Optional[Coordinate]:
    """
    Read the GPS latitude/longitude tags embedded in an image.

    Returns the coordinate rounded to 6 decimals, or None when the image carries
    no usable GPS data. Parse failures are logged and reported as None.
    """
    if not image_bytes:
        return None

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            gps_info = img.getexif().get_ifd(GPS_IFD)

        if not gps_info:
            logger.debug("No GPS IFD found in image.")
            return None

        lat = _to_degrees(gps_info.get(GPS_LATITUDE), gps_info.get(GPS_LATITUDE_REF))
        lon = _to_degrees(gps_info.get(GPS_LONGITUDE), gps_info.get(GPS_LONGITUDE_REF))
    except UnidentifiedImageError:
        logger.debug("Payload is not a recognised image; no GPS.")
        return None
    except Exception as e:
        logger.warning(f"EXIF GPS extraction failed: {e}")
        return None

    if lat is None or lon is None:
        return None

    lat, lon = round_degree(lat), round_degree(lon)
    if not validate_coordinates(lat, lon):
        logger.warning(f"EXIF GPS out of range, ignoring: lat={lat}, lon={lon}")
        return None

    logger.debug(f"Extracted GPS from EXIF: lat={lat}, lon={lon}")
    return Coordinate(latitude=lat, longitude=lon)
