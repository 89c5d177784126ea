"""Read GPS coordinates from image EXIF metadata with Pillow."""

import io
from typing import Any

from PIL import Image, UnidentifiedImageError

from fleetlead.geo.models import Coordinates
from fleetlead.logging.logger import Log

_GPS_IFD = 0x8825
_LATITUDE_REF = 1
_LATITUDE = 2
_LONGITUDE_REF = 3
_LONGITUDE = 4


def _to_degrees(value: Any) -> float:
    degrees, minutes, seconds = (float(part) for part in value)
    return degrees + minutes / 60.0 + seconds / 3600.0


def extract_coordinates(image_bytes: bytes) -> Coordinates | None:
    """Return the coordinates embedded in the image, or None.

    Never raises: a missing, partial or unreadable GPS block yields None.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            gps = image.getexif().get_ifd(_GPS_IFD)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        Log.debug(f"No readable EXIF data: {exc}")
        return None

    if not gps or _LATITUDE not in gps or _LONGITUDE not in gps:
        return None

    try:
        latitude = _to_degrees(gps[_LATITUDE])
        longitude = _to_degrees(gps[_LONGITUDE])
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        Log.debug(f"Malformed GPS EXIF block: {exc}")
        return None

    if str(gps.get(_LATITUDE_REF, "N")).upper().startswith("S"):
        latitude = -latitude
    if str(gps.get(_LONGITUDE_REF, "E")).upper().startswith("W"):
        longitude = -longitude
    return Coordinates(latitude=latitude, longitude=longitude)
