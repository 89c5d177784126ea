from fleetlead.geo.geocoder import ReverseGeocoder
from fleetlead.geo.gps import extract_coordinates
from fleetlead.geo.models import Place


class ImageLocator:
    """EXIF GPS plus reverse geocoding: image bytes in, place out."""

    def __init__(self, geocoder: ReverseGeocoder | None) -> None:
        self._geocoder = geocoder

    def locate(self, image_bytes: bytes) -> Place | None:
        if self._geocoder is None:
            return None
        coordinates = extract_coordinates(image_bytes)
        if coordinates is None:
            return None
        return self._geocoder.reverse(coordinates)
