from typing import Any, Dict

from places_autocomplete.errors import PlacesApiError
from places_autocomplete.prediction import OK_STATUSES


class PlaceDetails:
    def __init__(self,
                 place_id: str,
                 latitude: float,
                 longitude: float,
                 name: str = "",
                 formatted_address: str = ""):
        self.place_id = place_id
        self.latitude = latitude
        self.longitude = longitude
        self.name = name
        self.formatted_address = formatted_address

    @classmethod
    def from_json(cls, data: Any, place_id: str = None) -> 'PlaceDetails':
        """Create PlaceDetails from a details endpoint response body."""
        if not isinstance(data, dict):
            raise PlacesApiError("Place details response is not a JSON object")

        status = data.get('status', 'OK')
        if status not in OK_STATUSES:
            raise PlacesApiError(
                f"Place details request failed with status {status}",
                status=status,
                error_message=data.get('error_message'),
            )

        place: Dict[str, Any] = data.get('result') or {}
        geometry = place.get('geometry') if isinstance(place, dict) else None
        location = geometry.get('location') if isinstance(geometry, dict) else None
        if not isinstance(location, dict):
            raise PlacesApiError(f"Place {place_id} has no geometry location", status=status)
        if location.get('lat') is None or location.get('lng') is None:
            raise PlacesApiError(f"Place {place_id or place.get('place_id')} has no geometry location", status=status)

        try:
            latitude = float(location['lat'])
            longitude = float(location['lng'])
        except (TypeError, ValueError):
            raise PlacesApiError(f"Invalid coordinates in place details: {location!r}", status=status)

        return cls(
            place_id=place.get('place_id') or place_id,
            latitude=latitude,
            longitude=longitude,
            name=place.get('name', ""),
            formatted_address=place.get('formatted_address', ""),
        )
