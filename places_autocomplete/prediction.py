from typing import Any, Dict, List, Optional

from places_autocomplete.errors import PlacesApiError

# Statuses the autocomplete and details endpoints use for a usable answer
OK_STATUSES = ('OK', 'ZERO_RESULTS')


class Prediction:
    def __init__(self,
                 place_id: str,
                 description: str,
                 reference: str = None,
                 main_text: str = None,
                 secondary_text: str = None,
                 types: List[str] = None,
                 lat: float = None,
                 lng: float = None):
        self.place_id = place_id
        self.description = description
        self.reference = reference
        self.main_text = main_text
        self.secondary_text = secondary_text
        self.types = types or []
        self.lat = lat
        self.lng = lng

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Prediction':
        """Create a Prediction from one entry of the autocomplete `predictions` list."""
        if not isinstance(data, dict):
            raise PlacesApiError(f"Malformed prediction: {data!r}")
        place_id = data.get('place_id')
        description = data.get('description')
        if not place_id or description is None:
            raise PlacesApiError(f"Malformed prediction: {data!r}")

        formatting = data.get('structured_formatting')
        if not isinstance(formatting, dict):
            formatting = {}
        return cls(
            place_id=place_id,
            description=description,
            reference=data.get('reference'),
            main_text=formatting.get('main_text'),
            secondary_text=formatting.get('secondary_text'),
            types=data.get('types', []),
        )

    def to_dict(self) -> dict:
        return {
            'placeId': self.place_id,
            'description': self.description,
            'reference': self.reference,
            'mainText': self.main_text,
            'secondaryText': self.secondary_text,
            'types': self.types,
            'lat': self.lat,
            'lng': self.lng
        }

    def __repr__(self) -> str:
        return f"Prediction(place_id={self.place_id!r}, description={self.description!r})"


class AutocompleteResponse:
    def __init__(self, predictions: List[Prediction], status: str = 'OK'):
        self.predictions = predictions
        self.status = status

    def __len__(self) -> int:
        return len(self.predictions)

    @classmethod
    def from_json(cls, data: Any) -> 'AutocompleteResponse':
        if not isinstance(data, dict):
            raise PlacesApiError("Autocomplete response is not a JSON object")

        status = data.get('status', 'OK')
        if status not in OK_STATUSES:
            raise PlacesApiError(
                f"Autocomplete request failed with status {status}",
                status=status,
                error_message=data.get('error_message'),
            )

        items = data.get('predictions') or []
        if not isinstance(items, list):
            raise PlacesApiError("Autocomplete response has no predictions list", status=status)
        predictions = [Prediction.from_json(item) for item in items]
        return cls(predictions=predictions, status=status)
