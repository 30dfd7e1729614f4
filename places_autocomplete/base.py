from abc import ABC, abstractmethod

from places_autocomplete.place_details import PlaceDetails
from places_autocomplete.prediction import AutocompleteResponse
from places_autocomplete.search_request import SearchRequest
from places_autocomplete.session import SessionToken


class PlacesProvider(ABC):
    @abstractmethod
    def autocomplete(self, request: SearchRequest) -> AutocompleteResponse:
        """Return predictions for the text in the request."""
        pass

    @abstractmethod
    def get_place_details(self, place_id: str, session_token: SessionToken) -> PlaceDetails:
        """Resolve a place id to coordinates, closing the session."""
        pass

    @abstractmethod
    async def autocomplete_async(self, request: SearchRequest) -> AutocompleteResponse:
        pass

    @abstractmethod
    async def get_place_details_async(self, place_id: str, session_token: SessionToken) -> PlaceDetails:
        pass
