from places_autocomplete.base import PlacesProvider
from places_autocomplete.config import AutocompleteConfig
from places_autocomplete.debounce import DebouncedQueryController
from places_autocomplete.errors import PlacesError, PlacesApiError, InvalidConfigurationError
from places_autocomplete.field import PlacesAutocompleteField
from places_autocomplete.google_provider import GooglePlacesClient
from places_autocomplete.place_details import PlaceDetails
from places_autocomplete.prediction import Prediction, AutocompleteResponse
from places_autocomplete.search_request import SearchRequest
from places_autocomplete.session import SessionToken

__all__ = [
    'PlacesProvider',
    'AutocompleteConfig',
    'DebouncedQueryController',
    'PlacesError',
    'PlacesApiError',
    'InvalidConfigurationError',
    'PlacesAutocompleteField',
    'GooglePlacesClient',
    'PlaceDetails',
    'Prediction',
    'AutocompleteResponse',
    'SearchRequest',
    'SessionToken'
]
