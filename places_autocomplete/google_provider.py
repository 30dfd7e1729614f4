import asyncio
import logging
import re
from typing import Any, Dict

import requests

from places_autocomplete.base import PlacesProvider
from places_autocomplete.config import DEFAULT_HTTP_TIMEOUT
from places_autocomplete.errors import PlacesApiError
from places_autocomplete.place_details import PlaceDetails
from places_autocomplete.prediction import AutocompleteResponse
from places_autocomplete.search_request import SearchRequest
from places_autocomplete.session import SessionToken

logger = logging.getLogger(__name__)

BASE_URL = "https://maps.googleapis.com/maps/api/place"

# Long bodies are logged in pieces so log handlers don't truncate them
LOG_CHUNK_SIZE = 800

_KEY_PATTERN = re.compile(r'(key=)[^&]+')


def _redact(url: str) -> str:
    return _KEY_PATTERN.sub(r"\1***", url)


def _log_chunked(prefix: str, text: str):
    for start in range(0, len(text), LOG_CHUNK_SIZE):
        logger.debug(f"{prefix}{text[start:start + LOG_CHUNK_SIZE]}")


class GooglePlacesClient(PlacesProvider):
    def __init__(self, api_key: str, base_url: str = BASE_URL, timeout: float = DEFAULT_HTTP_TIMEOUT,
                 session: requests.Session = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()

    def _get(self, path: str, params: Dict[str, str]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.http.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error calling Places API {path}: {str(e)}")
            raise PlacesApiError(f"Request to {path} failed: {str(e)}") from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"GET {_redact(str(response.url or url))} -> {response.status_code}")
            _log_chunked("Response body: ", response.text or "")

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Places API Error: {response.text}")
            raise PlacesApiError(f"Places API returned HTTP {response.status_code}") from e

        try:
            return response.json()
        except ValueError as e:
            raise PlacesApiError(f"Places API returned invalid JSON for {path}") from e

    def autocomplete(self, request: SearchRequest) -> AutocompleteResponse:
        params = request.to_params(self.api_key)
        data = self._get("autocomplete/json", params)
        result = AutocompleteResponse.from_json(data)
        logger.debug(f"Autocomplete for {request.input!r} returned {len(result)} predictions")
        return result

    def get_place_details(self, place_id: str, session_token: SessionToken) -> PlaceDetails:
        params = {
            "placeid": place_id,
            "sessiontoken": str(session_token),
            "key": self.api_key
        }
        logger.debug(f"Retrieving place details for ID: {place_id}")
        data = self._get("details/json", params)
        return PlaceDetails.from_json(data, place_id=place_id)

    async def autocomplete_async(self, request: SearchRequest) -> AutocompleteResponse:
        return await asyncio.to_thread(self.autocomplete, request)

    async def get_place_details_async(self, place_id: str, session_token: SessionToken) -> PlaceDetails:
        return await asyncio.to_thread(self.get_place_details, place_id, session_token)

    def close(self):
        self.http.close()
