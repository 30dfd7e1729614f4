import logging
from typing import Callable, List, Optional

from places_autocomplete.base import PlacesProvider
from places_autocomplete.config import AutocompleteConfig
from places_autocomplete.debounce import DebouncedQueryController
from places_autocomplete.errors import PlacesError
from places_autocomplete.google_provider import GooglePlacesClient
from places_autocomplete.prediction import AutocompleteResponse, Prediction
from places_autocomplete.search_request import SearchRequest
from places_autocomplete.session import SessionToken

logger = logging.getLogger(__name__)

PredictionCallback = Callable[[Prediction], None]


class PlacesAutocompleteField:
    """State behind a place-autocomplete text field.

    A UI layer forwards every text change to `on_text_changed`, renders
    `predictions` while `overlay_visible` is set, and calls `select` when one of
    them is tapped. Everything else (debouncing, stale-result suppression, the
    session token, coordinate lookup) happens here.
    """

    def __init__(self,
                 config: AutocompleteConfig,
                 provider: PlacesProvider = None,
                 on_item_click: PredictionCallback = None,
                 on_place_details: PredictionCallback = None,
                 on_predictions_changed: Callable[[List[Prediction]], None] = None,
                 on_error: Callable[[Exception], None] = None):
        self.config = config.validate()
        self._owns_provider = provider is None
        self.provider = provider or GooglePlacesClient(config.api_key, timeout=config.http_timeout)
        self.on_item_click = on_item_click
        self.on_place_details = on_place_details
        self.on_predictions_changed = on_predictions_changed
        self.on_error = on_error

        self.session_token = SessionToken.new()
        self.predictions: List[Prediction] = []
        self.overlay_visible = False
        self.text = ""

        self._controller = DebouncedQueryController(
            self._search,
            on_results=self._show_predictions,
            on_clear=self._clear_predictions,
            on_error=self._search_failed,
            quiet_period=config.quiet_period,
        )

    @property
    def controller(self) -> DebouncedQueryController:
        return self._controller

    def on_text_changed(self, text: str):
        self.text = text
        self._controller.submit(text)

    async def _search(self, text: str) -> AutocompleteResponse:
        request = SearchRequest.from_config(text, self.config, self.session_token)
        return await self.provider.autocomplete_async(request)

    def _set_predictions(self, predictions: List[Prediction]):
        self.predictions = predictions
        self.overlay_visible = bool(predictions)
        if self.on_predictions_changed is not None:
            self.on_predictions_changed(list(predictions))

    def _show_predictions(self, text: str, response: AutocompleteResponse):
        logger.debug(f"Showing {len(response.predictions)} predictions for {text!r}")
        self._set_predictions(list(response.predictions))

    def _clear_predictions(self):
        self._set_predictions([])

    def _search_failed(self, text: str, error: Exception):
        # the current list stays on screen; the next keystroke retries
        logger.error(f"Autocomplete search for {text!r} failed: {str(error)}")
        if self.on_error is not None:
            self.on_error(error)

    def reset_session(self) -> SessionToken:
        self.session_token = SessionToken.new()
        return self.session_token

    async def select(self, prediction: Prediction) -> SessionToken:
        """Handle a tap on `prediction` and return the session token that replaces the used one."""
        used_token = self.session_token

        self._controller.supersede()
        if self.on_item_click is not None:
            self.on_item_click(prediction)
        self._clear_predictions()
        self.reset_session()

        if self.config.is_lat_lng_required:
            await self._resolve_coordinates(prediction, used_token)
        return self.session_token

    async def select_index(self, index: int) -> Optional[SessionToken]:
        if not 0 <= index < len(self.predictions):
            logger.warning(f"Ignoring selection of missing prediction #{index}")
            return None
        return await self.select(self.predictions[index])

    async def _resolve_coordinates(self, prediction: Prediction, session_token: SessionToken):
        try:
            details = await self.provider.get_place_details_async(prediction.place_id, session_token)
        except PlacesError as e:
            logger.warning(f"Could not resolve coordinates for {prediction.place_id}: {str(e)}")
            return

        prediction.lat = details.latitude
        prediction.lng = details.longitude
        if self.on_place_details is not None:
            self.on_place_details(prediction)

    def dispose(self):
        self._controller.dispose()
        if self._owns_provider:
            self.provider.close()
