import asyncio
from unittest.mock import MagicMock, patch

import pytest

from places_autocomplete.base import PlacesProvider
from places_autocomplete.config import AutocompleteConfig
from places_autocomplete.errors import InvalidConfigurationError, PlacesApiError
from places_autocomplete.field import PlacesAutocompleteField
from places_autocomplete.place_details import PlaceDetails
from places_autocomplete.prediction import AutocompleteResponse, Prediction


class FakePlacesProvider(PlacesProvider):
    def __init__(self, predictions=None, details=None, search_error=None, details_error=None):
        self.predictions = predictions or {}
        self.details = details
        self.search_error = search_error
        self.details_error = details_error
        self.search_requests = []
        self.detail_requests = []

    def autocomplete(self, request):
        self.search_requests.append(request)
        if self.search_error is not None:
            raise self.search_error
        return AutocompleteResponse([Prediction(place_id=pid, description=desc)
                                     for pid, desc in self.predictions.get(request.input, [])])

    def get_place_details(self, place_id, session_token):
        self.detail_requests.append((place_id, session_token))
        if self.details_error is not None:
            raise self.details_error
        return self.details

    async def autocomplete_async(self, request):
        return self.autocomplete(request)

    async def get_place_details_async(self, place_id, session_token):
        return self.get_place_details(place_id, session_token)


EIFFEL_PREDICTIONS = [
    ("abc123", "Eiffel Tower, Paris, France"),
    ("def456", "Eiffel, Germany"),
    ("ghi789", "Eiffel Street, Sydney, Australia"),
]


def make_field(provider, **config_kwargs):
    config_kwargs.setdefault("debounce_time", 20)
    config = AutocompleteConfig(api_key="test-key", **config_kwargs)
    events = {"clicked": [], "resolved": [], "changed": [], "errors": []}
    field = PlacesAutocompleteField(
        config,
        provider=provider,
        on_item_click=events["clicked"].append,
        on_place_details=events["resolved"].append,
        on_predictions_changed=events["changed"].append,
        on_error=events["errors"].append,
    )
    return field, events


def test_invalid_configuration_rejected_at_construction():
    with pytest.raises(InvalidConfigurationError):
        PlacesAutocompleteField(AutocompleteConfig(api_key="k", latitude=0.0, longitude=0.0),
                                provider=FakePlacesProvider())


@pytest.mark.asyncio
async def test_search_shows_predictions_in_returned_order():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, events = make_field(provider, countries=["fr"], radius=900)

    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()

    assert [p.place_id for p in field.predictions] == ["abc123", "def456", "ghi789"]
    assert field.overlay_visible
    assert len(events["changed"]) == 1

    request = provider.search_requests[0]
    assert request.input == "Eiffel"
    assert request.session_token == field.session_token
    assert request.countries == ("fr",)
    assert request.radius == 900
    field.dispose()


@pytest.mark.asyncio
async def test_keystrokes_share_one_session_token():
    provider = FakePlacesProvider()
    field, _ = make_field(provider)

    field.on_text_changed("Ei")
    await field.controller.wait_idle()
    field.on_text_changed("Eif")
    await field.controller.wait_idle()

    tokens = {request.session_token for request in provider.search_requests}
    assert len(provider.search_requests) == 2
    assert tokens == {field.session_token}


@pytest.mark.asyncio
async def test_empty_text_hides_dropdown():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, _ = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()

    field.on_text_changed("")

    assert field.predictions == []
    assert not field.overlay_visible
    assert len(provider.search_requests) == 1


@pytest.mark.asyncio
async def test_search_failure_keeps_current_list():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, events = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()

    provider.search_error = PlacesApiError("denied", status="REQUEST_DENIED")
    field.on_text_changed("Eiffel T")
    await field.controller.wait_idle()

    assert [p.place_id for p in field.predictions] == ["abc123", "def456", "ghi789"]
    assert len(events["errors"]) == 1
    assert events["errors"][0].status == "REQUEST_DENIED"

    provider.search_error = None
    field.on_text_changed("Eiffel To")
    await field.controller.wait_idle()
    assert field.predictions == []


@pytest.mark.asyncio
async def test_select_resolves_coordinates_and_renews_session():
    provider = FakePlacesProvider(
        predictions={"Eiffel": EIFFEL_PREDICTIONS},
        details=PlaceDetails(place_id="abc123", latitude=48.8583701, longitude=2.2944813),
    )
    field, events = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()
    token_before = field.session_token
    prediction = field.predictions[0]

    new_token = await field.select(prediction)

    assert provider.detail_requests == [("abc123", token_before)]
    assert prediction.lat == pytest.approx(48.8583701)
    assert prediction.lng == pytest.approx(2.2944813)
    assert events["clicked"] == [prediction]
    assert events["resolved"] == [prediction]
    assert new_token == field.session_token
    assert new_token != token_before
    assert field.predictions == []
    assert not field.overlay_visible


@pytest.mark.asyncio
async def test_select_without_coordinate_resolution():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, events = make_field(provider, is_lat_lng_required=False)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()
    token_before = field.session_token

    await field.select_index(1)

    assert provider.detail_requests == []
    assert [p.place_id for p in events["clicked"]] == ["def456"]
    assert events["resolved"] == []
    assert field.session_token != token_before


@pytest.mark.asyncio
async def test_failed_detail_lookup_is_not_fatal():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS},
                                  details_error=PlacesApiError("timeout"))
    field, events = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()
    prediction = field.predictions[0]

    await field.select(prediction)

    assert events["clicked"] == [prediction]
    assert events["resolved"] == []
    assert prediction.lat is None and prediction.lng is None


@pytest.mark.asyncio
async def test_select_index_out_of_range_is_ignored():
    field, events = make_field(FakePlacesProvider())
    token_before = field.session_token

    assert await field.select_index(3) is None
    assert events["clicked"] == []
    assert field.session_token == token_before


def test_reset_session():
    field, _ = make_field(FakePlacesProvider())
    token_before = field.session_token
    assert field.reset_session() != token_before


@pytest.mark.asyncio
async def test_dispose_drops_pending_search():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, events = make_field(provider)

    field.on_text_changed("Eiffel")
    field.dispose()
    await asyncio.sleep(0.1)

    assert provider.search_requests == []
    assert field.predictions == []
    assert events["changed"] == []


class GatedPlacesProvider(FakePlacesProvider):
    """Holds autocomplete answers for the given inputs until their gate is set."""

    def __init__(self, gates, **kwargs):
        super().__init__(**kwargs)
        self.gates = gates

    async def autocomplete_async(self, request):
        gate = self.gates.get(request.input)
        if gate is not None:
            await gate.wait()
        return self.autocomplete(request)


class MalformedDetailsProvider(FakePlacesProvider):
    def get_place_details(self, place_id, session_token):
        self.detail_requests.append((place_id, session_token))
        return PlaceDetails.from_json({"status": "OK", "result": {"geometry": "bad"}}, place_id=place_id)


@pytest.mark.asyncio
async def test_search_in_flight_during_select_is_dropped():
    gates = {"Eiffel T": asyncio.Event()}
    provider = GatedPlacesProvider(
        gates,
        predictions={"Eiffel": EIFFEL_PREDICTIONS, "Eiffel T": EIFFEL_PREDICTIONS[:1]},
        details=PlaceDetails(place_id="abc123", latitude=48.8583701, longitude=2.2944813),
    )
    field, events = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()

    field.on_text_changed("Eiffel T")
    await asyncio.sleep(0.1)
    assert [r.input for r in provider.search_requests] == ["Eiffel"]

    await field.select(field.predictions[0])
    gates["Eiffel T"].set()
    await field.controller.wait_idle()

    assert [r.input for r in provider.search_requests] == ["Eiffel", "Eiffel T"]
    assert field.predictions == []
    assert not field.overlay_visible


@pytest.mark.asyncio
async def test_select_cancels_armed_search_timer():
    provider = FakePlacesProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, _ = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()
    prediction = field.predictions[0]

    field.on_text_changed("Eiffel T")
    await field.select(prediction)
    await asyncio.sleep(0.1)

    assert [r.input for r in provider.search_requests] == ["Eiffel"]
    assert field.predictions == []


@pytest.mark.asyncio
async def test_malformed_details_body_is_not_fatal():
    provider = MalformedDetailsProvider(predictions={"Eiffel": EIFFEL_PREDICTIONS})
    field, events = make_field(provider)
    field.on_text_changed("Eiffel")
    await field.controller.wait_idle()
    prediction = field.predictions[0]

    new_token = await field.select(prediction)

    assert provider.detail_requests[0][0] == "abc123"
    assert events["clicked"] == [prediction]
    assert events["resolved"] == []
    assert not prediction.has_coordinates
    assert new_token == field.session_token


def test_dispose_closes_client_the_field_created():
    with patch("places_autocomplete.field.GooglePlacesClient") as client_class:
        field = PlacesAutocompleteField(AutocompleteConfig(api_key="test-key"))
        field.dispose()

    client_class.assert_called_once_with("test-key", timeout=10.0)
    client_class.return_value.close.assert_called_once_with()


def test_dispose_leaves_injected_provider_open():
    provider = MagicMock()
    field = PlacesAutocompleteField(AutocompleteConfig(api_key="test-key"), provider=provider)

    field.dispose()

    provider.close.assert_not_called()
