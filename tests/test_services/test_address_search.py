import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.schemas.address import (
    AddressPrediction,
    Coordinates,
    PlaceDetails,
    RawAddressComponent,
)
from app.schemas.results import (
    Failure,
    FailureReason,
    PlaceDetailsResult,
    PredictionResult,
)
from app.services.address_search import AddressSearchController, SearchState
from app.services.google_places import GooglePlacesService

DEBOUNCE = 0.01


def _prediction(main: str = "10 Downing Street", place_id: str = "place-1") -> AddressPrediction:
    return AddressPrediction(
        description=f"{main}, London, UK",
        place_id=place_id,
        main_text=main,
        secondary_text="London, UK",
    )


def _details() -> PlaceDetails:
    return PlaceDetails(
        components=[
            RawAddressComponent(long_name="10", short_name="10", types=frozenset({"street_number"})),
            RawAddressComponent(
                long_name="Downing Street", short_name="Downing St", types=frozenset({"route"})
            ),
            RawAddressComponent(long_name="London", short_name="London", types=frozenset({"postal_town"})),
        ],
        formatted_address="10 Downing St, London SW1A 2AA, UK",
        coordinates=Coordinates(lat=51.5034, lng=-0.1276),
    )


@pytest.fixture
def places():
    mock = AsyncMock(spec=GooglePlacesService)
    mock.autocomplete.return_value = PredictionResult.ok([_prediction()])
    mock.place_details.return_value = PlaceDetailsResult.ok(_details())
    return mock


@pytest.fixture
def on_select():
    return MagicMock()


@pytest.fixture
async def controller(places, on_select):
    async with AddressSearchController(places, on_select, debounce_seconds=DEBOUNCE) as c:
        yield c


@pytest.mark.asyncio
async def test_short_input_issues_no_request(controller, places):
    for text in ("", "1", "10", "  10  "):
        controller.input_changed(text)
    await controller.wait_settled()

    places.autocomplete.assert_not_called()
    assert controller.state == SearchState.idle
    assert controller.predictions == []


@pytest.mark.asyncio
async def test_rapid_keystrokes_issue_one_request(controller, places):
    for text in ("10 D", "10 Do", "10 Dow", "10 Downing"):
        controller.input_changed(text)
    await controller.wait_settled()

    places.autocomplete.assert_awaited_once_with("10 Downing")
    assert controller.state == SearchState.has_predictions
    assert controller.prediction_count == 1
    assert controller.show_predictions


@pytest.mark.asyncio
async def test_timer_is_reset_not_extended(places, on_select):
    async with AddressSearchController(places, on_select, debounce_seconds=0.2) as controller:
        controller.input_changed("10 D")
        await asyncio.sleep(0.05)
        controller.input_changed("10 Do")
        await asyncio.sleep(0.05)
        controller.input_changed("10 Dow")
        await controller.wait_settled()

    places.autocomplete.assert_awaited_once_with("10 Dow")


@pytest.mark.asyncio
async def test_zero_results_shows_indicator(controller, places):
    places.autocomplete.return_value = PredictionResult.empty()

    controller.input_changed("zzzz qqqq")
    await controller.wait_settled()

    assert controller.state == SearchState.no_results
    assert controller.show_no_results
    assert controller.predictions == []
    assert not controller.show_predictions


@pytest.mark.parametrize(
    ("reason", "level"),
    [
        (FailureReason.quota_exceeded, logging.WARNING),
        (FailureReason.permission_denied, logging.ERROR),
        (FailureReason.invalid_request, logging.ERROR),
        (FailureReason.transport, logging.ERROR),
        (FailureReason.unknown, logging.ERROR),
    ],
)
@pytest.mark.asyncio
async def test_failures_degrade_quietly(controller, places, caplog, reason, level):
    places.autocomplete.return_value = PredictionResult.failed(Failure(reason=reason, status="X"))

    with caplog.at_level(logging.DEBUG, logger="app.services.address_search"):
        controller.input_changed("10 Downing")
        await controller.wait_settled()

    assert controller.state == SearchState.error
    assert controller.predictions == []
    assert not controller.show_no_results
    assert any(r.levelno == level for r in caplog.records)


@pytest.mark.asyncio
async def test_raising_client_is_absorbed(controller, places):
    places.autocomplete.side_effect = RuntimeError("boom")

    controller.input_changed("10 Downing")
    await controller.wait_settled()

    assert controller.state == SearchState.error
    assert controller.predictions == []


@pytest.mark.asyncio
async def test_stale_response_is_dropped(controller, places):
    release_first = asyncio.Event()
    first_called = asyncio.Event()

    async def _autocomplete(query: str) -> PredictionResult:
        if query == "10 Dow":
            first_called.set()
            await release_first.wait()
            return PredictionResult.ok([_prediction("Stale Road", "stale")])
        return PredictionResult.ok([_prediction("10 Downing Street", "fresh")])

    places.autocomplete.side_effect = _autocomplete

    controller.input_changed("10 Dow")
    await asyncio.wait_for(first_called.wait(), timeout=1)
    controller.input_changed("10 Downing")
    for _ in range(100):
        if controller.predictions:
            break
        await asyncio.sleep(DEBOUNCE)

    assert [p.place_id for p in controller.predictions] == ["fresh"]

    release_first.set()
    await controller.wait_settled()

    assert [p.place_id for p in controller.predictions] == ["fresh"]
    assert controller.state == SearchState.has_predictions


@pytest.mark.asyncio
async def test_shortening_input_resets_to_idle(controller, places):
    controller.input_changed("10 Downing")
    await controller.wait_settled()
    assert controller.state == SearchState.has_predictions

    controller.input_changed("10")
    await controller.wait_settled()

    assert controller.state == SearchState.idle
    assert controller.predictions == []
    places.autocomplete.assert_awaited_once()


@pytest.mark.asyncio
async def test_select_resolves_and_notifies_once(controller, places, on_select):
    controller.input_changed("10 Downing")
    await controller.wait_settled()

    parsed = await controller.select(controller.predictions[0])

    places.place_details.assert_awaited_once_with("place-1")
    on_select.assert_called_once_with(parsed)
    assert parsed.street_name == "Downing Street"
    assert parsed.postcode == "SW1A 2AA"
    assert controller.query == "10 Downing St, London SW1A 2AA, UK"
    assert controller.state == SearchState.idle
    assert controller.predictions == []
    assert not controller.show_no_results
    assert not controller.resolving


@pytest.mark.asyncio
async def test_select_clears_no_results_indicator(controller, places):
    places.autocomplete.return_value = PredictionResult.empty()
    controller.input_changed("10 Downing")
    await controller.wait_settled()
    assert controller.show_no_results

    await controller.select(_prediction())

    assert not controller.show_no_results


@pytest.mark.asyncio
async def test_select_failure_skips_callback(controller, places, on_select):
    places.place_details.return_value = PlaceDetailsResult.failed(
        Failure(reason=FailureReason.permission_denied, status="REQUEST_DENIED")
    )

    assert await controller.select(_prediction()) is None
    on_select.assert_not_called()
    assert not controller.resolving


@pytest.mark.asyncio
async def test_select_empty_details_skips_callback(controller, places, on_select):
    places.place_details.return_value = PlaceDetailsResult.empty()

    assert await controller.select(_prediction()) is None
    on_select.assert_not_called()


@pytest.mark.asyncio
async def test_select_ignores_in_flight_search(controller, places):
    release = asyncio.Event()
    called = asyncio.Event()

    async def _autocomplete(query: str) -> PredictionResult:
        called.set()
        await release.wait()
        return PredictionResult.ok([_prediction()])

    places.autocomplete.side_effect = _autocomplete

    controller.input_changed("10 Downing")
    await asyncio.wait_for(called.wait(), timeout=1)
    await controller.select(_prediction())
    release.set()
    await controller.wait_settled()

    assert controller.predictions == []
    assert controller.state == SearchState.idle


@pytest.mark.asyncio
async def test_clear_cancels_pending_search(controller, places):
    controller.input_changed("10 Downing")
    controller.clear()
    await asyncio.sleep(DEBOUNCE * 3)
    await controller.wait_settled()

    places.autocomplete.assert_not_called()
    assert controller.query == ""
    assert controller.state == SearchState.idle


@pytest.mark.asyncio
async def test_clear_during_resolve_drops_result(controller, places, on_select):
    release = asyncio.Event()

    async def _details_call(place_id: str) -> PlaceDetailsResult:
        await release.wait()
        return PlaceDetailsResult.ok(_details())

    places.place_details.side_effect = _details_call

    task = asyncio.create_task(controller.select(_prediction()))
    await asyncio.sleep(0)
    assert controller.resolving
    controller.clear()
    release.set()

    assert await task is None
    on_select.assert_not_called()
    assert controller.query == ""


@pytest.mark.asyncio
async def test_close_during_resolve_clears_loading(controller, places, on_select):
    release = asyncio.Event()

    async def _details_call(place_id: str) -> PlaceDetailsResult:
        await release.wait()
        return PlaceDetailsResult.ok(_details())

    places.place_details.side_effect = _details_call

    task = asyncio.create_task(controller.select(_prediction()))
    await asyncio.sleep(0)
    assert controller.loading
    await controller.aclose()
    release.set()

    assert await task is None
    on_select.assert_not_called()
    assert not controller.resolving
    assert not controller.loading


@pytest.mark.asyncio
async def test_typing_during_resolve_abandons_selection(controller, places, on_select):
    release = asyncio.Event()

    async def _details_call(place_id: str) -> PlaceDetailsResult:
        await release.wait()
        return PlaceDetailsResult.ok(_details())

    places.place_details.side_effect = _details_call

    task = asyncio.create_task(controller.select(_prediction()))
    await asyncio.sleep(0)
    controller.input_changed("221B Baker")
    assert not controller.resolving
    release.set()

    assert await task is None
    await controller.wait_settled()
    on_select.assert_not_called()
    assert controller.query == "221B Baker"
    assert controller.state == SearchState.has_predictions


@pytest.mark.asyncio
async def test_newer_selection_keeps_resolving_flag(controller, places, on_select):
    released = {"first": asyncio.Event(), "second": asyncio.Event()}

    async def _details_call(place_id: str) -> PlaceDetailsResult:
        await released[place_id].wait()
        return PlaceDetailsResult.ok(_details())

    places.place_details.side_effect = _details_call

    first_task = asyncio.create_task(controller.select(_prediction(place_id="first")))
    await asyncio.sleep(0)
    second_task = asyncio.create_task(controller.select(_prediction(place_id="second")))
    await asyncio.sleep(0)

    released["first"].set()
    assert await first_task is None
    assert controller.resolving

    released["second"].set()
    assert await second_task is not None
    assert not controller.resolving
    on_select.assert_called_once()


@pytest.mark.asyncio
async def test_dismiss_hides_list_only(controller):
    controller.input_changed("10 Downing")
    await controller.wait_settled()

    controller.dismiss()

    assert not controller.show_predictions
    assert controller.query == "10 Downing"
    assert controller.prediction_count == 1


@pytest.mark.asyncio
async def test_disabled_ignores_interaction(places, on_select):
    async with AddressSearchController(
        places, on_select, disabled=True, initial_value="1 High St", debounce_seconds=DEBOUNCE
    ) as controller:
        controller.input_changed("10 Downing")
        controller.clear()
        await controller.wait_settled()
        assert await controller.select(_prediction()) is None

    places.autocomplete.assert_not_called()
    places.place_details.assert_not_called()
    on_select.assert_not_called()
    assert controller.query == "1 High St"


@pytest.mark.asyncio
async def test_aclose_cancels_timer(places, on_select):
    controller = AddressSearchController(places, on_select, debounce_seconds=DEBOUNCE)
    controller.input_changed("10 Downing")
    await controller.aclose()
    await asyncio.sleep(DEBOUNCE * 3)

    places.autocomplete.assert_not_called()
    controller.input_changed("10 Downing Street")
    await controller.wait_settled()
    places.autocomplete.assert_not_called()


@pytest.mark.asyncio
async def test_instances_are_independent(places, on_select):
    async with AddressSearchController(places, on_select, debounce_seconds=DEBOUNCE) as a:
        async with AddressSearchController(places, on_select, debounce_seconds=DEBOUNCE) as b:
            a.input_changed("10 Downing")
            b.input_changed("221B Baker")
            b.clear()
            await a.wait_settled()
            await b.wait_settled()

            assert a.state == SearchState.has_predictions
            assert b.state == SearchState.idle
            places.autocomplete.assert_awaited_once_with("10 Downing")


def test_default_options():
    controller = AddressSearchController(AsyncMock(spec=GooglePlacesService), MagicMock())

    assert controller.options.placeholder == "Start typing an address..."
    assert controller.options.label == "Search Address"
    assert controller.options.show_label is True
    assert controller.options.class_name == ""
