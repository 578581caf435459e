import pytest

from backend.core.errors import MapError, MapNotReadyError
from backend.tools.map_surface import MapQueryParams
from backend.tools.router import MapDispatch, MapOperation, MapQueryRouter, resolve_map_query


@pytest.mark.parametrize(
    ("params", "expected"),
    [
        (MapQueryParams(location="Mazamitla"), MapDispatch(MapOperation.VIEW_LOCATION, ("Mazamitla",))),
        (
            MapQueryParams(location="Mazamitla", origin="A", destination="B"),
            MapDispatch(MapOperation.VIEW_LOCATION, ("Mazamitla",)),
        ),
        (MapQueryParams(origin="A", destination="B"), MapDispatch(MapOperation.COMPUTE_ROUTE, ("A", "B"))),
        (MapQueryParams(destination="B"), MapDispatch(MapOperation.VIEW_LOCATION, ("B",))),
        (MapQueryParams(origin="A"), None),
        (MapQueryParams(), None),
        (MapQueryParams(location=""), None),
    ],
)
def test_resolve_map_query(params, expected):
    assert resolve_map_query(params) == expected


@pytest.mark.anyio
async def test_route_query_reaches_surface(fake_surface):
    errors = []
    router = MapQueryRouter(fake_surface, errors.append)

    await router.handle_map_query(MapQueryParams(origin="Mazamitla", destination="Tamazula"))

    assert fake_surface.calls == [("compute_route", ("Mazamitla", "Tamazula"))]
    assert errors == []


@pytest.mark.anyio
async def test_origin_only_is_a_silent_no_op(fake_surface):
    errors = []
    router = MapQueryRouter(fake_surface, errors.append)

    await router.handle_map_query(MapQueryParams(origin="Mazamitla"))

    assert fake_surface.calls == []
    assert errors == []


@pytest.mark.anyio
async def test_geocode_failure_is_reported_and_raised(fake_surface):
    errors = []
    fake_surface.fail_with = MapError("ZERO_RESULTS")
    router = MapQueryRouter(fake_surface, errors.append)

    with pytest.raises(MapError):
        await router.handle_map_query(MapQueryParams(location="Nowhere 123"))

    assert len(errors) == 1
    assert '"Nowhere 123"' in errors[0]
    assert "(Error: ZERO_RESULTS)" in errors[0]


@pytest.mark.anyio
async def test_directions_failure_names_both_ends(fake_surface):
    errors = []
    fake_surface.fail_with = MapError("NOT_FOUND")
    router = MapQueryRouter(fake_surface, errors.append)

    with pytest.raises(MapError):
        await router.handle_map_query(MapQueryParams(origin="A", destination="B"))

    assert errors == ['Could not get directions from "A" to "B". Reason: NOT_FOUND']


@pytest.mark.anyio
async def test_not_ready_message_is_reported_verbatim(fake_surface):
    errors = []
    fake_surface.fail_with = MapNotReadyError("Map is not ready to display locations. Please check configuration.")
    router = MapQueryRouter(fake_surface, errors.append)

    with pytest.raises(MapNotReadyError):
        await router.handle_map_query(MapQueryParams(location="Mazamitla"))

    assert errors == ["Map is not ready to display locations. Please check configuration."]
