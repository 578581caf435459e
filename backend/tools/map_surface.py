"""Map capability set used by the map-query router."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class MapQueryParams:
    """Arguments of a map tool call.

    Valid shapes are ``location`` alone, ``origin`` with ``destination``, or
    ``destination`` alone (viewed as a location).
    """

    location: str | None = None
    origin: str | None = None
    destination: str | None = None


@dataclass(slots=True)
class LatLng:
    lat: float
    lng: float


@dataclass(slots=True)
class Marker:
    position: LatLng
    label: str
    color: str | None = None


@dataclass(slots=True)
class Camera:
    center: LatLng
    tilt: float
    range: float
    heading: float = 0.0


@dataclass(slots=True)
class MapView:
    """What the map currently shows; read by whatever renders the map."""

    camera: Camera | None = None
    markers: list[Marker] = field(default_factory=list)
    route_polyline: str | None = None
    selection_marker: Marker | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class MapSurface(ABC):
    """Narrow interface over the map and its geocoding services.

    Every operation raises :class:`backend.core.errors.MapError` when the
    upstream service does not answer ``OK``.
    """

    def __init__(self) -> None:
        self.view = MapView()

    @abstractmethod
    async def view_location(self, query: str) -> None:
        """Fly to ``query`` and mark it."""

    @abstractmethod
    async def compute_route(self, origin: str, destination: str) -> None:
        """Draw the driving route between two places."""

    @abstractmethod
    async def reverse_geocode(self, lat: float, lng: float) -> str:
        """Return the formatted address of a point."""

    def clear(self) -> None:
        """Remove markers, route and selection marker from the view."""

        self.view.markers.clear()
        self.view.route_polyline = None
        self.view.selection_marker = None

    def place_selection_marker(self, lat: float, lng: float) -> None:
        self.view.selection_marker = Marker(position=LatLng(lat, lng), label="Tu ubicación", color="orange")

    def clear_selection_marker(self) -> None:
        self.view.selection_marker = None
