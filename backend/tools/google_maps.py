"""Map surface backed by the Google Maps Geocoding and Directions web services."""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from backend.core.errors import MapError, MapNotReadyError
from backend.tools.map_surface import Camera, LatLng, MapSurface, Marker

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"

EARTH_RADIUS_M = 6378137.0
LOCATION_TILT = 67.5
LOCATION_RANGE_M = 2000.0
ROUTE_TILT = 45.0
ROUTE_MIN_RANGE_M = 2000.0
ROUTE_RANGE_FACTOR = 1.7
MAX_LABEL_LENGTH = 30


def marker_label(query: str) -> str:
    if len(query) > MAX_LABEL_LENGTH:
        return query[:27] + "..."
    return query


def distance_m(a: LatLng, b: LatLng) -> float:
    """Great-circle distance between two points in meters."""

    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def _latlng(raw: dict[str, Any]) -> LatLng:
    return LatLng(lat=float(raw["lat"]), lng=float(raw["lng"]))


class GoogleMapsSurface(MapSurface):
    """Resolve map queries through Google Maps and keep the resulting view."""

    def __init__(
        self,
        api_key: str | None,
        *,
        region: str = "MX",
        language: str = "es",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._api_key = api_key
        self._region = region
        self._language = language
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("llantera.maps")

    async def view_location(self, query: str) -> None:
        if not self._api_key:
            raise MapNotReadyError("Map is not ready to display locations. Please check configuration.")
        self.clear()

        data = await self._get(
            GEOCODE_URL,
            {"address": query, "components": f"country:{self._region}"},
        )
        status = data.get("status", "UNKNOWN_ERROR")
        results = data.get("results") or []
        if status != "OK" or not results:
            self._logger.error("Geocode was not successful for %r. Reason: %s", query, status)
            raise MapError(status)

        position = _latlng(results[0]["geometry"]["location"])
        self.view.camera = Camera(center=position, tilt=LOCATION_TILT, range=LOCATION_RANGE_M)
        self.view.markers.append(Marker(position=position, label=marker_label(query)))

    async def compute_route(self, origin: str, destination: str) -> None:
        if not self._api_key:
            raise MapNotReadyError("Map is not ready for directions. Please check configuration.")
        self.clear()

        data = await self._get(
            DIRECTIONS_URL,
            {"origin": origin, "destination": destination, "mode": "driving"},
        )
        status = data.get("status", "UNKNOWN_ERROR")
        routes = data.get("routes") or []
        if status != "OK" or not routes:
            self._logger.error(
                "Directions request failed. Origin: %r, Destination: %r. Status: %s",
                origin,
                destination,
                status,
            )
            raise MapError(status)

        route = routes[0]
        self.view.route_polyline = (route.get("overview_polyline") or {}).get("points")

        legs = route.get("legs") or []
        if legs:
            leg = legs[0]
            if "start_location" in leg:
                self.view.markers.append(Marker(position=_latlng(leg["start_location"]), label="Origin", color="green"))
            if "end_location" in leg:
                self.view.markers.append(
                    Marker(position=_latlng(leg["end_location"]), label="Destination", color="red")
                )

        bounds = route.get("bounds")
        if bounds:
            north_east = _latlng(bounds["northeast"])
            south_west = _latlng(bounds["southwest"])
            center = LatLng(
                lat=(north_east.lat + south_west.lat) / 2,
                lng=(north_east.lng + south_west.lng) / 2,
            )
            span = distance_m(north_east, south_west) * ROUTE_RANGE_FACTOR
            self.view.camera = Camera(center=center, tilt=ROUTE_TILT, range=max(span, ROUTE_MIN_RANGE_M))

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        if not self._api_key:
            raise MapNotReadyError("Map is not ready to resolve addresses. Please check configuration.")

        data = await self._get(GEOCODE_URL, {"latlng": f"{lat},{lng}"})
        status = data.get("status", "UNKNOWN_ERROR")
        results = data.get("results") or []
        if status != "OK" or not results:
            self._logger.error("Reverse geocode failed: %s", status)
            raise MapError(status)
        return results[0]["formatted_address"]

    async def _get(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        query = {**params, "key": self._api_key or "", "language": self._language}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=query)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            raise MapError(f"HTTP_{exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise MapError("REQUEST_FAILED", str(exc)) from exc
