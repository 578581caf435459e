"""Map-query router dispatching tool payloads to map operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from backend.core.errors import MapError, MapNotReadyError
from backend.tools.map_surface import MapQueryParams, MapSurface

logger = logging.getLogger("llantera.tools.router")


class MapOperation(str, Enum):
    VIEW_LOCATION = "view_location"
    COMPUTE_ROUTE = "compute_route"


@dataclass(frozen=True, slots=True)
class MapDispatch:
    operation: MapOperation
    args: tuple[str, ...]


def resolve_map_query(params: MapQueryParams) -> MapDispatch | None:
    """Pick the map operation for ``params``; first match wins."""

    if params.location:
        return MapDispatch(MapOperation.VIEW_LOCATION, (params.location,))
    if params.origin and params.destination:
        return MapDispatch(MapOperation.COMPUTE_ROUTE, (params.origin, params.destination))
    if params.destination:
        return MapDispatch(MapOperation.VIEW_LOCATION, (params.destination,))
    return None


class MapQueryRouter:
    """Dispatch map tool payloads to the map surface.

    Partial or unrecognised arguments are ignored rather than rejected. Map
    failures are reported through ``report_error`` and then re-raised so the
    tool server can hand them back to the model.
    """

    def __init__(self, surface: MapSurface, report_error: Callable[[str], None]) -> None:
        self._surface = surface
        self._report_error = report_error

    async def handle_map_query(self, params: MapQueryParams) -> None:
        dispatch = resolve_map_query(params)
        if dispatch is None:
            logger.debug("Ignoring map query without usable arguments: %s", params)
            return

        try:
            if dispatch.operation is MapOperation.VIEW_LOCATION:
                await self._surface.view_location(*dispatch.args)
            else:
                await self._surface.compute_route(*dispatch.args)
        except MapError as exc:
            self._report_error(_describe_failure(dispatch, exc))
            raise


def _describe_failure(dispatch: MapDispatch, exc: MapError) -> str:
    if isinstance(exc, MapNotReadyError):
        return str(exc)
    if dispatch.operation is MapOperation.VIEW_LOCATION:
        (query,) = dispatch.args
        return (
            f'No pude encontrar la dirección: "{query}". Por favor, asegúrate de que sea una '
            f"dirección completa y vuelve a intentarlo. (Error: {exc.status})"
        )
    origin, destination = dispatch.args
    return f'Could not get directions from "{origin}" to "{destination}". Reason: {exc.status}'
