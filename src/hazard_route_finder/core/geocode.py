"""Place-name resolution via the OpenStreetMap Nominatim API."""

import logging
from abc import ABC, abstractmethod

import httpx
import pydantic

from hazard_route_finder.errors import InvalidCoordinate, PlaceNotFound, ResolverError
from hazard_route_finder.models import Coordinate, ResolvedPlace
from hazard_route_finder.state import ResolverParams

logger = logging.getLogger(__name__)


class GeoResolver(ABC):
    """Turns free text into a ResolvedPlace. Holds no per-query state."""

    @abstractmethod
    async def resolve(self, text: str) -> ResolvedPlace:
        """Resolve ``text`` or raise PlaceNotFound / ResolverError / InvalidCoordinate."""


def _parse_place(item: dict) -> ResolvedPlace:
    """Build a ResolvedPlace from one Nominatim search result."""
    try:
        lat = float(item["lat"])
        lon = float(item["lon"])
    except (KeyError, TypeError, ValueError) as e:
        raise ResolverError(f"Geocoding service returned a malformed result: {e}") from e
    try:
        coordinate = Coordinate(lat=lat, lon=lon)
    except pydantic.ValidationError as e:
        raise InvalidCoordinate(
            f"Geocoding service returned an out-of-range coordinate ({lat}, {lon})"
        ) from e
    return ResolvedPlace(coordinate=coordinate, label=item.get("display_name") or f"{lat:.5f}, {lon:.5f}")


class NominatimResolver(GeoResolver):
    def __init__(self, params: ResolverParams):
        self.params = params

    def _query(self, text: str) -> str:
        country = self.params.country.strip()
        return f"{text}, {country}" if country else text

    async def resolve(self, text: str) -> ResolvedPlace:
        p = self.params
        async with httpx.AsyncClient(timeout=p.timeout, headers={"User-Agent": p.user_agent}) as client:
            try:
                response = await client.get(
                    p.base_url,
                    params={"q": self._query(text), "format": "json", "limit": 1},
                    headers={"Accept-Language": "en"},
                )
                response.raise_for_status()
                results = response.json()
            except httpx.TimeoutException as exc:
                logger.warning("Geocoding %r timed out: %s", text, exc)
                raise ResolverError("Geocoding service timed out.") from exc
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Geocoding %r returned HTTP %s", text, exc.response.status_code
                )
                raise ResolverError(
                    f"Geocoding service returned HTTP {exc.response.status_code}."
                ) from exc
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Geocoding %r failed: %s", text, exc)
                raise ResolverError(f"Error contacting geocoding service: {exc}") from exc

        if not isinstance(results, list):
            raise ResolverError("Geocoding service returned an unexpected response.")
        if not results:
            where = f" in {p.country}" if p.country.strip() else ""
            raise PlaceNotFound(
                f"Location not found{where}: '{text}'. Try a nearby area, road, or landmark."
            )
        return _parse_place(results[0])
