"""Synthesis of the two candidate routes between a pair of endpoints.

These are geometric stand-ins, not road-network routes: both candidates run
through the midpoint of the endpoints, nudged north for A and south for B.
"""

import logging

import pydantic

from hazard_route_finder.errors import InvalidCoordinate
from hazard_route_finder.models import Coordinate, RouteCandidate
from .coords import clamp_lat, midpoint

logger = logging.getLogger(__name__)


def _checked(value, name: str) -> Coordinate:
    """Validate an endpoint, accepting a Coordinate, a dict, or a (lat, lon) pair."""
    if isinstance(value, (tuple, list)) and len(value) == 2:
        value = {"lat": value[0], "lon": value[1]}
    elif isinstance(value, Coordinate):
        # model_construct() bypasses validation, so check again
        value = value.model_dump()
    try:
        return Coordinate.model_validate(value)
    except pydantic.ValidationError as e:
        raise InvalidCoordinate(f"Invalid {name} coordinate {value!r}: {e.errors()[0]['msg']}") from e


def synthesize_routes(
    start, end, divergence_offset: float = 0.15,
) -> tuple[RouteCandidate, RouteCandidate]:
    """Build route A (faster, riskier) and route B (safer) from start to end.

    Args:
        start: Start coordinate.
        end: End coordinate.
        divergence_offset: Latitude offset in degrees applied to the midpoint,
            positive for A and negative for B.

    Returns:
        (A, B), each a 3-point path sharing ``start`` and ``end``. When start
        and end coincide there is nothing to diverge around and both paths
        collapse onto the single point.
    """
    if divergence_offset <= 0:
        raise ValueError(f"divergence_offset must be positive, got {divergence_offset}")
    start = _checked(start, "start")
    end = _checked(end, "end")

    mid = midpoint(start, end)
    offset = divergence_offset if start != end else 0.0

    via_a = Coordinate(lat=clamp_lat(mid.lat + offset), lon=mid.lon)
    via_b = Coordinate(lat=clamp_lat(mid.lat - offset), lon=mid.lon)

    logger.debug(
        "Synthesized routes via (%.5f,%.5f) and (%.5f,%.5f)",
        via_a.lat, via_a.lon, via_b.lat, via_b.lon,
    )
    return (
        RouteCandidate(id="A", points=[start, via_a, end], risk_profile="FASTER_RISKIER"),
        RouteCandidate(id="B", points=[start, via_b, end], risk_profile="SAFER"),
    )
