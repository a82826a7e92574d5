"""Simulated hazard annotations along the route corridor.

Nothing here reads live data. The annotations are placeholders laid out on a
diagonal from the corridor midpoint so the map has something to show.
"""

from typing import Optional

from hazard_route_finder.models import Coordinate, HazardAnnotation, HazardTemplate
from hazard_route_finder.state import DEFAULT_HAZARD_CATALOG
from .coords import clamp_lat, clamp_lon


def annotate_hazards(
    midpoint: Coordinate,
    catalog: Optional[list[HazardTemplate]] = None,
    count: int = 3,
    step: float = 0.05,
) -> list[HazardAnnotation]:
    """Place ``count`` hazards at (lat + i*step, lon - i*step), cycling the catalog."""
    if catalog is None:
        catalog = DEFAULT_HAZARD_CATALOG
    if not catalog or count <= 0:
        return []

    hazards = []
    for i in range(count):
        template = catalog[i % len(catalog)]
        hazards.append(HazardAnnotation(
            type=template.type,
            reason=template.reason,
            position=Coordinate(
                lat=clamp_lat(midpoint.lat + i * step),
                lon=clamp_lon(midpoint.lon - i * step),
            ),
        ))
    return hazards
