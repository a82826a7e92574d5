"""Route selection: map a picked candidate to its explanation."""

from typing import Optional

from hazard_route_finder.errors import InvalidSelection, SessionNotFound
from hazard_route_finder.models import RiskProfile, SelectionExplanation
from hazard_route_finder.state import OverlaySession

EXPLANATIONS: dict[RiskProfile, str] = {
    "FASTER_RISKIER": "Recommended when speed is critical.",
    "SAFER": "Recommended for safer, more reliable travel.",
}


def select_route(session: Optional[OverlaySession], candidate_id: str) -> SelectionExplanation:
    """Explain a candidate by its risk profile. Does not touch the map."""
    if session is None:
        raise SessionNotFound("No active route session. Search for a route first.")
    route = session.routes.get(candidate_id)
    if route is None:
        raise InvalidSelection(
            f"Route {candidate_id!r} is not part of this session. "
            f"Choose one of: {', '.join(sorted(session.routes))}."
        )
    return SelectionExplanation(
        candidate_id=route.id,
        risk_profile=route.risk_profile,
        title=f"Route {route.id} Selected",
        message=EXPLANATIONS[route.risk_profile],
    )
