"""Route search tools: search_routes, select_route, clear_routes."""

import logging

from mcp.server.fastmcp import FastMCP, Context
from mcp.types import ToolAnnotations

from ..state import state
from ..errors import (
    InvalidSelection, PlaceNotFound, RouteMapError, SessionNotFound, ValidationError,
)
from ..core.geocode import NominatimResolver
from ..core.search import SearchEngine

logger = logging.getLogger(__name__)

engine = SearchEngine(state, resolver=NominatimResolver(state.resolver_params))

ROUTE_BLURBS = {
    "A": "Faster but riskier due to road conditions.",
    "B": "Safer and more reliable.",
}


def _failure_message(exc: RouteMapError) -> str:
    if isinstance(exc, ValidationError):
        return f"Error: {exc}"
    failure = state.last_failure
    lines = [f"Error: {failure.message if failure else exc}"]
    if isinstance(exc, PlaceNotFound):
        lines.append("Try a more specific query, such as a nearby area, road, or landmark.")
    else:
        lines.append("The place lookup failed. Retry, or use a more specific query.")
    if failure and failure.suggestions:
        lines.append("Try examples like: " + ", ".join(failure.suggestions))
    return "\n".join(lines)


def register_search_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True, openWorldHint=True))
    async def search_routes(start: str, end: str, ctx: Context) -> str:
        """Find two alternative routes between two places and mark simulated hazards.

        Resolves both place names (within the configured country, Nepal by
        default), draws route A (faster, riskier) and route B (safer), adds
        start/destination markers and simulated hazard markers. Any previous
        routes are removed first.
        **Next:** select_route with 'A' or 'B'; preview to see the map.

        Args:
            start: Starting place name (e.g., "Pokhara Lakeside").
            end: Destination place name (e.g., "Kathmandu").
        """
        try:
            session = await engine.search(start, end, progress=ctx.report_progress)
        except RouteMapError as e:
            return _failure_message(e)

        if session is None:
            return "Search superseded by a newer search; results discarded."

        start_place = session.endpoints["start"]
        end_place = session.endpoints["end"]
        lines = [
            "Two route options found:",
            f"  Start: {start_place.label}",
            f"  Destination: {end_place.label}",
        ]
        for cid in ("A", "B"):
            lines.append(f"  Route {cid} ({state.styles.color_for(cid)}): {ROUTE_BLURBS[cid]}")
        if session.hazards:
            lines.append(f"{len(session.hazards)} simulated hazard(s) on the corridor:")
            for h in session.hazards:
                lines.append(
                    f"  - {h.type}: {h.reason} at {h.position.lat:.4f}, {h.position.lon:.4f} (simulated)"
                )
        lines.append("Choose a route with select_route('A') or select_route('B').")
        return "\n".join(lines)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def select_route(candidate_id: str) -> str:
        """Select route 'A' or 'B' from the current search and explain the choice.

        **Requires:** search_routes first.

        Args:
            candidate_id: 'A' (faster, riskier) or 'B' (safer).
        """
        try:
            explanation = engine.select_route(candidate_id.strip().upper())
        except (SessionNotFound, InvalidSelection) as e:
            logger.warning("Ignoring selection of %r: %s", candidate_id, e)
            return f"Error: {e}"
        return f"{explanation.title}\n{explanation.message}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_routes() -> str:
        """Remove the current routes, markers and hazards from the map.

        Safe to call when nothing is shown.
        """
        had_session = state.session is not None
        engine.clear()
        return "Routes cleared." if had_session else "Nothing to clear."
