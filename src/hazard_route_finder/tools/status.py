"""Status tools: get_status, describe_routes."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ._prereqs import require_state


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current search state.

        Shows the search phase, the last failure (if any), the live session,
        current parameters, and preview status.
        """
        return json.dumps(state.summary(), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def describe_routes() -> str:
        """Return the full geometry of both routes and every hazard marker as JSON.

        **Requires:** search_routes first.
        """
        try:
            require_state(state, session=True)
        except ValueError as e:
            return f"Error: {e}"

        session = state.session
        return json.dumps({
            "start": session.endpoints["start"].model_dump(),
            "end": session.endpoints["end"].model_dump(),
            "routes": {
                cid: {
                    "risk_profile": route.risk_profile,
                    "points": [[p.lat, p.lon] for p in route.points],
                }
                for cid, route in session.routes.items()
            },
            "hazards": [h.model_dump() for h in session.hazards],
            "selection": session.selection,
        }, indent=2)
