"""MCP server for hazard-route-finder.

Registers all tools and runs via stdio transport.
"""

import json
import logging
import sys

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.search import register_search_tools
from .tools.params import register_params_tools
from .tools.preview import register_preview_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "hazard-route-finder",
    instructions=(
        "Find two alternative routes between places in Nepal, show simulated "
        "hazards along the corridor, and explain the route the user picks"
    ),
)

# Register all tool groups
register_search_tools(mcp)
register_params_tools(mcp)
register_preview_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_resource() -> str:
    """Current search state as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    # stdout carries the MCP stdio transport
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
