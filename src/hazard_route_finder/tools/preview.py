"""Preview tool: launch/refresh the Leaflet map viewer."""

import webbrowser
from mcp.server.fastmcp import FastMCP

from ..state import state
from ..preview.server import start_preview_server, update_preview
from .search import engine


def register_preview_tools(mcp: FastMCP):

    @mcp.tool()
    async def preview() -> str:
        """Open or refresh the map preview in the browser.

        Starts a local HTTP server with WebSocket updates on localhost:3333.
        The map follows every search, selection and clear automatically, and
        clicking a route on the map selects it.
        """
        if not state.preview_running:
            await start_preview_server(
                state.scene, http_port=state.preview_port, ws_port=state.preview_port + 1,
                on_select=engine.select_route,
            )
            state.preview_running = True
            webbrowser.open(f"http://localhost:{state.preview_port}")
            return f"Preview opened at http://localhost:{state.preview_port}"
        else:
            await update_preview(state.scene)
            return f"Preview updated at http://localhost:{state.preview_port}"
