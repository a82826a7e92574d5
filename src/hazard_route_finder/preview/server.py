"""HTTP + WebSocket preview server for the Leaflet map viewer."""

import asyncio
import json
import logging
import os
from typing import Callable
from http.server import HTTPServer, SimpleHTTPRequestHandler
from threading import Thread

import websockets

from ..errors import InvalidSelection, SessionNotFound

logger = logging.getLogger(__name__)

_ws_clients: set = set()
_http_server: HTTPServer | None = None
_ws_server = None
_pending: set = set()
_select_handler: Callable[[str], object] | None = None

VIEWER_HTML = os.path.join(os.path.dirname(__file__), "viewer.html")


class PreviewHandler(SimpleHTTPRequestHandler):
    ws_port = 3334

    def do_GET(self):
        if self.path == "/" or self.path == "/index.html":
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.end_headers()
            with open(VIEWER_HTML, "rb") as f:
                page = f.read().replace(b"__WS_PORT__", str(self.ws_port).encode())
            self.wfile.write(page)
        else:
            self.send_response(404)
            self.end_headers()

    def log_message(self, format, *args):
        pass  # Suppress HTTP logs


def scene_to_json(scene) -> str:
    """Serialize the overlay scene for the viewer."""
    return json.dumps(scene.snapshot())


async def _ws_handler(websocket):
    _ws_clients.add(websocket)
    try:
        async for message in websocket:
            handle_viewer_message(message)
    finally:
        _ws_clients.discard(websocket)


def handle_viewer_message(message) -> None:
    """Forward a route click from the viewer, e.g. ``{"select": "A"}``."""
    try:
        request = json.loads(message)
    except ValueError:
        logger.warning("Ignoring malformed viewer message: %r", message)
        return
    candidate_id = request.get("select") if isinstance(request, dict) else None
    if not isinstance(candidate_id, str) or _select_handler is None:
        return
    try:
        _select_handler(candidate_id)
    except (SessionNotFound, InvalidSelection) as e:
        logger.warning("Ignoring route click on %r: %s", candidate_id, e)


def _on_frame(scene) -> None:
    """Scene listener: push each completed frame to the viewer."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return
    task = loop.create_task(update_preview(scene))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


async def start_preview_server(
    scene, http_port: int = 3333, ws_port: int = 3334,
    on_select: Callable[[str], object] | None = None,
):
    """Start the HTTP and WebSocket servers and follow the scene.

    ``on_select`` receives the candidate id of every route clicked in the viewer.
    """
    global _http_server, _ws_server, _select_handler

    _select_handler = on_select

    # Start HTTP server in a thread
    PreviewHandler.ws_port = ws_port
    _http_server = HTTPServer(("localhost", http_port), PreviewHandler)
    http_thread = Thread(target=_http_server.serve_forever, daemon=True)
    http_thread.start()

    # Start WebSocket server
    _ws_server = await websockets.serve(_ws_handler, "localhost", ws_port)
    scene.subscribe(_on_frame)
    logger.info("Preview serving on http://localhost:%d (ws %d)", http_port, ws_port)

    # Send initial data after a brief delay for client connection
    asyncio.get_running_loop().call_later(1.0, _on_frame, scene)


async def update_preview(scene):
    """Send the current scene to all connected WebSocket clients."""
    if not _ws_clients:
        return

    data = scene_to_json(scene)
    await asyncio.gather(
        *[client.send(data) for client in _ws_clients],
        return_exceptions=True,
    )
