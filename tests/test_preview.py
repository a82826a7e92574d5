"""Tests for the preview server's scene push."""
import json
import pytest
from unittest.mock import AsyncMock

from hazard_route_finder.core.surface import MarkerIcon, PathStyle, SceneSurface
from hazard_route_finder.models import Coordinate


def _scene():
    scene = SceneSurface()
    scene.add_path(
        [Coordinate(lat=28.2, lon=83.9), Coordinate(lat=27.9, lon=84.6), Coordinate(lat=27.7, lon=85.3)],
        PathStyle(color="#FF0000"),
    )
    scene.add_marker(Coordinate(lat=27.9, lon=84.6), MarkerIcon(kind="hazard", glyph="!", popup="Flooding"))
    return scene


def test_scene_to_json():
    from hazard_route_finder.preview.server import scene_to_json
    data = json.loads(scene_to_json(_scene()))
    assert [o["kind"] for o in data["overlays"]] == ["path", "marker"]
    assert data["overlays"][0]["style"]["color"] == "#FF0000"


@pytest.mark.anyio
async def test_update_preview_sends_scene_to_clients():
    from hazard_route_finder.preview import server

    client = AsyncMock()
    server._ws_clients.add(client)
    try:
        await server.update_preview(_scene())
    finally:
        server._ws_clients.discard(client)

    client.send.assert_awaited_once()
    payload = json.loads(client.send.call_args.args[0])
    assert len(payload["overlays"]) == 2


@pytest.mark.anyio
async def test_update_preview_without_clients_is_noop():
    from hazard_route_finder.preview import server
    await server.update_preview(_scene())


def test_frame_listener_without_loop_does_nothing():
    from hazard_route_finder.preview.server import _on_frame
    _on_frame(_scene())  # no running loop: nothing to schedule


class _TableResolver:
    PLACES = {"Pokhara": (28.2096, 83.9856), "Kathmandu": (27.7172, 85.3240)}

    async def resolve(self, text):
        from hazard_route_finder.models import ResolvedPlace
        lat, lon = self.PLACES[text]
        return ResolvedPlace(coordinate=Coordinate(lat=lat, lon=lon), label=text)


async def _searched_engine():
    from hazard_route_finder.core.search import SearchEngine
    from hazard_route_finder.state import RouteMapState

    state = RouteMapState()
    engine = SearchEngine(state, _TableResolver())
    await engine.search("Pokhara", "Kathmandu")
    return engine, state


def _route_color(state, route_id):
    for overlay in state.scene.overlays.values():
        if overlay.route_id == route_id:
            return overlay.style.color
    raise AssertionError(f"no path for route {route_id}")


@pytest.mark.anyio
async def test_scene_json_tags_paths_with_route_id():
    from hazard_route_finder.preview.server import scene_to_json
    _, state = await _searched_engine()
    data = json.loads(scene_to_json(state.scene))
    paths = [o for o in data["overlays"] if o["kind"] == "path"]
    assert sorted(p["route_id"] for p in paths) == ["A", "B"]


@pytest.mark.anyio
async def test_route_click_selects_and_highlights(monkeypatch):
    from hazard_route_finder.preview import server
    engine, state = await _searched_engine()
    monkeypatch.setattr(server, "_select_handler", engine.select_route)
    frames = []
    state.scene.subscribe(lambda s: frames.append(s.frame))

    server.handle_viewer_message(json.dumps({"select": "B"}))

    assert state.session.selection == "B"
    assert _route_color(state, "B") == state.styles.selected
    assert _route_color(state, "A") == state.styles.route_a
    assert len(frames) == 1


@pytest.mark.anyio
async def test_bad_route_click_is_logged_and_ignored(monkeypatch, caplog):
    from hazard_route_finder.preview import server
    engine, state = await _searched_engine()
    monkeypatch.setattr(server, "_select_handler", engine.select_route)

    with caplog.at_level("WARNING", logger="hazard_route_finder.preview.server"):
        server.handle_viewer_message(json.dumps({"select": "Z"}))
        server.handle_viewer_message("not json")

    assert state.session.selection is None
    assert any("Ignoring route click" in r.message for r in caplog.records)
    assert any("malformed" in r.message for r in caplog.records)


def test_route_click_without_session_is_ignored(monkeypatch):
    from hazard_route_finder.core.search import SearchEngine
    from hazard_route_finder.preview import server
    from hazard_route_finder.state import RouteMapState

    engine = SearchEngine(RouteMapState(), _TableResolver())
    monkeypatch.setattr(server, "_select_handler", engine.select_route)
    server.handle_viewer_message(json.dumps({"select": "A"}))


@pytest.mark.anyio
async def test_ws_handler_forwards_clicks_and_drops_client(monkeypatch):
    from hazard_route_finder.preview import server

    received = []
    monkeypatch.setattr(server, "_select_handler", received.append)

    class FakeSocket:
        def __init__(self, messages):
            self.messages = messages

        def __aiter__(self):
            return self._iter()

        async def _iter(self):
            for m in self.messages:
                yield m

    socket = FakeSocket([json.dumps({"select": "A"}), json.dumps({"ping": 1})])
    await server._ws_handler(socket)

    assert received == ["A"]
    assert socket not in server._ws_clients
