"""Map rendering surface contract and the in-memory scene behind the preview.

The engine never draws anything itself. It issues ``add_path``,
``add_marker``, ``remove_overlay`` and ``fit_bounds_to`` commands against a
``MapSurface``. ``SceneSurface`` records those commands as a scene of
overlays and notifies listeners (the preview server) once per frame, where a
frame is either a single command or a whole ``batch()`` block.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, Literal, Optional

from pydantic import BaseModel

from hazard_route_finder.models import Coordinate
from .coords import Bounds, add_padding_to_bounds, bounds_of

logger = logging.getLogger(__name__)


class PathStyle(BaseModel):
    color: str
    weight: int = 6


class MarkerIcon(BaseModel):
    kind: Literal["start", "end", "hazard"]
    glyph: str = ""
    popup: str = ""
    border: Optional[str] = None


class Overlay(BaseModel):
    handle: int
    kind: Literal["path", "marker"]
    points: list[Coordinate]
    route_id: Optional[str] = None
    style: Optional[PathStyle] = None
    icon: Optional[MarkerIcon] = None


class MapSurface(ABC):
    """Commands the engine issues to whatever renders the map."""

    @abstractmethod
    def add_path(
        self, points: list[Coordinate], style: PathStyle, route_id: Optional[str] = None,
    ) -> int:
        """Draw a polyline and return its overlay handle.

        ``route_id`` names the candidate the path draws, so a click on it can
        be mapped back to a selection.
        """

    @abstractmethod
    def add_marker(self, coordinate: Coordinate, icon: MarkerIcon) -> int:
        """Place a marker and return its overlay handle."""

    @abstractmethod
    def remove_overlay(self, handle: int) -> None:
        """Remove a previously added overlay."""

    @abstractmethod
    def fit_bounds_to(self, handles: list[int]) -> None:
        """Move the view so the given overlays are visible."""

    def restyle_path(self, handle: int, style: PathStyle) -> None:
        """Change the style of an existing path. Ignored by default."""

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group commands into one rendering frame. No-op by default."""
        yield


class SceneSurface(MapSurface):
    def __init__(self, fit_padding_m: float = 2_000.0):
        self.overlays: dict[int, Overlay] = {}
        self.view: Optional[Bounds] = None
        self.frame = 0
        self.fit_padding_m = fit_padding_m
        self._ids = itertools.count(1)
        self._listeners: list[Callable[["SceneSurface"], None]] = []
        self._batch_depth = 0
        self._dirty = False

    def subscribe(self, listener: Callable[["SceneSurface"], None]) -> None:
        self._listeners.append(listener)

    def add_path(
        self, points: list[Coordinate], style: PathStyle, route_id: Optional[str] = None,
    ) -> int:
        handle = next(self._ids)
        self.overlays[handle] = Overlay(
            handle=handle, kind="path", points=list(points), style=style, route_id=route_id,
        )
        self._changed()
        return handle

    def add_marker(self, coordinate: Coordinate, icon: MarkerIcon) -> int:
        handle = next(self._ids)
        self.overlays[handle] = Overlay(handle=handle, kind="marker", points=[coordinate], icon=icon)
        self._changed()
        return handle

    def restyle_path(self, handle: int, style: PathStyle) -> None:
        overlay = self.overlays[handle]
        self.overlays[handle] = overlay.model_copy(update={"style": style})
        self._changed()

    def remove_overlay(self, handle: int) -> None:
        if handle not in self.overlays:
            raise KeyError(f"Unknown overlay handle {handle}")
        del self.overlays[handle]
        self._changed()

    def fit_bounds_to(self, handles: list[int]) -> None:
        points = [p for h in handles for p in self.overlays[h].points]
        if not points:
            return
        self.view = add_padding_to_bounds(bounds_of(points), padding_m=self.fit_padding_m)
        self._changed()

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._publish()

    def snapshot(self) -> dict:
        """Plain-dict view of the scene for the preview viewer."""
        return {
            "frame": self.frame,
            "view": self.view.model_dump() if self.view else None,
            "overlays": [o.model_dump(exclude_none=True) for o in self.overlays.values()],
        }

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self._publish()

    def _publish(self) -> None:
        self._dirty = False
        self.frame += 1
        for listener in self._listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Scene listener failed on frame %d", self.frame)
