"""Ownership of the overlays that belong to the live search session."""

import logging
from typing import Optional

from hazard_route_finder.errors import SessionNotFound
from hazard_route_finder.models import (
    CandidateId, HazardAnnotation, HazardType, ResolvedPlace, RouteCandidate,
)
from hazard_route_finder.state import OverlaySession, RouteMapState
from .surface import MapSurface, MarkerIcon, PathStyle

logger = logging.getLogger(__name__)

HAZARD_GLYPHS: dict[HazardType, str] = {
    "Flooding": "\U0001F30A",
    "Construction": "\U0001F6A7",
    "Congestion": "\U0001F697",
    "Accident": "\U0001F4A5",
}
DEFAULT_HAZARD_GLYPH = "⚠️"


def hazard_icon(hazard: HazardAnnotation, border: str) -> MarkerIcon:
    return MarkerIcon(
        kind="hazard",
        glyph=HAZARD_GLYPHS.get(hazard.type, DEFAULT_HAZARD_GLYPH),
        popup=f"{hazard.type}\n{hazard.reason}\nSimulated condition",
        border=border,
    )


class OverlaySessionManager:
    """Sole writer of ``state.session`` and of the overlays on the surface.

    ``begin_session`` tears down the previous session and installs the new
    one inside a single surface frame, so an observer never sees both sets
    of overlays, or neither, on screen.
    """

    def __init__(self, state: RouteMapState, surface: MapSurface):
        self.state = state
        self.surface = surface
        self._handles: list[int] = []
        self._route_handles: dict[CandidateId, int] = {}

    @property
    def session(self) -> Optional[OverlaySession]:
        return self.state.session

    def begin_session(
        self,
        endpoints: dict[str, ResolvedPlace],
        routes: dict[CandidateId, RouteCandidate],
        hazards: list[HazardAnnotation],
        generation: int = 0,
    ) -> OverlaySession:
        # Build (and validate) the value first so a bad session never reaches the map
        session = OverlaySession(
            routes=routes, endpoints=endpoints, hazards=hazards, generation=generation,
        )
        with self.surface.batch():
            self.clear()
            try:
                self._install(session)
            except Exception:
                logger.error("Failed to install overlays for generation %d; rolling back", generation)
                self._remove_all()
                raise
            self.state.session = session

        logger.info(
            "Session %d installed: %s -> %s, %d hazard(s)",
            generation, endpoints["start"].label, endpoints["end"].label, len(hazards),
        )
        return session

    def clear(self) -> None:
        """Remove every overlay of the live session. No-op when there is none."""
        if self.state.session is None and not self._handles:
            return
        with self.surface.batch():
            self._remove_all()
            self.state.session = None
        logger.info("Session overlays cleared")

    def set_selection(self, candidate_id: CandidateId) -> OverlaySession:
        """Record the chosen candidate and highlight its path."""
        session = self.state.session
        if session is None:
            raise SessionNotFound("No active session to select a route in.")
        styles = self.state.styles
        with self.surface.batch():
            session.selection = candidate_id
            for cid, handle in self._route_handles.items():
                color = styles.selected if cid == candidate_id else styles.color_for(cid)
                self.surface.restyle_path(handle, PathStyle(color=color, weight=styles.route_weight))
        return session

    def _install(self, session: OverlaySession) -> None:
        styles = self.state.styles
        for cid in ("A", "B"):
            route = session.routes[cid]
            handle = self.surface.add_path(
                route.points, PathStyle(color=styles.color_for(cid), weight=styles.route_weight),
                route_id=cid,
            )
            self._handles.append(handle)
            self._route_handles[cid] = handle

        start = session.endpoints["start"]
        end = session.endpoints["end"]
        self._handles.append(self.surface.add_marker(
            start.coordinate, MarkerIcon(kind="start", popup=f"Start\n{start.label}"),
        ))
        self._handles.append(self.surface.add_marker(
            end.coordinate, MarkerIcon(kind="end", popup=f"Destination\n{end.label}"),
        ))

        for hazard in session.hazards:
            self._handles.append(self.surface.add_marker(
                hazard.position, hazard_icon(hazard, styles.hazard_border),
            ))

        self.surface.fit_bounds_to(list(self._route_handles.values()))

    def _remove_all(self) -> None:
        while self._handles:
            self.surface.remove_overlay(self._handles.pop())
        self._route_handles = {}
