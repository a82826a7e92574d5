"""Session state for the hazard-route-finder MCP server.

Holds the configuration (route, hazard, resolver and style parameters) and
the runtime state of the single search flow: phase, generation token, the
live overlay session and the last failure.
"""

import re
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict

from hazard_route_finder.core.surface import SceneSurface
from hazard_route_finder.models import (
    CandidateId, HazardAnnotation, HazardTemplate, ResolvedPlace, RouteCandidate,
)

SearchPhase = Literal["IDLE", "RESOLVING", "FAILED", "SYNTHESIZING", "ANNOTATING", "SESSION_ACTIVE"]

DEFAULT_HAZARD_CATALOG = [
    HazardTemplate(type="Flooding", reason="Heavy rainfall reported"),
    HazardTemplate(type="Construction", reason="Ongoing road maintenance"),
    HazardTemplate(type="Congestion", reason="High traffic volume"),
]


class RouteParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    divergence_offset: float = Field(default=0.15, gt=0, le=10)


class HazardParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    catalog: list[HazardTemplate] = Field(default_factory=lambda: list(DEFAULT_HAZARD_CATALOG))
    count: int = Field(default=3, ge=0, le=50)
    step: float = Field(default=0.05, ge=0, le=10)


class ResolverParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    country: str = "Nepal"
    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "hazard-route-finder/1.0"
    timeout: float = Field(default=10.0, gt=0)
    retry_examples: list[str] = Field(
        default_factory=lambda: ["Biratnagar Bus Park", "Main Road Biratnagar", "Pokhara Lakeside"]
    )


class RouteStyles(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    route_a: str = "#FF0000"
    route_b: str = "#008000"
    selected: str = "#1E90FF"
    hazard_border: str = "#FF4D4D"
    route_weight: int = Field(default=6, gt=0, le=20)

    @field_validator("route_a", "route_b", "selected", "hazard_border", mode="before")
    @classmethod
    def validate_and_normalize_hex(cls, v: str) -> str:
        if not isinstance(v, str):
            raise ValueError("Color must be a string")
        v = v.strip()
        if not re.match(r'^#[0-9A-Fa-f]{6}$', v):
            raise ValueError(f"Invalid hex color '{v}'. Must be #RRGGBB format.")
        return f"#{v[1:].upper()}"

    def color_for(self, candidate_id: CandidateId) -> str:
        return self.route_a if candidate_id == "A" else self.route_b

    def as_dict(self) -> dict:
        return {
            "route_a": self.route_a,
            "route_b": self.route_b,
            "selected": self.selected,
            "hazard_border": self.hazard_border,
            "route_weight": self.route_weight,
        }


class SearchFailure(BaseModel):
    kind: Literal["validation", "place_not_found", "resolution_failed"]
    message: str
    suggestions: list[str] = []


class OverlaySession(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    routes: dict[CandidateId, RouteCandidate]
    endpoints: dict[Literal["start", "end"], ResolvedPlace]
    hazards: list[HazardAnnotation] = []
    selection: Optional[CandidateId] = None
    generation: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_routes_complete(self) -> "OverlaySession":
        if set(self.routes) != {"A", "B"}:
            raise ValueError(f"Session needs routes A and B, got {sorted(self.routes)}")
        for key, route in self.routes.items():
            if route.id != key:
                raise ValueError(f"Route stored under {key!r} has id {route.id!r}")
        return self

    @model_validator(mode="after")
    def check_shared_endpoints(self) -> "OverlaySession":
        if set(self.endpoints) != {"start", "end"}:
            raise ValueError("Session needs both start and end endpoints")
        start = self.endpoints["start"].coordinate
        end = self.endpoints["end"].coordinate
        for route in self.routes.values():
            if route.start != start or route.end != end:
                raise ValueError(f"Route {route.id} does not share the session endpoints")
        return self


class RouteMapState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    route_params: RouteParams = Field(default_factory=RouteParams)
    hazard_params: HazardParams = Field(default_factory=HazardParams)
    resolver_params: ResolverParams = Field(default_factory=ResolverParams)
    styles: RouteStyles = Field(default_factory=RouteStyles)
    phase: SearchPhase = "IDLE"
    generation: int = 0
    session: Optional[OverlaySession] = None
    last_failure: Optional[SearchFailure] = None
    scene: SceneSurface = Field(default_factory=SceneSurface)
    preview_port: int = Field(default=3333, gt=0, le=65535)
    preview_running: bool = False

    def summary(self) -> dict:
        session = self.session
        return {
            "search": {
                "phase": self.phase,
                "generation": self.generation,
                "last_failure": self.last_failure.model_dump() if self.last_failure else None,
            },
            "session": {
                "active": True,
                "start": session.endpoints["start"].label,
                "end": session.endpoints["end"].label,
                "routes": {
                    cid: [[p.lat, p.lon] for p in route.points]
                    for cid, route in session.routes.items()
                },
                "hazards": len(session.hazards),
                "selection": session.selection,
            } if session else {"active": False},
            "params": {
                "divergence_offset": self.route_params.divergence_offset,
                "hazard_count": self.hazard_params.count,
                "hazard_step": self.hazard_params.step,
                "hazard_catalog": [t.type for t in self.hazard_params.catalog],
                "country": self.resolver_params.country,
            },
            "styles": self.styles.as_dict(),
            "overlays": len(self.scene.overlays),
            "preview": {
                "running": self.preview_running,
                "port": self.preview_port,
            },
        }


# Global session state, one per MCP server process
state = RouteMapState()
