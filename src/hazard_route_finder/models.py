"""Pydantic domain models for places, candidate routes, and hazard annotations."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CandidateId = Literal["A", "B"]
RiskProfile = Literal["FASTER_RISKIER", "SAFER"]
HazardType = Literal["Flooding", "Construction", "Congestion", "Accident", "Other"]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class ResolvedPlace(BaseModel):
    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    label: str


class RouteCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: CandidateId
    points: list[Coordinate] = Field(min_length=3)
    risk_profile: RiskProfile

    @property
    def start(self) -> Coordinate:
        return self.points[0]

    @property
    def end(self) -> Coordinate:
        return self.points[-1]


class HazardTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: HazardType
    reason: str


class HazardAnnotation(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: HazardType
    reason: str
    position: Coordinate
    simulated: Literal[True] = True


class SelectionExplanation(BaseModel):
    candidate_id: CandidateId
    risk_profile: RiskProfile
    title: str
    message: str
