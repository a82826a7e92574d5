"""Tests for simulated hazard annotation."""
import pytest

from hazard_route_finder.core.hazards import annotate_hazards
from hazard_route_finder.models import Coordinate, HazardTemplate

MID = Coordinate(lat=27.9634, lon=84.6548)


def test_default_catalog_gives_three_hazards_in_order():
    hazards = annotate_hazards(MID)
    assert [h.type for h in hazards] == ["Flooding", "Construction", "Congestion"]
    assert [h.reason for h in hazards] == [
        "Heavy rainfall reported", "Ongoing road maintenance", "High traffic volume",
    ]
    assert all(h.simulated for h in hazards)


def test_positions_step_diagonally_from_midpoint():
    hazards = annotate_hazards(MID, step=0.05)
    for i, h in enumerate(hazards):
        assert h.position.lat == pytest.approx(MID.lat + i * 0.05)
        assert h.position.lon == pytest.approx(MID.lon - i * 0.05)


def test_count_and_step_are_configurable_and_catalog_cycles():
    catalog = [
        HazardTemplate(type="Accident", reason="Collision reported"),
        HazardTemplate(type="Other", reason="Livestock on road"),
    ]
    hazards = annotate_hazards(MID, catalog=catalog, count=5, step=0.1)
    assert len(hazards) == 5
    assert [h.type for h in hazards] == ["Accident", "Other", "Accident", "Other", "Accident"]
    assert hazards[4].position.lat == pytest.approx(MID.lat + 0.4)


def test_is_deterministic():
    first = annotate_hazards(MID)
    second = annotate_hazards(MID)
    assert first == second
    assert [h.model_dump_json() for h in first] == [h.model_dump_json() for h in second]


def test_zero_count_or_empty_catalog_gives_nothing():
    assert annotate_hazards(MID, count=0) == []
    assert annotate_hazards(MID, catalog=[]) == []


def test_positions_clamped_near_edges():
    hazards = annotate_hazards(Coordinate(lat=89.95, lon=-179.95), count=3, step=0.05)
    assert hazards[2].position.lat == 90.0
    assert hazards[2].position.lon == -180.0


def test_default_catalog_is_not_a_shared_default_argument():
    import inspect
    from hazard_route_finder.state import DEFAULT_HAZARD_CATALOG

    assert inspect.signature(annotate_hazards).parameters["catalog"].default is None
    assert annotate_hazards(MID, catalog=None) == annotate_hazards(MID)
    assert len(DEFAULT_HAZARD_CATALOG) == 3
