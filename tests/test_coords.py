"""Tests for geographic helpers."""
import pytest
from pydantic import ValidationError

from hazard_route_finder.core.coords import (
    Bounds, add_padding_to_bounds, bounds_of, midpoint,
)
from hazard_route_finder.models import Coordinate


def test_midpoint():
    m = midpoint(Coordinate(lat=28.2096, lon=83.9856), Coordinate(lat=27.7172, lon=85.3240))
    assert m.lat == pytest.approx(27.9634)
    assert m.lon == pytest.approx(84.6548)


def test_bounds_of_points():
    b = bounds_of([Coordinate(lat=1, lon=5), Coordinate(lat=-2, lon=7), Coordinate(lat=0, lon=6)])
    assert (b.north, b.south, b.east, b.west) == (1, -2, 7, 5)


def test_bounds_of_single_point_is_degenerate_but_valid():
    b = bounds_of([Coordinate(lat=27.7, lon=85.3)])
    assert b.north == b.south


def test_bounds_of_empty_raises():
    with pytest.raises(ValueError):
        bounds_of([])


def test_bounds_ordering_checked():
    with pytest.raises(ValidationError):
        Bounds(north=1, south=2, east=3, west=0)


def test_padding_grows_box():
    b = add_padding_to_bounds(Bounds(north=28, south=27, east=85, west=84), padding_m=1110)
    assert b.north == pytest.approx(28.01)
    assert b.south == pytest.approx(26.99)
    assert b.east > 85 and b.west < 84


def test_padding_clamped_at_edges():
    b = add_padding_to_bounds(Bounds(north=90, south=89.9, east=180, west=179.9), padding_m=50_000)
    assert b.north == 90
    assert b.east == 180
