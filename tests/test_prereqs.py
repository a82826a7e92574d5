"""Tests for tool prerequisite helpers."""
import pytest


def test_require_state_raises_when_no_session():
    from hazard_route_finder.tools._prereqs import require_state
    from hazard_route_finder.state import RouteMapState

    mock_state = RouteMapState()  # session defaults to None
    with pytest.raises(ValueError, match="search_routes"):
        require_state(mock_state, session=True)


def test_require_state_passes_when_session_set():
    from hazard_route_finder.tools._prereqs import require_state
    from hazard_route_finder.state import RouteMapState
    from unittest.mock import MagicMock

    mock_state = RouteMapState()
    mock_state.session = MagicMock()
    # Should not raise
    require_state(mock_state, session=True)


def test_require_state_no_flags_does_not_raise():
    from hazard_route_finder.tools._prereqs import require_state
    from hazard_route_finder.state import RouteMapState

    mock_state = RouteMapState()
    # No flags: never raises
    require_state(mock_state)
