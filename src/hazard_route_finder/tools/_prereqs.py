"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, session: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, session=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if session and state.session is None:
        raise ValueError(
            "Search for a route first with search_routes."
        )
