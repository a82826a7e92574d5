"""Error taxonomy for route searches and selections.

Every error derives from ``ValueError`` so the MCP tools can report them with
the same ``except ValueError`` path they use for other input problems.
"""


class RouteMapError(ValueError):
    """Base class for all route-search errors."""


class ValidationError(RouteMapError):
    """A search input was empty after trimming. No resolver call is made."""


class PlaceNotFound(RouteMapError):
    """The resolver had no result for the query."""


class ResolverError(RouteMapError):
    """The resolver failed for a reason other than a missing place."""


class InvalidCoordinate(RouteMapError):
    """A latitude or longitude fell outside its valid range."""


class SessionNotFound(RouteMapError):
    """A selection was attempted with no active session."""


class InvalidSelection(RouteMapError):
    """The requested candidate does not exist in the session."""
