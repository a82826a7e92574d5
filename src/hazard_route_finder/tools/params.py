"""Configuration tools: set_route_params, set_hazard_params, set_route_styles, set_country."""

from mcp.server.fastmcp import FastMCP

from ..state import state
from ..models import HazardTemplate


def register_params_tools(mcp: FastMCP):

    @mcp.tool()
    def set_route_params(divergence_offset: float | None = None) -> str:
        """Set how far the two candidate routes bend away from each other.

        Takes effect on the next search_routes call.

        Args:
            divergence_offset: Latitude offset in degrees applied to the
                midpoint, north for route A and south for route B (default 0.15).
        """
        p = state.route_params
        if divergence_offset is not None:
            try:
                p.divergence_offset = divergence_offset
            except Exception as e:
                return f"Error: {e}"

        return f"Route params: divergence_offset={p.divergence_offset}"

    @mcp.tool()
    def set_hazard_params(
        count: int | None = None,
        step: float | None = None,
        catalog: list[dict] | None = None,
    ) -> str:
        """Configure the simulated hazard markers placed along the corridor.

        Takes effect on the next search_routes call. Hazards are always
        simulated; no live data is used.

        Args:
            count: Number of hazard markers (default 3, 0 disables them).
            step: Spacing in degrees between consecutive markers (default 0.05).
            catalog: Ordered list of {"type", "reason"} entries cycled through
                for the markers. Types: Flooding, Construction, Congestion,
                Accident, Other.
        """
        p = state.hazard_params
        try:
            if catalog is not None:
                p.catalog = [HazardTemplate(**entry) for entry in catalog]
            if count is not None:
                p.count = count
            if step is not None:
                p.step = step
        except Exception as e:
            return f"Error: {e}"

        return (
            f"Hazard params: count={p.count}, step={p.step}, "
            f"catalog={[t.type for t in p.catalog]}"
        )

    @mcp.tool()
    def set_route_styles(
        route_a: str | None = None,
        route_b: str | None = None,
        selected: str | None = None,
        hazard_border: str | None = None,
        route_weight: int | None = None,
    ) -> str:
        """Set map colors (hex #RRGGBB) and route line weight.

        Applies to routes drawn by the next search_routes call.

        Args:
            route_a/route_b: Colors of the two candidate routes.
            selected: Color of the route chosen with select_route.
            hazard_border: Border color of hazard markers.
            route_weight: Route line width in pixels (default 6).
        """
        s = state.styles
        for name, value in [
            ("route_a", route_a), ("route_b", route_b), ("selected", selected),
            ("hazard_border", hazard_border), ("route_weight", route_weight),
        ]:
            if value is not None:
                try:
                    setattr(s, name, value)
                except Exception as e:
                    return f"Error: {e}"

        return f"Styles: {s.as_dict()}"

    @mcp.tool()
    def set_country(country: str) -> str:
        """Restrict place lookups to a country (default Nepal).

        Pass an empty string to search worldwide.
        **Next:** search_routes.
        """
        state.resolver_params.country = country.strip()
        where = state.resolver_params.country or "anywhere"
        return f"Place lookups restricted to: {where}"
