"""Search orchestration: resolve, synthesize, annotate, install.

One search runs at a time from the user's point of view. Every search takes
a fresh generation token; whatever a superseded search produces after that
point (results or failures) is dropped, so a slow earlier search can never
overwrite the session of a faster later one.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from hazard_route_finder.errors import (
    PlaceNotFound, ResolverError, RouteMapError, ValidationError,
)
from hazard_route_finder.models import ResolvedPlace, SelectionExplanation
from hazard_route_finder.state import OverlaySession, RouteMapState, SearchFailure
from .coords import midpoint
from .geocode import GeoResolver
from .hazards import annotate_hazards
from .overlays import OverlaySessionManager
from .selection import select_route
from .synthesis import synthesize_routes

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None]]
SEARCH_STEPS = 4


class SearchEngine:
    def __init__(
        self,
        state: RouteMapState,
        resolver: GeoResolver,
        manager: Optional[OverlaySessionManager] = None,
    ):
        self.state = state
        self.resolver = resolver
        self.manager = manager or OverlaySessionManager(state, state.scene)

    async def search(
        self, start_text: str, end_text: str, progress: Optional[ProgressCallback] = None,
    ) -> Optional[OverlaySession]:
        """Run a full search and install its session.

        Returns the new session, or None if a later search (or clear)
        superseded this one while it was waiting on the resolver.

        Raises:
            ValidationError: an input was empty. The resolver is not called and
                the current session is left alone.
            PlaceNotFound: a place could not be found.
            ResolverError / InvalidCoordinate: any other failure. Unexpected
                errors are wrapped as ResolverError. Either way the phase is
                FAILED and ``state.last_failure`` explains why.
            asyncio.CancelledError: re-raised after returning to IDLE.
        """
        start_text = (start_text or "").strip()
        end_text = (end_text or "").strip()
        if not start_text or not end_text:
            message = "Please enter both start and destination locations."
            self.state.last_failure = SearchFailure(kind="validation", message=message)
            raise ValidationError(message)

        self.state.generation += 1
        token = self.state.generation
        self.manager.clear()
        self.state.last_failure = None
        self.state.phase = "RESOLVING"
        logger.info("Search %d: %r -> %r", token, start_text, end_text)

        try:
            return await self._run(token, start_text, end_text, progress)
        except RouteMapError as e:
            if not self._is_current(token):
                return None
            if self.state.phase != "FAILED":
                self._fail("resolution_failed", f"Search failed: {e}")
            raise
        except Exception as e:
            if not self._is_current(token):
                return None
            logger.exception("Search %d failed unexpectedly", token)
            self._fail("resolution_failed", f"Search failed: {e}")
            raise ResolverError(f"Search failed: {e}") from e
        except BaseException:
            # Cancelled or interrupted: leave nothing half-built behind
            if token == self.state.generation:
                self._abandon("Search was cancelled before it finished.")
            raise

    async def _run(
        self, token: int, start_text: str, end_text: str, progress: Optional[ProgressCallback],
    ) -> Optional[OverlaySession]:
        if not await self._step(progress, 1, token):
            return None
        results = await asyncio.gather(
            self.resolver.resolve(start_text),
            self.resolver.resolve(end_text),
            return_exceptions=True,
        )
        if not self._is_current(token):
            return None
        start, end = self._check_resolved(results)

        self.state.phase = "SYNTHESIZING"
        try:
            route_a, route_b = synthesize_routes(
                start.coordinate, end.coordinate,
                divergence_offset=self.state.route_params.divergence_offset,
            )
        except RouteMapError as e:
            self._fail("resolution_failed", f"Could not build routes between these places: {e}")
            raise
        if not await self._step(progress, 2, token):
            return None

        self.state.phase = "ANNOTATING"
        hp = self.state.hazard_params
        hazards = annotate_hazards(
            midpoint(start.coordinate, end.coordinate),
            catalog=hp.catalog, count=hp.count, step=hp.step,
        )
        if not await self._step(progress, 3, token):
            return None

        session = self.manager.begin_session(
            endpoints={"start": start, "end": end},
            routes={"A": route_a, "B": route_b},
            hazards=hazards,
            generation=token,
        )
        self.state.phase = "SESSION_ACTIVE"
        await self._step(progress, SEARCH_STEPS, token)
        return session

    def select_route(self, candidate_id: str) -> SelectionExplanation:
        """Explain and highlight a candidate of the live session."""
        if self.state.phase == "FAILED":
            self.state.phase = "IDLE"
        explanation = select_route(self.state.session, candidate_id)
        self.manager.set_selection(explanation.candidate_id)
        logger.info("Route %s selected (%s)", explanation.candidate_id, explanation.risk_profile)
        return explanation

    def clear(self) -> None:
        """Drop the live session and abandon any search still in flight."""
        self.state.generation += 1
        self.manager.clear()
        self.state.phase = "IDLE"
        self.state.last_failure = None

    def _is_current(self, token: int) -> bool:
        if token != self.state.generation:
            logger.debug(
                "Discarding results of superseded search %d (current %d)",
                token, self.state.generation,
            )
            return False
        return True

    async def _step(self, progress: Optional[ProgressCallback], step: int, token: int) -> bool:
        if progress is not None:
            await progress(step, SEARCH_STEPS)
        return self._is_current(token)

    def _check_resolved(self, results: list) -> tuple[ResolvedPlace, ResolvedPlace]:
        for result in results:
            if isinstance(result, PlaceNotFound):
                self._fail("place_not_found", str(result))
                raise result
            if isinstance(result, RouteMapError):
                self._fail("resolution_failed", f"Could not resolve the locations: {result}")
                raise result
            if isinstance(result, Exception):
                self._fail("resolution_failed", f"Could not resolve the locations: {result}")
                raise ResolverError(str(result)) from result
            if isinstance(result, BaseException):
                # Cancelled lookup; search() resets the phase on the way out
                raise result
        return results[0], results[1]

    def _fail(self, kind: str, message: str) -> None:
        suggestions = list(self.state.resolver_params.retry_examples)
        self.manager.clear()
        self.state.phase = "FAILED"
        self.state.last_failure = SearchFailure(kind=kind, message=message, suggestions=suggestions)
        logger.warning("Search %d failed (%s): %s", self.state.generation, kind, message)

    def _abandon(self, message: str) -> None:
        self.manager.clear()
        self.state.phase = "IDLE"
        self.state.last_failure = SearchFailure(kind="resolution_failed", message=message)
        logger.info("Search %d abandoned: %s", self.state.generation, message)
