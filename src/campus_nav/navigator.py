# navigator.py
# Public entry point for the campus navigation system.
# Owns no business logic; delegates everything to specialist modules.

import logging
import queue
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from .animator import RouteAnimator
from .gazetteer import Gazetteer
from .matcher import interpret, is_affirmative, is_cancel_command, is_negative
from .messages import DEFAULT_LANGUAGE, message
from .models import (
    AssistantReply,
    Coord,
    MatchOutcome,
    MatchResult,
    NavigationSession,
    ProgressResult,
    ReplyAction,
    RouteRequest,
    SessionStatus,
)
from .nav_config import NavConfig
from .nav_logger import NavLogger
from .route_provider import OSRMRouteProvider, RouteProvider, RouteProviderError
from .route_tracker import RouteTracker

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class NavigationSystem:
    """
    High-level navigation facade.

    Typical lifecycle:
        nav = NavigationSystem()
        nav.update(Coord(12.1931, 79.0845))          # first GPS fix
        reply = nav.handle_text("Navigate to CSE Block")

        # GPS loop; the route is applied once the provider answers:
        result = nav.update(Coord(lat, lon))
        nav.tick()

        nav.close()

    Args:
        gazetteer: Points of interest; defaults to the built-in campus table.
        provider:  Route geometry provider; defaults to OSRM.
        config:    Optional NavConfig; defaults to NavConfig().
        clock:     Millisecond clock for the route reveal.
        executor:  Runs provider requests off the caller's thread; defaults
                   to a small ThreadPoolExecutor owned by this object.
    """

    def __init__(
        self,
        gazetteer: Optional[Gazetteer] = None,
        provider: Optional[RouteProvider] = None,
        config: Optional[NavConfig] = None,
        clock: Callable[[], float] = _monotonic_ms,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config = config or NavConfig()
        self.gazetteer = gazetteer or Gazetteer.default()
        self.language = DEFAULT_LANGUAGE
        self._clock = clock

        # Specialist modules
        self._provider = provider or OSRMRouteProvider(self.config)
        self._tracker = RouteTracker(self.config)
        self._animator = RouteAnimator(self.config, is_current=self._tracker.is_current)
        self._logger = NavLogger(self.config)

        self._pending_confirmation: Optional[MatchResult] = None

        # Provider requests run on the executor; finished ones wait here
        # until the next update() or tick() hands them to the tracker.
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="route")
        self._responses: "queue.Queue[Tuple[RouteRequest, Optional[List[Coord]]]]" = queue.Queue()

    # ------------------------------------------------------------------
    # Text / voice commands
    # ------------------------------------------------------------------

    def handle_text(self, text: str, language: Optional[str] = None) -> AssistantReply:
        """
        React to one transcript or typed message.

        Args:
            text:     Raw text from speech-to-text or the chat box.
            language: "en" or "ta"; defaults to self.language.

        Returns:
            AssistantReply with the action taken and a localised message.
        """
        lang = language or self.language

        pending = self._pending_confirmation
        self._pending_confirmation = None
        if pending is not None:
            if is_affirmative(text):
                return self._navigate(pending, lang, MatchOutcome.AMBIGUOUS)
            if is_negative(text):
                logger.info(f"Suggestion '{pending.key}' declined.")
                return AssistantReply(ReplyAction.DECLINED, message("declined", lang), lang)

        if is_cancel_command(text):
            if self.stop_navigation():
                return AssistantReply(ReplyAction.CANCEL, message("cancelled", lang), lang)
            return AssistantReply(ReplyAction.CANCEL, message("nothing_to_cancel", lang), lang)

        outcome, match = interpret(text, self.gazetteer, self.config)

        if outcome is MatchOutcome.NO_COMMAND:
            return AssistantReply(ReplyAction.HELP, message("help", lang), lang, outcome)

        if outcome is MatchOutcome.NOT_FOUND:
            logger.info(f"No destination matched '{text}'.")
            return AssistantReply(ReplyAction.NOT_FOUND, message("not_found", lang), lang, outcome)

        if outcome is MatchOutcome.AMBIGUOUS:
            self._pending_confirmation = match
            return AssistantReply(
                ReplyAction.CONFIRM,
                message("did_you_mean", lang, name=match.point.name),
                lang, outcome, match,
            )

        return self._navigate(match, lang, outcome)

    def _navigate(self, match: MatchResult, lang: str, outcome: MatchOutcome) -> AssistantReply:
        self.select_destination(match.key)
        return AssistantReply(
            ReplyAction.NAVIGATE,
            message("navigating", lang, name=match.point.name),
            lang, outcome, match,
        )

    @property
    def pending_confirmation(self) -> Optional[MatchResult]:
        return self._pending_confirmation

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    def select_destination(self, key: str) -> Tuple[bool, str]:
        """
        Start navigating to a gazetteer key, replacing any active session.

        Returns:
            (requested, message); requested is False while waiting for
            the first position fix. The route itself is applied once the
            provider answers, on a later update() or tick().

        Raises:
            KeyError: If key is not in the gazetteer.
        """
        poi = self.gazetteer[key]
        self._animator.cancel()
        request = self._tracker.select_destination(key, poi.coord)
        if request is None:
            logger.info(f"Waiting for a position fix before routing to '{key}'.")
            return False, "Waiting for position."
        self._dispatch(request)
        self.process_responses()
        return True, f"Route to {poi.name} requested."

    def stop_navigation(self) -> bool:
        """Cancel the current session. Returns False if nothing was active."""
        self._animator.cancel()
        return self._tracker.cancel()

    def acknowledge_arrival(self) -> bool:
        self._animator.cancel()
        return self._tracker.acknowledge_arrival()

    def close(self) -> None:
        """Stop the request executor if this object created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    # ------------------------------------------------------------------
    # Route geometry requests
    # ------------------------------------------------------------------

    def _dispatch(self, request: RouteRequest) -> None:
        """Submit request to the provider without waiting for the answer."""
        future = self._executor.submit(self._provider.fetch, request.start, request.end)
        future.add_done_callback(lambda f: self._responses.put((request, self._unwrap(request, f))))

    @staticmethod
    def _unwrap(request: RouteRequest, future: Future) -> Optional[List[Coord]]:
        # Runs on the executor thread; only logs and converts
        try:
            return future.result()
        except RouteProviderError as e:
            logger.warning(f"Route provider failed for '{request.destination_key}': {e}")
            return None
        except Exception:
            logger.exception(f"Route provider crashed for '{request.destination_key}'")
            return None

    def process_responses(self) -> int:
        """
        Hand every finished provider response to the tracker.

        Returns:
            Number of responses that became the active route.
        """
        applied = 0
        while True:
            try:
                request, coords = self._responses.get_nowait()
            except queue.Empty:
                return applied
            if self.deliver(request, coords):
                applied += 1

    def deliver(self, request: RouteRequest, coords: Optional[List[Coord]]) -> bool:
        """
        Apply one provider response.

        Args:
            request: The request the response answers.
            coords:  Provider path, or None when the provider failed.

        Returns:
            True if it became the active route, False if it was stale.
        """
        if not self._tracker.on_route_response(request, coords):
            return False

        session = self._tracker.session
        self._logger.save_route(session.geometry, session.destination_key)
        self._animator.start(request.generation, request.start, request.end, self._clock())
        return True

    # ------------------------------------------------------------------
    # Event inputs: position fixes and animation timer
    # ------------------------------------------------------------------

    def update(self, position: Coord) -> ProgressResult:
        """
        Process a new position sample.

        Args:
            position: Current geographic coordinate.

        Returns:
            ProgressResult for this sample.
        """
        self.process_responses()
        result = self._tracker.on_position(position)

        if result.arrived_now:
            self._animator.cancel()
            poi = self.gazetteer.get(self._tracker.session.destination_key)
            if poi is not None:
                result.message = message("arrived", self.language, name=poi.name)

        request = self._tracker.next_request()
        if request is not None:
            self._dispatch(request)
            self.process_responses()

        self._logger.log_event(result, position)
        return result

    def tick(self) -> Optional[List[Coord]]:
        """Apply finished route responses and advance the reveal; call from the UI timer."""
        self.process_responses()
        return self._animator.tick(self._clock())

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> NavigationSession:
        return self._tracker.session

    @property
    def animator(self) -> RouteAnimator:
        return self._animator

    @property
    def is_active(self) -> bool:
        return self._tracker.status is SessionStatus.ACTIVE

    @property
    def map_locked(self) -> bool:
        return self._animator.map_locked
