# route_tracker.py
# State machine that tracks a user's position against the active route.
#
#   IDLE ──select──▶ REQUESTING ──geometry──▶ ACTIVE ──within 50 m──▶ ARRIVED
#     ▲                   │                     │                      │
#     └───────────── cancel / new destination / acknowledge ──────────┘
#
# Every session carries a generation number. Route responses and animation
# frames are tagged with the generation that produced them and dropped once
# it is no longer current.

import logging
from typing import Optional, Sequence

import numpy as np

from .geo_utils import haversine_distance, nearest_index, path_length
from .models import (
    Coord,
    NavigationSession,
    ProgressResult,
    RouteGeometry,
    RouteRequest,
    SessionStatus,
)
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


def build_geometry(coordinates: Sequence[Coord]) -> RouteGeometry:
    coords = tuple(coordinates)
    return RouteGeometry(
        coordinates=coords,
        length_m=path_length([c.as_tuple() for c in coords]),
    )


class RouteTracker:
    """
    Owner of the single NavigationSession.

    Usage:
        tracker = RouteTracker(config)
        request = tracker.select_destination("cse", poi.coord)

        # Inside the position loop:
        result = tracker.on_position(coord)
        request = request or tracker.next_request()
        if request:
            tracker.on_route_response(request, provider.fetch(request.start, request.end))
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        self._generation = 0
        self._session = NavigationSession()
        self._last_position: Optional[Coord] = None
        self._route_points: Optional[np.ndarray] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> NavigationSession:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_position(self) -> Optional[Coord]:
        return self._last_position

    def is_current(self, generation: int) -> bool:
        """True while generation still names the live, non-idle session."""
        return (
            generation == self._generation
            and self._session.status is not SessionStatus.IDLE
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def select_destination(self, key: str, destination: Coord) -> Optional[RouteRequest]:
        """
        Start a fresh session for key, discarding whatever was live.

        Returns:
            The tagged geometry request if a position is already known,
            otherwise None (issued later by next_request()).
        """
        if self._session.status is not SessionStatus.IDLE:
            logger.info(f"Replacing session for '{self._session.destination_key}' with '{key}'.")
        self._reset()
        self._session.status = SessionStatus.REQUESTING
        self._session.destination_key = key
        self._session.destination = destination
        logger.info(f"Destination set: {key} (generation {self._generation}).")
        return self.next_request()

    def next_request(self) -> Optional[RouteRequest]:
        """Issue the geometry request for the live session, once."""
        s = self._session
        if s.status is not SessionStatus.REQUESTING or s.pending_request is not None:
            return None
        if self._last_position is None:
            return None
        s.pending_request = RouteRequest(
            generation=self._generation,
            destination_key=s.destination_key,
            start=self._last_position,
            end=s.destination,
        )
        return s.pending_request

    def on_route_response(
        self,
        request: RouteRequest,
        coordinates: Optional[Sequence[Coord]],
    ) -> bool:
        """
        Install the geometry for request if it is still wanted.

        A missing, empty or single-point path is replaced by the straight
        line from request.start to request.end.

        Returns:
            True if the session became ACTIVE, False if the response was stale.
        """
        s = self._session
        if request.generation != self._generation or s.status is not SessionStatus.REQUESTING:
            logger.debug(
                f"Discarding route for '{request.destination_key}' "
                f"(generation {request.generation}, current {self._generation})."
            )
            return False

        if not coordinates or len(coordinates) < 2:
            logger.warning(f"No usable route to '{request.destination_key}', using straight line.")
            coordinates = [request.start, request.end]

        s.geometry = build_geometry(coordinates)
        s.pending_request = None
        s.status = SessionStatus.ACTIVE
        s.closest_index = 0
        s.progress_percent = 0.0
        self._route_points = np.array([c.as_tuple() for c in s.geometry.coordinates], dtype=np.float64)
        logger.info(
            f"Route active to '{s.destination_key}': {len(s.geometry)} points, "
            f"{int(s.geometry.length_m)} m."
        )
        return True

    def cancel(self) -> bool:
        """
        Drop the live session.

        Returns:
            True if there was something to cancel.
        """
        if self._session.status is SessionStatus.IDLE:
            return False
        logger.info(f"Navigation to '{self._session.destination_key}' cancelled.")
        self._reset()
        return True

    def acknowledge_arrival(self) -> bool:
        if self._session.status is not SessionStatus.ARRIVED:
            return False
        self._reset()
        return True

    def _reset(self) -> None:
        self._generation += 1
        self._session = NavigationSession(generation=self._generation)
        self._route_points = None

    # ------------------------------------------------------------------
    # Core method, call on every position sample
    # ------------------------------------------------------------------

    def on_position(self, position: Coord) -> ProgressResult:
        """
        Record a position sample and recompute progress from scratch.

        Args:
            position: Current geographic position.

        Returns:
            ProgressResult describing the session after this sample.
        """
        self._last_position = position
        s = self._session

        if s.status is SessionStatus.IDLE:
            return ProgressResult(status=s.status, message="Navigation is not active.")

        if s.status is SessionStatus.REQUESTING:
            return ProgressResult(status=s.status, message="Waiting for route.")

        if s.status is SessionStatus.ARRIVED:
            return ProgressResult(
                status=s.status,
                message="You have reached your destination.",
                progress_percent=s.progress_percent,
                closest_index=s.closest_index,
            )

        idx, _ = nearest_index(position.lat, position.lon, self._route_points)
        last = len(s.geometry) - 1
        s.closest_index = idx
        s.progress_percent = min(100.0, 100.0 * idx / last)

        dist = haversine_distance(
            position.lat, position.lon,
            s.destination.lat, s.destination.lon,
        )

        if dist < self.config.arrival_threshold_m:
            s.status = SessionStatus.ARRIVED
            s.progress_percent = 100.0
            logger.info(f"Arrived at '{s.destination_key}'.")
            return ProgressResult(
                status=s.status,
                message="You have reached your destination.",
                progress_percent=s.progress_percent,
                closest_index=idx,
                distance_to_destination=dist,
                arrived_now=True,
            )

        return ProgressResult(
            status=s.status,
            message=f"{int(dist)} m to destination. {s.progress_percent:.0f}% done.",
            progress_percent=s.progress_percent,
            closest_index=idx,
            distance_to_destination=dist,
        )
