# animator.py
# Cosmetic reveal of the route line: a fixed number of evenly timed steps
# interpolating from start to end, independent of the tracked geometry.
# When the reveal completes the map is locked (route active); any change of
# session drops the remaining steps and unlocks it.
#
# Drive it with tick(now_ms) from any timer, or await play() under asyncio.

import asyncio
import logging
from typing import Callable, List, Optional

from .geo_utils import interpolate_line
from .models import Coord
from .nav_config import NavConfig

logger = logging.getLogger(__name__)

FrameCallback = Callable[[int, List[Coord]], None]
CompleteCallback = Callable[[int], None]


class RouteAnimator:
    """
    Tick-driven route reveal bound to a session generation.

    Args:
        config:      NavConfig for duration and step count.
        is_current:  Returns False once a generation has been superseded
                     (normally RouteTracker.is_current).
        on_frame:    Called with (generation, revealed coordinates) per step.
        on_complete: Called with generation when the last step lands.
    """

    def __init__(
        self,
        config: Optional[NavConfig] = None,
        is_current: Callable[[int], bool] = lambda generation: True,
        on_frame: Optional[FrameCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._is_current = is_current
        self._on_frame = on_frame
        self._on_complete = on_complete

        self._generation: Optional[int] = None
        self._points: List[Coord] = []
        self._started_ms = 0.0
        self._applied = 0
        self._map_locked = False
        self._completed: Optional[int] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._generation is not None

    @property
    def map_locked(self) -> bool:
        return self._map_locked

    @property
    def revealed(self) -> List[Coord]:
        return self._points[: self._applied + 1] if self._points else []

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self, generation: int, start: Coord, end: Coord, now_ms: float) -> None:
        """Schedule a fresh reveal, replacing any reveal in flight."""
        self.cancel()
        steps = self.config.animation_steps
        line = interpolate_line(start.as_tuple(), end.as_tuple(), steps)
        self._points = [Coord(lat, lon) for lat, lon in line]
        self._generation = generation
        self._started_ms = now_ms
        self._applied = 0

    def cancel(self) -> None:
        """Drop pending steps and release the map."""
        if self._generation is not None:
            logger.debug(f"Animation for generation {self._generation} dropped at step {self._applied}.")
        self._generation = None
        self._points = []
        self._applied = 0
        self._map_locked = False

    def tick(self, now_ms: float) -> Optional[List[Coord]]:
        """
        Apply every step due by now_ms.

        Returns:
            The revealed coordinates after this tick, or None when nothing
            is running or the reveal belonged to a superseded session.
        """
        if self._generation is None:
            return None
        generation = self._generation
        if not self._is_current(generation):
            self.cancel()
            return None

        steps = self.config.animation_steps
        duration = self.config.animation_duration_ms
        elapsed = max(0.0, now_ms - self._started_ms)
        due = min(steps, int(elapsed * steps / duration)) if duration > 0 else steps

        if due > self._applied:
            self._applied = due
            revealed = self.revealed
            if self._on_frame:
                self._on_frame(generation, revealed)
        else:
            revealed = self.revealed

        if self._applied >= steps:
            self._generation = None
            self._map_locked = True
            self._completed = generation
            logger.info(f"Route reveal complete (generation {generation}); map locked.")
            if self._on_complete:
                self._on_complete(generation)
        return revealed

    async def play(self, generation: int, start: Coord, end: Coord) -> bool:
        """
        Run the reveal in real time on the current event loop.

        Returns:
            True if the reveal completed, False if it was superseded.
        """
        loop = asyncio.get_running_loop()
        self.start(generation, start, end, loop.time() * 1000)
        interval = self.config.animation_duration_ms / self.config.animation_steps / 1000
        while self._generation == generation:
            await asyncio.sleep(interval)
            self.tick(loop.time() * 1000)
        return self._completed == generation
