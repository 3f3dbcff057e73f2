# route_provider.py
# Route geometry providers: anything that turns (start, end) into an ordered
# list of coordinates, or raises RouteProviderError.
#
# Failure is never surfaced to the user; RouteTracker swaps in a straight line.

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from .models import Coord
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


class RouteProviderError(RuntimeError):
    """Raised when a provider cannot produce a usable path."""


class RouteProvider(ABC):
    """Interface consumed by NavigationSystem."""

    name = "provider"

    @abstractmethod
    def fetch(self, start: Coord, end: Coord) -> List[Coord]:
        """
        Path from start to end.

        Returns:
            Non-empty ordered coordinate list.

        Raises:
            RouteProviderError: On any transport error or empty result.
        """


# ---------------------------------------------------------------------------
# Straight line
# ---------------------------------------------------------------------------

class StraightLineProvider(RouteProvider):
    """Two-point path; never fails."""

    name = "straight"

    def fetch(self, start: Coord, end: Coord) -> List[Coord]:
        return [start, end]


# ---------------------------------------------------------------------------
# OSRM HTTP API
# ---------------------------------------------------------------------------

class OSRMRouteProvider(RouteProvider):
    """
    Fetches full-overview GeoJSON routes from an OSRM server.

    Args:
        config:  NavConfig for base URL, profile and timeout.
        session: Optional requests.Session (injected in tests).
    """

    name = "osrm"

    def __init__(self, config: Optional[NavConfig] = None, session: Optional[requests.Session] = None) -> None:
        self.config = config or NavConfig()
        self._session = session or requests.Session()

    def build_url(self, start: Coord, end: Coord) -> str:
        # OSRM wants lon,lat
        coords = f"{start.lon},{start.lat};{end.lon},{end.lat}"
        base = self.config.osrm_base_url.rstrip("/")
        return f"{base}/route/v1/{self.config.osrm_profile}/{coords}"

    def fetch(self, start: Coord, end: Coord) -> List[Coord]:
        url = self.build_url(start, end)
        params = {"overview": "full", "geometries": "geojson"}
        try:
            response = self._session.get(url, params=params, timeout=self.config.provider_timeout_s)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RouteProviderError(f"OSRM request failed: {exc}") from exc

        routes = data.get("routes") or []
        if data.get("code", "Ok") != "Ok" or not routes:
            raise RouteProviderError(f"OSRM returned no route (code={data.get('code')})")

        try:
            raw = routes[0]["geometry"]["coordinates"]
            coords = [Coord(float(lat), float(lon)) for lon, lat in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise RouteProviderError(f"Malformed OSRM geometry: {exc}") from exc

        if not coords:
            raise RouteProviderError("OSRM geometry is empty")
        logger.info(f"OSRM route: {len(coords)} points.")
        return coords
