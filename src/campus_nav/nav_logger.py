# nav_logger.py
# Handles all file I/O for the navigation system.
# Saves the active route and per-sample navigation events as JSON.

import json
import logging
import os
from datetime import datetime
from typing import Optional

from .models import Coord, ProgressResult, RouteGeometry
from .nav_config import NavConfig
from .route_tracker import build_geometry

# Standard Python logger; configure at app entry point if needed
logger = logging.getLogger(__name__)


class NavLogger:
    """
    Persists route data and navigation events to JSON files.

    Args:
        config: NavConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        os.makedirs(self.config.log_dir, exist_ok=True)

    # ------------------------------------------------------------------
    # Route persistence
    # ------------------------------------------------------------------

    def save_route(self, geometry: RouteGeometry, destination_key: Optional[str] = None) -> bool:
        """
        Serialize the active route to JSON.

        Returns:
            True on success, False on failure.
        """
        filepath = self.config.route_filepath
        try:
            data = {
                "saved_at": datetime.now().isoformat(),
                "destination_key": destination_key,
                "point_count": len(geometry),
                **geometry.to_dict(),
            }
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.info(f"Route saved to {filepath} ({len(geometry)} points).")
            return True
        except OSError as e:
            logger.error(f"Failed to save route to {filepath}: {e}")
            return False

    def load_route(self, filepath: Optional[str] = None) -> Optional[RouteGeometry]:
        """
        Load a previously saved route.

        Args:
            filepath: Path override; uses config default if omitted.

        Returns:
            RouteGeometry, or None if loading failed.
        """
        path = filepath or self.config.route_filepath
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            coords = [Coord(float(lat), float(lon)) for lat, lon in data["coordinates"]]
            if len(coords) < 2:
                raise ValueError("route needs at least two points")
            geometry = build_geometry(coords)
            logger.info(f"Route loaded from {path} ({len(geometry)} points).")
            return geometry
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to load route from {path}: {e}")
            return None

    # ------------------------------------------------------------------
    # Session event logging
    # ------------------------------------------------------------------

    def log_event(self, result: ProgressResult, position: Coord) -> None:
        """Append one position sample and its outcome to the session log."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "lat": position.lat,
            "lon": position.lon,
            "status": result.status.value,
            "progress_percent": result.progress_percent,
            "distance_to_destination": result.distance_to_destination,
            "message": result.message,
        }
        try:
            with open(self.config.event_filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error(f"Failed to write event log: {e}")
