# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Matching constants
# ---------------------------------------------------------------------------

PUBLISH_THRESHOLD: float = 0.3      # at or below → NotFound
CONFIDENT_THRESHOLD: float = 0.7    # above → act without confirmation

ARRIVAL_THRESHOLD_M: float = 50.0

OSRM_BASE_URL: str = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Destination matching
    publish_threshold: float = PUBLISH_THRESHOLD
    confident_threshold: float = CONFIDENT_THRESHOLD
    min_token_length: int = 3              # alias/name words shorter than this never score

    # Progress tracking
    arrival_threshold_m: float = ARRIVAL_THRESHOLD_M

    # Route reveal animation
    animation_duration_ms: float = 2000.0
    animation_steps: int = 60

    # Route geometry provider
    osrm_base_url: str = OSRM_BASE_URL
    osrm_profile: str = "driving"
    provider_timeout_s: float = 10.0

    # Logging
    log_dir: str = "logs"                  # directory for saved JSON files
    route_filename: str = "active_route.json"
    event_filename: str = "nav_session.jsonl"

    @property
    def route_filepath(self) -> str:
        return os.path.join(self.log_dir, self.route_filename)

    @property
    def event_filepath(self) -> str:
        return os.path.join(self.log_dir, self.event_filename)
