# main.py
# Entry point: simulates a GPS walk from the main gate to the CSE block.
# In production, replace the test_locations loop with your real position feed.
#
# Two ways to pick a destination: nav.handle_text("Navigate to CSE Block")
# or nav.select_destination("cse"). Feed positions with nav.update(coord).

import logging
import time

from .models import Coord, ReplyAction, SessionStatus
from .nav_config import NavConfig
from .navigator import NavigationSystem
from .route_provider import OSRMRouteProvider

# ------------------------------------------------------------------
# Config: tweak thresholds or paths here, not inside the modules
# ------------------------------------------------------------------
config = NavConfig(
    arrival_threshold_m=50.0,
    log_dir="logs",
    route_filename="active_route.json",
)

# ------------------------------------------------------------------
# Simulation coordinates (Gate → CSE Block)
# ------------------------------------------------------------------
test_locations = [
    Coord(12.193100, 79.084515),   # Gate
    Coord(12.193050, 79.084200),
    Coord(12.192990, 79.083900),
    Coord(12.192950, 79.083650),
    Coord(12.192900, 79.083450),
    Coord(12.192860, 79.083300),   # arrival zone
    Coord(12.192838, 79.083230),   # CSE Block
]

COMMAND = "Navigate to CSE Block"


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # 1. Boot system
    nav = NavigationSystem(provider=OSRMRouteProvider(config), config=config)

    # 2. First fix, then the spoken command
    nav.update(test_locations[0])
    reply = nav.handle_text(COMMAND)
    print(f"[Bot] {reply.message}")
    if reply.action is not ReplyAction.NAVIGATE:
        nav.close()
        return

    print("\n--- GPS Loop Active ---")

    # 3. GPS loop, replace with real feed in production
    try:
        for position in test_locations[1:]:
            # Simulate GPS poll interval (remove in real use)
            time.sleep(0.5)

            nav.tick()
            result = nav.update(position)
            print(f"  GPS {position} → [{result.status.name}] {result.progress_percent:5.1f}%  {result.message}")

            if result.status is SessionStatus.ARRIVED:
                print("  ✓  Destination reached. Navigation ended.")
                nav.acknowledge_arrival()
                break
    finally:
        nav.close()

    print("\n--- Session complete ---")
    print(f"    Log files written to: {config.log_dir}/")


if __name__ == "__main__":
    main()
