# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


# ---------------------------------------------------------------------------
# Gazetteer / matching
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PointOfInterest:
    """A named campus destination."""
    key: str
    name: str
    coord: Coord
    keywords: FrozenSet[str] = frozenset()


class MatchOutcome(Enum):
    NO_COMMAND = "no_command"
    NOT_FOUND  = "not_found"
    AMBIGUOUS  = "ambiguous"      # needs a yes/no confirmation before acting
    CONFIDENT  = "confident"


@dataclass(frozen=True)
class MatchResult:
    key: str
    point: PointOfInterest
    confidence: float


# ---------------------------------------------------------------------------
# Route geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RouteGeometry:
    """Ordered path coordinates plus their total length in metres."""
    coordinates: Tuple[Coord, ...]
    length_m: float

    @property
    def start(self) -> Coord:
        return self.coordinates[0]

    @property
    def end(self) -> Coord:
        return self.coordinates[-1]

    def __len__(self) -> int:
        return len(self.coordinates)

    def to_dict(self) -> dict:
        return {
            "length_m": self.length_m,
            "coordinates": [[c.lat, c.lon] for c in self.coordinates],
        }


@dataclass(frozen=True)
class RouteRequest:
    """A geometry request tagged with the session generation that issued it."""
    generation: int
    destination_key: str
    start: Coord
    end: Coord


# ---------------------------------------------------------------------------
# Navigation session
# ---------------------------------------------------------------------------

class SessionStatus(Enum):
    IDLE       = "idle"
    REQUESTING = "requesting"
    ACTIVE     = "active"
    ARRIVED    = "arrived"


@dataclass
class NavigationSession:
    """The single live navigation attempt. Replaced wholesale on reset."""
    generation: int = 0
    status: SessionStatus = SessionStatus.IDLE
    destination_key: Optional[str] = None
    destination: Optional[Coord] = None
    geometry: Optional[RouteGeometry] = None
    closest_index: int = 0
    progress_percent: float = 0.0
    pending_request: Optional[RouteRequest] = field(default=None, repr=False)


@dataclass
class ProgressResult:
    """Returned by RouteTracker.on_position() for every position sample."""
    status: SessionStatus
    message: str
    progress_percent: float = 0.0
    closest_index: Optional[int] = None
    distance_to_destination: Optional[float] = None   # metres
    arrived_now: bool = False


# ---------------------------------------------------------------------------
# Assistant replies
# ---------------------------------------------------------------------------

class ReplyAction(Enum):
    NAVIGATE  = "navigate"     # destination selected
    CONFIRM   = "confirm"      # waiting for yes / no
    DECLINED  = "declined"
    CANCEL    = "cancel"
    HELP      = "help"         # NoCommand
    NOT_FOUND = "not_found"


@dataclass
class AssistantReply:
    """What NavigationSystem.handle_text() hands back to the chat / voice layer."""
    action: ReplyAction
    message: str
    language: str = "en"
    outcome: Optional[MatchOutcome] = None
    match: Optional[MatchResult] = None
