# matcher.py
# Turns noisy free-form text (speech-to-text output or typed input) into a
# gazetteer key with a confidence score.
#
# Usage:
#   command = extract_navigation_command("Navigate to CSE Block")   # "cse block"
#   outcome, match = interpret("Take me to the canteen", gazetteer)

import logging
from typing import List, Optional, Tuple

from .gazetteer import Gazetteer
from .models import MatchOutcome, MatchResult, PointOfInterest
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Phrase tables
# ---------------------------------------------------------------------------

# Checked in order; only the first prefix found at the start is removed.
COMMAND_PREFIXES: Tuple[str, ...] = (
    # English
    "navigate to",
    "go to",
    "take me to",
    "show me",
    "find",
    "where is",
    "direction to",
    "route to",
    # Tamil
    "செல்லுங்கள்",
    "போங்கள்",
    "காட்டுங்கள்",
    "எங்கே",
    "வழி",
    "திசை",
)

AFFIRMATIVE_REPLIES = frozenset({
    "yes", "y", "yeah", "yep", "ok", "okay", "sure", "confirm", "yes, confirm",
    "ஆம்", "சரி",
})

NEGATIVE_REPLIES = frozenset({
    "no", "n", "nope", "no, try again", "cancel",
    "இல்லை", "வேண்டாம்",
})

QUICK_ACTIONS: Tuple[str, ...] = (
    "Navigate to Canteen",
    "Go to CSE Block",
    "Take me to Library",
    "Show me the Auditorium",
    "Find the Hostel",
    "Where is the Temple",
)

# Rule scores, strongest first
SCORE_EXACT_NAME = 1.0
SCORE_NAME_SUBSTRING = 0.8
SCORE_KEYWORD_SUBSTRING = 0.7
SCORE_KEYWORD_WORD = 0.5
SCORE_NAME_WORD = 0.4


# ---------------------------------------------------------------------------
# Command extraction
# ---------------------------------------------------------------------------

def extract_navigation_command(transcript: str) -> Optional[str]:
    """
    Lower-case a transcript and strip one leading navigation phrase.

    Returns:
        The residual destination phrase, or None when nothing is left (NoCommand).
    """
    cleaned = (transcript or "").strip().lower()
    for prefix in COMMAND_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):].strip()
            break
    return cleaned or None


def is_cancel_command(text: str) -> bool:
    """True for phrases like "Please cancel the navigation"."""
    lowered = (text or "").lower()
    return "cancel" in lowered and "navigation" in lowered


def is_affirmative(text: str) -> bool:
    return _normalise_reply(text) in AFFIRMATIVE_REPLIES


def is_negative(text: str) -> bool:
    return _normalise_reply(text) in NEGATIVE_REPLIES


def quick_action_suggestions() -> List[str]:
    return list(QUICK_ACTIONS)


def _normalise_reply(text: str) -> str:
    return (text or "").strip().lower().rstrip(".!")


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_point(query: str, poi: PointOfInterest, config: Optional[NavConfig] = None) -> float:
    """
    Confidence that a normalised query refers to poi.

    Every rule is evaluated and the highest score that fires is kept;
    0.0 means no rule fired.
    """
    config = config or NavConfig()
    name = poi.name.lower()
    scores = [0.0]

    if query == name:
        scores.append(SCORE_EXACT_NAME)
    if name in query:
        scores.append(SCORE_NAME_SUBSTRING)

    for keyword in poi.keywords:
        if keyword in query:
            scores.append(SCORE_KEYWORD_SUBSTRING)
        if any(_word_hit(word, query, config) for word in keyword.split(" ")):
            scores.append(SCORE_KEYWORD_WORD)

    if any(_word_hit(word, query, config) for word in name.split(" ")):
        scores.append(SCORE_NAME_WORD)

    return max(scores)


def _word_hit(word: str, query: str, config: NavConfig) -> bool:
    return len(word) >= config.min_token_length and word in query


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def find_best_match(
    query: str,
    gazetteer: Gazetteer,
    config: Optional[NavConfig] = None,
) -> Optional[MatchResult]:
    """
    Best scoring point of interest for query.

    Ties on confidence go to the lexically smallest key.

    Returns:
        MatchResult, or None when the best score is at or below the publish
        threshold (NotFound).
    """
    config = config or NavConfig()
    normalised = (query or "").strip().lower()

    best: Optional[MatchResult] = None
    for key in sorted(gazetteer):
        poi = gazetteer[key]
        confidence = score_point(normalised, poi, config)
        if confidence > 0 and (best is None or confidence > best.confidence):
            best = MatchResult(key=key, point=poi, confidence=confidence)

    if best is None or best.confidence <= config.publish_threshold:
        logger.debug(f"No destination for '{normalised}'")
        return None

    logger.debug(f"'{normalised}' → {best.key} ({best.confidence:.2f})")
    return best


def classify(match: Optional[MatchResult], config: Optional[NavConfig] = None) -> MatchOutcome:
    """Map a match to the caller's action gate."""
    config = config or NavConfig()
    if match is None or match.confidence <= config.publish_threshold:
        return MatchOutcome.NOT_FOUND
    if match.confidence > config.confident_threshold:
        return MatchOutcome.CONFIDENT
    return MatchOutcome.AMBIGUOUS


def interpret(
    transcript: str,
    gazetteer: Gazetteer,
    config: Optional[NavConfig] = None,
) -> Tuple[MatchOutcome, Optional[MatchResult]]:
    """
    Full pass: command extraction, matching, classification.

    Returns:
        (outcome, match); match is None for NO_COMMAND and NOT_FOUND.
    """
    command = extract_navigation_command(transcript)
    if command is None:
        return MatchOutcome.NO_COMMAND, None

    match = find_best_match(command, gazetteer, config)
    outcome = classify(match, config)
    return outcome, match if outcome is not MatchOutcome.NOT_FOUND else None
