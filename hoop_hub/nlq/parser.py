"""
Natural Language Query parsing for Hoop Hub.

Turns raw question text into the signals the intent classifier needs:
- normalized text (lowercase, accent-free, punctuation stripped)
- known players and teams (fixed vocabularies, contiguous substring match)
- season tokens ("2023-24")
- rolling windows ("last 10 games")

Everything here is pure and deterministic; nothing raises on odd input.
"""

import logging
import re
import unicodedata
from typing import List, Optional, Sequence

from .models import PlanEntities, WindowFilter

logger = logging.getLogger(__name__)


# ============================================================================
# VOCABULARIES
# ============================================================================

KNOWN_PLAYERS = (
    "nikola jokic",
    "stephen curry",
    "damian lillard",
    "lebron james",
    "kevin durant",
    "tyrese haliburton",
    "domantas sabonis",
)

KNOWN_TEAMS = (
    "boston celtics",
    "denver nuggets",
    "los angeles lakers",
    "golden state warriors",
    "milwaukee bucks",
    "phoenix suns",
)


# ============================================================================
# NORMALIZATION
# ============================================================================

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s-]+")
_WHITESPACE = re.compile(r"\s+")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_question(message: str) -> str:
    """
    Canonicalize a raw question.

    Keeps letters, digits, spaces and hyphens so season tokens such as
    ``2023-24`` survive.

    Examples:
        >>> normalize_question("  Who Leads AST in 2023-24?  ")
        'who leads ast in 2023-24'
        >>> normalize_question("Nikola Jokić's boards")
        'nikola jokic s boards'
    """
    text = _strip_accents(message.lower())
    text = _NON_ALPHANUMERIC.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def includes_keyword(normalized: str, keyword: str) -> bool:
    """
    Token match for single words, substring match for phrases.

    "top" must be a whole token (so "stop" does not count) while
    "defensive rating" only needs to appear contiguously.
    """
    if " " in keyword:
        return keyword in normalized
    return keyword in normalized.split(" ")


def includes_any(normalized: str, keywords: Sequence[str]) -> bool:
    return any(includes_keyword(normalized, keyword) for keyword in keywords)


# ============================================================================
# ENTITY EXTRACTION
# ============================================================================

_SEASON_PATTERN = re.compile(r"\b(?:19|20)\d{2}-\d{2}\b")
_LAST_N_GAMES_PATTERN = re.compile(r"\blast\s+(\d{1,2})\s+games?\b")
_LAST_N_PATTERN = re.compile(r"\blast\s+(\d{1,2})\b")


def extract_players(normalized: str) -> List[str]:
    return [player for player in KNOWN_PLAYERS if player in normalized]


def extract_teams(normalized: str) -> List[str]:
    return [team for team in KNOWN_TEAMS if team in normalized]


def extract_seasons(normalized: str) -> List[str]:
    """Season tokens in order of first appearance, deduplicated."""
    return list(dict.fromkeys(_SEASON_PATTERN.findall(normalized)))


def extract_window_filter(normalized: str) -> Optional[WindowFilter]:
    """
    Parse a rolling "last N games" window.

    The explicit "last N games" form is tried before the looser "last N".
    A zero count is treated as no window at all.
    """
    for pattern in (_LAST_N_GAMES_PATTERN, _LAST_N_PATTERN):
        match = pattern.search(normalized)
        if match:
            n = int(match.group(1))
            if n > 0:
                return WindowFilter(n=n)
            logger.debug(f"Ignoring non-positive window '{match.group(0)}'")
    return None


def extract_entities(normalized: str) -> PlanEntities:
    """Players, teams and seasons mentioned in the normalized question."""
    entities = PlanEntities(
        players=tuple(extract_players(normalized)),
        teams=tuple(extract_teams(normalized)),
        seasons=tuple(extract_seasons(normalized)),
    )
    logger.debug(
        f"Entities: players={list(entities.players)}, teams={list(entities.teams)}, "
        f"seasons={list(entities.seasons)}"
    )
    return entities
