"""
Golden planner queries for Hoop Hub.

Each entry pins the full plan the planner must produce for one question.
They cover every intent, the default-metric fallback, the unresolved-cue
downgrade and the main entity extraction paths, and act as regression
tests for the rule table.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class GoldenQuery:
    """
    A golden question with its expected plan.

    Attributes:
        id: Unique identifier for the query
        name: Human-readable name
        query: Raw question text
        intent: Expected plan intent
        category: Query category (leaders, trend, comparison, ranking, unsupported)
        metrics: Expected metric ids, in order
        confidence: Expected plan confidence
        players: Expected players, in vocabulary order
        teams: Expected teams
        season: Expected season filter
        window_n: Expected "last N games" count
        defaulted: True when the metric comes from the per-intent default
        reason_fragments: Substrings that must appear among the plan reasons
    """

    id: str
    name: str
    query: str
    intent: str
    category: str
    metrics: Tuple[str, ...]
    confidence: float
    players: Tuple[str, ...] = ()
    teams: Tuple[str, ...] = ()
    season: Optional[str] = None
    window_n: Optional[int] = None
    defaulted: bool = False
    reason_fragments: Tuple[str, ...] = field(default_factory=tuple)


# ============================================================================
# GOLDEN QUERIES
# ============================================================================

GOLDEN_QUERIES = [
    # ────────────────────────────────────────────────────────────────────
    # LEADERS
    # ────────────────────────────────────────────────────────────────────
    GoldenQuery(
        id="leaders_001",
        name="Assist leader for a season",
        query="Who averaged the most assists in 2023-24?",
        intent="league_leaders",
        category="leaders",
        metrics=("ast",),
        confidence=0.8,
        season="2023-24",
        reason_fragments=("Parsed season filter: 2023-24.",),
    ),
    GoldenQuery(
        id="leaders_002",
        name="Two metric leaders by shorthand",
        query="Top APG and RPG?",
        intent="league_leaders",
        category="leaders",
        metrics=("ast", "reb"),
        confidence=0.8,
    ),
    GoldenQuery(
        id="leaders_003",
        name="Highest scoring with season",
        query="Highest scoring average, 2019-20",
        intent="league_leaders",
        category="leaders",
        metrics=("pts",),
        confidence=0.8,
        season="2019-20",
    ),
    # ────────────────────────────────────────────────────────────────────
    # TREND
    # ────────────────────────────────────────────────────────────────────
    GoldenQuery(
        id="trend_001",
        name="Rebounds over last 10 games",
        query="Show Nikola Jokic rebounds over his last 10 games",
        intent="player_trend",
        category="trend",
        metrics=("reb",),
        confidence=0.8,
        players=("nikola jokic",),
        window_n=10,
        reason_fragments=("Parsed rolling window: last 10 games.",),
    ),
    GoldenQuery(
        id="trend_002",
        name="Accented name with bare last-N window",
        query="Nikola Jokić last 5",
        intent="player_trend",
        category="trend",
        metrics=("pts",),
        confidence=0.6,
        players=("nikola jokic",),
        window_n=5,
        defaulted=True,
    ),
    GoldenQuery(
        id="trend_003",
        name="Trend keyword without window",
        query="Domantas Sabonis boards trending?",
        intent="player_trend",
        category="trend",
        metrics=("reb",),
        confidence=0.6,
        players=("domantas sabonis",),
    ),
    # ────────────────────────────────────────────────────────────────────
    # COMPARISON
    # ────────────────────────────────────────────────────────────────────
    GoldenQuery(
        id="compare_001",
        name="Comparison with default metric",
        query="Compare Stephen Curry vs Damian Lillard this season",
        intent="player_compare",
        category="comparison",
        metrics=("pts",),
        confidence=0.6,
        players=("stephen curry", "damian lillard"),
        defaulted=True,
        reason_fragments=("Applied default metric 'pts' for intent 'player_compare'.",),
    ),
    GoldenQuery(
        id="compare_002",
        name="Comparison with explicit metric",
        query="LeBron James versus Kevin Durant points per game",
        intent="player_compare",
        category="comparison",
        metrics=("pts",),
        confidence=0.8,
        players=("lebron james", "kevin durant"),
    ),
    # ────────────────────────────────────────────────────────────────────
    # TEAM RANKING
    # ────────────────────────────────────────────────────────────────────
    GoldenQuery(
        id="ranking_001",
        name="Teams by defensive rating",
        query="Which teams have the best defensive rating?",
        intent="team_ranking",
        category="ranking",
        metrics=("drtg",),
        confidence=0.8,
    ),
    GoldenQuery(
        id="ranking_002",
        name="Team rank with default metric",
        query="Where do the Boston Celtics rank?",
        intent="team_ranking",
        category="ranking",
        metrics=("drtg",),
        confidence=0.6,
        teams=("boston celtics",),
        defaulted=True,
    ),
    # ────────────────────────────────────────────────────────────────────
    # UNSUPPORTED
    # ────────────────────────────────────────────────────────────────────
    GoldenQuery(
        id="unsupported_001",
        name="Unregistered metric cue downgrades a trend",
        query="Show Stephen Curry trend for steals this season",
        intent="unsupported",
        category="unsupported",
        metrics=(),
        confidence=0.3,
        players=("stephen curry",),
        reason_fragments=("Unsupported metric cues detected (steals).",),
    ),
    GoldenQuery(
        id="unsupported_002",
        name="Leader keyword without a registered metric",
        query="Who has the most steals?",
        intent="unsupported",
        category="unsupported",
        metrics=(),
        confidence=0.3,
        reason_fragments=("No high-confidence intent match.",),
    ),
    GoldenQuery(
        id="unsupported_003",
        name="Metric without any intent signal",
        query="Who leads the league in points?",
        intent="unsupported",
        category="unsupported",
        metrics=("pts",),
        confidence=0.3,
    ),
    GoldenQuery(
        id="unsupported_004",
        name="Zero-game window is ignored",
        query="Tyrese Haliburton assists last 0 games",
        intent="unsupported",
        category="unsupported",
        metrics=("ast",),
        confidence=0.3,
        players=("tyrese haliburton",),
    ),
]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def get_query_by_id(query_id: str) -> Optional[GoldenQuery]:
    for query in GOLDEN_QUERIES:
        if query.id == query_id:
            return query
    return None


def get_queries_by_category(category: str) -> List[GoldenQuery]:
    return [q for q in GOLDEN_QUERIES if q.category == category]


def get_queries_by_intent(intent: str) -> List[GoldenQuery]:
    return [q for q in GOLDEN_QUERIES if q.intent == intent]


def get_query_statistics() -> Dict[str, int]:
    """Number of golden queries per category."""
    stats: Dict[str, int] = {}
    for query in GOLDEN_QUERIES:
        stats[query.category] = stats.get(query.category, 0) + 1
    return stats
