"""
Data classes produced by the NLQ planner.

Plans are frozen and use tuples, so a plan cannot be mutated after it is
assembled. Structural invariants (confidence bounds, metric/intent
compatibility, ...) are deliberately NOT enforced here; they are checked by
``planner.validate_query_plan`` so that any plan, including hand-built
fixtures, goes through the same gate.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..schemas.catalog import QueryIntent

WINDOW_LAST_N_GAMES = "last_n_games"


@dataclass(frozen=True)
class MetricSelection:
    """A resolved (or defaulted) metric with its confidence."""

    id: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "confidence": self.confidence}


@dataclass(frozen=True)
class WindowFilter:
    """Rolling window such as 'last 10 games'."""

    n: int
    type: str = WINDOW_LAST_N_GAMES

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "n": self.n}


@dataclass(frozen=True)
class PlanEntities:
    players: Tuple[str, ...] = ()
    teams: Tuple[str, ...] = ()
    seasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "players": list(self.players),
            "teams": list(self.teams),
            "seasons": list(self.seasons),
        }


@dataclass(frozen=True)
class PlanFilters:
    season: Optional[str] = None  # "2023-24"
    window: Optional[WindowFilter] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "season": self.season,
            "window": self.window.to_dict() if self.window else None,
        }


@dataclass(frozen=True)
class QueryPlan:
    """Structured, validated-before-use execution plan for one question."""

    intent: QueryIntent
    entities: PlanEntities = field(default_factory=PlanEntities)
    metrics: Tuple[MetricSelection, ...] = ()
    filters: PlanFilters = field(default_factory=PlanFilters)
    confidence: float = 0.0
    reasons: Tuple[str, ...] = ()

    @property
    def is_supported(self) -> bool:
        return self.intent != QueryIntent.UNSUPPORTED

    @property
    def metric_ids(self) -> Tuple[str, ...]:
        return tuple(metric.id for metric in self.metrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": QueryIntent(self.intent).value,
            "entities": self.entities.to_dict(),
            "metrics": [metric.to_dict() for metric in self.metrics],
            "filters": self.filters.to_dict(),
            "confidence": self.confidence,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class PlanValidationResult:
    """Outcome of ``validate_query_plan``; ``code`` names the violated invariant."""

    ok: bool
    code: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "PlanValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, code: str, error: str) -> "PlanValidationResult":
        return cls(ok=False, code=code, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True}
        return {"ok": False, "code": self.code, "error": self.error}
