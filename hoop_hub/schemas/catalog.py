"""
Schemas for the static tables the planner consumes.

- QueryIntent: the closed set of question categories
- MetricDefinition: one canonical statistic and the phrases that name it
- EndpointCatalogEntry: one upstream nba_api stats endpoint
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QueryIntent(str, Enum):
    """Question categories the planner can emit."""

    LEAGUE_LEADERS = "league_leaders"
    PLAYER_TREND = "player_trend"
    PLAYER_COMPARE = "player_compare"
    TEAM_RANKING = "team_ranking"
    UNSUPPORTED = "unsupported"

    def __str__(self):
        return self.value


SUPPORTED_INTENTS = tuple(intent for intent in QueryIntent if intent is not QueryIntent.UNSUPPORTED)


class VolatilityTier(str, Enum):
    """How often an endpoint's values change; drives cache TTL."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


TTL_MINUTES_BY_TIER = {
    VolatilityTier.HIGH: 15,
    VolatilityTier.MEDIUM: 180,
    VolatilityTier.LOW: 1440,
}


MetricEntityScope = Literal["player", "team"]


class MetricDefinition(BaseModel):
    """Canonical metric plus the aliases that resolve to it."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable metric id (e.g., 'ast')", min_length=1)
    aliases: List[str] = Field(..., description="Normalized phrases naming this metric")
    allowed_intents: List[QueryIntent]
    allowed_entity_scopes: List[MetricEntityScope]
    required_sources: List[str] = Field(
        default_factory=list, description="Endpoint ids needed to compute the metric"
    )
    formula: Optional[str] = None

    @model_validator(mode="after")
    def _no_unsupported_intent(self):
        if QueryIntent.UNSUPPORTED in self.allowed_intents:
            raise ValueError(f"Metric '{self.id}' cannot allow the unsupported intent")
        return self


class EndpointCatalogEntry(BaseModel):
    """Static description of an upstream stats endpoint."""

    model_config = ConfigDict(frozen=True)

    endpoint_id: str = Field(..., min_length=1, examples=["leagueleaders"])
    path: str = Field(..., pattern=r"^/stats/[a-z0-9]+$", examples=["/stats/leagueleaders"])
    required_params: List[str] = Field(default_factory=list)
    optional_params: List[str] = Field(default_factory=list)
    volatility_tier: VolatilityTier
    ttl_minutes: int = Field(..., gt=0)
    parser_version: str = "v1"
    supported_intents: List[QueryIntent] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_contract(self):
        overlap = sorted(set(self.required_params) & set(self.optional_params))
        if overlap:
            raise ValueError(
                f"Endpoint '{self.endpoint_id}' lists {overlap} as both required and optional"
            )
        expected_ttl = TTL_MINUTES_BY_TIER[self.volatility_tier]
        if self.ttl_minutes != expected_ttl:
            raise ValueError(
                f"Endpoint '{self.endpoint_id}' ttl_minutes={self.ttl_minutes} does not match "
                f"tier '{self.volatility_tier.value}' ({expected_ttl})"
            )
        return self
