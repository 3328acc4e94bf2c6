"""
Endpoint catalog for the nba_api stats endpoints Hoop Hub reads.

Parameter sets mirror the ``required_parameters`` / ``nullable_parameters``
published in the nba_api endpoint docs; ``scripts/check_endpoint_catalog.py``
re-verifies them. Changing a parser version here changes every cache key for
that endpoint.
"""

from typing import Dict, List, Optional

from ..schemas.catalog import (
    TTL_MINUTES_BY_TIER,
    EndpointCatalogEntry,
    QueryIntent,
    VolatilityTier,
)


def resolve_default_ttl_minutes_for_tier(tier: VolatilityTier) -> int:
    """TTL in minutes for a volatility tier (high=15, medium=180, low=1440)."""
    return TTL_MINUTES_BY_TIER[VolatilityTier(tier)]


def _entry(
    endpoint_id: str,
    required: List[str],
    optional: List[str],
    tier: VolatilityTier,
    intents: List[QueryIntent],
    parser_version: str = "v1",
) -> EndpointCatalogEntry:
    return EndpointCatalogEntry(
        endpoint_id=endpoint_id,
        path=f"/stats/{endpoint_id}",
        required_params=required,
        optional_params=optional,
        volatility_tier=tier,
        ttl_minutes=resolve_default_ttl_minutes_for_tier(tier),
        parser_version=parser_version,
        supported_intents=intents,
    )


# Shared leaguedash / teamdashboard filter block
_DASH_FILTERS = [
    "DateFrom",
    "DateTo",
    "GameSegment",
    "LastNGames",
    "Location",
    "MeasureType",
    "Month",
    "OpponentTeamID",
    "Outcome",
    "PaceAdjust",
    "PerMode",
    "Period",
    "PlusMinus",
    "Rank",
    "Season",
    "SeasonSegment",
    "SeasonType",
    "VsConference",
    "VsDivision",
]


ENDPOINT_CATALOG: List[EndpointCatalogEntry] = [
    _entry(
        "leagueleaders",
        required=["LeagueID", "PerMode", "Scope", "Season", "SeasonType", "StatCategory"],
        optional=["ActiveFlag"],
        tier=VolatilityTier.HIGH,
        intents=[QueryIntent.LEAGUE_LEADERS],
    ),
    _entry(
        "playerprofilev2",
        required=["PerMode", "PlayerID"],
        optional=["LeagueID"],
        tier=VolatilityTier.LOW,
        intents=[QueryIntent.LEAGUE_LEADERS],
    ),
    _entry(
        "playergamelog",
        required=["PlayerID", "Season", "SeasonType"],
        optional=["DateFrom", "DateTo", "LeagueID"],
        tier=VolatilityTier.HIGH,
        intents=[QueryIntent.PLAYER_TREND, QueryIntent.LEAGUE_LEADERS],
    ),
    _entry(
        "boxscoretraditionalv2",
        required=["EndPeriod", "EndRange", "GameID", "RangeType", "StartPeriod", "StartRange"],
        optional=[],
        tier=VolatilityTier.MEDIUM,
        intents=[QueryIntent.PLAYER_TREND],
    ),
    _entry(
        "playercareerstats",
        required=["PerMode", "PlayerID"],
        optional=["LeagueID"],
        tier=VolatilityTier.LOW,
        intents=[QueryIntent.PLAYER_COMPARE],
    ),
    _entry(
        "leaguedashplayerstats",
        required=sorted(
            _DASH_FILTERS + ["GameScope", "PlayerExperience", "PlayerPosition", "StarterBench"]
        ),
        optional=[
            "College",
            "Conference",
            "Country",
            "Division",
            "DraftPick",
            "DraftYear",
            "Height",
            "LeagueID",
            "PORound",
            "ShotClockRange",
            "TeamID",
            "TwoWay",
            "Weight",
        ],
        tier=VolatilityTier.HIGH,
        intents=[QueryIntent.PLAYER_COMPARE, QueryIntent.LEAGUE_LEADERS],
    ),
    _entry(
        "leaguedashteamstats",
        required=list(_DASH_FILTERS),
        optional=[
            "Conference",
            "Division",
            "GameScope",
            "LeagueID",
            "PORound",
            "PlayerExperience",
            "PlayerPosition",
            "ShotClockRange",
            "StarterBench",
            "TeamID",
            "TwoWay",
        ],
        tier=VolatilityTier.HIGH,
        intents=[QueryIntent.TEAM_RANKING],
    ),
    _entry(
        "teamdashboardbygeneralsplits",
        required=sorted(_DASH_FILTERS + ["TeamID"]),
        optional=["LeagueID", "PORound", "ShotClockRange"],
        tier=VolatilityTier.MEDIUM,
        intents=[QueryIntent.TEAM_RANKING],
    ),
]

_ENDPOINT_BY_ID: Dict[str, EndpointCatalogEntry] = {
    entry.endpoint_id: entry for entry in ENDPOINT_CATALOG
}


def list_endpoint_catalog() -> List[EndpointCatalogEntry]:
    """All catalog entries, in declaration order."""
    return list(ENDPOINT_CATALOG)


def get_endpoint_catalog_entry(endpoint_id: str) -> Optional[EndpointCatalogEntry]:
    return _ENDPOINT_BY_ID.get(endpoint_id)


def endpoints_for_intent(intent: QueryIntent) -> List[EndpointCatalogEntry]:
    """Catalog entries that can serve a given intent."""
    return [entry for entry in ENDPOINT_CATALOG if intent in entry.supported_intents]
