"""Hoop Hub core: NBA question planning and stats cache provenance."""

from hoop_hub.errors import HoopHubError, InvalidRequestError, QueryPlanInvariantError
from hoop_hub.nlq import QueryPlan, QueryPlanner, plan_question
from hoop_hub.store import open_data_store

__all__ = [
    "HoopHubError",
    "InvalidRequestError",
    "QueryPlanInvariantError",
    "QueryPlan",
    "QueryPlanner",
    "plan_question",
    "open_data_store",
]

__version__ = "0.1.0"
