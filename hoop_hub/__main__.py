# __main__.py
"""
Command line planner.

    python -m hoop_hub "Who averaged the most assists in 2023-24?"
    python -m hoop_hub --json "Compare Stephen Curry vs Damian Lillard"

Exit status is 0 for any valid plan (including ``unsupported``), 1 when the
planner produced an invalid plan, 2 for usage errors.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from hoop_hub import __version__
from hoop_hub.config import configure_logging, load_settings
from hoop_hub.errors import HoopHubError, QueryPlanInvariantError
from hoop_hub.nlq import QueryPlan, QueryPlanner, plan_question
from hoop_hub.observability import get_metrics
from hoop_hub.store import open_data_store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoop-hub", description="Plan an NBA statistics question."
    )
    parser.add_argument("question", help="Natural-language question")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON")
    parser.add_argument(
        "--record",
        action="store_true",
        help="Record a query trace in the configured data store",
    )
    parser.add_argument("--session-id", default="cli", help="Session id used with --record")
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Write Prometheus metrics to stderr after planning",
    )
    parser.add_argument("--log-level", default=None, help="Override HOOP_HUB_LOG_LEVEL")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def render_plan(plan: QueryPlan, console: Console, trace_id: Optional[str] = None) -> None:
    table = Table(title="Query plan", show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")

    table.add_row("intent", plan.intent.value)
    table.add_row("confidence", f"{plan.confidence:.2f}")
    table.add_row(
        "metrics",
        ", ".join(f"{m.id} ({m.confidence:.2f})" for m in plan.metrics) or "-",
    )
    table.add_row("players", ", ".join(plan.entities.players) or "-")
    table.add_row("teams", ", ".join(plan.entities.teams) or "-")
    table.add_row("season", plan.filters.season or "-")
    table.add_row("window", f"last {plan.filters.window.n} games" if plan.filters.window else "-")
    if trace_id:
        table.add_row("trace", trace_id)

    console.print(table)
    for reason in plan.reasons:
        console.print(f"  • {reason}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)
    console = Console()

    trace_id = None
    try:
        if args.record:
            with open_data_store(settings.db_path, settings.store_backend) as store:
                planned = QueryPlanner(store).submit(
                    {"session_id": args.session_id, "message": args.question}
                )
            plan, trace_id = planned.plan, planned.trace_id
        else:
            plan = plan_question(args.question)
    except QueryPlanInvariantError as e:
        logger.error(e.message)
        if args.json:
            print(json.dumps(e.to_dict(), indent=2))
        return 1
    except HoopHubError as e:
        logger.error(e.message)
        return 2

    if args.json:
        output = plan.to_dict()
        if trace_id:
            output["trace_id"] = trace_id
        print(json.dumps(output, indent=2))
    else:
        render_plan(plan, console, trace_id)

    if args.metrics:
        sys.stderr.write(get_metrics().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
