"""Command line interface for running the collections summary pipeline."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from .analytics import accounts_requiring_follow_up, accounts_without_promises, channel_effectiveness
from .config import load_settings
from .ingestion import build_report, export_report, load_assignments, load_contact_events, rejections_to_dataframe
from .models import Assignment
from .orchestrator import SummaryOrchestrator


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Summarize collections contact activity per account and write a flat report",
    )
    parser.add_argument("events", help="Path to the contact activity spreadsheet (CSV, TSV or XLSX)")
    parser.add_argument("output", help="Path where the account report should be written")
    parser.add_argument(
        "--assignments",
        default=None,
        help="Path to the account assignment roster; every listed account appears in the report",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an optional pipeline configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--mode",
        choices=["sequential", "concurrent"],
        default=None,
        help="Whether to summarize accounts sequentially or on a thread pool",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Maximum number of workers to use in concurrent mode",
    )
    parser.add_argument(
        "--rejections",
        default=None,
        help="Optional path where rejected source rows are written",
    )
    parser.add_argument(
        "--analytics-dir",
        default=None,
        help="Optional directory for follow-up, no-promise and channel effectiveness reports",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD) for follow-up analytics; defaults to today",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    settings = load_settings(args.config)
    loaded = load_contact_events(args.events, column_mapping=settings.event_columns)

    assignments = None
    if args.assignments:
        assignments = load_assignments(args.assignments, column_mapping=settings.assignment_columns)

    concurrent = settings.concurrent if args.mode is None else args.mode == "concurrent"
    orchestrator = SummaryOrchestrator(
        dialer_actor=settings.dialer_actor,
        promise_outcome=settings.promise_outcome,
        concurrent=concurrent,
        max_workers=args.max_workers or settings.max_workers,
    )
    roster = [assignment.account_id for assignment in assignments] if assignments is not None else None
    batch = orchestrator.run(loaded.events, roster)

    if assignments is None:
        assignments = [Assignment(account_id=summary.account_id) for summary in batch.summaries]
    report = build_report(assignments, batch)
    export_report(report, args.output)

    if args.rejections:
        export_report(rejections_to_dataframe(loaded.rejected), args.rejections)

    if args.analytics_dir:
        directory = Path(args.analytics_dir)
        as_of = args.as_of or date.today()
        export_report(
            accounts_without_promises(report, settings.min_activities_without_promise),
            directory / "accounts_without_promises.csv",
        )
        export_report(channel_effectiveness(batch), directory / "channel_effectiveness.csv")
        export_report(
            accounts_requiring_follow_up(report, as_of, settings.follow_up_days),
            directory / "accounts_requiring_follow_up.csv",
        )
        logging.info("Analytics written to %s", directory.resolve())

    logging.info(
        "Summarized %s accounts from %s contact events (%s rejected, %s orphaned)",
        len(batch.summaries),
        len(loaded.events),
        len(loaded.rejected),
        batch.orphaned_count,
    )
    logging.info("Report written to %s", Path(args.output).resolve())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
