"""CLI entrypoint: run one aggregation / enrichment cycle."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from rich.console import Console
from rich.table import Table

from aggregator import DataAggregator
from aggregator.scoring import priority_score
from models import AggregationResult, EnrichedItem
from utils.logger import configure_pipeline_logging


console = Console()


def _print_items(result: AggregationResult) -> None:
    table = Table(title="Crisis Feed", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Type", style="magenta")
    table.add_column("Location", style="cyan")
    table.add_column("Source")
    table.add_column("Urgency", justify="right")

    now = result.metadata.last_update
    for index, entry in enumerate(result.items, start=1):
        urgency = str(entry.analysis.urgency) if isinstance(entry, EnrichedItem) else "-"
        table.add_row(
            str(index),
            str(priority_score(entry, now)),
            entry.type.value,
            entry.location,
            entry.source,
            urgency,
        )
    console.print(table)

    meta = result.metadata
    console.print(
        f"sources: {', '.join(meta.sources_used) or '-'} | "
        f"{meta.processing_time_ms} ms | total: {meta.total_results} | kept: {meta.limited_results}"
    )
    for name, message in meta.source_errors.items():
        console.print(f"[yellow]{name}: {message}[/yellow]")
    if meta.error:
        console.print(f"[red]{meta.error}[/red]")


async def _run(args: argparse.Namespace) -> None:
    async with DataAggregator() as aggregator:
        if args.command == "fetch":
            result = await aggregator.fetch_all(use_fixture_data=args.fixture)
            insights = None
        else:
            result, insights = await aggregator.refresh(use_fixture_data=args.fixture)

    if args.json:
        payload = {"result": result.model_dump(mode="json", by_alias=True)}
        if insights is not None:
            payload["insights"] = insights.model_dump(mode="json")
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    _print_items(result)
    if insights is not None:
        console.print()
        console.print(insights.report)
        if insights.executive_summary:
            console.print()
            console.print(insights.executive_summary, markup=False)


def main() -> None:
    parser = argparse.ArgumentParser(description="Crisis data aggregation & enrichment")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("fetch", "fetch, dedupe and rank crisis items"),
        ("refresh", "fetch, enrich and summarize crisis items"),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument("--fixture", action="store_true", help="use the offline fixture data set")
        command.add_argument("--json", action="store_true", help="print JSON instead of a table")
        command.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args()
    configure_pipeline_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
