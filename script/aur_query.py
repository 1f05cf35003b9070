from __future__ import annotations

"""Query the AUR RPC endpoint from the command line.

Usage (with uv):
    uv run python script/aur_query.py info yay paru
    uv run python script/aur_query.py search rust --by name
    uv run python script/aur_query.py --async orphans
"""

import argparse
import asyncio
import sys
from typing import Sequence

from loguru import logger
from rich.console import Console
from rich.table import Table

from aur_rpc import AsyncAurClient, AurClient, AurError, RelationKind, SearchEnvelope
from aur_rpc.config import Settings, get_settings

console = Console()
log = logger.bind(module="script.aur_query")


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=(level or "INFO").upper())


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query the Arch User Repository RPC interface.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Issue the request through the asyncio client.",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the decoded envelope as JSON.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Fetch details for named packages.")
    info.add_argument("packages", nargs="*", help="Package names.")

    search = sub.add_parser("search", help="Search packages.")
    search.add_argument("query", help="Free-text query.")
    group = search.add_mutually_exclusive_group()
    group.add_argument(
        "--by",
        choices=[kind.value for kind in RelationKind],
        default=None,
        help="Field to match the query against.",
    )
    group.add_argument("--maintainer", default=None, help="Filter by maintainer name.")

    sub.add_parser("orphans", help="List packages without a maintainer.")
    return parser


def _run_sync(args: argparse.Namespace, settings: Settings) -> SearchEnvelope:
    with AurClient.from_settings(settings) as client:
        if args.command == "info":
            return client.info(args.packages)
        if args.command == "orphans":
            return client.orphans()
        if args.by:
            return client.search_by(args.query, RelationKind(args.by))
        return client.search(args.query, args.maintainer)


async def _run_async(args: argparse.Namespace, settings: Settings) -> SearchEnvelope:
    async with AsyncAurClient.from_settings(settings) as client:
        if args.command == "info":
            return await client.info(args.packages)
        if args.command == "orphans":
            return await client.orphans()
        if args.by:
            return await client.search_by(args.query, RelationKind(args.by))
        return await client.search(args.query, args.maintainer)


def _render_table(envelope: SearchEnvelope) -> None:
    table = Table(title=f"AUR {envelope.query_type} ({envelope.result_count} results)")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Maintainer")
    table.add_column("Votes", justify="right")
    table.add_column("Description")
    for package in envelope.results:
        table.add_row(
            package.name,
            package.version,
            package.maintainer or "[dim]orphan[/]",
            str(package.num_votes),
            package.description or "",
        )
    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    _configure_logging(settings.log_level)

    try:
        if args.use_async:
            envelope = asyncio.run(_run_async(args, settings))
        else:
            envelope = _run_sync(args, settings)
    except AurError as exc:
        console.print(f"[bold red]Request failed[/] {exc}")
        log.debug("RPC call failed: {!r}", exc)
        return 1

    if envelope.error:
        console.print(f"[bold yellow]Service reported an error[/] {envelope.error}")
    if args.json_output:
        console.print_json(envelope.model_dump_json(by_alias=True))
    else:
        _render_table(envelope)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
