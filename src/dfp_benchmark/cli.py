"""Command-line interface for the account benchmarking core.

Provides subcommands: `companies`, `years`, `accounts`, `values`, `peers`
and `compare`. Each command is implemented as a `cmd_*` function that
accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv
import pandas as pd

from dfp_benchmark.benchmark import Benchmark
from dfp_benchmark.config import get_settings
from dfp_benchmark.db import get_collection
from dfp_benchmark.exceptions import BenchmarkError
from dfp_benchmark.logging_config import configure_logging
from dfp_benchmark.sector.matcher import SectorMatcher
from dfp_benchmark.sector.scoring import SCORERS
from dfp_benchmark.sector.source import YamlSectorSource
from dfp_benchmark.store import FrameAccountStore, MongoAccountStore

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _open_store(snapshot: bool = False) -> Any:
    """Return the configured account store.

    Args:
        snapshot: Load the whole collection into Dask first instead of
            querying MongoDB for every operation.
    """
    s = get_settings()
    collection = get_collection(s)
    if snapshot:
        return FrameAccountStore.from_collection(collection)
    return MongoAccountStore(collection)


def _benchmark(args: argparse.Namespace) -> Benchmark:
    s = get_settings()
    scorer = SCORERS[getattr(args, "scorer", "levenshtein")]()
    matcher = SectorMatcher(YamlSectorSource(s.sectors_file), scorer)
    return Benchmark(_open_store(getattr(args, "snapshot", False)), matcher)


def _print_frame(pdf: pd.DataFrame) -> None:
    if pdf.empty:
        print("(no rows)")
        return
    print(pdf.to_string(index=False))


# --------------------------------------------------
# Commands
# --------------------------------------------------
def cmd_companies(args: argparse.Namespace) -> None:
    """Print the companies available in the store."""
    for name in _open_store(args.snapshot).companies():
        print(name)


def cmd_years(args: argparse.Namespace) -> None:
    """Print the first and last year with reported data."""
    begin, end = _open_store(args.snapshot).year_range()
    print(f"{begin} - {end}")


def cmd_accounts(args: argparse.Namespace) -> None:
    """Print the account catalog of a company."""
    bench = _benchmark(args)
    items = bench.catalog.items(args.company)
    _print_frame(pd.DataFrame([i.model_dump() for i in items]))


def cmd_values(args: argparse.Namespace) -> None:
    """Print the account values of a company for one exercise."""
    bench = _benchmark(args)
    values = bench.extractor.values(args.company, args.year, args.penultimate)
    _print_frame(
        pd.DataFrame(sorted(values.items()), columns=["code", "value"])
    )


def cmd_peers(args: argparse.Namespace) -> None:
    """Print the stored companies matched as sector peers."""
    peers = _benchmark(args).peers(args.company)
    if not peers:
        print("No sector peers found.")
    for name in peers:
        print(name)


def cmd_compare(args: argparse.Namespace) -> None:
    """Print the company's accounts next to the sector average."""
    bench = _benchmark(args)
    if not bench.store.has_company(args.company):
        log.warning("Company %r not found in the store", args.company)

    cmp_ = bench.compare(args.company, args.year, args.penultimate)
    _print_frame(cmp_.to_frame())
    if cmp_.has_sector_comparison:
        print(f"\nSector peers ({len(cmp_.peers)}): " + "; ".join(cmp_.peers))
    else:
        print("\nSector comparison unavailable.")


COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "companies": cmd_companies,
    "years": cmd_years,
    "accounts": cmd_accounts,
    "values": cmd_values,
    "peers": cmd_peers,
    "compare": cmd_compare,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="dfp-benchmark")
    p.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    p.add_argument(
        "--snapshot",
        action="store_true",
        help="load the collection into Dask before querying",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("companies")
    sub.add_parser("years")

    p_accounts = sub.add_parser("accounts")
    p_accounts.add_argument("company")

    p_peers = sub.add_parser("peers")
    p_peers.add_argument("company")
    p_peers.add_argument("--scorer", choices=sorted(SCORERS), default="levenshtein")

    for name in ("values", "compare"):
        sp = sub.add_parser(name)
        sp.add_argument("company")
        sp.add_argument("--year", type=int, required=True)
        sp.add_argument("--penultimate", action="store_true")
        if name == "compare":
            sp.add_argument("--scorer", choices=sorted(SCORERS), default="levenshtein")

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(
        Path("logs/benchmark.log"),
        logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        COMMANDS[args.cmd](args)
    except BenchmarkError as e:
        log.error("%s failed: %s", args.cmd, e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
