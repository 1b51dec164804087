"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="opportunity-import",
        description="Import opportunities from web pages into the staging queue",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # run
    run_parser = subparsers.add_parser("run", help="Scrape URLs and stage new opportunities")
    run_parser.add_argument("urls", nargs="+", help="Source page URLs")
    run_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (default: environment variables only)",
    )
    run_parser.add_argument(
        "--backend",
        choices=["http", "sqlite"],
        default=None,
        help="Staging backend (overrides config)",
    )
    run_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        metavar="DB_PATH",
        help="SQLite staging database (sqlite backend)",
    )
    run_parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Skip AI enhancement; use scraped details only",
    )
    run_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the JSON report to file (default: stdout)",
    )

    # normalize
    normalize_parser = subparsers.add_parser(
        "normalize", help="Normalize a saved scrape response without storing anything"
    )
    normalize_parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Scrape response JSON ({'results': [...]} or a list of results)",
    )
    normalize_parser.add_argument(
        "--enhanced",
        type=Path,
        default=None,
        help="JSON mapping of URL -> enhancement bag",
    )
    normalize_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write previews to file",
    )

    # staging
    staging_parser = subparsers.add_parser("staging", help="Query the local staging queue")
    staging_parser.add_argument(
        "action",
        choices=["list", "count"],
        help="List staged records or show count",
    )
    staging_parser.add_argument(
        "--db",
        type=Path,
        default=Path("opportunity_import.db"),
        help="Path to SQLite database",
    )
    staging_parser.add_argument(
        "--status",
        type=str,
        default=None,
        choices=["pending_review", "approved", "rejected", "promoted"],
        help="Filter by review status",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        _run_import(args)
    elif args.command == "normalize":
        _run_normalize(args)
    elif args.command == "staging":
        _run_staging(args)
    else:
        parser.print_help()


def _load_settings(args: argparse.Namespace):
    from opportunity_import.config import ImportSettings
    from opportunity_import.errors import ConfigError

    try:
        settings = ImportSettings.from_yaml(args.config) if args.config else ImportSettings.from_env()
    except ConfigError as e:
        raise SystemExit(str(e))
    updates = {}
    if getattr(args, "backend", None):
        updates["staging_backend"] = args.backend
    if getattr(args, "db", None):
        updates["db_path"] = args.db
    if getattr(args, "no_enrich", False):
        updates["enrich"] = False
    return settings.model_copy(update=updates)


def _run_import(args: argparse.Namespace) -> None:
    """Run import command."""
    from opportunity_import.connectors import HttpEnhancer, HttpScraper
    from opportunity_import.connectors.registry import ConnectorRegistry
    from opportunity_import.errors import StagingWriteError
    from opportunity_import.pipeline import run_import

    settings = _load_settings(args)
    if settings.staging_backend == "sqlite":
        store = ConnectorRegistry.get_staging_store("sqlite", db_path=settings.db_path)
    else:
        store = ConnectorRegistry.get_staging_store("http", settings=settings)
    scraper = HttpScraper(settings)
    enhancer = HttpEnhancer(settings) if settings.enrich else None

    try:
        report = run_import(
            args.urls,
            scraper,
            store,
            enhancer,
            max_length=settings.max_text_length,
        )
    except StagingWriteError as e:
        if e.report is not None:
            print(e.report.summary_message(), file=sys.stderr)
        raise SystemExit(f"Staging write failed: {e}")

    print(report.summary_message(), file=sys.stderr)
    for warning in report.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    output = json.dumps(report.model_dump(mode="json"), indent=2, default=str)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote report to {args.output}", file=sys.stderr)
    else:
        print(output)


def _run_normalize(args: argparse.Namespace) -> None:
    """Run normalize command."""
    from opportunity_import.models.scraped import ScrapeResult
    from opportunity_import.pipeline import preview_scrape_results

    data = json.loads(args.input.read_text(encoding="utf-8"))
    raw_results = data.get("results", []) if isinstance(data, dict) else data
    results = [ScrapeResult.model_validate(r) for r in raw_results]
    enhanced_by_url = (
        json.loads(args.enhanced.read_text(encoding="utf-8")) if args.enhanced else None
    )

    previews = preview_scrape_results(results, enhanced_by_url)
    output = json.dumps(previews, indent=2, default=str)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {len(previews)} previews to {args.output}")
    else:
        print(output)


def _run_staging(args: argparse.Namespace) -> None:
    """Run staging command."""
    from opportunity_import.store import TempOpportunityStore

    store = TempOpportunityStore(args.db)
    if args.action == "list":
        records = store.list_records(status=args.status)
        output = json.dumps(
            [r.model_dump(mode="json") for r in records],
            indent=2,
            default=str,
        )
        print(output)
    elif args.action == "count":
        print(store.count(status=args.status))


if __name__ == "__main__":
    main()
