"""CLI entry point for the freelancer matching service."""

import argparse
import asyncio
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any

import yaml

from matchmaker.core.config import Settings
from matchmaker.core.db import init_db, upsert_profile
from matchmaker.core.errors import MatchmakerError
from matchmaker.core.schemas import DisplayProfile, MatchResult
from matchmaker.embedding import get_embedder
from matchmaker.llm import get_provider
from matchmaker.matching.explainer import LLMExplainer
from matchmaker.matching.ranker import MatchRanker, export_matches_json
from matchmaker.store.sqlite import SqliteMatchStore


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Local-services marketplace - match freelancers to jobs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- match ---
    match_parser = subparsers.add_parser("match", help="Find freelancers for a job")
    target = match_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--job-id", help="Match a stored job request (uses its embedding)")
    target.add_argument("--description", help="Match an ad-hoc job description")
    match_parser.add_argument("--date", help="Requested date (YYYY-MM-DD, today, tomorrow)")
    match_parser.add_argument("--time", help="Free-text time, e.g. '9am' or 'evening'")
    match_parser.add_argument(
        "--time-of-day",
        choices=["morning", "afternoon", "evening"],
        help="Requested time of day",
    )
    match_parser.add_argument("--postcode", help="Job postcode, e.g. 1312AB")
    match_parser.add_argument("--address", help="Job address")
    match_parser.add_argument("--limit", type=int, help="Maximum number of matches")
    match_parser.add_argument("--threshold", type=float, help="Minimum similarity")
    match_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_common(match_parser)

    # --- add-freelancer ---
    freelancer_parser = subparsers.add_parser(
        "add-freelancer",
        help="Create or update a freelancer profile from YAML",
    )
    freelancer_parser.add_argument("--file", required=True, help="Path to freelancer YAML")
    freelancer_parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip headline and skill tag generation",
    )
    _add_common(freelancer_parser)

    # --- add-job ---
    job_parser = subparsers.add_parser("add-job", help="Create a job request from YAML")
    job_parser.add_argument("--file", required=True, help="Path to job YAML")
    job_parser.add_argument("--client-id", required=True, help="Client profile id")
    _add_common(job_parser)

    # --- reembed ---
    reembed_parser = subparsers.add_parser(
        "reembed",
        help="Regenerate stored embeddings from composite text",
    )
    reembed_parser.add_argument("--jobs", action="store_true", help="Only job requests")
    reembed_parser.add_argument("--freelancers", action="store_true", help="Only freelancers")
    _add_common(reembed_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_yaml(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        msg = f"File not found: {p}"
        raise FileNotFoundError(msg)
    return yaml.safe_load(p.read_text()) or {}


def _build_query(args: argparse.Namespace) -> dict[str, Any]:
    query: dict[str, Any] = {"description": args.description}
    window = {
        k: v for k, v in {
            "date": args.date,
            "time": args.time,
            "time_of_day": args.time_of_day,
        }.items() if v
    }
    if window:
        query["time_window"] = window
    location = {k: v for k, v in {"postcode": args.postcode, "address": args.address}.items() if v}
    if location:
        query["location"] = location
    return query


def _print_matches(matches: list[MatchResult]) -> None:
    if not matches:
        print("No matching freelancers found.")
        return
    print(f"{len(matches)} matching freelancers:")
    for i, m in enumerate(matches, start=1):
        name = m.full_name or m.headline or m.freelancer_profile_id
        flags = []
        if m.has_exact_availability_match:
            flags.append("available")
        if m.has_location_match:
            flags.append("in range")
        print(f"  {i}. {name} (similarity {m.similarity:.2f}, "
              f"relevance {m.relevance_score:.2f}) [{', '.join(flags)}]")
        print(f"     {m.explanation}")


async def cmd_match(args: argparse.Namespace, settings: Settings, conn: sqlite3.Connection) -> None:
    """Handle match subcommand."""
    explainer = LLMExplainer(
        get_provider(settings.explanation.provider),
        model=settings.explanation.model,
    )
    ranker = MatchRanker.from_settings(
        settings,
        SqliteMatchStore(conn),
        get_embedder(settings.embedding.provider),
        explainer,
    )

    if args.job_id:
        matches = await ranker.find_matches_for_job_request(args.job_id, args.limit, args.threshold)
    else:
        matches = await ranker.find_matches_for_job(_build_query(args), args.limit, args.threshold)

    if args.export == "json":
        print(export_matches_json(matches))
    else:
        _print_matches(matches)


def cmd_add_freelancer(args: argparse.Namespace, settings: Settings, conn: sqlite3.Connection) -> None:
    """Handle add-freelancer subcommand."""
    from matchmaker.services.freelancers import save_freelancer_profile

    data = _load_yaml(args.file)
    full_name = data.pop("full_name", None)
    profile_photo = data.pop("profile_photo", None)

    llm = None if args.no_llm else get_provider(settings.explanation.provider)
    profile = save_freelancer_profile(
        conn,
        get_embedder(settings.embedding.provider),
        data,
        llm=llm,
        embedding_model=settings.embedding.model,
        llm_model=settings.explanation.model,
    )
    if full_name or profile_photo:
        upsert_profile(
            conn,
            DisplayProfile(id=profile.profile_id, full_name=full_name, profile_photo=profile_photo),
            role="freelancer",
        )

    print(f"Freelancer profile saved: {profile.id}")
    print(f"  Headline: {profile.headline or '-'}")
    print(f"  Skills: {', '.join(profile.skills) or '-'}")


def cmd_add_job(args: argparse.Namespace, settings: Settings, conn: sqlite3.Connection) -> None:
    """Handle add-job subcommand."""
    from matchmaker.services.jobs import create_job_request

    job = create_job_request(
        conn,
        get_embedder(settings.embedding.provider),
        args.client_id,
        _load_yaml(args.file),
        model=settings.embedding.model,
    )
    print(f"Job request created: {job.id}")
    print(f"Run: python main.py match --job-id {job.id}")


def cmd_reembed(args: argparse.Namespace, settings: Settings, conn: sqlite3.Connection) -> None:
    """Handle reembed subcommand."""
    from matchmaker.services.reembed import reembed_freelancers, reembed_jobs

    embedder = get_embedder(settings.embedding.provider)
    do_all = not args.jobs and not args.freelancers

    results = []
    if args.jobs or do_all:
        results += reembed_jobs(conn, embedder, settings.embedding.model)
    if args.freelancers or do_all:
        results += reembed_freelancers(conn, embedder, settings.embedding.model)

    failed = [r for r in results if not r.success]
    print(f"Re-embedded {len(results) - len(failed)}/{len(results)} records.")
    for r in failed:
        print(f"  {r.record_id}: {r.error}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    conn = init_db(settings.database.path)
    try:
        if args.command == "match":
            asyncio.run(cmd_match(args, settings, conn))
        elif args.command == "add-freelancer":
            cmd_add_freelancer(args, settings, conn)
        elif args.command == "add-job":
            cmd_add_job(args, settings, conn)
        elif args.command == "reembed":
            cmd_reembed(args, settings, conn)
    except (MatchmakerError, FileNotFoundError, ImportError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
