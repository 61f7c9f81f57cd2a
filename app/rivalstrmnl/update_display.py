"""Fetch one player's Marvel Rivals stats and push them to a TRMNL plugin.

Run by the scheduler once per player:

    python -m rivalstrmnl.update_display --username NAME --plugin-id ID
"""
import argparse
import json
import logging
from typing import Optional, Sequence

from .config import Settings, load_settings
from .errors import ConfigError, DownstreamError, UpstreamError
from .log import configure_logging
from .services.account import fetch_account
from .services.client import StatsClient
from .services.enrich import enrich_matches
from .services.history import fetch_match_history
from .services.payload import build_matches_document, build_summary_document
from .services.reference import ReferenceResolver
from .version import __version__
from .webhook.sender import DisplayClient, publish_documents

log = logging.getLogger("rivalstrmnl.update_display")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send a player's Marvel Rivals stats to a TRMNL custom plugin.",
    )
    parser.add_argument("--plugin-id", help="TRMNL custom plugin id (env TRMNL_PLUGIN_ID).")
    parser.add_argument("--api-key", help="Stats API key (env RIVALS_API_KEY).")
    parser.add_argument("--username", help="Player name to report (env RIVALS_USERNAME).")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build both documents and log them instead of posting.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def build_documents(settings: Settings, stats: StatsClient) -> tuple[dict, dict]:
    """Run the fetch and transform steps; return (summary, matches) documents."""
    resolver = ReferenceResolver(stats)
    profile = fetch_account(
        stats,
        settings.username,
        resolver,
        stale_after=settings.stale_after,
        cooldown=settings.refresh_cooldown,
    )
    summaries = fetch_match_history(stats, settings.username)
    records = enrich_matches(stats, summaries, settings.username, resolver)
    if summaries:
        profile.season = summaries[0].season
    return build_summary_document(profile), build_matches_document(records)


def run_update(
    settings: Settings,
    stats: Optional[StatsClient] = None,
    display: Optional[DisplayClient] = None,
) -> None:
    stats = stats or StatsClient.from_settings(settings)
    summary, matches = build_documents(settings, stats)

    if settings.dry_run:
        log.info("Dry run; summary document: %s", json.dumps(summary, sort_keys=True))
        log.info("Dry run; match document: %s", json.dumps(matches, sort_keys=True))
        return

    display = display or DisplayClient.from_settings(settings)
    publish_documents(display, summary, matches, delay=settings.publish_delay)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = load_settings(
            {"plugin_id": args.plugin_id, "api_key": args.api_key, "username": args.username},
            dry_run=args.dry_run,
        )
    except ConfigError as exc:
        log.error("Configuration error: %s", exc)
        return 2

    log.info("=== Display update for %s (plugin %s) start ===", settings.username, settings.plugin_id)
    try:
        run_update(settings)
    except UpstreamError as exc:
        log.error("Stats API failure for %s: %s", settings.username, exc)
        return 1
    except DownstreamError as exc:
        log.error("Display update for %s failed: %s", settings.username, exc)
        return 1
    except Exception:
        log.exception("Unexpected error updating display for %s", settings.username)
        return 1

    log.info("=== Display update for %s complete ===", settings.username)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
