"""
TennTrend - Daily Scan
Fetch upcoming matches, enrich them with AI predictions and publish the day's picks.
"""
import asyncio
import argparse
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

# Core imports
from core.http_client import HttpClient
from core.errors import ConfigurationError, PersistenceError, UpstreamError
from core.quota import QuotaTracker
from config.settings import (
    HTTP_TIMEOUT, HTTP_CONCURRENCY, HTTP_RETRIES, HTTP_BACKOFF_SECONDS,
    ORACLE_TIMEOUT, ORACLE_RETRIES, ORACLE_BACKOFF_SECONDS,
    MIN_EV_THRESHOLD, MAX_MATCHES_PER_TOUR, SCAN_WINDOW_HOURS, SCAN_TIMEZONE,
    ODDS_API_MONTHLY_QUOTA, QUOTA_FILE, DATA_DIR, LOGS_DIR, RESULTS_HISTORY_FILE,
)
from config.leagues import get_league_config

# Scrapers
from scrapers.odds_api import OddsApiClient

# Oracles
from oracle.enricher import PredictionEnricher
from oracle.gemini import GeminiOracle
from oracle.groq import GroqOracle

# Analysis
from analysis.bet_selector import BetSelector

# Storage
from storage.history_store import HistoryStore
from storage.output_manager import STATUS_ORACLE_UNAVAILABLE, STATUS_UNAVAILABLE, OutputManager

# Notifications
from notifications.discord import DiscordNotifier

# Utils
from utils.logging_config import setup_logging, log_performance_metric

logger = logging.getLogger(__name__)


def scan_date(now: datetime) -> str:
    """Calendar date of the scan in local (Swedish) time."""
    return now.astimezone(ZoneInfo(SCAN_TIMEZONE)).strftime("%Y-%m-%d")


async def report_unavailable(output_manager: OutputManager, notifier: DiscordNotifier,
                             error, args, status: str = STATUS_UNAVAILABLE,
                             what: str = "Match data"):
    """Keep yesterday's picks, flagged as stale, and say so on Discord."""
    logger.error(f"\n❌ {what} unavailable: {error}")
    if args.dry_run:
        return
    output_manager.mark_unavailable(str(error), status=status)
    if not args.no_discord:
        await notifier.send_unavailable(str(error), what)


async def main(args) -> int:
    """Main application logic."""
    # Setup
    session_timestamp = setup_logging("daily_scan")
    output_manager = OutputManager()

    logger.info("=" * 100)
    logger.info("TENNTREND - Daily Scan")
    logger.info("=" * 100)
    logger.info(f"Minimum EV threshold: {args.min_ev:.1f}%")
    logger.info(f"Max matches per tour: {args.max_matches}")
    if args.dry_run:
        logger.info("Dry run: nothing will be written or sent")

    start_time = time.time()
    now = datetime.now(timezone.utc)
    today = scan_date(now)
    quota = QuotaTracker(ODDS_API_MONTHLY_QUOTA, QUOTA_FILE)

    async with HttpClient(timeout=HTTP_TIMEOUT, concurrency=HTTP_CONCURRENCY,
                          retries=HTTP_RETRIES, backoff=HTTP_BACKOFF_SECONDS) as http, \
            HttpClient(timeout=ORACLE_TIMEOUT, concurrency=2,
                       retries=ORACLE_RETRIES, backoff=ORACLE_BACKOFF_SECONDS) as oracle_http:
        odds_api = OddsApiClient(http, quota)
        notifier = DiscordNotifier(http)

        logger.info("\n📊 Fetching upcoming matches...")
        try:
            matches, league_stats = await odds_api.fetch_matches(
                now, window_hours=SCAN_WINDOW_HOURS, max_per_tour=args.max_matches
            )
        except (UpstreamError, ConfigurationError) as e:
            await report_unavailable(output_manager, notifier, e, args)
            return 1

        fetch_duration = time.time() - start_time
        log_performance_metric("fetch_time", fetch_duration, "seconds")
        log_performance_metric("odds_api_remaining", quota.remaining(), "requests")

        logger.info("\n" + "=" * 100)
        logger.info("DATA COLLECTION SUMMARY")
        logger.info("=" * 100)
        for league, stats in league_stats.items():
            name = (get_league_config(league) or {}).get("display_name", league)
            logger.info(f"{name}: {stats['gamesFound']} matches")
        logger.info(f"Odds API quota left: {quota.remaining()}")

        # AI predictions
        logger.info("\n🤖 Requesting AI predictions...")
        oracle_start = time.time()
        enricher = PredictionEnricher([GeminiOracle(oracle_http), GroqOracle(oracle_http)])
        matches = await enricher.enrich(matches)
        log_performance_metric("oracle_time", time.time() - oracle_start, "seconds")
        if enricher.unavailable:
            await report_unavailable(
                output_manager, notifier, f"no oracle answered for {len(matches)} matches", args,
                status=STATUS_ORACLE_UNAVAILABLE, what="AI analysis",
            )
            return 0

        # Selection
        logger.info("\n💰 Selecting picks...")
        picks = BetSelector(min_ev=args.min_ev).select(matches)

        if not args.dry_run:
            output_manager.save_daily_picks(picks, today, league_stats, enricher.used_oracle)
            output_manager.save_value_bets_csv(picks)

            try:
                store = HistoryStore.load(str(Path(DATA_DIR) / RESULTS_HISTORY_FILE))
                store.record_picks(picks, today)
                store.save()
            except PersistenceError as e:
                logger.error(f"❌ Results history not updated: {e}")

            if not args.no_discord:
                await notifier.send_daily_picks(picks)

    logger.info(f"\n✅ Found {len(picks.value_bets)} value bets and {len(picks.safe_bets)} safe bets")
    if picks.bet_of_the_day:
        logger.info(f"🏆 Bet of the Day: {picks.bet_of_the_day.label}")
    if picks.value_bets or picks.safe_bets:
        output_manager.print_summary(picks, top_n=args.top_n)

    # Final summary
    total_duration = time.time() - start_time
    log_performance_metric("total_runtime", total_duration, "seconds")

    logger.info("\n" + "=" * 100)
    logger.info("📁 Output saved to:")
    logger.info(f"   {Path(DATA_DIR).absolute()}/")
    logger.info("   - daily-picks.json (dashboard payload)")
    logger.info("   - value-bets.csv (Excel-ready)")
    logger.info(f"   - {RESULTS_HISTORY_FILE} (tracked picks)")
    logger.info(f"\n📊 Logs saved to:")
    logger.info(f"   {Path(LOGS_DIR).absolute()}/")
    logger.info(f"   - daily_scan_{session_timestamp}.log (main log)")
    logger.info(f"   - picks_{session_timestamp}.log (pick tracking)")
    logger.info(f"   - performance_{session_timestamp}.log (performance metrics)")
    logger.info("=" * 100)
    logger.info(f"\n⏱️  Total runtime: {total_duration:.1f} seconds")
    return 0


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="TennTrend daily scan")

    parser.add_argument(
        "--min-ev",
        type=float,
        default=MIN_EV_THRESHOLD,
        help=f"Minimum expected value in percent (default: {MIN_EV_THRESHOLD:.1f}%%)"
    )

    parser.add_argument(
        "--max-matches",
        type=int,
        default=MAX_MATCHES_PER_TOUR,
        help=f"Maximum matches analyzed per tour (default: {MAX_MATCHES_PER_TOUR})"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of top bets to display (default: 10)"
    )

    parser.add_argument(
        "--no-discord",
        action="store_true",
        help="Do not post to the Discord webhook"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and analyze only; write no files and send nothing"
    )

    return parser.parse_args()


if __name__ == "__main__":
    args = parse_arguments()
    sys.exit(asyncio.run(main(args)))
