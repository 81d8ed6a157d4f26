"""
TennTrend - Results Update
Settle pending picks in the results history against final scores.
"""
import asyncio
import argparse
import logging
import sys
import time
from pathlib import Path

from core.http_client import HttpClient
from core.errors import PersistenceError
from core.quota import QuotaTracker
from config.settings import (
    HTTP_TIMEOUT, HTTP_CONCURRENCY, HTTP_RETRIES, HTTP_BACKOFF_SECONDS,
    ODDS_API_KEY, ODDS_API_MONTHLY_QUOTA, QUOTA_FILE, DATA_DIR,
    RESULTS_HISTORY_FILE, SETTLEMENT_DAY_TOLERANCE,
)
from scrapers.odds_api import OddsApiClient
from scrapers.sofascore import SofaScoreScraper
from settlement.reconciler import SettlementReconciler
from storage.history_store import LEDGER_STATS_KEYS, HistoryStore
from utils.logging_config import setup_logging, log_performance_metric

logger = logging.getLogger(__name__)


async def main(args) -> int:
    setup_logging("update_results")

    logger.info("=" * 100)
    logger.info("TENNTREND - Results Update")
    logger.info("=" * 100)

    start_time = time.time()
    try:
        store = HistoryStore.load(args.history)
    except PersistenceError as e:
        logger.error(f"❌ {e}")
        return 1

    async with HttpClient(timeout=HTTP_TIMEOUT, concurrency=HTTP_CONCURRENCY,
                          retries=HTTP_RETRIES, backoff=HTTP_BACKOFF_SECONDS) as http:
        providers = []
        if ODDS_API_KEY:
            providers.append(OddsApiClient(http, QuotaTracker(ODDS_API_MONTHLY_QUOTA, QUOTA_FILE)))
        else:
            logger.warning("⚠️  No Odds API key - using SofaScore only")
        providers.append(SofaScoreScraper(http, tolerance_days=args.tolerance))

        reconciler = SettlementReconciler(store, providers, tolerance_days=args.tolerance)
        try:
            report = await reconciler.run()
        except PersistenceError as e:
            logger.error(f"❌ {e}")
            return 1

    log_performance_metric("settlement_time", time.time() - start_time, "seconds")
    log_performance_metric("settled_picks", len(report.settled), "picks")

    logger.info("\n" + "=" * 100)
    logger.info("RESULTS SUMMARY")
    logger.info("=" * 100)
    logger.info(f"Settled: {len(report.settled)} | Still pending: {len(report.unresolved)}")
    for ledger, stats_key in LEDGER_STATS_KEYS.items():
        stats = store.stats(ledger)
        logger.info(
            f"{stats_key}: {stats.wins}W-{stats.losses}L-{stats.pushes}P "
            f"({stats.pending} pending) | Win rate {stats.win_rate:.1f}% | ROI {stats.total_roi:+.2f}u"
        )
    return 0


def parse_arguments():
    parser = argparse.ArgumentParser(description="TennTrend results update")
    parser.add_argument(
        "--history",
        default=str(Path(DATA_DIR) / RESULTS_HISTORY_FILE),
        help="Path to the results history document"
    )
    parser.add_argument(
        "--tolerance",
        type=int,
        default=SETTLEMENT_DAY_TOLERANCE,
        help=f"Days either side of the pick date to search (default: {SETTLEMENT_DAY_TOLERANCE})"
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_arguments()
    sys.exit(asyncio.run(main(args)))
