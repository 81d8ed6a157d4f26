"""Output management for daily picks and reports."""
import csv
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from config.settings import (
    DAILY_PICKS_FILE, DATA_DIR, FEATURED_BETS_COUNT, FEATURED_SAFE_BETS_COUNT,
    MIN_EV_THRESHOLD, PICKS_VERSION, VALUE_BETS_CSV_FILE,
)
from core.errors import PersistenceError
from core.models import DailyPicks, utc_now_iso

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"
STATUS_ORACLE_UNAVAILABLE = "oracle_unavailable"


class OutputManager:
    """Manage output files and reports."""

    def __init__(self, output_dir: str = DATA_DIR):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def picks_path(self) -> Path:
        return self.output_dir / DAILY_PICKS_FILE

    def save_json(self, filename: str, data: Any):
        """Save data as JSON file, replacing it atomically."""
        path = self.output_dir / filename
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"cannot write {path}: {e}")

    def load_picks(self) -> Optional[Dict[str, Any]]:
        if not self.picks_path.exists():
            return None
        try:
            with open(self.picks_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Previous picks unreadable: {e}")
            return None

    @staticmethod
    def build_picks_document(picks: DailyPicks, scan_date: str,
                             league_stats: Optional[Dict] = None,
                             oracle: Optional[str] = None) -> Dict[str, Any]:
        value_bets = [b.to_dict() for b in picks.value_bets]
        safe_bets = [b.to_dict() for b in picks.safe_bets]
        return {
            "timestamp": utc_now_iso(),
            "scanDate": scan_date,
            "status": STATUS_OK,
            "stale": False,
            "leagueStats": league_stats or {},
            "summary": picks.summary,
            "betOfTheDay": picks.bet_of_the_day.to_dict() if picks.bet_of_the_day else None,
            "featuredBets": value_bets[:FEATURED_BETS_COUNT],
            "allBets": value_bets,
            "safeBets": safe_bets[:FEATURED_SAFE_BETS_COUNT],
            "allSafeBets": safe_bets,
            "metadata": {
                "minEVThreshold": MIN_EV_THRESHOLD,
                "oracle": oracle,
                "version": PICKS_VERSION,
                "generatedBy": "main.py",
            },
        }

    def save_daily_picks(self, picks: DailyPicks, scan_date: str,
                         league_stats: Optional[Dict] = None, oracle: Optional[str] = None):
        """Replace the daily picks document with this run's picks."""
        self.save_json(DAILY_PICKS_FILE, self.build_picks_document(picks, scan_date, league_stats, oracle))

    def mark_unavailable(self, error: str, status: str = STATUS_UNAVAILABLE):
        """
        Flag the picks document as stale after a failed run.

        Previous picks stay in place so the dashboard can still show them,
        marked as stale, rather than reporting an empty day. `status` tells a
        missing-data run from one where no oracle could analyze the matches.
        """
        document = self.load_picks() or {
            "summary": DailyPicks([], [], None, 0).summary,
            "betOfTheDay": None,
            "featuredBets": [],
            "allBets": [],
            "safeBets": [],
            "allSafeBets": [],
        }
        document.update({
            "status": status,
            "stale": True,
            "lastError": error,
            "lastAttempt": utc_now_iso(),
        })
        self.save_json(DAILY_PICKS_FILE, document)

    def save_value_bets_csv(self, picks: DailyPicks):
        """Save value bets as CSV for easy analysis in Excel."""
        path = self.output_dir / VALUE_BETS_CSV_FILE

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow([
                "League", "Start", "Home", "Away", "Odds", "Implied %",
                "AI %", "EV %", "Tier", "Confidence", "Bet of the Day",
            ])

            for bet in picks.value_bets:
                writer.writerow([
                    bet.league,
                    bet.start_time,
                    bet.home_team,
                    bet.away_team,
                    f"{bet.market_odd:.2f}",
                    f"{bet.market_prob:.1f}",
                    f"{bet.win_probability:.1f}",
                    f"{bet.expected_value:.1f}",
                    bet.tier.value,
                    bet.confidence.value if bet.confidence else "",
                    "yes" if bet is picks.bet_of_the_day else "",
                ])

    def print_summary(self, picks: DailyPicks, top_n: int = 10):
        """Print summary of top value bets to console."""
        print("\n" + "=" * 100)
        print(f"TOP {top_n} VALUE BETS")
        print("=" * 100)

        for i, bet in enumerate(picks.value_bets[:top_n], 1):
            marker = " 🏆" if bet is picks.bet_of_the_day else ""
            print(f"\n{i}. {bet.home_team} vs {bet.away_team}{marker}")
            print(f"   League: {bet.league} | Start: {bet.start_time}")
            print(f"   {bet.tier.emoji} {bet.tier.label} | Confidence: {bet.confidence.value.upper()}")
            print(f"   Odds: {bet.market_odd:.2f} | Implied: {bet.market_prob:.1f}% | AI: {bet.win_probability:.1f}%")
            print(f"   Expected Value: {bet.expected_value:+.1f}%")

        if picks.safe_bets:
            print("\n" + "-" * 100)
            print("SAFE BETS")
            for i, bet in enumerate(picks.safe_bets[:FEATURED_SAFE_BETS_COUNT], 1):
                print(f"   {i}. {bet.home_team} vs {bet.away_team} | Odds {bet.market_odd:.2f} | AI {bet.win_probability:.0f}%")

        print("\n" + "=" * 100)
