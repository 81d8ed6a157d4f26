"""Match history entries to completed events across providers."""
import logging
from typing import List, Optional

from config.settings import SETTLEMENT_DAY_TOLERANCE
from core.models import CompletedMatch, HistoryEntry
from matching.name_matcher import names_match
from utils.datetime_utils import date_window, match_date, parse_datetime

logger = logging.getLogger(__name__)


class EventMatcher:
    """Locate the completed match a recorded pick refers to."""

    @staticmethod
    def same_pairing(home: str, away: str, match: CompletedMatch) -> bool:
        """Both sides match, in either home/away orientation."""
        forward = names_match(home, match.home) and names_match(away, match.away)
        reverse = names_match(home, match.away) and names_match(away, match.home)
        return forward or reverse

    @staticmethod
    def in_date_window(entry: HistoryEntry, match: CompletedMatch,
                       tolerance_days: int = SETTLEMENT_DAY_TOLERANCE) -> bool:
        """
        Whether a completed match falls within the tolerated date window.

        Matches without a usable start time are accepted; providers that omit
        it were already queried by date.
        """
        day = match_date(entry.date, entry.match.start_time)
        if day is None or not match.start_time:
            return True
        try:
            played = parse_datetime(match.start_time).date()
        except ValueError:
            return True
        return played in date_window(day, tolerance_days)

    @classmethod
    def find_match(
        cls,
        entry: HistoryEntry,
        completed: List[CompletedMatch],
        tolerance_days: int = SETTLEMENT_DAY_TOLERANCE,
    ) -> Optional[CompletedMatch]:
        """First decided match with the same pairing inside the date window."""
        for match in completed:
            if match.winner is None:
                continue
            if not cls.in_date_window(entry, match, tolerance_days):
                continue
            if cls.same_pairing(entry.match.home_team, entry.match.away_team, match):
                logger.debug(
                    f"Matched {entry.match.label} <-> {match.home} vs {match.away} ({match.provider})"
                )
                return match
        return None
