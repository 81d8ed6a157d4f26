"""SofaScore results scraper (settlement fallback)."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from config.settings import SETTLEMENT_DAY_TOLERANCE, SETTLEMENT_REQUEST_DELAY
from core.errors import UpstreamError
from core.http_client import HttpClient
from core.models import CompletedMatch, HistoryEntry
from utils.datetime_utils import collect_dates, from_timestamp, match_date

logger = logging.getLogger(__name__)

SOFASCORE_API = "https://api.sofascore.com/api/v1"
SOURCE = "sofascore"
WINNER_CODES = {1: "home", 2: "away", 3: "draw"}


def is_tour_singles(event: Dict[str, Any]) -> bool:
    """Finished ATP/WTA singles only; doubles pairs are written 'A / B'."""
    if (event.get("status") or {}).get("type") != "finished":
        return False
    home = (event.get("homeTeam") or {}).get("name") or ""
    away = (event.get("awayTeam") or {}).get("name") or ""
    if " / " in home or " / " in away:
        return False
    category = (((event.get("tournament") or {}).get("category") or {}).get("slug") or "").lower()
    return "atp" in category or "wta" in category


def period_scores(event: Dict[str, Any]) -> str:
    home_score = event.get("homeScore") or {}
    away_score = event.get("awayScore") or {}
    sets = []
    for i in range(1, 6):
        h = home_score.get(f"period{i}")
        a = away_score.get(f"period{i}")
        if h is not None and a is not None:
            sets.append(f"{h}-{a}")
    return ", ".join(sets)


def parse_event(event: Dict[str, Any]) -> Optional[CompletedMatch]:
    """Finished event to CompletedMatch; winner only from the official winnerCode."""
    if not event.get("homeScore") or not event.get("awayScore"):
        return None
    start = event.get("startTimestamp")
    return CompletedMatch(
        provider=SOURCE,
        home=(event.get("homeTeam") or {}).get("name") or "",
        away=(event.get("awayTeam") or {}).get("name") or "",
        start_time=from_timestamp(start) if start else None,
        home_score=event["homeScore"].get("current"),
        away_score=event["awayScore"].get("current"),
        winner=WINNER_CODES.get(event.get("winnerCode")),
        score_text=period_scores(event),
        event_id=str(event.get("id", "")),
    )


class SofaScoreScraper:
    """Scheduled tennis events per date."""

    name = SOURCE

    def __init__(self, http: HttpClient, tolerance_days: int = SETTLEMENT_DAY_TOLERANCE,
                 request_delay: float = SETTLEMENT_REQUEST_DELAY):
        self.http = http
        self.tolerance_days = tolerance_days
        self.request_delay = request_delay

    async def fetch_date(self, date_str: str) -> List[CompletedMatch]:
        url = f"{SOFASCORE_API}/sport/tennis/scheduled-events/{date_str}"
        try:
            data = await self.http.get(url)
        except UpstreamError as e:
            logger.warning(f"[{SOURCE}] {date_str}: {e}")
            return []
        events = (data or {}).get("events") or []
        parsed = [parse_event(e) for e in events if is_tour_singles(e)]
        return [m for m in parsed if m is not None]

    async def fetch_completed(self, entries: List[HistoryEntry]) -> List[CompletedMatch]:
        """Query each distinct date in the entries' windows, sequentially."""
        dates = collect_dates(
            (match_date(e.date, e.match.start_time) for e in entries),
            self.tolerance_days,
        )
        completed: List[CompletedMatch] = []
        for i, date_str in enumerate(dates):
            if i:
                await asyncio.sleep(self.request_delay)
            matches = await self.fetch_date(date_str)
            logger.info(f"[{SOURCE}] {date_str}: {len(matches)} finished singles matches")
            completed.extend(matches)
        return completed
