"""
The-Odds-API client.

- GET /sports                      active tournaments, classified ATP/WTA
- GET /sports/{key}/odds           h2h decimal odds per tournament
- GET /sports/{key}/scores         completed results for settlement

Every request is counted against the injected QuotaTracker; once the local
quota is spent no request leaves the process.
"""
import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Any

from analysis.ev import filter_valid
from config.leagues import classify_sport
from config.settings import (
    MAX_MATCHES_PER_TOUR, ODDS_API_KEY, ODDS_REGIONS, SCAN_WINDOW_HOURS,
    SETTLEMENT_REQUEST_DELAY, SETTLEMENT_SCORES_DAYS_FROM,
)
from core.errors import ConfigurationError, QuotaExceededError, UpstreamError, UpstreamUnavailableError
from core.http_client import HttpClient
from core.models import CompletedMatch, HistoryEntry, MatchRecord
from core.quota import QuotaTracker
from utils.datetime_utils import normalize_iso_datetime, within_next_hours

logger = logging.getLogger(__name__)

ODDS_API = "https://api.the-odds-api.com/v4"
SOURCE = "the-odds-api"


# ---------------- Parsing ----------------

def best_home_odds(game: Dict[str, Any]) -> Optional[float]:
    """Highest decimal price for the home side across all bookmakers."""
    home = game.get("home_team")
    prices = []
    for bookmaker in game.get("bookmakers") or []:
        for market in bookmaker.get("markets") or []:
            if market.get("key") != "h2h":
                continue
            for outcome in market.get("outcomes") or []:
                if outcome.get("name") != home:
                    continue
                try:
                    prices.append(float(outcome.get("price")))
                except (TypeError, ValueError):
                    continue
    return max(prices) if prices else None


def parse_game(game: Dict[str, Any], league: str) -> Optional[MatchRecord]:
    """Transform an odds payload to a MatchRecord; None when it has no home price."""
    odds = best_home_odds(game)
    if odds is None:
        return None
    return MatchRecord(
        id=str(game.get("id", "")),
        league=league,
        home_team=game.get("home_team") or "",
        away_team=game.get("away_team") or "",
        start_time=normalize_iso_datetime(game.get("commence_time") or ""),
        market_odd=round(odds, 2),
    )


def _to_number(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_score_event(event: Dict[str, Any]) -> Optional[CompletedMatch]:
    """Completed scores payload to CompletedMatch; scores stay None unless numeric."""
    if not event.get("completed") or not event.get("scores"):
        return None
    home = event.get("home_team") or ""
    away = event.get("away_team") or ""
    by_name = {s.get("name"): s.get("score") for s in event["scores"] if isinstance(s, dict)}
    home_score = _to_number(by_name.get(home))
    away_score = _to_number(by_name.get(away))

    winner = None
    if home_score is not None and away_score is not None:
        if home_score > away_score:
            winner = "home"
        elif away_score > home_score:
            winner = "away"
        else:
            winner = "draw"

    return CompletedMatch(
        provider=SOURCE,
        home=home,
        away=away,
        start_time=normalize_iso_datetime(event.get("commence_time") or ""),
        home_score=home_score,
        away_score=away_score,
        winner=winner,
        score_text=f"{by_name.get(home, '?')}-{by_name.get(away, '?')}",
        event_id=str(event.get("id", "")),
    )


# ---------------- Client ----------------

class OddsApiClient:
    """Metered client for The-Odds-API."""

    name = SOURCE

    def __init__(self, http: HttpClient, quota: QuotaTracker, api_key: str = ODDS_API_KEY):
        self.http = http
        self.quota = quota
        self.api_key = api_key

    async def _get(self, path: str, params: Optional[Dict] = None) -> Any:
        if not self.api_key:
            raise ConfigurationError("THE_ODDS_API_KEY is not set")
        if self.quota.remaining() <= 0:
            raise QuotaExceededError(SOURCE, f"local quota of {self.quota.limit} requests used")
        query = {"apiKey": self.api_key}
        query.update(params or {})
        self.quota.increment()
        return await self.http.get(f"{ODDS_API}{path}", params=query)

    async def fetch_tennis_sports(self) -> Dict[str, List[Dict]]:
        """Active tennis tournaments grouped by tour."""
        sports = await self._get("/sports/")
        if not isinstance(sports, list):
            raise UpstreamUnavailableError(SOURCE, "sports list missing from response")

        tours: Dict[str, List[Dict]] = {"ATP": [], "WTA": []}
        for sport in sports:
            if not sport.get("active"):
                continue
            tour = classify_sport(sport)
            if tour:
                tours[tour].append(sport)
        logger.info(f"Found {len(tours['ATP'])} ATP and {len(tours['WTA'])} WTA tournaments")
        return tours

    async def fetch_sport_odds(self, sport_key: str) -> List[Dict]:
        data = await self._get(
            f"/sports/{sport_key}/odds",
            {"regions": ODDS_REGIONS, "markets": "h2h", "oddsFormat": "decimal"},
        )
        return data if isinstance(data, list) else []

    async def fetch_matches(
        self,
        now: datetime,
        window_hours: int = SCAN_WINDOW_HOURS,
        max_per_tour: int = MAX_MATCHES_PER_TOUR,
    ) -> Tuple[List[MatchRecord], Dict[str, Dict]]:
        """
        Fetch, window, cap and normalize upcoming matches for every tour.

        Tournaments are fetched concurrently. Individual tournament failures
        are logged; if every tournament fails the whole fetch raises.

        Returns:
            (matches, league_stats)
        """
        tours = await self.fetch_tennis_sports()
        jobs = [(tour, sport) for tour, sports in tours.items() for sport in sports]
        results = await asyncio.gather(
            *(self.fetch_sport_odds(sport["key"]) for _, sport in jobs),
            return_exceptions=True,
        )

        games_by_tour: Dict[str, List[Dict]] = {tour: [] for tour in tours}
        failures = []
        for (tour, sport), result in zip(jobs, results):
            if isinstance(result, UpstreamError):
                logger.error(f"[{tour} - {sport.get('title')}] {result}")
                failures.append(result)
                continue
            if isinstance(result, BaseException):
                raise result
            games_by_tour[tour].extend(result)

        if jobs and len(failures) == len(jobs):
            raise failures[0]

        matches: List[MatchRecord] = []
        league_stats: Dict[str, Dict] = {}
        for tour, games in games_by_tour.items():
            upcoming = [g for g in games if within_next_hours(g.get("commence_time") or "", now, window_hours)]
            upcoming.sort(key=lambda g: g.get("commence_time") or "")
            if len(upcoming) > max_per_tour:
                logger.info(f"[{tour}] Limiting {len(upcoming)} matches to {max_per_tour}")
                upcoming = upcoming[:max_per_tour]

            records = [r for r in (parse_game(g, tour) for g in upcoming) if r is not None]
            records = filter_valid(records)
            league_stats[tour] = {"hasGames": bool(records), "gamesFound": len(records)}
            logger.info(f"[{tour}] {len(records)} matches in the next {window_hours} hours")
            matches.extend(records)

        return matches, league_stats

    async def fetch_completed(self, entries: List[HistoryEntry]) -> List[CompletedMatch]:
        """Completed results from every active tennis tournament, one call at a time."""
        if not entries:
            return []
        tours = await self.fetch_tennis_sports()
        completed: List[CompletedMatch] = []
        for sports in tours.values():
            for sport in sports:
                try:
                    events = await self._get(
                        f"/sports/{sport['key']}/scores/",
                        {"daysFrom": str(SETTLEMENT_SCORES_DAYS_FROM)},
                    )
                except QuotaExceededError:
                    raise
                except UpstreamError as e:
                    logger.warning(f"[{SOURCE}] scores for {sport['key']} failed: {e}")
                    continue
                for event in events or []:
                    parsed = parse_score_event(event)
                    if parsed:
                        completed.append(parsed)
                await asyncio.sleep(SETTLEMENT_REQUEST_DELAY)
        logger.info(f"[{SOURCE}] {len(completed)} completed matches")
        return completed

