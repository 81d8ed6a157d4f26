"""Value bet, safe bet and bet-of-the-day selection."""
import logging
from functools import cmp_to_key
from typing import Dict, List, Optional

from config import settings
from config.leagues import get_context_score
from core.models import DailyPicks, MatchRecord
from utils.logging_config import log_pick

logger = logging.getLogger(__name__)


class BetSelector:
    """
    Turn a batch of enriched matches into the daily picks payload.

    The three selections are independent views over the same batch. Nothing
    is persisted here; storing picks is the caller's job.
    """

    def __init__(
        self,
        min_ev: float = settings.MIN_EV_THRESHOLD,
        safe_min_odds: float = settings.SAFE_BET_MIN_ODDS,
        safe_max_odds: float = settings.SAFE_BET_MAX_ODDS,
        safe_min_probability: float = settings.SAFE_BET_MIN_PROBABILITY,
        safe_probability_margin: float = settings.SAFE_BET_PROBABILITY_MARGIN,
        context_scores: Optional[Dict[str, float]] = None,
    ):
        self.min_ev = min_ev
        self.safe_min_odds = safe_min_odds
        self.safe_max_odds = safe_max_odds
        self.safe_min_probability = safe_min_probability
        self.safe_probability_margin = safe_probability_margin
        self.context_scores = context_scores or {}

    def value_bets(self, matches: List[MatchRecord]) -> List[MatchRecord]:
        """Tiered matches, highest tier first, then highest EV within a tier."""
        tiered = [
            m for m in matches
            if m.analyzed and m.tier is not None and m.expected_value >= self.min_ev
        ]
        tiered.sort(key=lambda m: (m.tier.rank, m.expected_value), reverse=True)
        return tiered

    def is_safe_bet(self, match: MatchRecord) -> bool:
        if not match.analyzed:
            return False
        if not self.safe_min_odds <= match.market_odd <= self.safe_max_odds:
            return False
        return match.win_probability >= self.safe_min_probability

    def _compare_safe(self, a: MatchRecord, b: MatchRecord) -> int:
        # Large probability gaps decide; small ones defer to the shorter price.
        gap = b.win_probability - a.win_probability
        if abs(gap) > self.safe_probability_margin:
            return 1 if gap > 0 else -1
        if a.market_odd != b.market_odd:
            return -1 if a.market_odd < b.market_odd else 1
        return 0

    def safe_bets(self, matches: List[MatchRecord]) -> List[MatchRecord]:
        """Short-priced favourites the oracle rates highly."""
        safe = [m for m in matches if self.is_safe_bet(m)]
        return sorted(safe, key=cmp_to_key(self._compare_safe))

    def context_score(self, league: str) -> float:
        if league in self.context_scores:
            return self.context_scores[league]
        return get_context_score(league)

    def score(self, match: MatchRecord) -> float:
        """Composite bet-of-the-day score: tier > EV > confidence > context."""
        tier_score = settings.TIER_SCORES.get(match.tier.value, 0) if match.tier else 0
        confidence = match.confidence.value if match.confidence else "low"
        confidence_score = settings.CONFIDENCE_SCORES.get(confidence, 0)
        ev_score = match.expected_value or 0.0
        return (
            tier_score * settings.BOTD_TIER_WEIGHT
            + ev_score * settings.BOTD_EV_WEIGHT
            + confidence_score * settings.BOTD_CONFIDENCE_WEIGHT
            + self.context_score(match.league) * settings.BOTD_CONTEXT_WEIGHT
        )

    def bet_of_the_day(self, value_bets: List[MatchRecord]) -> Optional[MatchRecord]:
        """Highest scoring value bet; ties go to the earlier entry."""
        if not value_bets:
            return None
        best = value_bets[0]
        best_score = self.score(best)
        for match in value_bets[1:]:
            candidate = self.score(match)
            if candidate > best_score:
                best, best_score = match, candidate
        logger.debug(f"Bet of the day score {best_score:.2f}: {best.label}")
        return best

    def select(self, matches: List[MatchRecord]) -> DailyPicks:
        value_bets = self.value_bets(matches)
        safe_bets = self.safe_bets(matches)
        botd = self.bet_of_the_day(value_bets)

        for tier_name in ("SICK", "ELITE", "STRONG"):
            count = sum(1 for b in value_bets if b.tier.value == tier_name)
            if count:
                logger.info(f"  {tier_name}: {count} bets")
        logger.info(
            f"Selected {len(value_bets)} value bets and {len(safe_bets)} safe bets "
            f"from {len(matches)} matches"
        )

        for bet in value_bets:
            log_pick("value", bet)
        for bet in safe_bets:
            log_pick("safe", bet)
        if botd:
            log_pick("botd", botd)

        return DailyPicks(
            value_bets=value_bets,
            safe_bets=safe_bets,
            bet_of_the_day=botd,
            total_games_analyzed=sum(1 for m in matches if m.analyzed),
            total_games_found=len(matches),
        )
