"""Expected value calculation and EV tier classification."""
import logging
import math
from typing import Iterable, List, Optional

from config.settings import ELITE_EV_MIN, SICK_EV_MIN, STRONG_EV_MIN
from core.errors import InvalidMatchRecordError
from core.models import MatchRecord, Prediction, Tier

logger = logging.getLogger(__name__)

# Evaluated top down; the lower bound of each tier is inclusive.
TIER_THRESHOLDS = (
    (Tier.SICK, SICK_EV_MIN),
    (Tier.ELITE, ELITE_EV_MIN),
    (Tier.STRONG, STRONG_EV_MIN),
)


def implied_probability(market_odd: float) -> float:
    """Implied probability (percent) of decimal odds."""
    return 1.0 / market_odd * 100


def compute_expected_value(market_odd: float, win_probability: float) -> float:
    """
    Expected value per unit stake, as a percentage.

    EV% = (p * odds - 1) * 100 with p the win probability in [0, 1].
    Not rounded; callers decide display precision.

    Raises:
        ValueError: odds not above 1.0 or probability outside [0, 100]
    """
    if not math.isfinite(market_odd) or market_odd <= 1.0:
        raise ValueError(f"market odds must be > 1.0, got {market_odd}")
    if not math.isfinite(win_probability) or not 0 <= win_probability <= 100:
        raise ValueError(f"win probability must be within [0, 100], got {win_probability}")
    return (win_probability / 100 * market_odd - 1) * 100


def classify_tier(ev: Optional[float]) -> Optional[Tier]:
    """Map an EV percentage to its tier, or None below the minimum threshold."""
    if ev is None:
        return None
    for tier, minimum in TIER_THRESHOLDS:
        if ev >= minimum:
            return tier
    return None


def validate_match(match: MatchRecord):
    """Raise InvalidMatchRecordError when a record cannot enter the pipeline."""
    if not match.home_team or not match.away_team:
        raise InvalidMatchRecordError(f"{match.id}: missing team names")
    if match.home_team.strip().lower() == match.away_team.strip().lower():
        raise InvalidMatchRecordError(f"{match.id}: home and away are the same side")
    try:
        odd = float(match.market_odd)
    except (TypeError, ValueError):
        raise InvalidMatchRecordError(f"{match.id}: odds {match.market_odd!r} are not numeric")
    if not math.isfinite(odd) or odd <= 1.0:
        raise InvalidMatchRecordError(f"{match.id}: odds {odd} must be > 1.0")


def filter_valid(matches: Iterable[MatchRecord]) -> List[MatchRecord]:
    """Drop records that violate the data model, logging the reason for each."""
    valid = []
    for match in matches:
        try:
            validate_match(match)
        except InvalidMatchRecordError as e:
            logger.warning(f"Dropping record: {e}")
            continue
        valid.append(match)
    return valid


def apply_prediction(match: MatchRecord, prediction: Optional[Prediction]) -> MatchRecord:
    """
    Attach an oracle prediction and the derived EV/tier to a record.

    Without a prediction the record is marked unanalyzed: it keeps no EV and
    therefore never reaches tiering or selection.
    """
    if prediction is None:
        match.win_probability = None
        match.confidence = None
        match.expected_value = None
        match.tier = None
        return match

    match.win_probability = prediction.win_probability
    match.confidence = prediction.confidence
    match.reasoning = prediction.reasoning
    match.expected_value = compute_expected_value(match.market_odd, prediction.win_probability)
    match.tier = classify_tier(match.expected_value)
    return match
