"""Prompt text for the batched tennis oracle."""
from typing import List

from core.models import MatchRecord

SYSTEM_INSTRUCTION = (
    "You are an elite tennis betting analyst. Provide realistic win probabilities "
    "based on player performance, surface and head-to-head records. Be conservative. "
    "Return ONLY valid JSON."
)


def _describe(index: int, match: MatchRecord) -> str:
    return (
        f"{index + 1}. {match.league}: {match.home_team} vs {match.away_team}\n"
        f"   - Start Time: {match.start_time}\n"
        f"   - Current Odds: {match.market_odd} (implied probability: {match.market_prob:.1f}%)"
    )


def build_prompt(matches: List[MatchRecord]) -> str:
    """One prompt covering the whole batch; answers are keyed by gameIndex."""
    listing = "\n".join(_describe(i, m) for i, m in enumerate(matches))
    return f"""Analyze these {len(matches)} tennis matches like a sharp bettor looking for value.

Matches to Analyze:
{listing}

For each match provide:
1. homeWinProbability (0-100): realistic chance that the FIRST named player wins.
2. reasoning (2-3 sentences): form, head-to-head, surface, and what the market is missing.
3. confidence: "high", "medium" or "low".

Stay close to the market unless you have strong evidence; edges above 30% EV are extremely rare.

Return ONLY a JSON array with exactly {len(matches)} items, gameIndex counting from 0:
[
  {{"gameIndex": 0, "homeWinProbability": 58, "reasoning": "...", "confidence": "medium"}}
]"""
