"""Aggregate performance statistics over a ledger."""
import math
from typing import Iterable

from core.models import AggregateStats, BetStatus, HistoryEntry


def compute_stats(entries: Iterable[HistoryEntry]) -> AggregateStats:
    """
    Recompute stats from scratch.

    ROI is summed with math.fsum so long histories do not drift. Pushes are
    settled but count towards neither wins nor losses.
    """
    entries = list(entries)
    wins = sum(1 for e in entries if e.status is BetStatus.WIN)
    losses = sum(1 for e in entries if e.status is BetStatus.LOSS)
    pushes = sum(1 for e in entries if e.status is BetStatus.PUSH)
    pending = sum(1 for e in entries if e.status is BetStatus.PENDING)
    decided = wins + losses
    total_roi = math.fsum(e.roi for e in entries if e.status.is_settled and e.roi is not None)
    return AggregateStats(
        total_bets=len(entries),
        wins=wins,
        losses=losses,
        pushes=pushes,
        pending=pending,
        win_rate=wins / decided * 100 if decided else 0.0,
        total_roi=total_roi,
    )
