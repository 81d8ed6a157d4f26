"""Settlement of pending picks against final results."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from config.settings import SETTLEMENT_DAY_TOLERANCE
from core.errors import UpstreamError
from core.models import BetStatus, CompletedMatch, HistoryEntry, Settlement
from matching.event_matcher import EventMatcher
from matching.name_matcher import names_match
from storage.history_store import HistoryStore

logger = logging.getLogger(__name__)

Pending = Tuple[str, HistoryEntry]


class ResultsProvider(Protocol):
    name: str

    async def fetch_completed(self, entries: List[HistoryEntry]) -> List[CompletedMatch]:
        ...


def compute_roi(status: BetStatus, odds: float) -> float:
    """Units won or lost on a 1-unit stake."""
    if status is BetStatus.WIN:
        return odds - 1
    if status is BetStatus.LOSS:
        return -1.0
    if status is BetStatus.PUSH:
        return 0.0
    raise ValueError(f"no ROI for unsettled status {status.value}")


def determine_settlement(entry: HistoryEntry, match: CompletedMatch) -> Optional[Settlement]:
    """
    Outcome of a pick given its completed match, or None if not resolvable.

    A tie is a push. The side bet on is found with the same fuzzy matcher;
    if it matches neither or both sides the pick is left alone.
    """
    if match.winner not in ("home", "away", "draw"):
        return None

    if match.winner == "draw":
        status = BetStatus.PUSH
    else:
        on_home = names_match(entry.outcome, match.home)
        on_away = names_match(entry.outcome, match.away)
        if on_home == on_away:
            logger.warning(
                f"Ambiguous side '{entry.outcome}' for {match.home} vs {match.away} - leaving pending"
            )
            return None
        bet_side = "home" if on_home else "away"
        status = BetStatus.WIN if bet_side == match.winner else BetStatus.LOSS

    result = match.score_text
    if not result and match.home_score is not None and match.away_score is not None:
        result = f"{match.home_score:g}-{match.away_score:g}"
    return Settlement(status=status, result=result, roi=compute_roi(status, entry.odds))


@dataclass
class SettlementReport:
    settled: List[Pending] = field(default_factory=list)
    unresolved: List[Pending] = field(default_factory=list)


class SettlementReconciler:
    """
    Resolve pending picks, consulting providers in order.

    Picks resolved by one provider are not sent to the next. Every settlement
    is saved immediately, so the job can be killed and re-run at any point.
    """

    def __init__(self, store: HistoryStore, providers: Sequence[ResultsProvider],
                 tolerance_days: int = SETTLEMENT_DAY_TOLERANCE):
        self.store = store
        self.providers = list(providers)
        self.tolerance_days = tolerance_days

    def settle_from(self, pending: List[Pending], completed: List[CompletedMatch],
                    source: str, report: SettlementReport) -> List[Pending]:
        """Settle what `completed` resolves; return what is still pending."""
        remaining = []
        for ledger, entry in pending:
            match = EventMatcher.find_match(entry, completed, self.tolerance_days)
            settlement = determine_settlement(entry, match) if match else None
            if settlement is None:
                remaining.append((ledger, entry))
                continue
            if self.store.settle(ledger, entry.id, settlement, source):
                self.store.save()
                report.settled.append((ledger, entry))
                logger.info(
                    f"[{source}] {entry.match.label}: {settlement.status.value.upper()} "
                    f"({settlement.result}) ROI {settlement.roi:+.2f}"
                )
        return remaining

    async def run(self) -> SettlementReport:
        report = SettlementReport()
        remaining = self.store.pending()
        logger.info(f"{len(remaining)} pending picks")
        if not remaining:
            return report

        for provider in self.providers:
            if not remaining:
                break
            try:
                completed = await provider.fetch_completed([e for _, e in remaining])
            except UpstreamError as e:
                logger.warning(f"[{provider.name}] unavailable: {e}")
                continue
            remaining = self.settle_from(remaining, completed, provider.name, report)

        for _, entry in remaining:
            logger.info(f"Not yet resolvable: {entry.match.label} ({entry.date})")
        report.unresolved = remaining

        self.store.save()
        return report
