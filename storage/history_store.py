"""Results history: past recommendations and their outcomes."""
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from core.errors import PersistenceError
from core.models import AggregateStats, DailyPicks, HistoryEntry, Settlement, utc_now_iso
from settlement.stats import compute_stats

logger = logging.getLogger(__name__)

VALUE_LEDGER = "bets"
SAFE_LEDGER = "safeBets"
LEDGER_STATS_KEYS = {VALUE_LEDGER: "stats", SAFE_LEDGER: "safeBetStats"}


class HistoryStore:
    """
    Single JSON document with one ledger per pick type.

    The whole document is read, modified and written back; there is one
    writer at a time (the scheduled job). New entries go to the front.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self.ledgers: Dict[str, List[HistoryEntry]] = {name: [] for name in LEDGER_STATS_KEYS}

    @classmethod
    def load(cls, path: str) -> "HistoryStore":
        """Load the document; a missing file is an empty history."""
        store = cls(path)
        if not store.path.exists():
            return store
        try:
            with open(store.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"cannot read {store.path}: {e}")
        for name in store.ledgers:
            store.ledgers[name] = [HistoryEntry.from_dict(item) for item in data.get(name) or []]
        return store

    def entries(self, ledger: str) -> List[HistoryEntry]:
        return self.ledgers[ledger]

    def get(self, ledger: str, entry_id: str) -> Optional[HistoryEntry]:
        return next((e for e in self.ledgers[ledger] if e.id == entry_id), None)

    def append(self, ledger: str, entry: HistoryEntry) -> bool:
        """Add a pending entry; an id already in the ledger is a no-op."""
        if self.get(ledger, entry.id) is not None:
            logger.debug(f"[{ledger}] {entry.id} already tracked")
            return False
        self.ledgers[ledger].insert(0, entry)
        return True

    def record_picks(self, picks: DailyPicks, date: str) -> int:
        """Track today's value bets (bet of the day flagged) and safe bets as pending."""
        added = 0
        botd_id = picks.bet_of_the_day.id if picks.bet_of_the_day else None
        for bet in picks.value_bets:
            entry = HistoryEntry.from_match(bet, date, bet_of_the_day=bet.id == botd_id)
            added += self.append(VALUE_LEDGER, entry)
        for bet in picks.safe_bets:
            added += self.append(SAFE_LEDGER, HistoryEntry.from_match(bet, date))
        logger.info(f"Tracked {added} new picks in results history")
        return added

    def pending(self) -> List[Tuple[str, HistoryEntry]]:
        return [
            (name, entry)
            for name, entries in self.ledgers.items()
            for entry in entries
            if not entry.status.is_settled
        ]

    def settle(self, ledger: str, entry_id: str, settlement: Settlement, source: str) -> bool:
        """Apply the single pending -> settled transition; settled entries are immutable."""
        entry = self.get(ledger, entry_id)
        if entry is None or entry.status.is_settled:
            return False
        entry.status = settlement.status
        entry.result = settlement.result
        entry.roi = settlement.roi
        entry.source = source
        entry.settled_at = utc_now_iso()
        return True

    def stats(self, ledger: str) -> AggregateStats:
        return compute_stats(self.ledgers[ledger])

    def to_dict(self) -> Dict:
        data: Dict = {}
        for name, stats_key in LEDGER_STATS_KEYS.items():
            data[name] = [e.to_dict() for e in self.ledgers[name]]
            data[stats_key] = self.stats(name).to_dict()
        data["updatedAt"] = utc_now_iso()
        return data

    def save(self):
        """Write atomically so an interrupted run never leaves half a document."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"cannot write {self.path}: {e}")
