"""Upstream API usage tracking."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def _next_reset(now: datetime) -> datetime:
    """Same day next month, clamped to the 28th so every month has it."""
    year = now.year + (1 if now.month == 12 else 0)
    month = 1 if now.month == 12 else now.month + 1
    return now.replace(year=year, month=month, day=min(now.day, 28),
                       hour=0, minute=0, second=0, microsecond=0)


class QuotaTracker:
    """
    Monthly request counter for a metered provider.

    Owned by the fetch layer and passed in explicitly. When `path` is given the
    counter survives between runs as a small JSON document.
    """

    def __init__(self, limit: int, path: Optional[str] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.limit = limit
        self.path = Path(path) if path else None
        self.clock = clock
        self.count = 0
        self.reset_at = _next_reset(clock())
        self._load()

    def _load(self):
        if not self.path or not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.count = int(data.get("count", 0))
            self.reset_at = datetime.fromisoformat(data["resetDate"])
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable quota file {self.path}: {e}")

    def _save(self):
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({
                "count": self.count,
                "limit": self.limit,
                "resetDate": self.reset_at.isoformat(),
                "lastFetch": self.clock().isoformat(),
            }, f, indent=2)

    def reset_if_expired(self) -> bool:
        """Start a new period once the reset date has passed."""
        now = self.clock()
        if now < self.reset_at:
            return False
        self.count = 0
        self.reset_at = _next_reset(now)
        logger.info(f"API quota period reset, next reset {self.reset_at.date()}")
        return True

    def remaining(self) -> int:
        self.reset_if_expired()
        return max(0, self.limit - self.count)

    def increment(self, amount: int = 1):
        self.reset_if_expired()
        self.count += amount
        self._save()
        if self.limit and self.count >= self.limit * 0.9:
            logger.warning(f"API quota nearly used: {self.count}/{self.limit}")

