"""Core data models."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Tier(str, Enum):
    """Qualitative EV bucket, ordered STRONG < ELITE < SICK."""
    STRONG = "STRONG"
    ELITE = "ELITE"
    SICK = "SICK"

    @property
    def rank(self) -> int:
        return {"STRONG": 1, "ELITE": 2, "SICK": 3}[self.value]

    @property
    def label(self) -> str:
        return {"STRONG": "Strong Edge", "ELITE": "Elite Edge", "SICK": "Sick Edge"}[self.value]

    @property
    def emoji(self) -> str:
        return {"STRONG": "💪", "ELITE": "⭐", "SICK": "🔥"}[self.value]


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BetStatus(str, Enum):
    PENDING = "pending"
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"

    @property
    def is_settled(self) -> bool:
        return self is not BetStatus.PENDING


@dataclass
class Prediction:
    """One oracle estimate for the home side of a match."""
    win_probability: float
    confidence: Confidence
    reasoning: str = ""


@dataclass
class MatchRecord:
    """Normalized match, independent of the upstream provider."""
    id: str
    league: str
    home_team: str
    away_team: str
    start_time: str
    market_odd: float
    win_probability: Optional[float] = None
    confidence: Optional[Confidence] = None
    reasoning: str = ""
    expected_value: Optional[float] = None
    tier: Optional[Tier] = None

    @property
    def market_prob(self) -> float:
        """Implied probability in percent, always derived from the odds."""
        return 100.0 / self.market_odd

    @property
    def analyzed(self) -> bool:
        return self.win_probability is not None and self.expected_value is not None

    @property
    def label(self) -> str:
        return f"{self.home_team} vs {self.away_team}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "league": self.league,
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "startTime": self.start_time,
            "marketOdd": self.market_odd,
            "marketProb": round(self.market_prob, 1),
            "winProbability": self.win_probability,
            "confidence": self.confidence.value if self.confidence else None,
            "reasoning": self.reasoning,
            "expectedValue": self.expected_value,
            "tier": self.tier.value if self.tier else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRecord":
        confidence = data.get("confidence")
        tier = data.get("tier")
        return cls(
            id=str(data["id"]),
            league=data.get("league", ""),
            home_team=data["homeTeam"],
            away_team=data["awayTeam"],
            start_time=data.get("startTime", ""),
            market_odd=float(data["marketOdd"]),
            win_probability=data.get("winProbability"),
            confidence=Confidence(confidence) if confidence else None,
            reasoning=data.get("reasoning") or "",
            expected_value=data.get("expectedValue"),
            tier=Tier(tier) if tier else None,
        )


@dataclass
class HistoryEntry:
    """A recommendation snapshotted at selection time, plus its settlement."""
    match: MatchRecord
    outcome: str
    date: str
    bet_of_the_day: bool = False
    status: BetStatus = BetStatus.PENDING
    result: Optional[str] = None
    roi: Optional[float] = None
    added_at: str = field(default_factory=utc_now_iso)
    settled_at: Optional[str] = None
    source: Optional[str] = None

    @property
    def id(self) -> str:
        return self.match.id

    @property
    def odds(self) -> float:
        return self.match.market_odd

    @classmethod
    def from_match(cls, match: MatchRecord, date: str, bet_of_the_day: bool = False) -> "HistoryEntry":
        """Snapshot a selected match; the bet is always on the home side."""
        return cls(
            match=replace(match),
            outcome=match.home_team,
            date=date,
            bet_of_the_day=bet_of_the_day,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.match.to_dict()
        data.update({
            "date": self.date,
            "outcome": self.outcome,
            "betOfTheDay": self.bet_of_the_day,
            "status": self.status.value,
            "result": self.result,
            "roi": self.roi,
            "addedAt": self.added_at,
            "settledAt": self.settled_at,
            "source": self.source,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        roi = data.get("roi")
        return cls(
            match=MatchRecord.from_dict(data),
            outcome=data["outcome"],
            date=data.get("date", ""),
            bet_of_the_day=bool(data.get("betOfTheDay", False)),
            status=BetStatus(data.get("status", "pending")),
            result=data.get("result"),
            roi=float(roi) if roi is not None else None,
            added_at=data.get("addedAt") or utc_now_iso(),
            settled_at=data.get("settledAt"),
            source=data.get("source"),
        )


@dataclass
class CompletedMatch:
    """A finished match as reported by a results provider."""
    provider: str
    home: str
    away: str
    start_time: Optional[str] = None
    home_score: Optional[float] = None
    away_score: Optional[float] = None
    winner: Optional[str] = None  # "home", "away", "draw"
    score_text: str = ""
    event_id: Optional[str] = None


@dataclass
class Settlement:
    status: BetStatus
    result: str
    roi: float


@dataclass
class AggregateStats:
    total_bets: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    pending: int = 0
    win_rate: float = 0.0
    total_roi: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBets": self.total_bets,
            "wins": self.wins,
            "losses": self.losses,
            "pushes": self.pushes,
            "pending": self.pending,
            "winRate": round(self.win_rate, 1),
            "totalROI": round(self.total_roi, 2),
        }


@dataclass
class DailyPicks:
    """Output of one selection pass."""
    value_bets: List[MatchRecord]
    safe_bets: List[MatchRecord]
    bet_of_the_day: Optional[MatchRecord]
    total_games_analyzed: int
    total_games_found: int = 0

    @property
    def avg_ev(self) -> float:
        if not self.value_bets:
            return 0.0
        return sum(b.expected_value for b in self.value_bets) / len(self.value_bets)

    @property
    def summary(self) -> Dict[str, Any]:
        return {
            "totalGamesFound": self.total_games_found,
            "totalGamesAnalyzed": self.total_games_analyzed,
            "valueBetsFound": len(self.value_bets),
            "safeBetsFound": len(self.safe_bets),
            "hasBetOfTheDay": self.bet_of_the_day is not None,
            "avgEV": round(self.avg_ev, 1),
        }
