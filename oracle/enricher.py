"""Batch enrichment of match records with oracle predictions."""
import logging
from typing import List, Optional, Sequence

from analysis.ev import apply_prediction
from core.errors import OracleError
from core.models import MatchRecord, Prediction
from oracle.base import OracleAdapter

logger = logging.getLogger(__name__)

UNAVAILABLE_REASONING = "AI analysis unavailable"
MISSING_REASONING = "AI prediction missing"


class PredictionEnricher:
    """
    Enrich a whole batch from the first oracle that answers.

    Oracles are tried in order. A batch is never mixed across oracles: either
    one oracle's answer is applied, or every record is left unanalyzed.
    """

    def __init__(self, oracles: Sequence[OracleAdapter]):
        self.oracles = list(oracles)
        self.used_oracle: Optional[str] = None
        self.unavailable = False

    async def _first_answer(self, matches: List[MatchRecord]) -> Optional[List[Optional[Prediction]]]:
        for oracle in self.oracles:
            if not oracle.available:
                logger.warning(f"[{oracle.name}] No API key configured, skipping")
                continue
            try:
                logger.info(f"[{oracle.name}] Requesting predictions for {len(matches)} matches")
                predictions = await oracle.predict(matches)
            except OracleError as e:
                logger.error(f"[{oracle.name}] {type(e).__name__}: {str(e)[:150]}")
                continue
            self.used_oracle = oracle.name
            return predictions
        return None

    async def enrich(self, matches: List[MatchRecord]) -> List[MatchRecord]:
        self.used_oracle = None
        self.unavailable = False
        if not matches:
            return []

        predictions = await self._first_answer(matches)
        if predictions is None:
            logger.error("All oracles exhausted - batch left unanalyzed")
            self.unavailable = True
            for match in matches:
                apply_prediction(match, None)
                match.reasoning = UNAVAILABLE_REASONING
            return matches

        predictions = list(predictions)[:len(matches)]
        predictions += [None] * (len(matches) - len(predictions))

        missing = 0
        for match, prediction in zip(matches, predictions):
            apply_prediction(match, prediction)
            if prediction is None:
                match.reasoning = MISSING_REASONING
                missing += 1
        if missing:
            logger.warning(f"[{self.used_oracle}] No prediction for {missing}/{len(matches)} matches")
        return matches
