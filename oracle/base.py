"""Prediction oracle interface and response parsing."""
import json
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from core.errors import OracleParseError
from core.models import Confidence, MatchRecord, Prediction

logger = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


class OracleAdapter(ABC):
    """
    Batched win-probability oracle.

    One call covers the whole batch. The result is parallel to `matches`;
    an index the oracle did not answer holds None.
    """

    name = "oracle"

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def predict(self, matches: List[MatchRecord]) -> List[Optional[Prediction]]:
        """Raise OracleUnavailableError or OracleParseError on batch failure."""


def _parse_item(item, count: int):
    """Return (index, Prediction) or None for a malformed item."""
    if not isinstance(item, dict):
        return None
    try:
        index = int(item.get("gameIndex"))
        probability = float(item.get("homeWinProbability"))
    except (TypeError, ValueError):
        return None
    if not 0 <= index < count:
        return None
    if not math.isfinite(probability) or not 0 <= probability <= 100:
        return None
    try:
        confidence = Confidence(str(item.get("confidence", "low")).strip().lower())
    except ValueError:
        return None
    reasoning = str(item.get("reasoning") or "").strip()
    return index, Prediction(win_probability=probability, confidence=confidence, reasoning=reasoning)


def parse_predictions(text: str, count: int) -> List[Optional[Prediction]]:
    """
    Parse a model response into a prediction array of length `count`.

    Accepts raw JSON or JSON inside a markdown code block. Malformed items
    are skipped individually; a response without a JSON array raises
    OracleParseError.
    """
    if not text:
        raise OracleParseError("empty oracle response")

    block = CODE_BLOCK_RE.search(text)
    if block:
        text = block.group(1).strip()

    found = JSON_ARRAY_RE.search(text)
    if not found:
        raise OracleParseError(f"no JSON array in oracle response: {text[:120]!r}")
    try:
        items = json.loads(found.group(0))
    except json.JSONDecodeError as e:
        raise OracleParseError(f"invalid JSON in oracle response: {e}")
    if not isinstance(items, list):
        raise OracleParseError("oracle response is not a JSON array")

    predictions: List[Optional[Prediction]] = [None] * count
    for item in items:
        parsed = _parse_item(item, count)
        if parsed is None:
            logger.warning(f"Skipping malformed oracle item: {str(item)[:120]}")
            continue
        index, prediction = parsed
        if predictions[index] is None:
            predictions[index] = prediction
    return predictions
