"""Groq oracle (fallback), OpenAI-compatible chat completions."""
import logging
from typing import List, Optional

from config.settings import GROQ_API_KEY, GROQ_MODEL, ORACLE_MAX_TOKENS, ORACLE_TEMPERATURE
from core.errors import OracleParseError, OracleUnavailableError, UpstreamError
from core.http_client import HttpClient
from core.models import MatchRecord, Prediction
from oracle.base import OracleAdapter, parse_predictions
from oracle.prompt import SYSTEM_INSTRUCTION, build_prompt

logger = logging.getLogger(__name__)

GROQ_API = "https://api.groq.com/openai/v1"


class GroqOracle(OracleAdapter):
    name = "groq"

    def __init__(self, http: HttpClient, api_key: str = GROQ_API_KEY, model: str = GROQ_MODEL):
        self.http = http
        self.api_key = api_key
        self.model = model

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def predict(self, matches: List[MatchRecord]) -> List[Optional[Prediction]]:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": build_prompt(matches)},
            ],
            "temperature": ORACLE_TEMPERATURE,
            "max_tokens": ORACLE_MAX_TOKENS,
        }
        try:
            response = await self.http.post_json(
                f"{GROQ_API}/chat/completions",
                body,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except UpstreamError as e:
            raise OracleUnavailableError(f"Groq: {e}") from e

        try:
            text = response["choices"][0]["message"]["content"] or ""
        except (TypeError, KeyError, IndexError):
            raise OracleParseError("Groq response has no message content")
        return parse_predictions(text, len(matches))
