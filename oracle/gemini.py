"""Gemini oracle (primary)."""
import logging
from typing import List, Optional

from config.settings import GEMINI_API_KEY, GEMINI_MODEL, ORACLE_MAX_TOKENS, ORACLE_TEMPERATURE
from core.errors import OracleParseError, OracleUnavailableError, UpstreamError
from core.http_client import HttpClient
from core.models import MatchRecord, Prediction
from oracle.base import OracleAdapter, parse_predictions
from oracle.prompt import SYSTEM_INSTRUCTION, build_prompt

logger = logging.getLogger(__name__)

GEMINI_API = "https://generativelanguage.googleapis.com/v1beta"


class GeminiOracle(OracleAdapter):
    """Calls the Gemini generateContent REST endpoint."""

    name = "gemini"

    def __init__(self, http: HttpClient, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL):
        self.http = http
        self.api_key = api_key
        self.model = model

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def build_request(self, matches: List[MatchRecord]) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": build_prompt(matches)}]}],
            "generationConfig": {
                "temperature": ORACLE_TEMPERATURE,
                "maxOutputTokens": ORACLE_MAX_TOKENS,
            },
        }

    @staticmethod
    def extract_text(response) -> str:
        if not isinstance(response, dict):
            raise OracleParseError("Gemini returned no JSON body")
        candidates = response.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            raise OracleParseError("Gemini returned no candidates")
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise OracleParseError("Gemini candidate has no content parts")
        return "".join(
            p["text"] for p in parts
            if isinstance(p, dict) and isinstance(p.get("text"), str)
        )

    async def predict(self, matches: List[MatchRecord]) -> List[Optional[Prediction]]:
        url = f"{GEMINI_API}/models/{self.model}:generateContent"
        try:
            response = await self.http.post_json(
                url,
                self.build_request(matches),
                headers={"x-goog-api-key": self.api_key},
            )
        except UpstreamError as e:
            raise OracleUnavailableError(f"Gemini: {e}") from e
        return parse_predictions(self.extract_text(response), len(matches))
