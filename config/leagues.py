"""League configuration for supported tours."""
from typing import Dict, Optional

LEAGUE_CONFIG = {
    "ATP": {
        "display_name": "ATP Tour",
        "context_score": 100,
    },
    "WTA": {
        "display_name": "WTA Tour",
        "context_score": 100,
    },
}

DEFAULT_CONTEXT_SCORE = 60


def classify_sport(sport: Dict) -> Optional[str]:
    """Return the tour tag (ATP/WTA) for a The-Odds-API sport entry, if any."""
    key = (sport.get("key") or "").lower()
    title = (sport.get("title") or "").upper()
    if "tennis" not in key:
        return None
    if "atp" in key or "ATP" in title:
        return "ATP"
    if "wta" in key or "WTA" in title:
        return "WTA"
    return None


def get_context_score(league: str) -> float:
    """Context bonus for a league; more liquid tours score higher."""
    config = LEAGUE_CONFIG.get(league)
    if not config:
        return DEFAULT_CONTEXT_SCORE
    return config["context_score"]


def get_league_config(league: str):
    """Get configuration for a specific league."""
    return LEAGUE_CONFIG.get(league)
