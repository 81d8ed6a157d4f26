"""Application settings and configuration."""
import os
from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()


def _env(name: str, default: str = "") -> str:
    """Read a variable, also accepting the VITE_ prefix used by the web build."""
    return os.getenv(name) or os.getenv(f"VITE_{name}") or default


# Directories
DATA_DIR = os.getenv("DATA_DIR", os.path.join("public", "data"))
LOGS_DIR = "logs"
DAILY_PICKS_FILE = "daily-picks.json"
RESULTS_HISTORY_FILE = "results-history.json"
VALUE_BETS_CSV_FILE = "value-bets.csv"
QUOTA_FILE = os.path.join(DATA_DIR, "api-usage.json")

# API Keys (environment variables only)
ODDS_API_KEY = _env("THE_ODDS_API_KEY")
GEMINI_API_KEY = _env("GEMINI_API_KEY")
GROQ_API_KEY = _env("GROQ_API_KEY")
DISCORD_WEBHOOK_URL = _env("DISCORD_WEBHOOK_URL")

# HTTP Settings
HTTP_TIMEOUT = 25
HTTP_CONCURRENCY = 12
HTTP_RETRIES = 2
HTTP_BACKOFF_SECONDS = 0.5  # delay before retry n is n * backoff

# Upstream quota
ODDS_API_MONTHLY_QUOTA = int(os.getenv("ODDS_API_MONTHLY_QUOTA", "500"))

# Scan Settings
SCAN_WINDOW_HOURS = 24
MAX_MATCHES_PER_TOUR = 15
ODDS_REGIONS = "us,eu"

# Oracle Settings
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
ORACLE_TIMEOUT = 90
ORACLE_RETRIES = 2
ORACLE_BACKOFF_SECONDS = 5.0  # 5s, then 10s
ORACLE_TEMPERATURE = 0.3
ORACLE_MAX_TOKENS = 4096

# EV Tier Settings (percent)
MIN_EV_THRESHOLD = 3.0
STRONG_EV_MIN = 3.0
ELITE_EV_MIN = 6.0
SICK_EV_MIN = 10.0

# Safe Bet Settings
SAFE_BET_MIN_ODDS = 1.20
SAFE_BET_MAX_ODDS = 1.60
SAFE_BET_MIN_PROBABILITY = 65.0
SAFE_BET_PROBABILITY_MARGIN = 5.0

# Bet of the Day weights: tier > EV > confidence > context
BOTD_TIER_WEIGHT = 0.30
BOTD_EV_WEIGHT = 0.35
BOTD_CONFIDENCE_WEIGHT = 0.25
BOTD_CONTEXT_WEIGHT = 0.10
TIER_SCORES = {"SICK": 200, "ELITE": 150, "STRONG": 100}
CONFIDENCE_SCORES = {"high": 100, "medium": 60, "low": 20}

# Output
FEATURED_BETS_COUNT = 5
FEATURED_SAFE_BETS_COUNT = 3
PICKS_VERSION = "2.1.0"

# Settlement Settings
SETTLEMENT_DAY_TOLERANCE = 1
SETTLEMENT_SCORES_DAYS_FROM = 3
SETTLEMENT_REQUEST_DELAY = 0.3  # seconds between upstream calls

# Logging
DEBUG_MODE = os.getenv("DEBUG", "0") == "1"

# Scan date is reported in Swedish local time
SCAN_TIMEZONE = "Europe/Stockholm"
