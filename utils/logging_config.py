"""Logging configuration for pick tracking and analysis."""
import logging
import sys
from pathlib import Path
from datetime import datetime
from config.settings import LOGS_DIR, DEBUG_MODE


def setup_logging(session_name: str = "tenntrend"):
    """Setup structured logging for the application."""

    Path(LOGS_DIR).mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)
    root_logger.handlers = []

    # Console handler - INFO level
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File handler - DEBUG level for main log
    main_log_file = Path(LOGS_DIR) / f"{session_name}_{timestamp}.log"
    file_handler = logging.FileHandler(main_log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    pick_log_file = _add_tracker("pick_tracker", f"picks_{timestamp}.log")
    perf_log_file = _add_tracker("performance", f"performance_{timestamp}.log")

    logging.info(f"Logging initialized - Session: {session_name}_{timestamp}")
    logging.info(f"Main log: {main_log_file}")
    logging.info(f"Pick tracking log: {pick_log_file}")
    logging.debug(f"Performance log: {perf_log_file}")

    return timestamp


def _add_tracker(name: str, filename: str) -> Path:
    """Separate pipe-delimited log that does not propagate to root."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.handlers = []

    log_file = Path(LOGS_DIR) / filename
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(asctime)s|%(message)s', datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(handler)
    return log_file


def log_pick(kind: str, match):
    """Log a selected pick in structured format for analysis."""
    logger = logging.getLogger('pick_tracker')
    tier = match.tier.value if match.tier else "-"
    confidence = match.confidence.value if match.confidence else "-"
    logger.info(
        f"{kind}|{match.league}|{match.home_team} vs {match.away_team}|"
        f"{match.market_odd:.2f}|{match.win_probability:.1f}|"
        f"{match.expected_value:.2f}|{tier}|{confidence}"
    )


def log_performance_metric(metric_name: str, value: float, unit: str = ""):
    """Log performance metrics."""
    logger = logging.getLogger('performance')
    logger.info(f"{metric_name}|{value:.3f}|{unit}")
