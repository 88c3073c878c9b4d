"""
Centralized configuration for the QMG team balancer.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "qmg_teams.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# Emit the ranked candidate list at DEBUG after every generation
LOG_TOP_MATCHUPS = _parse_bool("LOG_TOP_MATCHUPS", False)

BALANCER_SETTINGS: dict[str, Any] = {
    # Temporary session modifiers ("on fire" / "off day"), never persisted
    "buff_amount": _parse_float("BUFF_AMOUNT", 50.0),
    "nerf_amount": _parse_float("NERF_AMOUNT", 50.0),
    # Display/performance cap on returned candidate splits
    "max_results": _parse_int("MAX_RESULTS", 100),
}

MIN_ACTIVE_PLAYERS = _parse_int("MIN_ACTIVE_PLAYERS", 4)
DEFAULT_PLAYER_RATING = _parse_float("DEFAULT_PLAYER_RATING", 1000.0)

# Uneven team handicap (rating points per full player of size disadvantage)
DEFAULT_HANDICAP_COEFFICIENT = _parse_float("DEFAULT_HANDICAP_COEFFICIENT", 300.0)
HANDICAP_COEFFICIENT_MIN = _parse_float("HANDICAP_COEFFICIENT_MIN", 0.0)
HANDICAP_COEFFICIENT_MAX = _parse_float("HANDICAP_COEFFICIENT_MAX", 1000.0)
HANDICAP_LEARNING_RATE = _parse_float("HANDICAP_LEARNING_RATE", 20.0)

# Elo rating deltas after a recorded match
ELO_K_FACTOR = _parse_float("ELO_K_FACTOR", 32.0)
ELO_SCALE = 400.0

# Strength difference bands used when presenting candidate splits
BALANCED_DIFF_THRESHOLD = _parse_float("BALANCED_DIFF_THRESHOLD", 50.0)
UNBALANCED_DIFF_THRESHOLD = _parse_float("UNBALANCED_DIFF_THRESHOLD", 200.0)
