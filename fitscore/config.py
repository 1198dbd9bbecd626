"""
Engine configuration.

Static scoring constants plus collaborator settings read from the
environment (after loading .env). The weight table is validated once,
when this module is imported; a bad table stops the engine from loading.
"""

import os
from typing import Dict, Mapping

from .env import load_env
from .errors import ConfigurationError

load_env()

DIMENSIONS = ("skills", "experience", "projects", "education")

# Must sum to 1.0
WEIGHTS: Dict[str, float] = {
    "skills": 0.50,
    "experience": 0.25,
    "projects": 0.15,
    "education": 0.10,
}

WEIGHT_TOLERANCE = 0.001

# Skills dimension split between required and preferred lists
REQUIRED_SKILL_SHARE = 0.7
PREFERRED_SKILL_SHARE = 0.3
DEFAULT_REQUIRED_IMPORTANCE = 3
DEFAULT_PREFERRED_IMPORTANCE = 2

DEGREE_RANKS: Dict[str, int] = {
    "phd": 5,
    "master": 4,
    "bachelor": 3,
    "associate": 2,
    "certification": 1,
    "high_school": 0,
    "none": 0,
    "unknown": 1,
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


DEFAULT_THRESHOLD: int = _env_int("DEFAULT_THRESHOLD", 70)
BORDERLINE_BAND: int = _env_int("BORDERLINE_BAND", 10)

# Narrative-generation collaborator (OpenAI-compatible chat completions)
NARRATIVE_API_KEY: str = os.getenv("NARRATIVE_API_KEY") or os.getenv("PERPLEXITY_API_KEY", "")
NARRATIVE_BASE_URL: str = os.getenv("NARRATIVE_BASE_URL", "https://api.perplexity.ai")
NARRATIVE_MODEL: str = os.getenv("NARRATIVE_MODEL", "sonar")
NARRATIVE_MAX_TOKENS: int = _env_int("NARRATIVE_MAX_TOKENS", 4096)
NARRATIVE_TEMPERATURE: float = _env_float("NARRATIVE_TEMPERATURE", 0.1)
NARRATIVE_TIMEOUT_SECONDS: float = _env_float("NARRATIVE_TIMEOUT_SECONDS", 30.0)
NARRATIVE_MAX_RETRIES: int = _env_int("NARRATIVE_MAX_RETRIES", 2)

LOG_LEVEL: str = os.getenv("FITSCORE_LOG_LEVEL", "INFO")


def validate_weights(weights: Mapping[str, float]) -> None:
    """
    Check that the weight table covers every dimension and sums to 1.0.

    Raises:
        ConfigurationError: On a missing dimension, a negative weight or a
            sum outside 1.0 +/- WEIGHT_TOLERANCE
    """
    missing = [d for d in DIMENSIONS if d not in weights]
    if missing:
        raise ConfigurationError(f"Scoring weights missing dimensions: {', '.join(missing)}")
    negative = [d for d in DIMENSIONS if weights[d] < 0]
    if negative:
        raise ConfigurationError(f"Scoring weights must be non-negative: {', '.join(negative)}")
    total = sum(weights[d] for d in DIMENSIONS)
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigurationError(f"Scoring weights must sum to 1.0, got {total}")


def validate_threshold(threshold: int) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError(f"Threshold must be a number between 0 and 100, got {threshold!r}")
    if threshold < 0 or threshold > 100:
        raise ValueError(f"Threshold must be a number between 0 and 100, got {threshold}")
    return threshold


validate_weights(WEIGHTS)
try:
    validate_threshold(DEFAULT_THRESHOLD)
except ValueError as e:
    raise ConfigurationError(f"DEFAULT_THRESHOLD: {e}") from e
