from typing import Dict

from .config import BORDERLINE_BAND, validate_threshold

SHORTLISTED = "shortlisted"
BORDERLINE = "borderline"
REJECTED = "rejected"

CLASSIFICATIONS = (SHORTLISTED, BORDERLINE, REJECTED)

RECOMMENDATIONS = ("strong_hire", "hire", "maybe", "no_hire")

# Score at or above which the fallback explanation recommends "hire"
FALLBACK_HIRE_SCORE = 70

DISPLAY = {
    SHORTLISTED: {"label": "Shortlisted", "emoji": "✅", "color": "green"},
    BORDERLINE: {"label": "Borderline", "emoji": "⚠️", "color": "yellow"},
    REJECTED: {"label": "Rejected", "emoji": "❌", "color": "red"},
}


def classify(total: int, threshold: int, borderline_band: int = BORDERLINE_BAND) -> str:
    """Label a total score against a threshold.

    Scores within borderline_band points below the threshold are
    "borderline"; anything lower is "rejected".
    """
    validate_threshold(threshold)
    if borderline_band < 0:
        raise ValueError(f"Borderline band must be >= 0, got {borderline_band}")
    if total >= threshold:
        return SHORTLISTED
    if total >= threshold - borderline_band:
        return BORDERLINE
    return REJECTED


def recommendation_for(total: int) -> str:
    """Recommendation used when no narrative explanation is available."""
    return "hire" if total >= FALLBACK_HIRE_SCORE else "maybe"


def display_for(classification: str) -> Dict[str, str]:
    return DISPLAY.get(classification, DISPLAY[REJECTED])
