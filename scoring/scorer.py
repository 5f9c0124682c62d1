"""
Score clamping and level grading.

Every module's level is a pure function of its final clamped score:
- seo / accessibility / performance / security walk their thresholds top-down
  with ">=" comparisons,
- suspicious uses strict ">" comparisons (higher = more suspicious).
"""
from __future__ import annotations

from config import (
    LEVEL_THRESHOLDS,
    SUSPICIOUS_DEFAULT_LEVEL,
    SUSPICIOUS_FLAG_THRESHOLD,
    SUSPICIOUS_LEVELS,
)


def clamp_score(value: float) -> int:
    """Round and clamp a raw score into [0, 100]."""
    return int(max(0, min(100, round(value))))


def score_label(score: float, module: str) -> str:
    if module == "suspicious":
        for threshold, label in SUSPICIOUS_LEVELS:
            if score > threshold:
                return label
        return SUSPICIOUS_DEFAULT_LEVEL

    thresholds = LEVEL_THRESHOLDS[module]
    for threshold, label in thresholds:
        if score >= threshold:
            return label
    return thresholds[-1][1]


def is_suspicious(score: float) -> bool:
    return score > SUSPICIOUS_FLAG_THRESHOLD


def score_color(score: float, module: str = "seo") -> str:
    """Display colour; suspicious scores read inverted (high = bad)."""
    if module == "suspicious":
        score = 100 - score
    if score >= 90:
        return "#00C851"
    elif score >= 70:
        return "#FFD700"
    elif score >= 50:
        return "#FF8800"
    else:
        return "#FF4444"
