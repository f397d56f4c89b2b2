"""
Multi-signal confidence scoring for lost/found pairs.

Combines text, dictionary-attribute, sentiment and (when both items carry
a photo) image similarity into a single confidence in [0, 1]. Each signal
compensates for the others' blind spots.

Signal weights are loaded from configuration to allow tuning without
code changes. See DEFAULT_WEIGHTS for the expected structure.
"""

import os
import logging
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)

SIGNALS = (
    "image", "text", "phrase", "color", "brand",
    "material", "condition", "entity", "sentiment",
)


def _weight(signal: str, suffix: str, default: str) -> float:
    return float(os.environ.get(f"SCORE_{signal.upper()}{suffix}_W", default))


# Scoring weights are loaded from environment or config.
# Without a photo pair the image weight moves into text and sentiment.
DEFAULT_WEIGHTS = {
    "with_image": {
        "image":     _weight("image", "", "0.25"),
        "text":      _weight("text", "", "0.25"),
        "phrase":    _weight("phrase", "", "0.15"),
        "color":     _weight("color", "", "0.10"),
        "brand":     _weight("brand", "", "0.08"),
        "material":  _weight("material", "", "0.08"),
        "condition": _weight("condition", "", "0.04"),
        "entity":    _weight("entity", "", "0.04"),
        "sentiment": _weight("sentiment", "", "0.01"),
    },
    "without_image": {
        "text":      _weight("text", "_NI", "0.35"),
        "phrase":    _weight("phrase", "_NI", "0.20"),
        "color":     _weight("color", "_NI", "0.10"),
        "brand":     _weight("brand", "_NI", "0.08"),
        "material":  _weight("material", "_NI", "0.08"),
        "condition": _weight("condition", "_NI", "0.04"),
        "entity":    _weight("entity", "_NI", "0.04"),
        "sentiment": _weight("sentiment", "_NI", "0.06"),
    },
}

# Sentiment scores are assumed to fall roughly in -5..+5
SENTIMENT_RANGE = 10.0
SENTIMENT_OFFSET = 5.0

CONFIDENCE_LEVELS = (
    (0.8, "Very High"),
    (0.6, "High"),
    (0.4, "Medium"),
    (0.2, "Low"),
)


def sentiment_similarity(score1: float, score2: float) -> float:
    """1 - distance between two sentiment scores mapped onto [0, 1]."""
    normalized1 = (score1 + SENTIMENT_OFFSET) / SENTIMENT_RANGE
    normalized2 = (score2 + SENTIMENT_OFFSET) / SENTIMENT_RANGE
    return max(0.0, min(1.0, 1.0 - abs(normalized1 - normalized2)))


def select_weights(image_available: bool, weights: dict = None) -> Dict[str, float]:
    weights = weights or DEFAULT_WEIGHTS
    return dict(weights["with_image" if image_available else "without_image"])


def applied_weights(signals: Dict[str, float], weights: Dict[str, float]) -> Dict[str, float]:
    """
    Weights of the signals actually present, rescaled to sum to 1.

    Signals without a weight are ignored; weights without a signal are
    dropped before rescaling.
    """
    present = {name: w for name, w in weights.items() if name in signals and w > 0}
    total = sum(present.values())
    if total <= 0:
        return {}
    return {name: w / total for name, w in present.items()}


def compute_confidence(signals: Dict[str, float],
                       image_available: bool = False,
                       weights: dict = None) -> float:
    """
    Weighted combination of similarity signals.

    Each signal must already be normalized to 0-1. The weighted sum is
    divided by the weight actually applied, so a missing signal never
    caps the reachable maximum.

    Args:
        signals: Signal name -> similarity in [0, 1].
        image_available: Selects the with_image / without_image weight set.
        weights: Optional override for the scoring weights dict.

    Returns:
        Confidence in [0, 1].
    """
    applied = applied_weights(signals, select_weights(image_available, weights))
    if not applied:
        logger.warning("No weighted signals available, confidence is 0")
        return 0.0

    confidence = sum(w * signals[name] for name, w in applied.items())
    return float(max(0.0, min(1.0, confidence)))


def confidence_label(score: float) -> str:
    for threshold, label in CONFIDENCE_LEVELS:
        if score >= threshold:
            return label
    return "Very Low"


def display_score(score: float) -> int:
    """Score on the 0-100 display scale."""
    return int(round(score * 100))


def rank_matches(matches: Iterable) -> List:
    """
    Sort matches by score (primary), image similarity (secondary), and
    creation time (tertiary tiebreaker).

    Returns:
        Sorted list (highest score first).
    """
    return sorted(
        matches,
        key=lambda m: (-m.score,
                       -(m.image_similarity if m.image_similarity is not None else -1.0),
                       m.created_at)
    )
