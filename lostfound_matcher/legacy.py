"""
Legacy single-signal scores kept for comparison.

Two older conventions predate the weighted multi-signal confidence:
    classic_score   0-1: word overlap, category, distance, recency
    bucketed_score  0-100: category points, shared words, distance buckets

They run on different scales from the weighted confidence and from each
other. ScoreResult.legacy reports them for diagnostics only; they never
decide whether a match is accepted.
"""

import re

from .geo import distance_km, normalized_distance, recency_bonus
from .models import Item

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def _normalized_words(text: str):
    return _PUNCTUATION_RE.sub("", text.lower()).split()


def description_jaccard(text1: str, text2: str) -> float:
    if not text1 or not text2:
        return 0.0
    words1 = set(_normalized_words(text1))
    words2 = set(_normalized_words(text2))
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def classic_score(lost: Item, found: Item) -> float:
    """Description 40%, same category 30%, proximity 20%, reported within a week 10%."""
    score = description_jaccard(lost.description, found.description) * 0.4

    if lost.category and lost.category == found.category:
        score += 0.3

    score += (1 - normalized_distance(lost.location, found.location)) * 0.2
    score += recency_bonus(lost.created_at, found.created_at, bonus=0.1)

    return min(score, 1.0)


def bucketed_score(lost: Item, found: Item) -> int:
    """Points out of 100: category 40, shared long words up to 30, distance bucket up to 30."""
    score = 0.0

    if lost.category and lost.category == found.category:
        score += 40

    lost_words = lost.description.lower().split(" ")
    found_text = found.description.lower()
    if lost.description:
        common = [w for w in lost_words if len(w) > 3 and w in found_text]
        score += min(30.0, len(common) / len(lost_words) * 30)

    distance = distance_km(lost.location, found.location)
    if distance is not None:
        if distance <= 1:
            score += 30
        elif distance <= 5:
            score += 20
        elif distance <= 10:
            score += 10

    return int(round(min(100.0, score)))
