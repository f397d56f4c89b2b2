"""
Description-to-description similarity.

Averages three independent signals so that no single algorithm's blind
spot dominates:
    dice         character-bigram overlap of the raw strings
    cosine       term-frequency vectors over the shared vocabulary
    levenshtein  1 - edit distance / longer length
"""

import math
from collections import Counter
from typing import Optional

from rapidfuzz.distance import Levenshtein

from .text_features import tokenize


def dice_coefficient(text1: str, text2: str) -> float:
    """Sørensen-Dice coefficient over character bigrams, whitespace ignored."""
    first = "".join(text1.split())
    second = "".join(text2.split())

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = Counter(first[i:i + 2] for i in range(len(first) - 1))
    intersection = 0
    for i in range(len(second) - 1):
        bigram = second[i:i + 2]
        if first_bigrams[bigram] > 0:
            first_bigrams[bigram] -= 1
            intersection += 1

    return (2.0 * intersection) / (len(first) + len(second) - 2)


def cosine_similarity(text1: str, text2: str) -> float:
    """Cosine similarity of token-frequency vectors built over both vocabularies."""
    counts1 = Counter(tokenize(text1))
    counts2 = Counter(tokenize(text2))
    vocabulary = set(counts1) | set(counts2)

    dot_product = sum(counts1[t] * counts2[t] for t in vocabulary)
    magnitude1 = math.sqrt(sum(v * v for v in counts1.values()))
    magnitude2 = math.sqrt(sum(v * v for v in counts2.values()))

    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0
    return dot_product / (magnitude1 * magnitude2)


def levenshtein_similarity(text1: str, text2: str) -> float:
    longest = max(len(text1), len(text2))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(text1, text2) / longest


def text_similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """
    Average of dice, cosine and Levenshtein similarity.

    Returns 0.0 when either description is missing or empty.
    """
    if not text1 or not text2:
        return 0.0

    score = (dice_coefficient(text1, text2)
             + cosine_similarity(text1, text2)
             + levenshtein_similarity(text1, text2)) / 3
    return max(0.0, min(1.0, score))
