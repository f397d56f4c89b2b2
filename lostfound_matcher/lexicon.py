"""
Fixed vocabularies used by the text feature extractor.

Each attribute dictionary is an ordered tuple so extraction results keep
a stable order. All lookups are plain substring checks on the lowercased
description; "gold" and "silver" intentionally appear as both a color
and a material.
"""

from typing import Dict, FrozenSet, Tuple

COLORS: Tuple[str, ...] = (
    "black", "white", "red", "blue", "green", "yellow", "orange", "purple",
    "pink", "brown", "gray", "grey", "silver", "gold", "bronze", "copper",
)

BRANDS: Tuple[str, ...] = (
    "apple", "iphone", "samsung", "nike", "adidas", "gucci", "prada",
    "louis vuitton", "chanel", "dior", "versace", "calvin klein",
    "ray ban", "oakley", "sony", "lg", "hp", "dell", "lenovo",
)

MATERIALS: Tuple[str, ...] = (
    "leather", "metal", "plastic", "wood", "fabric", "cotton", "denim",
    "silk", "wool", "canvas", "rubber", "glass", "ceramic", "steel",
    "aluminum", "titanium", "gold", "silver", "diamond",
)

CONDITIONS: Tuple[str, ...] = (
    "new", "used", "old", "worn", "damaged", "cracked", "broken",
    "scratched", "dirty", "clean", "perfect", "excellent", "good",
    "fair", "poor", "mint", "pristine",
)

KEY_PHRASES: Tuple[str, ...] = (
    "cracked screen", "black leather", "silver chain", "gold watch",
    "blue jeans", "red shirt", "white sneakers", "brown wallet",
    "car keys", "house keys", "office keys", "backpack",
    "laptop bag", "phone case", "sunglasses", "headphones",
)

# AFINN-style polarity, roughly -5..+5 per word
SENTIMENT: Dict[str, int] = {
    "lost": -3, "missing": -2, "stolen": -3, "broken": -1, "damaged": -3,
    "cracked": -2, "scratched": -1, "dirty": -2, "poor": -2, "bad": -3,
    "worried": -3, "sad": -2, "upset": -2, "desperate": -3, "urgent": -1,
    "ruined": -2, "torn": -2, "afraid": -2, "unfortunately": -2, "panic": -3,
    "good": 3, "great": 3, "excellent": 3, "perfect": 3, "clean": 2,
    "nice": 3, "beautiful": 3, "favorite": 2, "favourite": 2, "love": 3,
    "precious": 2, "safe": 1, "thanks": 2, "thank": 2, "please": 1,
    "help": 2, "reward": 2, "grateful": 3, "happy": 3, "lucky": 3,
    "important": 2, "valuable": 2, "new": 1, "pristine": 2, "mint": 1,
}

STOP_WORDS: FrozenSet[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "of", "in", "on", "at", "to",
    "for", "with", "without", "by", "from", "near", "into", "onto", "over",
    "under", "about", "is", "was", "were", "are", "be", "been", "it", "its",
    "this", "that", "these", "those", "my", "your", "his", "her", "their",
    "our", "i", "me", "we", "you", "he", "she", "they", "them", "has",
    "have", "had", "not", "no", "very", "some", "any", "there", "here",
    "which", "who", "what", "when", "where", "while", "as", "so", "if",
})

# Words treated as place entities even when written in lowercase
PLACE_WORDS: FrozenSet[str] = frozenset({
    "airport", "station", "library", "campus", "mall", "stadium",
    "hospital", "museum", "university", "metro", "subway", "cafeteria",
})

ADJECTIVE_SUFFIXES: Tuple[str, ...] = (
    "ful", "ous", "ive", "able", "ible", "less", "ish", "ic", "ical", "est",
)
