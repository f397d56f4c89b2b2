"""
lostfound_matcher — Multi-signal matching of lost and found item reports.

Combines description text similarity, dictionary attributes (colors,
brands, materials, conditions, key phrases), sentiment, and photo
similarity (color histograms + edge correlation) into one confidence
score with a human-readable explanation.

Modules:
    engine           MatchEngine: score(), find_matches(), recalculate_for_user()
    models           Item, FeatureSet, Match and related records
    text_features    Tokens, stems, POS guesses, dictionary attributes, sentiment
    text_similarity  Dice + cosine + Levenshtein description similarity
    categorical      Shared set-overlap similarity
    geo              Haversine distance and recency helpers
    histograms       RGB histogram extraction + cosine comparison
    structural       Edge-map correlation
    image_paths      Image reference resolution
    image_engine     ImageSimilarityEngine
    scoring          Weighted confidence, labels, ranking
    explanation      Match explanations
    legacy           Older single-scale scores, reported only
    store            In-memory match registry
"""

from .engine import MatchEngine, RecalculationSummary
from .errors import (
    CandidatePoolError, InvalidCoordinateError, MatchingError, UnreadableImageError,
)
from .image_engine import ImageSimilarityEngine
from .models import Explanation, FeatureSet, Item, Location, Match, MatchStatus, ScoreResult
from .scoring import rank_matches
from .store import MatchStore

__version__ = "1.0.0"
