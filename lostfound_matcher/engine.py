"""
Lost/found matching engine.

Orchestrates the multi-signal pipeline for every candidate pair:
    1. Text features and dictionary attributes for both descriptions
    2. Text, attribute, entity and sentiment similarity
    3. Image similarity when both items carry a photo
    4. Weighted confidence -> accept or discard -> explanation

Each pair is independent. If one fails (e.g., a photo that cannot be
decoded), the failure is recorded on that pair and the batch continues.
"""

import enum
import os
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Union

from .categorical import categorical_similarity
from .errors import CandidatePoolError
from .explanation import build_explanation
from .image_engine import ImageSimilarityEngine
from .legacy import bucketed_score, classic_score
from .models import ACTIVE, Item, Match, PairOutcome, ScoreResult
from .scoring import compute_confidence, applied_weights, select_weights, sentiment_similarity
from .store import MatchStore
from .text_features import extract_features
from .text_similarity import text_similarity

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = float(os.environ.get("MATCH_THRESHOLD", "0.25"))
DEFAULT_MAX_WORKERS = int(os.environ.get("MATCH_MAX_WORKERS", "4"))

PoolSource = Union[Iterable[Item], Callable[[], Iterable[Item]]]

# Dictionary-attribute signals and the FeatureSet field each compares
ATTRIBUTE_SIGNALS = {
    "phrase": "key_phrases",
    "color": "colors",
    "brand": "brands",
    "material": "materials",
    "condition": "conditions",
    "entity": "entities",
}


class CandidateState(str, enum.Enum):
    NEW = "new"
    SCORED = "scored"
    ACCEPTED = "accepted"
    DISCARDED = "discarded"


@dataclass
class RecalculationSummary:
    user_email: str
    removed: int = 0
    recalculated: int = 0
    inserted: int = 0
    matches: List[Match] = field(default_factory=list)


class MatchEngine:
    """
    Scores lost/found pairs and builds Match records.
    """

    def __init__(self,
                 image_engine: Optional[ImageSimilarityEngine] = None,
                 threshold: float = None,
                 max_workers: int = None,
                 weights: dict = None):
        """
        Args:
            image_engine: Photo comparator. A default one rooted at
                IMAGE_UPLOAD_ROOT is created when omitted.
            threshold: Minimum confidence for a pair to become a Match.
            max_workers: Upper bound on pairs scored concurrently; caps
                the number of simultaneous image decodes.
            weights: Optional override for the scoring weights dict.
        """
        self.image_engine = image_engine or ImageSimilarityEngine()
        self.threshold = DEFAULT_THRESHOLD if threshold is None else threshold
        self.max_workers = max(1, max_workers or DEFAULT_MAX_WORKERS)
        self.weights = weights

    def score(self, lost_item: Item, found_item: Item) -> ScoreResult:
        """
        Score one (lost, found) pair.

        Raises:
            ValueError: If the arguments are not a lost item and a found item.
        """
        if not lost_item.is_lost or found_item.is_lost:
            raise ValueError(
                f"score() expects (lost, found), got ({lost_item.type}, {found_item.type})"
            )

        lost_features = extract_features(lost_item.description)
        found_features = extract_features(found_item.description)

        signals = {
            "text": text_similarity(lost_item.description, found_item.description),
            "sentiment": sentiment_similarity(lost_features.sentiment_score,
                                              found_features.sentiment_score),
        }
        # Attributes absent from both descriptions are left out; their weight is redistributed
        for signal, attribute in ATTRIBUTE_SIGNALS.items():
            lost_values = getattr(lost_features, attribute)
            found_values = getattr(found_features, attribute)
            if lost_values or found_values:
                signals[signal] = categorical_similarity(lost_values, found_values)

        image_similarity = None
        image_available = bool(lost_item.image_ref and found_item.image_ref)
        if image_available:
            image_similarity = self.image_engine.compare_item_images(
                lost_item.image_ref, found_item.image_ref
            )
            signals["image"] = image_similarity

        confidence = compute_confidence(signals, image_available, self.weights)

        explanation = build_explanation(
            lost_item, found_item, lost_features, found_features,
            confidence, image_similarity,
        )

        return ScoreResult(
            score=confidence,
            image_similarity=image_similarity,
            signals=signals,
            weights=applied_weights(signals, select_weights(image_available, self.weights)),
            explanation=explanation,
            legacy={
                "classic": classic_score(lost_item, found_item),
                "bucketed": float(bucketed_score(lost_item, found_item)),
            },
        )

    def is_candidate(self, new_item: Item, candidate: Item) -> bool:
        """Opposite type, different reporter, still active."""
        return (candidate.type == new_item.opposite_type
                and candidate.user_email != new_item.user_email
                and candidate.status == ACTIVE
                and candidate.id != new_item.id)

    def _orient(self, new_item: Item, candidate: Item):
        if new_item.is_lost:
            return new_item, candidate
        return candidate, new_item

    def _score_pair(self, new_item: Item, candidate: Item) -> PairOutcome:
        lost, found = self._orient(new_item, candidate)
        logger.debug(f"Pair {lost.id}/{found.id}: {CandidateState.NEW.value}")
        try:
            result = self.score(lost, found)
        except Exception as e:
            logger.error(f"Scoring failed for pair {lost.id}/{found.id}: {e}")
            return PairOutcome(candidate=candidate, error=e)
        logger.debug(f"Pair {lost.id}/{found.id}: {CandidateState.SCORED.value} ({result.score:.3f})")
        return PairOutcome(candidate=candidate, result=result)

    def _load_pool(self, candidate_pool: PoolSource) -> List[Item]:
        try:
            pool = candidate_pool() if callable(candidate_pool) else candidate_pool
            return list(pool)
        except Exception as e:
            raise CandidatePoolError(f"Could not load candidate pool: {e}") from e

    def score_candidates(self, new_item: Item, candidate_pool: PoolSource) -> List[PairOutcome]:
        """
        Score a new item against every eligible candidate in the pool.

        Raises:
            CandidatePoolError: If the pool itself cannot be obtained.
        """
        candidates = [c for c in self._load_pool(candidate_pool)
                      if self.is_candidate(new_item, c)]
        if not candidates:
            return []

        if self.max_workers == 1 or len(candidates) == 1:
            return [self._score_pair(new_item, c) for c in candidates]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as pool:
            futures = [pool.submit(self._score_pair, new_item, c) for c in candidates]
            return [f.result() for f in futures]

    def find_matches(self, new_item: Item, candidate_pool: PoolSource) -> List[Match]:
        """
        Find matches for a newly reported item.

        Args:
            new_item: The lost or found item just reported.
            candidate_pool: Iterable of Items, or a zero-argument callable
                returning one. Ineligible items are filtered out here.

        Returns:
            Matches whose score reached the threshold, in no particular
            order. Pairs that failed to score are left out.
        """
        outcomes = self.score_candidates(new_item, candidate_pool)

        matches = []
        failed = 0
        for outcome in outcomes:
            if not outcome.ok:
                failed += 1
                continue

            lost, found = self._orient(new_item, outcome.candidate)
            result = outcome.result
            if result.score < self.threshold:
                logger.debug(f"Pair {lost.id}/{found.id}: {CandidateState.DISCARDED.value}")
                continue

            logger.debug(f"Pair {lost.id}/{found.id}: {CandidateState.ACCEPTED.value}")
            matches.append(Match(
                lost_item_id=lost.id,
                found_item_id=found.id,
                lost_user_email=lost.user_email,
                found_user_email=found.user_email,
                score=result.score,
                image_similarity=result.image_similarity,
                explanation=result.explanation,
            ))

        logger.info(
            f"Matching complete for {new_item.type} item {new_item.id}: "
            f"{len(outcomes)} candidates -> {len(matches)} matches, {failed} failed"
        )
        return matches

    def recalculate_for_user(self,
                             user_email: str,
                             items: Iterable[Item],
                             store: MatchStore) -> RecalculationSummary:
        """
        Re-run matching for every item a user reported.

        The user's stored matches are removed first so reruns stay
        idempotent; freshly computed matches are inserted only if their
        pair is not already stored.
        """
        items = list(items)
        summary = RecalculationSummary(user_email=user_email)
        summary.removed = len(store.remove_for_user(user_email))

        for item in items:
            if item.user_email != user_email:
                continue
            new_matches = self.find_matches(item, items)
            summary.recalculated += len(new_matches)
            for match in new_matches:
                if store.add(match):
                    summary.inserted += 1
                    summary.matches.append(match)

        logger.info(
            f"Recalculated matches for {user_email}: removed {summary.removed}, "
            f"computed {summary.recalculated}, inserted {summary.inserted}"
        )
        return summary
