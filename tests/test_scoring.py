"""Tests for the multi-signal confidence scoring module."""

from datetime import datetime, timedelta, timezone

import pytest

from lostfound_matcher.models import Explanation, Match
from lostfound_matcher.scoring import (
    DEFAULT_WEIGHTS, SIGNALS, applied_weights, compute_confidence, confidence_label,
    display_score, rank_matches, select_weights, sentiment_similarity,
)


def _signals(value, image=True):
    names = SIGNALS if image else [s for s in SIGNALS if s != "image"]
    return {name: value for name in names}


class TestWeights:

    def test_nominal_image_weights_sum_to_one(self):
        assert sum(DEFAULT_WEIGHTS["with_image"].values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("image", [True, False])
    def test_applied_weights_sum_to_one(self, image):
        applied = applied_weights(_signals(0.5, image), select_weights(image))
        assert sum(applied.values()) == pytest.approx(1.0)

    def test_without_image_has_no_image_weight(self):
        assert "image" not in DEFAULT_WEIGHTS["without_image"]

    def test_image_weight_moves_to_text_and_sentiment(self):
        with_image, without = DEFAULT_WEIGHTS["with_image"], DEFAULT_WEIGHTS["without_image"]
        assert without["text"] > with_image["text"]
        assert without["sentiment"] > with_image["sentiment"]
        assert without["color"] == with_image["color"]

    def test_applied_weights_renormalize_dropped_signal(self):
        signals = _signals(1.0, image=False)
        del signals["entity"]
        applied = applied_weights(signals, select_weights(False))
        assert "entity" not in applied
        assert sum(applied.values()) == pytest.approx(1.0)

    def test_applied_weights_ignore_unweighted_signal(self):
        applied = applied_weights(_signals(1.0, image=True), select_weights(False))
        assert "image" not in applied
        assert sum(applied.values()) == pytest.approx(1.0)


class TestComputeConfidence:
    """Tests for the weighted confidence scorer."""

    @pytest.mark.parametrize("image", [True, False])
    def test_perfect_signals(self, image):
        assert compute_confidence(_signals(1.0, image), image) == pytest.approx(1.0)

    @pytest.mark.parametrize("image", [True, False])
    def test_zero_signals(self, image):
        assert compute_confidence(_signals(0.0, image), image) == 0.0

    def test_missing_signal_does_not_cap_maximum(self):
        signals = _signals(1.0, image=False)
        del signals["phrase"]
        assert compute_confidence(signals) == pytest.approx(1.0)

    def test_image_signal_contributes(self):
        signals = _signals(0.5, image=True)
        low = compute_confidence(dict(signals, image=0.0), True)
        high = compute_confidence(dict(signals, image=1.0), True)
        assert high - low == pytest.approx(0.25)

    def test_no_signals(self):
        assert compute_confidence({}) == 0.0

    def test_score_within_range(self):
        signals = _signals(1.0, image=True)
        signals["text"] = 1.5
        assert 0.0 <= compute_confidence(signals, True) <= 1.0

    def test_custom_weights(self):
        weights = {"with_image": {"image": 1.0}, "without_image": {"text": 1.0}}
        assert compute_confidence({"text": 0.3, "color": 1.0}, False, weights) == pytest.approx(0.3)


class TestSentimentSimilarity:

    def test_equal(self):
        assert sentiment_similarity(2, 2) == 1.0

    def test_opposite_extremes(self):
        assert sentiment_similarity(-5, 5) == pytest.approx(0.0)

    def test_clamped_beyond_range(self):
        assert sentiment_similarity(-12, 12) == 0.0

    def test_partial(self):
        assert sentiment_similarity(0, -2) == pytest.approx(0.8)


class TestConfidenceLabel:

    @pytest.mark.parametrize("score, label", [
        (1.0, "Very High"), (0.8, "Very High"), (0.79, "High"), (0.6, "High"),
        (0.4, "Medium"), (0.2, "Low"), (0.19, "Very Low"), (0.0, "Very Low"),
    ])
    def test_buckets(self, score, label):
        assert confidence_label(score) == label

    def test_display_score(self):
        assert display_score(0.834) == 83
        assert display_score(0.835 + 1e-9) == 84
        assert display_score(1.0) == 100


class TestRankMatches:
    """Tests for result ranking."""

    def _match(self, score, image=None, minutes=0):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)
        return Match(lost_item_id="l", found_item_id=f"f{score}{image}{minutes}",
                     score=score, image_similarity=image, created_at=created,
                     explanation=Explanation([], "Low", 0))

    def test_ranks_by_score_descending(self):
        ranked = rank_matches([self._match(0.5), self._match(0.8), self._match(0.3)])
        assert [m.score for m in ranked] == [0.8, 0.5, 0.3]

    def test_tiebreak_by_image_similarity(self):
        ranked = rank_matches([self._match(0.5, None), self._match(0.5, 0.9), self._match(0.5, 0.2)])
        assert [m.image_similarity for m in ranked] == [0.9, 0.2, None]

    def test_tiebreak_by_creation_time(self):
        later, earlier = self._match(0.5, minutes=5), self._match(0.5, minutes=1)
        assert rank_matches([later, earlier])[0] is earlier

    def test_empty_list(self):
        assert rank_matches([]) == []
