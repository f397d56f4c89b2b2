"""Tests for the shared categorical similarity routine."""

import pytest

from lostfound_matcher.categorical import categorical_similarity, shared_values


class TestCategoricalSimilarity:

    @pytest.mark.parametrize("values", [
        ["black"],
        ["black", "silver", "gold"],
        ["louis vuitton", "gucci"],
    ])
    def test_identical_lists(self, values):
        assert categorical_similarity(values, list(values)) == 1.0

    def test_both_empty_agree(self):
        assert categorical_similarity([], []) == 1.0
        assert categorical_similarity(None, None) == 1.0

    def test_one_empty(self):
        assert categorical_similarity([], ["black"]) == 0.0
        assert categorical_similarity(["black"], None) == 0.0

    def test_jaccard(self):
        assert categorical_similarity(["black", "red"], ["red", "blue"]) == pytest.approx(1 / 3)

    def test_duplicates_ignored(self):
        assert categorical_similarity(["red", "red"], ["red"]) == 1.0

    def test_disjoint(self):
        assert categorical_similarity(["nike"], ["adidas"]) == 0.0

    def test_symmetric(self):
        a, b = ["leather", "metal"], ["metal", "glass", "steel"]
        assert categorical_similarity(a, b) == categorical_similarity(b, a)


class TestSharedValues:

    def test_order_of_first_list(self):
        assert shared_values(["red", "black", "blue"], ["blue", "red"]) == ["red", "blue"]

    def test_no_overlap(self):
        assert shared_values(["red"], ["blue"]) == []

    def test_empty(self):
        assert shared_values(None, ["blue"]) == []
