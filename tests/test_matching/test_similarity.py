"""Tests for text similarity scoring."""

import pytest

from rehab_import.matching.similarity import similarity_score


class TestSimilarityScore:
    def test_exact_match_ignores_case_and_padding(self):
        assert similarity_score("  Jane Doe ", "jane doe") == 100

    def test_containment_scores_80(self):
        assert similarity_score("Jane", "Jane Doe") == 80
        assert similarity_score("Jane Doe", "Jane") == 80

    @pytest.mark.parametrize("query,target", [("", "Jane"), ("   ", "Jane"), ("Jane", ""), (None, "Jane")])
    def test_empty_side_scores_zero(self, query, target):
        assert similarity_score(query, target) == 0

    def test_no_overlap_scores_zero(self):
        assert similarity_score("John Smith", "Jane Doe") == 0

    def test_partial_word_overlap(self):
        # "jane" is contained in "janet"; "doe" and "dole" do not overlap
        assert similarity_score("Jane Doe", "Janet Dole") == 35

    def test_reordered_words(self):
        assert similarity_score("Doe Jane", "Jane Doe") == 70

    def test_rounds_half_up(self):
        # 3 of 4 words match: 52.5 rounds to 53
        assert similarity_score("bridge hold slow fast", "bridges holds slowly zzz") == 53

    def test_duplicate_query_words_each_count(self):
        assert similarity_score("bridge bridge", "bridge hold") == 70

    def test_not_symmetric(self):
        assert similarity_score("bridge hold", "bridge bridge") == 35

    def test_score_in_range(self):
        for query, target in [("a", "b"), ("hip", "hip flexor stretch"), ("x y z", "x")]:
            assert 0 <= similarity_score(query, target) <= 100
