"""
Tests for the relevance filter.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jobquarry.extractor.keywords import DEFAULT_KEYWORDS, KeywordSets
from jobquarry.extractor.models import Classification
from jobquarry.extractor.relevance import RelevanceFilter, classify, find_phrase

NEGATIVE_PHRASES = sorted(DEFAULT_KEYWORDS.negative)


@pytest.mark.unit
class TestClassificationProperties:
    """Properties that hold for every input."""

    @given(st.text(max_size=299))
    def test_short_text_is_never_relevant(self, text):
        assert classify(text) is Classification.REJECTED

    @given(
        prefix=st.text(max_size=400),
        phrase=st.sampled_from(NEGATIVE_PHRASES),
        suffix=st.text(max_size=400),
        padding=st.integers(min_value=0, max_value=1200),
    )
    def test_negative_keyword_rejects_regardless_of_length(self, prefix, phrase, suffix, padding):
        text = prefix + phrase.upper() + suffix + "a" * padding
        assert classify(text) is Classification.REJECTED

    @given(st.integers(min_value=0, max_value=2000))
    def test_classification_is_deterministic(self, n):
        text = ("Responsibilities and requirements for the role. " * 50)[:n]
        assert classify(text) is classify(text)


@pytest.mark.unit
class TestRelevanceFilter:
    def test_long_clean_text_is_relevant(self, make_filler):
        assert classify(make_filler(300)) is Classification.RELEVANT

    def test_length_floor_is_inclusive(self, make_filler):
        relevance = RelevanceFilter(min_length=300)
        assert relevance.classify(make_filler(299)) is Classification.REJECTED
        assert relevance.classify(make_filler(300)) is Classification.RELEVANT

    def test_metadata_phrase_rejects_long_text(self, make_filler):
        text = make_filler(1000) + " Employment type: contract."
        assert classify(text) is Classification.REJECTED

    def test_portuguese_metadata_rejects(self, make_filler):
        text = make_filler(500) + " Nível de experiência: Pleno."
        assert classify(text) is Classification.REJECTED

    def test_rejection_reason_order(self):
        relevance = RelevanceFilter()
        assert relevance.rejection_reason("Sign in").startswith("too short")
        assert relevance.rejection_reason("x" * 400 + " sign in") == "negative keyword 'sign in'"

    def test_positive_confirmation_is_opt_in(self):
        text = "The quick brown fox jumps over the lazy dog near the river bank. " * 10
        relevance = RelevanceFilter()

        assert relevance.classify(text) is Classification.RELEVANT
        assert relevance.classify(text, require_positive=True) is Classification.REJECTED
        assert relevance.rejection_reason(text, require_positive=True) == "no positive keyword"

    def test_positive_confirmation_accepts_description(self, make_filler):
        assert RelevanceFilter().is_relevant(make_filler(600), min_length=500, require_positive=True)

    def test_per_call_floor_overrides_default(self, make_filler):
        relevance = RelevanceFilter(min_length=300)
        assert not relevance.is_relevant(make_filler(400), min_length=500)

    def test_custom_keyword_sets(self, make_filler):
        keywords = KeywordSets.create(negative=["payment"], positive=["python"])
        relevance = RelevanceFilter(keywords)
        assert relevance.classify(make_filler(400)) is Classification.REJECTED

    def test_needs_retry_on_retry_markers(self):
        relevance = RelevanceFilter()
        assert relevance.needs_retry("Seniority: mid. Employment Type: Contract")
        assert relevance.needs_retry("Tipo de emprego: Efetivo")
        assert not relevance.needs_retry("Python services and a great team")

    def test_has_metadata(self):
        relevance = RelevanceFilter()
        assert relevance.has_metadata("Industries: Software")
        assert not relevance.has_metadata("Build the payments platform")


@pytest.mark.unit
def test_find_phrase_is_case_insensitive():
    assert find_phrase("Please SIGN IN to continue", {"sign in"}) == "sign in"
    assert find_phrase("nothing to see", {"sign in"}) is None
