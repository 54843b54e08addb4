"""Unit tests for the text-preservation rate."""

import pytest

from tutorsim.models import Utterance
from tutorsim.pipeline.preservation import (
    DEFAULT_PRESERVATION_THRESHOLD,
    is_low_preservation,
    preservation_rate,
    tokenize,
)


class TestTokenize:
    """Tests for whitespace tokenization."""

    def test_lowercases_and_splits_on_any_whitespace(self):
        assert tokenize("The  cat\nSAT\ton") == ["the", "cat", "sat", "on"]

    def test_punctuation_stays_attached(self):
        assert tokenize("fine, thanks!") == ["fine,", "thanks!"]


class TestPreservationRate:
    """Tests for preservation rate computation."""

    def test_case_insensitive_exact_match(self):
        assert preservation_rate("The cat sat on the mat", "the cat sat on the mat") == 1.0

    def test_partial_match(self):
        # the, sat, on, the are found; cat and mat are not
        rate = preservation_rate("The cat sat on the mat", "the dog sat on the rug")
        assert rate == pytest.approx(4 / 6)

    def test_presence_not_multiplicity(self):
        # Every repeated original token counts, one result occurrence suffices
        assert preservation_rate("the the the", "the") == 1.0

    def test_extra_result_tokens_do_not_lower_rate(self):
        assert preservation_rate("hello", "hello and a lot of invented words") == 1.0

    def test_nothing_preserved(self):
        assert preservation_rate("alpha beta", "gamma delta") == 0.0

    def test_empty_original(self):
        assert preservation_rate("   ", "anything") == 1.0

    def test_accepts_utterances(self):
        utterances = [
            Utterance(text="Hi there how are you", is_user=True),
            Utterance(text="I am fine thanks", is_user=False),
        ]
        assert preservation_rate("Hi there how are you I am fine thanks", utterances) == 1.0


class TestLowPreservation:
    """Tests for the warning threshold."""

    def test_default_threshold(self):
        assert DEFAULT_PRESERVATION_THRESHOLD == 0.8

    def test_threshold_is_exclusive(self):
        assert not is_low_preservation(0.8)
        assert is_low_preservation(0.79)

    def test_custom_threshold(self):
        assert is_low_preservation(0.9, threshold=0.95)
