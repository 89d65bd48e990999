"""
Unit tests for the continuity detector.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import pytest

from clipanchor_core.continuity import (
    ContinuityDetector,
    ContinuityVerdict,
    is_continuation,
    sample_fingerprints,
)
from clipanchor_core.exceptions import ValidationError
from clipanchor_core.fingerprint import fingerprint
from clipanchor_db.models import ContentBlock


class TestIsContinuation:
    """Test the shared-fingerprint threshold rule."""

    def test_three_of_five_is_continuation(self):
        before = ["a", "b", "c", "d", "e"]
        after = ["a", "b", "c", "x", "y"]

        verdict = is_continuation(before, after)

        assert verdict.is_continuation is True
        assert verdict.intersection_count == 3
        assert verdict.sample_size == 5
        assert verdict.ratio == pytest.approx(0.6)

    def test_two_shared_is_not_enough(self):
        verdict = is_continuation(["a", "b"], ["a", "b"])
        assert verdict.is_continuation is False
        assert verdict.intersection_count == 2

    def test_ratio_below_threshold(self):
        before = list("abcdefghij")
        after = list("abcxyzuvwq")
        verdict = is_continuation(before, after)
        assert verdict.intersection_count == 3
        assert verdict.is_continuation is False

    def test_sample_is_smaller_side(self):
        verdict = is_continuation(list("abc"), list("abcdefghij"))
        assert verdict.sample_size == 3
        assert verdict.is_continuation is True

    def test_order_ignored(self):
        assert is_continuation(["a", "b", "c"], ["c", "b", "a"]).is_continuation

    @pytest.mark.parametrize("before, after", [([], ["a", "b", "c"]), (["a"], []), ([], [])])
    def test_empty_is_never_continuation(self, before, after):
        verdict = is_continuation(before, after)
        assert verdict == ContinuityVerdict(False, 0, 0)
        assert verdict.ratio == 0.0

    def test_verdict_truthiness(self):
        assert bool(ContinuityVerdict(True, 3, 3)) is True
        assert bool(ContinuityVerdict(False, 1, 3)) is False


class TestSampleFingerprints:
    def test_skips_empty_blocks_and_limits(self):
        blocks = [ContentBlock(text=""), ContentBlock(text="one")] + [
            ContentBlock(text=f"block {i}") for i in range(20)
        ]

        sampled = sample_fingerprints(blocks, limit=5)

        assert len(sampled) == 5
        assert sampled[0] == fingerprint("one")


class TestContinuityDetector:
    """Test detector configuration and block comparison."""

    def test_defaults_from_settings(self):
        detector = ContinuityDetector()
        assert detector.min_shared == 3
        assert detector.min_ratio == 0.6
        assert detector.sample_size == 10

    def test_forked_document(self):
        shared = [ContentBlock(text=f"shared block {i}") for i in range(4)]
        before = shared + [ContentBlock(text="old tail")]
        after = shared + [ContentBlock(text="new tail")]

        verdict = ContinuityDetector().compare_blocks(before, after)

        assert verdict.is_continuation is True
        assert verdict.intersection_count == 4

    def test_unrelated_document(self):
        before = [ContentBlock(text=f"left {i}") for i in range(5)]
        after = [ContentBlock(text=f"right {i}") for i in range(5)]
        assert not ContinuityDetector().compare_blocks(before, after)

    def test_custom_thresholds(self):
        detector = ContinuityDetector(min_shared=1, min_ratio=0.5)
        assert detector.compare(["a", "b"], ["a", "z"]).is_continuation

    @pytest.mark.parametrize(
        "kwargs",
        [{"min_shared": 0}, {"min_ratio": 1.5}, {"min_ratio": -0.1}, {"sample_size": 0}],
    )
    def test_invalid_thresholds(self, kwargs):
        with pytest.raises(ValidationError) as exc_info:
            ContinuityDetector(**kwargs)
        assert exc_info.value.error_code == "VAL_003"
