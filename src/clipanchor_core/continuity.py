"""
Continuity Detector - do two content snapshots describe the same source?

Compares block fingerprints sampled before and after a navigation event. A
forked copy of a document shares most of its early blocks with the original,
while a handful of shared fingerprints can be coincidence (short generic
blocks). Continuation therefore needs both an absolute floor of shared
fingerprints and a relative floor measured against the smaller sample.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import structlog

from clipanchor_core.config import settings
from clipanchor_core.exceptions import ValidationError
from clipanchor_core.fingerprint import fingerprint
from clipanchor_db.models import ContentBlock

logger = structlog.get_logger(__name__)

DEFAULT_MIN_SHARED = 3
DEFAULT_MIN_RATIO = 0.6


@dataclass(frozen=True)
class ContinuityVerdict:
    """Verdict plus the evidence behind it. Truthy iff a continuation."""

    is_continuation: bool
    intersection_count: int
    sample_size: int

    def __bool__(self) -> bool:
        return self.is_continuation

    @property
    def ratio(self) -> float:
        if self.sample_size == 0:
            return 0.0
        return self.intersection_count / self.sample_size


def is_continuation(
    before_fingerprints: Sequence[str],
    after_fingerprints: Sequence[str],
    min_shared: int = DEFAULT_MIN_SHARED,
    min_ratio: float = DEFAULT_MIN_RATIO,
) -> ContinuityVerdict:
    """
    Decide whether `after` continues `before`.

    intersection_count is the size of the set intersection (order ignored);
    sample_size is min(len(before), len(after)). Continuation holds iff
    intersection_count >= min_shared and intersection_count / sample_size >=
    min_ratio. Empty input yields a negative verdict.
    """
    before = list(before_fingerprints or [])
    after = list(after_fingerprints or [])
    sample_size = min(len(before), len(after))
    if sample_size == 0:
        return ContinuityVerdict(False, 0, sample_size)

    shared = len(set(before) & set(after))
    verdict = shared >= min_shared and shared / sample_size >= min_ratio
    return ContinuityVerdict(verdict, shared, sample_size)


def sample_fingerprints(blocks: Iterable[ContentBlock], limit: int = 10) -> List[str]:
    """Fingerprints of the first `limit` non-empty blocks, in document order."""
    sampled: List[str] = []
    for block in blocks:
        if len(sampled) >= limit:
            break
        value = fingerprint(block.text)
        if value:
            sampled.append(value)
    return sampled


class ContinuityDetector:
    """
    Continuity check with configurable policy thresholds.

    The defaults (3 shared, 60% of the smaller sample) are empirical; tune them
    through settings for content with very short or very long blocks.

    Example:
        ```python
        detector = ContinuityDetector()
        before = detector.sample(previous_blocks)
        ...
        verdict = detector.compare_blocks(before_blocks, current_blocks)
        if verdict:
            offer_transfer()
        ```
    """

    def __init__(
        self,
        min_shared: Optional[int] = None,
        min_ratio: Optional[float] = None,
        sample_size: Optional[int] = None,
    ) -> None:
        self.min_shared = settings.continuity_min_shared if min_shared is None else min_shared
        self.min_ratio = settings.continuity_min_ratio if min_ratio is None else min_ratio
        self.sample_size = (
            settings.continuity_sample_size if sample_size is None else sample_size
        )

        if self.min_shared < 1:
            raise ValidationError(
                message=f"min_shared must be >= 1, got {self.min_shared}",
                error_code="VAL_003",
                details={"min_shared": self.min_shared},
            )
        if not 0.0 <= self.min_ratio <= 1.0:
            raise ValidationError(
                message=f"min_ratio must be within 0.0-1.0, got {self.min_ratio}",
                error_code="VAL_003",
                details={"min_ratio": self.min_ratio},
            )
        if self.sample_size < 1:
            raise ValidationError(
                message=f"sample_size must be >= 1, got {self.sample_size}",
                error_code="VAL_003",
                details={"sample_size": self.sample_size},
            )

    def sample(self, blocks: Iterable[ContentBlock]) -> List[str]:
        return sample_fingerprints(blocks, self.sample_size)

    def compare(
        self, before_fingerprints: Sequence[str], after_fingerprints: Sequence[str]
    ) -> ContinuityVerdict:
        verdict = is_continuation(
            before_fingerprints, after_fingerprints, self.min_shared, self.min_ratio
        )
        logger.debug(
            "continuity_checked",
            is_continuation=verdict.is_continuation,
            intersection_count=verdict.intersection_count,
            sample_size=verdict.sample_size,
        )
        return verdict

    def compare_blocks(
        self, before_blocks: Iterable[ContentBlock], after_blocks: Iterable[ContentBlock]
    ) -> ContinuityVerdict:
        return self.compare(self.sample(before_blocks), self.sample(after_blocks))
