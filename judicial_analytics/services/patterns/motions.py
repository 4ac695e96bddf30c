"""Motion grant/deny patterns by canonical motion type."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence

from judicial_analytics.models.domain import CaseRecord
from judicial_analytics.models.patterns import MotionAnalysis, MotionTypePattern
from judicial_analytics.services.patterns.classifiers import (
    CANONICAL_MOTION_TYPES,
    classify_motion_ruling,
    classify_motion_type,
)
from judicial_analytics.utils.dates import case_duration_days
from judicial_analytics.utils.stats import (
    NO_DATA_CONFIDENCE,
    mean,
    median,
    round_int,
    sample_size_confidence,
)

MotionTypeClassifier = Callable[[str | None, str | None, str | None], str | None]
MotionRulingClassifier = Callable[[str | None, str | None], bool | None]


def _placeholder(motion_type: str) -> MotionTypePattern:
    return MotionTypePattern(
        motion_type=motion_type,
        total_motions=0,
        granted=0,
        denied=0,
        grant_rate=0.0,
        deny_rate=0.0,
        avg_days_to_decision=0,
        median_days_to_decision=0,
        sample_size=0,
        confidence=NO_DATA_CONFIDENCE,
    )


def analyze_motion_patterns(
    cases: Sequence[CaseRecord],
    *,
    motion_classifier: MotionTypeClassifier = classify_motion_type,
    ruling_classifier: MotionRulingClassifier = classify_motion_ruling,
) -> MotionAnalysis:
    """Grant and deny rates per motion type.

    Rates are over motions with a known ruling. Canonical motion types
    that never occur are still listed as zero-count rows.
    """
    groups: dict[str, list[CaseRecord]] = defaultdict(list)
    for case in cases:
        motion_type = motion_classifier(case.motion_type, case.summary, case.outcome)
        if motion_type is not None:
            groups[motion_type].append(case)

    patterns: list[MotionTypePattern] = []
    total_granted = 0
    total_denied = 0
    all_days: list[float] = []

    for motion_type, group in groups.items():
        granted = 0
        denied = 0
        days: list[float] = []
        for case in group:
            ruling = ruling_classifier(case.outcome, case.summary)
            if ruling is True:
                granted += 1
            elif ruling is False:
                denied += 1
            duration = case_duration_days(case)
            if duration is not None:
                days.append(duration)

        decided = granted + denied
        total_granted += granted
        total_denied += denied
        all_days.extend(days)

        patterns.append(
            MotionTypePattern(
                motion_type=motion_type,
                total_motions=len(group),
                granted=granted,
                denied=denied,
                grant_rate=granted / decided if decided else 0.0,
                deny_rate=denied / decided if decided else 0.0,
                avg_days_to_decision=round_int(mean(days)),
                median_days_to_decision=round_int(median(days)),
                sample_size=decided,
                confidence=sample_size_confidence(decided),
            )
        )

    patterns.extend(_placeholder(t) for t in CANONICAL_MOTION_TYPES if t not in groups)
    patterns.sort(key=lambda p: p.total_motions, reverse=True)

    decided_total = total_granted + total_denied
    return MotionAnalysis(
        patterns_by_type=patterns,
        overall_grant_rate=total_granted / decided_total if decided_total else 0.0,
        overall_deny_rate=total_denied / decided_total if decided_total else 0.0,
        avg_decision_time=round_int(mean(all_days)),
        total_motions_analyzed=decided_total,
        confidence_score=sample_size_confidence(decided_total),
    )


def filter_significant_motion_types(
    analysis: MotionAnalysis,
    min_samples: int = 5,
) -> MotionAnalysis:
    """Copy of the analysis keeping only motion types with enough decided motions."""
    return analysis.model_copy(
        update={
            "patterns_by_type": [
                p for p in analysis.patterns_by_type if p.sample_size >= min_samples
            ]
        }
    )
