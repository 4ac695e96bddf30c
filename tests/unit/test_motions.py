"""Tests for motion grant/deny pattern extraction."""

from __future__ import annotations

import pytest

from judicial_analytics.services.patterns.classifiers import CANONICAL_MOTION_TYPES
from judicial_analytics.services.patterns.motions import (
    analyze_motion_patterns,
    filter_significant_motion_types,
)
from tests.conftest import make_case


def _motion_cases():
    return [
        make_case(motion_type="Summary Judgment", outcome="Motion granted"),
        make_case(motion_type="Summary Judgment", outcome="Motion granted"),
        make_case(motion_type="Summary Judgment", outcome="Motion denied"),
        make_case(motion_type="Motion to Dismiss", outcome="Under advisement"),
        make_case(motion_type=None, outcome="Settled"),
    ]


class TestAnalyzeMotionPatterns:
    def test_rates_over_decided_motions(self):
        analysis = analyze_motion_patterns(_motion_cases())
        sj = analysis.patterns_by_type[0]
        assert sj.motion_type == "Summary Judgment"
        assert sj.total_motions == 3
        assert sj.granted == 2
        assert sj.denied == 1
        assert sj.grant_rate == pytest.approx(2 / 3)
        assert sj.deny_rate == pytest.approx(1 / 3)
        assert sj.sample_size == 3
        assert sj.confidence == 65
        assert sj.avg_days_to_decision == 228
        assert sj.median_days_to_decision == 228

    def test_unknown_ruling_counts_toward_total_only(self):
        analysis = analyze_motion_patterns(_motion_cases())
        mtd = next(p for p in analysis.patterns_by_type if p.motion_type == "Motion to Dismiss")
        assert mtd.total_motions == 1
        assert mtd.sample_size == 0
        assert mtd.grant_rate == 0.0

    def test_canonical_types_always_listed(self):
        analysis = analyze_motion_patterns(_motion_cases())
        listed = {p.motion_type for p in analysis.patterns_by_type}
        assert set(CANONICAL_MOTION_TYPES) <= listed
        placeholder = next(
            p for p in analysis.patterns_by_type if p.motion_type == "Motion for Sanctions"
        )
        assert placeholder.total_motions == 0
        assert placeholder.confidence == 60

    def test_overall_figures(self):
        analysis = analyze_motion_patterns(_motion_cases())
        assert analysis.overall_grant_rate == pytest.approx(2 / 3)
        assert analysis.overall_deny_rate == pytest.approx(1 / 3)
        assert analysis.total_motions_analyzed == 3
        assert analysis.avg_decision_time == 228

    def test_no_motions(self):
        analysis = analyze_motion_patterns([make_case()])
        assert analysis.total_motions_analyzed == 0
        assert analysis.overall_grant_rate == 0.0
        assert len(analysis.patterns_by_type) == len(CANONICAL_MOTION_TYPES)

    def test_injected_classifiers(self):
        analysis = analyze_motion_patterns(
            [make_case(), make_case()],
            motion_classifier=lambda *_: "Custom Motion",
            ruling_classifier=lambda *_: True,
        )
        assert analysis.patterns_by_type[0].motion_type == "Custom Motion"
        assert analysis.overall_grant_rate == 1.0


class TestFilterSignificantMotionTypes:
    def test_keeps_types_with_enough_samples(self):
        analysis = analyze_motion_patterns(_motion_cases())
        filtered = filter_significant_motion_types(analysis, min_samples=3)
        assert [p.motion_type for p in filtered.patterns_by_type] == ["Summary Judgment"]
        assert filtered.overall_grant_rate == analysis.overall_grant_rate
