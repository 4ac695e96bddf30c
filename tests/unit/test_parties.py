"""Tests for party and representation favorability."""

from __future__ import annotations

import pytest

from judicial_analytics.models.domain import PartyType, RepresentationType
from judicial_analytics.services.patterns.parties import (
    analyze_party_patterns,
    identify_party_bias,
)
from tests.conftest import make_case


def _party_cases():
    return [
        # defendant-side record, defendant lost
        make_case(summary="Individual sued a corporation", outcome="Judgment for plaintiff"),
        # defendant-side record, defendant won
        make_case(summary="Individual sued a corporation", outcome="Dismissed"),
        make_case(summary="Plaintiff appeared pro se", outcome="Dismissed"),
        make_case(summary="Hearing scheduled", outcome="Pending"),
    ]


class TestAnalyzePartyPatterns:
    def test_headline_ratios(self):
        analysis = analyze_party_patterns(_party_cases())
        assert analysis.total_cases_analyzed == 4
        assert analysis.individual_vs_corporation_cases == 2
        assert analysis.individual_vs_corporation_rate == pytest.approx(0.5)
        assert analysis.plaintiff_vs_defendant_cases == 3
        assert analysis.plaintiff_vs_defendant_rate == pytest.approx(1 / 3)
        assert analysis.pro_se_success_rate == 0.0

    def test_party_tallies(self):
        analysis = analyze_party_patterns(_party_cases())
        by_type = {p.party_type: p for p in analysis.party_patterns}
        corporation = by_type[PartyType.CORPORATION]
        assert corporation.case_count == 2
        assert corporation.favorable_outcomes == 1
        assert corporation.unfavorable_outcomes == 1
        assert corporation.favorable_rate == pytest.approx(0.5)
        assert corporation.avg_outcome_value == 20_000
        assert corporation.avg_case_duration_days == 228
        assert analysis.party_patterns[0].party_type == PartyType.CORPORATION
        assert by_type[PartyType.GOVERNMENT].confidence == 60

    def test_representation_tallies(self):
        analysis = analyze_party_patterns(_party_cases())
        by_type = {r.representation_type: r for r in analysis.representation_patterns}
        pro_se = by_type[RepresentationType.PRO_SE]
        assert pro_se.case_count == 1
        assert pro_se.unfavorable_outcomes == 1
        assert pro_se.confidence == 65

    def test_empty_defaults(self):
        analysis = analyze_party_patterns([])
        assert analysis.individual_vs_corporation_rate == 0.5
        assert analysis.plaintiff_vs_defendant_rate == 0.5
        assert analysis.pro_se_success_rate == 0.0
        assert len(analysis.party_patterns) == len(PartyType)


class TestIdentifyPartyBias:
    def test_low_pro_se_success_flagged(self):
        flags = identify_party_bias(analyze_party_patterns(_party_cases()))
        assert [f.pattern for f in flags] == ["Low Pro Se Success"]

    def test_lopsided_ratios_flagged(self):
        analysis = analyze_party_patterns([]).model_copy(
            update={
                "individual_vs_corporation_rate": 0.8,
                "plaintiff_vs_defendant_rate": 0.2,
            }
        )
        flags = identify_party_bias(analysis)
        assert [f.pattern for f in flags] == ["Individual Favor", "Defendant Favor"]
        assert flags[0].description == "80% favorable to individuals vs corporations"
        assert flags[1].description == "80% favorable to defendants"

    def test_no_pro_se_flag_without_pro_se_rulings(self):
        assert identify_party_bias(analyze_party_patterns([])) == []
