"""Outcome favorability by party type and representation.

Party type, representation and litigant side are inferred from the
summary and case type text. "Favorable" is judged from the outcome and
status text relative to that side, so a dismissal is favorable to a
defendant and unfavorable to a plaintiff.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from judicial_analytics.models.domain import CaseRecord, PartyType, RepresentationType, Severity
from judicial_analytics.models.patterns import (
    PartyAnalysis,
    PartyPattern,
    PatternFlag,
    RepresentationPattern,
)
from judicial_analytics.services.patterns.classifiers import (
    classify_party_outcome,
    classify_party_type,
    classify_representation,
    is_plaintiff_side,
)
from judicial_analytics.utils.dates import case_duration_days
from judicial_analytics.utils.stats import (
    NO_DATA_CONFIDENCE,
    is_usable_amount,
    mean,
    round_int,
    sample_size_confidence,
)

PartyTypeClassifier = Callable[[str], PartyType]
RepresentationClassifier = Callable[[str], RepresentationType]

NEUTRAL_RATE = 0.5


def _ratio(wins: int, total: int) -> float:
    return wins / total if total else NEUTRAL_RATE


@dataclass
class _Tally:
    count: int = 0
    favorable: int = 0
    unfavorable: int = 0
    values: list[float] = field(default_factory=list)
    durations: list[float] = field(default_factory=list)

    @property
    def decided(self) -> int:
        return self.favorable + self.unfavorable

    @property
    def favorable_rate(self) -> float:
        return self.favorable / self.decided if self.decided else 0.0

    @property
    def confidence(self) -> int:
        if self.count == 0:
            return NO_DATA_CONFIDENCE
        return sample_size_confidence(self.decided)

    def record(self, favorable: bool | None) -> None:
        self.count += 1
        if favorable is True:
            self.favorable += 1
        elif favorable is False:
            self.unfavorable += 1


def analyze_party_patterns(
    cases: Sequence[CaseRecord],
    *,
    party_classifier: PartyTypeClassifier = classify_party_type,
    representation_classifier: RepresentationClassifier = classify_representation,
) -> PartyAnalysis:
    """Favorability per party type and representation type.

    Headline ratios default to 0.5 (individual vs corporation, plaintiff vs
    defendant) and 0.0 (pro se success) when there is nothing to measure.
    """
    parties: dict[PartyType, _Tally] = {p: _Tally() for p in PartyType}
    representations: dict[RepresentationType, _Tally] = {r: _Tally() for r in RepresentationType}

    individual_wins = 0
    individual_vs_corporation = 0
    plaintiff_wins = 0
    decided_cases = 0

    for case in cases:
        text = f"{case.summary or ''} {case.case_type or ''}"
        lowered = text.lower()
        party = party_classifier(text)
        representation = representation_classifier(text)
        plaintiff = is_plaintiff_side(text)
        favorable = classify_party_outcome(case.outcome, case.status, is_plaintiff=plaintiff)

        tally = parties[party]
        tally.record(favorable)
        if case.case_value is not None and is_usable_amount(case.case_value):
            tally.values.append(case.case_value)
        duration = case_duration_days(case)
        if duration is not None:
            tally.durations.append(duration)

        representations[representation].record(favorable)

        if (party == PartyType.INDIVIDUAL and "corporation" in lowered) or (
            party == PartyType.CORPORATION and "individual" in lowered
        ):
            individual_vs_corporation += 1
            if (party == PartyType.INDIVIDUAL and favorable is True) or (
                party == PartyType.CORPORATION and favorable is False
            ):
                individual_wins += 1

        if favorable is not None:
            decided_cases += 1
            # A loss for the defendant side is a win for the plaintiff
            if favorable is plaintiff:
                plaintiff_wins += 1

    party_patterns = [
        PartyPattern(
            party_type=party,
            case_count=t.count,
            favorable_outcomes=t.favorable,
            unfavorable_outcomes=t.unfavorable,
            favorable_rate=t.favorable_rate,
            avg_outcome_value=round_int(mean(t.values)),
            avg_case_duration_days=round_int(mean(t.durations)),
            confidence=t.confidence,
        )
        for party, t in parties.items()
    ]
    party_patterns.sort(key=lambda p: p.case_count, reverse=True)

    representation_patterns = [
        RepresentationPattern(
            representation_type=rep,
            case_count=t.count,
            favorable_outcomes=t.favorable,
            unfavorable_outcomes=t.unfavorable,
            favorable_rate=t.favorable_rate,
            confidence=t.confidence,
        )
        for rep, t in representations.items()
    ]

    return PartyAnalysis(
        party_patterns=party_patterns,
        representation_patterns=representation_patterns,
        individual_vs_corporation_rate=_ratio(individual_wins, individual_vs_corporation),
        individual_vs_corporation_cases=individual_vs_corporation,
        plaintiff_vs_defendant_rate=_ratio(plaintiff_wins, decided_cases),
        plaintiff_vs_defendant_cases=decided_cases,
        pro_se_success_rate=representations[RepresentationType.PRO_SE].favorable_rate,
        total_cases_analyzed=len(cases),
        confidence_score=sample_size_confidence(len(cases)),
    )


def _pct(rate: float) -> int:
    return round_int(rate * 100)


def identify_party_bias(analysis: PartyAnalysis) -> list[PatternFlag]:
    """Flag lopsided party, side or pro se outcomes."""
    flags: list[PatternFlag] = []

    rate = analysis.individual_vs_corporation_rate
    if rate > 0.7:
        flags.append(
            PatternFlag(
                pattern="Individual Favor",
                severity=Severity.MEDIUM,
                description=f"{_pct(rate)}% favorable to individuals vs corporations",
            )
        )
    elif rate < 0.3:
        flags.append(
            PatternFlag(
                pattern="Corporation Favor",
                severity=Severity.MEDIUM,
                description=f"{_pct(1 - rate)}% favorable to corporations vs individuals",
            )
        )

    rate = analysis.plaintiff_vs_defendant_rate
    if rate > 0.7:
        flags.append(
            PatternFlag(
                pattern="Plaintiff Favor",
                severity=Severity.LOW,
                description=f"{_pct(rate)}% favorable to plaintiffs",
            )
        )
    elif rate < 0.3:
        flags.append(
            PatternFlag(
                pattern="Defendant Favor",
                severity=Severity.LOW,
                description=f"{_pct(1 - rate)}% favorable to defendants",
            )
        )

    pro_se = next(
        (
            r
            for r in analysis.representation_patterns
            if r.representation_type == RepresentationType.PRO_SE
        ),
        None,
    )
    pro_se_decided = 0
    if pro_se is not None:
        pro_se_decided = pro_se.favorable_outcomes + pro_se.unfavorable_outcomes
    if pro_se_decided and analysis.pro_se_success_rate < 0.2:
        flags.append(
            PatternFlag(
                pattern="Low Pro Se Success",
                severity=Severity.MEDIUM,
                description=(
                    f"Only {_pct(analysis.pro_se_success_rate)}% success rate for pro se litigants"
                ),
            )
        )

    return flags
