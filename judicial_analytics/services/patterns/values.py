"""Settlement and judgment behaviour across case value brackets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from judicial_analytics.models.domain import CaseRecord, OutcomeCategory, Severity
from judicial_analytics.models.patterns import PatternFlag, ValueAnalysis, ValueBracket
from judicial_analytics.services.patterns.classifiers import case_outcome
from judicial_analytics.utils.dates import case_duration_days
from judicial_analytics.utils.stats import (
    NO_DATA_CONFIDENCE,
    clamp,
    is_usable_amount,
    mean,
    round_half_up,
    round_int,
    sample_size_confidence,
)

HIGH_VALUE_FLOOR = 250_000
LOW_VALUE_CEILING = 50_000
SETTLEMENT_GAP_THRESHOLD = 0.3
MIN_BRACKET_CASES_FOR_RATIO = 10


@dataclass(frozen=True)
class BracketRange:
    label: str
    min_value: float
    max_value: float | None

    def contains(self, value: float) -> bool:
        return value >= self.min_value and (self.max_value is None or value < self.max_value)


VALUE_BRACKETS: tuple[BracketRange, ...] = (
    BracketRange("Under $10K", 0, 10_000),
    BracketRange("$10K - $25K", 10_000, 25_000),
    BracketRange("$25K - $50K", 25_000, 50_000),
    BracketRange("$50K - $100K", 50_000, 100_000),
    BracketRange("$100K - $250K", 100_000, 250_000),
    BracketRange("$250K - $500K", 250_000, 500_000),
    BracketRange("$500K - $1M", 500_000, 1_000_000),
    BracketRange("$1M - $5M", 1_000_000, 5_000_000),
    BracketRange("$5M+", 5_000_000, None),
)


@dataclass
class _BracketTally:
    outcomes: dict[OutcomeCategory, int] = field(
        default_factory=lambda: {o: 0 for o in OutcomeCategory}
    )
    judgment_amounts: list[float] = field(default_factory=list)
    claimed_amounts: list[float] = field(default_factory=list)
    durations: list[float] = field(default_factory=list)

    @property
    def case_count(self) -> int:
        return sum(self.outcomes.values())

    @property
    def classified(self) -> int:
        return self.case_count - self.outcomes[OutcomeCategory.OTHER]


def _positive(value: float | None) -> float | None:
    if value is not None and is_usable_amount(value) and value > 0:
        return value
    return None


def _bracket_for(value: float) -> BracketRange | None:
    return next((b for b in VALUE_BRACKETS if b.contains(value)), None)


def _build_bracket(bracket: BracketRange, tally: _BracketTally) -> ValueBracket:
    classified = tally.classified
    settled = tally.outcomes[OutcomeCategory.SETTLED]
    dismissed = tally.outcomes[OutcomeCategory.DISMISSED]
    judgment = tally.outcomes[OutcomeCategory.JUDGMENT]

    avg_judgment = mean(tally.judgment_amounts)
    avg_claimed = mean(tally.claimed_amounts)
    ratio = avg_judgment / avg_claimed if avg_claimed > 0 else 0.0

    return ValueBracket(
        range_label=bracket.label,
        min_value=bracket.min_value,
        max_value=bracket.max_value,
        case_count=tally.case_count,
        settled=settled,
        dismissed=dismissed,
        judgment=judgment,
        other=tally.outcomes[OutcomeCategory.OTHER],
        settlement_rate=settled / classified if classified else 0.0,
        dismissal_rate=dismissed / classified if classified else 0.0,
        judgment_rate=judgment / classified if classified else 0.0,
        avg_judgment_amount=round_int(avg_judgment),
        avg_claimed_amount=round_int(avg_claimed),
        judgment_to_claim_ratio=round_half_up(ratio, 2),
        avg_case_duration_days=round_int(mean(tally.durations)),
        confidence=sample_size_confidence(classified) if tally.case_count else NO_DATA_CONFIDENCE,
    )


def analyze_value_patterns(cases: Sequence[CaseRecord]) -> ValueAnalysis:
    """Outcome rates per value bracket plus high/low value settlement signal.

    Only cases with a positive, finite case value are bracketed. Bracket
    rates are over classified outcomes; overall rates are over all
    bracketed cases.
    """
    tallies = {b: _BracketTally() for b in VALUE_BRACKETS}

    for case in cases:
        value = _positive(case.case_value)
        if value is None:
            continue
        bracket = _bracket_for(value)
        if bracket is None:
            continue

        tally = tallies[bracket]
        tally.outcomes[case_outcome(case)] += 1

        judgment_amount = _positive(case.judgment_amount)
        if judgment_amount is not None:
            tally.judgment_amounts.append(judgment_amount)
        claimed = _positive(case.claimed_amount) or value
        tally.claimed_amounts.append(claimed)

        duration = case_duration_days(case)
        if duration is not None:
            tally.durations.append(duration)

    brackets = [_build_bracket(b, tallies[b]) for b in VALUE_BRACKETS]

    total = sum(b.case_count for b in brackets)
    settled = sum(b.settled for b in brackets)
    high = [b for b in brackets if b.min_value >= HIGH_VALUE_FLOOR]
    low = [
        b
        for b in brackets
        if b.min_value < HIGH_VALUE_FLOOR
        and b.max_value is not None
        and b.max_value <= LOW_VALUE_CEILING
    ]
    high_cases = sum(b.case_count for b in high)
    low_cases = sum(b.case_count for b in low)
    high_rate = sum(b.settled for b in high) / high_cases if high_cases else 0.0
    low_rate = sum(b.settled for b in low) / low_cases if low_cases else 0.0

    correlation = clamp((high_rate - low_rate) * 2, -1.0, 1.0) if high_cases and low_cases else 0.0

    return ValueAnalysis(
        value_brackets=brackets,
        overall_settlement_rate=settled / total if total else 0.0,
        high_value_settlement_rate=high_rate,
        low_value_settlement_rate=low_rate,
        settlement_value_correlation=correlation,
        total_cases_analyzed=total,
        confidence_score=sample_size_confidence(total),
    )


def identify_value_anomalies(analysis: ValueAnalysis) -> list[PatternFlag]:
    """Flag settlement gaps between value groups and extreme award ratios."""
    flags: list[PatternFlag] = []
    high = analysis.high_value_settlement_rate
    low = analysis.low_value_settlement_rate

    if abs(high - low) > SETTLEMENT_GAP_THRESHOLD:
        if high > low:
            flags.append(
                PatternFlag(
                    pattern="High Value Settlement Preference",
                    severity=Severity.MEDIUM,
                    description=(
                        f"High-value cases settle {round_int(high * 100)}% vs "
                        f"{round_int(low * 100)}% for low-value cases"
                    ),
                )
            )
        else:
            flags.append(
                PatternFlag(
                    pattern="Low Value Settlement Preference",
                    severity=Severity.MEDIUM,
                    description=(
                        f"Low-value cases settle {round_int(low * 100)}% vs "
                        f"{round_int(high * 100)}% for high-value cases"
                    ),
                )
            )

    for bracket in analysis.value_brackets:
        ratio = bracket.judgment_to_claim_ratio
        if ratio <= 0 or bracket.case_count < MIN_BRACKET_CASES_FOR_RATIO:
            continue
        if ratio > 0.9:
            flags.append(
                PatternFlag(
                    pattern="High Judgment Awards",
                    severity=Severity.LOW,
                    description=(
                        f"{bracket.range_label} cases: {round_int(ratio * 100)}% "
                        "of claimed amount awarded on average"
                    ),
                )
            )
        elif ratio < 0.3:
            flags.append(
                PatternFlag(
                    pattern="Low Judgment Awards",
                    severity=Severity.LOW,
                    description=(
                        f"{bracket.range_label} cases: Only {round_int(ratio * 100)}% "
                        "of claimed amount awarded on average"
                    ),
                )
            )

    return flags


def get_expected_settlement_rate(min_value: float, max_value: float | None) -> float:
    """Benchmark settlement rate for a value range."""
    if max_value is None:
        return 0.7
    if max_value <= 10_000:
        return 0.35
    if max_value <= 50_000:
        return 0.45
    if max_value <= 250_000:
        return 0.55
    if max_value <= 1_000_000:
        return 0.65
    return 0.7
