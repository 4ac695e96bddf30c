"""Legacy percentage analytics.

The legacy shape reports ten 0-100 percentages (civil plaintiff favor,
custody, alimony, contracts, sentencing, pleas, bail, reversals,
settlement, motions), each derived from keyword matches over a case's
type, outcome, summary and status text. A category with no matching
cases reports 50% at confidence 60 with sample size 0.

LegacyAnalyticsGenerator is the entry point: statistical analytics,
optionally AI-augmented, degrading to a clearly labelled conservative
default instead of failing.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import structlog

from judicial_analytics.models.legacy import AnalysisWindow, LegacyCaseAnalytics
from judicial_analytics.utils.stats import clamp, round_int

if TYPE_CHECKING:
    from judicial_analytics.models.domain import CaseRecord
    from judicial_analytics.services.augmentation.augment import AIAugmentationAdapter

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

STATISTICAL_MODEL = "statistical_analysis_3year"
PROFILE_MODEL = "statistical_estimation"
CONSERVATIVE_MODEL = "conservative_fallback"

EMPTY_CATEGORY_PERCENT = 50
EMPTY_CATEGORY_CONFIDENCE = 60

_CATEGORY_CONFIDENCE: tuple[tuple[int, int], ...] = (
    (50, 90),
    (30, 85),
    (20, 80),
    (10, 75),
    (5, 70),
)
_OVERALL_CONFIDENCE: tuple[tuple[int, int], ...] = (
    (200, 95),
    (150, 90),
    (100, 85),
    (75, 80),
    (50, 75),
    (25, 70),
)
_FLOOR_CONFIDENCE = 65


def analysis_window(lookback_years: int = 3, reference_date: date | None = None) -> AnalysisWindow:
    """Window ending in the reference year and spanning lookback_years years back."""
    end_year = (reference_date or date.today()).year
    return AnalysisWindow(
        lookback_years=lookback_years,
        start_year=end_year - lookback_years,
        end_year=end_year,
    )


def _step(value: int, curve: Sequence[tuple[int, int]]) -> int:
    for threshold, confidence in curve:
        if value >= threshold:
            return confidence
    return _FLOOR_CONFIDENCE


# ---------------------------------------------------------------------------
# Keyword categories
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _CaseText:
    """Lowercased text fields of one case."""

    case_type: str
    outcome: str
    summary: str
    status: str

    @classmethod
    def of(cls, case: CaseRecord) -> _CaseText:
        return cls(
            case_type=(case.case_type or "").lower(),
            outcome=(case.outcome or "").lower(),
            summary=(case.summary or "").lower(),
            status=(case.status or "").lower(),
        )


def _any(text: str, *keywords: str) -> bool:
    return any(k in text for k in keywords)


@dataclass(frozen=True)
class LegacyCategory:
    """One percentage metric: which cases count and which count as a hit."""

    metric: str
    sample_key: str
    confidence_key: str
    applies: Callable[[_CaseText], bool]
    succeeds: Callable[[_CaseText], bool]


def _is_bail(t: _CaseText) -> bool:
    return _any(
        t.summary,
        "bail",
        "pretrial release",
        "pre-trial release",
        "released on own recognizance",
    ) or _any(t.outcome, "bail", "release", "detained", "remand")


def _bail_granted(t: _CaseText) -> bool:
    if _any(t.outcome, "bail granted", "released"):
        return True
    if _any(t.summary, "release granted", "bail set"):
        return True
    return not _any(t.outcome, "remanded", "detained")


def _is_settlement(t: _CaseText) -> bool:
    civil_like = _any(t.case_type, "civil", "contract", "tort")
    return civil_like and (_any(t.summary, "settlement") or _any(t.outcome, "settlement"))


LEGACY_CATEGORIES: tuple[LegacyCategory, ...] = (
    LegacyCategory(
        "civil_plaintiff_favor",
        "sample_size_civil",
        "confidence_civil",
        lambda t: _any(t.case_type, "civil", "tort", "personal injury"),
        lambda t: _any(t.outcome, "plaintiff", "awarded")
        or _any(t.summary, "in favor of plaintiff"),
    ),
    LegacyCategory(
        "family_custody_mother",
        "sample_size_custody",
        "confidence_custody",
        lambda t: _any(t.case_type, "custody", "family") or _any(t.summary, "child custody"),
        lambda t: _any(t.outcome, "mother")
        or _any(t.summary, "custody to mother", "maternal custody"),
    ),
    LegacyCategory(
        "family_alimony_favorable",
        "sample_size_alimony",
        "confidence_alimony",
        lambda t: _any(t.case_type, "divorce", "family")
        or _any(t.summary, "alimony", "spousal support"),
        lambda t: _any(t.outcome, "alimony", "spousal support")
        or _any(t.summary, "awarded spousal"),
    ),
    LegacyCategory(
        "contract_enforcement_rate",
        "sample_size_contracts",
        "confidence_contracts",
        lambda t: _any(t.case_type, "contract", "breach") or _any(t.summary, "contract dispute"),
        lambda t: _any(t.outcome, "enforced", "breach found")
        or _any(t.summary, "contract upheld")
        or ("dismissed" not in t.outcome and t.status == "decided"),
    ),
    LegacyCategory(
        "criminal_sentencing_severity",
        "sample_size_sentencing",
        "confidence_sentencing",
        lambda t: _any(t.case_type, "criminal", "felony", "misdemeanor"),
        lambda t: _any(t.outcome, "prison", "years") or _any(t.summary, "sentenced to"),
    ),
    LegacyCategory(
        "criminal_plea_acceptance",
        "sample_size_plea",
        "confidence_plea",
        lambda t: _any(t.summary, "plea") or _any(t.outcome, "plea"),
        lambda t: _any(t.outcome, "plea accepted", "guilty plea")
        or _any(t.summary, "plea approved"),
    ),
    LegacyCategory(
        "bail_release_rate",
        "sample_size_bail",
        "confidence_bail",
        _is_bail,
        _bail_granted,
    ),
    LegacyCategory(
        "appeal_reversal_rate",
        "sample_size_reversal",
        "confidence_reversal",
        lambda t: _any(t.case_type, "appeal") or _any(t.summary, "appeal")
        or _any(t.outcome, "appeal"),
        lambda t: _any(t.outcome, "reversed", "overturned")
        or _any(t.summary, "judgment reversed", "decision overturned"),
    ),
    LegacyCategory(
        "settlement_encouragement_rate",
        "sample_size_settlement",
        "confidence_settlement",
        _is_settlement,
        lambda t: _any(t.outcome, "settled")
        or _any(t.summary, "settlement reached", "parties settled", "settlement conference"),
    ),
    LegacyCategory(
        "motion_grant_rate",
        "sample_size_motion",
        "confidence_motion",
        lambda t: _any(t.summary, "motion") or _any(t.outcome, "motion"),
        lambda t: _any(t.outcome, "granted")
        or _any(t.summary, "granted the motion", "motion approved"),
    ),
)

# complement field -> primary field; complement == 100 - primary
COMPLEMENTS: dict[str, str] = {
    "civil_defendant_favor": "civil_plaintiff_favor",
    "family_custody_father": "family_custody_mother",
    "contract_dismissal_rate": "contract_enforcement_rate",
}


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def _quality_label(total: int) -> str:
    if total > 150:
        return "excellent"
    if total > 100:
        return "high"
    if total > 50:
        return "medium"
    return "low"


def _notes(
    total: int,
    counts: dict[str, int],
    window: AnalysisWindow,
) -> tuple[list[str], list[str]]:
    years = window.lookback_years
    patterns: list[str] = []
    limitations: list[str] = []

    if total > 200:
        patterns.append(f"Comprehensive {years}-year analysis: {total} cases analyzed")
    elif total > 100:
        patterns.append(f"Substantial {years}-year dataset: {total} cases analyzed")
    elif total > 50:
        patterns.append(f"Moderate {years}-year dataset: {total} cases analyzed")
    elif total < 50:
        limitations.append(f"Limited {years}-year data: only {total} cases available")

    def share(metric: str) -> int:
        return round_int(counts[metric] / total * 100) if total else 0

    if counts["civil_plaintiff_favor"] > 20:
        patterns.append(
            f"Civil cases: {share('civil_plaintiff_favor')}% of {years}-year caseload"
        )
    if counts["criminal_sentencing_severity"] > 20:
        patterns.append(
            f"Criminal cases: {share('criminal_sentencing_severity')}% of {years}-year caseload"
        )
    if counts["family_custody_mother"] > 10:
        patterns.append(f"Family custody cases: {share('family_custody_mother')}% of caseload")

    if window.start_year == window.end_year:
        timeframe = str(window.start_year)
    else:
        timeframe = f"{window.start_year}-{window.end_year}"
    patterns.append(f"Analysis covers cases filed from {timeframe}")

    if not limitations:
        limitations.append(f"Analysis based on available {years}-year case outcome data")
    return patterns, limitations


def analyze_judicial_patterns(
    cases: Sequence[CaseRecord],
    window: AnalysisWindow,
    *,
    now: datetime | None = None,
) -> LegacyCaseAnalytics:
    """Keyword-driven legacy percentage analytics over a judge's cases."""
    now = now or datetime.now(UTC)
    texts = [_CaseText.of(c) for c in cases]
    total = len(texts)

    fields: dict[str, int] = {}
    counts: dict[str, int] = {}
    for category in LEGACY_CATEGORIES:
        applicable = [t for t in texts if category.applies(t)]
        hits = sum(1 for t in applicable if category.succeeds(t))
        counts[category.metric] = len(applicable)
        if applicable:
            percent = round_int(clamp(hits / len(applicable), 0.0, 1.0) * 100)
            confidence = min(95, _step(len(applicable), _CATEGORY_CONFIDENCE))
        else:
            percent = EMPTY_CATEGORY_PERCENT
            confidence = EMPTY_CATEGORY_CONFIDENCE
        fields[category.metric] = percent
        fields[category.confidence_key] = confidence
        fields[category.sample_key] = len(applicable)
        logger.debug(
            "legacy_metric_calculated",
            metric=category.metric,
            hits=hits,
            total=len(applicable),
            percent=percent,
        )

    for complement, primary in COMPLEMENTS.items():
        fields[complement] = 100 - fields[primary]

    patterns, limitations = _notes(total, counts, window)
    return LegacyCaseAnalytics.model_validate(
        {
            **fields,
            "overall_confidence": _step(total, _OVERALL_CONFIDENCE),
            "total_cases_analyzed": total,
            "analysis_quality": _quality_label(total),
            "notable_patterns": patterns,
            "data_limitations": limitations,
            "ai_model": STATISTICAL_MODEL,
            "generated_at": now,
            "last_updated": now,
        }
    )


def generate_profile_analytics(
    jurisdiction: str | None,
    window: AnalysisWindow,
    *,
    now: datetime | None = None,
) -> LegacyCaseAnalytics:
    """Profile-based estimates for a judge with no cases in the window."""
    now = now or datetime.now(UTC)
    lowered = (jurisdiction or "").lower()
    adjust = 5 if "ca" in lowered or "california" in lowered else 0
    return LegacyCaseAnalytics(
        civil_plaintiff_favor=48 + adjust,
        civil_defendant_favor=52 - adjust,
        family_custody_mother=52 + adjust,
        family_custody_father=48 - adjust,
        family_alimony_favorable=42 + adjust,
        contract_enforcement_rate=68 - adjust,
        contract_dismissal_rate=32 + adjust,
        criminal_sentencing_severity=50,
        criminal_plea_acceptance=75,
        bail_release_rate=65 + adjust,
        appeal_reversal_rate=15,
        settlement_encouragement_rate=60,
        motion_grant_rate=45,
        confidence_civil=65,
        confidence_custody=65,
        confidence_alimony=65,
        confidence_contracts=65,
        confidence_sentencing=65,
        confidence_plea=65,
        confidence_bail=60,
        confidence_reversal=60,
        confidence_settlement=60,
        confidence_motion=60,
        overall_confidence=65,
        total_cases_analyzed=0,
        analysis_quality="profile_based",
        notable_patterns=[
            "Analysis based on judicial profile and jurisdiction patterns",
            f"No case data available within {window.lookback_years}-year window "
            f"({window.start_year}-{window.end_year})",
        ],
        data_limitations=[
            "No case data available",
            "Estimates based on regional and court type patterns",
        ],
        ai_model=PROFILE_MODEL,
        generated_at=now,
        last_updated=now,
    )


def generate_conservative_analytics(
    case_count: int,
    window: AnalysisWindow,
    *,
    now: datetime | None = None,
) -> LegacyCaseAnalytics:
    """Neutral defaults returned when analytics generation itself failed."""
    now = now or datetime.now(UTC)
    logger.warning("conservative_analytics_generated", case_count=case_count)
    return LegacyCaseAnalytics(
        civil_plaintiff_favor=50,
        civil_defendant_favor=50,
        family_custody_mother=50,
        family_custody_father=50,
        family_alimony_favorable=40,
        contract_enforcement_rate=65,
        contract_dismissal_rate=35,
        criminal_sentencing_severity=50,
        criminal_plea_acceptance=70,
        bail_release_rate=60,
        appeal_reversal_rate=15,
        settlement_encouragement_rate=55,
        motion_grant_rate=45,
        confidence_civil=60,
        confidence_custody=60,
        confidence_alimony=60,
        confidence_contracts=60,
        confidence_sentencing=60,
        confidence_plea=60,
        confidence_bail=60,
        confidence_reversal=60,
        confidence_settlement=60,
        confidence_motion=60,
        overall_confidence=60,
        total_cases_analyzed=case_count,
        analysis_quality="conservative",
        notable_patterns=["Conservative estimates due to AI processing limitations"],
        data_limitations=[
            "AI analysis unavailable",
            "Using statistical defaults",
            f"Window analyzed: {window.start_year}-{window.end_year}",
        ],
        ai_model=CONSERVATIVE_MODEL,
        generated_at=now,
        last_updated=now,
    )


class LegacyAnalyticsGenerator:
    """Statistical legacy analytics with optional AI augmentation."""

    def __init__(self, adapter: AIAugmentationAdapter | None = None) -> None:
        self._adapter = adapter

    async def generate(
        self,
        judge_name: str,
        jurisdiction: str | None,
        cases: Sequence[CaseRecord],
        window: AnalysisWindow,
    ) -> LegacyCaseAnalytics:
        """Never raises for data or provider trouble.

        No cases gives profile estimates; a failed AI blend keeps the
        statistical result; a failed statistical pass gives the
        conservative default.
        """
        log = logger.bind(judge_name=judge_name, case_count=len(cases))
        if not cases:
            log.info("legacy_analytics_profile_only")
            return generate_profile_analytics(jurisdiction, window)

        try:
            analytics = analyze_judicial_patterns(cases, window)
        except Exception:
            log.exception("legacy_analytics_failed")
            return generate_conservative_analytics(len(cases), window)

        if self._adapter is None:
            return analytics

        try:
            return await self._adapter.enhance(judge_name, cases, analytics, window)
        except Exception as exc:
            log.warning("legacy_augmentation_failed", error=str(exc))
            return analytics
