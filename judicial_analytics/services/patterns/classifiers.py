"""Keyword classifiers for free-text case fields.

Every classifier here is a pure `classify(text) -> variant` function driven
by an ordered keyword table. The tables are data: the first rule with any
matching keyword wins, so order encodes precedence. The keyword lists are
a behavioural baseline to preserve, not a claim of precision; extractors
accept alternative classifiers through keyword arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from judicial_analytics.models.domain import (
    ComplexityTier,
    OutcomeCategory,
    PartyType,
    RepresentationType,
)
from judicial_analytics.utils.stats import is_usable_amount

if TYPE_CHECKING:
    from judicial_analytics.models.domain import CaseRecord

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class KeywordClassifier(Protocol[T_co]):
    """Anything that maps free text onto a classification variant."""

    def __call__(self, text: str, /) -> T_co: ...


@dataclass(frozen=True)
class KeywordRule(Generic[T]):
    """Maps any of `keywords` (lowercase substrings) to `label`."""

    keywords: tuple[str, ...]
    label: T


@dataclass(frozen=True)
class KeywordTable(Generic[T]):
    """Ordered keyword rules; the first matching rule wins."""

    rules: tuple[KeywordRule[T], ...]

    def match(self, text: str) -> T | None:
        lowered = text.lower()
        for rule in self.rules:
            if any(keyword in lowered for keyword in rule.keywords):
                return rule.label
        return None


def _join(*parts: str | None) -> str:
    return " ".join(p for p in parts if p).lower()


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

OUTCOME_TABLE: KeywordTable[OutcomeCategory] = KeywordTable(
    (
        KeywordRule(("settle", "compromise", "agreed"), OutcomeCategory.SETTLED),
        KeywordRule(("dismiss", "withdrawn"), OutcomeCategory.DISMISSED),
        KeywordRule(("judgment", "verdict", "awarded", "granted"), OutcomeCategory.JUDGMENT),
    )
)


def classify_outcome(outcome: str | None, status: str | None = None) -> OutcomeCategory:
    """Normalize outcome and status text into one outcome category."""
    return OUTCOME_TABLE.match(_join(outcome, status)) or OutcomeCategory.OTHER


def case_outcome(case: CaseRecord) -> OutcomeCategory:
    return classify_outcome(case.outcome, case.status)


def is_settled(case: CaseRecord) -> bool:
    return case_outcome(case) == OutcomeCategory.SETTLED


# ---------------------------------------------------------------------------
# Motions
# ---------------------------------------------------------------------------

OTHER_MOTION = "Other Motion"

EXPLICIT_MOTION_TABLE: KeywordTable[str] = KeywordTable(
    (
        KeywordRule(("summary judgment",), "Summary Judgment"),
        KeywordRule(("dismiss",), "Motion to Dismiss"),
        KeywordRule(("compel",), "Motion to Compel Discovery"),
        KeywordRule(("suppress",), "Motion to Suppress Evidence"),
        KeywordRule(("continuance",), "Motion for Continuance"),
        KeywordRule(("protective",), "Protective Order"),
        KeywordRule(("strike",), "Motion to Strike"),
        KeywordRule(("amend",), "Motion to Amend"),
        KeywordRule(("reconsider",), "Motion for Reconsideration"),
        KeywordRule(("sanctions",), "Motion for Sanctions"),
    )
)

TEXT_MOTION_TABLE: KeywordTable[str] = KeywordTable(
    (
        KeywordRule(("summary judgment", "msj"), "Summary Judgment"),
        KeywordRule(("motion to dismiss", "mtd"), "Motion to Dismiss"),
        KeywordRule(("compel discovery", "motion to compel"), "Motion to Compel Discovery"),
        KeywordRule(("suppress evidence", "motion to suppress"), "Motion to Suppress Evidence"),
        KeywordRule(("continuance",), "Motion for Continuance"),
        KeywordRule(("protective order",), "Protective Order"),
        KeywordRule(("motion to strike",), "Motion to Strike"),
        KeywordRule(("motion to amend",), "Motion to Amend"),
        KeywordRule(("reconsider",), "Motion for Reconsideration"),
        KeywordRule(("sanctions",), "Motion for Sanctions"),
        KeywordRule(("default judgment",), "Motion for Default Judgment"),
        KeywordRule(("preliminary injunction",), "Motion for Preliminary Injunction"),
        KeywordRule(("motion",), OTHER_MOTION),
    )
)

CANONICAL_MOTION_TYPES: tuple[str, ...] = tuple(
    dict.fromkeys(rule.label for rule in TEXT_MOTION_TABLE.rules if rule.label != OTHER_MOTION)
)

MOTION_RULING_TABLE: KeywordTable[bool] = KeywordTable(
    (
        KeywordRule(("granted", "approved"), True),
        KeywordRule(("denied", "rejected", "dismissed"), False),
    )
)


def classify_motion_type(
    motion_type: str | None,
    summary: str | None = None,
    outcome: str | None = None,
) -> str | None:
    """Canonical motion type from the explicit field, else from the text.

    Returns None when nothing in the record mentions a motion.
    """
    if motion_type:
        explicit = EXPLICIT_MOTION_TABLE.match(motion_type)
        if explicit is not None:
            return explicit
    return TEXT_MOTION_TABLE.match(_join(summary, outcome))


def classify_motion_ruling(outcome: str | None, summary: str | None = None) -> bool | None:
    """True if granted, False if denied, None if the ruling is unknown."""
    return MOTION_RULING_TABLE.match(_join(outcome, summary))


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------

PARTY_TYPE_TABLE: KeywordTable[PartyType] = KeywordTable(
    (
        KeywordRule(("corporation", "inc.", "llc", "ltd", "company"), PartyType.CORPORATION),
        KeywordRule(
            ("government", "state of", "county of", "city of", "united states", "federal"),
            PartyType.GOVERNMENT,
        ),
        KeywordRule(
            ("insurance", "assurance", "mutual", "underwriter"),
            PartyType.INSURANCE_COMPANY,
        ),
        KeywordRule(("non-profit", "nonprofit", "foundation"), PartyType.NON_PROFIT),
        KeywordRule(("individual", "person", "plaintiff", "defendant"), PartyType.INDIVIDUAL),
    )
)

SMALL_BUSINESS_KEYWORDS: tuple[str, ...] = ("small business", "sole proprietor")

REPRESENTATION_TABLE: KeywordTable[RepresentationType] = KeywordTable(
    (
        KeywordRule(("pro se", "self-represented", "pro per"), RepresentationType.PRO_SE),
        KeywordRule(
            ("public defender", "court-appointed", "appointed counsel"),
            RepresentationType.PUBLIC_DEFENDER,
        ),
        KeywordRule(
            ("counsel", "attorney", "represented by", "law firm"),
            RepresentationType.PRIVATE_COUNSEL,
        ),
    )
)

PLAINTIFF_FAVORABLE: KeywordTable[bool] = KeywordTable(
    (
        KeywordRule(
            ("judgment for plaintiff", "awarded", "granted", "won", "prevailed"),
            True,
        ),
        KeywordRule(("dismissed", "judgment for defendant", "denied", "lost"), False),
    )
)

DEFENDANT_FAVORABLE: KeywordTable[bool] = KeywordTable(
    (
        KeywordRule(("dismissed", "judgment for defendant", "denied", "won"), True),
        KeywordRule(("judgment for plaintiff", "awarded", "liable", "guilty"), False),
    )
)


def classify_party_type(text: str) -> PartyType:
    """Infer the litigant category from free text."""
    party = PARTY_TYPE_TABLE.match(text) or PartyType.UNKNOWN
    if party == PartyType.CORPORATION and any(k in text.lower() for k in SMALL_BUSINESS_KEYWORDS):
        return PartyType.SMALL_BUSINESS
    return party


def classify_representation(text: str) -> RepresentationType:
    """Infer how the litigant was represented from free text."""
    return REPRESENTATION_TABLE.match(text) or RepresentationType.UNKNOWN


def is_plaintiff_side(text: str) -> bool:
    """Whether the record is written from the plaintiff's perspective."""
    return "plaintiff" in text.lower()


def classify_party_outcome(
    outcome: str | None,
    status: str | None,
    *,
    is_plaintiff: bool,
) -> bool | None:
    """Favorable (True) / unfavorable (False) / unknown (None) for one side."""
    table = PLAINTIFF_FAVORABLE if is_plaintiff else DEFENDANT_FAVORABLE
    return table.match(_join(outcome, status))


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

MULTI_PARTY_KEYWORDS: tuple[str, ...] = ("multiple defendants", "class action", "consolidated")
EXPERT_KEYWORDS: tuple[str, ...] = ("expert", "testimony", "expert witness")
COMPLEX_CASE_TYPES: tuple[str, ...] = ("securities", "antitrust", "patent", "class action", "rico")

HIGHLY_COMPLEX_VALUE = 1_000_000
COMPLEX_VALUE = 250_000
MODERATE_VALUE = 50_000


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(k in text for k in keywords)


def classify_complexity(case: CaseRecord) -> ComplexityTier:
    """Complexity tier from case value, escalated by text signals and type."""
    value = case.case_value if is_usable_amount(case.case_value) else 0.0
    summary = (case.summary or "").lower()
    case_type = (case.case_type or "").lower()

    signals = _contains_any(summary, MULTI_PARTY_KEYWORDS) or _contains_any(
        summary, EXPERT_KEYWORDS
    )
    if (value > HIGHLY_COMPLEX_VALUE and signals) or _contains_any(case_type, COMPLEX_CASE_TYPES):
        return ComplexityTier.HIGHLY_COMPLEX
    if value >= COMPLEX_VALUE:
        return ComplexityTier.COMPLEX
    if value >= MODERATE_VALUE:
        return ComplexityTier.MODERATE
    return ComplexityTier.SIMPLE
