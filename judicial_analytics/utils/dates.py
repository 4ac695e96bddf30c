"""Lenient date parsing for case records.

Source systems hand us dates as ISO dates, ISO timestamps, or US-style
slash dates. Anything else parses to None; callers decide whether that
means "exclude from this aggregate" or "treat as oldest".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from judicial_analytics.models.domain import CaseRecord

DAYS_PER_YEAR = 365.25
MAX_REALISTIC_DURATION_DAYS = 3650

_FALLBACK_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y")


def parse_case_date(value: str | None) -> date | None:
    """Parse a raw date string, returning None if it is missing or invalid."""
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def effective_date_string(case: CaseRecord) -> str | None:
    """Decision date if the source supplied one, otherwise the filing date."""
    return case.decision_date or case.filing_date


def effective_date(case: CaseRecord) -> date | None:
    """Parsed effective date of a case, or None if unresolvable."""
    return parse_case_date(effective_date_string(case))


def years_between(earlier: date, later: date) -> float:
    """Fractional years from earlier to later, floored at zero."""
    return max(0.0, (later - earlier).days / DAYS_PER_YEAR)


def subtract_years(value: date, years: int) -> date:
    """Same calendar day `years` earlier; Feb 29 falls back to Feb 28."""
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        return value.replace(year=value.year - years, day=28)


def case_duration_days(case: CaseRecord, *, max_days: int | None = None) -> float | None:
    """Filing-to-decision duration in days.

    Returns None when either date is missing or unparseable, when the
    decision precedes the filing, or when the duration exceeds max_days.
    """
    filed = parse_case_date(case.filing_date)
    decided = parse_case_date(case.decision_date)
    if filed is None or decided is None:
        return None

    days = float((decided - filed).days)
    if days < 0:
        return None
    if max_days is not None and days > max_days:
        return None
    return days
