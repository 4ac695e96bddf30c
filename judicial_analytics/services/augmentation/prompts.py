"""Prompt templates for AI judicial analytics.

The provider is asked for an independent percentage read of the same ten
categories the statistical analytics produce, each with its own
confidence and sample size, returned as a single JSON object.
"""

from __future__ import annotations

from collections.abc import Sequence

from judicial_analytics.models.legacy import AnalysisWindow, AnalyzableDocument

ANALYTICS_SCHEMA_DESCRIPTION = (
    "You MUST return a single JSON object (no markdown, no code fences) "
    "with the following fields. Every percentage is an integer 0-100; use "
    "null for any category the documents do not support:\n"
    "\n"
    "{\n"
    '  "civil_plaintiff_favor": <int|null> Share of civil matters decided '
    "for the plaintiff,\n"
    '  "family_custody_mother": <int|null> Share of custody awards to the mother,\n'
    '  "family_alimony_favorable": <int|null> Share of alimony requests granted,\n'
    '  "contract_enforcement_rate": <int|null> Share of contracts enforced,\n'
    '  "criminal_sentencing_severity": <int|null> Share of sentences involving '
    "incarceration,\n"
    '  "criminal_plea_acceptance": <int|null> Share of pleas accepted,\n'
    '  "bail_release_rate": <int|null> Share of bail or pretrial release granted,\n'
    '  "appeal_reversal_rate": <int|null> Share of appealed decisions reversed,\n'
    '  "settlement_encouragement_rate": <int|null> Share of civil matters '
    "steered to settlement,\n"
    '  "motion_grant_rate": <int|null> Share of motions granted,\n'
    '  "confidence_civil": <int 0-100>, "confidence_custody": <int 0-100>,\n'
    '  "confidence_alimony": <int 0-100>, "confidence_contracts": <int 0-100>,\n'
    '  "confidence_sentencing": <int 0-100>, "confidence_plea": <int 0-100>,\n'
    '  "confidence_bail": <int 0-100>, "confidence_reversal": <int 0-100>,\n'
    '  "confidence_settlement": <int 0-100>, "confidence_motion": <int 0-100>,\n'
    '  "overall_confidence": <int 0-100>,\n'
    '  "sample_size_civil": <int> Documents supporting the civil estimate, '
    "and likewise sample_size_custody, sample_size_alimony, "
    "sample_size_contracts, sample_size_sentencing, sample_size_plea, "
    "sample_size_bail, sample_size_reversal, sample_size_settlement, "
    "sample_size_motion,\n"
    '  "total_cases_analyzed": <int> Documents actually read,\n'
    '  "notable_patterns": ["<string>", ...],\n'
    '  "data_limitations": ["<string>", ...]\n'
    "}"
)

GUARDRAILS = """\
IMPORTANT rules:
- Report only what the documents show. These are descriptive statistics, \
not findings of bias or misconduct.
- If a category has no supporting documents, return null for its \
percentage and 0 for its sample size.
- Keep confidence scores honest. Few documents mean low confidence; a 55 \
is better than a hallucinated 90.
- Do NOT invent cases, outcomes or quotations.\
"""

SYSTEM_PROMPT_TEMPLATE = """\
You are a judicial analytics assistant. You read court case documents for \
a single judge and estimate how the judge's cases tend to resolve, by \
category, as JSON.

{schema}

{guardrails}

CRITICAL: Return ONLY valid JSON. No explanation, no markdown fences, no \
additional text outside the JSON object.\
"""

USER_PROMPT_TEMPLATE = """\
Analyze the following {document_count} case documents for Judge {judge_name}, \
decided {start_year}-{end_year} ({lookback_years}-year window).

{documents}

Return the JSON analytics now.\
"""

DOCUMENT_TEMPLATE = """\
--- DOCUMENT {index} ---
Case: {case_name}
Category: {case_category}
Outcome: {case_outcome}
Decided: {decision_date}
{plain_text}\
"""


def format_documents(documents: Sequence[AnalyzableDocument], max_chars: int) -> str:
    """Render documents for the prompt, truncating each body to max_chars."""
    return "\n\n".join(
        DOCUMENT_TEMPLATE.format(
            index=i,
            case_name=doc.case_name,
            case_category=doc.case_category,
            case_outcome=doc.case_outcome,
            decision_date=doc.decision_date or "unknown",
            plain_text=doc.plain_text[:max_chars],
        )
        for i, doc in enumerate(documents, start=1)
    )


def build_analytics_prompt(
    judge_name: str,
    documents: Sequence[AnalyzableDocument],
    window: AnalysisWindow,
    *,
    max_chars_per_document: int = 4000,
) -> tuple[str, str]:
    """Build system + user messages for the analytics LLM call.

    Returns:
        Tuple of (system_prompt, user_prompt).
    """
    system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
        schema=ANALYTICS_SCHEMA_DESCRIPTION,
        guardrails=GUARDRAILS,
    )
    user_prompt = USER_PROMPT_TEMPLATE.format(
        document_count=len(documents),
        judge_name=judge_name,
        start_year=window.start_year,
        end_year=window.end_year,
        lookback_years=window.lookback_years,
        documents=format_documents(documents, max_chars_per_document),
    )
    return system_prompt, user_prompt
