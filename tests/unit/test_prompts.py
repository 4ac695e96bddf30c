"""Tests for analytics prompt templates.

Verifies that generated prompts carry every schema field the provider
output is validated against, the guardrails, and the documents.
"""

from __future__ import annotations

from judicial_analytics.models.legacy import AIAnalyticsResult, AnalyzableDocument
from judicial_analytics.services.augmentation.prompts import (
    GUARDRAILS,
    build_analytics_prompt,
    format_documents,
)
from tests.conftest import make_window


def _document(**overrides: object) -> AnalyzableDocument:
    defaults: dict[str, object] = {
        "case_name": "Smith v. Acme Corp",
        "case_category": "Civil",
        "case_outcome": "Settled",
        "decision_date": "2024-01-15",
        "plain_text": "The parties reached a settlement before trial.",
    }
    defaults.update(overrides)
    return AnalyzableDocument(**defaults)  # type: ignore[arg-type]


class TestBuildAnalyticsPrompt:
    """Tests for build_analytics_prompt."""

    def test_returns_tuple_of_two_strings(self):
        system, user = build_analytics_prompt("Judge Ito", [_document()], make_window())
        assert isinstance(system, str)
        assert isinstance(user, str)

    def test_system_prompt_contains_every_result_field(self):
        system, _ = build_analytics_prompt("Judge Ito", [_document()], make_window())
        for field in AIAnalyticsResult.model_fields:
            if field == "ai_model":
                continue
            assert field in system, f"System prompt missing field: {field}"

    def test_system_prompt_contains_guardrails(self):
        system, _ = build_analytics_prompt("Judge Ito", [_document()], make_window())
        assert GUARDRAILS in system
        assert "Return ONLY valid JSON" in system

    def test_user_prompt_names_judge_and_window(self):
        _, user = build_analytics_prompt(
            "Judge Ito", [_document(), _document()], make_window()
        )
        assert "Analyze the following 2 case documents for Judge Ito" in user
        assert "decided 2021-2024 (3-year window)" in user
        assert "--- DOCUMENT 2 ---" in user

    def test_document_text_truncated(self):
        _, user = build_analytics_prompt(
            "Judge Ito",
            [_document(plain_text="A" * 50 + "B" * 50)],
            make_window(),
            max_chars_per_document=50,
        )
        assert "A" * 50 in user
        assert "B" not in user.split("--- DOCUMENT 1 ---", 1)[1].split("Return the JSON")[0]


class TestFormatDocuments:
    def test_unknown_decision_date(self):
        rendered = format_documents([_document(decision_date=None)], max_chars=100)
        assert "Decided: unknown" in rendered
        assert rendered.startswith("--- DOCUMENT 1 ---\nCase: Smith v. Acme Corp")
