"""Tests for summary normalization and JSON extraction."""

from typing import Any

import pytest

from src.errors import SummaryParseError
from src.summary.mock import mock_summary
from src.summary.models import PLACEHOLDER_SUMMARY, SummaryResult
from src.summary.normalizer import LIST_FIELDS, extract_json_object, normalize_summary

_VALID_CANDIDATE: dict[str, Any] = {
    "short_summary": "This is a service agreement between Company A and Company B.",
    "parties": [
        {"role": "Service Provider", "name": "Company A", "excerpt": "Company A, Inc."},
        {"role": "Client", "name": "Company B", "excerpt": "Company B LLC"},
    ],
    "important_dates": [
        {"type": "Effective Date", "date": "2024-01-01", "excerpt": "effective as of January 1, 2024"},
    ],
    "obligations": [
        {"who": "Company A", "action": "Provide consulting services", "excerpt": "shall provide consulting services"},
    ],
    "payment_terms": "Net 30 days",
    "termination_clauses": "30 days written notice",
    "governing_law": "State of Delaware",
    "risk_flags": [{"score": 3, "reason": "Standard terms"}],
    "suggested_redactions": [
        {"page": 1, "start_char": 100, "end_char": 120, "reason": "SSN detected"},
    ],
    "confidence_score": 0.85,
}

_CANDIDATES: list[Any] = [
    {},
    _VALID_CANDIDATE,
    {"short_summary": "Brief summary"},
    {
        "short_summary": "",
        "parties": "not a list",
        "important_dates": {"type": "x"},
        "obligations": None,
        "payment_terms": "",
        "risk_flags": 7,
        "suggested_redactions": [{"page": 0, "start_char": 5, "end_char": 1}],
        "confidence_score": "0.9",
    },
    {"confidence_score": True},
    {"confidence_score": float("nan")},
    None,
    ["not", "an", "object"],
    "text",
]


def _assert_invariants(summary: SummaryResult) -> None:
    assert isinstance(summary.short_summary, str) and summary.short_summary
    for name in LIST_FIELDS:
        assert isinstance(getattr(summary, name), list)
    for name in ("payment_terms", "termination_clauses", "governing_law"):
        assert getattr(summary, name) is None or getattr(summary, name) != ""
    assert 0.0 <= summary.confidence_score <= 1.0


class TestNormalizeSummary:
    """Tests for normalize_summary."""

    @pytest.mark.parametrize("candidate", _CANDIDATES)
    def test_invariants_hold(self, candidate: Any) -> None:
        _assert_invariants(normalize_summary(candidate))

    @pytest.mark.parametrize("candidate", _CANDIDATES)
    def test_idempotent(self, candidate: Any) -> None:
        once = normalize_summary(candidate)
        assert normalize_summary(once) == once
        assert normalize_summary(once.to_dict()) == once

    def test_valid_candidate_preserved(self) -> None:
        summary = normalize_summary(_VALID_CANDIDATE)
        assert summary.to_dict() == _VALID_CANDIDATE

    def test_partial_candidate(self) -> None:
        summary = normalize_summary({"short_summary": "Brief summary"})
        assert summary.short_summary == "Brief summary"
        assert summary.parties == []
        assert summary.important_dates == []
        assert summary.obligations == []
        assert summary.payment_terms is None
        assert summary.termination_clauses is None
        assert summary.governing_law is None
        assert summary.risk_flags == []
        assert summary.suggested_redactions == []
        assert summary.confidence_score == 0.5

    def test_empty_candidate(self) -> None:
        summary = normalize_summary({})
        assert summary.short_summary == PLACEHOLDER_SUMMARY
        assert summary.confidence_score == 0.5

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1.5, 1.0), (-0.5, 0.0), (0.75, 0.75), (0, 0.0), (1, 1.0)],
    )
    def test_confidence_clamped(self, value: float, expected: float) -> None:
        assert normalize_summary({"confidence_score": value}).confidence_score == expected

    @pytest.mark.parametrize("value", ["0.9", None, True, [0.9], float("nan")])
    def test_non_numeric_confidence_defaults(self, value: Any) -> None:
        assert normalize_summary({"confidence_score": value}).confidence_score == 0.5

    def test_empty_strings_become_none(self) -> None:
        summary = normalize_summary(
            {"payment_terms": "", "termination_clauses": "", "governing_law": ""}
        )
        assert summary.payment_terms is None
        assert summary.termination_clauses is None
        assert summary.governing_law is None

    def test_non_list_arrays_replaced(self) -> None:
        summary = normalize_summary({"parties": {"role": "Client"}, "risk_flags": "high"})
        assert summary.parties == []
        assert summary.risk_flags == []

    def test_malformed_elements_pass_through(self) -> None:
        summary = normalize_summary({"risk_flags": [{"score": 42}, "oops"]})
        assert summary.risk_flags == [{"score": 42}, "oops"]

    def test_low_confidence_markers_kept(self) -> None:
        summary = normalize_summary(
            {
                "short_summary": "LOW_CONFIDENCE",
                "payment_terms": "LOW_CONFIDENCE",
                "governing_law": "State of California",
                "confidence_score": 0.3,
            }
        )
        assert summary.short_summary == "LOW_CONFIDENCE"
        assert summary.payment_terms == "LOW_CONFIDENCE"
        assert summary.governing_law == "State of California"

    def test_unknown_fields_dropped(self) -> None:
        summary = normalize_summary({"short_summary": "x", "extra": 1})
        assert "extra" not in summary.to_dict()

    def test_mock_is_fixed_point(self) -> None:
        assert normalize_summary(mock_summary()) == mock_summary()


class TestExtractJsonObject:
    """Tests for extract_json_object."""

    def test_plain_json(self) -> None:
        assert extract_json_object('{"short_summary": "x"}') == {"short_summary": "x"}

    def test_json_in_prose_and_fences(self) -> None:
        text = 'Here is the analysis:\n```json\n{"a": {"b": 1}}\n```\nThanks.'
        assert extract_json_object(text) == {"a": {"b": 1}}

    @pytest.mark.parametrize("text", ["", "no json here", "} backwards {"])
    def test_no_object_raises(self, text: str) -> None:
        with pytest.raises(SummaryParseError, match="No JSON found"):
            extract_json_object(text)

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(SummaryParseError, match="Failed to parse"):
            extract_json_object("{not: valid}")

    def test_two_objects_span_is_invalid(self) -> None:
        with pytest.raises(SummaryParseError):
            extract_json_object('{"a": 1} and {"b": 2}')
