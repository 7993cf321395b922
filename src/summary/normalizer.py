"""Validation and repair of candidate summaries.

A candidate is whatever the summarization backend produced (parsed from
its text response) or a hand-built mock. Nothing about its shape is
trusted: each field is repaired independently, so the result always
satisfies the ``SummaryResult`` invariants.
"""

import json
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

from src.errors import SummaryParseError
from src.utils.logger import get_logger

from .models import DEFAULT_CONFIDENCE, PLACEHOLDER_SUMMARY, SummaryResult

logger = get_logger(__name__)

OPTIONAL_TEXT_FIELDS = ("payment_terms", "termination_clauses", "governing_law")
LIST_FIELDS = (
    "parties",
    "important_dates",
    "obligations",
    "risk_flags",
    "suggested_redactions",
)


def _text_or(value: Any, default: str | None) -> str | None:
    if isinstance(value, str) and value:
        return value
    return default


def _list_or_empty(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _clamped_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return DEFAULT_CONFIDENCE
    if value != value:  # NaN
        return DEFAULT_CONFIDENCE
    return float(min(1.0, max(0.0, value)))


def normalize_summary(candidate: Any) -> SummaryResult:
    """Repair a candidate object into a fully populated summary.

    - ``short_summary`` falls back to a fixed placeholder.
    - ``payment_terms``, ``termination_clauses`` and ``governing_law``
      fall back to ``None``, never an empty string.
    - List fields keep the candidate value only if it is a list; the
      elements themselves are passed through unchecked.
    - ``confidence_score`` must be a number and is clamped to [0, 1];
      anything else becomes 0.5.

    Normalizing an already normalized summary returns an equal value.

    Args:
        candidate: A mapping, a ``SummaryResult``, or any other value
            (treated as an empty mapping).

    Returns:
        The normalized summary.
    """
    if isinstance(candidate, SummaryResult):
        candidate = candidate.to_dict()
    if not isinstance(candidate, Mapping):
        logger.warning(
            "Summary candidate is %s, not an object; using defaults",
            type(candidate).__name__,
        )
        candidate = {}

    values: dict[str, Any] = {
        "short_summary": _text_or(candidate.get("short_summary"), PLACEHOLDER_SUMMARY),
        "confidence_score": _clamped_confidence(candidate.get("confidence_score")),
    }
    for name in OPTIONAL_TEXT_FIELDS:
        values[name] = _text_or(candidate.get(name), None)
    for name in LIST_FIELDS:
        values[name] = _list_or_empty(candidate.get(name))

    known = {f.name for f in fields(SummaryResult)}
    ignored = sorted(set(candidate) - known)
    if ignored:
        logger.debug("Ignoring unknown summary fields: %s", ", ".join(map(str, ignored)))

    return SummaryResult(**values)


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the outermost ``{...}`` span of a model response.

    Models often wrap the JSON in prose or markdown fences, so the span
    from the first ``{`` to the last ``}`` is parsed.

    Args:
        text: Raw text returned by the summarization backend.

    Returns:
        The parsed JSON object.

    Raises:
        SummaryParseError: If no brace pair exists, the span is not valid
            JSON, or it does not decode to an object.
    """
    start = text.find("{") if text else -1
    end = text.rfind("}") if text else -1
    if start == -1 or end <= start:
        raise SummaryParseError("No JSON found in response")

    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise SummaryParseError("Failed to parse summary response") from exc

    if not isinstance(parsed, dict):
        raise SummaryParseError("Summary response is not a JSON object")
    return parsed
