"""Canonical summary data model.

Element types are ``TypedDict`` shapes: the normalizer guarantees that
every array field is a list but does not validate individual elements,
so elements are kept as plain mappings.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, TypedDict

PLACEHOLDER_SUMMARY = "Unable to generate summary - document analysis incomplete"
DEFAULT_CONFIDENCE = 0.5

RiskLevel = Literal["low", "medium", "high"]


class Party(TypedDict):
    role: str
    name: str
    excerpt: str


class ImportantDate(TypedDict):
    type: str
    date: str
    excerpt: str


class Obligation(TypedDict):
    who: str
    action: str
    excerpt: str


class RiskFlag(TypedDict):
    score: int
    reason: str


class SuggestedRedaction(TypedDict):
    page: int
    start_char: int
    end_char: int
    reason: str


@dataclass(frozen=True)
class SummaryResult:
    """Validated semantic summary of one document."""

    short_summary: str = PLACEHOLDER_SUMMARY
    parties: list[Party] = field(default_factory=list)
    important_dates: list[ImportantDate] = field(default_factory=list)
    obligations: list[Obligation] = field(default_factory=list)
    payment_terms: str | None = None
    termination_clauses: str | None = None
    governing_law: str | None = None
    risk_flags: list[RiskFlag] = field(default_factory=list)
    suggested_redactions: list[SuggestedRedaction] = field(default_factory=list)
    confidence_score: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def risk_level(score: int | float) -> RiskLevel:
    """Categorize a 1-10 risk score.

    Scores up to 3 are low, up to 6 medium, anything higher is high.
    """
    if score <= 3:
        return "low"
    if score <= 6:
        return "medium"
    return "high"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_redaction(redaction: Any) -> bool:
    """Check that a redaction names a real page and a non-empty char range."""
    if not isinstance(redaction, dict):
        return False
    page = redaction.get("page")
    start = redaction.get("start_char")
    end = redaction.get("end_char")
    return (
        _is_int(page)
        and _is_int(start)
        and _is_int(end)
        and page >= 1
        and start < end
    )


def accepted_redactions(summary: SummaryResult) -> list[SuggestedRedaction]:
    """Return the suggested redactions that are safe to apply downstream."""
    return [r for r in summary.suggested_redactions if is_valid_redaction(r)]
