"""Builds the payload and prompt sent to the summarization backend."""

import json
from collections.abc import Mapping
from typing import Any

from src.errors import InvalidOCRResultError
from src.ocr.models import OCRResult

MAX_BLOCKS_PER_PAGE = 50
DEFAULT_INSTRUCTIONS = "Analyze this legal document thoroughly"

SYSTEM_PROMPT = """You are LawScanner AI Assistant. You analyze legal documents and extract structured information for businesses who struggle with complex legal language.

Your task is to analyze the provided legal document OCR data and create a comprehensive, easy-to-understand summary.

Input Format: JSON with {meta: {filename, pages}, ocr: [{page, text, blocks: [...], entities:[{type, text, page, confidence}]}], user_instructions: string}

Output Format: JSON with {
  short_summary: "A single clear sentence (10-20 words) explaining what this document is about in plain business language",
  parties: [{role, name, excerpt}],
  important_dates: [{type, date, excerpt}],
  obligations: [{who, action, excerpt}],
  payment_terms: "string or null",
  termination_clauses: "string or null",
  governing_law: "string or null",
  risk_flags: [{score (1-10), reason}],
  suggested_redactions: [{page, start_char, end_char, reason}],
  confidence_score: 0.0 to 1.0
}

Guidelines:
1. **short_summary**: Write ONE clear sentence that any businessperson can understand. Focus on: What IS this document? Use plain English, avoid legal jargon.
2. **parties**: List ALL parties involved with clear roles (e.g., "Service Provider", "Client", "Guarantor", "Witness")
3. **important_dates**: Extract key dates like effective date, expiration, payment deadlines, milestones. Use YYYY-MM-DD.
4. **obligations**: What each party must DO. Be specific and actionable.
5. **payment_terms**: Extract payment amounts, schedules, and conditions
6. **termination_clauses**: How can this agreement be ended?
7. **governing_law**: Which state/country law applies?
8. **risk_flags**: Identify potential concerns (score 1-10, where 1=minimal risk, 10=critical risk)
   - Look for: unusual clauses, missing protections, one-sided terms, ambiguous language
9. **suggested_redactions**: Flag sensitive info (SSN, bank accounts, addresses, phone numbers)
10. **confidence_score**: Your confidence in the analysis (0-1)

Special Rules:
- If you can't determine something with confidence, use null or "UNKNOWN" with LOW confidence score
- Use clear, simple business language - imagine explaining to someone without legal training
- Be precise and factual - NO legal advice language (avoid "you should", "you must")
- Always return valid JSON only, no markdown, no additional text

Response MUST be valid JSON only."""


def build_summary_request(
    ocr_result: OCRResult | Mapping[str, Any] | None,
    user_instructions: str | None = None,
    max_blocks_per_page: int = MAX_BLOCKS_PER_PAGE,
) -> dict[str, Any]:
    """Shape an OCR result and instructions into the backend payload.

    Blocks are capped per page to bound the payload; entities are sent
    in full.

    Args:
        ocr_result: An ``OCRResult`` or its JSON wire form.
        user_instructions: Free-text instructions. Falls back to a
            default instruction when empty.
        max_blocks_per_page: Block cap applied to every page.

    Returns:
        ``{meta, ocr, user_instructions}`` ready to serialize.

    Raises:
        InvalidOCRResultError: If ``meta`` or the ``ocr`` page list is
            missing or malformed.
        ValueError: If ``max_blocks_per_page`` is less than 1.
    """
    if max_blocks_per_page < 1:
        raise ValueError(f"max_blocks_per_page must be at least 1, got {max_blocks_per_page}")
    if isinstance(ocr_result, OCRResult):
        ocr_result = ocr_result.to_dict()
    if not isinstance(ocr_result, Mapping):
        raise InvalidOCRResultError("No OCR result provided")

    meta = ocr_result.get("meta")
    pages = ocr_result.get("ocr")
    if not isinstance(meta, Mapping) or not isinstance(pages, list):
        raise InvalidOCRResultError(
            "Invalid OCR result structure: 'meta' object and 'ocr' list are required"
        )

    ocr_pages = []
    for page in pages:
        if not isinstance(page, Mapping):
            raise InvalidOCRResultError("Invalid OCR result structure: page is not an object")
        blocks = page.get("blocks")
        entities = page.get("entities")
        ocr_pages.append(
            {
                "page": page.get("page"),
                "text": page.get("text") or "",
                "blocks": list(blocks[:max_blocks_per_page]) if isinstance(blocks, list) else [],
                "entities": list(entities) if isinstance(entities, list) else [],
            }
        )

    return {
        "meta": dict(meta),
        "ocr": ocr_pages,
        "user_instructions": user_instructions or DEFAULT_INSTRUCTIONS,
    }


def build_prompt(payload: dict[str, Any]) -> str:
    """Render the full prompt for a request payload."""
    return (
        f"{SYSTEM_PROMPT}\n\n"
        f"Document Data:\n{json.dumps(payload, indent=2)}\n\n"
        "Analyze this document and respond with ONLY valid JSON matching "
        "the specified format."
    )
