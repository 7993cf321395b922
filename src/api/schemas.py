"""Pydantic request/response schemas for the FastAPI endpoints.

Field names follow the JSON wire format: camelCase for OCR results,
snake_case for summaries.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OCRRequest(BaseModel):
    """Request body for ``POST /ocr``."""

    model_config = ConfigDict(populate_by_name=True)

    document: str | None = None
    filename: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")


class BoundingBoxSchema(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class OCRBlockSchema(BaseModel):
    id: str
    text: str
    confidence: float
    boundingBox: BoundingBoxSchema
    blockType: str


class OCREntitySchema(BaseModel):
    type: str
    text: str
    page: int
    confidence: float
    mentionText: str | None = None


class OCRPageSchema(BaseModel):
    page: int
    text: str
    blocks: list[OCRBlockSchema]
    entities: list[OCREntitySchema]
    confidence: float


class OCRMetaSchema(BaseModel):
    filename: str
    pages: int
    provider: str
    processedAt: str


class OCRResultResponse(BaseModel):
    """Response schema for an OCR result."""

    meta: OCRMetaSchema
    ocr: list[OCRPageSchema]


class SummarizeRequest(BaseModel):
    """Request body for ``POST /summarize``."""

    ocr_result: dict[str, Any] | None = None
    user_instructions: str | None = None


class SummaryResponse(BaseModel):
    """Response schema for a normalized summary.

    List elements are passed through from the model unchecked.
    """

    short_summary: str
    parties: list[Any]
    important_dates: list[Any]
    obligations: list[Any]
    payment_terms: str | None
    termination_clauses: str | None
    governing_law: str | None
    risk_flags: list[Any]
    suggested_redactions: list[Any]
    confidence_score: float


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str
    details: str
    code: str


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    ocr_provider: str
    summarizer_available: bool
    summarizer_reason: str | None = None
