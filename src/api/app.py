"""FastAPI application for the LawScanner API.

Provides the OCR and summarization endpoints plus a health check.
Every failure is reported as ``{error, details, code}``.
"""

from functools import lru_cache

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src import __version__
from src.errors import LawScannerError, OCRBackendError, SummarizationError
from src.ocr.document_processor import DocumentProcessor
from src.summary.summarizer import Summarizer, Unavailable
from src.utils.config import load_config
from src.utils.logger import get_logger

from .schemas import (
    ErrorResponse,
    HealthResponse,
    OCRRequest,
    OCRResultResponse,
    SummarizeRequest,
    SummaryResponse,
)

logger = get_logger(__name__)

_startup_config = load_config()

app = FastAPI(
    title="LawScanner API",
    description="Extract text from legal documents and summarize them",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_startup_config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@lru_cache(maxsize=1)
def _get_components() -> tuple[DocumentProcessor, Summarizer]:
    """Build the shared pipeline components once per process.

    Returns:
        Tuple of (document_processor, summarizer).
    """
    return (
        DocumentProcessor(_startup_config.ocr),
        Summarizer(_startup_config.summarization),
    )


def _error_body(error: str, details: str, code: str) -> dict[str, str]:
    return ErrorResponse(error=error, details=details, code=code).model_dump()


@app.exception_handler(LawScannerError)
async def _handle_pipeline_error(request: Request, exc: LawScannerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.category, str(exc), exc.code),
    )


@app.exception_handler(RequestValidationError)
async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid request body", details, "invalid_request"),
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health and backend availability."""
    processor, summarizer = _get_components()
    availability = summarizer.availability
    return HealthResponse(
        status="healthy",
        version=__version__,
        ocr_provider=processor.provider.adapter.provider_id,
        summarizer_available=summarizer.is_available,
        summarizer_reason=(
            availability.reason if isinstance(availability, Unavailable) else None
        ),
    )


@app.post("/ocr", response_model=OCRResultResponse, responses=_ERROR_RESPONSES)
def run_ocr(body: OCRRequest) -> OCRResultResponse:
    """Run OCR on a base64-encoded document.

    Args:
        body: Document payload with optional filename and MIME type.

    Returns:
        The canonical OCR result.
    """
    processor, _ = _get_components()
    try:
        result = processor.process_base64(body.document, body.filename, body.mime_type)
    except LawScannerError:
        raise
    except Exception as exc:
        logger.error("OCR processing error: %s", exc)
        raise OCRBackendError(str(exc)) from exc

    return OCRResultResponse(**result.to_dict())


@app.post("/summarize", response_model=SummaryResponse, responses=_ERROR_RESPONSES)
def summarize(body: SummarizeRequest) -> SummaryResponse:
    """Summarize an OCR result produced by ``/ocr``.

    Args:
        body: OCR result plus optional user instructions.

    Returns:
        The normalized summary.
    """
    _, summarizer = _get_components()
    try:
        summary = summarizer.summarize(body.ocr_result, body.user_instructions)
    except LawScannerError:
        raise
    except Exception as exc:
        logger.error("Summarization error: %s", exc)
        raise SummarizationError(str(exc)) from exc

    return SummaryResponse(**summary.to_dict())
