"""Wraps adapter output with document metadata."""

from datetime import datetime, timezone

from .models import OCRMeta, OCRPageResult, OCRResult


def assemble_ocr_result(
    pages: list[OCRPageResult],
    filename: str,
    provider: str,
    processed_at: datetime | None = None,
) -> OCRResult:
    """Aggregate page results into one document-level OCR result.

    Pages are ordered by page number (stable, so blocks keep their
    insertion order). Confidence and geometry are taken as-is.

    Args:
        pages: Page results from a provider adapter, in any order.
        filename: Name of the submitted document.
        provider: Provider identifier recorded in the metadata.
        processed_at: Completion time. Defaults to the current UTC time.

    Returns:
        The assembled OCR result with ``meta.pages == len(pages)``.
    """
    if processed_at is None:
        processed_at = datetime.now(timezone.utc)

    ordered = tuple(sorted(pages, key=lambda p: p.page))
    return OCRResult(
        meta=OCRMeta(
            filename=filename,
            pages=len(ordered),
            provider=provider,
            processed_at=processed_at.isoformat().replace("+00:00", "Z"),
        ),
        pages=ordered,
    )
