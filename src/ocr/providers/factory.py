"""Selects the active OCR provider from configuration."""

from dataclasses import dataclass

from src.utils.config import OCRConfig

from .base import OCRAdapter, OCRBackend
from .google_document_ai import GoogleDocumentAIAdapter, GoogleDocumentAIBackend
from .textract import TextractAdapter, TextractBackend


@dataclass(frozen=True)
class OCRProvider:
    """A backend paired with the adapter that understands its responses."""

    name: str
    backend: OCRBackend
    adapter: OCRAdapter


def get_ocr_provider(config: OCRConfig) -> OCRProvider:
    """Build the provider named by ``config.provider``.

    Args:
        config: OCR configuration.

    Returns:
        The matching backend/adapter pair.

    Raises:
        ValueError: If the provider name is not supported.
    """
    if config.provider == "google":
        return OCRProvider(
            name="google",
            backend=GoogleDocumentAIBackend(config.google),
            adapter=GoogleDocumentAIAdapter(),
        )
    if config.provider == "aws":
        return OCRProvider(
            name="aws",
            backend=TextractBackend(config.aws),
            adapter=TextractAdapter(),
        )
    raise ValueError(f"Unsupported OCR provider: {config.provider}")
