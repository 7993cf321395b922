"""Interfaces shared by every OCR provider.

A provider is split in two: an ``OCRBackend`` that performs the remote
call and returns the provider's native response as plain data, and an
``OCRAdapter`` that translates that response into canonical page
results. Only adapters know the shape of a native response.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.ocr.models import OCRPageResult


class OCRBackend(ABC):
    """Transport to a remote OCR service."""

    @abstractmethod
    def analyze(self, content: bytes, mime_type: str) -> dict[str, Any]:
        """Submit raw document bytes and return the native response.

        Args:
            content: Raw document bytes.
            mime_type: MIME type of the document.

        Returns:
            The provider response as JSON-compatible data.

        Raises:
            ConfigurationError: If identifiers or credentials are missing.
            OCRBackendError: If the remote call fails.
        """


class OCRAdapter(ABC):
    """Translates one provider's native response into canonical pages."""

    #: Identifier recorded as ``meta.provider`` on assembled results.
    provider_id: str = "unknown"

    @abstractmethod
    def adapt(
        self, raw_response: dict[str, Any], page_count: int | None = None
    ) -> list[OCRPageResult]:
        """Convert a native response into page results ordered by page number.

        Args:
            raw_response: Response returned by the matching backend.
            page_count: Number of pages to emit. Derived from the
                response when ``None``.

        Returns:
            One page result per page, starting at page 1.

        Raises:
            NoExtractableContentError: If the response holds no text units.
        """
