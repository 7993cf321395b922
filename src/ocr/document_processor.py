"""Unified OCR stage.

Validates and decodes a submitted document, sends it to the configured
OCR backend, adapts the native response into canonical pages, and
assembles the document-level result.
"""

import base64
import binascii

from src.errors import InvalidDocumentError
from src.utils.config import OCRConfig
from src.utils.logger import get_logger

from .assembler import assemble_ocr_result
from .models import OCRResult
from .providers.factory import OCRProvider, get_ocr_provider

logger = get_logger(__name__)

DEFAULT_FILENAME = "document.pdf"
DEFAULT_MIME_TYPE = "application/pdf"


def decode_document(document: str | None) -> bytes:
    """Decode a base64 document payload.

    A ``data:<mime>;base64,`` prefix, as produced by browser file
    readers, is stripped first.

    Args:
        document: Base64 string.

    Returns:
        The decoded bytes.

    Raises:
        InvalidDocumentError: If the payload is missing, empty, or not
            valid base64.
    """
    if not document:
        raise InvalidDocumentError("No document provided")

    if document.startswith("data:") and "," in document:
        document = document.split(",", 1)[1]

    try:
        content = base64.b64decode("".join(document.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDocumentError("Invalid base64 document") from exc

    if not content:
        raise InvalidDocumentError("Invalid base64 document")
    return content


class DocumentProcessor:
    """End-to-end OCR stage for one configured provider.

    Args:
        config: OCR configuration.
        provider: Backend/adapter pair. Built from ``config`` when omitted.
    """

    def __init__(self, config: OCRConfig, provider: OCRProvider | None = None) -> None:
        self.config = config
        self.provider = provider or get_ocr_provider(config)

    def validate(self, content: bytes, mime_type: str) -> None:
        """Reject documents the pipeline does not accept.

        Raises:
            InvalidDocumentError: For an unsupported MIME type or an
                oversized document.
        """
        if mime_type not in self.config.allowed_mime_types:
            raise InvalidDocumentError(
                f"Unsupported file type: {mime_type}. "
                "Please upload a PDF or image file."
            )
        if len(content) > self.config.max_document_bytes:
            limit_mb = self.config.max_document_bytes // (1024 * 1024)
            raise InvalidDocumentError(
                f"File too large. Maximum size is {limit_mb}MB."
            )

    def process(
        self,
        content: bytes,
        filename: str = DEFAULT_FILENAME,
        mime_type: str = DEFAULT_MIME_TYPE,
    ) -> OCRResult:
        """Run OCR on raw document bytes.

        Args:
            content: Raw document bytes.
            filename: Display name for the source document.
            mime_type: MIME type of the document.

        Returns:
            The assembled OCR result.

        Raises:
            InvalidDocumentError: If the document is not accepted.
            ConfigurationError: If the provider is misconfigured.
            OCRBackendError: If the backend fails or returns no content.
        """
        self.validate(content, mime_type)
        logger.info(
            "Processing document %s (%s, %d bytes) with %s",
            filename,
            mime_type,
            len(content),
            self.provider.adapter.provider_id,
        )

        raw_response = self.provider.backend.analyze(content, mime_type)
        pages = self.provider.adapter.adapt(raw_response)
        result = assemble_ocr_result(
            pages, filename, self.provider.adapter.provider_id
        )

        logger.info("Processed %d pages from %s", result.meta.pages, filename)
        return result

    def process_base64(
        self,
        document: str | None,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> OCRResult:
        """Decode a base64 submission and run OCR on it."""
        content = decode_document(document)
        return self.process(
            content,
            filename or DEFAULT_FILENAME,
            mime_type or DEFAULT_MIME_TYPE,
        )
