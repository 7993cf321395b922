"""Exception hierarchy for the LawScanner pipeline.

Every error carries a short machine-checkable ``code`` and a
human-readable ``category`` that the API layer reports as the
``error`` field of its ``{error, details}`` body.
"""


class LawScannerError(Exception):
    """Base class for all pipeline errors."""

    code = "internal_error"
    category = "Processing failed"
    status_code = 500


class InvalidDocumentError(LawScannerError):
    """The submitted document is missing, not base64, or not accepted."""

    code = "invalid_document"
    category = "Invalid document"
    status_code = 400


class InvalidOCRResultError(LawScannerError):
    """An OCR result handed to summarization is structurally invalid."""

    code = "invalid_ocr_result"
    category = "Invalid OCR result structure"
    status_code = 400


class ConfigurationError(LawScannerError):
    """A backend is selected but its identifiers or credentials are missing."""

    code = "configuration_error"
    category = "Backend misconfigured"


class OCRBackendError(LawScannerError):
    """The OCR backend call failed."""

    code = "ocr_failed"
    category = "OCR processing failed"


class NoExtractableContentError(OCRBackendError):
    """The OCR backend returned no blocks or lines at all."""

    code = "no_extractable_content"


class SummarizationError(LawScannerError):
    """The summarization backend call failed."""

    code = "summarization_failed"
    category = "Summarization failed"


class SummaryParseError(SummarizationError):
    """The summarization backend response holds no parseable JSON object."""

    code = "summary_parse_failed"
