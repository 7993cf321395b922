"""Google Document AI backend and adapter.

Document AI returns one global ``text`` buffer; every layout element
points into it through ``textAnchor.textSegments`` offset ranges, and
geometry comes as a polygon of normalized vertices. Responses are read
in either the client library's snake_case form or the REST camelCase
form.
"""

from typing import Any

from src.errors import ConfigurationError, NoExtractableContentError, OCRBackendError
from src.ocr.models import (
    BlockType,
    BoundingBox,
    OCRBlock,
    OCREntity,
    OCRPageResult,
    clamp_confidence,
)
from src.utils.config import GoogleDocumentAIConfig
from src.utils.logger import get_logger

from .base import OCRAdapter, OCRBackend

logger = get_logger(__name__)

PROVIDER_ID = "google-document-ai"
_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _field(data: Any, name: str, default: Any = None) -> Any:
    """Read a snake_case field, falling back to its camelCase spelling."""
    if not isinstance(data, dict):
        return default
    if name in data:
        return data[name]
    head, *rest = name.split("_")
    camel = head + "".join(part.title() for part in rest)
    return data.get(camel, default)


def extract_text_from_layout(layout: dict[str, Any], full_text: str) -> str:
    """Rebuild a layout element's text from its offset ranges.

    Args:
        layout: A Document AI ``Layout`` mapping.
        full_text: The document-level text buffer.

    Returns:
        The addressed substrings concatenated in range order, trimmed.
    """
    anchor = _field(layout, "text_anchor") or {}
    segments = _field(anchor, "text_segments") or []

    parts = []
    for segment in segments:
        start = int(_field(segment, "start_index") or 0)
        end = int(_field(segment, "end_index") or 0)
        parts.append(full_text[start:end])
    return "".join(parts).strip()


def extract_bounding_box(bounding_poly: dict[str, Any] | None) -> BoundingBox:
    """Derive an axis-aligned box from a normalized vertex polygon.

    The first vertex is the origin, the second gives the width and the
    third the height. Polygons with fewer than four vertices yield the
    zero box.
    """
    vertices = _field(bounding_poly, "normalized_vertices") or []
    if len(vertices) < 4:
        return BoundingBox()

    x = float(vertices[0].get("x") or 0)
    y = float(vertices[0].get("y") or 0)
    return BoundingBox(
        x=x,
        y=y,
        width=float(vertices[1].get("x") or 0) - x,
        height=float(vertices[2].get("y") or 0) - y,
    )


class GoogleDocumentAIAdapter(OCRAdapter):
    """Adapter for ``ProcessResponse`` payloads from Document AI."""

    provider_id = PROVIDER_ID

    def adapt(
        self, raw_response: dict[str, Any], page_count: int | None = None
    ) -> list[OCRPageResult]:
        document = _field(raw_response, "document")
        if not document:
            raise NoExtractableContentError("No document returned from Document AI")

        full_text = _field(document, "text") or ""
        pages = _field(document, "pages") or []
        if page_count is None:
            page_count = len(pages) or 1
        entities = _field(document, "entities") or []

        results: list[OCRPageResult] = []
        for index in range(page_count):
            page = pages[index] if index < len(pages) else {}
            results.append(
                OCRPageResult.from_blocks(
                    page=index + 1,
                    blocks=self._page_blocks(page, index, full_text),
                    entities=self._page_entities(entities, index),
                )
            )

        if not any(page.blocks for page in results):
            raise NoExtractableContentError(
                "Document AI returned no blocks or lines for this document"
            )

        logger.debug("Adapted %d Document AI pages", len(results))
        return results

    def _page_blocks(
        self, page: dict[str, Any], index: int, full_text: str
    ) -> list[OCRBlock]:
        """Collect paragraph-level blocks, falling back to lines."""
        blocks = self._layout_units(
            _field(page, "blocks") or [], index, full_text, "block", BlockType.PARAGRAPH
        )
        if not blocks:
            blocks = self._layout_units(
                _field(page, "lines") or [], index, full_text, "line", BlockType.LINE
            )
        return blocks

    def _layout_units(
        self,
        units: list[dict[str, Any]],
        index: int,
        full_text: str,
        prefix: str,
        block_type: BlockType,
    ) -> list[OCRBlock]:
        blocks: list[OCRBlock] = []
        for unit in units:
            layout = _field(unit, "layout")
            if not layout:
                continue
            blocks.append(
                OCRBlock(
                    id=f"{prefix}-{index}-{len(blocks)}",
                    text=extract_text_from_layout(layout, full_text),
                    confidence=clamp_confidence(_field(layout, "confidence")),
                    bounding_box=extract_bounding_box(_field(layout, "bounding_poly")),
                    block_type=block_type,
                )
            )
        return blocks

    def _page_entities(
        self, entities: list[dict[str, Any]], index: int
    ) -> list[OCREntity]:
        """Select the entities that belong on the page at 0-based ``index``.

        Entities without a page reference are attached to every page.
        """
        selected: list[OCREntity] = []
        for entity in entities:
            refs = _field(_field(entity, "page_anchor"), "page_refs") or []
            entity_page = _field(refs[0], "page") if refs else None
            if entity_page is not None and int(entity_page) != index:
                continue

            mention = _field(entity, "mention_text") or None
            normalized = _field(_field(entity, "normalized_value"), "text")
            selected.append(
                OCREntity(
                    type=_field(entity, "type") or "UNKNOWN",
                    text=mention or normalized or "",
                    page=index + 1,
                    confidence=clamp_confidence(_field(entity, "confidence")),
                    mention_text=mention,
                )
            )
        return selected


class GoogleDocumentAIBackend(OCRBackend):
    """Calls a Document AI processor with service-account credentials.

    Args:
        config: Processor identifiers and service-account credentials.
    """

    def __init__(self, config: GoogleDocumentAIConfig) -> None:
        self.config = config
        self._client = None

    def _check_config(self) -> None:
        missing = self.config.missing_identifiers()
        if missing:
            raise ConfigurationError(
                "Missing Google Cloud configuration. Please set "
                "GOOGLE_CLOUD_PROJECT_ID, GOOGLE_CLOUD_LOCATION, and "
                f"GOOGLE_DOCUMENT_AI_PROCESSOR_ID (missing: {', '.join(missing)})"
            )
        missing = self.config.missing_credentials()
        if missing:
            raise ConfigurationError(
                "Missing Google Cloud credentials. Please set "
                "GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY "
                f"(missing: {', '.join(missing)})"
            )

    def _get_client(self):
        """Lazily build the Document AI client on first use."""
        if self._client is None:
            self._check_config()
            from google.cloud import documentai
            from google.oauth2 import service_account

            try:
                credentials = service_account.Credentials.from_service_account_info(
                    {
                        "client_email": self.config.service_account_email,
                        "private_key": self.config.private_key,
                        "token_uri": _TOKEN_URI,
                    }
                )
            except ValueError as exc:
                raise ConfigurationError(
                    f"Invalid Google service account credentials: {exc}"
                ) from exc
            self._client = documentai.DocumentProcessorServiceClient(
                credentials=credentials,
                client_options={
                    "api_endpoint": f"{self.config.location}-documentai.googleapis.com"
                },
            )
            logger.info(
                "Initialized Document AI client for processor %s in %s",
                self.config.processor_id,
                self.config.location,
            )
        return self._client

    def analyze(self, content: bytes, mime_type: str) -> dict[str, Any]:
        from google.api_core import exceptions as api_exceptions
        from google.auth import exceptions as auth_exceptions
        from google.cloud import documentai

        client = self._get_client()
        request = documentai.ProcessRequest(
            name=client.processor_path(
                self.config.project_id,
                self.config.location,
                self.config.processor_id,
            ),
            raw_document=documentai.RawDocument(content=content, mime_type=mime_type),
        )

        try:
            response = client.process_document(request=request)
        except (api_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            logger.error("Document AI request failed: %s", exc)
            raise OCRBackendError(f"Document AI request failed: {exc}") from exc

        return documentai.ProcessResponse.to_dict(response)
