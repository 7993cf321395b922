"""AWS Textract backend and adapter.

Textract returns a flat list of blocks linked by ``Relationships``
edges rather than a nested tree. Confidences are on a 0-100 scale and
geometry is already an axis-aligned ``BoundingBox``.
"""

from collections import defaultdict
from typing import Any

from src.errors import NoExtractableContentError, OCRBackendError
from src.ocr.models import (
    BlockType,
    BoundingBox,
    OCRBlock,
    OCREntity,
    OCRPageResult,
    clamp_confidence,
)
from src.utils.config import TextractConfig
from src.utils.logger import get_logger

from .base import OCRAdapter, OCRBackend

logger = get_logger(__name__)

PROVIDER_ID = "aws-textract"


def _scaled_confidence(block: dict[str, Any]) -> float:
    """Convert a 0-100 Textract confidence to the canonical 0-1 scale."""
    confidence = block.get("Confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, int | float):
        return 0.0
    return clamp_confidence(confidence / 100)


def _bounding_box(block: dict[str, Any]) -> BoundingBox:
    box = (block.get("Geometry") or {}).get("BoundingBox") or {}
    return BoundingBox(
        x=float(box.get("Left") or 0),
        y=float(box.get("Top") or 0),
        width=float(box.get("Width") or 0),
        height=float(box.get("Height") or 0),
    )


def get_text_from_relationships(
    block: dict[str, Any],
    block_map: dict[str, dict[str, Any]],
    relationship_type: str = "CHILD",
) -> str:
    """Join the text of WORD blocks linked from ``block`` by one edge type.

    Args:
        block: Block whose relationships are followed.
        block_map: All response blocks keyed by ``Id``.
        relationship_type: Edge type to follow.

    Returns:
        Space-separated word text, trimmed.
    """
    words = []
    for relationship in block.get("Relationships") or []:
        if relationship.get("Type") != relationship_type:
            continue
        for block_id in relationship.get("Ids") or []:
            related = block_map.get(block_id)
            if related and related.get("BlockType") == "WORD" and related.get("Text"):
                words.append(related["Text"])
    return " ".join(words).strip()


def get_value_block(
    key_block: dict[str, Any], block_map: dict[str, dict[str, Any]]
) -> dict[str, Any] | None:
    """Follow a KEY block's VALUE edge to its KEY_VALUE_SET value block."""
    for relationship in key_block.get("Relationships") or []:
        if relationship.get("Type") != "VALUE":
            continue
        for block_id in relationship.get("Ids") or []:
            candidate = block_map.get(block_id)
            if (
                candidate
                and candidate.get("BlockType") == "KEY_VALUE_SET"
                and "VALUE" in (candidate.get("EntityTypes") or [])
            ):
                return candidate
    return None


class TextractAdapter(OCRAdapter):
    """Adapter for ``AnalyzeDocument`` / ``GetDocumentAnalysis`` payloads.

    LINE blocks become canonical blocks; a page without lines falls back
    to its WORD blocks. KEY_VALUE_SET pairs become ``KEY_VALUE`` entities
    on the page of their key. Blocks without a ``Page`` field belong to
    page 1, as in single-page ``AnalyzeDocument`` responses.
    """

    provider_id = PROVIDER_ID

    def adapt(
        self, raw_response: dict[str, Any], page_count: int | None = None
    ) -> list[OCRPageResult]:
        blocks = raw_response.get("Blocks")
        if not blocks:
            raise NoExtractableContentError("No blocks returned from Textract")

        block_map = {b["Id"]: b for b in blocks if b.get("Id")}
        lines: dict[int, list[OCRBlock]] = defaultdict(list)
        words: dict[int, list[OCRBlock]] = defaultdict(list)
        entities: dict[int, list[OCREntity]] = defaultdict(list)

        for block in blocks:
            page = int(block.get("Page") or 1)
            block_type = block.get("BlockType")

            if block_type in ("LINE", "WORD") and block.get("Text"):
                target = lines if block_type == "LINE" else words
                target[page].append(
                    OCRBlock(
                        id=block.get("Id") or f"block-{len(target[page])}",
                        text=block["Text"],
                        confidence=_scaled_confidence(block),
                        bounding_box=_bounding_box(block),
                        block_type=BlockType(block_type),
                    )
                )
            elif block_type == "KEY_VALUE_SET" and "KEY" in (
                block.get("EntityTypes") or []
            ):
                entity = self._key_value_entity(block, block_map, page)
                if entity is not None:
                    entities[page].append(entity)

        if not any(lines.values()) and not any(words.values()):
            raise NoExtractableContentError(
                "Textract returned no LINE or WORD blocks for this document"
            )

        if page_count is None:
            page_count = self._page_count(raw_response, blocks)

        results = [
            OCRPageResult.from_blocks(
                page=page,
                blocks=lines.get(page) or words.get(page) or [],
                entities=entities.get(page, []),
            )
            for page in range(1, page_count + 1)
        ]
        logger.debug("Adapted %d Textract blocks into %d pages", len(blocks), len(results))
        return results

    @staticmethod
    def _page_count(raw_response: dict[str, Any], blocks: list[dict[str, Any]]) -> int:
        declared = (raw_response.get("DocumentMetadata") or {}).get("Pages") or 0
        seen = max((int(b.get("Page") or 1) for b in blocks), default=1)
        return max(int(declared), seen, 1)

    @staticmethod
    def _key_value_entity(
        block: dict[str, Any], block_map: dict[str, dict[str, Any]], page: int
    ) -> OCREntity | None:
        key_text = get_text_from_relationships(block, block_map, "CHILD")
        if not key_text:
            return None

        value_block = get_value_block(block, block_map)
        value_text = (
            get_text_from_relationships(value_block, block_map, "CHILD")
            if value_block
            else ""
        )
        return OCREntity(
            type="KEY_VALUE",
            text=f"{key_text}: {value_text}",
            page=page,
            confidence=_scaled_confidence(block),
        )


class TextractBackend(OCRBackend):
    """Calls Textract ``AnalyzeDocument`` with forms and tables enabled.

    Credentials come from the standard AWS credential chain.

    Args:
        config: Region and feature types for the analysis call.
    """

    def __init__(self, config: TextractConfig) -> None:
        self.config = config
        self._client = None

    def _get_client(self):
        if self._client is None:
            import boto3

            self._client = boto3.client("textract", region_name=self.config.region)
            logger.info("Initialized Textract client in %s", self.config.region)
        return self._client

    def analyze(self, content: bytes, mime_type: str) -> dict[str, Any]:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            return self._get_client().analyze_document(
                Document={"Bytes": content},
                FeatureTypes=self.config.feature_types,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Textract request failed: %s", exc)
            raise OCRBackendError(f"Textract request failed: {exc}") from exc
