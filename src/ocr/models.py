"""Canonical OCR data model shared by every provider adapter.

All values are immutable. ``to_dict`` produces the JSON wire shape
(camelCase keys) returned by the ``/ocr`` endpoint and consumed by the
summarization request builder.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class BlockType(StrEnum):
    """Granularity of a recognized text span."""

    LINE = "LINE"
    WORD = "WORD"
    PARAGRAPH = "PARAGRAPH"


def clamp_confidence(value: Any) -> float:
    """Coerce a provider confidence into [0, 1]; missing or non-numeric is 0."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    return float(min(1.0, max(0.0, value)))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box normalized to [0, 1] of the page dimensions."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_pixels(self, page_width: float, page_height: float) -> "BoundingBox":
        """Scale the normalized box to page units.

        Args:
            page_width: Page width in pixels or points (612 for US Letter).
            page_height: Page height in pixels or points (792 for US Letter).

        Returns:
            A new box expressed in page units.
        """
        return BoundingBox(
            x=self.x * page_width,
            y=self.y * page_height,
            width=self.width * page_width,
            height=self.height * page_height,
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class OCRBlock:
    """One contiguous span of recognized text on a page."""

    id: str
    text: str
    confidence: float
    bounding_box: BoundingBox
    block_type: BlockType

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "confidence": self.confidence,
            "boundingBox": self.bounding_box.to_dict(),
            "blockType": self.block_type.value,
        }


@dataclass(frozen=True)
class OCREntity:
    """A semantically typed span, independent of block structure."""

    type: str
    text: str
    page: int
    confidence: float
    mention_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "text": self.text,
            "page": self.page,
            "confidence": self.confidence,
        }
        if self.mention_text is not None:
            data["mentionText"] = self.mention_text
        return data


@dataclass(frozen=True)
class OCRPageResult:
    """Aggregated OCR output for a single page."""

    page: int
    text: str
    blocks: tuple[OCRBlock, ...] = ()
    entities: tuple[OCREntity, ...] = ()
    confidence: float = 0.0

    @classmethod
    def from_blocks(
        cls,
        page: int,
        blocks: list[OCRBlock],
        entities: list[OCREntity] | None = None,
    ) -> "OCRPageResult":
        """Build a page, deriving its text and mean confidence from ``blocks``.

        Args:
            page: 1-based page number.
            blocks: Blocks in document order.
            entities: Entities attached to the page.

        Returns:
            The page result. Confidence is 0 when there are no blocks.
        """
        text = "\n".join(b.text for b in blocks).strip()
        confidence = (
            sum(b.confidence for b in blocks) / len(blocks) if blocks else 0.0
        )
        return cls(
            page=page,
            text=text,
            blocks=tuple(blocks),
            entities=tuple(entities or ()),
            confidence=confidence,
        )

    def entities_above(self, threshold: float) -> list[OCREntity]:
        """Return entities whose confidence is at least ``threshold``."""
        return [e for e in self.entities if e.confidence >= threshold]

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "text": self.text,
            "blocks": [b.to_dict() for b in self.blocks],
            "entities": [e.to_dict() for e in self.entities],
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class OCRMeta:
    """Document-level metadata for an OCR result."""

    filename: str
    pages: int
    provider: str
    processed_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "pages": self.pages,
            "provider": self.provider,
            "processedAt": self.processed_at,
        }


@dataclass(frozen=True)
class OCRResult:
    """Complete OCR result for a submitted document."""

    meta: OCRMeta
    pages: tuple[OCRPageResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "ocr": [p.to_dict() for p in self.pages],
        }
