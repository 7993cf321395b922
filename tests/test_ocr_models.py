"""Tests for the canonical OCR data model and the result assembler."""

from datetime import datetime, timezone

import pytest

from src.ocr.assembler import assemble_ocr_result
from src.ocr.models import (
    BlockType,
    BoundingBox,
    OCRBlock,
    OCREntity,
    OCRPageResult,
    clamp_confidence,
)


def _make_block(
    text: str = "text",
    confidence: float = 0.9,
    block_id: str = "b1",
    block_type: BlockType = BlockType.LINE,
) -> OCRBlock:
    """Create a test OCRBlock with defaults."""
    return OCRBlock(
        id=block_id,
        text=text,
        confidence=confidence,
        bounding_box=BoundingBox(0.0, 0.0, 0.5, 0.1),
        block_type=block_type,
    )


class TestClampConfidence:
    """Tests for confidence coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 0.5), (1.5, 1.0), (-0.2, 0.0), (1, 1.0), (None, 0.0), ("0.9", 0.0), (True, 0.0)],
    )
    def test_clamp(self, value: object, expected: float) -> None:
        assert clamp_confidence(value) == expected


class TestBoundingBox:
    """Tests for the BoundingBox data class."""

    def test_defaults_to_zero_box(self) -> None:
        bbox = BoundingBox()
        assert (bbox.x, bbox.y, bbox.width, bbox.height) == (0.0, 0.0, 0.0, 0.0)

    def test_to_pixels_letter_page(self) -> None:
        pixels = BoundingBox(x=0.1, y=0.2, width=0.5, height=0.1).to_pixels(612, 792)
        assert pixels.x == pytest.approx(61.2, abs=0.1)
        assert pixels.y == pytest.approx(158.4, abs=0.1)
        assert pixels.width == pytest.approx(306, abs=0.1)
        assert pixels.height == pytest.approx(79.2, abs=0.1)


class TestOCRPageResult:
    """Tests for page aggregation."""

    def test_confidence_is_mean_of_blocks(self) -> None:
        page = OCRPageResult.from_blocks(
            1,
            [
                _make_block("text1", 0.9, "b1"),
                _make_block("text2", 0.8, "b2"),
                _make_block("text3", 0.7, "b3"),
            ],
        )
        assert page.confidence == pytest.approx(0.8, abs=0.01)

    def test_zero_blocks_has_zero_confidence(self) -> None:
        page = OCRPageResult.from_blocks(1, [])
        assert page.confidence == 0.0
        assert page.text == ""
        assert page.blocks == ()

    def test_text_is_newline_joined_and_trimmed(self) -> None:
        page = OCRPageResult.from_blocks(
            1, [_make_block("  first", block_id="a"), _make_block("second  ", block_id="b")]
        )
        assert page.text == "first\nsecond"

    def test_block_order_preserved(self) -> None:
        blocks = [_make_block(str(i), block_id=f"b{i}") for i in range(5)]
        page = OCRPageResult.from_blocks(1, blocks)
        assert [b.id for b in page.blocks] == ["b0", "b1", "b2", "b3", "b4"]

    def test_entities_above_threshold(self) -> None:
        page = OCRPageResult.from_blocks(
            1,
            [],
            [
                OCREntity(type="NAME", text="John Doe", page=1, confidence=0.95),
                OCREntity(type="NAME", text="Jane", page=1, confidence=0.45),
                OCREntity(type="DATE", text="2024-01-01", page=1, confidence=0.88),
            ],
        )
        assert len(page.entities_above(0.5)) == 2

    def test_to_dict_wire_shape(self) -> None:
        page = OCRPageResult.from_blocks(
            1,
            [_make_block("Sample text", 0.95, "block-1")],
            [OCREntity(type="DATE", text="January 1, 2024", page=1, confidence=0.95)],
        )
        data = page.to_dict()
        assert data["page"] == 1
        assert data["blocks"][0]["boundingBox"] == {
            "x": 0.0,
            "y": 0.0,
            "width": 0.5,
            "height": 0.1,
        }
        assert data["blocks"][0]["blockType"] == "LINE"
        assert "mentionText" not in data["entities"][0]


class TestAssembler:
    """Tests for assemble_ocr_result."""

    def test_meta_fields(self) -> None:
        processed_at = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        result = assemble_ocr_result(
            [OCRPageResult.from_blocks(1, [_make_block()])],
            "test.pdf",
            "aws-textract",
            processed_at,
        )
        assert result.meta.filename == "test.pdf"
        assert result.meta.pages == 1
        assert result.meta.provider == "aws-textract"
        assert result.meta.processed_at == "2024-01-15T10:00:00Z"

    def test_pages_sorted_by_number(self) -> None:
        pages = [OCRPageResult.from_blocks(n, []) for n in (3, 1, 2)]
        result = assemble_ocr_result(pages, "doc.pdf", "google-document-ai")
        assert [p.page for p in result.pages] == [1, 2, 3]
        assert result.meta.pages == len(result.pages)

    def test_page_content_untouched(self) -> None:
        page = OCRPageResult.from_blocks(1, [_make_block(confidence=0.42)])
        result = assemble_ocr_result([page], "doc.pdf", "google-document-ai")
        assert result.pages[0] is page

    def test_empty_result(self) -> None:
        result = assemble_ocr_result([], "empty.pdf", "google-document-ai")
        data = result.to_dict()
        assert data["ocr"] == []
        assert data["meta"]["pages"] == 0

    def test_default_timestamp_is_iso(self) -> None:
        result = assemble_ocr_result([], "doc.pdf", "google-document-ai")
        parsed = datetime.fromisoformat(result.meta.processed_at.replace("Z", "+00:00"))
        assert parsed.tzinfo is not None
