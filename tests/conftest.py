"""Shared test fixtures for the LawScanner test suite."""

import base64
from pathlib import Path
from typing import Any

import pytest

from src.utils.config import AppConfig, SummarizationConfig


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"


@pytest.fixture
def pdf_bytes() -> bytes:
    """Minimal bytes that look like a PDF."""
    return b"%PDF-1.4\n1 0 obj<</Type/Catalog>>endobj\n%%EOF"


@pytest.fixture
def pdf_base64(pdf_bytes: bytes) -> str:
    return base64.b64encode(pdf_bytes).decode("ascii")


@pytest.fixture
def mock_config() -> AppConfig:
    """Configuration with the language model skipped."""
    return AppConfig(summarization=SummarizationConfig(skip_llm=True))


def _vertices(x0: float, y0: float, x1: float, y1: float) -> list[dict[str, float]]:
    return [
        {"x": x0, "y": y0},
        {"x": x1, "y": y0},
        {"x": x1, "y": y1},
        {"x": x0, "y": y1},
    ]


@pytest.fixture
def document_ai_response() -> dict[str, Any]:
    """A two-page Document AI ProcessResponse in client-library form.

    Page 1 has paragraph blocks, page 2 only has lines. One entity is
    pinned to page 1 and one has no page reference.
    """
    text = "SERVICE AGREEMENT\nThis Agreement is made on January 15, 2024.\nSigned\n"
    return {
        "document": {
            "text": text,
            "pages": [
                {
                    "page_number": 1,
                    "blocks": [
                        {
                            "layout": {
                                "text_anchor": {
                                    "text_segments": [{"start_index": "0", "end_index": "18"}]
                                },
                                "confidence": 0.98,
                                "bounding_poly": {
                                    "normalized_vertices": _vertices(0.1, 0.05, 0.6, 0.08)
                                },
                            }
                        },
                        {
                            "layout": {
                                "text_anchor": {
                                    "text_segments": [{"start_index": "18", "end_index": "62"}]
                                },
                                "confidence": 0.9,
                                "bounding_poly": {
                                    "normalized_vertices": _vertices(0.1, 0.1, 0.9, 0.15)
                                },
                            }
                        },
                    ],
                    "lines": [],
                },
                {
                    "page_number": 2,
                    "blocks": [],
                    "lines": [
                        {
                            "layout": {
                                "text_anchor": {
                                    "text_segments": [{"start_index": "62", "end_index": "69"}]
                                },
                                "confidence": 0.8,
                                "bounding_poly": {"normalized_vertices": []},
                            }
                        }
                    ],
                },
            ],
            "entities": [
                {
                    "type": "DATE",
                    "mention_text": "January 15, 2024",
                    "confidence": 0.95,
                    "page_anchor": {"page_refs": [{"page": "0"}]},
                },
                {
                    "type": "NAME",
                    "mention_text": "",
                    "normalized_value": {"text": "Example Consulting LLC"},
                    "confidence": 0.7,
                },
            ],
        }
    }


@pytest.fixture
def textract_response() -> dict[str, Any]:
    """A single-page AnalyzeDocument response with one key/value pair."""
    return {
        "DocumentMetadata": {"Pages": 1},
        "Blocks": [
            {"BlockType": "PAGE", "Id": "page-1"},
            {
                "BlockType": "LINE",
                "Id": "line-1",
                "Text": "Contract Number: 12345",
                "Confidence": 99.0,
                "Geometry": {
                    "BoundingBox": {"Left": 0.1, "Top": 0.2, "Width": 0.5, "Height": 0.1}
                },
            },
            {
                "BlockType": "LINE",
                "Id": "line-2",
                "Text": "Governing law: Delaware",
                "Confidence": 95.0,
            },
            {"BlockType": "WORD", "Id": "w1", "Text": "Contract", "Confidence": 99.0},
            {"BlockType": "WORD", "Id": "w2", "Text": "Number", "Confidence": 99.0},
            {"BlockType": "WORD", "Id": "w3", "Text": "12345", "Confidence": 98.0},
            {
                "BlockType": "KEY_VALUE_SET",
                "Id": "key-1",
                "EntityTypes": ["KEY"],
                "Confidence": 88.0,
                "Relationships": [
                    {"Type": "VALUE", "Ids": ["value-1"]},
                    {"Type": "CHILD", "Ids": ["w1", "w2"]},
                ],
            },
            {
                "BlockType": "KEY_VALUE_SET",
                "Id": "value-1",
                "EntityTypes": ["VALUE"],
                "Confidence": 88.0,
                "Relationships": [{"Type": "CHILD", "Ids": ["w3"]}],
            },
        ],
    }


@pytest.fixture
def ocr_result_dict() -> dict[str, Any]:
    """An OCR result in its JSON wire form."""
    return {
        "meta": {
            "filename": "agreement.pdf",
            "pages": 1,
            "provider": "google-document-ai",
            "processedAt": "2024-01-15T10:00:00Z",
        },
        "ocr": [
            {
                "page": 1,
                "text": "Sample text",
                "blocks": [
                    {
                        "id": "block-0-0",
                        "text": "Sample text",
                        "confidence": 0.95,
                        "boundingBox": {"x": 0, "y": 0, "width": 0.5, "height": 0.1},
                        "blockType": "PARAGRAPH",
                    }
                ],
                "entities": [],
                "confidence": 0.95,
            }
        ],
    }
