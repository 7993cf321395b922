"""Configuration management for the LawScanner pipeline.

Loads a YAML configuration file, overlays the deployment environment
variables, and validates everything into a single ``AppConfig`` that is
built once at process start and passed to each component.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

OCRProviderName = Literal["google", "aws"]


class GoogleDocumentAIConfig(BaseModel):
    """Identifiers and service-account credentials for Document AI."""

    project_id: str | None = None
    location: str | None = None
    processor_id: str | None = None
    service_account_email: str | None = None
    private_key: str | None = None

    def missing_identifiers(self) -> list[str]:
        """Return the names of unset processor identifiers."""
        return [
            name
            for name in ("project_id", "location", "processor_id")
            if not getattr(self, name)
        ]

    def missing_credentials(self) -> list[str]:
        """Return the names of unset service-account fields."""
        return [
            name
            for name in ("service_account_email", "private_key")
            if not getattr(self, name)
        ]


class TextractConfig(BaseModel):
    """Configuration for AWS Textract document analysis."""

    region: str = "us-east-1"
    feature_types: list[str] = Field(default_factory=lambda: ["TABLES", "FORMS"])


class OCRConfig(BaseModel):
    """Configuration for the OCR stage."""

    provider: OCRProviderName = "google"
    google: GoogleDocumentAIConfig = Field(default_factory=GoogleDocumentAIConfig)
    aws: TextractConfig = Field(default_factory=TextractConfig)
    max_document_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: [
            "application/pdf",
            "image/png",
            "image/jpeg",
            "image/tiff",
        ]
    )


class SummarizationConfig(BaseModel):
    """Configuration for the Gemini summarization stage."""

    api_key: str | None = None
    model: str = "gemini-2.0-flash"
    temperature: float = 0.2
    top_p: float = 0.8
    top_k: int = 40
    max_output_tokens: int = 4096
    max_blocks_per_page: int = Field(default=50, ge=1)
    skip_llm: bool = False


class APIConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    summarization: SummarizationConfig = Field(default_factory=SummarizationConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    log_level: str = "INFO"


# Environment variable -> (section path, field) in the raw config dict.
_ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "OCR_PROVIDER": ("ocr", "provider"),
    "GOOGLE_CLOUD_PROJECT_ID": ("ocr", "google", "project_id"),
    "GOOGLE_CLOUD_LOCATION": ("ocr", "google", "location"),
    "GOOGLE_DOCUMENT_AI_PROCESSOR_ID": ("ocr", "google", "processor_id"),
    "GOOGLE_SERVICE_ACCOUNT_EMAIL": ("ocr", "google", "service_account_email"),
    "GOOGLE_PRIVATE_KEY": ("ocr", "google", "private_key"),
    "AWS_REGION": ("ocr", "aws", "region"),
    "GEMINI_API_KEY": ("summarization", "api_key"),
    "GEMINI_MODEL": ("summarization", "model"),
    "SKIP_LLM": ("summarization", "skip_llm"),
    "LOG_LEVEL": ("log_level",),
}


def _apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> None:
    """Overlay set environment variables onto the raw config dict in place."""
    for var, path in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        if var == "GOOGLE_PRIVATE_KEY":
            value = value.replace("\\n", "\n")
        if var == "SKIP_LLM":
            value = value.strip().lower() in ("1", "true", "yes")

        section = raw
        for key in path[:-1]:
            if not isinstance(section.get(key), dict):
                section[key] = {}
            section = section[key]
        section[path[-1]] = value


def load_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """Load configuration from a YAML file and the environment.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.
        environ: Environment mapping to overlay. Defaults to ``os.environ``.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")
    if environ is None:
        environ = os.environ

    raw: dict[str, Any] = {}
    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("No config file found at %s, using defaults", path)

    _apply_env_overrides(raw, environ)
    return AppConfig(**raw)
