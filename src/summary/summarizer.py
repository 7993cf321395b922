"""Summarization stage.

Whether a language model can be used is decided once at startup by
``check_summarizer``. The stage then either calls Gemini and normalizes
its answer, or falls back to the fixed mock summary.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from src.errors import SummarizationError, SummaryParseError
from src.ocr.models import OCRResult
from src.utils.config import SummarizationConfig
from src.utils.logger import get_logger

from .mock import mock_summary
from .models import SummaryResult
from .normalizer import extract_json_object, normalize_summary
from .request_builder import build_prompt, build_summary_request

logger = get_logger(__name__)


class SummaryBackend(ABC):
    """A language model that turns a prompt into response text."""

    model_name: str = "unknown"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the raw text response for ``prompt``.

        Raises:
            SummarizationError: If the backend call fails.
        """


class GeminiBackend(SummaryBackend):
    """Google Gemini via the ``google-genai`` SDK.

    Args:
        config: API key, model name and generation settings.
    """

    def __init__(self, config: SummarizationConfig) -> None:
        self.config = config
        self.model_name = config.model
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.config.api_key)
            logger.info("Initialized Gemini client for model %s", self.model_name)
        return self._client

    def generate(self, prompt: str) -> str:
        import httpx
        from google.genai import errors, types

        try:
            response = self._get_client().models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.config.temperature,
                    top_p=self.config.top_p,
                    top_k=self.config.top_k,
                    max_output_tokens=self.config.max_output_tokens,
                ),
            )
        except (errors.APIError, httpx.HTTPError) as exc:
            logger.error("Gemini request failed: %s", exc)
            raise SummarizationError(f"Gemini request failed: {exc}") from exc

        return response.text or ""


@dataclass(frozen=True)
class Available:
    """A configured backend is ready to use."""

    backend: SummaryBackend


@dataclass(frozen=True)
class Unavailable:
    """No backend will be called; ``reason`` says why."""

    reason: str


SummarizerAvailability = Available | Unavailable


def check_summarizer(config: SummarizationConfig) -> SummarizerAvailability:
    """Decide once whether summarization can call a language model.

    Args:
        config: Summarization configuration.

    Returns:
        ``Available`` with a Gemini backend, or ``Unavailable`` when the
        skip flag is set or no API key is configured.
    """
    if config.skip_llm:
        return Unavailable("SKIP_LLM is set")
    if not config.api_key:
        return Unavailable("GEMINI_API_KEY not set")
    return Available(GeminiBackend(config))


class Summarizer:
    """Runs the summarization stage for one request at a time.

    Args:
        config: Summarization configuration.
        availability: Precomputed availability. Checked from ``config``
            when omitted.
    """

    def __init__(
        self,
        config: SummarizationConfig,
        availability: SummarizerAvailability | None = None,
    ) -> None:
        self.config = config
        self.availability = availability or check_summarizer(config)
        if isinstance(self.availability, Unavailable):
            logger.warning(
                "%s - summaries will use the mock response", self.availability.reason
            )

    @property
    def is_available(self) -> bool:
        return isinstance(self.availability, Available)

    def summarize(
        self,
        ocr_result: OCRResult | Mapping[str, Any] | None,
        user_instructions: str | None = None,
    ) -> SummaryResult:
        """Summarize an OCR result.

        Args:
            ocr_result: An ``OCRResult`` or its JSON wire form.
            user_instructions: Optional free-text instructions.

        Returns:
            A normalized summary.

        Raises:
            InvalidOCRResultError: If the OCR result is malformed.
            SummarizationError: If the backend fails.
            SummaryParseError: If the backend response has no JSON object.
        """
        payload = build_summary_request(
            ocr_result, user_instructions, self.config.max_blocks_per_page
        )

        if isinstance(self.availability, Unavailable):
            logger.info("Using mock summary (%s)", self.availability.reason)
            return mock_summary()

        backend = self.availability.backend
        logger.info(
            "Summarizing %s (%d pages) with %s",
            payload["meta"].get("filename", "document"),
            len(payload["ocr"]),
            backend.model_name,
        )
        text = backend.generate(build_prompt(payload))

        try:
            candidate = extract_json_object(text)
        except SummaryParseError:
            logger.error("Failed to parse summary response: %.500s", text)
            raise

        return normalize_summary(candidate)
