"""
AI service package for product table extraction.

The extraction module builds the prompt, calls Gemini and parses the
reply; the AIService class owns the client and configuration and
delegates to it.
"""

from typing import Any

from ...models import ProductRow
from .extraction import (
    PRODUCT_ROWS_RESPONSE_FORMAT,
    AIServiceError,
    build_extraction_prompt,
    extract_product_rows as _extract_product_rows,
    index_rows,
    parse_product_rows,
)

__all__ = [
    "AIService",
    "AIServiceError",
    "PRODUCT_ROWS_RESPONSE_FORMAT",
    "build_extraction_prompt",
    "get_ai_service",
    "index_rows",
    "parse_product_rows",
]


# =============================================================================
# AIService Class
# =============================================================================


class AIService:
    """
    Service for AI-powered product extraction.

    Talks to Google Gemini through its OpenAI-compatible endpoint using
    the openai SDK, asking for a JSON array constrained by a schema.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: Any | None = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: Gemini API key. If None, reads from config/environment.
            model: Gemini model name. If None, reads from config.
            base_url: OpenAI-compatible endpoint. If None, reads from config.
            timeout: Request timeout in seconds. If None, reads from config.
            client: Pre-built AsyncOpenAI-compatible client (used by tests).
        """
        if None in (api_key, model, base_url, timeout):
            from ...config import get_settings

            settings = get_settings()
            api_key = api_key if api_key is not None else settings.gemini_api_key
            model = model or settings.gemini_model
            base_url = base_url or settings.gemini_base_url
            timeout = timeout if timeout is not None else settings.gemini_timeout_seconds

        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    @property
    def client(self):
        """Lazy-load the AsyncOpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "Gemini API key not provided. Set GEMINI_API_KEY environment variable."
                )
            from openai import AsyncOpenAI

            # No retries: a failed call fails the request.
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def extract_product_rows(
        self, pdf_text: str, additional_prompt: str | None = None
    ) -> list[ProductRow]:
        """
        Extract the product table from PDF text.

        Delegates to the extraction module.

        Args:
            pdf_text: Plain text extracted from the PDF.
            additional_prompt: Optional user instructions for the model.

        Returns:
            List of ProductRow in the model's order.
        """
        return await _extract_product_rows(
            pdf_text,
            additional_prompt,
            client=self.client,
            model=self.model,
        )


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
