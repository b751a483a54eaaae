"""
Storygrid API Clients

Async client for the Google Gemini ``generateContent`` REST endpoint.

One attempt per call: failures surface immediately as ServiceError
subclasses and are never retried here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from storygrid.core.constants import GEMINI_BASE_URL
from storygrid.core.env_loader import get_google_api_key
from storygrid.core.exceptions import (
    ContentBlockedError,
    MissingConfigError,
    RateLimitError,
    ServiceError,
    ServiceTimeoutError,
)
from storygrid.core.logging_config import get_logger
from storygrid.storyboard.request_builder import GenerationRequest

logger = get_logger("llm.api_clients")

PROVIDER = "google"

# finishReason values that mean the candidate was withheld
BLOCKED_FINISH_REASONS = {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}


# ============================================================================
#  RESPONSE TYPES
# ============================================================================

@dataclass
class TextResponse:
    """Response from a text generation call."""
    text: str
    model: str
    usage: Optional[Dict] = None
    finish_reason: Optional[str] = None
    raw_response: Optional[Dict] = None


# ============================================================================
#  GEMINI CLIENT
# ============================================================================

class GeminiClient:
    """Client for Google Gemini API."""

    MODEL_DISPLAY_NAME = "Gemini"

    def __init__(
        self,
        api_key: str = None,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        api_key = api_key or get_google_api_key()
        if not api_key:
            raise MissingConfigError(
                "GeminiClient requires an API key",
                {"env": ["GOOGLE_API_KEY", "GEMINI_API_KEY"]},
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

    def _endpoint(self, model: str) -> str:
        return f"{self.base_url}/{model}:generateContent"

    async def generate_content(self, request: GenerationRequest) -> TextResponse:
        """
        Send one generateContent call.

        Args:
            request: Built request (parts, schema, model)

        Returns:
            TextResponse with the concatenated text of the first candidate

        Raises:
            RateLimitError: HTTP 429
            ServiceTimeoutError: the request timed out
            ContentBlockedError: prompt or candidate blocked by safety filters
            ServiceError: any other transport or HTTP failure
        """
        url = self._endpoint(request.model)
        logger.info(
            f"{self.MODEL_DISPLAY_NAME} call: model={request.model} "
            f"images={request.image_count} kind={request.metadata.get('kind', '?')}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=request.to_payload(), headers=self._get_headers())
        except httpx.TimeoutException as e:
            raise ServiceTimeoutError(PROVIDER, f"request timed out: {e}")
        except httpx.HTTPError as e:
            raise ServiceError(PROVIDER, f"transport error: {e}")

        if response.status_code == 429:
            raise RateLimitError(PROVIDER, "rate limit exceeded", status_code=429)
        if response.status_code >= 400:
            raise ServiceError(
                PROVIDER,
                f"HTTP {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ServiceError(PROVIDER, f"non-JSON envelope: {e}", status_code=response.status_code)

        return self._to_text_response(result, request.model)

    def _to_text_response(self, result: Dict[str, Any], model: str) -> TextResponse:
        feedback = result.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            logger.warning(f"Gemini blocked prompt: {feedback['blockReason']}")
            raise ContentBlockedError(PROVIDER, f"block_reason: {feedback['blockReason']}")

        text = ""
        finish_reason = None
        candidates = result.get("candidates", [])
        if candidates:
            candidate = candidates[0]
            finish_reason = candidate.get("finishReason")
            if finish_reason in BLOCKED_FINISH_REASONS:
                logger.warning(f"Gemini blocked content: finish_reason={finish_reason}")
                raise ContentBlockedError(PROVIDER, f"finish_reason: {finish_reason}")
            for part in candidate.get("content", {}).get("parts", []):
                if "text" in part:
                    text += part["text"]

        if not text:
            logger.warning(f"Gemini returned no text (finish_reason={finish_reason})")

        return TextResponse(
            text=text,
            model=model,
            usage=result.get("usageMetadata"),
            finish_reason=finish_reason,
            raw_response=result,
        )
