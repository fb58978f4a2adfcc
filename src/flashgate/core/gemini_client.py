"""Async client for the Gemini ``generateContent`` REST endpoint.

The gateway talks to a single model through :class:`GeminiClient`.  Request
handlers only depend on the :class:`ContentGenerator` protocol, so the
client is constructed once in the application lifespan and injected, and
tests substitute a fake that records the parts it receives.

Failure handling
----------------
Every way the provider can fail is reported as
:class:`~flashgate.core.errors.ProviderInvocationError`:

- transport errors (DNS, connection reset, timeout when one is configured)
- non-2xx responses, quoting the provider's ``error.message`` when present
- bodies that are not JSON or carry no candidate text (for example a prompt
  blocked by safety filtering)

Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from flashgate.core.config import GatewayConfig
from flashgate.core.errors import ProviderInvocationError
from flashgate.core.parts import GenerativeRequestPart, ModelInvocationResult

logger = logging.getLogger(__name__)


class ContentGenerator(Protocol):
    """Anything that turns an ordered list of parts into generated text."""

    async def generate(self, parts: Sequence[GenerativeRequestPart]) -> ModelInvocationResult: ...


class GeminiClient:
    """Thin async wrapper around ``models/{model}:generateContent``.

    Args:
        api_key: Gemini API key, sent in the ``x-goog-api-key`` header.
        model: Model identifier, e.g. ``gemini-1.5-flash``.
        base_url: Base URL of the Generative Language API.
        timeout: Seconds before a call is abandoned.  ``None`` disables the
            local timeout entirely.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(cls, cfg: GatewayConfig) -> GeminiClient:
        """Build a client from the gateway configuration."""
        return cls(
            api_key=cfg.gemini_api_key,
            model=cfg.gemini_model,
            base_url=cfg.gemini_base_url,
            timeout=cfg.provider_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, parts: Sequence[GenerativeRequestPart]) -> ModelInvocationResult:
        """Send *parts* as a single-turn request and return the generated text.

        Args:
            parts: Ordered request parts (text first, then any inline data).

        Returns:
            The concatenated text of the first candidate.

        Raises:
            ProviderInvocationError: On any transport, HTTP or payload failure.
        """
        if not self.api_key:
            raise ProviderInvocationError("GEMINI_API_KEY is not configured.")

        payload = {"contents": [{"parts": [p.model_dump(by_alias=True) for p in parts]}]}

        try:
            response = await self._http.post(
                self.endpoint,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.HTTPError as e:
            raise ProviderInvocationError(f"Gemini request failed: {e}") from e

        if response.is_error:
            raise ProviderInvocationError(
                f"Gemini API returned HTTP {response.status_code}: {_error_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderInvocationError("Gemini API returned a non-JSON response.") from e

        return ModelInvocationResult(output_text=_extract_text(data))

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.reason_phrase or "unknown error"
    return str(message)


def _extract_text(data: Any) -> str:
    """Pull the first candidate's text out of a ``generateContent`` body.

    Raises:
        ProviderInvocationError: If the body holds no usable text.
    """
    if not isinstance(data, dict):
        raise ProviderInvocationError("Gemini API returned an unexpected response body.")

    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise ProviderInvocationError(f"Prompt was blocked by Gemini ({reason}).")
        raise ProviderInvocationError("Gemini API returned no candidates.")

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    parts = (content.get("parts") or []) if isinstance(content, dict) else []
    text = "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
    if not text:
        finish_reason = first.get("finishReason", "UNKNOWN")
        raise ProviderInvocationError(
            f"Gemini response contained no text (finish reason: {finish_reason})."
        )
    return text
