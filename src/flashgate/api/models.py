"""Pydantic request and response models for the gateway API.

Models
------
GenerateTextRequest
    Payload for ``POST /generate-text``.
GenerationResponse
    Success body shared by every generation endpoint.
ErrorResponse
    Failure body shared by every endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class GenerateTextRequest(BaseModel):
    """Request body for the ``POST /generate-text`` endpoint.

    ``prompt`` is deliberately typed loosely: presence, type and blankness
    are checked by :func:`~flashgate.core.validation.validate_prompt` so
    every bad prompt gets the same 400 response.

    Attributes:
        prompt: Text prompt forwarded to the model.
    """

    prompt: Any = Field(
        default=None,
        description="Non-empty text prompt.",
    )


class GenerationResponse(BaseModel):
    """Successful generation result.

    Attributes:
        output: Text produced by the model.
    """

    output: str = Field(
        ...,
        description="Text produced by the model.",
    )


class ErrorResponse(BaseModel):
    """Error body returned with every 4xx/5xx gateway response.

    Attributes:
        error: Short description of what failed.
        details: Underlying error message, when there is one.
        tip: Actionable hint for the caller.
    """

    error: str
    details: str | None = None
    tip: str | None = None
