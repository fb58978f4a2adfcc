"""Input validation for gateway requests.

Two checks run before any expensive work happens:

- :func:`validate_prompt` for the free-text prompt of ``/generate-text``.
- :func:`validate_mime` for the declared content type of an upload, against
  one of the per-endpoint allow-lists defined here.

Both return a :data:`ValidationOutcome` instead of raising so the caller
decides which error (and which cleanup) a rejection leads to.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any

IMAGE_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
)

DOCUMENT_MIME_TYPES: tuple[str, ...] = (
    "application/pdf",
    "text/plain",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
)

AUDIO_MIME_TYPES: tuple[str, ...] = (
    "audio/mpeg",
    "audio/wav",
    "audio/mp3",
    "audio/x-m4a",
)


@dataclass(frozen=True)
class Accepted:
    """The checked value may proceed."""


@dataclass(frozen=True)
class Rejected:
    """The checked value was refused.

    Attributes:
        reason: Client-facing explanation.
    """

    reason: str


ValidationOutcome = Accepted | Rejected


def validate_prompt(value: Any) -> ValidationOutcome:
    """Check that *value* is a string with at least one non-whitespace character.

    Args:
        value: Raw ``prompt`` value taken from the request body.

    Returns:
        :class:`Accepted`, or :class:`Rejected` for ``None``, non-string
        values and blank strings.
    """
    if not isinstance(value, str) or not value.strip():
        return Rejected("Prompt text is required and must be a non-empty string.")
    return Accepted()


def validate_mime(mime_type: str | None, allowed: Collection[str]) -> ValidationOutcome:
    """Check a declared MIME type against an allow-list.

    Comparison is exact: the client-declared type is trusted as-is and the
    file content is never sniffed.

    Args:
        mime_type: Content type reported for the upload.
        allowed: The endpoint's accepted types.

    Returns:
        :class:`Accepted`, or :class:`Rejected` whose reason names the
        rejected type and every allowed one.
    """
    if mime_type in allowed:
        return Accepted()
    return Rejected(
        f"File type {mime_type or 'unknown'} is not supported. "
        f"Allowed types: {', '.join(allowed)}."
    )
