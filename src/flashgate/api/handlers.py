"""Request handlers for the generation endpoints.

Each handler runs one request through the same pipeline::

    Received -> Validated -> (Staged -> Encoded)? -> Invoked -> Responded

Any stage can fail by raising a :class:`~flashgate.core.errors.GatewayError`
subclass; the exception handler in :mod:`flashgate.api.main` turns it into
the JSON error response.  Handlers receive their model client (and, for
media endpoints, their stager) through the constructor, so nothing here
touches a global client.

Media endpoints share :class:`MediaHandler` and differ only in their
:class:`MediaEndpoint` definition (form field, allow-list, default prompt
and messages).  The staged upload lives inside ``FileStager.stage()``, which
removes it on every exit path: MIME rejection, provider failure or success.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import UploadFile

from flashgate.api.models import GenerationResponse
from flashgate.core.encoding import encode_file
from flashgate.core.errors import (
    DEFAULT_PROVIDER_TIP,
    FilesystemError,
    InputValidationError,
    ProviderInvocationError,
    UnsupportedMediaError,
)
from flashgate.core.gemini_client import ContentGenerator
from flashgate.core.parts import GenerativeRequestPart, ModelInvocationResult, TextPart
from flashgate.core.staging import FileStager
from flashgate.core.validation import (
    AUDIO_MIME_TYPES,
    DOCUMENT_MIME_TYPES,
    IMAGE_MIME_TYPES,
    Rejected,
    validate_mime,
    validate_prompt,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaEndpoint:
    """Static description of a file-accepting endpoint.

    Attributes:
        field: Multipart form field carrying the file.
        allowed_mime_types: Accepted content types.
        default_prompt: Instruction used when the request has no ``prompt``.
        missing_file_message: 400 message when no file was sent.
        failure_message: 500 headline when the model call fails.
        failure_tip: 500 hint when the model call fails.
    """

    field: str
    allowed_mime_types: tuple[str, ...]
    default_prompt: str
    missing_file_message: str
    failure_message: str
    failure_tip: str


IMAGE_ENDPOINT = MediaEndpoint(
    field="image",
    allowed_mime_types=IMAGE_MIME_TYPES,
    default_prompt="Describe the image in detail.",
    missing_file_message="An image file is required.",
    failure_message="Failed to generate a description from the image.",
    failure_tip=(
        "Make sure the uploaded file is a valid image and your Gemini API key "
        "works. Check the server logs for more detail."
    ),
)

DOCUMENT_ENDPOINT = MediaEndpoint(
    field="document",
    allowed_mime_types=DOCUMENT_MIME_TYPES,
    default_prompt="Analyze this document and summarize its key points:",
    missing_file_message="A document file is required.",
    failure_message="Failed to analyze the document.",
    failure_tip=(
        "Make sure the document is not corrupted or password protected and your "
        "Gemini API key works. Check the server logs for more detail."
    ),
)

AUDIO_ENDPOINT = MediaEndpoint(
    field="audio",
    allowed_mime_types=AUDIO_MIME_TYPES,
    default_prompt="Transcribe the following audio:",
    missing_file_message="An audio file is required.",
    failure_message="Failed to process the audio.",
    failure_tip=(
        "Make sure the file really is audio in a supported format and within "
        "Gemini's duration limits. Check the server logs for more detail."
    ),
)


async def _invoke(
    client: ContentGenerator,
    parts: Sequence[GenerativeRequestPart],
    failure_message: str,
    failure_tip: str,
) -> ModelInvocationResult:
    """Call the model, converting any failure into a ProviderInvocationError."""
    try:
        return await client.generate(parts)
    except Exception as e:
        logger.error(f"{failure_message} {e}", exc_info=True)
        raise ProviderInvocationError(failure_message, details=str(e), tip=failure_tip) from e


class TextHandler:
    """Handles ``POST /generate-text``."""

    def __init__(self, client: ContentGenerator) -> None:
        self.client = client

    async def handle(self, prompt: Any) -> GenerationResponse:
        """Generate text for a plain prompt.

        Args:
            prompt: Raw ``prompt`` value from the request body.

        Returns:
            The model output.

        Raises:
            InputValidationError: If the prompt is missing, not a string or blank.
            ProviderInvocationError: If the model call fails.
        """
        outcome = validate_prompt(prompt)
        if isinstance(outcome, Rejected):
            raise InputValidationError(outcome.reason)

        logger.info(f"Received text prompt: {prompt!r}")
        result = await _invoke(
            self.client,
            [TextPart(text=prompt)],
            "Failed to generate text from Gemini.",
            DEFAULT_PROVIDER_TIP,
        )
        return GenerationResponse(output=result.output_text)


class MediaHandler:
    """Handles one of the file-accepting generation endpoints.

    Args:
        client: Model client used for generation.
        stager: Stager that owns the upload's on-disk lifetime.
        endpoint: Endpoint definition (allow-list, defaults, messages).
    """

    def __init__(
        self,
        client: ContentGenerator,
        stager: FileStager,
        endpoint: MediaEndpoint,
    ) -> None:
        self.client = client
        self.stager = stager
        self.endpoint = endpoint

    async def handle(self, upload: UploadFile | None, prompt: str | None = None) -> GenerationResponse:
        """Generate text for an uploaded file plus an optional prompt.

        Args:
            upload: The multipart file, or ``None`` if the field was absent.
            prompt: Custom instruction.  Empty or absent falls back to the
                endpoint default.

        Returns:
            The model output.

        Raises:
            InputValidationError: If no file was uploaded.
            UnsupportedMediaError: If the file's MIME type is not allowed.
            FilesystemError: If the file could not be staged or read.
            ProviderInvocationError: If the model call fails.
        """
        endpoint = self.endpoint
        if upload is None or not upload.filename:
            raise InputValidationError(endpoint.missing_file_message)

        async with self.stager.stage(upload) as staged:
            outcome = validate_mime(staged.mime_type, endpoint.allowed_mime_types)
            if isinstance(outcome, Rejected):
                logger.warning(
                    f"Rejected {endpoint.field} upload {staged.original_name!r}: {outcome.reason}"
                )
                raise UnsupportedMediaError(outcome.reason)

            instruction = prompt or endpoint.default_prompt
            logger.info(
                f"Received {endpoint.field} file: {staged.original_name} "
                f"({staged.mime_type}, {staged.size_bytes} bytes) with prompt: {instruction!r}"
            )

            try:
                file_part = await encode_file(staged.path, staged.mime_type)
            except OSError as e:
                logger.error(f"Failed to read staged file {staged.path}: {e}", exc_info=True)
                raise FilesystemError("Failed to read the uploaded file.", details=str(e)) from e

            result = await _invoke(
                self.client,
                [TextPart(text=instruction), file_part],
                endpoint.failure_message,
                endpoint.failure_tip,
            )

        return GenerationResponse(output=result.output_text)
