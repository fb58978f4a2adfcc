"""Tests for flashgate.core.errors and flashgate.api.models.

Tests cover:
- Status codes of every error class.
- JSON body shape produced by ``to_response()``.
- The default tip on provider errors.
- Pydantic models for request and response bodies.
"""

from __future__ import annotations

import pytest

from flashgate.api.models import ErrorResponse, GenerateTextRequest, GenerationResponse
from flashgate.core.errors import (
    DEFAULT_PROVIDER_TIP,
    FilesystemError,
    GatewayError,
    InputValidationError,
    ProviderInvocationError,
    UnsupportedMediaError,
)


class TestErrorTaxonomy:
    """Verify status codes and response bodies."""

    @pytest.mark.parametrize(
        ("cls", "status"),
        [
            (InputValidationError, 400),
            (UnsupportedMediaError, 400),
            (ProviderInvocationError, 500),
            (FilesystemError, 500),
        ],
    )
    def test_status_codes(self, cls, status):
        error = cls("boom")
        assert isinstance(error, GatewayError)
        assert error.status_code == status

    def test_response_omits_unset_fields(self):
        assert InputValidationError("Prompt required.").to_response() == {"error": "Prompt required."}

    def test_response_includes_details_and_tip(self):
        error = GatewayError("Failed.", details="socket closed", tip="Try later.")
        assert error.to_response() == {
            "error": "Failed.",
            "details": "socket closed",
            "tip": "Try later.",
        }

    def test_provider_error_has_default_tip(self):
        error = ProviderInvocationError("Failed.")
        assert error.tip == DEFAULT_PROVIDER_TIP
        assert str(error) == "Failed."

    def test_error_body_matches_model(self):
        body = ProviderInvocationError("Failed.", details="x").to_response()
        assert ErrorResponse(**body).details == "x"


class TestApiModels:
    """Verify request/response models."""

    def test_generate_text_request_defaults_to_none(self):
        assert GenerateTextRequest().prompt is None

    def test_generate_text_request_keeps_raw_value(self):
        """Non-string prompts are passed through for the handler to reject."""
        assert GenerateTextRequest(prompt=123).prompt == 123

    def test_generation_response(self):
        assert GenerationResponse(output="Hi there").model_dump() == {"output": "Hi there"}
