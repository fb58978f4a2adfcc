"""Error taxonomy for the gateway.

Every failure a request can hit is expressed as a :class:`GatewayError`
subclass.  Handlers raise these and a single exception handler registered in
:mod:`flashgate.api.main` renders them as ``{error, details?, tip?}`` JSON
with the matching status code.

========================  ======  ==========================================
Exception                 Status  Raised when
========================  ======  ==========================================
InputValidationError      400     Required field missing, empty or mistyped
UnsupportedMediaError     400     Upload MIME type outside the allow-list
ProviderInvocationError   500     Network, auth, quota or malformed response
FilesystemError           500     Upload could not be staged on disk
========================  ======  ==========================================
"""

from __future__ import annotations

DEFAULT_PROVIDER_TIP = (
    "Make sure your Gemini API key is valid and the Gemini service is not "
    "experiencing an outage. Check the server logs for more detail."
)


class GatewayError(Exception):
    """Base class for errors that map directly to an HTTP response.

    Attributes:
        status_code: HTTP status returned to the client.
        error: Short, client-facing headline.
        details: Optional underlying message.
        tip: Optional actionable hint.
    """

    status_code: int = 500

    def __init__(
        self,
        error: str,
        *,
        details: str | None = None,
        tip: str | None = None,
    ) -> None:
        super().__init__(error)
        self.error = error
        self.details = details
        self.tip = tip

    def to_response(self) -> dict[str, str]:
        """Return the JSON error body, omitting unset fields."""
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        if self.tip is not None:
            body["tip"] = self.tip
        return body


class InputValidationError(GatewayError):
    """A required request field is missing, empty or of the wrong type."""

    status_code = 400


class UnsupportedMediaError(GatewayError):
    """The uploaded file's MIME type is not accepted by the endpoint."""

    status_code = 400


class ProviderInvocationError(GatewayError):
    """The model provider could not produce a usable answer."""

    status_code = 500

    def __init__(
        self,
        error: str,
        *,
        details: str | None = None,
        tip: str | None = DEFAULT_PROVIDER_TIP,
    ) -> None:
        super().__init__(error, details=details, tip=tip)


class FilesystemError(GatewayError):
    """An upload could not be written to the staging directory."""

    status_code = 500
