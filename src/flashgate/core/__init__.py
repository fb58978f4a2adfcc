"""Core building blocks of the gateway.

- **config**: Environment-based configuration using Pydantic Settings
- **errors**: Error taxonomy mapped to HTTP status codes
- **validation**: Prompt checks and per-endpoint MIME allow-lists
- **staging**: Transient on-disk staging of uploads with guaranteed removal
- **parts** / **encoding**: Provider request parts and base64 file encoding
- **gemini_client**: Async client for the Gemini ``generateContent`` endpoint
"""

from flashgate.core.config import GatewayConfig, config
from flashgate.core.errors import (
    FilesystemError,
    GatewayError,
    InputValidationError,
    ProviderInvocationError,
    UnsupportedMediaError,
)
from flashgate.core.gemini_client import ContentGenerator, GeminiClient

__all__ = [
    "ContentGenerator",
    "FilesystemError",
    "GatewayConfig",
    "GatewayError",
    "GeminiClient",
    "InputValidationError",
    "ProviderInvocationError",
    "UnsupportedMediaError",
    "config",
]
