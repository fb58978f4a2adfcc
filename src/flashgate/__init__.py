"""Flashgate - HTTP gateway for Gemini Flash text and media prompts."""

__version__ = "0.1.0"

from flashgate.core.config import GatewayConfig, config

__all__ = [
    "GatewayConfig",
    "config",
]
