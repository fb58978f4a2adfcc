"""Shared pytest fixtures for Flashgate tests."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from flashgate.api.main import create_app
from flashgate.core.config import GatewayConfig
from flashgate.core.parts import GenerativeRequestPart, ModelInvocationResult


class FakeGenerator:
    """In-memory stand-in for the Gemini client.

    Records every list of parts it is asked to generate from, together with
    the files present in the staging directory at call time, and either
    returns ``reply`` or raises ``error``.
    """

    def __init__(self, staging_dir: Path | None = None, reply: str = "Hi there") -> None:
        self.staging_dir = staging_dir
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[list[GenerativeRequestPart]] = []
        self.staged_during_call: list[list[Path]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(self, parts: Sequence[GenerativeRequestPart]) -> ModelInvocationResult:
        self.calls.append(list(parts))
        if self.staging_dir is not None:
            self.staged_during_call.append(sorted(self.staging_dir.iterdir()))
        if self.error is not None:
            raise self.error
        return ModelInvocationResult(output_text=self.reply)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GatewayConfig:
    """Create a test configuration with a temporary staging directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        GatewayConfig instance for testing
    """
    return GatewayConfig(
        _env_file=None,
        gemini_api_key="test-key",
        staging_dir=str(temp_dir / "uploads"),
        port=3000,
    )


@pytest.fixture
def make_generator() -> type[FakeGenerator]:
    """Expose the fake client class to test modules."""
    return FakeGenerator


@pytest.fixture
def fake_client(test_config: GatewayConfig) -> FakeGenerator:
    """Fake model client that watches the test staging directory."""
    return FakeGenerator(staging_dir=test_config.staging_dir)


@pytest.fixture
def test_client(test_config: GatewayConfig, fake_client: FakeGenerator) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the fake model client.

    Yields:
        TestClient with the application lifespan running
    """
    app = create_app(test_config, client=fake_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def staged_files(test_config: GatewayConfig):
    """Return a callable listing the files currently in the staging directory."""

    def _list() -> list[Path]:
        return sorted(test_config.staging_dir.iterdir())

    return _list
