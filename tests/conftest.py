"""tests/conftest.py

Pytest configuration and shared fixtures for the switchboard test suite.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
from typing import Any, ClassVar

# Third-Party Libraries
import httpx
import pytest
from pydantic import BaseModel

# Local Modules
from switchboard.agent_registry import AgentRegistry
from switchboard.agents.base import Agent
from switchboard.embeddings import parse_provider_model
from switchboard.error_registry import ErrorRegistry
from switchboard.settings import SwitchboardSettings


class EchoInput(BaseModel):
    text: str = ""


class RecordingAgent(Agent):
    """Agent double that records every call and returns a canned output."""

    name: ClassVar[str] = "recording"
    description: ClassVar[str] = "Records its calls."
    input_type: ClassVar[Any] = EchoInput
    output_type: ClassVar[Any] = Any

    def __init__(
        self,
        name: str,
        description: str | None = None,
        input_type: Any = None,
        output: Any = "ok",
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.description = description or f"Handles {name} requests."
        self.input_type = input_type or dict[str, Any]
        self.output = output
        self.error = error
        self.calls: list[Any] = []

    async def execute(self, args: Any) -> Any:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.output


class FakeEmbeddingService:
    """Deterministic embedding service keyed by text (or by text before ``:``)."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        default_model: str = "openai:test-embedding",
    ) -> None:
        self.vectors = vectors or {}
        self.default_model = default_model
        self.calls: list[tuple[str, str]] = []

    async def embed(self, text: str, provider_model: str | None = None) -> list[float]:
        provider_model = provider_model or self.default_model
        parse_provider_model(provider_model)
        self.calls.append((text, provider_model))
        vector = self.vectors.get(text) or self.vectors.get(text.split(":", 1)[0])
        return list(vector) if vector else [0.0, 0.0, 0.0]


@pytest.fixture
def settings(tmp_path) -> SwitchboardSettings:
    """Settings isolated from the environment and any .env file.

    Returns:
        SwitchboardSettings with test credentials.
    """
    return SwitchboardSettings(
        _env_file=None,
        openai_api_key="sk-test",
        perplexity_api_key="pplx-test",
        fs_root=str(tmp_path),
        error_log_max_entries=50,
    )


@pytest.fixture
def registry() -> AgentRegistry:
    return AgentRegistry()


@pytest.fixture
def error_registry() -> ErrorRegistry:
    return ErrorRegistry()


@pytest.fixture
def make_agent() -> Callable[..., RecordingAgent]:
    """Factory for recording agents.

    Returns:
        Callable building a RecordingAgent from a name and keyword options.
    """

    def _make(name: str, **kwargs: Any) -> RecordingAgent:
        return RecordingAgent(name, **kwargs)

    return _make


@pytest.fixture
def make_embeddings() -> Callable[..., FakeEmbeddingService]:
    """Factory for deterministic embedding services.

    Returns:
        Callable building a FakeEmbeddingService from a text -> vector map.
    """

    def _make(vectors: dict[str, list[float]] | None = None, **kwargs: Any) -> FakeEmbeddingService:
        return FakeEmbeddingService(vectors, **kwargs)

    return _make


@pytest.fixture
def http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for AsyncClients whose requests are answered by ``handler``.

    Returns:
        Callable building an httpx.AsyncClient over an httpx.MockTransport.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def no_network() -> Callable[[httpx.Request], httpx.Response]:
    """Transport handler that fails the test if any request is sent."""

    def _handler(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"Unexpected HTTP request: {request.method} {request.url}")

    return _handler
