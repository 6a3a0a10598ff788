"""tests/test_router.py

Unit tests for Router.route_user_input: small-talk replies, keyword and
embedding routing, argument extraction, and clarification fallbacks.
"""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from switchboard.agent_embeddings import AgentEmbeddingIndex
from switchboard.agent_registry import AgentRegistry
from switchboard.embeddings import EmbeddingService
from switchboard.error_registry import ErrorRegistry
from switchboard.errors import UnknownEmbeddingProviderError
from switchboard.models import ChatTurn, Clarify, Coordinates, Delegate, Respond
from switchboard.router import (
    FALLBACK_CLARIFICATION,
    NOTE_CONTENT_CLARIFICATION,
    WEATHER_CLARIFICATION,
    Router,
    extract_filesystem_args,
    extract_notes_args,
    extract_weather_args,
)
from switchboard.settings import SwitchboardSettings

ALL_AGENTS = ("conversational", "weather", "research", "filesystem", "notes")


@pytest.fixture
def embeddings(make_embeddings):
    return make_embeddings()


@pytest.fixture
def router(registry: AgentRegistry, error_registry: ErrorRegistry, embeddings) -> Router:
    return Router(registry, AgentEmbeddingIndex(registry, embeddings), error_registry)


@pytest.fixture
def full_router(router: Router, registry: AgentRegistry, make_agent) -> Router:
    for name in ALL_AGENTS:
        registry.register(make_agent(name))
    return router


class TestSmallTalk:
    """Test suite for intent short-circuits."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["Hi there", "hello", "Good evening!"])
    async def test_greeting(self, full_router: Router, text: str) -> None:
        """Test greetings get the canned greeting."""
        decision = await full_router.route_user_input(text)

        assert decision == Respond("Hi there! How can I help you today?")

    @pytest.mark.asyncio
    async def test_thanks(self, full_router: Router) -> None:
        """Test thanks gets the canned acknowledgement."""
        decision = await full_router.route_user_input("Thanks a lot")

        assert isinstance(decision, Respond)
        assert "welcome" in decision.message

    @pytest.mark.asyncio
    async def test_farewell(self, full_router: Router) -> None:
        """Test farewells get the canned goodbye."""
        decision = await full_router.route_user_input("bye")

        assert isinstance(decision, Respond)
        assert decision.message.startswith("Goodbye")

    @pytest.mark.asyncio
    async def test_capabilities_lists_registered_agents(self, full_router: Router) -> None:
        """Test the capabilities reply names every agent in sorted order."""
        decision = await full_router.route_user_input("What can you do?")

        assert isinstance(decision, Respond)
        positions = [decision.message.index(f"**{name}**") for name in sorted(ALL_AGENTS)]
        assert positions == sorted(positions)

    @pytest.mark.asyncio
    async def test_small_talk_never_reaches_agents(
        self, full_router: Router, embeddings
    ) -> None:
        """Test intents are answered before keyword or embedding routing."""
        await full_router.route_user_input("hello", embedding_model="openai:test")

        assert embeddings.calls == []


class TestWeatherRouting:
    """Test suite for weather delegation and location extraction."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("text", "location"),
        [
            ("What's the weather in Berlin?", "Berlin"),
            ("weather in Paris, France", "Paris, France"),
            ("What is the weather in New York?!", "New York"),
            ("Give me the forecast for Tokyo", "Tokyo"),
            ("temperature in Oslo.", "Oslo"),
            ("WEATHER IN San Francisco", "San Francisco"),
        ],
    )
    async def test_location_extracted(self, full_router: Router, text: str, location: str) -> None:
        """Test the location keeps its casing and loses trailing punctuation."""
        decision = await full_router.route_user_input(text)

        assert decision == Delegate(agent="weather", args={"location": location})

    @pytest.mark.asyncio
    async def test_coordinates_preferred(self, full_router: Router) -> None:
        """Test client coordinates replace any place name."""
        decision = await full_router.route_user_input(
            "what's the weather in Berlin?",
            coords=Coordinates(latitude=52.52, longitude=13.41),
        )

        assert decision == Delegate(agent="weather", args={"latitude": 52.52, "longitude": 13.41})

    @pytest.mark.asyncio
    async def test_missing_location_asks(self, full_router: Router) -> None:
        """Test a weather request without a place asks which location."""
        decision = await full_router.route_user_input("How's the weather looking?")

        assert decision == Clarify(WEATHER_CLARIFICATION)

    def test_blank_location_is_missing(self) -> None:
        """Test punctuation-only locations do not count."""
        assert extract_weather_args("weather in ?!") is None


class TestOtherAgents:
    """Test suite for research, conversational, filesystem and notes delegation."""

    @pytest.mark.asyncio
    async def test_research_gets_raw_query(self, full_router: Router) -> None:
        """Test research receives the untouched input."""
        decision = await full_router.route_user_input("Who discovered penicillin?")

        assert decision == Delegate(agent="research", args={"query": "Who discovered penicillin?"})

    @pytest.mark.asyncio
    async def test_conversational_gets_history(self, full_router: Router) -> None:
        """Test the conversation is forwarded as context."""
        history = [
            ChatTurn(role="user", content="Hello"),
            {"role": "assistant", "content": "Hi!"},
        ]

        decision = await full_router.route_user_input("Tell me a joke", conversation=history)

        assert decision == Delegate(
            agent="conversational",
            args={
                "text": "Tell me a joke",
                "context": [
                    {"role": "user", "content": "Hello"},
                    {"role": "assistant", "content": "Hi!"},
                ],
            },
        )

    @pytest.mark.asyncio
    async def test_conversational_without_history(self, full_router: Router) -> None:
        """Test context defaults to an empty list."""
        decision = await full_router.route_user_input("Tell me a joke")

        assert decision == Delegate(
            agent="conversational", args={"text": "Tell me a joke", "context": []}
        )

    @pytest.mark.parametrize(
        ("text", "path"),
        [
            ("ls docs", "docs"),
            ("ls  src/app ", "src/app"),
            ("list files in /tmp", "/tmp"),
            ("show files in projects", "projects"),
            ("list directory notes_archive", "notes_archive"),
            ("list folder Downloads", "Downloads"),
            ("show folder music", "music"),
            ("show directory", "."),
            ("list files", "."),
        ],
    )
    def test_filesystem_paths(self, text: str, path: str) -> None:
        """Test path extraction with '.' as the default."""
        assert extract_filesystem_args(text) == {"action": "list", "path": path}

    @pytest.mark.asyncio
    async def test_filesystem_delegation(self, full_router: Router) -> None:
        """Test filesystem requests are delegated with a list action."""
        decision = await full_router.route_user_input("ls docs")

        assert decision == Delegate(agent="filesystem", args={"action": "list", "path": "docs"})

    @pytest.mark.parametrize(
        ("text", "args"),
        [
            ("show my notes", {"action": "list"}),
            ("list notes", {"action": "list"}),
            ("add note: call the plumber", {"action": "create", "content": "call the plumber"}),
            (
                "Create a note titled Groceries: milk, eggs",
                {"action": "create", "title": "Groceries", "content": "milk, eggs"},
            ),
            ("Take a note: Buy Milk", {"action": "create", "content": "Buy Milk"}),
            ("add note call mum", {"action": "create", "content": "call mum"}),
            ("create a note about groceries", {"action": "create", "content": "groceries"}),
            ("Create note buy milk", {"action": "create", "content": "buy milk"}),
        ],
    )
    def test_notes_args(self, text: str, args: dict) -> None:
        """Test create requests are parsed and everything else lists."""
        assert extract_notes_args(text) == args

    @pytest.mark.parametrize("text", ["create a note", "add note:", "make a note titled Ideas"])
    def test_notes_create_without_content(self, text: str) -> None:
        """Test create requests with no content cannot be extracted."""
        assert extract_notes_args(text) is None

    @pytest.mark.asyncio
    async def test_notes_create_without_content_asks(self, full_router: Router) -> None:
        """Test the router asks what the note should say."""
        decision = await full_router.route_user_input("create a note")

        assert decision == Clarify(NOTE_CONTENT_CLARIFICATION)

    @pytest.mark.asyncio
    async def test_notes_create_delegation(self, full_router: Router) -> None:
        """Test a full create request is delegated."""
        decision = await full_router.route_user_input("add note: call the plumber")

        assert decision == Delegate(
            agent="notes", args={"action": "create", "content": "call the plumber"}
        )

    @pytest.mark.asyncio
    async def test_notes_create_without_colon_delegates_create(self, full_router: Router) -> None:
        """Test a create verb without a colon still creates rather than lists."""
        decision = await full_router.route_user_input("Create note buy milk")

        assert decision == Delegate(agent="notes", args={"action": "create", "content": "buy milk"})


class TestFallbacks:
    """Test suite for unmatched input and the embedding pass."""

    @pytest.mark.asyncio
    async def test_unrecognized_without_conversational_clarifies(
        self, router: Router, registry: AgentRegistry, make_agent
    ) -> None:
        """Test input no agent handles yields a clarification."""
        registry.register(make_agent("weather"))

        decision = await router.route_user_input("banana?")

        assert decision == Clarify(FALLBACK_CLARIFICATION)

    @pytest.mark.asyncio
    async def test_embedding_pass_selects_agent(
        self, registry: AgentRegistry, error_registry: ErrorRegistry, make_agent, make_embeddings
    ) -> None:
        """Test the embedding fallback picks an agent keywords missed."""
        registry.register(make_agent("research"))
        service = make_embeddings({"research": [1.0, 0.0], "banana?": [0.9, 0.1]})
        router = Router(registry, AgentEmbeddingIndex(registry, service), error_registry)

        decision = await router.route_user_input("banana?", embedding_model="ollama:mxbai-embed-large")

        assert decision == Delegate(agent="research", args={"query": "banana?"})

    @pytest.mark.asyncio
    async def test_embedding_pass_skipped_without_model(
        self, router: Router, registry: AgentRegistry, make_agent, embeddings
    ) -> None:
        """Test no embedding calls happen unless a model is requested."""
        registry.register(make_agent("research"))

        await router.route_user_input("banana?")

        assert embeddings.calls == []

    @pytest.mark.asyncio
    async def test_embedding_pass_skipped_on_keyword_match(
        self, full_router: Router, embeddings
    ) -> None:
        """Test keyword routing wins without consulting embeddings."""
        await full_router.route_user_input("ls docs", embedding_model="openai:test")

        assert embeddings.calls == []

    @pytest.mark.asyncio
    async def test_embedding_failure_is_logged_and_clarifies(
        self, registry: AgentRegistry, error_registry: ErrorRegistry, make_agent, make_embeddings
    ) -> None:
        """Test provider failures are recorded under 'orchestrator' and treated as no match."""
        registry.register(make_agent("research"))
        service = make_embeddings()
        service.embed = AsyncMock(side_effect=ConnectionError("ollama unreachable"))
        router = Router(registry, AgentEmbeddingIndex(registry, service), error_registry)

        decision = await router.route_user_input("banana?", embedding_model="ollama:mxbai-embed-large")

        assert decision == Clarify(FALLBACK_CLARIFICATION)
        [entry] = error_registry.get_errors()
        assert entry.agent == "orchestrator"
        assert isinstance(entry.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_unknown_embedding_provider_raises(
        self, registry: AgentRegistry, error_registry: ErrorRegistry, make_agent
    ) -> None:
        """Test an unsupported provider prefix is an input error, not a clarification."""
        registry.register(make_agent("research"))
        service = EmbeddingService(SwitchboardSettings(_env_file=None))
        router = Router(registry, AgentEmbeddingIndex(registry, service), error_registry)

        with pytest.raises(UnknownEmbeddingProviderError):
            await router.route_user_input("banana?", embedding_model="bogus:model")

        assert error_registry.get_errors() == []

    @pytest.mark.asyncio
    async def test_unknown_agent_gets_raw_input(
        self,
        registry: AgentRegistry,
        error_registry: ErrorRegistry,
        make_agent,
        make_embeddings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test agents without an extractor receive {'input': text} and a warning is logged."""
        registry.register(make_agent("translator"))
        service = make_embeddings({"translator": [1.0], "bonjour le monde": [1.0]})
        router = Router(registry, AgentEmbeddingIndex(registry, service), error_registry)

        with caplog.at_level(logging.WARNING, logger="switchboard.router"):
            decision = await router.route_user_input(
                "bonjour le monde", embedding_model="openai:test"
            )

        assert decision == Delegate(agent="translator", args={"input": "bonjour le monde"})
        assert "No argument extractor" in caplog.text
