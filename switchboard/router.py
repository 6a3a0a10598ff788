"""
switchboard/router.py

Turns one user utterance into exactly one routing decision.

Pipeline:
  1. Small-talk intents (greeting, thanks, farewell, capabilities) are
     answered directly with a ``Respond`` decision.
  2. Keyword matching against the registry picks a specialist agent,
     falling back to the conversational agent when it is registered.
  3. If nothing matched and an embedding model was requested, the
     embedding index picks the most similar agent above the threshold.
  4. Arguments are extracted from the raw text for the chosen agent.  When
     a required argument cannot be extracted the router asks a ``Clarify``
     question instead of delegating.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any, Final

from switchboard.agent_embeddings import AgentEmbeddingIndex
from switchboard.agent_registry import AgentRegistry
from switchboard.agents.base import Agent
from switchboard.error_registry import ErrorRegistry
from switchboard.errors import UnknownEmbeddingProviderError
from switchboard.intent import CANNED_REPLIES, Intent, describe_capabilities, detect_intent
from switchboard.models import (
    ChatTurn,
    Clarify,
    Coordinates,
    Delegate,
    OrchestratorDecision,
    Respond,
)

logger = logging.getLogger(__name__)

ORCHESTRATOR: Final[str] = "orchestrator"

WEATHER_CLARIFICATION: Final[str] = "Which location would you like the weather for?"
NOTE_CONTENT_CLARIFICATION: Final[str] = "What should the note say?"
FALLBACK_CLARIFICATION: Final[str] = (
    "I'm not sure how to help with that. "
    "Could you rephrase or specify what you need help with?"
)

# ---------------------------------------------------------------------------
# Argument extraction patterns
# ---------------------------------------------------------------------------

_WEATHER_LOCATION_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"weather\s+in\s+(.+)", re.IGNORECASE),
    re.compile(r"forecast\s+for\s+(.+)", re.IGNORECASE),
    re.compile(r"temperature\s+in\s+(.+)", re.IGNORECASE),
)

_FILESYSTEM_PATH_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^\s*ls\s+(.+)", re.IGNORECASE),
    re.compile(r"list\s+files\s+in\s+(.+)", re.IGNORECASE),
    re.compile(r"show\s+files\s+in\s+(.+)", re.IGNORECASE),
    re.compile(r"list\s+directory\s+(.+)", re.IGNORECASE),
    re.compile(r"list\s+folder\s+(.+)", re.IGNORECASE),
    re.compile(r"show\s+folder\s+(.+)", re.IGNORECASE),
)

# "create a note titled Groceries: milk, eggs" / "add note: call mum"
_NOTE_CREATE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:please\s+)?(?:create|add|make|take|write)\s+(?:a\s+|an\s+)?(?:new\s+)?note"
    r"(?:\s+(?:titled|called|named)\s+(?P<title>.+?))?"
    r"\s*(?::\s*(?P<content>.*))?$",
    re.IGNORECASE | re.DOTALL,
)

# "add note call mum" / "create a note about groceries"
_NOTE_CREATE_BARE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:please\s+)?(?:create|add|make|take|write)\s+(?:a\s+|an\s+)?(?:new\s+)?note\s+"
    r"(?!(?:titled|called|named)\b)(?:(?:about|saying|that|to)\s+)?(?P<content>.+)$",
    re.IGNORECASE | re.DOTALL,
)

_TRAILING_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r"[\s?!.,;:]+$")

DEFAULT_PATH: Final[str] = "."


def _first_group(patterns: Sequence[re.Pattern[str]], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_weather_args(
    text: str, coords: Coordinates | None = None
) -> dict[str, Any] | None:
    """Weather arguments from coordinates or a ``weather in X`` phrase.

    Returns ``None`` when no location can be found.
    """
    if coords is not None:
        return {"latitude": coords.latitude, "longitude": coords.longitude}

    location = _first_group(_WEATHER_LOCATION_PATTERNS, text)
    if location is None:
        return None
    location = _TRAILING_PUNCTUATION.sub("", location).strip()
    return {"location": location} if location else None


def extract_filesystem_args(text: str) -> dict[str, Any]:
    path = _first_group(_FILESYSTEM_PATH_PATTERNS, text)
    path = path.strip() if path else ""
    return {"action": "list", "path": path or DEFAULT_PATH}


def extract_notes_args(text: str) -> dict[str, Any] | None:
    """Notes arguments; ``None`` for a create request that has no content."""
    match = _NOTE_CREATE_PATTERN.match(text) or _NOTE_CREATE_BARE_PATTERN.match(text)
    if not match:
        return {"action": "list"}

    content = (match.group("content") or "").strip()
    if not content:
        return None

    args: dict[str, Any] = {"action": "create", "content": content}
    title = (match.groupdict().get("title") or "").strip()
    if title:
        args["title"] = title
    return args


def _history(conversation: Sequence[ChatTurn | dict[str, Any]] | None) -> list[dict[str, Any]]:
    if not conversation:
        return []
    return [
        turn.model_dump() if isinstance(turn, ChatTurn) else dict(turn)
        for turn in conversation
    ]


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class Router:
    """Decides how each user utterance is handled."""

    def __init__(
        self,
        registry: AgentRegistry,
        embedding_index: AgentEmbeddingIndex,
        error_registry: ErrorRegistry,
    ) -> None:
        self._registry = registry
        self._embedding_index = embedding_index
        self._errors = error_registry

    async def route_user_input(
        self,
        input: str,
        embedding_model: str | None = None,
        conversation: Sequence[ChatTurn | dict[str, Any]] | None = None,
        coords: Coordinates | None = None,
    ) -> OrchestratorDecision:
        """Route one user utterance.

        Args:
            input: Raw user text.
            embedding_model: ``"<provider>:<model>"``.  When given, enables the
                embedding-similarity pass after keyword matching fails.
            conversation: Prior turns, passed through to the conversational
                agent as context.
            coords: Client-supplied location, preferred over a place name for
                weather requests.

        Returns:
            Exactly one of ``Delegate``, ``Respond`` or ``Clarify``.

        Raises:
            UnknownEmbeddingProviderError: ``embedding_model`` names an
                unsupported provider. Any other embedding failure is logged
                and treated as no match.
        """
        intent = detect_intent(input)
        if intent is Intent.CAPABILITIES:
            agents = [(a.name, a.description) for a in self._registry.get_all_agents()]
            return Respond(describe_capabilities(agents))
        if intent is not None:
            return Respond(CANNED_REPLIES[intent])

        agent = self._registry.find_agent_for_input(input)
        if agent is None and embedding_model:
            agent = await self._select_by_embedding(input, embedding_model)

        if agent is None:
            logger.info("No agent matched input; asking for clarification")
            return Clarify(FALLBACK_CLARIFICATION)

        return self._delegate(agent, input, conversation, coords)

    async def _select_by_embedding(self, input: str, embedding_model: str) -> Agent | None:
        try:
            return await self._embedding_index.select(input, embedding_model)
        except UnknownEmbeddingProviderError:
            raise
        except Exception as exc:
            self._errors.add_error(ORCHESTRATOR, exc)
            logger.warning("Embedding selection failed, treating as no match: %s", exc)
            return None

    def _delegate(
        self,
        agent: Agent,
        input: str,
        conversation: Sequence[ChatTurn | dict[str, Any]] | None,
        coords: Coordinates | None,
    ) -> OrchestratorDecision:
        name = agent.name

        if name == "weather":
            args = extract_weather_args(input, coords)
            if args is None:
                return Clarify(WEATHER_CLARIFICATION)
        elif name == "research":
            args = {"query": input}
        elif name == "conversational":
            args = {"text": input, "context": _history(conversation)}
        elif name == "filesystem":
            args = extract_filesystem_args(input)
        elif name == "notes":
            args = extract_notes_args(input)
            if args is None:
                return Clarify(NOTE_CONTENT_CLARIFICATION)
        else:
            logger.warning("No argument extractor for agent '%s'; passing raw input", name)
            args = {"input": input}

        logger.info("Delegating to '%s' with args=%s", name, args)
        return Delegate(agent=name, args=args)
