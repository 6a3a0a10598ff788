"""switchboard/agent_embeddings.py

Semantic fallback router: picks the agent whose ``"name: description"``
embedding is most similar to the user input.

The cached index is a point-in-time snapshot of the registry.  Agents
registered after the index was built are not seen until :meth:`invalidate`
or :meth:`initialize` is called; :meth:`is_stale` reports whether that has
happened.
"""

from __future__ import annotations

import dataclasses
import logging

from switchboard.agent_registry import AgentRegistry
from switchboard.agents.base import Agent
from switchboard.embeddings import EmbeddingService, cosine

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD: float = 0.7
"""Minimum cosine similarity (exclusive) for an embedding match to count."""


@dataclasses.dataclass(slots=True, frozen=True)
class IndexEntry:
    agent: Agent
    vector: list[float]


class AgentEmbeddingIndex:
    """Lazily built cache of one embedding per registered agent."""

    def __init__(self, registry: AgentRegistry, embeddings: EmbeddingService) -> None:
        self._registry = registry
        self._embeddings = embeddings
        self._entries: list[IndexEntry] = []
        self._built_version: int | None = None
        self._provider_model: str | None = None

    @property
    def entries(self) -> list[IndexEntry]:
        return list(self._entries)

    @property
    def provider_model(self) -> str | None:
        """Provider/model the current index was built with."""
        return self._provider_model

    async def initialize(self, provider_model: str | None = None) -> None:
        """Embed every registered agent and replace the cached index wholesale.

        The new index is built off to the side and swapped in with a single
        assignment, so concurrent readers see either the old or the new index.
        """
        provider_model = provider_model or self._embeddings.default_model
        version = self._registry.version
        agents = self._registry.get_all_agents()

        entries: list[IndexEntry] = []
        for agent in agents:
            vector = await self._embeddings.embed(
                f"{agent.name}: {agent.description}", provider_model
            )
            entries.append(IndexEntry(agent=agent, vector=vector))

        self._entries = entries
        self._built_version = version
        self._provider_model = provider_model
        logger.info(
            "[agent_index] built %d entries with %s", len(entries), provider_model
        )

    def invalidate(self) -> None:
        """Drop the cached index; the next :meth:`select` rebuilds it."""
        self._entries = []
        self._built_version = None
        self._provider_model = None

    def is_stale(self) -> bool:
        """True if the registry changed since the index was last built."""
        return self._built_version is None or self._built_version != self._registry.version

    async def select(self, input_text: str, provider_model: str | None = None) -> Agent | None:
        """Return the most similar agent if it clears :data:`SIMILARITY_THRESHOLD`.

        Args:
            input_text: The user's input text.
            provider_model: Provider/model used for the input embedding (and for
                the index if it has to be built).

        Returns:
            The best-scoring agent, or ``None`` if the index is empty or the
            best score is not above the threshold.
        """
        if not self._entries:
            await self.initialize(provider_model)

        input_vector = await self._embeddings.embed(input_text, provider_model)

        best_score = -1.0
        best_agent: Agent | None = None
        for entry in self._entries:
            score = cosine(input_vector, entry.vector)
            if score > best_score:
                best_score = score
                best_agent = entry.agent

        logger.info(
            "[agent_index] best=%s score=%.4f threshold=%.2f",
            best_agent.name if best_agent else None,
            best_score,
            SIMILARITY_THRESHOLD,
        )
        return best_agent if best_score > SIMILARITY_THRESHOLD else None
