"""
switchboard/wiring.py

Builds one isolated set of components: registry, error log, embedding
index, router and dispatcher.  Each ``Switchboard`` owns its own state, so
tests and multiple app instances never share registries.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable

import httpx

from switchboard.agent_embeddings import AgentEmbeddingIndex
from switchboard.agent_registry import AgentRegistry
from switchboard.agents import Agent, build_default_agents
from switchboard.dispatcher import Dispatcher
from switchboard.embeddings import EmbeddingService
from switchboard.error_registry import ErrorRegistry
from switchboard.router import Router
from switchboard.settings import SwitchboardSettings

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class Switchboard:
    """Context object holding every wired component."""

    settings: SwitchboardSettings
    http_client: httpx.AsyncClient
    registry: AgentRegistry
    errors: ErrorRegistry
    embeddings: EmbeddingService
    embedding_index: AgentEmbeddingIndex
    router: Router
    dispatcher: Dispatcher

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        await self.http_client.aclose()


def build_switchboard(
    settings: SwitchboardSettings | None = None,
    client: httpx.AsyncClient | None = None,
    agents: Iterable[Agent] | None = None,
    embeddings: EmbeddingService | None = None,
) -> Switchboard:
    """Wire a complete switchboard.

    Args:
        settings: Configuration; loaded from the environment when omitted.
        client: Shared HTTP client for agents; one using
            ``settings.http_timeout`` is created when omitted.
        agents: Agents to register.  Defaults to the five built-in agents.
        embeddings: Embedding service; built from ``settings`` when omitted.

    Returns:
        A ready-to-use :class:`Switchboard`.
    """
    settings = settings or SwitchboardSettings()
    client = client or httpx.AsyncClient(timeout=settings.http_timeout)

    registry = AgentRegistry()
    errors = ErrorRegistry(max_entries=settings.error_log_max_entries)
    embeddings = embeddings or EmbeddingService(settings)
    embedding_index = AgentEmbeddingIndex(registry, embeddings)

    for agent in agents if agents is not None else build_default_agents(settings, client):
        registry.register(agent)

    logger.info("Switchboard ready with %d agents", len(registry))
    return Switchboard(
        settings=settings,
        http_client=client,
        registry=registry,
        errors=errors,
        embeddings=embeddings,
        embedding_index=embedding_index,
        router=Router(registry, embedding_index, errors),
        dispatcher=Dispatcher(registry, errors),
    )
