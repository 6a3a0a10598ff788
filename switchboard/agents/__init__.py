"""Specialist agents available to the router."""

from __future__ import annotations

import httpx

from switchboard.agents.base import Agent
from switchboard.agents.conversational import ConversationalAgent
from switchboard.agents.filesystem import FilesystemAgent
from switchboard.agents.notes import NotesAgent
from switchboard.agents.research import ResearchAgent
from switchboard.agents.weather import WeatherAgent
from switchboard.llm import ChatCompletionClient
from switchboard.settings import SwitchboardSettings

__all__ = [
    "Agent",
    "ConversationalAgent",
    "FilesystemAgent",
    "NotesAgent",
    "ResearchAgent",
    "WeatherAgent",
    "build_default_agents",
]


def build_default_agents(settings: SwitchboardSettings, client: httpx.AsyncClient) -> list[Agent]:
    """Construct the five built-in agents sharing one HTTP client."""
    chat = ChatCompletionClient(
        client, settings.openai_base_url, settings.openai_api_key, label="conversational"
    )
    search = ChatCompletionClient(
        client, settings.perplexity_base_url, settings.perplexity_api_key, label="research"
    )
    return [
        ConversationalAgent(chat, settings.conversational_model),
        WeatherAgent(client, settings.geocoding_url, settings.forecast_url),
        ResearchAgent(search, settings.perplexity_model, settings.perplexity_api_key),
        FilesystemAgent(client, settings.fs_api_url),
        NotesAgent(client, settings.notes_api_url),
    ]
