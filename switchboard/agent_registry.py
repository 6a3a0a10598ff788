"""
Agent registry for runtime agent management.

This module provides a registry pattern for managing agents, including
keyword-based routing of free-form input to a specialist agent.
"""

# Standard Library
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

# Local Modules
from switchboard.agents.base import Agent

logger = logging.getLogger(__name__)

CONVERSATIONAL_AGENT = "conversational"

_WEATHER_TRIGGERS = ("weather", "forecast", "temperature", "conditions")

_RESEARCH_TRIGGERS = (
    "search",
    "find",
    "look up",
    "research",
    "news",
    "latest",
    "what is",
    "who is",
    "tell me about",
    "who discovered",
    "who invented",
    "who wrote",
    "who was",
    "when did",
    "when was",
    "where is",
    "how many",
)

_FILESYSTEM_TRIGGERS = (
    "list files",
    "show files",
    "list directory",
    "show directory",
    "list folder",
    "show folder",
)

_NOTES_TRIGGERS = (
    "note",
    "add note",
    "create note",
    "show notes",
    "list notes",
)


def _contains_any(triggers: Tuple[str, ...]) -> Callable[[str], bool]:
    return lambda text: any(trigger in text for trigger in triggers)


def _is_filesystem_request(text: str) -> bool:
    return text.startswith("ls ") or _contains_any(_FILESYSTEM_TRIGGERS)(text)


# Evaluated in order; the first registered agent whose predicate matches wins.
KEYWORD_ROUTES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    ("weather", _contains_any(_WEATHER_TRIGGERS)),
    ("research", _contains_any(_RESEARCH_TRIGGERS)),
    ("filesystem", _is_filesystem_request),
    ("notes", _contains_any(_NOTES_TRIGGERS)),
)


class AgentRegistry:
    """Registry for managing the agents available to the router."""

    def __init__(self) -> None:
        """Initialize an empty agent registry."""
        self._agents: Dict[str, Agent] = {}
        self._lock = threading.Lock()
        self._version = 0

    @property
    def version(self) -> int:
        """Counter bumped on every registration."""
        return self._version

    def register(self, agent: Agent) -> None:
        """
        Register an agent, replacing any agent already using its name.

        Args:
            agent: The agent instance to register
        """
        with self._lock:
            if agent.name in self._agents:
                logger.warning(
                    "Agent '%s' already registered, overwriting", agent.name
                )
            self._agents[agent.name] = agent
            self._version += 1

        logger.info("Registered agent '%s'", agent.name)

    def get_agent_by_name(self, name: str) -> Optional[Agent]:
        """
        Retrieve an agent by name.

        Args:
            name: Agent name

        Returns:
            The agent if found, None otherwise
        """
        return self._agents.get(name)

    def get_all_agents(self) -> List[Agent]:
        """
        Get all registered agents.

        Returns:
            Snapshot list of all agents
        """
        with self._lock:
            return list(self._agents.values())

    def find_agent_for_input(self, input_text: str) -> Optional[Agent]:
        """
        Find the agent whose keyword triggers match the input.

        Specific agents are checked in a fixed priority order (weather,
        research, filesystem, notes); the first registered agent with a
        matching trigger wins.  Otherwise the conversational agent is
        returned if registered.

        Args:
            input_text: The user's input text

        Returns:
            The matching agent, or None if no suitable agent is registered
        """
        lower_input = input_text.lower()

        for agent_name, matches in KEYWORD_ROUTES:
            agent = self.get_agent_by_name(agent_name)
            if agent and matches(lower_input):
                logger.debug("Keyword match: '%s'", agent_name)
                return agent

        return self.get_agent_by_name(CONVERSATIONAL_AGENT)

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)
