"""
switchboard/dispatcher.py

Validates arguments and invokes an agent by name.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from switchboard.agent_registry import AgentRegistry
from switchboard.agents.base import violations_from
from switchboard.error_registry import ErrorRegistry
from switchboard.errors import AgentNotFoundError, AgentValidationError

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs agents chosen by the router.  Never retries."""

    def __init__(self, registry: AgentRegistry, error_registry: ErrorRegistry) -> None:
        self._registry = registry
        self._errors = error_registry

    async def execute_agent_by_name(self, name: str, args: Any) -> Any:
        """Look up ``name``, validate ``args`` and execute the agent.

        Args:
            name: Registered agent name.
            args: Untrusted arguments, usually from a ``Delegate`` decision.

        Returns:
            The agent's output, unmodified.

        Raises:
            AgentNotFoundError: If no agent is registered under ``name``.
            AgentValidationError: If ``args`` fail the agent's input type.
                The agent is not executed.
            Exception: Whatever the agent raised, unchanged.
        """
        agent = self._registry.get_agent_by_name(name)
        if agent is None:
            error = AgentNotFoundError(name)
            self._errors.add_error(name, error)
            raise error

        try:
            validated = agent.decode(args)
        except ValidationError as exc:
            error = AgentValidationError(name, violations_from(exc))
            self._errors.add_error(name, error)
            raise error from exc

        logger.info("Executing agent '%s'", name)
        try:
            return await agent.execute(validated)
        except Exception as exc:
            self._errors.add_error(name, exc)
            raise
