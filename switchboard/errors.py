"""
Exception hierarchy for routing, dispatch, and agent execution errors.
"""

from __future__ import annotations

import dataclasses


class SwitchboardError(Exception):
    """Base exception for all switchboard errors."""

    pass


class AgentNotFoundError(SwitchboardError):
    """Raised when a dispatch names an agent that is not registered."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Agent not found: {agent_name}")
        self.agent_name = agent_name


@dataclasses.dataclass(slots=True, frozen=True)
class Violation:
    """A single field-level validation failure.

    Attributes:
        path: Dotted path of the offending field; empty for whole-object rules.
        message: Human-readable reason.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'} ({self.message})"


class AgentValidationError(SwitchboardError):
    """Raised when dispatch arguments fail an agent's input validation."""

    def __init__(self, agent_name: str, violations: list[Violation]) -> None:
        details = ", ".join(str(v) for v in violations)
        super().__init__(f"Input validation failed for agent {agent_name}: {details}")
        self.agent_name = agent_name
        self.violations = violations


class UnknownEmbeddingProviderError(SwitchboardError, ValueError):
    """Raised when a provider/model string names an unsupported provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown embedding provider: {provider}")
        self.provider = provider


class ServiceError(SwitchboardError):
    """Raised when an external service call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingCredentialError(SwitchboardError):
    """Raised when a required API credential is not configured."""

    pass


class UnsupportedActionError(SwitchboardError):
    """Raised when an agent is asked to perform an action it does not support."""

    pass


class PathOutsideRootError(SwitchboardError):
    """Raised when a requested path resolves outside the permitted root."""

    pass
