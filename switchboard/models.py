"""switchboard/models.py

Routing decisions and shared conversation types.

The router produces exactly one decision per call:
    Delegate  — hand the request to a named agent with extracted arguments
    Respond   — answer directly with a message
    Clarify   — ask the user a follow-up question
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class DecisionType(StrEnum):
    """Tags for the three decision variants."""

    DELEGATE = "delegate"
    RESPOND = "respond"
    CLARIFY = "clarify"


@dataclasses.dataclass(slots=True, frozen=True)
class Delegate:
    """Route the request to ``agent`` with ``args``."""

    agent: str
    args: dict[str, Any]
    type: DecisionType = dataclasses.field(default=DecisionType.DELEGATE, init=False)


@dataclasses.dataclass(slots=True, frozen=True)
class Respond:
    """Answer the user directly."""

    message: str
    type: DecisionType = dataclasses.field(default=DecisionType.RESPOND, init=False)


@dataclasses.dataclass(slots=True, frozen=True)
class Clarify:
    """Ask the user for more information."""

    question: str
    type: DecisionType = dataclasses.field(default=DecisionType.CLARIFY, init=False)


OrchestratorDecision = Delegate | Respond | Clarify


def decision_to_dict(decision: OrchestratorDecision) -> dict[str, Any]:
    """Serialise a decision to a plain dict with a ``type`` tag."""
    return dataclasses.asdict(decision)


class ChatTurn(BaseModel):
    """One message of conversation history."""

    role: str
    content: str


class Coordinates(BaseModel):
    """A latitude/longitude pair supplied by the client."""

    latitude: float
    longitude: float
