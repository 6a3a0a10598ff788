"""switchboard

Agent routing and dispatch for a multi-agent chat back end.

A user utterance is routed to one of several specialist agents (weather,
research, filesystem, notes, conversational) or answered directly, then the
chosen agent is invoked with validated arguments.
"""

from switchboard.models import Clarify, Delegate, OrchestratorDecision, Respond
from switchboard.wiring import Switchboard, build_switchboard

__all__ = [
    "Clarify",
    "Delegate",
    "OrchestratorDecision",
    "Respond",
    "Switchboard",
    "build_switchboard",
]

__version__ = "0.1.0"
