"""
switchboard/intent.py

Small-talk intent detection that runs before any agent lookup.

Greetings, thanks, farewells and "what can you do?" questions are answered
with canned replies and never reach an agent.  Each pattern is matched
against the lower-cased input.

Adding a new small-talk intent:
    1. Add the token name to ``Intent`` below.
    2. Add its pattern to ``_PATTERNS`` and its reply to ``CANNED_REPLIES``.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum
from typing import Final

logger = logging.getLogger(__name__)


class Intent(StrEnum):
    """Small-talk intents answered without an agent."""

    GREETING = "GREETING"
    THANKS = "THANKS"
    FAREWELL = "FAREWELL"
    CAPABILITIES = "CAPABILITIES"


# A greeting must be the whole message, so "hi, what's the weather in Oslo"
# still reaches the weather agent.
_GREETING_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(hi|hello|hey|howdy|hiya|greetings|good (morning|afternoon|evening))"
    r"(\s+(there|everyone|all|friend))?[\s!.,?]*$"
)

_THANKS_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(thanks|thank you|thx|ty|many thanks|much appreciated|cheers)\b"
)

_FAREWELL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(bye|goodbye|good bye|bye bye|see you|see ya|farewell|good night)\b"
)

_CAPABILITIES_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(what can you do|what are your (capabilities|skills|abilities)"
    r"|what do you (do|know how to do)|how can you help"
    r"|list (your |the )?(agents|capabilities|skills)|^\s*help[\s!.?]*$)"
)

# Checked in order; the first match wins.
_PATTERNS: Final[tuple[tuple[Intent, re.Pattern[str]], ...]] = (
    (Intent.GREETING, _GREETING_PATTERN),
    (Intent.THANKS, _THANKS_PATTERN),
    (Intent.FAREWELL, _FAREWELL_PATTERN),
    (Intent.CAPABILITIES, _CAPABILITIES_PATTERN),
)

CANNED_REPLIES: Final[dict[Intent, str]] = {
    Intent.GREETING: "Hi there! How can I help you today?",
    Intent.THANKS: "You're welcome! Let me know if there's anything else I can help with.",
    Intent.FAREWELL: "Goodbye! Have a great day.",
}


def detect_intent(text: str) -> Intent | None:
    """Return the small-talk intent of ``text``, or ``None``.

    Args:
        text: Raw user input.

    Returns:
        The first matching :class:`Intent`, or ``None`` if the input should be
        routed to an agent.
    """
    lower = text.lower()
    for intent, pattern in _PATTERNS:
        if pattern.search(lower):
            logger.info("Intent resolved: %s", intent)
            return intent
    return None


def describe_capabilities(agents: list[tuple[str, str]]) -> str:
    """Build the capabilities reply from ``(name, description)`` pairs."""
    if not agents:
        return "I don't have any specialist agents available right now, but I'm happy to chat."
    lines = [f"- **{name}**: {description}" for name, description in sorted(agents)]
    return "Here's what I can help with:\n" + "\n".join(lines)
