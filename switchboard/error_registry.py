"""switchboard/error_registry.py

Append-only log of errors raised during routing and agent execution.

Entries are kept in a bounded ring buffer: once ``max_entries`` is reached the
oldest entry is evicted to make room.  Pass ``max_entries=None`` to keep every
entry for the lifetime of the registry.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections import deque
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True, frozen=True)
class LoggedError:
    """One recorded failure.

    Attributes:
        timestamp: UTC time the error was recorded.
        agent: Name of the implicated agent, or a synthetic name such as
            ``"orchestrator"`` for routing-level failures.
        error: The exception instance.
    """

    timestamp: datetime
    agent: str
    error: BaseException


class ErrorRegistry:
    """Collects errors across agents and orchestration for later inspection."""

    def __init__(self, max_entries: int | None = 1000) -> None:
        """Initialize an empty error log.

        Args:
            max_entries: Ring-buffer capacity.  ``None`` disables eviction.
        """
        self.max_entries = max_entries
        self._errors: deque[LoggedError] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def add_error(self, agent: str, error: BaseException) -> None:
        """Record an error against an agent name.  Never raises."""
        entry = LoggedError(
            timestamp=datetime.now(timezone.utc),
            agent=agent,
            error=error,
        )
        with self._lock:
            self._errors.append(entry)
        logger.error("[%s] %s: %s", agent, type(error).__name__, error)

    def get_errors(self) -> list[LoggedError]:
        """Return every retained error, oldest first."""
        with self._lock:
            return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)
