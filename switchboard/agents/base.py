"""Base class for all specialist agents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from typing import Any, ClassVar

from pydantic import TypeAdapter, ValidationError

from switchboard.errors import Violation


class Agent(ABC):
    """Every agent exposes a *name*, a *description*, typed input/output and an
    async *execute* method.

    ``input_type`` and ``output_type`` may be any type pydantic can validate
    (models, tagged unions, ``str``, ``list[...]``).  ``decode`` turns untrusted
    arguments into the typed input; ``encode`` turns an output into a
    JSON-ready value for the HTTP layer.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    input_type: ClassVar[Any]
    output_type: ClassVar[Any]

    # ── subclass override ─────────────────────────────────
    @abstractmethod
    async def execute(self, args: Any) -> Any:
        """Return the agent output. Raise on error."""
        ...

    # ── codec ─────────────────────────────────────────────
    @cached_property
    def _input_adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.input_type)

    @cached_property
    def _output_adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.output_type)

    def decode(self, args: Any) -> Any:
        """Validate raw arguments against ``input_type``.

        Raises:
            pydantic.ValidationError: If any field is missing or malformed.
        """
        return self._input_adapter.validate_python(args)

    def encode(self, output: Any) -> Any:
        """Dump an output value to JSON-compatible Python data."""
        return self._output_adapter.dump_python(output, mode="json")

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the accepted arguments."""
        return self._input_adapter.json_schema()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


def violations_from(exc: ValidationError) -> list[Violation]:
    """Flatten a pydantic ``ValidationError`` into field-level violations."""
    return [
        Violation(
            path=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
        )
        for err in exc.errors()
    ]
