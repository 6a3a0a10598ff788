"""Conversational agent: free-form chat backed by an LLM chat completion."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, Field

from switchboard.agents.base import Agent
from switchboard.errors import ServiceError
from switchboard.llm import ChatCompletionClient
from switchboard.models import ChatTurn

logger = logging.getLogger(__name__)


class ConversationalInput(BaseModel):
    text: str
    context: list[ChatTurn] = Field(default_factory=list)


class ConversationalAgent(Agent):
    """Answers casual conversation, replaying the full history to the LLM."""

    name: ClassVar[str] = "conversational"
    description: ClassVar[str] = "Handles casual, free-form conversation."
    input_type: ClassVar[type] = ConversationalInput
    output_type: ClassVar[type] = str

    def __init__(self, llm: ChatCompletionClient, model: str) -> None:
        self._llm = llm
        self.model = model

    async def execute(self, args: ConversationalInput) -> str:
        messages = [{"role": turn.role, "content": turn.content} for turn in args.context]
        messages.append({"role": "user", "content": args.text})

        reply = await self._llm.complete(messages, self.model)
        if not reply:
            raise ServiceError("No completion returned from the chat model")
        return reply
