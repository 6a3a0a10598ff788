"""Research agent: web research through a search-augmented completion service."""

from __future__ import annotations

import logging
import re
from typing import ClassVar

from pydantic import BaseModel, Field

from switchboard.agents.base import Agent
from switchboard.errors import MissingCredentialError
from switchboard.llm import ChatCompletionClient

logger = logging.getLogger(__name__)

_SEARCH_SYSTEM_PROMPT: str = (
    "You are an AI assistant that provides concise search results based on the user query."
)

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


class ResearchInput(BaseModel):
    query: str


class ResearchResult(BaseModel):
    search_result: str
    sources: list[str] = Field(default_factory=list)


def clean_search_text(raw: str) -> str:
    """Collapse runs of three or more newlines into a single blank line."""
    return _EXCESS_NEWLINES.sub("\n\n", raw)


class ResearchAgent(Agent):
    """Forwards the query to the search service and returns text plus citations."""

    name: ClassVar[str] = "research"
    description: ClassVar[str] = (
        "Performs web searches to find current information, research topics, "
        "look up facts, and answer general knowledge questions."
    )
    input_type: ClassVar[type] = ResearchInput
    output_type: ClassVar[type] = ResearchResult

    def __init__(self, search: ChatCompletionClient, model: str, api_key: str) -> None:
        self._search = search
        self.model = model
        self._api_key = api_key

    async def execute(self, args: ResearchInput) -> ResearchResult:
        if not self._api_key:
            raise MissingCredentialError("Missing PERPLEXITY_API_KEY environment variable.")

        logger.info("[research] query=%r", args.query)
        data = await self._search.create(
            [
                {"role": "system", "content": _SEARCH_SYSTEM_PROMPT},
                {"role": "user", "content": args.query},
            ],
            self.model,
        )

        choices = data.get("choices") or [{}]
        raw_content = choices[0].get("message", {}).get("content")
        if not raw_content:
            logger.warning("[research] no content in search response")
            return ResearchResult(search_result="No meaningful result found.", sources=[])

        return ResearchResult(
            search_result=clean_search_text(raw_content),
            sources=data.get("citations") or [],
        )
