"""Notes agent: list and create notes in the external note store.

The store speaks plain JSON over HTTP:
  GET  <notes_api_url>                     → [{id, title, content, created_at}]
  POST <notes_api_url> {title, content}    → {id, ...}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated, ClassVar, Literal, Union

import httpx
from pydantic import BaseModel, Field, TypeAdapter

from switchboard.agents.base import Agent
from switchboard.errors import ServiceError

logger = logging.getLogger(__name__)

_DEFAULT_TITLE_LENGTH = 50
_NOTE_SEPARATOR = "\n\n---\n\n"


class ListNotes(BaseModel):
    action: Literal["list"]


class CreateNote(BaseModel):
    action: Literal["create"]
    title: str | None = None
    content: str


NotesInput = Annotated[Union[ListNotes, CreateNote], Field(discriminator="action")]


class Note(BaseModel):
    id: str | int
    title: str
    content: str
    created_at: int = Field(description="Creation time in epoch milliseconds.")

    def render(self) -> str:
        created = datetime.fromtimestamp(self.created_at / 1000, tz=timezone.utc)
        return f"📝 **{self.title}** (Created: {created:%Y-%m-%d %H:%M})\n{self.content}"


_NOTE_LIST = TypeAdapter(list[Note])


class NotesAgent(Agent):
    """Reads and writes notes; every result is a user-facing string."""

    name: ClassVar[str] = "notes"
    description: ClassVar[str] = "Creates new notes and lists saved notes."
    input_type: ClassVar[object] = NotesInput
    output_type: ClassVar[type] = str

    def __init__(self, client: httpx.AsyncClient, notes_api_url: str) -> None:
        self._client = client
        self.notes_api_url = notes_api_url

    async def execute(self, args: ListNotes | CreateNote) -> str:
        if isinstance(args, CreateNote):
            return await self._create(args)
        return await self._list()

    async def _list(self) -> str:
        response = await self._client.get(self.notes_api_url)
        if response.is_error:
            raise ServiceError(
                f"Failed to fetch notes: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        notes = _NOTE_LIST.validate_python(response.json())
        if not notes:
            return "You don't have any notes yet."

        return "Here are your notes:\n\n" + _NOTE_SEPARATOR.join(note.render() for note in notes)

    async def _create(self, args: CreateNote) -> str:
        title = args.title or args.content[:_DEFAULT_TITLE_LENGTH]

        response = await self._client.post(
            self.notes_api_url, json={"title": title, "content": args.content}
        )
        if response.is_error:
            raise ServiceError(
                f"Failed to create note: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        body = response.json()
        if not isinstance(body, dict) or body.get("id") is None:
            raise ServiceError("Failed to create note: store did not return an id")

        logger.info("[notes] created note id=%s", body["id"])
        return f'Note titled "{title}" created successfully.'
