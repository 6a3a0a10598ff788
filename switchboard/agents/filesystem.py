"""Filesystem agent: lists directory entries through the file-listing service."""

from __future__ import annotations

import logging
from typing import ClassVar, Literal

import httpx
from pydantic import BaseModel

from switchboard.agents.base import Agent
from switchboard.errors import ServiceError, UnsupportedActionError

logger = logging.getLogger(__name__)


class FilesystemInput(BaseModel):
    action: Literal["list"]
    path: str


class FileEntry(BaseModel):
    name: str
    is_file: bool
    is_directory: bool


class FilesystemAgent(Agent):
    name: ClassVar[str] = "filesystem"
    description: ClassVar[str] = "Lists files and folders in a directory."
    input_type: ClassVar[type] = FilesystemInput
    output_type: ClassVar[type] = list[FileEntry]

    def __init__(self, client: httpx.AsyncClient, fs_api_url: str) -> None:
        self._client = client
        self.fs_api_url = fs_api_url

    async def execute(self, args: FilesystemInput) -> list[FileEntry]:
        if args.action != "list":
            raise UnsupportedActionError(f"Unsupported filesystem action: {args.action}")

        response = await self._client.post(self.fs_api_url, json={"dir": args.path})
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            raise ServiceError(
                f"Filesystem API error: {message}", status_code=response.status_code
            )

        entries = response.json().get("entries", [])
        logger.info("[filesystem] %s → %d entries", args.path, len(entries))
        return [FileEntry.model_validate(entry) for entry in entries]
