"""
switchboard/llm.py

Chat-completion client for OpenAI-compatible ``/chat/completions`` endpoints.

Used by the conversational agent and, with a different base URL and
credential, by the research agent's search-augmented completion service.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from switchboard.errors import ServiceError

logger = logging.getLogger(__name__)


def _str_content(val: None | str | list[dict[str, Any]]) -> str:
    """Normalise a message content value to a plain string.

    Args:
        val: Raw content field; may be ``None``, a ``str``, or a list of
            dicts (multimodal content parts).

    Returns:
        A plain string safe for all string operations.
    """
    if val is None:
        return ""
    if isinstance(val, str):
        return val
    if isinstance(val, list):
        parts: list[str] = []
        for item in val:
            if isinstance(item, dict):
                parts.append(str(item.get("text") or item.get("content") or ""))
            else:
                parts.append(str(item))
        return " ".join(p for p in parts if p)
    return str(val)


class ChatCompletionClient:
    """Thin async wrapper around an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        api_key: str = "",
        *,
        label: str = "chat",
    ) -> None:
        """Initialize the client.

        Args:
            client: Shared HTTP client; its timeout applies to every call.
            base_url: API base URL, e.g. ``https://api.openai.com/v1``.
            api_key: Bearer token.  Omitted from the request when empty.
            label: Service name used in log lines and error messages.
        """
        self._client = client
        self.completions_url = base_url.rstrip("/") + "/chat/completions"
        self._api_key = api_key
        self.label = label

    async def create(
        self,
        messages: list[dict[str, str]],
        model: str,
        **extra: Any,
    ) -> dict[str, Any]:
        """POST a chat-completion request and return the decoded JSON body.

        Raises:
            ServiceError: If the endpoint returns a non-2xx status.
        """
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        payload: dict[str, Any] = {"model": model, "messages": messages, **extra}

        logger.info("[%s] model=%r url=%s messages=%d", self.label, model, self.completions_url, len(messages))
        response = await self._client.post(self.completions_url, json=payload, headers=headers)
        if response.is_error:
            raise ServiceError(
                f"{self.label} request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def complete(self, messages: list[dict[str, str]], model: str, **extra: Any) -> str:
        """Return the first choice's message content, or ``""`` if there is none."""
        data = await self.create(messages, model, **extra)
        choices = data.get("choices") or [{}]
        content = _str_content(choices[0].get("message", {}).get("content")).strip()
        logger.info("[%s] response length=%d chars", self.label, len(content))
        return content
