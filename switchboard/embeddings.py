"""switchboard/embeddings.py

Embedding service contract and vector similarity.

Provider/model strings have the form ``"<provider>:<model>"``:
  openai:<model>  — OpenAI embeddings API (``openai`` SDK)
  ollama:<model>  — local Ollama server (``ollama`` client)
  mxbai:<model>   — alias of ``ollama`` for mxbai-embed models
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from ollama import AsyncClient as OllamaClient
from openai import AsyncOpenAI

from switchboard.errors import UnknownEmbeddingProviderError
from switchboard.settings import SwitchboardSettings

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL: str = "openai:text-embedding-3-small"

_OLLAMA_PROVIDERS: frozenset[str] = frozenset({"ollama", "mxbai"})


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Components missing from the shorter vector count as zero.  Returns ``0.0``
    when either vector has zero magnitude.
    """
    dot = sum(x * y for x, y in zip(a, b))
    mag_a = math.sqrt(sum(x * x for x in a))
    mag_b = math.sqrt(sum(y * y for y in b))
    if mag_a == 0 or mag_b == 0:
        return 0.0
    return dot / (mag_a * mag_b)


def parse_provider_model(provider_model: str) -> tuple[str, str]:
    """Split ``"<provider>:<model>"`` into its two parts.

    Raises:
        UnknownEmbeddingProviderError: If the provider prefix is not supported.
    """
    provider, _, model = provider_model.partition(":")
    if provider != "openai" and provider not in _OLLAMA_PROVIDERS:
        raise UnknownEmbeddingProviderError(provider)
    return provider, model


class EmbeddingService:
    """Turns text into vectors using the provider named in each call.

    SDK clients are created on first use so that a missing credential for one
    provider does not prevent using another.
    """

    def __init__(
        self,
        settings: SwitchboardSettings | None = None,
        *,
        openai_client: AsyncOpenAI | None = None,
        ollama_client: OllamaClient | None = None,
    ) -> None:
        self._settings = settings or SwitchboardSettings()
        self._openai = openai_client
        self._ollama = ollama_client

    @property
    def default_model(self) -> str:
        return self._settings.default_embedding_model or DEFAULT_EMBEDDING_MODEL

    def _openai_client(self) -> AsyncOpenAI:
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=self._settings.openai_api_key or None,
                timeout=self._settings.http_timeout,
            )
        return self._openai

    def _ollama_client(self) -> OllamaClient:
        if self._ollama is None:
            self._ollama = OllamaClient(
                host=self._settings.ollama_host,
                timeout=self._settings.http_timeout,
            )
        return self._ollama

    async def embed(self, text: str, provider_model: str | None = None) -> list[float]:
        """Return the embedding vector of ``text``.

        Args:
            text: Text to embed.
            provider_model: ``"<provider>:<model>"``; defaults to
                :attr:`default_model`.

        Returns:
            The embedding as a list of floats.

        Raises:
            UnknownEmbeddingProviderError: If the provider prefix is unsupported.
        """
        provider, model = parse_provider_model(provider_model or self.default_model)
        logger.debug("[embed] provider=%s model=%s chars=%d", provider, model, len(text))

        if provider == "openai":
            response = await self._openai_client().embeddings.create(
                model=model,
                input=text,
            )
            return list(response.data[0].embedding)

        response = await self._ollama_client().embed(model=model, input=text)
        return list(response["embeddings"][0])
