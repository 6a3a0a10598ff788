"""switchboard/settings.py

Runtime configuration loaded from environment variables / .env file.

Configure via environment variables (case-insensitive), e.g.:
  OPENAI_API_KEY           — credential for chat completions and embeddings
  PERPLEXITY_API_KEY       — credential for the research agent
  DEFAULT_EMBEDDING_MODEL  — "<provider>:<model>" used by the embedding index
  FS_ROOT                  — directory the file-listing service is confined to
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SwitchboardSettings(BaseSettings):
    """Runtime configuration for the router, agents, and HTTP interface.

    Attributes:
        openai_base_url: OpenAI-compatible base URL for chat completions.
        openai_api_key: Bearer token for the chat-completion and embedding APIs.
        conversational_model: Model used by the conversational agent.
        ollama_host: Ollama server used by the ``ollama:`` / ``mxbai:``
            embedding providers.
        default_embedding_model: Provider/model pair used when none is given.
        perplexity_base_url: Base URL of the search-augmented completion API.
        perplexity_api_key: Credential for the research agent.
        perplexity_model: Model requested from the search API.
        geocoding_url: Open-Meteo geocoding endpoint.
        forecast_url: Open-Meteo forecast endpoint.
        notes_api_url: Note storage endpoint (GET lists, POST creates).
        fs_api_url: File-listing endpoint called by the filesystem agent.
        fs_root: Root directory the file-listing service may read.
        http_timeout: Timeout in seconds for every outbound HTTP call.
        error_log_max_entries: Ring-buffer size of the error log.
        api_host: Bind address for the HTTP interface.
        api_port: Bind port for the HTTP interface.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_base_url: str = Field(
        "https://api.openai.com/v1",
        description="OpenAI-compatible base URL for chat completions.",
    )
    openai_api_key: str = Field(
        "",
        description="Bearer token for chat completions and OpenAI embeddings.",
    )
    conversational_model: str = Field(
        "gpt-3.5-turbo",
        description="Model used by the conversational agent.",
    )
    ollama_host: str = Field(
        "http://localhost:11434",
        description="Ollama server for local embedding providers.",
    )
    default_embedding_model: str = Field(
        "openai:text-embedding-3-small",
        description="Embedding provider and model, as '<provider>:<model>'.",
    )
    perplexity_base_url: str = Field(
        "https://api.perplexity.ai",
        description="Base URL of the search-augmented completion service.",
    )
    perplexity_api_key: str = Field(
        "",
        description="Credential for the research agent.  Empty disables research.",
    )
    perplexity_model: str = Field(
        "sonar",
        description="Model requested from the search-augmented completion service.",
    )
    geocoding_url: str = Field(
        "https://geocoding-api.open-meteo.com/v1/search",
        description="Open-Meteo geocoding endpoint.",
    )
    forecast_url: str = Field(
        "https://api.open-meteo.com/v1/forecast",
        description="Open-Meteo forecast endpoint.",
    )
    notes_api_url: str = Field(
        "http://localhost:4321/api/notes",
        description="Note storage endpoint.",
    )
    fs_api_url: str = Field(
        "http://localhost:8300/fs/list",
        description="File-listing endpoint used by the filesystem agent.",
    )
    fs_root: str = Field(
        ".",
        description="Directory the file-listing service is confined to.",
    )
    http_timeout: float = Field(
        30.0,
        description="Timeout in seconds applied to every outbound HTTP call.",
    )
    error_log_max_entries: int | None = Field(
        1000,
        description="Maximum retained error-log entries.  None keeps everything.",
    )
    api_host: str = Field("0.0.0.0", description="HTTP interface bind address.")
    api_port: int = Field(8300, description="HTTP interface bind port.")
