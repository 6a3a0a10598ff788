"""
switchboard/api.py

FastAPI HTTP interface for the switchboard.

Endpoints:
  GET  /health             — liveness probe
  GET  /agents             — registered agents and their input schemas
  POST /chat               — route the last user message and run the chosen agent
  POST /fs/list            — root-confined directory listing (used by the filesystem agent)
  POST /embeddings         — embed a piece of text
  POST /embeddings/index   — rebuild the agent embedding index
  GET  /errors             — recorded errors, oldest first
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from switchboard import __version__
from switchboard.errors import (
    AgentNotFoundError,
    AgentValidationError,
    PathOutsideRootError,
    UnknownEmbeddingProviderError,
)
from switchboard.fs_service import list_directory
from switchboard.models import ChatTurn, Clarify, Coordinates, Respond, decision_to_dict
from switchboard.settings import SwitchboardSettings
from switchboard.wiring import Switchboard, build_switchboard

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logger = logging.getLogger("switchboard.api")

CLARIFY_PREFIX = "🤔 "

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    messages: list[ChatTurn] = Field(default_factory=list)
    embedding_model: str | None = Field(
        None, description="'<provider>:<model>'; enables embedding-based routing."
    )
    coords: Coordinates | None = None


class FsListRequest(BaseModel):
    dir: str = "."


class EmbeddingRequest(BaseModel):
    text: str = Field(..., min_length=1)
    embedding_model: str | None = None


class IndexRequest(BaseModel):
    embedding_model: str | None = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_switchboard(request: Request) -> Switchboard:
    return request.app.state.switchboard


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------


def create_app(switchboard: Switchboard | None = None) -> FastAPI:
    """Build the FastAPI app.

    Args:
        switchboard: Pre-wired components.  When omitted, one is built from
            the environment at startup and its HTTP client is closed at
            shutdown.

    Returns:
        The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "switchboard", None) is not None:
            yield
            return
        app.state.switchboard = build_switchboard(SwitchboardSettings())
        try:
            yield
        finally:
            await app.state.switchboard.aclose()

    app = FastAPI(
        title="Switchboard",
        version=__version__,
        description="Routes chat messages to specialist agents and runs them.",
        lifespan=lifespan,
    )
    app.state.switchboard = switchboard

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Endpoints
    # -----------------------------------------------------------------------

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok", "server": "switchboard"}

    @app.get("/agents", tags=["agents"])
    async def agents(sb: Switchboard = Depends(get_switchboard)) -> list[dict[str, Any]]:
        return [
            {
                "name": agent.name,
                "description": agent.description,
                "input_schema": agent.input_schema(),
            }
            for agent in sorted(sb.registry.get_all_agents(), key=lambda a: a.name)
        ]

    @app.post("/chat", tags=["agents"])
    async def chat(body: ChatRequest, sb: Switchboard = Depends(get_switchboard)) -> Any:
        """Route the latest user message and return the result.

        Returns ``{"result": ..., "decision": {...}}``.  Clarifying questions
        come back as a ``result`` string prefixed with ``🤔``.
        """
        if not body.messages:
            return _error(400, "No messages provided")
        last = body.messages[-1]
        if last.role != "user":
            return _error(400, "Last message must be from the user")

        try:
            decision = await sb.router.route_user_input(
                last.content,
                embedding_model=body.embedding_model,
                conversation=body.messages[:-1],
                coords=body.coords,
            )
        except UnknownEmbeddingProviderError as exc:
            return _error(400, str(exc))

        if isinstance(decision, Respond):
            return {"result": decision.message, "decision": decision_to_dict(decision)}
        if isinstance(decision, Clarify):
            return {
                "result": CLARIFY_PREFIX + decision.question,
                "decision": decision_to_dict(decision),
            }

        try:
            output = await sb.dispatcher.execute_agent_by_name(decision.agent, decision.args)
        except AgentValidationError as exc:
            return _error(400, str(exc))
        except AgentNotFoundError as exc:
            return _error(404, str(exc))
        except Exception as exc:
            logger.error("Agent '%s' failed: %s", decision.agent, exc, exc_info=True)
            return _error(500, f"Agent execution failed: {exc}")

        agent = sb.registry.get_agent_by_name(decision.agent)
        result = agent.encode(output) if agent is not None else output
        return {"result": result, "decision": decision_to_dict(decision)}

    @app.post("/fs/list", tags=["filesystem"])
    def fs_list(body: FsListRequest, sb: Switchboard = Depends(get_switchboard)) -> Any:
        """List a directory under the configured root."""
        try:
            entries = list_directory(sb.settings.fs_root, body.dir)
        except PathOutsideRootError as exc:
            return _error(400, str(exc))
        except (FileNotFoundError, NotADirectoryError) as exc:
            return _error(404, str(exc))
        except OSError as exc:
            logger.error("[fs] listing %r failed: %s", body.dir, exc, exc_info=True)
            return _error(500, f"Failed to list directory: {exc}")
        return {"entries": entries}

    @app.post("/embeddings", tags=["embeddings"])
    async def embeddings(body: EmbeddingRequest, sb: Switchboard = Depends(get_switchboard)) -> Any:
        try:
            vector = await sb.embeddings.embed(body.text, body.embedding_model)
        except UnknownEmbeddingProviderError as exc:
            return _error(400, str(exc))
        except Exception as exc:
            sb.errors.add_error("embeddings", exc)
            return _error(500, f"Embedding failed: {exc}")
        return {"embedding": vector}

    @app.post("/embeddings/index", tags=["embeddings"])
    async def rebuild_index(body: IndexRequest, sb: Switchboard = Depends(get_switchboard)) -> Any:
        """Re-embed every registered agent."""
        try:
            await sb.embedding_index.initialize(body.embedding_model)
        except UnknownEmbeddingProviderError as exc:
            return _error(400, str(exc))
        except Exception as exc:
            sb.errors.add_error("orchestrator", exc)
            return _error(500, f"Index rebuild failed: {exc}")
        return {
            "agents": len(sb.embedding_index.entries),
            "embedding_model": sb.embedding_index.provider_model,
            "stale": sb.embedding_index.is_stale(),
        }

    @app.get("/errors", tags=["meta"])
    async def errors(sb: Switchboard = Depends(get_switchboard)) -> list[dict[str, str]]:
        return [
            {
                "timestamp": entry.timestamp.isoformat(),
                "agent": entry.agent,
                "type": type(entry.error).__name__,
                "error": str(entry.error),
            }
            for entry in sb.errors.get_errors()
        ]

    return app


app = create_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_api() -> None:
    """Start the FastAPI server via uvicorn."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    settings = SwitchboardSettings()
    logger.info("Starting switchboard API on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(
        "switchboard.api:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    run_api()
