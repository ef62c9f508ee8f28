"""FastAPI application for kgchat.

Serves one branching conversation workspace: message exchange, deep-dive
branches, tooltip explanations and session navigation.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kgchat.api.routes import router
from kgchat.config import Settings, settings
from kgchat.llm import CompletionClient
from kgchat.workspace import Workspace

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    client: CompletionClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings for the workspace (module settings when None)
        client: Completion client to use instead of building one from settings
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifespan - startup and shutdown."""
        logger.info("Starting kgchat API...")

        completion_client = client or CompletionClient(
            url=app_settings.completion_url,
            api_key=app_settings.completion_api_key,
            timeout=app_settings.completion_timeout,
            max_concurrent=app_settings.completion_max_concurrent,
        )
        logger.info(f"Completion endpoint: {completion_client.url}")

        app.state.completion_client = completion_client
        app.state.workspace = Workspace(completion_client, settings=app_settings)

        yield

        # Shutdown
        logger.info("Shutting down kgchat API...")
        await app.state.workspace.branches.wait_pending()
        await completion_client.close()

    app = FastAPI(
        title="kgchat",
        description="Branching conversations with an AI assistant, tracked as a knowledge graph",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware for browser front ends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "kgchat.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
