"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, and includes all route modules.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_graph.config import CORS_ORIGINS, N8N_API_KEY, N8N_API_URL
from workflow_graph.logging_config import get_api_logger, get_client_logger

from .dependencies import close_n8n_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and manage the n8n client lifecycle."""
    logger = get_api_logger()
    get_client_logger()

    if not N8N_API_KEY:
        logger.warning(
            "N8N_API_KEY not set, create/update endpoints will return 503. "
            "Validation endpoints work without it."
        )
    else:
        logger.info(f"Using n8n API at {N8N_API_URL}")

    yield
    await close_n8n_client()


app = FastAPI(title="n8n Workflow Graph API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from .routes.health import router as health_router  # noqa: E402
from .routes.validation import router as validation_router  # noqa: E402
from .routes.workflows import router as workflows_router  # noqa: E402

app.include_router(validation_router)
app.include_router(workflows_router)
app.include_router(health_router)
