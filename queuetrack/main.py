from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from queuetrack.config import get_settings
from queuetrack.health import router as health_router
from queuetrack.mcp_server import mcp
from queuetrack.services.store import get_store
from queuetrack.tools.appointment import router as appointment_router
from queuetrack.tools.catalog import router as catalog_router


def configure_logging(level: str = "INFO") -> None:
    """Ensure application logs use the configured level."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level.upper(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(level.upper())


# Configure logging as soon as the module is loaded
configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)

# Mount the MCP Streamable HTTP server at /mcp
mcp_app = mcp.streamable_http_app()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    # --- Startup Logic ---
    settings = get_settings()

    settings_snapshot = settings.model_dump(exclude={"backend_token"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    store = get_store()
    logger.info("Application startup complete.")

    try:
        async with mcp.session_manager.run():
            yield  # The application is now running
    finally:
        # --- Shutdown Logic ---
        logger.info("Closing appointment store.")
        await store.close()
        logger.info("Application shutdown complete.")


# --- Application Setup ---

settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers and Mounts ---

app.include_router(appointment_router)
app.include_router(catalog_router, prefix="/catalog")
app.include_router(health_router)

app.mount("/mcp", mcp_app)
