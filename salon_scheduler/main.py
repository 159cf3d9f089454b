from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Mount

from salon_scheduler.config import get_settings

# Import routers directly from submodules
from salon_scheduler.store_view import router as store_view_router
from salon_scheduler.tools.appointment import router as appointment_router
from salon_scheduler.tools.availability import router as availability_router
from salon_scheduler.tools.blocks import router as blocks_router
from salon_scheduler.tools.catalog import router as catalog_router
from salon_scheduler.tools.reports import router as reports_router
from salon_scheduler.tools.waitlist import router as waitlist_router
from salon_scheduler.mcp_server import mcp
from salon_scheduler.health import router as health_router


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


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    settings = get_settings()

    logger.info("Application settings on startup: %s", settings.model_dump())

    # Debug check for MCP mount
    has_mcp = any(isinstance(r, Mount) and r.path == "/mcp" for r in app.routes)
    logger.debug("MCP mount present: %s", has_mcp)

    logger.info("Application startup complete.")
    try:
        yield
    finally:
        logger.info("Application shutdown complete.")


# --- Application Setup ---

settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers and Mounts ---

app.include_router(appointment_router, prefix="/tools/appointment")
app.include_router(availability_router, prefix="/tools/availability")
app.include_router(blocks_router, prefix="/tools/blocks")
app.include_router(waitlist_router, prefix="/tools/waitlist")
app.include_router(reports_router, prefix="/tools/reports")
app.include_router(catalog_router, prefix="/tools/catalog")
app.include_router(health_router)
app.include_router(store_view_router)

# Mount the MCP Streamable HTTP server at /mcp
app.mount("/mcp", mcp.streamable_http_app())
