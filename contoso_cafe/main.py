"""FastAPI application entry point.

Contoso Cafe - table reservation bot.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contoso_cafe import __version__
from contoso_cafe.api.routes import health, messages, metrics
from contoso_cafe.config import Settings, get_settings
from contoso_cafe.core.runtime import BotRuntime, build_runtime
from contoso_cafe.db.session import close_db, init_db
from contoso_cafe.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Startup:
    - Initialize logging
    - Create the state table (sql storage backend)

    Shutdown:
    - Close recognizer and knowledge-base clients
    - Close database connections
    """
    runtime: BotRuntime = app.state.runtime
    settings = runtime.settings

    # Startup
    setup_logging(
        level=settings.log_level,
        enable_file=settings.is_production,
    )

    if settings.storage_backend == "sql":
        await init_db()

    yield

    # Shutdown
    await runtime.close()

    if settings.storage_backend == "sql":
        await close_db()


def create_app(
    settings: Settings | None = None,
    runtime: BotRuntime | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Contoso Cafe Bot",
        description="Table reservation bot for Contoso Cafe",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.runtime = runtime or build_runtime(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # Bot messaging endpoint
    app.include_router(messages.router, prefix="/api", tags=["Messages"])

    # Metrics endpoint for Prometheus scraping
    app.include_router(metrics.router, tags=["Observability"])

    return app


# Application instance
app = create_app()
