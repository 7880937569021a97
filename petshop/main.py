"""FastAPI Application - Main entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from petshop import __version__
from petshop.config.settings import get_settings
from petshop.core.dependencies import build_dependencies
from petshop.core.errors import PetShopError
from petshop.handlers import agenda, atendimentos, auth, cadastros, dashboard, lembretes
from petshop.services.observability import (
    get_current_trace_id,
    instrument_fastapi,
    setup_tracing,
)
from petshop.services.supabase import get_supabase_service
from petshop.utils.logger import get_logger, setup_logging

# Initialize settings early
settings = get_settings()

# Setup logging
setup_logging(settings.log_level)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "application_starting",
        environment=settings.app_env,
        port=settings.api_port,
    )

    # Setup tracing
    setup_tracing()

    if getattr(app.state, "deps", None) is None:
        app.state.deps = build_dependencies(get_supabase_service(), settings)

    yield

    # Shutdown
    logger.info("application_shutting_down")

    # Cleanup connections
    try:
        await app.state.deps.sessions.close()
    except Exception as e:
        logger.warning("cleanup_error", error=str(e))


# Create FastAPI app
app = FastAPI(
    title="Pet Shop Admin API",
    description="Administração de pet shop: cadastros, atendimentos, agenda e lembretes",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instrument with OpenTelemetry
instrument_fastapi(app)


@app.exception_handler(PetShopError)
async def petshop_error_handler(request: Request, exc: PetShopError) -> JSONResponse:
    """Converte erros de domínio em JSON ``{"error", "message"}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_failed",
        path=request.url.path,
        method=request.method,
        error=exc.code,
        message=exc.message,
        trace_id=get_current_trace_id(),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


# Include routers
app.include_router(auth.router)
app.include_router(cadastros.clientes_router)
app.include_router(cadastros.pets_router)
app.include_router(cadastros.funcionarios_router)
app.include_router(cadastros.servicos_router)
app.include_router(cadastros.produtos_router)
app.include_router(atendimentos.router)
app.include_router(agenda.horarios_router)
app.include_router(agenda.agendamentos_router)
app.include_router(lembretes.router)
app.include_router(dashboard.router)


@app.get("/")
async def root() -> dict:
    """Root endpoint.

    Returns:
        Welcome message.
    """
    return {
        "message": "Pet Shop Admin API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status with environment info.
    """
    return {
        "status": "healthy",
        "environment": settings.app_env,
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "petshop.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
