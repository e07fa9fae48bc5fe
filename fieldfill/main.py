"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldfill.api.routes import admin, fill
from fieldfill.core.config import get_settings
from fieldfill.core.exceptions import FieldFillError, field_fill_exception_handler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    if settings.debug:
        logging.getLogger("fieldfill").setLevel(logging.DEBUG)

    mode = f"AI ({settings.default_vendor})" if settings.use_ai else "local patterns only"
    logger.info(f"Starting {settings.app_name} in {mode} mode")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Fills null, missing and empty values in JSON documents with realistic data",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(FieldFillError, field_fill_exception_handler)

    # Register routers
    api_prefix = "/api/v1"
    app.include_router(admin.router, prefix=api_prefix)
    app.include_router(fill.router, prefix=api_prefix)

    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fieldfill.main:app",
        host="0.0.0.0",
        port=8000,
        loop="asyncio",
    )
