"""edgekit FastAPI Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edgekit import __version__
from edgekit.api.routes import edge
from edgekit.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()

    logger.info(f"edgekit starting on port {settings.port}")
    if not settings.token_hash:
        logger.warning("EDGEKIT_TOKEN_HASH not set, bearer-protected routes will return 503")
    if not settings.public_key:
        logger.warning("EDGEKIT_PUBLIC_KEY not set, signed URL routes will return 503")

    yield

    logger.info("edgekit shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="edgekit",
        description="Token and signed URL verification for edge handlers",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The edge router matches full paths, so it keeps its own /edge prefix
    app.mount("/edge", edge.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "edgekit.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
