import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api.errors import register_exception_handlers
from app.api.middleware import CORSHeadersMiddleware, RequestSizeLimitMiddleware
from app.api.routers import files as files_router
from app.api.routers import health as health_router
from app.api.routers import pages as pages_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.services.storage import MAX_REQUEST_SIZE, get_storage_service

logger = logging.getLogger(__name__)


def _log_banner(settings: Settings) -> None:
    rule = "=" * 60
    logger.info(rule)
    logger.info("FILE SERVER - %s", settings.service_name)
    logger.info(rule)
    logger.info("Port: %s", settings.port)
    logger.info("S3 bucket: %s", settings.s3_bucket_name)
    logger.info("Region: %s", settings.aws_region)
    logger.info(rule)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    _log_banner(settings)

    storage = get_storage_service()
    app.state.storage = storage

    if not await storage.verify_access():
        logger.warning("Could not verify S3 access")
        logger.warning("The server will start, but storage operations may fail")

    logger.info("Server listening on http://%s:%s", settings.host, settings.port)
    logger.info("Web UI: http://localhost:%s", settings.port)
    logger.info("Health: http://localhost:%s/api/health", settings.port)
    yield
    logger.info("Shutting down %s", settings.service_name)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(
        debug=settings.debug,
        title="S3 File Gateway",
        lifespan=lifespan,
    )

    app.add_middleware(RequestSizeLimitMiddleware, max_size=MAX_REQUEST_SIZE)
    app.add_middleware(CORSHeadersMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(files_router.router)
    app.include_router(pages_router.router)
    app.mount("/static", StaticFiles(directory=pages_router.STATIC_DIR), name="static")

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
