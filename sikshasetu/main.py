from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from sikshasetu.core.config import get_settings
from sikshasetu.core.logging import configure_logging
from sikshasetu.core.middleware import RequestIdMiddleware
from sikshasetu.api.v1.router import v1_router
from sikshasetu.backend.factory import build_backend
from sikshasetu.services.container import build_services

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    # backend variant is chosen once here; nothing downstream re-checks config
    backend = build_backend(settings)
    services = build_services(backend, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.services.close()
        log.info("services closed")

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
