import logging
from contextlib import asynccontextmanager

import logfire
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hookforge.application.api.rest.middleware import RequestLoggingMiddleware
from hookforge.application.api.v1.errors import error_body, map_hookforge_error
from hookforge.application.api.v1.routes import health, hooks, webhooks
from hookforge.application.di import create_container
from hookforge.config import Config, configure_logfire, configure_logging
from hookforge.domain.hook.service.hook import HookService
from hookforge.domain.shared.error import HookforgeError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container

    # Load the hook store now: a missing directory that cannot be created or a
    # corrupt store file must stop startup rather than serve an empty registry
    await container.get(HookService)
    logger.info("Hook store ready")

    yield

    await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application.

    Used as a uvicorn factory (`--factory`), so importing this module has no
    side effects.
    """
    # Pydantic Settings populates from env vars and the YAML file at runtime
    config = config or Config()

    # Configure logging early
    configure_logging(config.logging)
    configure_logfire(config.server)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )
    app_instance.state.config = config

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_fastapi(app_instance)

    app_instance.add_middleware(RequestLoggingMiddleware)

    # Setup dependency injection
    container = create_container(config)
    setup_dishka(container, app_instance)

    base_path = config.server.base_path
    app_instance.include_router(health.router, prefix=f"{base_path}/api")
    app_instance.include_router(hooks.router, prefix=f"{base_path}/api")
    app_instance.include_router(webhooks.router, prefix=base_path)

    # Global hookforge error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(HookforgeError)
    async def hookforge_error_handler(request: Request, exc: HookforgeError):
        http_exc = map_hookforge_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
        )

    # Unwrap envelope details; wrap plain-string details (e.g. unknown routes)
    @app_instance.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = error_body("http_error", str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app_instance.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body("invalid_request", "Invalid request body", *messages),
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("internal_error", "Internal server error"),
        )

    return app_instance
