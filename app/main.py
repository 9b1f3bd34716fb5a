"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.exceptions import MessagingError, TransientError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.messages_router import messages_router
from app.schemas.envelope import error_body

logger = get_logger("app")

TRANSIENT_RETRY_AFTER_SECONDS = "2"


async def messaging_error_handler(request: Request, exc: MessagingError) -> JSONResponse:
    headers = None
    if isinstance(exc, TransientError):
        headers = {"Retry-After": TRANSIENT_RETRY_AFTER_SECONDS}
    return JSONResponse(
        status_code=exc.status_code, content=error_body(exc.message), headers=headers
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    messages = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(status_code=400, content=error_body(", ".join(messages)))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "%s starting (environment=%s)", settings.app_name, settings.environment
    )
    yield
    logger.info("%s shutting down", settings.app_name)


def create_app(testing: bool = False) -> FastAPI:
    """Build the API. `testing` skips process-wide logging setup."""
    settings = get_settings()
    if not testing:
        LoggingConfig(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_exception_handler(MessagingError, messaging_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/health", tags=["system"])
    def health() -> dict:
        return {"success": True, "data": {"status": "ok"}}

    app.include_router(messages_router)
    return app


app = create_app()
