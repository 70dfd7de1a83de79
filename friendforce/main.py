"""Application entrypoint for the FriendForce web client."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from friendforce.context import ClientContext, build_context
from friendforce.core.config import Settings, get_settings
from friendforce.core.logging import configure_logging
from friendforce.errors import ApiError
from friendforce.web import router as web_router

logger = logging.getLogger(__name__)

ERROR_CODE_MAP: dict[int, str] = {
    404: "RESOURCE_NOT_FOUND",
    409: "SUBMISSION_IN_PROGRESS",
    422: "VALIDATION_ERROR",
}


def create_app(
    settings: Settings | None = None, context: ClientContext | None = None
) -> FastAPI:
    """Create the web client; ``context`` lets tests supply their own API wiring."""
    settings = settings or get_settings()
    configure_logging(settings)
    client_context = context or build_context(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await client_context.aclose()

    application = FastAPI(title="FriendForce", version=settings.version, lifespan=lifespan)
    application.state.context = client_context

    _configure_exception_handlers(application)
    application.include_router(web_router)

    return application


def _configure_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(HTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _validation_exception_handler)
    application.add_exception_handler(ApiError, _api_exception_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    code = ERROR_CODE_MAP.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _error_response(code, message, exc.status_code)


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    logger.info("Validation error", extra={"errors": exc.errors()})
    return _error_response("VALIDATION_ERROR", "Validation error", status_code=422)


async def _api_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ApiError)
    logger.warning(
        "FriendForce API unavailable while rendering",
        extra={"status_code": exc.status_code, "detail": exc.message},
    )
    return _error_response("UPSTREAM_ERROR", exc.message, status_code=502)


async def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled application error")
    return _error_response("INTERNAL_SERVER_ERROR", "Internal server error", status_code=500)


def _error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": code, "message": message}})


app = create_app()
