"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from price_paid.backends import open_backends
from price_paid.config import Settings
from price_paid.errors import BackendError
from price_paid.logging import bind_request_id, configure_logging, get_logger
from price_paid.search import PropertySearchService

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to log context and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = bind_request_id(request.headers.get("X-Request-ID"))
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


async def _backend_error_handler(request: Request, exc: Exception) -> JSONResponse:
    timed_out = isinstance(exc, BackendError) and exc.timed_out
    logger.error("backend_error", path=request.url.path, error=str(exc), timed_out=timed_out)
    return JSONResponse({"detail": str(exc)}, status_code=504 if timed_out else 502)


def create_app(
    settings: Settings | None = None,
    *,
    service: PropertySearchService | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Loaded from env if not provided.
        service: Prebuilt search service. When omitted, backends are opened
            from settings for the lifetime of the app.
    """
    if settings is None:
        settings = Settings()

    configure_logging(json_output=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        if service is not None:
            app.state.service = service
            logger.info("web_server_started", backends="injected")
            yield
        else:
            async with open_backends(settings) as opened:
                app.state.service = opened
                logger.info("web_server_started", backends="opened")
                yield
        logger.info("web_server_stopped")

    app = FastAPI(title="Price Paid Finder", lifespan=lifespan)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(BackendError, _backend_error_handler)

    from price_paid.web.routes import router

    app.include_router(router)

    return app
