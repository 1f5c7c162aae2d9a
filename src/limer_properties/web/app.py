"""FastAPI application factory."""

import re
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from limer_properties.cms.client import SanityClient
from limer_properties.cms.repository import ContentRepository
from limer_properties.config import Settings
from limer_properties.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from limer_properties.mailer.resend import ResendEmailSender

logger = get_logger(__name__)

_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every log event of a request with its id, method and path."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", "")
        if not _REQUEST_ID_PATTERN.fullmatch(request_id):
            request_id = uuid.uuid4().hex
        clear_request_context()
        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request_completed",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        response.headers["X-Request-ID"] = request_id
        return response


def create_app(settings: Settings | None = None, *, json_logs: bool = False) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Loaded from env if not provided.
        json_logs: Emit JSON logs instead of console output.
    """
    if settings is None:
        settings = Settings()

    configure_logging(json_output=json_logs, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # One pooled client shared by the content store and the email provider
        http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        app.state.http_client = http_client
        app.state.settings = settings
        app.state.repository = ContentRepository(
            SanityClient.from_settings(settings, client=http_client)
        )
        app.state.email_sender = ResendEmailSender.from_settings(settings, client=http_client)

        if not settings.sanity_configured:
            logger.warning("sanity_project_not_configured")
        logger.info("web_server_started", dataset=settings.sanity_dataset)

        yield

        await http_client.aclose()
        logger.info("web_server_stopped")

    app = FastAPI(title="Limer Properties", lifespan=lifespan)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    from limer_properties.web.routes import router

    app.include_router(router)

    return app
