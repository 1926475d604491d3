"""CORS and security headers middleware."""

from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from place_resolver.core.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware on the FastAPI app.

    Nothing is allowed cross-origin unless origins or an origin regex
    are configured.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    kwargs: dict[str, Any] = {
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
    }
    if settings.cors_origin_list:
        kwargs["allow_origins"] = settings.cors_origin_list
    if settings.cors_origin_regex.strip():
        kwargs["allow_origin_regex"] = settings.cors_origin_regex.strip()
    app.add_middleware(CORSMiddleware, **kwargs)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response
