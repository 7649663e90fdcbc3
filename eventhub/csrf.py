"""
CSRF Protection Middleware for FastAPI

Implements double-submit cookie pattern for CSRF protection, needed because
the API authenticates with a session cookie:
- Generates a CSRF token and sets it as a cookie
- Validates that the X-CSRF-Token header matches the cookie value
- Applies to state-changing methods (POST, PUT, PATCH, DELETE)
- Excludes login/registration and health endpoints

Disabled by default; set CSRF_ENABLED=true once the frontend sends the header.
"""

import logging
import secrets
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import SESSION_HTTPS_ONLY

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 86400

# Methods that require CSRF protection
PROTECTED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Paths that are exempt from CSRF protection
EXEMPT_PATHS: list[str] = [
    "/api/login",  # No session to ride on yet
    "/api/register",
    "/api/csrf-token",
    "/health",
    "/docs",
    "/openapi.json",
]


def generate_csrf_token() -> str:
    """Generate a cryptographically secure CSRF token"""
    return secrets.token_urlsafe(32)


def is_path_exempt(path: str) -> bool:
    """Check if a path is exempt from CSRF protection"""
    return any(path == exempt or path.startswith(exempt + "/") for exempt in EXEMPT_PATHS)


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,  # Frontend must read it to echo it back in the header
        secure=SESSION_HTTPS_ONLY,
        samesite="strict",
        max_age=CSRF_COOKIE_MAX_AGE,
        path="/",
    )


def _reject(request: Request, reason: str) -> JSONResponse:
    logger.warning(f"🚫 CSRF: {reason} for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=403,
        content={"detail": f"CSRF token {reason}. Please refresh the page and try again."},
    )


class CSRFMiddleware(BaseHTTPMiddleware):
    """
    CSRF Protection Middleware using double-submit cookie pattern.

    1. On any request, if no CSRF cookie exists, generate one and set it
    2. For state-changing requests, the X-CSRF-Token header must match the cookie
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)

        needs_validation = request.method in PROTECTED_METHODS and not is_path_exempt(
            request.url.path
        )

        if needs_validation:
            csrf_header = request.headers.get(CSRF_HEADER_NAME)

            if not csrf_cookie:
                return _reject(request, "missing")

            if not csrf_header:
                return _reject(request, "header missing")

            # Constant-time comparison to prevent timing attacks
            if not secrets.compare_digest(csrf_cookie, csrf_header):
                return _reject(request, "invalid")

            logger.debug(f"✅ CSRF: Valid token for {request.method} {request.url.path}")

        response = await call_next(request)

        already_set = any(
            header.startswith(f"{CSRF_COOKIE_NAME}=")
            for header in response.headers.getlist("set-cookie")
        )
        if not csrf_cookie and not already_set:
            set_csrf_cookie(response, generate_csrf_token())
            logger.debug("🔑 CSRF: Set new token cookie")

        return response
