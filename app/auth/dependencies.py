"""FastAPI dependencies that guard write routes."""

import logging
import math
import secrets

from fastapi import Header, HTTPException, Request, status

from app.auth.rate_limit import RateLimiter
from app.config import settings

logger = logging.getLogger(__name__)


def _client_key(request: Request) -> str:
    """Identify the caller by the first X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _matches(provided: str | None, expected: str) -> bool:
    return provided is not None and secrets.compare_digest(provided.encode(), expected.encode())


async def require_api_key(x_api_key: str | None = Header(None)) -> None:
    """Check the ``X-API-Key`` header against ``API_SECRET_KEY``.

    When no key is configured (development only; production refuses to
    start) every request is let through.

    Raises:
        HTTPException 401: If the key is missing or wrong.
    """
    if not settings.api_secret_key:
        return
    if not _matches(x_api_key, settings.api_secret_key):
        logger.warning("Rejected write request with invalid or missing API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "success": False,
                "error": "Unauthorized",
                "message": "Invalid or missing API key",
            },
        )


async def require_import_secret(x_api_secret: str | None = Header(None)) -> None:
    """Check the ``X-API-Secret`` header used by the mail-sync script.

    Raises:
        HTTPException 401: If no secret is configured or the header does not match.
    """
    if not settings.gmail_sync_secret or not _matches(x_api_secret, settings.gmail_sync_secret):
        logger.warning("Rejected booking import with invalid secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, "error": "Unauthorized"},
        )


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against the caller's window.

    Raises:
        HTTPException 429: If the caller is over the limit.
    """
    limiter: RateLimiter = request.app.state.rate_limiter
    client = _client_key(request)
    decision = limiter.hit(client)
    if not decision.allowed:
        retry_after = math.ceil(decision.retry_after)
        logger.warning("Rate limit exceeded for %s", client)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "success": False,
                "error": "Too many requests",
                "message": f"Rate limit exceeded. Try again in {retry_after}s",
            },
            headers={"Retry-After": str(retry_after)},
        )
