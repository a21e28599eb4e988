"""Shared FastAPI dependencies: caller identity and rate limiting."""

import math
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from recipekit.logging_config import get_logger, set_context
from recipekit.rate_limit import (
    RateLimiter,
    RateLimiterRegistry,
    RateLimitResult,
    get_rate_limiters,
)

logger = get_logger(__name__)


async def get_current_user_id(
    x_user_id: Annotated[
        str | None,
        Header(description="Authenticated user ID, set by the auth gateway"),
    ] = None,
) -> str | None:
    """Get the caller's user ID, or None for anonymous callers."""
    user_id = x_user_id.strip() if x_user_id else ""
    if not user_id:
        return None
    set_context(user_id=user_id)
    return user_id


def enforce_rate_limit(limiter: RateLimiter, key: str) -> RateLimitResult:
    """Check a limiter and raise 429 when the caller is over the limit."""
    result = limiter.check(key)

    if not result.allowed:
        logger.warning(f"Rate limit exceeded for {key}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
            headers={
                "Retry-After": str(math.ceil(result.retry_after)),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(int(result.reset_at)),
            },
        )

    return result


def rate_limited(limiter_name: str) -> Callable[..., Awaitable[None]]:
    """Create a dependency that rate limits a route with the named limiter."""

    async def dependency(
        request: Request,
        user_id: str | None = Depends(get_current_user_id),
        registry: RateLimiterRegistry = Depends(get_rate_limiters),
    ) -> None:
        key = user_id or (request.client.host if request.client else "anonymous")
        enforce_rate_limit(registry.get(limiter_name), key)

    return dependency
