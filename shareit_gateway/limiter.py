from fastapi import Request, Response
from fastapi_limiter.depends import RateLimiter

from .client import USER_ID_HEADER
from .config import settings


async def get_key_by_user_id_or_ip(request: Request) -> str:
    """
    Limits per ShareIt user when the identity header is present and numeric,
    otherwise per client IP. RateLimiter itself keeps a separate bucket per route.
    """
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    if user_id.isdigit():
        return f"user:{user_id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES,
    seconds=settings.RATE_LIMIT_SECONDS,
    identifier=get_key_by_user_id_or_ip,
)


async def rate_limit(request: Request, response: Response):
    if not settings.RATE_LIMIT_ENABLED:
        return
    await limiter(request, response)
