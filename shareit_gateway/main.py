import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

import redis.asyncio as redis
from fastapi_limiter import FastAPILimiter

from .client import create_http_client
from .config import settings
from .errors import register_exception_handlers
from .routers import booking_router, item_router, request_router, user_router

logging.basicConfig(level=settings.LOG_LEVEL)

# Set up a logger
logger = logging.getLogger("shareit_gateway")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Opens the connection pool to the ShareIt server and, when rate limiting
    is enabled, the Redis connection used by the limiter.
    """
    logger.info("ShareIt gateway starting up...")

    redis_client = None
    if settings.RATE_LIMIT_ENABLED:
        try:
            redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8")
            await FastAPILimiter.init(redis_client)
            logger.info("FastAPILimiter initialized with Redis.")
        except Exception as e:
            logger.error(f"Failed to initialize FastAPILimiter: {e}")

    app.state.http_client = create_http_client()
    logger.info(f"Forwarding requests to {settings.SHAREIT_SERVER_URL}")

    yield  # The application is now running

    logger.info("ShareIt gateway shutting down...")
    await app.state.http_client.aclose()
    if redis_client is not None:
        await redis_client.close()


app = FastAPI(
    title="ShareIt Gateway API",
    description="Validates ShareIt requests and forwards them to the ShareIt server.",
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)

app.include_router(user_router.router)
app.include_router(item_router.router)
app.include_router(booking_router.router)
app.include_router(request_router.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to the ShareIt gateway"}
