import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from . import models
from .config import settings
from .database import engine
from .exceptions import register_exception_handlers
from .routers import booking_router, item_router, request_router, user_router

logging.basicConfig(level=settings.LOG_LEVEL)

# Setup logger
logger = logging.getLogger("shareit_server")

# Alembic manages production schemas; this keeps a fresh SQLite database usable
models.Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    logger.info("ShareIt server starting up...")

    yield  # The application is now running

    logger.info("ShareIt server shutting down...")
    engine.dispose()


app = FastAPI(
    title="ShareIt Server API",
    description="Items, bookings and item requests of the ShareIt sharing platform.",
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
    return {"message": "Welcome to the ShareIt server"}
