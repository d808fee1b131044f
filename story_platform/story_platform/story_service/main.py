"""
Story service - user accounts, authentication and the story feed
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db import init_db
from .errors import GENERIC_MESSAGE, ServiceError, TokenError
from .routes import feeds, health, users
from .utils.event_logger import configure_logging

configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize database on startup"""
    init_db()
    yield


app = FastAPI(
    title="Story Service",
    description="User accounts, authentication and the story feed",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    headers = None
    if exc.status_code >= 500:
        # Detail is logged here, never sent to the client
        logger.error("%s on %s %s: %r", type(exc).__name__, request.method, request.url.path, exc.__cause__)
        message = GENERIC_MESSAGE
    else:
        message = exc.message
    if isinstance(exc, TokenError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=headers)


app.include_router(users.router)
app.include_router(feeds.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {
        "service": "Story Service",
        "version": "1.0.0",
        "status": "running"
    }
