"""
Running Log API

FastAPI application for a personal running log with Strava sync.
"""

from contextlib import asynccontextmanager
import logging
import sys
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.db.session import init_db, AsyncSessionLocal
from app.api.v1.router import api_router
from app.features.strava.sync import webhook_dispatcher

VERSION = "0.1.0"


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Running Log API...")
    await init_db()
    logger.info("Database initialized")

    webhook_dispatcher.configure(AsyncSessionLocal)
    if not settings.encryption_key:
        logger.warning("ENCRYPTION_KEY not set, Strava connect and sync will fail")

    yield

    # Shutdown
    await webhook_dispatcher.shutdown()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Running Log API",
    description="Training sessions, distance goals and Strava webhook sync",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with status and duration."""
    start = time.perf_counter()
    logger.info(f"--> {request.method} {request.url.path}")

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    message = (
        f"<-- {request.method} {request.url.path} "
        f"{response.status_code} {duration_ms:.1f}ms"
    )
    if response.status_code >= 500:
        logger.error(message)
    elif response.status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)
    return response


# === Error Handlers ===
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid request bodies and parameters are plain 400s."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION}
