"""Main module for the prediction arena API."""
import logging
import subprocess
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from prediction_arena.container import Container, init_container
from prediction_arena.core import ArenaError
from prediction_arena.db.sessions import init_db
from prediction_arena.routers import (admin_router, auth_router,
                                      tournaments_router, users_router)
from prediction_arena.services.seed import seed_demo_data
from prediction_arena.utils import configure_logging, utcnow

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Open the pool, create tables, start the scheduler; stop both on shutdown."""
    container: Container = fastapi_app.state.container
    settings = container.settings()
    engine = container.engine()
    init_db(engine)
    if settings.seed_demo_data:
        seed_demo_data(engine, container.clock())

    scheduler = container.scheduler()
    if settings.scheduler_enabled:
        scheduler.start()

    yield

    scheduler.shutdown()
    engine.dispose()
    logger.info("Database connections closed")


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI application around a DI container."""
    container = container or init_container()
    settings = container.settings()

    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Prediction tournaments: points ledger, entry and settlement",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    fastapi_app.state.limiter = limiter
    fastapi_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    fastapi_app.add_middleware(SlowAPIMiddleware)

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @fastapi_app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s - %s - %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    fastapi_app.add_exception_handler(ArenaError, container.error_mapper().handle)

    api = APIRouter(prefix="/api")
    api.include_router(auth_router)
    api.include_router(tournaments_router)
    api.include_router(users_router)
    api.include_router(admin_router)

    @api.get("/health")
    def health():
        """Return health check status."""
        return {"status": "OK", "timestamp": utcnow().isoformat()}

    fastapi_app.include_router(api)
    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn)."""
    configure_logging(app.state.container.settings().log_level)
    uvicorn.run("prediction_arena.main:app", host="0.0.0.0", port=8000)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    configure_logging("DEBUG")
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    uvicorn.run("prediction_arena.main:app", host="127.0.0.1", port=8000, reload=True)
