"""
FastAPI Application

HTTP API for mentor assignment and interview session booking.
"""

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mentor_booking.api import mentor_assignment, pricing, sessions, smart_booking
from mentor_booking.config import Config
from mentor_booking.db.mongo import ensure_indexes
from mentor_booking.services.container import get_container
from mentor_booking.utils.limiter import limiter
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

_DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _cors_origins(config: Optional[Config]) -> list:
    origins = list(_DEFAULT_ORIGINS)
    if config and config.server.frontend_url:
        origins.append(config.server.frontend_url.rstrip("/"))
    # Extra origins from env (comma-separated), e.g. CORS_ORIGINS=https://app.example.com
    for origin in os.getenv("CORS_ORIGINS", "").split(","):
        origin = origin.strip().rstrip("/")
        if origin and origin not in origins:
            origins.append(origin)
    return origins


def create_app(config: Optional[Config] = None, init_db: bool = True) -> FastAPI:
    app = FastAPI(
        title="Mentor Booking API",
        description="Mentor assignment and slot booking for mock interviews",
        version="1.0.0",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(config),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(smart_booking.router)
    app.include_router(mentor_assignment.router)
    app.include_router(sessions.router)
    app.include_router(pricing.router)

    @app.get("/health")
    def health():
        """Liveness probe: returns 200 if the process is running."""
        return {"status": "ok"}

    if init_db:
        @app.on_event("startup")
        def startup_ensure_indexes():
            """Log MongoDB database name and ensure the booking indexes exist."""
            db = get_container().db
            logger.info(f"[API] MongoDB database in use: {db.name}")
            try:
                ensure_indexes(db)
            except Exception as e:
                logger.warning(f"[API] Index creation skipped or partial: {e}")

    return app
