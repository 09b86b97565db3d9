"""
FastAPI application entry point for Patient Service API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging with request ID propagation
- Dependency Injection: Services and repositories injected via Depends()
- Exception Handling: every failure rendered as an ErrorResponse
- CORS Middleware: cross-origin requests from one configured frontend origin
- Lifespan Management: Database initialization at startup

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                     │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack                                           │
    │    ├── LoggingMiddleware  - Request logging & metrics       │
    │    └── CORSMiddleware     - Single allowed origin           │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /, /health, /ready, /metrics         │
    │    └── patients.py   - /api/patients CRUD and lookups       │
    ├─────────────────────────────────────────────────────────────┤
    │  PatientService      ← Injected via Depends()               │
    │  PatientRepository   ← Injected into the service            │
    │  Database (SQLite)   ← Injected into the repository         │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, CORS_ORIGIN
from core.dependencies import get_database
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import health_router, patients_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, then initialize the database so the schema
    exists before the first request. Shutdown: log only.
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Starting Patient Service API...")

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path, "cors_origin": CORS_ORIGIN}
    )

    yield

    logger.info("Patient Service API shutting down...")


def create_app() -> FastAPI:
    """Build the application with handlers, middleware and routers."""
    application = FastAPI(
        title="Patient registration and management API",
        description="APIs for registering and managing patients",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    setup_exception_handlers(application)

    # Middleware runs in reverse order of registration:
    # LoggingMiddleware sees the request first.
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingMiddleware)

    application.include_router(health_router)
    application.include_router(patients_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
