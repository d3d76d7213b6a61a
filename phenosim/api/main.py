"""
phenosim API Service
====================
FastAPI application for phenotype similarity scoring.

Module: phenosim/api/main.py

Purpose:
    Main FastAPI application entry point providing:
    - REST API endpoint for PhenoGrid scoring
    - Health check and readiness probes
    - CORS middleware
    - OpenAPI documentation

Endpoints:
    POST /api/v1/phenogrid - Score candidate models, return the PhenoGrid
    GET  /api/v1/config    - Hyperparameter specs and current values
    GET  /health           - Health check
    GET  /ready            - Readiness probe

Dependencies:
    - fastapi: Web framework
    - uvicorn: ASGI server
    - phenosim.inference.pipeline: ScoringPipeline
    - phenosim.config: HyperparameterManager

Configuration:
    PHENOSIM_CONFIG: Optional YAML file loaded into the hyperparameter
                     manager at startup

Version: 1.0.0
"""
from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from phenosim.config import HyperparameterManager, get_hyperparameter_manager
from phenosim.inference import ScoringPipeline, create_scoring_pipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application State
# =============================================================================
class AppState:
    """Application state container"""

    def __init__(self):
        self.pipeline: Optional[ScoringPipeline] = None
        self.hyperparameters: Optional[HyperparameterManager] = None
        self.is_ready = False
        self.start_time = None
        self.version = "1.0.0"


app_state = AppState()


# =============================================================================
# Lifespan Management
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting phenosim API...")
    app_state.start_time = datetime.now()

    try:
        initialize_pipeline(os.environ.get("PHENOSIM_CONFIG"))
        app_state.is_ready = True
        logger.info("API service ready")
    except (OSError, ValueError) as e:
        logger.error(f"Startup failed: {e}")
        app_state.is_ready = False

    yield

    # Shutdown
    logger.info("Shutting down phenosim API...")
    app_state.is_ready = False


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="phenosim API",
    description="Cross-species phenotype similarity scoring (Phive) and PhenoGrid ranking",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Logging Middleware
# =============================================================================
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"- {response.status_code} "
        f"- {process_time:.3f}s"
    )

    response.headers["X-Process-Time"] = str(process_time)
    return response


# =============================================================================
# Exception Handlers
# =============================================================================
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "path": str(request.url.path),
        },
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle rejected input (empty query, unknown organism, bad score)"""
    logger.warning(f"Rejected request: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": str(exc),
            "status_code": 422,
            "path": str(request.url.path),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "path": str(request.url.path),
        },
    )


# =============================================================================
# Health & Readiness Endpoints
# =============================================================================
@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Basic health check

    Returns service status and uptime.
    """
    uptime = None
    if app_state.start_time:
        uptime = (datetime.now() - app_state.start_time).total_seconds()

    return {
        "status": "healthy",
        "version": app_state.version,
        "uptime_seconds": uptime,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/ready", tags=["Health"])
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness probe

    Returns whether the service is ready to accept requests.
    """
    if not app_state.is_ready:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready",
        )

    return {
        "ready": True,
        "pipeline_loaded": app_state.pipeline is not None,
    }


# =============================================================================
# Import and Register Routes
# =============================================================================
from phenosim.api.routes import config, phenogrid  # noqa: E402

app.include_router(phenogrid.router, prefix="/api/v1", tags=["PhenoGrid"])
app.include_router(config.router, prefix="/api/v1", tags=["Config"])


# =============================================================================
# Root Endpoint
# =============================================================================
@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """API root - returns basic information"""
    return {
        "name": "phenosim API",
        "version": app_state.version,
        "description": "Phenotype similarity scoring",
        "docs": "/docs",
        "health": "/health",
    }


# =============================================================================
# Utility Functions
# =============================================================================
def get_app_state() -> AppState:
    """Get application state (for dependency injection)"""
    return app_state


def initialize_pipeline(config_path: Optional[str] = None) -> ScoringPipeline:
    """
    Initialize the scoring pipeline from the hyperparameter manager.

    Called at startup, and lazily on the first scoring request if startup
    did not build it.

    Args:
        config_path: Optional YAML file with hyperparameter overrides

    Raises:
        FileNotFoundError: if config_path does not exist
        ValueError: if the file holds an invalid value
    """
    if app_state.pipeline is not None:
        return app_state.pipeline

    manager = get_hyperparameter_manager()
    if config_path:
        logger.info(f"Loading hyperparameters from {config_path}")
        manager.load_from_yaml(config_path)

    app_state.hyperparameters = manager
    app_state.pipeline = create_scoring_pipeline(**manager.to_pipeline_config())
    logger.info(f"Pipeline initialized: {app_state.pipeline.get_pipeline_config()}")
    return app_state.pipeline


# =============================================================================
# CLI Entry Point
# =============================================================================
def main():
    """Run the API server"""
    import uvicorn

    uvicorn.run(
        "phenosim.api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )


if __name__ == "__main__":
    main()
