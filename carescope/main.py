"""
CareScope - Main FastAPI Application
RN delegation tracking for assisted-living and memory-care communities
"""

import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from carescope.config import settings
from carescope.errors import (
    CareScopeError, DelegationStateError, DelegationValidationError, NotFoundError
)
from carescope.services.stores import get_registry
from carescope.routes import (
    communities as community_routes,
    dashboard as dashboard_routes,
    delegations as delegation_routes,
    med_techs as med_tech_routes,
    residents as resident_routes,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting CareScope application...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Authorization window: {settings.min_auth_days}-{settings.max_auth_days} days "
        f"(default {settings.default_auth_days})"
    )
    get_registry()

    yield

    # Shutdown
    logger.info("Shutting down CareScope application...")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="CareScope",
    description="RN delegation lifecycle tracking for assisted living and memory care",
    version=APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(community_routes.router)
app.include_router(resident_routes.router)
app.include_router(med_tech_routes.router)
app.include_router(delegation_routes.router)
app.include_router(dashboard_routes.router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": APP_VERSION,
        "environment": settings.environment
    }


# =============================================================================
# Error Handlers
# =============================================================================

def error_response(status_code: int, exc: CareScopeError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.errors,
            },
            "timestamp": datetime.now().isoformat()
        }
    )


@app.exception_handler(DelegationValidationError)
async def validation_error_handler(request: Request, exc: DelegationValidationError):
    """Every collected violation is returned to the caller"""
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


@app.exception_handler(DelegationStateError)
async def state_error_handler(request: Request, exc: DelegationStateError):
    """Operation on a rescinded delegation"""
    return error_response(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    """Unknown identifier"""
    return error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "timestamp": datetime.now().isoformat()
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An error occurred",
            "timestamp": datetime.now().isoformat()
        }
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "carescope.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower()
    )
