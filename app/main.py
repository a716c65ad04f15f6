"""
AYTO Data Sync - Main Application
FastAPI entry point for the record store, snapshot import/export and sync watermarks
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from app.config import settings
from app.database import init_db
from app.middleware.correlation_id import CorrelationIdMiddleware, REQUEST_ID_HEADER
from app.services.monitoring import setup_logging
from app.routers import (
    import_export_router,
    meta_router,
    participants_router,
    matching_nights_router,
    matchboxes_router,
    penalties_router,
    broadcast_notes_router,
    probability_cache_router,
)

# Structured Logging Setup
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ]
)
logger = structlog.get_logger()

# FastAPI App
app = FastAPI(
    title="AYTO Data Sync",
    description="Record store, snapshot import/export and update watermarks for the AYTO tracker",
    version="0.1.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
)

app.add_middleware(CorrelationIdMiddleware, header_name=REQUEST_ID_HEADER)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(import_export_router)
app.include_router(meta_router)
app.include_router(participants_router)
app.include_router(matching_nights_router)
app.include_router(matchboxes_router)
app.include_router(penalties_router)
app.include_router(broadcast_notes_router)
app.include_router(probability_cache_router)


@app.on_event("startup")
async def startup_event():
    """Application Startup"""
    if settings.environment != "testing":
        setup_logging()
    logger.info("startup", environment=settings.environment)

    # Initialize database connection
    init_db()
    logger.info("database_initialized")


@app.on_event("shutdown")
async def shutdown_event():
    """Application Shutdown"""
    logger.info("shutdown")


@app.get("/")
async def root():
    """Root Endpoint"""
    return {
        "message": "AYTO Data Sync API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """
    Health Check Endpoint
    """
    health_status = {
        "status": "healthy",
        "environment": settings.environment,
        "services": {
            "api": "running",
            "database": "configured" if settings.database_url else "not_configured",
        }
    }

    return JSONResponse(
        content=health_status,
        status_code=200
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development"
    )
