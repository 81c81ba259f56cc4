import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.cors import DashboardCORSMiddleware
from app.core.database import init_db
from app.core.logging_config import setup_logging
from app.api.endpoints import (
    assessments,
    audit,
    candidates,
    grading,
    health,
    notifications,
    recommendations,
    reports,
    scoring,
    skills,
)

# Configure logging
setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Interview grading, notifications and hiring analytics for the assessment admin dashboard",
    lifespan=lifespan
)

# Configure CORS (the grading proxy answers its own preflights)
app.add_middleware(
    DashboardCORSMiddleware,
    exempt_paths=["/api/grade-interview"],
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Frontend proxy routes
app.include_router(grading.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")

# Admin dashboard routes
app.include_router(recommendations.router, prefix=settings.API_V1_STR)
app.include_router(audit.router, prefix=settings.API_V1_STR)
app.include_router(reports.router, prefix=settings.API_V1_STR)
app.include_router(candidates.router, prefix=settings.API_V1_STR)
app.include_router(scoring.router, prefix=settings.API_V1_STR)
app.include_router(skills.router, prefix=settings.API_V1_STR)
app.include_router(assessments.router, prefix=settings.API_V1_STR)

app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": settings.PROJECT_NAME,
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
