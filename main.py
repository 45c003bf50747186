"""
Main FastAPI Application
Entry point for the SchoolDesk backend
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from schooldesk.config import settings
from schooldesk.errors import SchoolDeskError
from schooldesk.logging_config import configure_logging
from schooldesk.services.school_api import get_http_session

# Import routers
from schooldesk.api.routes import auth, announcements, calendar, leave_requests, students, parents, academic

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    logger.info("School API: %s", settings.SCHOOL_API_BASE_URL)

    yield

    # Shutdown
    logger.info("Shutting down...")
    get_http_session().close()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="School administration dashboard backend: announcements, calendar approvals and parent linking",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchoolDeskError)
async def school_desk_error_handler(request: Request, exc: SchoolDeskError):
    """Render workflow and API errors with the notice the dashboard shows"""
    return JSONResponse(
        status_code=exc.http_status,
        content={
            "status": "error",
            "message": exc.message,
            "notice": exc.notice().model_dump(mode="json"),
        },
    )


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(announcements.router, prefix="/api/announcements", tags=["Announcements"])
app.include_router(calendar.router, prefix="/api/calendar/events", tags=["Calendar"])
app.include_router(leave_requests.router, prefix="/api/leave-requests", tags=["Leave Requests"])
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(parents.router, prefix="/api/parents", tags=["Parents"])
app.include_router(academic.router, prefix="/api/academic", tags=["Academic"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "SchoolDesk API",
        "version": settings.APP_VERSION,
        "docs": "/api/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
