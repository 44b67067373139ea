# course_portal/main.py - Application factory, middleware and error rendering
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback
import time

from course_portal import __version__
from course_portal.core.config import settings
from course_portal.core.db import db_manager, get_engine, health_check as db_health_check
from course_portal.core.errors import PortalError
from course_portal.core.logging_config import configure_logging
from course_portal.models import Base
from course_portal.api.routers import auth, profile, courses, registrations, dashboard, students

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Course Portal API...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database URL: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'local'}")

    engine = get_engine()

    # Migrations own the schema outside development
    if settings.is_development:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

    yield

    db_manager.close()
    logger.info("Shutting down Course Portal API...")


app = FastAPI(
    title=settings.API_TITLE,
    description="Course registration with capacity-checked enrollment",
    version=settings.API_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response


app.add_middleware(CORSMiddleware, **settings.get_cors_config())


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Render business-rule errors as {"detail", "code"}"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    logger.error(traceback.format_exc())

    if settings.is_development:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "traceback": traceback.format_exc()
            }
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


@app.get("/health")
async def health_check():
    database = db_health_check()
    return JSONResponse(
        status_code=200 if database["status"] == "healthy" else 503,
        content={
            "status": database["status"],
            "environment": settings.ENV,
            "version": __version__,
            "database": database,
        },
    )


logger.info("Registering API routers...")
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(courses.router, prefix="/api/courses", tags=["Courses"])
app.include_router(registrations.router, prefix="/api/registrations", tags=["Registrations"])
app.include_router(students.router, prefix="/api/students", tags=["Student Records"])
logger.info("All routers registered successfully")
