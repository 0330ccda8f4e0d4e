from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import os
import time
import uuid
from donor_registry.core.config import settings
from donor_registry.core.logging import logger
from donor_registry.core.exceptions import (
    http_exception_handler,
    validation_exception_handler,
    donor_validation_exception_handler,
    duplicate_contact_exception_handler,
    general_exception_handler
)
from donor_registry.api.v1.api import api_router
from donor_registry.database.database import init_db
from donor_registry.repositories.donor_repository import DuplicateContactError
from donor_registry.services.donor_intake import DonorValidationError

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Blood Donor Registry API",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(DonorValidationError, donor_validation_exception_handler)
app.add_exception_handler(DuplicateContactError, duplicate_contact_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)

# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    request_id = str(uuid.uuid4())

    # Add request ID to request state
    request.state.request_id = request_id

    logger.info(
        f"Request: {request.method} {request.url}",
        extra={"request_id": request_id}
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"Response: {response.status_code} - {process_time:.3f}s",
        extra={"request_id": request_id}
    )

    response.headers["X-Request-ID"] = request_id

    return response

# Include API routes
app.include_router(api_router, prefix="/api")

@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Donation cooldown = {settings.DONATION_COOLDOWN_DAYS} days")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info("Application shutting down")

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }

# Static front-end, mounted last so it never shadows the API
if os.path.isdir(settings.STATIC_DIRECTORY):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIRECTORY, html=True), name="static")
