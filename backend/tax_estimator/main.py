"""
Tax Estimator FastAPI Application

Main application entry point for the tax estimation service.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tax_estimator.config import settings
from tax_estimator.routers import tax, upload
from tax_estimator.services.tax_engine import TaxEstimationService, utc_timestamp


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# Create FastAPI application instance
app = FastAPI(
    title="Tax Estimator API",
    description="Federal income tax estimation with optional supporting documents",
    version=settings.APP_VERSION
)


def create_audit_logger():
    """
    Build the Cloud Logging audit service when enabled.

    Returns:
        AuditLoggingService instance, or None when audit logging is disabled
    """
    if not settings.ENABLE_AUDIT_LOGGING:
        return None

    from tax_estimator.services.logging_service import AuditLoggingService
    return AuditLoggingService(
        project_id=settings.PROJECT_ID,
        log_name=settings.AUDIT_LOG_NAME
    )


# Make services available to routers
app.state.tax_engine = TaxEstimationService(tax_year=settings.TAX_YEAR)
app.state.audit_logger = create_audit_logger()


@app.on_event("startup")
async def startup_event():
    """
    Run on application startup.
    Logs the effective configuration.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"  - Tax year: {settings.TAX_YEAR}")
    logger.info(f"  - Max file size: {settings.MAX_FILE_SIZE} bytes")
    logger.info(f"  - Max files per request: {settings.MAX_UPLOAD_FILES}")
    logger.info(f"  - Audit logging: {'enabled' if app.state.audit_logger else 'disabled'}")
    logger.info("=" * 60)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(tax.router)
app.include_router(upload.router)


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Dictionary containing service status and current server time
    """
    return {
        "status": "OK",
        "timestamp": utc_timestamp()
    }


@app.get("/config", tags=["health"])
async def get_config():
    """
    Get non-sensitive configuration information.

    Returns:
        Dictionary containing configuration details
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "tax_year": settings.TAX_YEAR,
        "max_file_size": settings.MAX_FILE_SIZE,
        "max_upload_files": settings.MAX_UPLOAD_FILES
    }


def run():
    """Serve the application with uvicorn."""
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
