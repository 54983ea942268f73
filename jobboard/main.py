# ========================================
# jobboard/main.py
# ========================================

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard import config
from jobboard.database import close_mongo_connection, connect_to_mongo
from jobboard.lifecycle.errors import LifecycleError
from jobboard.routes.deps import get_notifier
from jobboard.utils.logging_config import setup_logging

# ===========================
# IMPORT ALL ROUTERS
# ===========================

# Jobs & moderation
from jobboard.routes.job import router as job_router
from jobboard.routes.admin_jobs import router as admin_jobs_router

# Applications
from jobboard.routes.application import router as application_router

# Saved Jobs
from jobboard.routes.saved_job import router as saved_job_router

# Skills & Categories
from jobboard.routes.taxonomy import router as taxonomy_router

logger = logging.getLogger(__name__)

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="Job Board Lifecycle API",
    description="Job moderation, application pipeline and reference data for the job board",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ===========================
# CORS MIDDLEWARE
# ===========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===========================
# ERROR HANDLING
# ===========================

@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    logger.warning(
        "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Configure logging, connect to MongoDB and make sure the unique indexes exist"""
    setup_logging()
    await connect_to_mongo()


@app.on_event("shutdown")
async def stop_db():
    """Flush pending notifications, then close MongoDB"""
    await get_notifier().drain()
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(job_router)
app.include_router(admin_jobs_router)
app.include_router(application_router)
app.include_router(saved_job_router)
app.include_router(taxonomy_router)

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    return {
        "status": "Job Board Lifecycle API Running",
        "version": "1.0.0",
        "documentation": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": "1.0.0"}
