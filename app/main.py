# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the TaskTracker API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    TaskTrackerException,
    tasktracker_exception_handler,
    validation_exception_handler,
)
from app.routers import health, tasks
from app.auth import routes as auth_routes
from core.services.task_store import SupabaseTaskStore
from lib.supabase_client import create_supabase_client

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: Create the Supabase client and the task store
    - Shutdown: Release the store
    """
    logger.info(f"Starting TaskTracker API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    client = create_supabase_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    app.state.task_store = SupabaseTaskStore(client, table=settings.TASKS_TABLE)

    yield

    logger.info("Shutting down TaskTracker API")
    app.state.task_store.close()
    app.state.task_store = None


# Create FastAPI application
app = FastAPI(
    title="TaskTracker API",
    description="""
## Personal Task Tracking API

Every request is authenticated with a bearer token. Tasks are private:
each user only ever sees, changes or deletes their own.

### Features

- **CRUD**: Create, list, replace and delete tasks
- **Bulk Import**: Upload a CSV (or .xlsx) file to create many tasks at once
- **Export**: Download all your tasks as an Excel workbook

### Quick Start

```bash
# Create a task
curl -X POST http://localhost:8000/api/v1/tasks \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"title": "Buy milk", "effort": 0.5, "dueDate": "2024-01-01"}'

# Import tasks
curl -X POST http://localhost:8000/api/v1/tasks/upload \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "file=@tasks.csv"

# Export tasks
curl -o tasks.xlsx http://localhost:8000/api/v1/tasks/export \\
  -H "Authorization: Bearer $TOKEN"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Verify bearer tokens",
        },
        {
            "name": "Tasks",
            "description": "Create, list, update, delete, import and export tasks",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(TaskTrackerException)
async def handle_tasktracker_exception(request: Request, exc: TaskTrackerException):
    """Handle custom TaskTracker exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    return await tasktracker_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400s."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Task endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "TaskTracker API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
