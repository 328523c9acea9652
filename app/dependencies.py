# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The task store lives on app.state (created by the lifespan in main.py).
# Services are cheap wrappers around it and are built per request.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.exceptions import StoreError
from core.services.export_service import BulkExporter
from core.services.import_service import BulkImporter
from core.services.task_service import TaskService
from core.services.task_store import TaskStore


def get_task_store(request: Request) -> TaskStore:
    """
    Get the task store created at startup.

    Raises:
        StoreError: If the application started without a store
    """
    store = getattr(request.app.state, "task_store", None)
    if store is None:
        raise StoreError("connect", "task store is not initialized")
    return store


TaskStoreDep = Annotated[TaskStore, Depends(get_task_store)]


def get_task_service(store: TaskStoreDep) -> TaskService:
    """Owner-scoped CRUD service."""
    return TaskService(store)


def get_bulk_importer(store: TaskStoreDep) -> BulkImporter:
    """CSV/xlsx importer."""
    return BulkImporter(store)


def get_bulk_exporter(store: TaskStoreDep) -> BulkExporter:
    """xlsx exporter."""
    return BulkExporter(store)


# Type aliases for dependency injection
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
BulkImporterDep = Annotated[BulkImporter, Depends(get_bulk_importer)]
BulkExporterDep = Annotated[BulkExporter, Depends(get_bulk_exporter)]
