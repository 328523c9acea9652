# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .task_store import SupabaseTaskStore, TaskStore
from .task_service import TaskService
from .import_service import BulkImporter
from .export_service import BulkExporter

__all__ = [
    "SupabaseTaskStore",
    "TaskStore",
    "TaskService",
    "BulkImporter",
    "BulkExporter",
]
