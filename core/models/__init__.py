# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - task.py: Task create/update/response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .task import (
    TaskCreate,
    TaskFields,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    "TaskCreate",
    "TaskFields",
    "TaskResponse",
    "TaskUpdate",
]
