# =============================================================================
# core/models/task.py - Task Schemas
# =============================================================================
# These models define the API contract for task operations:
# - TaskCreate: Input for creating a task
# - TaskUpdate: Full replacement document for an existing task
# - TaskResponse: Output when returning a task to clients
#
# Ownership is never part of the input contract. The owner always comes
# from the authenticated caller, so any 'owner' key sent by a client is
# dropped during validation.
# =============================================================================

import math
from datetime import date, datetime
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskFields(BaseModel):
    """
    Client-editable task fields.

    Unknown keys (including 'owner' and 'id') are ignored.

    Example:
        {
            "title": "Write quarterly report",
            "description": "Numbers from finance first",
            "effort": 2.5,
            "dueDate": "2024-03-31"
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Short task title (required)"
    )

    description: str | None = Field(
        default=None,
        description="Optional free-text description"
    )

    # Estimated effort in days
    effort: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Effort estimate in days"
    )

    due_date: date | None = Field(
        default=None,
        alias="dueDate",
        description="Due date (YYYY-MM-DD)"
    )

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        # Same rule as bulk import; the title itself is kept verbatim
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document keyed by persisted field names."""
        return self.model_dump(by_alias=True)


class TaskCreate(TaskFields):
    """Schema for POST /tasks."""


class TaskUpdate(TaskFields):
    """
    Schema for PUT /tasks/{task_id}.

    An update replaces the whole document, so the same fields are
    required as on create.
    """


class TaskResponse(BaseModel):
    """
    Schema for returning a task to clients.

    Built from store documents. Import sentinels (NaN effort, invalid
    due date) have no JSON representation and are returned as null.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "owner": "user-123",
            "title": "Buy milk",
            "description": null,
            "effort": 2.0,
            "dueDate": "2024-01-01"
        }
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Store-assigned task identifier")
    owner: str = Field(..., description="Identifier of the owning user")
    title: str
    description: str | None = None
    effort: float | None = None
    due_date: date | None = Field(default=None, alias="dueDate")

    @field_validator("id", "owner", mode="before")
    @classmethod
    def _stringify_identifier(cls, value: Any) -> Any:
        # Stores may hand back integer or UUID ids
        if value is None:
            return value
        return str(value)

    @field_validator("effort", mode="before")
    @classmethod
    def _effort_sentinel_to_none(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isnan(value):
            return None
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date_sentinel_to_none(cls, value: Any) -> Any:
        if value is None or value is pd.NaT:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            # timestamp columns come back as full ISO strings
            return value[:10]
        return value

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "TaskResponse":
        """Build a response from a store document."""
        return cls.model_validate(document)
