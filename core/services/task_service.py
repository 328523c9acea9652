# =============================================================================
# core/services/task_service.py - Task Business Logic
# =============================================================================
# Owner-scoped CRUD over the task store.
# Separates HTTP concerns from database/business logic.
#
# The owner passed to each method is the authenticated caller. It is the
# only source of ownership: owner values inside payloads are discarded.
# =============================================================================

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from app.exceptions import TaskValidationError
from core.models.task import TaskCreate, TaskResponse, TaskUpdate
from core.services.task_store import TaskStore

logger = logging.getLogger(__name__)


def _validate(model: type[BaseModel], fields: BaseModel | dict[str, Any]) -> Any:
    """Accept an already-validated model or validate a raw field map."""
    if isinstance(fields, model):
        return fields
    if isinstance(fields, BaseModel):
        fields = fields.model_dump(by_alias=True)
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        raise TaskValidationError(e.errors()) from e


class TaskService:
    """
    Service for task management operations.

    Provides a clean interface between API routes and the task store.

    Example:
        service = TaskService(store)
        task = service.create_task("user-1", {"title": "Buy milk"})
        service.list_tasks("user-1")  # [task]
        service.list_tasks("user-2")  # []
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def create_task(
        self,
        owner: str,
        fields: TaskCreate | dict[str, Any],
    ) -> TaskResponse:
        """
        Create a task owned by the caller.

        Args:
            owner: Authenticated caller id
            fields: Task fields (any 'owner' key is ignored)

        Returns:
            The created task with its assigned id

        Raises:
            TaskValidationError: If required fields are missing or malformed
            StoreError: If the insert fails
        """
        payload = _validate(TaskCreate, fields)

        document = payload.to_document()
        document["owner"] = owner

        created = self.store.insert_one(document)
        logger.info(f"Created task {created.get('id')} for {owner}")
        return TaskResponse.from_document(created)

    def list_tasks(self, owner: str) -> list[TaskResponse]:
        """
        List every task owned by the caller.

        Raises:
            StoreError: If the query fails
        """
        documents = self.store.find_by_owner(owner)
        return [TaskResponse.from_document(document) for document in documents]

    def update_task(
        self,
        owner: str,
        task_id: str,
        fields: TaskUpdate | dict[str, Any],
    ) -> TaskResponse | None:
        """
        Replace a task owned by the caller.

        A task id that doesn't exist, or belongs to someone else, is not an
        error: nothing changes and None is returned.

        Raises:
            TaskValidationError: If required fields are missing or malformed
            StoreError: If the update fails
        """
        payload = _validate(TaskUpdate, fields)

        document = payload.to_document()
        document["owner"] = owner

        updated = self.store.replace_one(task_id, owner, document)
        if updated is None:
            logger.info(f"Update of task {task_id} by {owner} matched nothing")
            return None

        logger.info(f"Updated task {task_id} for {owner}")
        return TaskResponse.from_document(updated)

    def delete_task(self, owner: str, task_id: str) -> None:
        """
        Delete a task owned by the caller.

        Succeeds whether or not a matching task existed.

        Raises:
            StoreError: If the delete fails
        """
        deleted = self.store.delete_one(task_id, owner)
        logger.info(f"Delete of task {task_id} by {owner} removed {deleted} row(s)")
