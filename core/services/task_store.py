# =============================================================================
# core/services/task_store.py - Task Record Store
# =============================================================================
# Persistent storage for task documents.
#
# Every query and mutation takes the owner id and filters on it, so there
# is no way to read or change another user's task through this interface.
#
# Documents are plain dicts keyed by persisted field names:
#   id, owner, title, description, effort, dueDate
# =============================================================================

import logging
from datetime import date
from typing import Any, Protocol

from supabase import Client

from app.exceptions import StoreError
from lib.coercion import is_sentinel

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    """Owner-scoped task persistence used by the services."""

    def insert_one(self, document: dict[str, Any]) -> dict[str, Any]: ...

    def insert_many(self, documents: list[dict[str, Any]]) -> list[dict[str, Any]]: ...

    def find_by_owner(self, owner: str) -> list[dict[str, Any]]: ...

    def replace_one(
        self, task_id: str, owner: str, document: dict[str, Any]
    ) -> dict[str, Any] | None: ...

    def delete_one(self, task_id: str, owner: str) -> int: ...


def _to_row(document: dict[str, Any]) -> dict[str, Any]:
    """
    Convert a task document to a JSON-safe table row.

    NaN effort and NaT due dates are stored as NULL, dates as ISO strings.
    The id is never written; the database assigns it.
    """
    row = {}
    for key, value in document.items():
        if key == "id":
            continue
        if key in ("effort", "dueDate") and is_sentinel(value):
            row[key] = None
        elif isinstance(value, date):
            row[key] = value.isoformat()
        else:
            row[key] = value
    return row


class SupabaseTaskStore:
    """
    Task store backed by a Supabase (PostgREST) table.

    The client is passed in by whoever owns its lifecycle, normally the
    FastAPI lifespan.

    Example:
        store = SupabaseTaskStore(client, table="tasks")
        store.insert_one({"owner": "user-1", "title": "Buy milk"})
        tasks = store.find_by_owner("user-1")
    """

    def __init__(self, client: Client, table: str = "tasks"):
        self._client: Client | None = client
        self.table = table

    def _query(self):
        if self._client is None:
            raise StoreError("connect", "task store is closed")
        return self._client.table(self.table)

    def close(self) -> None:
        """Release the client. Later calls fail with StoreError."""
        self._client = None
        logger.info("Task store closed")

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_by_owner(self, owner: str) -> list[dict[str, Any]]:
        """
        Fetch all tasks owned by a user, in table order.

        Raises:
            StoreError: If the query fails
        """
        try:
            response = (
                self._query()
                .select("*")
                .eq("owner", owner)
                .execute()
            )
        except StoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch tasks for {owner}: {e}")
            raise StoreError("list", str(e)) from e

        tasks = response.data or []
        logger.debug(f"Fetched {len(tasks)} tasks for {owner}")
        return tasks

    def ping(self) -> None:
        """Run a trivial query to check connectivity."""
        try:
            self._query().select("id").limit(1).execute()
        except StoreError:
            raise
        except Exception as e:
            raise StoreError("ping", str(e)) from e

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_one(self, document: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a single task.

        Returns:
            The stored document including its assigned id

        Raises:
            StoreError: If the insert fails or returns nothing
        """
        try:
            response = (
                self._query()
                .insert(_to_row(document))
                .execute()
            )
        except StoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to insert task: {e}")
            raise StoreError("create", str(e)) from e

        if not response.data:
            raise StoreError("create", "insert returned no data")
        return response.data[0]

    def insert_many(self, documents: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert many tasks in one request.

        PostgREST runs a bulk insert in a single transaction, so either
        every row is stored or none is.

        Raises:
            StoreError: If the insert fails
        """
        rows = [_to_row(document) for document in documents]

        try:
            response = (
                self._query()
                .insert(rows)
                .execute()
            )
        except StoreError:
            raise
        except Exception as e:
            logger.error(f"Batch insert of {len(rows)} tasks failed: {e}")
            raise StoreError("batch insert", str(e)) from e

        logger.info(f"Batch inserted {len(rows)} tasks")
        return response.data or []

    def replace_one(
        self,
        task_id: str,
        owner: str,
        document: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Replace the task matching (task_id, owner).

        Returns:
            The updated document, or None if no task matched

        Raises:
            StoreError: If the update fails
        """
        try:
            response = (
                self._query()
                .update(_to_row(document))
                .eq("id", task_id)
                .eq("owner", owner)
                .execute()
            )
        except StoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to update task {task_id}: {e}")
            raise StoreError("update", str(e)) from e

        if not response.data:
            return None
        return response.data[0]

    def delete_one(self, task_id: str, owner: str) -> int:
        """
        Delete the task matching (task_id, owner).

        Returns:
            Number of deleted rows (0 or 1)

        Raises:
            StoreError: If the delete fails
        """
        try:
            response = (
                self._query()
                .delete()
                .eq("id", task_id)
                .eq("owner", owner)
                .execute()
            )
        except StoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete task {task_id}: {e}")
            raise StoreError("delete", str(e)) from e

        return len(response.data or [])
