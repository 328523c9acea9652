# =============================================================================
# app/routers/tasks.py - Task Endpoints
# =============================================================================
# CRUD plus bulk import/export for the caller's own tasks.
# All endpoints require authentication; the caller's id is the owner for
# every query and write.
#
# Service calls block on store I/O, so they run in the threadpool and
# don't hold up other requests on the event loop.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from app.auth import get_current_user, AuthUser
from app.config import settings
from app.dependencies import BulkExporterDep, BulkImporterDep, TaskServiceDep
from app.exceptions import FileTooLargeError, InvalidFileTypeError
from core.models.task import TaskCreate, TaskResponse, TaskUpdate
from core.services.export_service import EXPORT_FILENAME, XLSX_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter()

CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


# =============================================================================
# Bulk Endpoints
# =============================================================================

@router.get("/export")
async def export_tasks(
    user: CurrentUser,
    exporter: BulkExporterDep,
):
    """
    Download all of the caller's tasks as an Excel workbook.

    One sheet named "Tasks" with columns Title, Description,
    Effort (Days) and Due Date.
    """
    content = await run_in_threadpool(exporter.export_tasks, user.id)

    return StreamingResponse(
        iter([content]),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename={EXPORT_FILENAME}",
        }
    )


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def upload_tasks(
    file: Annotated[UploadFile, File(description="CSV or .xlsx file with a header row")],
    user: CurrentUser,
    importer: BulkImporterDep,
):
    """
    Bulk-create tasks from a CSV (or .xlsx) file.

    Header names map to task fields (title, description, effort, dueDate).
    Every row becomes a task owned by the caller; any owner column in the
    file is ignored. Unparseable effort/dueDate values are stored as
    empty rather than rejecting the file.

    The import is all-or-nothing.
    """
    filename = file.filename or "tasks.csv"
    file_ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if file_ext not in settings.allowed_extensions_list:
        raise InvalidFileTypeError(filename, settings.allowed_extensions_list)

    content = await file.read()
    file_size_bytes = len(content)

    if file_size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(file_size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    logger.info(f"Processing task upload: {filename} ({file_size_bytes} bytes) for {user.id}")

    await run_in_threadpool(importer.import_tasks, user.id, content, filename)

    return PlainTextResponse("Tasks uploaded", status_code=status.HTTP_201_CREATED)


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED, response_model=TaskResponse)
async def create_task(
    payload: TaskCreate,
    user: CurrentUser,
    service: TaskServiceDep,
):
    """
    Create a task.

    The owner is always the authenticated caller; an 'owner' field in the
    body is ignored.
    """
    return await run_in_threadpool(service.create_task, user.id, payload)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    user: CurrentUser,
    service: TaskServiceDep,
):
    """List all tasks owned by the caller."""
    return await run_in_threadpool(service.list_tasks, user.id)


@router.put("/{task_id}", response_model=TaskResponse | None)
async def update_task(
    task_id: Annotated[str, Path(description="Task ID")],
    payload: TaskUpdate,
    user: CurrentUser,
    service: TaskServiceDep,
):
    """
    Replace one of the caller's tasks.

    Returns the updated task, or null if the caller owns no task with
    this id (nothing is changed in that case).
    """
    return await run_in_threadpool(service.update_task, user.id, task_id, payload)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: Annotated[str, Path(description="Task ID")],
    user: CurrentUser,
    service: TaskServiceDep,
):
    """
    Delete one of the caller's tasks.

    Returns 204 whether or not a matching task existed.
    """
    await run_in_threadpool(service.delete_task, user.id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
