# =============================================================================
# core/services/export_service.py - Task Spreadsheet Export
# =============================================================================
# Builds an .xlsx workbook of the caller's tasks: one sheet named "Tasks",
# four columns (Title, Description, Effort (Days), Due Date).
#
# The whole workbook is encoded in memory before anything is returned, so
# a failure never leaves a half-written file in the response.
# =============================================================================

import io
import logging

import pandas as pd
from openpyxl.utils import get_column_letter

from app.exceptions import ExportError, StoreError
from core.models.task import TaskResponse
from core.services.task_store import TaskStore

logger = logging.getLogger(__name__)

SHEET_NAME = "Tasks"
EXPORT_FILENAME = "tasks.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (task attribute, column header, column width)
EXPORT_COLUMNS = [
    ("title", "Title", 30),
    ("description", "Description", 30),
    ("effort", "Effort (Days)", 15),
    ("due_date", "Due Date", 20),
]


def build_workbook(tasks: list[TaskResponse]) -> bytes:
    """
    Encode tasks as an .xlsx workbook.

    Missing values and import sentinels become empty cells. Text is
    always written as text, never as a formula. With no tasks the sheet
    holds just the header row.

    Returns:
        Workbook bytes
    """
    headers = [header for _, header, _ in EXPORT_COLUMNS]
    rows = [
        [getattr(task, attribute) for attribute, _, _ in EXPORT_COLUMNS]
        for task in tasks
    ]
    frame = pd.DataFrame(rows, columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl", date_format="YYYY-MM-DD") as writer:
        frame.to_excel(writer, sheet_name=SHEET_NAME, index=False)

        worksheet = writer.sheets[SHEET_NAME]
        for position, (_, _, width) in enumerate(EXPORT_COLUMNS, start=1):
            worksheet.column_dimensions[get_column_letter(position)].width = width

        # openpyxl turns any string starting with "=" into a formula
        for row in worksheet.iter_rows(min_row=2):
            for cell in row:
                if isinstance(cell.value, str) and cell.value.startswith("="):
                    cell.data_type = "s"

    return buffer.getvalue()


class BulkExporter:
    """
    Exports a user's tasks as a spreadsheet. Never writes to the store.

    Example:
        exporter = BulkExporter(store)
        content = exporter.export_tasks("user-1")
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def export_tasks(self, owner: str) -> bytes:
        """
        Build the workbook for every task the caller owns.

        Raises:
            ExportError: If reading the tasks or encoding the workbook fails
        """
        try:
            documents = self.store.find_by_owner(owner)
        except StoreError as e:
            raise ExportError(e.message) from e

        try:
            tasks = [TaskResponse.from_document(document) for document in documents]
            content = build_workbook(tasks)
        except Exception as e:
            logger.error(f"Workbook encoding failed for {owner}: {e}")
            raise ExportError(str(e)) from e

        logger.info(f"Exported {len(tasks)} tasks for {owner} ({len(content)} bytes)")
        return content
