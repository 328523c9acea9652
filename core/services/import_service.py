# =============================================================================
# core/services/import_service.py - Bulk Task Import
# =============================================================================
# Turns an uploaded file into tasks owned by the caller:
#   1. Parse the buffer into rows using the header row as field names
#      (CSV, or the first sheet of an .xlsx workbook)
#   2. Build one task document per row, force the owner, coerce
#      effort/dueDate with sentinel-on-failure
#   3. Insert every document in a single batch
#
# The import is all-or-nothing from the caller's side: any parse,
# validation or store failure becomes one BulkImportError and no rows
# are reported as imported.
# =============================================================================

import io
import logging
from typing import Any

import pandas as pd

from app.exceptions import BulkImportError, StoreError
from core.services.task_store import TaskStore
from lib.coercion import coerce_due_date, coerce_effort

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

TASK_FIELDS = ("title", "description", "effort", "dueDate")

# Normalized header -> task field. Includes the export headers so an
# exported workbook can be imported again.
HEADER_ALIASES = {
    "title": "title",
    "description": "description",
    "effort": "effort",
    "effort (days)": "effort",
    "duedate": "dueDate",
    "due date": "dueDate",
    "due_date": "dueDate",
}

ENCODINGS_TO_TRY = ["utf-8-sig", "latin-1"]
XLSX_MAGIC = b"PK\x03\x04"


# =============================================================================
# Parsing
# =============================================================================

def _is_spreadsheet(content: bytes, filename: str | None) -> bool:
    if filename and filename.lower().endswith(".xlsx"):
        return True
    return content.startswith(XLSX_MAGIC)


def _read_csv_bytes(content: bytes) -> pd.DataFrame:
    """Read CSV bytes as text cells, trying encodings in order."""
    for encoding in ENCODINGS_TO_TRY:
        try:
            return pd.read_csv(
                io.BytesIO(content),
                encoding=encoding,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except (UnicodeDecodeError, UnicodeError):
            continue
    raise ValueError("Could not decode file with any supported encoding")


def _read_xlsx_bytes(content: bytes) -> pd.DataFrame:
    """Read the first sheet of a workbook as text cells."""
    return pd.read_excel(
        io.BytesIO(content),
        sheet_name=0,
        dtype=str,
        keep_default_na=False,
        engine="openpyxl",
    )


def _normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Map header names to task fields and drop everything else.

    Columns that aren't task fields (id, owner, extras) are not persisted.
    When two headers map to the same field the first one wins.
    """
    renamed = {}
    ignored = []
    for column in frame.columns:
        field = HEADER_ALIASES.get(str(column).strip().lower())
        if field:
            renamed[column] = field
        else:
            ignored.append(str(column))

    if ignored:
        logger.debug(f"Ignoring non-task columns: {ignored}")

    frame = frame[list(renamed)].rename(columns=renamed)
    return frame.loc[:, ~frame.columns.duplicated()]


def read_task_rows(content: bytes, filename: str | None = None) -> pd.DataFrame:
    """
    Parse an uploaded file into a frame of task rows.

    Every cell is read as text; typing happens later in build_documents.
    Rows with no content at all are dropped.

    Args:
        content: Raw file bytes
        filename: Original filename, used to spot .xlsx uploads

    Returns:
        DataFrame whose columns are task field names

    Raises:
        BulkImportError: If the file can't be parsed or has no title column
    """
    try:
        if _is_spreadsheet(content, filename):
            frame = _read_xlsx_bytes(content)
        else:
            frame = _read_csv_bytes(content)
    except pd.errors.EmptyDataError as e:
        raise BulkImportError("file is empty") from e
    except Exception as e:
        raise BulkImportError(f"could not parse file: {e}") from e

    frame = frame.fillna("")
    if len(frame):
        blank = frame.astype(str).apply(lambda column: column.str.strip() == "").all(axis=1)
        frame = frame[~blank]
    frame = _normalize_columns(frame)

    if "title" not in frame.columns:
        raise BulkImportError(
            "header row has no 'title' column",
            details={"expected_columns": list(TASK_FIELDS)},
        )

    logger.info(f"Parsed {len(frame)} task rows from {filename or 'upload'}")
    return frame


# =============================================================================
# Document Building
# =============================================================================

def build_documents(frame: pd.DataFrame, owner: str) -> list[dict[str, Any]]:
    """
    Build task documents from parsed rows.

    - title is copied verbatim
    - description is copied, with blank cells stored as missing
    - owner is always the caller, whatever the file says
    - effort and dueDate are coerced; failures become sentinels

    Raises:
        BulkImportError: If any row has no title (nothing is inserted)
    """
    documents = []
    missing_title = []
    sentinel_counts = {"effort": 0, "dueDate": 0}

    for position, record in enumerate(frame.to_dict(orient="records"), start=1):
        title = record.get("title")
        if title is None or not str(title).strip():
            missing_title.append(position)
            continue

        description = record.get("description")
        effort = coerce_effort(record.get("effort"))
        due_date = coerce_due_date(record.get("dueDate"))

        if not effort.ok:
            sentinel_counts["effort"] += 1
        if not due_date.ok:
            sentinel_counts["dueDate"] += 1

        documents.append({
            "title": str(title),
            "description": description if description not in (None, "") else None,
            "owner": owner,
            "effort": effort.value,
            "dueDate": due_date.value,
        })

    if missing_title:
        raise BulkImportError(
            f"{len(missing_title)} row(s) have no title",
            details={"rows": missing_title[:50]},
        )

    if any(sentinel_counts.values()):
        logger.info(
            f"Substituted sentinels for {sentinel_counts['effort']} effort "
            f"and {sentinel_counts['dueDate']} dueDate values"
        )
    return documents


# =============================================================================
# Service
# =============================================================================

class BulkImporter:
    """
    Imports tasks from uploaded CSV or .xlsx files.

    Example:
        importer = BulkImporter(store)
        count = importer.import_tasks("user-1", b"title,effort\\nBuy milk,2\\n")
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def import_tasks(
        self,
        owner: str,
        content: bytes,
        filename: str | None = None,
    ) -> int:
        """
        Import every row of a file as a task owned by the caller.

        Args:
            owner: Authenticated caller id
            content: Raw file bytes
            filename: Original filename (optional)

        Returns:
            Number of tasks imported

        Raises:
            BulkImportError: On parse, validation or store failure
        """
        frame = read_task_rows(content, filename)
        documents = build_documents(frame, owner)

        if not documents:
            logger.info(f"No task rows to import for {owner}")
            return 0

        try:
            self.store.insert_many(documents)
        except StoreError as e:
            raise BulkImportError(e.message) from e

        logger.info(f"Imported {len(documents)} tasks for {owner}")
        return len(documents)
