# =============================================================================
# tests/test_bulk_import.py - Bulk Import Tests
# =============================================================================
# Tests for core/services/import_service.py:
#   - CSV parsing with the header row as field names
#   - Owner forced to the caller
#   - Sentinel substitution for bad effort/dueDate values
#   - All-or-nothing failure reporting
#
# Run with: poetry run pytest tests/test_bulk_import.py -v
# =============================================================================

import math
from datetime import date

import pandas as pd
import pytest

from app.exceptions import BulkImportError
from core.services.import_service import BulkImporter, read_task_rows


@pytest.fixture
def importer(store):
    return BulkImporter(store)


class TestImportTasks:
    """Tests for BulkImporter.import_tasks."""

    def test_single_row_import(self, importer, store, sample_csv):
        count = importer.import_tasks("u1", sample_csv)

        assert count == 1
        [task] = store.documents
        assert task["owner"] == "u1"
        assert task["title"] == "Buy milk"
        assert task["effort"] == 2
        assert task["dueDate"] == date(2024, 1, 1)
        assert task["description"] is None

    def test_owner_column_is_overwritten(self, importer, store):
        content = b"title,owner\nSneaky,u2\n"

        importer.import_tasks("u1", content)

        assert [task["owner"] for task in store.documents] == ["u1"]

    def test_non_numeric_effort_becomes_nan(self, importer, store):
        content = b"title,effort,dueDate\nA,abc,2024-01-01\n"

        importer.import_tasks("u1", content)

        [task] = store.documents
        assert math.isnan(task["effort"])
        assert task["dueDate"] == date(2024, 1, 1)

    def test_invalid_due_date_becomes_nat(self, importer, store):
        content = b"title,effort,dueDate\nA,1,someday\n"

        importer.import_tasks("u1", content)

        [task] = store.documents
        assert task["dueDate"] is pd.NaT
        assert task["effort"] == 1

    def test_missing_typed_columns_become_sentinels(self, importer, store):
        importer.import_tasks("u1", b"title\nJust a title\n")

        [task] = store.documents
        assert math.isnan(task["effort"])
        assert task["dueDate"] is pd.NaT

    def test_all_rows_go_in_one_batch(self, importer, store):
        content = b"title,effort\nA,1\nB,2\nC,3\n"

        count = importer.import_tasks("u1", content)

        assert count == 3
        assert store.calls == ["batch insert"]
        assert [task["title"] for task in store.documents] == ["A", "B", "C"]

    def test_header_only_file_imports_nothing(self, importer, store):
        count = importer.import_tasks("u1", b"title,description,effort,dueDate\n")

        assert count == 0
        assert store.calls == []

    def test_store_failure_is_one_bulk_import_error(self, importer, store, sample_csv):
        store.fail_with = "connection reset"

        with pytest.raises(BulkImportError) as exc_info:
            importer.import_tasks("u1", sample_csv)

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "BULK_IMPORT_FAILED"
        assert store.documents == []

    def test_row_without_title_rejects_whole_batch(self, importer, store):
        content = b"title,effort\nA,1\n,2\nC,3\n"

        with pytest.raises(BulkImportError) as exc_info:
            importer.import_tasks("u1", content)

        assert exc_info.value.details["rows"] == [2]
        assert store.calls == []

    def test_missing_title_column_is_rejected(self, importer, store):
        with pytest.raises(BulkImportError):
            importer.import_tasks("u1", b"name,effort\nA,1\n")

        assert store.calls == []

    def test_empty_file_is_rejected(self, importer):
        with pytest.raises(BulkImportError):
            importer.import_tasks("u1", b"")


class TestReadTaskRows:
    """Tests for read_task_rows header handling."""

    def test_export_headers_are_accepted(self):
        content = b"Title,Description,Effort (Days),Due Date\nA,Desc,1.5,2024-02-03\n"

        frame = read_task_rows(content)

        assert list(frame.columns) == ["title", "description", "effort", "dueDate"]
        assert frame.iloc[0]["effort"] == "1.5"

    def test_unknown_columns_are_dropped(self):
        frame = read_task_rows(b"id,title,priority\n7,A,high\n")

        assert list(frame.columns) == ["title"]

    def test_blank_lines_are_skipped(self):
        frame = read_task_rows(b"title,effort\nA,1\n\n,\nB,2\n")

        assert list(frame["title"]) == ["A", "B"]

    def test_latin1_content(self):
        frame = read_task_rows("title\nCafé run\n".encode("latin-1"))

        assert frame.iloc[0]["title"] == "Café run"

    def test_utf8_bom_is_stripped(self):
        frame = read_task_rows(b"\xef\xbb\xbftitle\nA\n")

        assert list(frame.columns) == ["title"]
