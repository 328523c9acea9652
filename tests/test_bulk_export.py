# =============================================================================
# tests/test_bulk_export.py - Spreadsheet Export Tests
# =============================================================================
# Tests for core/services/export_service.py:
#   - Sheet name, column order and header row
#   - Owner scoping of exported rows
#   - Empty export and failure handling
#   - Export -> import round trip
#
# Run with: poetry run pytest tests/test_bulk_export.py -v
# =============================================================================

import io
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest
from openpyxl import load_workbook

from app.exceptions import ExportError
from core.models.task import TaskResponse
from core.services.export_service import BulkExporter
from core.services.import_service import BulkImporter
from core.services.task_service import TaskService

from .fakes import FakeTaskStore

HEADER = ("Title", "Description", "Effort (Days)", "Due Date")


def _rows(content: bytes) -> list[tuple]:
    workbook = load_workbook(io.BytesIO(content))
    assert workbook.sheetnames == ["Tasks"]
    return list(workbook["Tasks"].iter_rows(values_only=True))


def _as_date(value):
    return value.date() if isinstance(value, datetime) else value


@pytest.fixture
def exporter(store):
    return BulkExporter(store)


class TestExportTasks:
    """Tests for BulkExporter.export_tasks."""

    def test_empty_export_has_only_header(self, exporter):
        rows = _rows(exporter.export_tasks("nobody"))

        assert rows == [HEADER]

    def test_rows_follow_column_order(self, exporter, store):
        store.seed(owner="u1", title="Buy milk", description="2%", effort=2.0, dueDate=date(2024, 1, 1))

        header, row = _rows(exporter.export_tasks("u1"))

        assert header == HEADER
        assert row[0] == "Buy milk"
        assert row[1] == "2%"
        assert row[2] == 2
        assert _as_date(row[3]) == date(2024, 1, 1)

    def test_only_callers_tasks_are_exported(self, exporter, store):
        store.seed(owner="u1", title="Mine")
        store.seed(owner="u2", title="Theirs")

        rows = _rows(exporter.export_tasks("u1"))

        assert [row[0] for row in rows[1:]] == ["Mine"]

    def test_sentinels_export_as_empty_cells(self, exporter, store):
        store.seed(owner="u1", title="Imported", effort=np.nan, dueDate=pd.NaT)

        _, row = _rows(exporter.export_tasks("u1"))

        assert row[2] in (None, "")
        assert row[3] in (None, "")

    def test_column_widths(self, exporter):
        workbook = load_workbook(io.BytesIO(exporter.export_tasks("u1")))
        widths = workbook["Tasks"].column_dimensions

        assert [widths[letter].width for letter in "ABCD"] == [30, 30, 15, 20]

    def test_formula_like_text_is_written_as_text(self, exporter, store):
        store.seed(owner="u1", title="=SUM(A1:A9)", description="=cmd|calc")

        workbook = load_workbook(io.BytesIO(exporter.export_tasks("u1")))
        title_cell, description_cell = workbook["Tasks"]["A2"], workbook["Tasks"]["B2"]

        assert (title_cell.data_type, title_cell.value) == ("s", "=SUM(A1:A9)")
        assert (description_cell.data_type, description_cell.value) == ("s", "=cmd|calc")

    def test_export_never_writes(self, exporter, store):
        store.seed(owner="u1", title="Mine")

        exporter.export_tasks("u1")

        assert store.calls == ["list"]

    def test_store_failure_raises_export_error(self, exporter, store):
        store.fail_with = "connection lost"

        with pytest.raises(ExportError) as exc_info:
            exporter.export_tasks("u1")

        assert exc_info.value.status_code == 500


class TestRoundTrip:
    """Exported workbooks can be imported back."""

    def test_export_then_import_preserves_fields(self, store):
        service = TaskService(store)
        originals = [
            service.create_task("u1", {"title": "Buy milk", "effort": 2, "dueDate": "2024-01-01"}),
            service.create_task("u1", {"title": "Report", "description": "Q3 numbers", "effort": 0.5, "dueDate": "2024-03-31"}),
            service.create_task("u1", {"title": "Someday"}),
        ]

        content = BulkExporter(store).export_tasks("u1")

        target = FakeTaskStore()
        count = BulkImporter(target).import_tasks("u1", content, filename="tasks.xlsx")

        assert count == len(originals)
        reimported = [TaskResponse.from_document(document) for document in target.documents]
        for original, copy in zip(originals, reimported):
            assert copy.owner == "u1"
            assert copy.title == original.title
            assert copy.description == original.description
            assert copy.effort == original.effort
            assert copy.due_date == original.due_date

    def test_formula_like_text_survives_round_trip(self, store):
        service = TaskService(store)
        service.create_task("u1", {"title": "=1+1", "description": '=HYPERLINK("http://example.com")'})

        content = BulkExporter(store).export_tasks("u1")

        target = FakeTaskStore()
        count = BulkImporter(target).import_tasks("u1", content, filename="tasks.xlsx")

        assert count == 1
        [copy] = target.documents
        assert copy["title"] == "=1+1"
        assert copy["description"] == '=HYPERLINK("http://example.com")'
