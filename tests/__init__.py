# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the TaskTracker API:
# - test_models.py: Task request/response schemas
# - test_coercion.py: Typed parsing of effort/dueDate cells
# - test_task_service.py: Owner-scoped CRUD rules
# - test_task_store.py: Supabase query building (mocked client)
# - test_bulk_import.py / test_bulk_export.py: File pipelines
# - test_auth.py: Bearer token verification
# - test_tasks_api.py: HTTP status codes, headers and bodies
#
# Run tests with: poetry run pytest
# =============================================================================
