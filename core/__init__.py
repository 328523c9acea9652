# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the task domain:
# - models/: Pydantic schemas for task input/output
# - services/: Task store, owner-scoped CRUD, bulk import and export
#
# Services take their store as a constructor argument and know nothing
# about requests; routes in app/ pass the caller's id in explicitly.
# =============================================================================
