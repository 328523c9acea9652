# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - coercion.py: Typed parsing of untyped cell values with sentinels
# - supabase_client.py: Supabase client factory
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.coercion import (
    Coerced,
    DUE_DATE_SENTINEL,
    EFFORT_SENTINEL,
    coerce_due_date,
    coerce_effort,
    is_sentinel,
)
from lib.supabase_client import SupabaseClientError, create_supabase_client

__all__ = [
    # Coercion
    "Coerced",
    "DUE_DATE_SENTINEL",
    "EFFORT_SENTINEL",
    "coerce_due_date",
    "coerce_effort",
    "is_sentinel",
    # Supabase
    "SupabaseClientError",
    "create_supabase_client",
]
