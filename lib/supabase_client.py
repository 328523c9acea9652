# =============================================================================
# lib/supabase_client.py - Supabase Client Factory
# =============================================================================
# Creates the Supabase client used by the task store.
#
# There is no process-wide singleton: the application lifespan creates one
# client, hands it to the store, and the store is injected into request
# handlers. Tests build stores around fakes instead.
#
# Usage:
#   from lib.supabase_client import create_supabase_client
#   client = create_supabase_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error while creating the Supabase client.

    Carries a suggestion so startup failures say how to fix the config.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_supabase_client(url: str, service_key: str) -> Client:
    """
    Create a Supabase client.

    Uses the service_role key, which bypasses Row Level Security (RLS).
    Ownership is enforced by the task store's owner filters instead.

    Args:
        url: Supabase project URL
        service_key: service_role API key

    Returns:
        Client: Supabase client instance

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(url, service_key)
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
        ) from e

    logger.info("Supabase client initialized successfully")
    return client
