# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - query_cache.py: Keyed query cache with explicit invalidation
# - realtime.py: Change events, table -> cache key map, subscription hub
# - settings_form.py: Nested JSON form description and leaf updates
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.query_cache import QueryCache
from lib.realtime import (
    ChangeEvent,
    ChangeNotifier,
    ChangeType,
    RealtimeHub,
    Subscription,
)
from lib.settings_form import FormNode, build_form, describe_setting, set_at_path
from lib.supabase_client import SupabaseClient, SupabaseClientError

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Cache
    "QueryCache",
    # Realtime
    "ChangeEvent",
    "ChangeNotifier",
    "ChangeType",
    "RealtimeHub",
    "Subscription",
    # Settings forms
    "FormNode",
    "build_form",
    "describe_setting",
    "set_at_path",
]
