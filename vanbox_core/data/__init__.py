# =============================================================================
# vanbox_core/data/__init__.py
# Entry records and store gateways
# =============================================================================

from .models import (
    Entry,
    HISTORY_LIMIT,
    MAX_CONTENT_CHARS,
    format_display_timestamp,
    is_content_saveable,
)
from .entry_store import EntryStore, InMemoryEntryStore, SupabaseEntryStore

__all__ = [
    "Entry",
    "HISTORY_LIMIT",
    "MAX_CONTENT_CHARS",
    "format_display_timestamp",
    "is_content_saveable",
    "EntryStore",
    "InMemoryEntryStore",
    "SupabaseEntryStore",
]
