# =============================================================================
# vanbox_core/data/models.py
# Entry record and display-timestamp helpers
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping

# Bound applied by the notes form; the store itself does not enforce it
MAX_CONTENT_CHARS = 5000

# Number of entries kept in the on-screen history
HISTORY_LIMIT = 20

ENTRY_COLUMNS = "id, content, created_at_user_tz, created_at_utc"


@dataclass(frozen=True)
class Entry:
    """A saved note as returned by the entry store."""
    id: str
    content: str
    created_at_user_tz: str
    created_at_utc: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Entry:
        """Build an Entry from a table row (missing columns become empty strings)."""
        return cls(
            id=str(row.get("id", "")),
            content=row.get("content") or "",
            created_at_user_tz=row.get("created_at_user_tz") or "",
            created_at_utc=str(row.get("created_at_utc") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "content": self.content,
            "created_at_user_tz": self.created_at_user_tz,
            "created_at_utc": self.created_at_utc,
        }


def format_display_timestamp(moment: datetime) -> str:
    """
    Long human-readable local timestamp, e.g. "January 5, 2024, 03:04:05 PM".

    Captured once at save time and stored alongside the note; never recomputed.
    """
    return f"{moment:%B} {moment.day}, {moment:%Y}, {moment:%I:%M:%S %p}"


def is_content_saveable(content: str, max_chars: int = MAX_CONTENT_CHARS) -> bool:
    """True when the draft is non-blank and within the character limit."""
    return content.strip() != "" and len(content) <= max_chars
