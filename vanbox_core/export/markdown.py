# =============================================================================
# vanbox_core/export/markdown.py
# Markdown export of a user's notes
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from vanbox_core.data.models import Entry

EXPORT_PREFIX = "vanbox_export"
EXPORT_EXTENSION = "md"
EXPORT_MEDIA_TYPE = "text/markdown; charset=utf-8"


@dataclass(frozen=True)
class ExportDocument:
    """A rendered export ready to be offered as a download."""
    filename: str
    content: str
    entry_count: int
    media_type: str = EXPORT_MEDIA_TYPE

    def as_bytes(self) -> bytes:
        return self.content.encode("utf-8")


def render_entry_block(entry: Entry) -> str:
    return f"---\nDate: {entry.created_at_user_tz}\n---\n\n{entry.content}"


def render_markdown(entries: Iterable[Entry]) -> str:
    """Render entries in the order given, blocks separated by a blank line."""
    return "\n\n".join(render_entry_block(entry) for entry in entries)


def export_filename(moment: datetime, prefix: str = EXPORT_PREFIX, extension: str = EXPORT_EXTENSION) -> str:
    """Filename stamped with the export moment, e.g. vanbox_export_20240105_150405.md"""
    return f"{prefix}_{moment:%Y%m%d_%H%M%S}.{extension}"


def build_export(entries: Iterable[Entry], moment: datetime) -> ExportDocument:
    entries = list(entries)
    return ExportDocument(
        filename=export_filename(moment),
        content=render_markdown(entries),
        entry_count=len(entries),
    )
