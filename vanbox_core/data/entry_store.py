# =============================================================================
# vanbox_core/data/entry_store.py
# Entry Store gateways (Supabase table + in-memory)
# =============================================================================
"""
Entry store gateways.

The store is the per-user append-and-delete table of notes. Authorization is
enforced store-side (row-level security); every call here is still scoped by
``user_id`` as a second check.

Gateways:
- SupabaseEntryStore: the ``entries`` table through ``supabase.AsyncClient``
- InMemoryEntryStore: process-local store used in demo mode and tests
"""

from __future__ import annotations
import asyncio
import itertools
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

from vanbox_core.data.models import ENTRY_COLUMNS, Entry
from vanbox_core.errors import EntryStoreError
from vanbox_core.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "EntryStore",
    "SupabaseEntryStore",
    "InMemoryEntryStore",
]


class EntryStore(Protocol):
    """Contract consumed by the entry lifecycle controller."""

    async def insert(self, owner_id: str, content: str, display_timestamp: str) -> Entry:
        ...

    async def select(
        self,
        owner_id: str,
        *,
        ascending: bool,
        limit: Optional[int] = None,
    ) -> List[Entry]:
        ...

    async def delete(self, owner_id: str, entry_id: str) -> int:
        """Delete one entry and return how many rows were actually removed."""
        ...


class SupabaseEntryStore:
    """
    Entry store backed by a Supabase table.

    Supabase caps a single response at 1000 rows, so unlimited selects are
    paged with ``range()`` until a short page comes back.
    """

    DEFAULT_TABLE = "entries"
    PAGE_SIZE = 1000

    def __init__(self, client: Any, table_name: str = DEFAULT_TABLE, page_size: int = PAGE_SIZE):
        """
        Args:
            client: ``supabase.AsyncClient`` (already authenticated for the user)
            table_name: Name of the entries table
            page_size: Rows per request for unlimited selects
        """
        self.client = client
        self.table_name = table_name
        self.page_size = page_size

    def _table(self):
        return self.client.table(self.table_name)

    async def insert(self, owner_id: str, content: str, display_timestamp: str) -> Entry:
        try:
            response = await self._table().insert({
                "user_id": owner_id,
                "content": content,
                "created_at_user_tz": display_timestamp,
            }).execute()
        except Exception as e:
            raise EntryStoreError(
                f"Error inserting entry: {e}", operation="insert", table=self.table_name
            ) from e

        rows = response.data or []
        if rows:
            return Entry.from_row(rows[0])
        return Entry(id="", content=content, created_at_user_tz=display_timestamp)

    async def select(
        self,
        owner_id: str,
        *,
        ascending: bool,
        limit: Optional[int] = None,
    ) -> List[Entry]:
        try:
            if limit is not None:
                response = await (
                    self._table()
                    .select(ENTRY_COLUMNS)
                    .eq("user_id", owner_id)
                    .order("created_at_utc", desc=not ascending)
                    .limit(limit)
                    .execute()
                )
                return [Entry.from_row(row) for row in response.data or []]

            all_rows: List[Dict[str, Any]] = []
            offset = 0
            while True:
                response = await (
                    self._table()
                    .select(ENTRY_COLUMNS)
                    .eq("user_id", owner_id)
                    .order("created_at_utc", desc=not ascending)
                    .range(offset, offset + self.page_size - 1)
                    .execute()
                )
                batch = response.data or []
                all_rows.extend(batch)
                # A short page means we've reached the end
                if len(batch) < self.page_size:
                    break
                offset += self.page_size

            return [Entry.from_row(row) for row in all_rows]

        except Exception as e:
            raise EntryStoreError(
                f"Error fetching entries from {self.table_name}: {e}",
                operation="select",
                table=self.table_name,
            ) from e

    async def delete(self, owner_id: str, entry_id: str) -> int:
        try:
            # delete() returns the removed rows by default
            response = await (
                self._table()
                .delete()
                .eq("id", entry_id)
                .eq("user_id", owner_id)
                .execute()
            )
        except Exception as e:
            raise EntryStoreError(
                f"Error deleting entry: {e}", operation="delete", table=self.table_name
            ) from e

        return len(response.data or [])


class InMemoryEntryStore:
    """
    Process-local entry store with the same ordering and scoping rules.

    ``created_at_utc`` comes from ``clock``; an insertion counter breaks ties
    between rows created within the same clock tick.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._sequence = itertools.count()

    async def insert(self, owner_id: str, content: str, display_timestamp: str) -> Entry:
        await asyncio.sleep(0)
        row = {
            "id": uuid.uuid4().hex,
            "user_id": owner_id,
            "content": content,
            "created_at_user_tz": display_timestamp,
            "created_at_utc": self._clock().isoformat(),
            "_seq": next(self._sequence),
        }
        self._rows[row["id"]] = row
        return Entry.from_row(row)

    async def select(
        self,
        owner_id: str,
        *,
        ascending: bool,
        limit: Optional[int] = None,
    ) -> List[Entry]:
        await asyncio.sleep(0)
        rows = sorted(
            (row for row in self._rows.values() if row["user_id"] == owner_id),
            key=lambda row: (row["created_at_utc"], row["_seq"]),
            reverse=not ascending,
        )
        if limit is not None:
            rows = rows[:limit]
        return [Entry.from_row(row) for row in rows]

    async def delete(self, owner_id: str, entry_id: str) -> int:
        await asyncio.sleep(0)
        row = self._rows.get(entry_id)
        if row is None or row["user_id"] != owner_id:
            return 0
        del self._rows[entry_id]
        return 1

    def count(self, owner_id: Optional[str] = None) -> int:
        if owner_id is None:
            return len(self._rows)
        return sum(1 for row in self._rows.values() if row["user_id"] == owner_id)
