# =============================================================================
# vanbox_core/services/entry_controller.py
# Entry Lifecycle Controller - save / reload / delete / export
# =============================================================================
"""
EntryLifecycleController keeps the on-screen note list consistent with the
entry store.

Rules:
- Each operation kind (save, reload, delete, export) runs at most once at a
  time. A trigger while that kind is in flight is ignored, not queued.
  Different kinds may overlap. The reload that follows a save waits for
  any reload already in flight instead of being dropped.
- Reload replaces the list wholesale; there is no merge.
- Delete removes the entry locally only after the store reports a removed
  row. Zero removed rows counts as a failure.
- Results that arrive after ``close()`` or after the signed-in identity
  changed are discarded.
- Store failures become error notifications; nothing is retried.
"""

from __future__ import annotations
import asyncio
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Set

from vanbox_core.auth.session import AuthSession, User
from vanbox_core.data.entry_store import EntryStore
from vanbox_core.data.models import (
    HISTORY_LIMIT,
    MAX_CONTENT_CHARS,
    Entry,
    format_display_timestamp,
    is_content_saveable,
)
from vanbox_core.errors import (
    ContentValidationError,
    DeletionNotAppliedError,
    NotAuthenticatedError,
    VanboxError,
)
from vanbox_core.export import ExportDocument, build_export
from vanbox_core.notifications import NotificationChannel
from vanbox_core.services.base_service import BaseService, ServiceResult

# User-facing messages
NOTE_SAVED = "Note saved!"
SAVE_FAILED = "Error: Could not save note. Please try again."
SAVE_FAILED_DURATION_MS = 5000
LOAD_FAILED = "Failed to load history."
NOTE_DELETED = "Note deleted successfully"
DELETE_FAILED = "Failed to delete note."
DELETE_CONFIRM_TITLE = "Delete Note"
DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this note? This action cannot be undone."
EXPORT_STARTED = "Data download started."
EXPORT_EMPTY = "No data to download."
EXPORT_FAILED = "Error downloading data."


class OperationKind(str, Enum):
    SAVE = "save"
    RELOAD = "reload"
    DELETE = "delete"
    EXPORT = "export"


class EntryLifecycleController(BaseService):
    """
    Owns the draft, the in-memory entry list and the four store operations.

    Usage:
        controller = EntryLifecycleController(store, auth_session, notifications)
        await controller.reload()

        controller.draft = "Buy milk"
        await controller.save()

        controller.request_delete(entry.id)
        await controller.confirm_delete()

        result = await controller.export()
        if result:
            offer_download(result.data.filename, result.data.as_bytes())
    """

    def __init__(
        self,
        store: EntryStore,
        session: AuthSession,
        notifications: NotificationChannel,
        history_limit: int = HISTORY_LIMIT,
        max_content_chars: int = MAX_CONTENT_CHARS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(notifications)
        self.store = store
        self.session = session
        self.history_limit = history_limit
        self.max_content_chars = max_content_chars
        self._clock = clock

        self.draft = ""
        self._entries: List[Entry] = []
        self._in_flight: Set[OperationKind] = set()
        self._pending_delete_id: Optional[str] = None
        self._reload_idle: Optional[asyncio.Event] = None
        self._closed = False
        self._unsubscribe = session.on_change(self._on_identity_change)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def entries(self) -> List[Entry]:
        return list(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    def is_busy(self, kind: OperationKind) -> bool:
        return kind in self._in_flight

    @property
    def is_saving(self) -> bool:
        return self.is_busy(OperationKind.SAVE)

    @property
    def is_loading(self) -> bool:
        return self.is_busy(OperationKind.RELOAD)

    @property
    def is_deleting(self) -> bool:
        return self.is_busy(OperationKind.DELETE)

    @property
    def is_exporting(self) -> bool:
        return self.is_busy(OperationKind.EXPORT)

    @property
    def char_count(self) -> int:
        return len(self.draft)

    @property
    def is_over_limit(self) -> bool:
        return self.char_count > self.max_content_chars

    @property
    def can_save(self) -> bool:
        """Whether the Save action is enabled for the current draft."""
        return is_content_saveable(self.draft, self.max_content_chars) and not self.is_saving

    @property
    def pending_delete_id(self) -> Optional[str]:
        return self._pending_delete_id

    # =========================================================================
    # SAVE
    # =========================================================================

    async def save(self, content: Optional[str] = None) -> ServiceResult:
        """
        Insert the draft (or ``content``) as a new note, then reload.

        Returns a failed result without touching the store when a save is
        already in flight, the draft is blank or too long, or nobody is
        signed in.
        """
        if self.is_saving:
            return ServiceResult.busy(OperationKind.SAVE.value)
        if content is not None:
            self.draft = content

        if not is_content_saveable(self.draft, self.max_content_chars):
            return ServiceResult.from_exception(ContentValidationError(
                "Note must be non-empty and at most "
                f"{self.max_content_chars} characters",
                length=len(self.draft),
                limit=self.max_content_chars,
            ))

        user = self._current_user()
        if user is None:
            return ServiceResult.from_exception(NotAuthenticatedError())

        generation = self._begin(OperationKind.SAVE)
        if generation is None:
            return ServiceResult.busy(OperationKind.SAVE.value)

        try:
            timestamp = format_display_timestamp(self._clock())
            with self.log_operation("Saving note"):
                entry = await self.store.insert(user.id, self.draft.strip(), timestamp)
        except Exception as e:
            if self._is_stale(generation):
                return self._stale(OperationKind.SAVE)
            return self.report_failure(e, SAVE_FAILED, duration_ms=SAVE_FAILED_DURATION_MS)
        finally:
            self._finish(OperationKind.SAVE)

        if self._is_stale(generation):
            return self._stale(OperationKind.SAVE)

        self.draft = ""
        self.notifications.success(NOTE_SAVED)
        # A reload already in flight may have read the store before the insert
        await self._wait_for_reload()
        if not self._is_stale(generation):
            await self.reload()
        return ServiceResult.ok(entry)

    # =========================================================================
    # RELOAD
    # =========================================================================

    async def reload(self) -> ServiceResult:
        """Replace the list with the newest entries (newest first)."""
        user = self._current_user()
        if user is None:
            return ServiceResult.from_exception(NotAuthenticatedError())

        generation = self._begin(OperationKind.RELOAD)
        if generation is None:
            return ServiceResult.busy(OperationKind.RELOAD.value)

        idle = self._reload_idle = asyncio.Event()
        try:
            with self.log_operation("Loading entries"):
                entries = await self.store.select(
                    user.id, ascending=False, limit=self.history_limit
                )
        except Exception as e:
            if self._is_stale(generation):
                return self._stale(OperationKind.RELOAD)
            return self.report_failure(e, LOAD_FAILED)
        finally:
            self._finish(OperationKind.RELOAD)
            idle.set()

        if self._is_stale(generation):
            return self._stale(OperationKind.RELOAD)

        self._entries = list(entries)
        return ServiceResult.ok(self.entries)

    # =========================================================================
    # DELETE (two-phase: request -> confirm)
    # =========================================================================

    def request_delete(self, entry_id: str) -> bool:
        """
        Open the confirmation prompt for ``entry_id``.

        Returns False (prompt not opened) while another delete is running.
        """
        if self._closed or self.is_deleting:
            return False
        self._pending_delete_id = entry_id
        return True

    def cancel_delete(self) -> bool:
        if self.is_deleting:
            return False
        self._pending_delete_id = None
        return True

    async def confirm_delete(self) -> ServiceResult:
        """
        Delete the entry named in the open prompt.

        Success requires the store to report at least one removed row.
        """
        entry_id = self._pending_delete_id
        if entry_id is None:
            return ServiceResult.fail("No delete awaiting confirmation", "NO_PENDING_DELETE")

        user = self._current_user()
        if user is None:
            return ServiceResult.from_exception(NotAuthenticatedError())

        generation = self._begin(OperationKind.DELETE)
        if generation is None:
            return ServiceResult.busy(OperationKind.DELETE.value)

        try:
            with self.log_operation(f"Deleting entry {entry_id}"):
                removed = await self.store.delete(user.id, entry_id)
            if removed == 0:
                raise DeletionNotAppliedError(entry_id=entry_id)
        except DeletionNotAppliedError as e:
            if self._is_stale(generation):
                return self._stale(OperationKind.DELETE)
            self.logger.warning(f"Delete of {entry_id} removed no rows")
            return self.report_failure(e)
        except Exception as e:
            if self._is_stale(generation):
                return self._stale(OperationKind.DELETE)
            return self.report_failure(e, _failure_reason(e) or DELETE_FAILED)
        finally:
            self._finish(OperationKind.DELETE)

        if self._is_stale(generation):
            return self._stale(OperationKind.DELETE)

        self._pending_delete_id = None
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        self.notifications.success(NOTE_DELETED)
        return ServiceResult.ok(entry_id, metadata={"removed": removed})

    # =========================================================================
    # EXPORT
    # =========================================================================

    async def export(self) -> ServiceResult:
        """
        Render every entry, oldest first, as a Markdown document.

        Neither the store nor the on-screen list is modified.
        """
        user = self._current_user()
        if user is None:
            return ServiceResult.from_exception(NotAuthenticatedError())

        generation = self._begin(OperationKind.EXPORT)
        if generation is None:
            return ServiceResult.busy(OperationKind.EXPORT.value)

        try:
            with self.log_operation("Exporting entries"):
                entries = await self.store.select(user.id, ascending=True)
        except Exception as e:
            if self._is_stale(generation):
                return self._stale(OperationKind.EXPORT)
            return self.report_failure(e, EXPORT_FAILED)
        finally:
            self._finish(OperationKind.EXPORT)

        if self._is_stale(generation):
            return self._stale(OperationKind.EXPORT)

        if not entries:
            self.notifications.error(EXPORT_EMPTY)
            return ServiceResult.fail(EXPORT_EMPTY, "EMPTY_EXPORT")

        document: ExportDocument = build_export(entries, self._clock())
        self.logger.info(f"Export ready: {document.filename} ({document.entry_count} entries)")
        self.notifications.success(EXPORT_STARTED)
        return ServiceResult.ok(document)

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def close(self) -> None:
        """Stop applying results; in-flight operations finish into the void."""
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self.logger.info("Controller closed")

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _current_user(self) -> Optional[User]:
        if self._closed:
            return None
        return self.session.current_user

    def _begin(self, kind: OperationKind) -> Optional[int]:
        """Mark ``kind`` in flight; returns the session generation or None if busy."""
        if self._closed or kind in self._in_flight:
            return None
        self._in_flight.add(kind)
        return self.session.generation

    def _finish(self, kind: OperationKind) -> None:
        self._in_flight.discard(kind)

    async def _wait_for_reload(self) -> None:
        idle = self._reload_idle
        if idle is not None and self.is_loading:
            await idle.wait()

    def _is_stale(self, generation: int) -> bool:
        return self._closed or not self.session.is_current(generation)

    def _stale(self, kind: OperationKind) -> ServiceResult:
        self.logger.debug(f"Discarding stale {kind.value} result")
        return ServiceResult.stale(kind.value)

    def _on_identity_change(self, user: Optional[User]) -> None:
        # Nothing cached for the previous identity may leak to the next one
        self._entries = []
        self._pending_delete_id = None
        self.draft = ""


def _failure_reason(error: Exception) -> str:
    """Underlying reason for a store failure, without the error-code decoration."""
    cause = error.__cause__
    if cause is not None and str(cause).strip():
        return str(cause).strip()
    if isinstance(error, VanboxError):
        return error.message
    return str(error).strip()
