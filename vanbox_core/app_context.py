# =============================================================================
# vanbox_core/app_context.py
# Wiring: settings -> store, auth session, notifications, controller
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from vanbox_core.auth import AuthSession, LocalSessionProvider, SupabaseSessionProvider
from vanbox_core.config import VanboxSettings
from vanbox_core.data.entry_store import EntryStore, InMemoryEntryStore, SupabaseEntryStore
from vanbox_core.logging import get_logger
from vanbox_core.notifications import NotificationChannel
from vanbox_core.services import EntryLifecycleController

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Everything one browser session needs, built once per session."""
    settings: VanboxSettings
    auth: AuthSession
    store: EntryStore
    notifications: NotificationChannel
    controller: EntryLifecycleController
    client: Optional[Any] = None

    async def close(self) -> None:
        """Tear down in dependency order: controller, auth session, client."""
        self.controller.close()
        self.auth.teardown()
        if self.client is not None:
            from vanbox_core.data.supabase_client import close_supabase_client
            await close_supabase_client(self.client)


async def build_app_context(
    settings: VanboxSettings,
    notifications: Optional[NotificationChannel] = None,
) -> AppContext:
    """
    Build and initialize a context for ``settings.provider``.

    Demo mode uses an in-memory store and a local user; supabase mode
    creates a dedicated async client for this session.
    """
    notifications = notifications or NotificationChannel()
    client = None

    if settings.is_demo:
        store: EntryStore = InMemoryEntryStore()
        provider = LocalSessionProvider()
    else:
        from vanbox_core.data.supabase_client import create_supabase_client

        client = await create_supabase_client(settings)
        store = SupabaseEntryStore(client, table_name=settings.entries_table)
        provider = SupabaseSessionProvider(
            client, site_url=settings.site_url, oauth_provider=settings.oauth_provider
        )

    auth = AuthSession(provider)
    await auth.initialize()

    controller = EntryLifecycleController(
        store,
        auth,
        notifications,
        history_limit=settings.history_limit,
        max_content_chars=settings.max_content_chars,
    )
    logger.info(f"App context ready (provider={settings.provider})")
    return AppContext(
        settings=settings,
        auth=auth,
        store=store,
        notifications=notifications,
        controller=controller,
        client=client,
    )
