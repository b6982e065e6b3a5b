# =============================================================================
# vanbox_core/data/supabase_client.py
# Supabase Client Configuration for Vanbox
# =============================================================================

from __future__ import annotations
from typing import Optional

from supabase import AsyncClient, acreate_client

from vanbox_core.config import VanboxSettings
from vanbox_core.errors import ConfigurationError
from vanbox_core.logging import get_logger

logger = get_logger(__name__)


async def create_supabase_client(settings: VanboxSettings) -> AsyncClient:
    """
    Initialize an async Supabase client from settings.

    One client per browser session: the client carries that user's auth
    session, so it must not be shared between users.

    Raises:
        ConfigurationError: if url/key are missing
    """
    if not (settings.supabase_url and settings.supabase_key):
        raise ConfigurationError(
            "Supabase credentials not found. Please configure `.streamlit/secrets.toml`",
            config_key="supabase",
        )

    client: AsyncClient = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client initialized")
    return client


async def close_supabase_client(client: Optional[AsyncClient]) -> None:
    """Close the client's underlying HTTP sessions; errors are logged and ignored."""
    if client is None:
        return
    try:
        postgrest = getattr(client, "postgrest", None)
        session = getattr(postgrest, "session", None)
        if session is not None:
            await session.aclose()
    except Exception as e:
        logger.debug(f"Ignoring Supabase cleanup error: {e}")
