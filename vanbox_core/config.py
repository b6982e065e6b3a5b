# =============================================================================
# vanbox_core/config.py
# Settings loaded from .streamlit/secrets.toml
# =============================================================================
"""
Vanbox settings.

Inside the app the mapping comes from ``st.secrets``; scripts read the same
file with ``load_secrets_file()``.

Expected secrets.toml format:

    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [vanbox]
    provider = "supabase"          # or "demo"
    site_url = "http://localhost:8501"
    oauth_provider = "google"

    [vanbox.shell_cache]
    version = "vanbox-v1"
    base_url = "http://localhost:8501"
    cache_dir = "local_data/shell_cache"
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import toml

from vanbox_core.data.models import HISTORY_LIMIT, MAX_CONTENT_CHARS
from vanbox_core.errors import ConfigurationError
from vanbox_core.logging import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_SECRETS_PATH = PROJECT_ROOT / ".streamlit" / "secrets.toml"

PROVIDERS = ("supabase", "demo")

# App-shell resources cached at install time
DEFAULT_SHELL_PATHS: Tuple[str, ...] = (
    "/",
    "/login",
    "/manifest.json",
    "/icons/icon-192x192.png",
    "/icons/icon-512x512.png",
    "/icons/maskable-icon.png",
    "/offline.html",
)


@dataclass(frozen=True)
class ShellCacheSettings:
    """Offline shell cache configuration."""
    version: str = "vanbox-v1"
    base_url: str = "http://localhost:8501"
    cache_dir: Path = PROJECT_ROOT / "local_data" / "shell_cache"
    shell_paths: Tuple[str, ...] = DEFAULT_SHELL_PATHS
    offline_path: str = "/offline.html"
    timeout: int = 10


@dataclass(frozen=True)
class VanboxSettings:
    """Application settings."""
    provider: str = "demo"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    entries_table: str = "entries"
    site_url: str = "http://localhost:8501"
    oauth_provider: str = "google"
    history_limit: int = HISTORY_LIMIT
    max_content_chars: int = MAX_CONTENT_CHARS
    shell_cache: ShellCacheSettings = field(default_factory=ShellCacheSettings)

    @property
    def is_demo(self) -> bool:
        return self.provider == "demo"


def _as_int(section: Mapping[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Setting '{key}' must be an integer, got {value!r}",
            config_key=key,
            expected_type="int",
        ) from e


def _load_shell_cache(section: Mapping[str, Any]) -> ShellCacheSettings:
    defaults = ShellCacheSettings()
    paths = tuple(section.get("shell_paths", defaults.shell_paths))
    offline_path = section.get("offline_path", defaults.offline_path)
    if offline_path not in paths:
        paths = paths + (offline_path,)

    cache_dir = Path(section.get("cache_dir", defaults.cache_dir))
    if not cache_dir.is_absolute():
        cache_dir = PROJECT_ROOT / cache_dir

    return ShellCacheSettings(
        version=str(section.get("version", defaults.version)),
        base_url=str(section.get("base_url", defaults.base_url)).rstrip("/"),
        cache_dir=cache_dir,
        shell_paths=paths,
        offline_path=offline_path,
        timeout=_as_int(section, "timeout", defaults.timeout),
    )


def load_settings(secrets: Optional[Mapping[str, Any]] = None) -> VanboxSettings:
    """
    Build settings from a secrets mapping.

    With no secrets at all the app runs in demo mode (in-memory store, local
    user), the same way unconfigured API connectors fall back to mocks.

    Raises:
        ConfigurationError: if the supabase provider is selected without
            credentials, or a value has the wrong type
    """
    secrets = secrets or {}
    vanbox = dict(secrets.get("vanbox", {}))
    supabase = dict(secrets.get("supabase", {}))

    provider = vanbox.get("provider", "supabase" if supabase else "demo")
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider '{provider}' (expected one of {', '.join(PROVIDERS)})",
            config_key="vanbox.provider",
        )

    if provider == "supabase" and not (supabase.get("url") and supabase.get("key")):
        raise ConfigurationError(
            "Supabase credentials not found. Add [supabase] url and key to .streamlit/secrets.toml",
            config_key="supabase",
        )

    settings = VanboxSettings(
        provider=provider,
        supabase_url=supabase.get("url"),
        supabase_key=supabase.get("key"),
        entries_table=vanbox.get("entries_table", "entries"),
        site_url=str(vanbox.get("site_url", "http://localhost:8501")).rstrip("/"),
        oauth_provider=vanbox.get("oauth_provider", "google"),
        history_limit=_as_int(vanbox, "history_limit", HISTORY_LIMIT),
        max_content_chars=_as_int(vanbox, "max_content_chars", MAX_CONTENT_CHARS),
        shell_cache=_load_shell_cache(vanbox.get("shell_cache", {})),
    )
    logger.info(f"Settings loaded (provider={settings.provider})")
    return settings


def load_secrets_file(path: Optional[Path] = None) -> Mapping[str, Any]:
    """Load .streamlit/secrets.toml for use outside Streamlit (scripts)."""
    secrets_path = Path(path) if path else DEFAULT_SECRETS_PATH
    if not secrets_path.exists():
        logger.warning(f"Secrets file not found: {secrets_path}")
        return {}
    return toml.load(secrets_path)
