# =============================================================================
# vanbox_core/offline/__init__.py
# Offline App-Shell Cache for Vanbox
# =============================================================================
"""
Offline shell cache.

Usage:
------
from vanbox_core.offline import OfflineShellCache, ShellRequest

shell = OfflineShellCache(settings.shell_cache)
shell.install()      # all-or-nothing download of the shell resources
shell.activate()     # keep only the current generation

response = shell.handle_fetch(ShellRequest("/", destination="document"))
"""

from vanbox_core.offline.shell_cache import (
    OfflineShellCache,
    RequestsFetcher,
    ShellCacheStorage,
    ShellRequest,
    ShellResponse,
    cache_key,
)

__all__ = [
    "OfflineShellCache",
    "RequestsFetcher",
    "ShellCacheStorage",
    "ShellRequest",
    "ShellResponse",
    "cache_key",
]
