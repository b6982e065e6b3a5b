"""
Authentication for Vanbox.

Sign-in is Google OAuth through Supabase Auth; row-level security on the
entries table is the actual authorization boundary.
"""

from .session import (
    AuthSession,
    LocalSessionProvider,
    SessionProvider,
    SupabaseSessionProvider,
    User,
)

__all__ = [
    "AuthSession",
    "LocalSessionProvider",
    "SessionProvider",
    "SupabaseSessionProvider",
    "User",
]
