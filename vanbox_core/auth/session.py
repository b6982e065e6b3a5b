# =============================================================================
# vanbox_core/auth/session.py
# Identity: session providers and the process-wide auth session
# =============================================================================
"""
Authentication session handling.

Sign-in itself is delegated to Supabase Auth (Google OAuth). This module
tracks who is signed in and tells the rest of the app when that changes.

``AuthSession`` carries a generation counter that moves every time the
identity changes (sign-in, sign-out, account switch). Operations record the
generation when they start and drop their result if it moved while they were
awaiting the store.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol

from vanbox_core.errors import SessionProviderError
from vanbox_core.logging import get_logger

logger = get_logger(__name__)

UserListener = Callable[[Optional["User"]], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class User:
    """Signed-in user as reported by the identity provider."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or self.id

    @classmethod
    def from_supabase(cls, user: Any) -> Optional[User]:
        """Convert a gotrue ``User`` (or None) into a User."""
        if user is None:
            return None
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            full_name=metadata.get("full_name") or metadata.get("name"),
            avatar_url=metadata.get("avatar_url"),
        )


class SessionProvider(Protocol):
    """Contract for the identity provider."""

    async def get_current_user(self) -> Optional[User]:
        ...

    def on_change(self, listener: UserListener) -> Unsubscribe:
        ...

    async def sign_in_with_redirect(self, return_path: str) -> str:
        """Start the OAuth flow; returns the provider URL to send the browser to."""
        ...

    async def complete_sign_in(self, auth_code: str) -> Optional[User]:
        ...

    async def sign_out(self) -> None:
        ...


class SupabaseSessionProvider:
    """Session provider over ``supabase.AsyncClient.auth``."""

    CALLBACK_PATH = "/"

    def __init__(self, client: Any, site_url: str, oauth_provider: str = "google"):
        self.client = client
        self.site_url = site_url.rstrip("/")
        self.oauth_provider = oauth_provider

    async def get_current_user(self) -> Optional[User]:
        try:
            response = await self.client.auth.get_user()
        except Exception as e:
            # No stored session (or an expired one) reads as signed out
            logger.info(f"No current user: {e}")
            return None
        return User.from_supabase(getattr(response, "user", None)) if response else None

    def on_change(self, listener: UserListener) -> Unsubscribe:
        def _on_auth_state_change(event, session) -> None:
            user = User.from_supabase(getattr(session, "user", None)) if session else None
            logger.debug(f"Auth state change: {event}")
            listener(user)

        subscription = self.client.auth.on_auth_state_change(_on_auth_state_change)
        return subscription.unsubscribe

    async def sign_in_with_redirect(self, return_path: str = CALLBACK_PATH) -> str:
        try:
            response = await self.client.auth.sign_in_with_oauth({
                "provider": self.oauth_provider,
                "options": {"redirect_to": f"{self.site_url}{return_path}"},
            })
        except Exception as e:
            raise SessionProviderError(str(e), action="sign_in") from e
        return response.url

    async def complete_sign_in(self, auth_code: str) -> Optional[User]:
        try:
            response = await self.client.auth.exchange_code_for_session({"auth_code": auth_code})
        except Exception as e:
            raise SessionProviderError(str(e), action="exchange_code") from e
        return User.from_supabase(getattr(response, "user", None))

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except Exception as e:
            raise SessionProviderError(str(e), action="sign_out") from e


class LocalSessionProvider:
    """
    Demo-mode provider: one local user, no network.

    ``sign_in_with_redirect`` signs the local user in immediately and returns
    the return path as the "redirect".
    """

    DEMO_USER = User(id="local-user", email="demo@vanbox.local", full_name="Vanbox Demo")

    def __init__(self, user: Optional[User] = None, signed_in: bool = True):
        self._demo_user = user or self.DEMO_USER
        self._user: Optional[User] = self._demo_user if signed_in else None
        self._listeners: List[UserListener] = []

    async def get_current_user(self) -> Optional[User]:
        return self._user

    def on_change(self, listener: UserListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._user)

    async def sign_in_with_redirect(self, return_path: str = "/") -> str:
        self._user = self._demo_user
        self._emit()
        return return_path

    async def complete_sign_in(self, auth_code: str) -> Optional[User]:
        return self._user

    async def sign_out(self) -> None:
        self._user = None
        self._emit()


class AuthSession:
    """
    Process-wide view of the signed-in identity.

    Lifecycle:
        session = AuthSession(provider)
        await session.initialize()     # reads current user, subscribes to changes
        ...
        await session.sign_out()       # invalidates in-flight results
        session.teardown()             # unsubscribes

    Consumers read ``current_user`` on every use instead of keeping a copy.
    """

    def __init__(self, provider: SessionProvider):
        self.provider = provider
        self._user: Optional[User] = None
        self._generation = 0
        self._loading = True
        self._provider_unsubscribe: Optional[Unsubscribe] = None
        self._listeners: List[UserListener] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        """True if no identity change happened since ``generation`` was read."""
        return generation == self._generation

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> Optional[User]:
        """Read the current user and start listening for auth changes."""
        user = await self.provider.get_current_user()
        self._apply_user(user)
        if self._provider_unsubscribe is None:
            self._provider_unsubscribe = self.provider.on_change(self._apply_user)
        self._loading = False
        logger.info(f"Auth session initialized (signed in: {user is not None})")
        return user

    def teardown(self) -> None:
        """Unsubscribe from the provider and forget the user."""
        if self._provider_unsubscribe is not None:
            self._provider_unsubscribe()
            self._provider_unsubscribe = None
        self._apply_user(None)
        self._listeners.clear()
        logger.info("Auth session torn down")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def sign_in_with_redirect(self, return_path: str = "/") -> str:
        return await self.provider.sign_in_with_redirect(return_path)

    async def complete_sign_in(self, auth_code: str) -> Optional[User]:
        user = await self.provider.complete_sign_in(auth_code)
        self._apply_user(user)
        return user

    async def sign_out(self) -> None:
        """Sign out at the provider, then drop the local identity."""
        await self.provider.sign_out()
        self._apply_user(None)
        logger.info("Signed out")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_change(self, listener: UserListener) -> Unsubscribe:
        """
        Register a listener for identity changes.

        Returns:
            Callable that unregisters the listener (safe to call twice)
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _apply_user(self, user: Optional[User]) -> None:
        with self._lock:
            previous_id = self._user.id if self._user else None
            new_id = user.id if user else None
            self._user = user
            changed = previous_id != new_id
            if changed:
                self._generation += 1

        if not changed:
            return

        logger.info(f"Identity changed (generation {self._generation})")
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception as e:
                logger.error(f"Error in auth listener: {e}")
