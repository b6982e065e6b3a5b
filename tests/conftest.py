# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from vanbox_core.auth import AuthSession, LocalSessionProvider, User
from vanbox_core.data.entry_store import InMemoryEntryStore
from vanbox_core.notifications import NotificationChannel
from vanbox_core.services import EntryLifecycleController

FIXED_NOW = datetime(2024, 1, 5, 15, 4, 5)


# =============================================================================
# TEST DOUBLES
# =============================================================================

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


class ScriptedEntryStore:
    """
    In-memory store with hooks for failures and held calls.

    ``fail(method, error)`` makes the next calls to ``method`` raise ``error``;
    ``hold(method)`` returns an asyncio.Event the call waits on. Call ``hold``
    inside the running loop.
    """

    def __init__(self, inner=None):
        self.inner = inner or InMemoryEntryStore()
        self.failures = {}
        self.gates = {}
        self.calls = []
        self.zero_deletes = False

    def fail(self, method, error):
        self.failures[method] = error

    def hold(self, method):
        gate = asyncio.Event()
        self.gates[method] = gate
        return gate

    def calls_to(self, method):
        return [call for call in self.calls if call[0] == method]

    async def _enter(self, method, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(method)
        if error is not None:
            raise error

    async def insert(self, owner_id, content, display_timestamp):
        await self._enter("insert", owner_id, content, display_timestamp)
        return await self.inner.insert(owner_id, content, display_timestamp)

    async def select(self, owner_id, *, ascending, limit=None):
        await self._enter("select", owner_id, ascending=ascending, limit=limit)
        return await self.inner.select(owner_id, ascending=ascending, limit=limit)

    async def delete(self, owner_id, entry_id):
        await self._enter("delete", owner_id, entry_id)
        if self.zero_deletes:
            return 0
        return await self.inner.delete(owner_id, entry_id)


async def wait_until(predicate, attempts: int = 50):
    """Yield to the loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def notifications(fake_clock):
    return NotificationChannel(clock=fake_clock)


@pytest.fixture
def user():
    return User(id="user-1", email="ada@example.com", full_name="Ada Lovelace")


@pytest.fixture
def other_user():
    return User(id="user-2", email="grace@example.com", full_name="Grace Hopper")


@pytest.fixture
def provider(user):
    return LocalSessionProvider(user=user)


@pytest.fixture
def auth_session(provider):
    session = AuthSession(provider)
    asyncio.run(session.initialize())
    return session


@pytest.fixture
def store():
    return ScriptedEntryStore()


@pytest.fixture
def controller(store, auth_session, notifications):
    return EntryLifecycleController(
        store,
        auth_session,
        notifications,
        history_limit=20,
        max_content_chars=5000,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def mock_query():
    """Chainable Supabase query builder; ``execute`` is awaitable."""
    query = MagicMock()
    for name in ("select", "insert", "delete", "eq", "order", "limit", "range"):
        getattr(query, name).return_value = query
    query.execute = AsyncMock(return_value=MagicMock(data=[]))
    return query


@pytest.fixture
def mock_supabase(mock_query):
    """Mock async Supabase client"""
    client = MagicMock()
    client.table.return_value = mock_query
    client.auth.get_user = AsyncMock(return_value=None)
    client.auth.sign_in_with_oauth = AsyncMock(
        return_value=MagicMock(url="https://accounts.example.com/oauth")
    )
    client.auth.exchange_code_for_session = AsyncMock()
    client.auth.sign_out = AsyncMock()
    return client


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def messages(channel, kind=None):
    """Messages currently queued on ``channel`` (optionally of one kind)."""
    return [note.message for note in channel.active if kind is None or note.kind == kind]


@pytest.fixture
def queued():
    """``queued(channel, kind=None)`` -> list of queued messages."""
    return messages


@pytest.fixture
def settle():
    """``await settle(predicate)`` -> yields to the loop until predicate holds."""
    return wait_until
