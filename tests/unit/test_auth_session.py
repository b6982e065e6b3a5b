# =============================================================================
# tests/unit/test_auth_session.py
# Unit Tests for AuthSession and the session providers
# =============================================================================

import asyncio
from unittest.mock import MagicMock

import pytest

from vanbox_core.auth import AuthSession, LocalSessionProvider, SupabaseSessionProvider, User
from vanbox_core.errors import SessionProviderError


class TestAuthSession:
    """Identity tracking and change notifications"""

    def test_starts_loading_until_initialized(self, provider, user):
        session = AuthSession(provider)
        assert session.loading
        assert session.current_user is None

        asyncio.run(session.initialize())

        assert not session.loading
        assert session.current_user == user
        assert session.is_authenticated

    def test_sign_out_moves_generation_and_notifies(self, auth_session):
        seen = []
        auth_session.on_change(seen.append)
        generation = auth_session.generation

        asyncio.run(auth_session.sign_out())

        assert seen == [None]
        assert not auth_session.is_authenticated
        assert not auth_session.is_current(generation)

    def test_same_identity_does_not_move_generation(self, auth_session, user):
        seen = []
        auth_session.on_change(seen.append)
        generation = auth_session.generation

        auth_session._apply_user(User(id=user.id, email="renamed@example.com"))

        assert seen == []
        assert auth_session.is_current(generation)

    def test_unsubscribe(self, auth_session):
        seen = []
        unsubscribe = auth_session.on_change(seen.append)
        unsubscribe()
        unsubscribe()

        asyncio.run(auth_session.sign_out())
        assert seen == []

    def test_failing_listener_does_not_block_others(self, auth_session):
        seen = []

        def broken(_user):
            raise RuntimeError("listener bug")

        auth_session.on_change(broken)
        auth_session.on_change(seen.append)

        asyncio.run(auth_session.sign_out())
        assert seen == [None]

    def test_teardown_forgets_user_and_provider(self, auth_session, provider):
        auth_session.teardown()

        assert auth_session.current_user is None
        asyncio.run(provider.sign_in_with_redirect("/"))
        assert auth_session.current_user is None

    def test_local_provider_can_start_signed_out(self):
        session = AuthSession(LocalSessionProvider(signed_in=False))
        assert asyncio.run(session.initialize()) is None

        asyncio.run(session.sign_in_with_redirect("/"))
        assert session.current_user == LocalSessionProvider.DEMO_USER


class TestSupabaseSessionProvider:
    """Supabase Auth adapter (mocked client)"""

    @pytest.fixture
    def supabase_provider(self, mock_supabase):
        return SupabaseSessionProvider(mock_supabase, site_url="http://localhost:8501/")

    def test_current_user_from_supabase(self, supabase_provider, mock_supabase):
        gotrue_user = MagicMock(id="abc", email="ada@example.com", user_metadata={"full_name": "Ada"})
        mock_supabase.auth.get_user.return_value = MagicMock(user=gotrue_user)

        user = asyncio.run(supabase_provider.get_current_user())

        assert user == User(id="abc", email="ada@example.com", full_name="Ada")
        assert user.display_name == "Ada"

    def test_missing_session_reads_as_signed_out(self, supabase_provider, mock_supabase):
        mock_supabase.auth.get_user.side_effect = Exception("Auth session missing!")
        assert asyncio.run(supabase_provider.get_current_user()) is None

    def test_sign_in_redirects_back_to_site(self, supabase_provider, mock_supabase):
        url = asyncio.run(supabase_provider.sign_in_with_redirect("/"))

        assert url == "https://accounts.example.com/oauth"
        mock_supabase.auth.sign_in_with_oauth.assert_awaited_once_with({
            "provider": "google",
            "options": {"redirect_to": "http://localhost:8501/"},
        })

    def test_complete_sign_in_exchanges_code(self, supabase_provider, mock_supabase):
        mock_supabase.auth.exchange_code_for_session.return_value = MagicMock(
            user=MagicMock(id="abc", email=None, user_metadata={"name": "Ada"})
        )

        user = asyncio.run(supabase_provider.complete_sign_in("code-123"))

        mock_supabase.auth.exchange_code_for_session.assert_awaited_once_with({"auth_code": "code-123"})
        assert user.full_name == "Ada"

    def test_sign_out_failure_is_wrapped(self, supabase_provider, mock_supabase):
        mock_supabase.auth.sign_out.side_effect = Exception("network down")

        with pytest.raises(SessionProviderError) as exc_info:
            asyncio.run(supabase_provider.sign_out())
        assert exc_info.value.details["action"] == "sign_out"

    def test_on_change_translates_sessions(self, supabase_provider, mock_supabase):
        seen = []
        unsubscribe = supabase_provider.on_change(seen.append)
        callback = mock_supabase.auth.on_auth_state_change.call_args[0][0]

        callback("SIGNED_IN", MagicMock(user=MagicMock(id="abc", email="a@b.c", user_metadata={})))
        callback("SIGNED_OUT", None)

        assert seen == [User(id="abc", email="a@b.c"), None]
        unsubscribe()
        mock_supabase.auth.on_auth_state_change.return_value.unsubscribe.assert_called_once()
