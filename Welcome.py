from __future__ import annotations
import streamlit as st

from vanbox_core.errors import VanboxError, handle_error
from vanbox_core.state import init_state
from vanbox_core.ui.notifications_ui import render_notifications
from vanbox_core.ui.runtime import get_app_context, get_auth_session, run_async
from vanbox_core.ui.theme import apply_css, brand

NOTES_PAGE = "pages/01_Notes.py"
LOGIN_FAILED = "Login failed. Please try again."

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Vanbox - Sign in",
    page_icon="📝",
    layout="centered",
    initial_sidebar_state="collapsed",
)

init_state()
apply_css()

context = get_app_context()
auth = get_auth_session()

# ============================================================================
# OAUTH CALLBACK (?code=...)
# ============================================================================
auth_code = st.query_params.get("code")
if auth_code and not auth.is_authenticated:
    try:
        run_async(auth.complete_sign_in(auth_code))
    except VanboxError as e:
        handle_error(e, context.notifications, user_message=LOGIN_FAILED)
    finally:
        st.query_params.clear()
        st.session_state.oauth_url = None

if auth.is_authenticated:
    st.switch_page(NOTES_PAGE)

# ============================================================================
# CALLBACKS
# ============================================================================
def _start_sign_in():
    # Demo mode signs in at once; Supabase hands back the provider URL
    try:
        if context.settings.is_demo:
            run_async(auth.sign_in_with_redirect("/"))
        else:
            st.session_state.oauth_url = run_async(auth.sign_in_with_redirect())
    except VanboxError as e:
        handle_error(e, context.notifications, user_message=LOGIN_FAILED)


# ============================================================================
# SIGN-IN CARD
# ============================================================================
render_notifications(context.notifications)

st.write("")
brand()
st.markdown("### Capture your thoughts instantly, anywhere")
st.caption("Quick notes, saved to your account and ready to export whenever you need them.")
st.write("")

if context.settings.is_demo:
    st.info("Running in demo mode: notes are kept in memory for this session only.", icon="ℹ️")

if st.session_state.oauth_url:
    st.link_button(
        "Open Google sign-in", st.session_state.oauth_url, type="primary", use_container_width=True
    )
else:
    st.button(
        "Continue with Google",
        key="start_sign_in",
        type="primary",
        on_click=_start_sign_in,
        use_container_width=True,
    )
