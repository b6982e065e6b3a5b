import streamlit as st

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "draft": "",
    "history_loaded_for": None,
    "export_document": None,
    "_open_delete_dialog": False,
    "oauth_url": None,
}

# Keys that belong to the signed-in user and must not survive sign-out
USER_SCOPED_KEYS = [
    "draft", "history_loaded_for", "export_document", "_open_delete_dialog", "oauth_url",
]


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


def clear_user_state():
    """Reset everything tied to the previous user (call on sign-out)."""
    for key in USER_SCOPED_KEYS:
        st.session_state[key] = SESSION_DEFAULTS[key]
