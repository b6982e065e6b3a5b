from __future__ import annotations
import streamlit as st

from vanbox_core.errors import VanboxError, handle_error
from vanbox_core.services.entry_controller import DELETE_CONFIRM_MESSAGE, DELETE_CONFIRM_TITLE
from vanbox_core.state import clear_user_state, init_state
from vanbox_core.ui.notifications_ui import render_notifications
from vanbox_core.ui.runtime import get_app_context, get_auth_session, run_async
from vanbox_core.ui.theme import apply_css, brand, char_counter, timestamp_badge

SIGN_OUT_FAILED = "Error signing out. Please try again."

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Vanbox - Notes",
    page_icon="📝",
    layout="centered",
    initial_sidebar_state="collapsed",
)

init_state()
apply_css()

context = get_app_context()
auth = get_auth_session()
controller = context.controller

if not auth.is_authenticated:
    st.switch_page("Welcome.py")

user = auth.current_user

# First visit for this user: load the recent history once
if st.session_state.history_loaded_for != user.id:
    with st.spinner("Loading notes..."):
        try:
            run_async(controller.reload())
        except VanboxError as e:
            handle_error(e, context.notifications)
    st.session_state.history_loaded_for = user.id


# ============================================================================
# CALLBACKS
# ============================================================================
def _save_note():
    try:
        result = run_async(controller.save(st.session_state.draft))
    except VanboxError as e:
        handle_error(e, context.notifications)
        return
    if result:
        st.session_state.draft = ""


def _open_delete(entry_id: str):
    if controller.request_delete(entry_id):
        st.session_state._open_delete_dialog = True


def _sign_out():
    try:
        run_async(auth.sign_out())
    except VanboxError as e:
        handle_error(e, context.notifications, user_message=SIGN_OUT_FAILED)
        return
    clear_user_state()


@st.dialog(DELETE_CONFIRM_TITLE)
def confirm_delete_dialog():
    st.write(DELETE_CONFIRM_MESSAGE)
    cancel_col, delete_col = st.columns(2)
    if cancel_col.button("Cancel", use_container_width=True, disabled=controller.is_deleting):
        controller.cancel_delete()
        st.rerun()
    if delete_col.button("Delete", type="primary", use_container_width=True, disabled=controller.is_deleting):
        with st.spinner("Deleting note..."):
            try:
                result = run_async(controller.confirm_delete())
            except VanboxError as e:
                handle_error(e, context.notifications)
                result = None
        if result:
            st.rerun()
        # On failure the prompt stays open; the notification explains why


# ============================================================================
# HEADER
# ============================================================================
brand_col, user_col = st.columns([4, 1])
with brand_col:
    brand()
with user_col:
    with st.popover("👤", use_container_width=True):
        st.markdown(f"**{user.display_name}**")
        if user.email:
            st.caption(user.email)

        if st.button("Download Data", use_container_width=True, disabled=controller.is_exporting):
            try:
                result = run_async(controller.export())
            except VanboxError as e:
                handle_error(e, context.notifications)
                result = None
            if result is None or not result.discarded:
                st.session_state.export_document = result.data if result else None

        document = st.session_state.export_document
        if document is not None:
            st.download_button(
                f"Save {document.filename}",
                data=document.as_bytes(),
                file_name=document.filename,
                mime=document.media_type,
                use_container_width=True,
            )

        st.button("Logout", on_click=_sign_out, use_container_width=True)

render_notifications(context.notifications)

# ============================================================================
# INPUT
# ============================================================================
st.text_area(
    "New note",
    key="draft",
    placeholder="What's on your mind?",
    height=160,
    label_visibility="collapsed",
)
controller.draft = st.session_state.draft

counter_col, save_col = st.columns([3, 1])
with counter_col:
    char_counter(controller.char_count, controller.max_content_chars)
with save_col:
    st.button(
        "Saving..." if controller.is_saving else "Save",
        type="primary",
        on_click=_save_note,
        disabled=not controller.can_save,
        use_container_width=True,
    )

# ============================================================================
# HISTORY
# ============================================================================
st.markdown("#### Recent notes")

entries = controller.entries
if not entries:
    st.markdown(
        '<div class="vanbox-empty"><h4>No notes yet</h4>'
        '<p>Start writing your first note above!</p></div>',
        unsafe_allow_html=True,
    )

for entry in entries:
    with st.container(border=True):
        stamp_col, action_col = st.columns([5, 1])
        with stamp_col:
            timestamp_badge(entry.created_at_user_tz)
        with action_col:
            st.button(
                "🗑️",
                key=f"delete_{entry.id}",
                help="Delete note",
                on_click=_open_delete,
                args=(entry.id,),
                disabled=controller.is_deleting,
            )
        st.text(entry.content)

# Opened once per request; further clicks inside the dialog rerun only the dialog
if st.session_state._open_delete_dialog and controller.pending_delete_id:
    st.session_state._open_delete_dialog = False
    confirm_delete_dialog()
