import streamlit as st

from vanbox_core.notifications import NotificationChannel, NotificationKind


@st.fragment(run_every=0.5)
def render_notifications(channel: NotificationChannel):
    """
    Stacked notifications, oldest on top.

    Re-runs on its own every half second so messages expire without a full
    page rerun.
    """
    for note in channel.tick():
        body, close = st.columns([12, 1])
        icon = "✅" if note.kind == NotificationKind.SUCCESS else "⚠️"
        if note.kind == NotificationKind.SUCCESS:
            body.success(note.message, icon=icon)
        else:
            body.error(note.message, icon=icon)

        if not note.is_exiting and close.button("✕", key=f"dismiss_{note.id}", help="Dismiss"):
            channel.dismiss(note.id)
            st.rerun(scope="fragment")
