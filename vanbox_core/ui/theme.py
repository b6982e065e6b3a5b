import html

import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#2563eb"
SECONDARY_COLOR  = "#4f46e5"
SUCCESS_COLOR    = "#22c55e"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1f2937"
SUBTLE_TEXT      = "#6b7280"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#f5f7ff"
CARD_BG_LIGHT    = "#ffffff"


def apply_css():
    """Global styles for the Vanbox pages."""
    st.markdown(f"""
        <style>
        .main {{
            background: linear-gradient(135deg, #eff6ff 0%, #ffffff 50%, #eef2ff 100%);
            color: {TEXT_COLOR};
            font-family: 'Inter','Segoe UI','SF Pro Display',sans-serif;
        }}
        .vanbox-brand {{
            display:flex; align-items:center; gap:.6rem;
            font-size:1.4rem; font-weight:700;
            background: linear-gradient(90deg, {PRIMARY_COLOR}, {SECONDARY_COLOR});
            -webkit-background-clip:text; -webkit-text-fill-color:transparent;
        }}
        .vanbox-timestamp {{
            display:inline-block; font-size:.75rem; font-weight:500; color:{SUBTLE_TEXT};
            background: rgba(243,244,246,.8); padding:.2rem .75rem; border-radius:999px;
        }}
        .vanbox-counter {{ font-size:.85rem; font-weight:500; color:{SUBTLE_TEXT}; text-align:right; }}
        .vanbox-counter.over {{ color:{DANGER_COLOR}; }}
        .vanbox-empty {{ text-align:center; padding:3rem 0; color:{SUBTLE_TEXT}; }}
        .stButton button {{ border-radius: 12px; font-weight: 600; }}
        .stButton button:disabled {{ opacity: .5; cursor: not-allowed; }}
        </style>
    """, unsafe_allow_html=True)


def brand(title: str = "Vanbox"):
    st.markdown(
        f'<div class="vanbox-brand"><span>📝</span><span>{title}</span></div>',
        unsafe_allow_html=True,
    )


def char_counter(count: int, limit: int):
    css_class = "vanbox-counter over" if count > limit else "vanbox-counter"
    st.markdown(f'<div class="{css_class}">{count} / {limit}</div>', unsafe_allow_html=True)


def timestamp_badge(text: str):
    st.markdown(f'<span class="vanbox-timestamp">{html.escape(text)}</span>', unsafe_allow_html=True)
