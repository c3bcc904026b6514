import streamlit as st
from core.version import __version__

VIEWS = {"pricing": "Pricing", "admin": "Admin"}


def render_topbar():
    """Render the sticky top bar and return the selected view."""
    st.markdown(
        """
        <style>
        .tpo-topbar {position:sticky; top:0; background-color:white; z-index:100; padding:4px 8px; border-bottom:1px solid #ddd;}
        .tpo-topbar div[data-testid="stHorizontalBlock"] {align-items:center;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    with st.container():
        st.markdown('<div class="tpo-topbar">', unsafe_allow_html=True)
        left, right = st.columns([1, 2])
        with left:
            st.markdown(f"**TPO PRICING v{__version__}**")
        with right:
            view_mode = st.radio(
                "View",
                list(VIEWS),
                format_func=VIEWS.get,
                horizontal=True,
                key="view_mode",
            )
        st.markdown("</div>", unsafe_allow_html=True)
    return view_mode
