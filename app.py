import logging

import streamlit as st

from core.config import get_settings
from core.logging_config import setup_logging
from core.state import load_state, save_state
from tpo_pricing.store import ModelStore
from ui.admin import render_admin_view
from ui.results import render_pricing_view
from ui.sidebar import render_limits_sidebar
from ui.topbar import render_topbar

logger = logging.getLogger(__name__)

st.set_page_config(page_title="TPO RATE SHEET PRICING", layout="wide")
setup_logging()


@st.cache_resource
def get_store() -> ModelStore:
    """Process-wide model store shared by every session."""
    store = ModelStore(get_settings().store_path)
    if store.load() is None:
        logger.info("No stored pricing model at %s", store.path)
    return store


load_state()
view_mode = render_topbar()
render_limits_sidebar()
store = get_store()

if view_mode == "admin":
    render_admin_view(store)
else:
    render_pricing_view(store)

save_state()
