import json
import logging
import os
from typing import Any

import streamlit as st

from core.config import get_settings

logger = logging.getLogger(__name__)

SESSION_FILE = get_settings().session_file

# Only persist a curated subset of ``st.session_state`` keys. Streamlit
# widgets such as buttons inject their own keys (e.g. ``run_pricing``)
# into ``session_state`` when interacted with. Persisting those ephemeral
# keys causes ``StreamlitAPIException`` on the next run because widgets with
# the same keys disallow manual assignment. To avoid this, limit persistence
# to known application data keys.
PERSISTED_KEYS = {
    "view_mode",
    "scenario",
    "loan_limits",
    "sheet_format",
}


def _serializable(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool, list, dict))


def load_state() -> None:
    """Restore Streamlit session state from ``SESSION_FILE`` if it exists."""
    if not os.path.exists(SESSION_FILE):
        return
    try:
        with open(SESSION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not restore session from %s: %s", SESSION_FILE, exc)
        return
    if not isinstance(data, dict):
        return
    for key, val in data.items():
        if key in PERSISTED_KEYS:
            st.session_state.setdefault(key, val)


def save_state() -> None:
    """Persist serializable session state to ``SESSION_FILE``."""
    data = {
        k: v
        for k, v in st.session_state.items()
        if k in PERSISTED_KEYS and _serializable(v)
    }
    try:
        with open(SESSION_FILE, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except (OSError, TypeError) as exc:
        logger.warning("Could not save session to %s: %s", SESSION_FILE, exc)
