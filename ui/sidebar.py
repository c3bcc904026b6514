import json
import streamlit as st
from core.state import save_state
from tpo_pricing.engine import coerce_limits
from tpo_pricing.presets import LOAN_LIMITS


def render_limits_sidebar():
    """Sidebar with an editable conforming / high balance limit table."""
    st.session_state.setdefault("loan_limits", json.loads(json.dumps(LOAN_LIMITS)))

    st.sidebar.header("Loan Limits")
    limits_json = st.sidebar.text_area(
        "Loan Limit Table",
        value=json.dumps(st.session_state["loan_limits"], indent=2),
        help="Keyed by unit count (1-4). Missing unit counts use the 1-unit limits.",
    )

    # JSONDecodeError and pydantic's ValidationError are both ValueErrors.
    try:
        table = json.loads(limits_json)
        coerce_limits(table)
    except ValueError as exc:
        st.sidebar.error(f"Invalid loan limit table; keeping previous values. {exc}")
    else:
        st.session_state["loan_limits"] = table
    save_state()
    return st.session_state["loan_limits"]
