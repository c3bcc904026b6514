import streamlit as st
from pydantic import ValidationError

from core.integrations import lookup_postal_code
from core.utils import fill_loan_or_ltv
from tpo_pricing.models import Scenario
from tpo_pricing.presets import (
    OCCUPANCY_OPTIONS,
    PROGRAM_LABELS,
    PROPERTY_TYPE_OPTIONS,
    PURPOSE_OPTIONS,
    TERM_LABELS,
)

DEFAULT_SCENARIO = {
    "program_id": "conventional",
    "term_key": "30yr",
    "zip": "",
    "purchase_price": 0.0,
    "loan_amount": 0.0,
    "ltv": 0.0,
    "property_type": "sfr",
    "occupancy": "primary",
    "purpose": "purchase",
    "fico_score": 760,
}


@st.cache_data(ttl=24 * 3600, show_spinner=False)
def _location(zip_code: str):
    return lookup_postal_code(zip_code)


def _index(options, value) -> int:
    return options.index(value) if value in options else 0


def _select(container, label, options: dict, value):
    keys = list(options)
    return container.selectbox(label, keys, index=_index(keys, value), format_func=options.get)


def render_scenario_form():
    """Collect the loan scenario and return it validated, or ``None``."""
    st.session_state.setdefault("scenario", dict(DEFAULT_SCENARIO))
    s = st.session_state.scenario
    with st.expander("Loan Scenario", expanded=True):
        c1, c2 = st.columns(2)
        s["program_id"] = _select(c1, "Program", PROGRAM_LABELS, s.get("program_id"))
        s["term_key"] = _select(c2, "Term", TERM_LABELS, s.get("term_key"))
        s["zip"] = c1.text_input("ZIP", value=s.get("zip", ""), max_chars=5)
        if s["zip"]:
            c2.caption(f"Location: {_location(s['zip'].strip()) or 'ZIP not found'}")
        s["purchase_price"] = c1.number_input(
            "Purchase Price", min_value=0.0, value=float(s.get("purchase_price") or 0.0), step=1000.0
        )
        s["loan_amount"] = c2.number_input(
            "Loan Amount", min_value=0.0, value=float(s.get("loan_amount") or 0.0), step=1000.0
        )
        s["ltv"] = c1.number_input("LTV %", min_value=0.0, value=float(s.get("ltv") or 0.0), step=0.5)
        s["fico_score"] = c2.number_input(
            "FICO", min_value=300, max_value=850, value=int(s.get("fico_score") or 760), step=1
        )
        s["property_type"] = _select(c1, "Property Type", PROPERTY_TYPE_OPTIONS, s.get("property_type"))
        s["occupancy"] = _select(c2, "Occupancy", OCCUPANCY_OPTIONS, s.get("occupancy"))
        s["purpose"] = _select(c1, "Purpose", PURPOSE_OPTIONS, s.get("purpose"))

    loan, ltv = fill_loan_or_ltv(s["purchase_price"], s["loan_amount"], s["ltv"])
    if loan and not s["loan_amount"]:
        st.caption(f"Loan Amount from LTV: ${loan:,.0f}")
    if ltv and not s["ltv"]:
        st.caption(f"LTV: {ltv:.2f}%")
    st.session_state.scenario = s
    if not loan:
        st.info("Enter a loan amount, or a purchase price and LTV, to price this scenario.")
        return None

    try:
        return Scenario(
            program_id=s["program_id"],
            term_key=s["term_key"],
            loan_amount=loan,
            property_type=s["property_type"],
            occupancy=s["occupancy"],
            purpose=s["purpose"],
            fico_score=s["fico_score"],
            purchase_price=s["purchase_price"] or None,
            ltv=ltv,
        )
    except ValidationError as exc:
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"])
            st.error(f"{field}: {err['msg']}")
        return None
