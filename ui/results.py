import streamlit as st

from core.rules import evaluate_rules
from core.utils import fmt_money, fmt_price, fmt_rate
from tpo_pricing.engine import NoRowsInGrid, PricingError, price
from tpo_pricing.presets import DISCLAIMER
from ui.scenario import render_scenario_form


def render_rules(rules):
    for r in rules:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")


def render_pricing_result(model, scenario, limits=None):
    """Price the scenario and render rate, payment and the price breakdown."""
    loaded = model is not None and bool(model.programs)
    rules = evaluate_rules(scenario, limits, model_loaded=loaded)
    result = None
    try:
        result = price(model, scenario, limits=limits)
    except NoRowsInGrid as exc:
        st.error(f"[{exc.code}] {exc.message}")
    except PricingError as exc:
        st.warning(f"No pricing available for this combination. {exc.message}")

    if result is not None:
        st.session_state["pricing_result"] = result.model_dump()
        cols = st.columns(3)
        cols[0].metric("Rate", fmt_rate(result.rate))
        cols[1].metric("Monthly P&I", fmt_money(result.monthly_principal_and_interest))
        cols[2].metric("Tier", "High Balance" if result.high_balance else "Standard")
        with st.expander("Price Breakdown"):
            adj = result.adjustments
            st.caption(f"Base Price: {fmt_price(result.base_price)}")
            st.caption(f"LLPA: -{fmt_price(adj.llpa)} • Payup: +{fmt_price(adj.payup)} • Broker Comp: +{fmt_price(adj.broker_comp)}")
            st.caption(f"Final Price: {fmt_price(result.final_price)}")
            st.caption(f"Amortization: {result.amortization_years} years")
    else:
        st.session_state.pop("pricing_result", None)

    render_rules(rules)
    if result is not None:
        st.caption(DISCLAIMER)
    return result


def render_pricing_view(store):
    st.header("Pricing")
    scenario = render_scenario_form()
    if scenario is None:
        return None
    return render_pricing_result(store.current, scenario, st.session_state.get("loan_limits"))
