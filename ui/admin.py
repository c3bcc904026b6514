"""Admin view: load a rate sheet into the pricing model."""
from __future__ import annotations

import pandas as pd
import streamlit as st

from core.config import get_settings
from tpo_pricing.extractor import ExtractionError, read_workbook
from tpo_pricing.patterns import DEFAULT_FORMAT, FORMATS
from tpo_pricing.presets import PROGRAM_LABELS, TERM_LABELS

FORMAT_LABELS = {
    "v1": "v1 – Conforming 30 Year Fixed only (first sheet)",
    "v2": "v2 – Program sheets, all terms",
}


def _summary_frame(model) -> pd.DataFrame:
    df = pd.DataFrame(model.summary(), columns=["program", "term", "tier", "rows", "sheet"])
    df["program"] = df["program"].map(lambda p: PROGRAM_LABELS.get(p, p))
    df["term"] = df["term"].map(lambda t: TERM_LABELS.get(t, t))
    return df


def render_admin_view(store):
    st.header("Admin")
    formats = list(FORMATS)
    configured = get_settings().sheet_format
    st.session_state.setdefault("sheet_format", configured if configured in FORMATS else DEFAULT_FORMAT)
    fmt = st.selectbox(
        "Rate Sheet Format",
        formats,
        index=formats.index(st.session_state["sheet_format"]) if st.session_state["sheet_format"] in formats else 0,
        format_func=lambda f: FORMAT_LABELS.get(f, f),
    )
    st.session_state["sheet_format"] = fmt
    up = st.file_uploader("Rate Sheet", type=["xlsx", "xls", "csv"])
    if st.button("Load Pricing"):
        if up is None:
            st.error("Please choose a rate sheet file first.")
        else:
            try:
                model = store.ingest(read_workbook(up, up.name), fmt=fmt)
            except ExtractionError as exc:
                st.error(f"Error parsing workbook. Check format or try another file. Details: {exc}")
            except OSError as exc:
                st.error(f"Could not save the pricing model: {exc}")
            else:
                st.success(
                    f"Loaded {up.name}. Found {len(model.summary())} pricing grid(s) "
                    f"across {len(model.programs)} program(s) (30-Day column)."
                )

    model = store.current
    if model is None:
        st.info("No rate sheet loaded.")
        return
    st.caption(f"Current sheet: {model.source_sheet_name} • Extracted {model.extracted_at:%Y-%m-%d %H:%M} UTC")
    st.dataframe(_summary_frame(model), hide_index=True)
    if st.button("Clear Pricing Model"):
        store.clear()
        st.rerun()
