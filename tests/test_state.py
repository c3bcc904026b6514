import json
import streamlit as st
from core import state


def test_save_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    st.session_state["scenario"] = {"loan_amount": 300000.0}
    st.session_state["run_pricing"] = True
    state.save_state()
    data = json.loads(file.read_text())
    assert "run_pricing" not in data
    assert data["scenario"] == {"loan_amount": 300000.0}


def test_load_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text(json.dumps({"loan_limits": {}, "run_pricing": True}))
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "loan_limits" in st.session_state
    assert "run_pricing" not in st.session_state


def test_load_state_tolerates_corrupt_file(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text("{not json")
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "scenario" not in st.session_state
