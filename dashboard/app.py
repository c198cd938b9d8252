"""Streamlit dashboard for the attendance strategy planner."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
# Point this to your local FastAPI server
API_BASE_URL = "http://127.0.0.1:8000"
MODES = ["easy", "medium", "hard"]
MODE_LABELS = {"easy": "Easy · spread out", "medium": "Medium · balanced", "hard": "Hard · fastest"}

st.set_page_config(
    page_title="Attendance Planner",
    page_icon="📅",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def _post(path: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(f"{API_BASE_URL}{path}", json=payload, timeout=10)
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None
    if response.status_code >= 400:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            # Proxies and crashed workers answer with plain text or HTML.
            detail = response.text
        if isinstance(detail, list):
            detail = "; ".join(item.get("msg", str(item)) for item in detail)
        st.error(detail)
        return None
    return response.json()


def fetch_divisions() -> list[str]:
    try:
        response = requests.get(f"{API_BASE_URL}/api/divisions", timeout=5)
        response.raise_for_status()
        return response.json().get("divisions", [])
    except requests.exceptions.RequestException as e:
        st.error(f"Could not load divisions: {e}")
        return []


def _display_count(value: Optional[int]) -> str:
    return "∞" if value is None else str(value)


# ==========================================
# UI Page Functions
# ==========================================
def render_inputs() -> Dict[str, Any]:
    divisions = fetch_divisions() or ["6A22"]
    st.sidebar.subheader("Your attendance")
    division = st.sidebar.selectbox("Division", divisions)
    target = st.sidebar.slider("Target %", 1, 100, 75)
    conducted = st.sidebar.number_input("Lectures conducted", min_value=0, max_value=10000, value=40)
    attended = st.sidebar.number_input("Lectures attended", min_value=0, max_value=10000, value=28)
    no_attendance = st.sidebar.number_input("No-attendance lectures", min_value=0, max_value=10000, value=0)
    return {
        "division": division,
        "target": target,
        "conducted": int(conducted),
        "attended": int(attended),
        "noAttendance": int(no_attendance),
    }


def render_calculator(form: Dict[str, Any]) -> None:
    st.header("📊 Current standing")
    payload = {key: form[key] for key in ("conducted", "attended", "noAttendance", "target")}
    result = _post("/api/attendance/calculate", payload)
    if not result:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Attendance", f"{result['currentPercentage']:.2f}%")
    col2.metric("Lectures needed", _display_count(result["lecturesNeeded"]))
    col3.metric("Lectures you can skip", result["lecturesMissable"])

    if result["isAboveTarget"]:
        st.success(f"You are at or above your {form['target']}% target.")
    elif result["lecturesNeeded"] is None:
        st.error("A 100% target can no longer be reached.")
    else:
        st.warning(f"Attend the next {result['lecturesNeeded']} lectures to reach {form['target']}%.")


def render_strategy(form: Dict[str, Any]) -> None:
    st.header("🗓️ Recommended lectures")
    mode = st.radio("Strategy mode", MODES, index=1, format_func=MODE_LABELS.get, horizontal=True)
    plan = _post("/api/recommendation", {**form, "mode": mode})
    if not plan:
        return

    summary = plan["summary"]
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Required", _display_count(summary["requiredLectures"]))
    col2.metric("Scheduled", summary["scheduledCount"])
    col3.metric("Days to recover", summary["daysToRecover"])
    col4.metric("Projected", f"{summary['projectedPercentage']:.1f}%")

    slots = plan.get("recommendedSlots", [])
    if slots:
        df = pd.DataFrame(slots).set_index("index")
        st.dataframe(df, use_container_width=True)
    elif summary["requiredLectures"] == 0:
        st.info("Target already met. No recovery plan needed.")
    else:
        st.info("No upcoming lectures remain before teaching ends.")


def render_comparison(form: Dict[str, Any]) -> None:
    st.header("⚖️ Mode comparison")
    comparison = _post("/api/strategy/compare", form)
    if not comparison:
        return

    if comparison["notEnoughSlots"]:
        st.warning("Not enough lectures remain to reach the target.")
    df = pd.DataFrame(comparison["modes"]).set_index("mode")
    st.dataframe(df, use_container_width=True)


def render_simulation(form: Dict[str, Any]) -> None:
    st.header("🧪 What-if")
    col1, col2 = st.columns(2)
    with col1:
        attend_more = st.slider("Attend N more", 0, 200, 0)
    with col2:
        skip_more = st.number_input("Skip N more", min_value=0, max_value=200, value=0)

    result = _post(
        "/api/strategy/simulate",
        {**form, "attendMore": attend_more, "skipMore": int(skip_more)},
    )
    if not result:
        return

    attend = result.get("attend") or {}
    skip = result.get("skip") or {}
    col_a, col_b, col_c = st.columns(3)
    col_a.metric("After attending", f"{attend.get('projectedPercentage', 0):.1f}%")
    col_b.metric(
        "After skipping",
        f"{skip.get('newPercentage', 0):.1f}%",
        delta=f"-{skip.get('percentageDrop', 0):.1f}%",
        delta_color="inverse",
    )
    col_c.metric("Extra lectures to recover", _display_count(skip.get("extraRequired")))
    if skip.get("recoveryDifficult"):
        st.error("Recovery will be very difficult after that many skips.")

    curve = _post("/api/strategy/risk-curve", form)
    if curve:
        points = pd.DataFrame(curve["points"]).set_index("lectures")
        st.line_chart(points["percentage"])


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("Attendance Planner")
    st.sidebar.markdown("---")
    form = render_inputs()

    page = st.sidebar.radio(
        "Navigation",
        ["Standing", "Strategy", "Compare", "What-if"],
    )

    if page == "Standing":
        render_calculator(form)
    elif page == "Strategy":
        render_strategy(form)
    elif page == "Compare":
        render_comparison(form)
    elif page == "What-if":
        render_simulation(form)


if __name__ == "__main__":
    main()
