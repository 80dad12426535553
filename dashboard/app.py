"""Streamlit dashboard for district risk scoring and resource allocation."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
API_BASE_URL = os.getenv("DRA_API_BASE_URL", "http://127.0.0.1:8000")

LAND_TYPES = ["Forest", "Coastal", "Desert", "Urban"]
URBANIZATION_LEVELS = ["Rural", "Suburban", "Urban"]

st.set_page_config(
    page_title="Disaster Response Allocation",
    page_icon="🚨",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def _error_detail(exc: requests.exceptions.RequestException) -> str:
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return str(response.json().get("detail", exc))
        except ValueError:
            return str(exc)
    return str(exc)


def fetch_districts() -> List[Dict[str, Any]]:
    try:
        response = requests.get(f"{API_BASE_URL}/districts", timeout=5)
        response.raise_for_status()
        return response.json().get("districts", [])
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {_error_detail(e)}")
        return []


def submit_district(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(f"{API_BASE_URL}/districts", json=payload, timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Could not add district: {_error_detail(e)}")
        return None


def delete_district(district_id: int) -> None:
    try:
        response = requests.delete(f"{API_BASE_URL}/districts/{district_id}", timeout=5)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        st.error(f"Could not remove district: {_error_detail(e)}")


def fetch_risk_overview() -> Optional[Dict[str, Any]]:
    try:
        response = requests.get(f"{API_BASE_URL}/risk_overview", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {_error_detail(e)}")
        return None


def fetch_allocation(total_resources: int, truncate: bool) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(
            f"{API_BASE_URL}/allocate",
            json={
                "total_resources": total_resources,
                "truncate_on_exhaustion": truncate,
            },
            timeout=10,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Allocation failed: {_error_detail(e)}")
        return None


# ==========================================
# UI Page Functions
# ==========================================
def render_districts_page() -> None:
    st.header("🗺️ Districts")
    st.markdown("Register districts; risk scores are computed by the backend on entry.")

    with st.form("district_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("District Name")
            population = st.number_input("Population", min_value=1, value=10000, step=1000)
            resource_demand = st.number_input("Resource Demand", min_value=1, value=100, step=10)
        with col2:
            land_type = st.selectbox("Land Type", LAND_TYPES)
            urbanization = st.selectbox("Urbanization", URBANIZATION_LEVELS)
        submitted = st.form_submit_button("Add District", type="primary")

    if submitted:
        created = submit_district(
            {
                "name": name,
                "population": int(population),
                "land_type": land_type,
                "urbanization": urbanization,
                "resource_demand": int(resource_demand),
            }
        )
        if created:
            st.success(f"Added {created['name']} (risk {created['risk_score']}, {created['risk_level']})")

    districts = fetch_districts()
    if not districts:
        st.info("No districts registered yet.")
        return

    overview = fetch_risk_overview()
    if overview:
        metric_col1, metric_col2, metric_col3 = st.columns(3)
        metric_col1.metric("Districts", overview["district_count"])
        metric_col2.metric("Total Risk", overview["total_risk"])
        metric_col3.metric("Total Demand", overview["total_demand"])

    df = pd.DataFrame(districts)
    st.dataframe(
        df[[
            "district_id",
            "name",
            "population",
            "land_type",
            "urbanization",
            "resource_demand",
            "risk_score",
            "risk_level",
            "risk_resource_ratio",
        ]].round({"risk_resource_ratio": 2}),
        use_container_width=True,
    )

    remove_col1, remove_col2 = st.columns([3, 1])
    with remove_col1:
        district_id = st.selectbox(
            "Remove district",
            [item["district_id"] for item in districts],
            format_func=lambda value: next(
                f"#{item['district_id']} {item['name']}" for item in districts if item["district_id"] == value
            ),
        )
    with remove_col2:
        if st.button("Remove"):
            delete_district(int(district_id))
            st.rerun()


def render_allocation_page() -> None:
    st.header("⚖️ Resource Allocation")
    st.markdown("Districts with higher risk-to-demand ratios receive resources first.")

    col1, col2 = st.columns(2)
    with col1:
        total_resources = st.number_input("Total Resources", min_value=1, value=1000, step=50)
    with col2:
        truncate = st.checkbox("Stop listing districts once resources run out", value=False)

    if st.button("Allocate Resources", type="primary"):
        with st.spinner("Allocating..."):
            result = fetch_allocation(int(total_resources), truncate)

        if result:
            st.subheader("Allocation Summary")
            metric_col1, metric_col2, metric_col3 = st.columns(3)
            metric_col1.metric("Total Resources", result["total_resources"])
            metric_col2.metric(
                "Allocated",
                result["total_allocated"],
                delta=f"{result['allocated_percentage']:.1f}%",
            )
            metric_col3.metric("Remaining", result["remaining"])
            st.progress(min(1.0, result["allocated_percentage"] / 100.0))

            outcomes = result.get("outcomes", [])
            if outcomes:
                df = pd.DataFrame(outcomes)
                st.write("### Allocation Results")
                st.dataframe(
                    df[["rank", "name", "risk_score", "resource_demand", "allocated", "status"]],
                    use_container_width=True,
                )
                st.write("### Demand vs Allocation")
                df["label"] = df["rank"].astype(str) + ". " + df["name"]
                st.bar_chart(df.set_index("label")[["resource_demand", "allocated"]])


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("Disaster Response")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigation Module",
        ["Districts", "Allocation"],
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(f"Backend: {API_BASE_URL}")

    if page == "Districts":
        render_districts_page()
    elif page == "Allocation":
        render_allocation_page()


if __name__ == "__main__":
    main()
