import json
import logging

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from brs_belts.allocator import allocate_belts
from brs_belts.analysis import analyze_hourly_belt_demand, generate_advisory_messages, summarize_belt_usage
from brs_belts.config import BRS_CONFIG
from brs_belts.data_loader import build_assignments_document, load_arrivals
from brs_belts.flight_processing import allocation_to_dataframe, flights_from_dataframe, process_arrival_rows
from brs_belts.generate_data import generate_sample_arrivals
from brs_belts.models import InvalidFlowKind

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="BRS Belt Allocation", layout="wide")
st.title("BRS Baggage Belt Allocation")

st.markdown("Upload an arrivals CSV or an **assignments.json** document, or use the sample day.")

with st.sidebar:
    st.header("Belt layout")
    general_belts = st.multiselect(
        "General-purpose belts (international)",
        options=[1, 2, 3, 5, 6, 8],
        default=list(BRS_CONFIG["GENERAL_BELTS"]),
    )
    cta_belt = st.number_input("CTA belt", min_value=1, max_value=20, value=BRS_CONFIG["CTA_BELT"], step=1)
    domestic_belt = st.number_input("Domestic belt", min_value=1, max_value=20, value=BRS_CONFIG["DOMESTIC_BELT"], step=1)
    large_options = [None] + sorted(general_belts)
    large_default = BRS_CONFIG["LARGE_BELT"] if BRS_CONFIG["LARGE_BELT"] in general_belts else None
    large_belt = st.selectbox("Large-capacity belt", options=large_options, index=large_options.index(large_default))
    min_gap = st.number_input("Minimum gap between flights (min)", min_value=0, max_value=30, value=BRS_CONFIG["MIN_GAP_MINUTES"], step=1)

    st.subheader("Input filter")
    use_horizon = st.checkbox("Only flights arriving within the horizon", value=False)
    horizon = st.number_input("Horizon (min)", min_value=15, max_value=720, value=BRS_CONFIG["HORIZON_MINUTES"], step=15)

uploaded = st.file_uploader("Arrivals file", type=["csv", "json"])
use_sample = st.checkbox("Use sample day", value=False)

meta, raw_df = None, None
if uploaded is not None:
    try:
        meta, raw_df = load_arrivals(uploaded, filename=uploaded.name)
    except ValueError as e:
        st.error(str(e))
        st.stop()
elif use_sample:
    raw_df = generate_sample_arrivals(num_flights=60, seed=23)
    meta = {"generated_at_utc": "", "generated_at_local": "", "source": "sample day", "horizon_minutes": 0}

if raw_df is None:
    st.info("Upload a file or load the sample day to run the allocation.")
    st.stop()

now = pd.Timestamp.now(tz="UTC") if use_horizon else None
rows_df = process_arrival_rows(raw_df, now=now, horizon_minutes=horizon)
if rows_df.empty:
    st.warning("No usable arrivals in this input.")
    st.stop()

try:
    result = allocate_belts(
        flights_from_dataframe(rows_df),
        general_belts=general_belts,
        domestic_belt=int(domestic_belt),
        cta_belt=int(cta_belt),
        large_belt=large_belt,
        min_gap_minutes=min_gap,
    )
except InvalidFlowKind as e:
    st.error(f"Allocation stopped: {e}")
    st.stop()
except ValueError as e:
    st.error(f"Belt layout is not valid: {e}")
    st.stop()

res = allocation_to_dataframe(result, rows_df)
summary = summarize_belt_usage(res)

col1, col2, col3 = st.columns(3)
col1.metric("Flights", len(res))
col2.metric("Auto-assigned", result.auto_assigned_count)
col3.metric("Forced placements", result.forced_count)

for advisory in generate_advisory_messages(result.forced_count, summary):
    getattr(st, advisory["type"])(f"**{advisory['title']}**: {advisory['body']}")

st.subheader("Allocation")
display_cols = [c for c in ["flight", "origin_iata", "flow", "heavy", "start", "end", "belt", "reason"] if c in res.columns]
st.dataframe(res[display_cols], use_container_width=True)

st.subheader("Belt occupancy")
fig = go.Figure()
for belt, group in res.groupby("belt"):
    duration_ms = (group["end"] - group["start"]).dt.total_seconds() * 1000
    fig.add_trace(go.Bar(
        y=[f"Belt {belt}"] * len(group),
        x=duration_ms,
        base=group["start"].dt.tz_convert(BRS_CONFIG["TIMEZONE"]).dt.tz_localize(None),
        orientation="h",
        text=group["flight"],
        marker_color=["#d62728" if forced else "#1f77b4" for forced in group["forced"]],
        name=f"Belt {belt}",
        showlegend=False,
    ))
fig.update_layout(xaxis_type="date", barmode="overlay", height=120 + 40 * res["belt"].nunique())
st.plotly_chart(fig, use_container_width=True)

st.subheader("Flights starting per hour")
st.bar_chart(analyze_hourly_belt_demand(res, timezone=BRS_CONFIG["TIMEZONE"]))

st.subheader("Belt usage")
st.dataframe(summary, use_container_width=True)

meta = dict(meta, generated_at_utc=pd.Timestamp.now(tz="UTC").isoformat())
st.download_button(
    label="Download assignments.json",
    data=json.dumps(build_assignments_document(meta, res), indent=2).encode("utf-8"),
    file_name="assignments.json",
    mime="application/json",
)
