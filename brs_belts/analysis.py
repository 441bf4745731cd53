# brs_belts/analysis.py

import pandas as pd


def _belt_rows(rows_df):
    if rows_df is None or rows_df.empty or "belt" not in rows_df.columns:
        return pd.DataFrame()
    df = rows_df.copy()
    df["belt"] = pd.to_numeric(df["belt"], errors="coerce")
    df = df.dropna(subset=["belt", "start", "end"])
    df["belt"] = df["belt"].astype(int)
    return df


def analyze_hourly_belt_demand(rows_df, timezone="UTC"):
    """
    Number of flights whose belt window starts in each hour, one column per belt.
    """
    df = _belt_rows(rows_df)
    if df.empty:
        return pd.DataFrame()

    # floor in UTC; wall-clock hours repeat when the clocks go back
    hours_utc = pd.to_datetime(df["start"], utc=True).dt.floor("h")
    hourly_index = pd.date_range(start=hours_utc.min(), end=hours_utc.max(), freq="h").tz_convert(timezone)

    demand = df.groupby([hours_utc.dt.tz_convert(timezone), df["belt"]]).size().unstack(fill_value=0)
    demand = demand.reindex(hourly_index, fill_value=0)
    demand.columns = [f"belt_{b}" for b in demand.columns]
    return demand


def summarize_belt_usage(rows_df):
    df = _belt_rows(rows_df)
    if df.empty:
        return pd.DataFrame(columns=["belt", "flights", "busy_minutes", "forced"])

    df["busy_minutes"] = (pd.to_datetime(df["end"], utc=True) - pd.to_datetime(df["start"], utc=True)).dt.total_seconds() / 60
    if "forced" not in df.columns:
        df["forced"] = df.get("reason", pd.Series("", index=df.index)).fillna("").astype(str).str.startswith("forced")

    summary = df.groupby("belt").agg(
        flights=("flight", "size"),
        busy_minutes=("busy_minutes", "sum"),
        forced=("forced", "sum"),
    ).reset_index()
    summary["forced"] = summary["forced"].astype(int)
    return summary.sort_values("belt").reset_index(drop=True)


def generate_advisory_messages(forced_count, usage_summary):
    advisories = []
    if forced_count > 0:
        stacked = usage_summary[usage_summary["forced"] > 0]["belt"].tolist() if not usage_summary.empty else []
        belts = ", ".join(str(b) for b in stacked) or "-"
        advisories.append({"type": "warning", "title": "STACKED BELTS", "body": f"**{forced_count}** flight(s) were forced onto a belt that was still in use (belts: {belts})."})
    if usage_summary is not None and not usage_summary.empty:
        busiest = usage_summary.sort_values(["busy_minutes", "belt"], ascending=[False, True]).iloc[0]
        advisories.append({"type": "info", "title": "BUSIEST BELT", "body": f"Belt **{int(busiest['belt'])}** carries {int(busiest['flights'])} flight(s), {int(busiest['busy_minutes'])} min of reclaim."})
    if forced_count == 0:
        advisories.append({"type": "success", "title": "STATUS: NORMAL", "body": "Every flight fits on a belt without stacking."})
    return advisories
