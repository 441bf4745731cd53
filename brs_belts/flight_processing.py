# brs_belts/flight_processing.py

import logging
from datetime import timedelta

import pandas as pd

from .config import BRS_CONFIG, FLOW_RULES, HEAVY_CARRIERS, STATUS_EXCLUDE, STATUS_INCLUDE, get_rows_dataframe_schema
from .models import CTA, DOMESTIC, INTERNATIONAL, Flight


def classify_flow(origin_iata, rules=FLOW_RULES):
    origin = (origin_iata or "").strip().upper()
    if origin in rules[CTA]["iata_origins"]:
        return CTA
    if origin in rules[DOMESTIC]["iata_origins"]:
        return DOMESTIC
    return INTERNATIONAL


def is_heavy(flight, airline="", pax_estimate=None, carriers=HEAVY_CARRIERS,
             pax_threshold=BRS_CONFIG["HEAVY_PAX_THRESHOLD"]):
    """
    Heavy = operated by a known high-capacity carrier, or more than `pax_threshold` passengers expected.
    The carrier is matched on the airline code or on the designator prefix (BY1234, TOM1234).
    """
    codes = {c.upper() for c in carriers}
    if (airline or "").strip().upper() in codes:
        return True
    designator = (flight or "").replace(" ", "").upper()
    for code in codes:
        rest = designator[len(code):]
        if designator.startswith(code) and rest[:1].isdigit():
            return True
    if pax_estimate is None or pd.isna(pax_estimate):
        return False
    return float(pax_estimate) > pax_threshold


def belt_window(eta, flow, rules=FLOW_RULES):
    """Belt-occupancy window (start, end) derived from the ETA and the flow buffers."""
    buffers = rules.get(flow, {}).get("buffers")
    if not buffers:
        return eta, eta + timedelta(minutes=BRS_CONFIG["DEFAULT_BELT_WINDOW_MINUTES"])
    start = eta + timedelta(minutes=buffers["start"])
    end = start + timedelta(minutes=buffers["dwell"] + buffers["cleanup"])
    return start, end


def _to_utc(series):
    return pd.to_datetime(series, utc=True, errors="coerce", format="ISO8601")


def _text(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def process_arrival_rows(raw_rows_df, now=None, horizon_minutes=BRS_CONFIG["HORIZON_MINUTES"],
                         status_include=STATUS_INCLUDE, status_exclude=STATUS_EXCLUDE):
    """
    Normalise raw arrivals rows into the row shape the allocator works on.
    Every timestamp is made timezone-aware (UTC) up front.
    """
    if raw_rows_df is None or raw_rows_df.empty:
        return get_rows_dataframe_schema()

    df = raw_rows_df.copy()
    for col in ["flight", "origin_iata", "airline", "status", "flow", "reason", "belt",
                "pax_estimate", "eta", "start", "end"]:
        if col not in df.columns:
            df[col] = None

    df["eta"] = _to_utc(df["eta"])
    df["start"] = _to_utc(df["start"])
    df["end"] = _to_utc(df["end"])
    if now is not None:
        now = pd.Timestamp(now)
        now = now.tz_localize("UTC") if now.tzinfo is None else now.tz_convert("UTC")

    processed_rows = []
    skipped = 0
    for _, row in df.iterrows():
        flight = _text(row["flight"]).replace(" ", "").upper()
        eta = row["eta"] if pd.notna(row["eta"]) else row["start"]
        if not flight or pd.isna(eta):
            skipped += 1
            continue

        status = _text(row["status"]).lower()
        if any(x in status for x in status_exclude):
            continue
        if status_include and not any(x in status for x in status_include):
            continue
        if now is not None:
            dt = (eta - now).total_seconds() / 60
            if not (0 < dt <= horizon_minutes):
                continue

        origin = _text(row["origin_iata"]).upper()
        flow = _text(row["flow"]).upper() or classify_flow(origin)

        start, end = row["start"], row["end"]
        if pd.isna(start) or pd.isna(end) or end < start:
            start, end = belt_window(eta, flow)

        pax = pd.to_numeric(row["pax_estimate"], errors="coerce")
        airline = _text(row["airline"]).upper()

        record = row.to_dict()
        record.update({
            "flight": flight, "origin_iata": origin, "airline": airline, "status": status,
            "pax_estimate": pax, "eta": eta, "start": start, "end": end, "flow": flow,
            "heavy": is_heavy(flight, airline, pax), "reason": _text(row["reason"]),
        })
        processed_rows.append(record)

    if skipped:
        logging.warning("Skipped %d arrival rows without a flight designator or a usable time", skipped)
    if not processed_rows:
        return get_rows_dataframe_schema()

    rows_df = pd.DataFrame(processed_rows)
    rows_df.sort_values(by="start", kind="stable", inplace=True)
    return rows_df.reset_index(drop=True)


def flights_from_dataframe(rows_df):
    flights = []
    for idx, row in rows_df.iterrows():
        pax = row.get("pax_estimate")
        flights.append(Flight(
            flight=row["flight"],
            start=row["start"],
            end=row["end"],
            flow=row["flow"],
            requested_belt=row.get("belt"),
            heavy=bool(row.get("heavy")) if pd.notna(row.get("heavy")) else False,
            reason=_text(row.get("reason")),
            origin_iata=_text(row.get("origin_iata")),
            airline=_text(row.get("airline")),
            pax_estimate=None if pax is None or pd.isna(pax) else float(pax),
            row_id=idx,
        ))
    return flights


def allocation_to_dataframe(result, rows_df):
    """Write the allocator's belts and reasons back onto the rows they came from."""
    if rows_df is None or rows_df.empty:
        return get_rows_dataframe_schema()

    df = rows_df.copy()
    df["belt"] = df["belt"].astype(object)
    df["forced"] = False
    for f in result.flights:
        df.at[f.row_id, "belt"] = f.assigned_belt
        df.at[f.row_id, "reason"] = f.reason
        df.at[f.row_id, "end"] = f.end
        df.at[f.row_id, "forced"] = f.reason.startswith("forced")
    return df
