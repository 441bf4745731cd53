# brs_belts/data_loader.py

import json
import math
import os

import pandas as pd

META_DEFAULTS = {
    "generated_at_utc": "",
    "generated_at_local": "",
    "source": "",
    "horizon_minutes": 0,
}


def _read_text(source):
    if hasattr(source, "read"):
        raw = source.read()
        return raw.decode("utf-8") if isinstance(raw, bytes) else raw
    with open(source, "r", encoding="utf-8") as f:
        return f.read()


def load_assignments(source):
    """
    Read an assignments document (path or file-like).

    Returns:
        (dict, pd.DataFrame): (meta fields, rows)
    """
    parsed = json.loads(_read_text(source))
    if not isinstance(parsed, dict):
        raise ValueError("Assignments document must be a JSON object with a 'rows' list")

    meta = {key: parsed.get(key) or default for key, default in META_DEFAULTS.items()}
    rows = parsed.get("rows")
    rows_df = pd.DataFrame(rows if isinstance(rows, list) else [])
    return meta, rows_df


def load_schedule_csv(source):
    df = pd.read_csv(source, dtype={"belt": str, "flight": str})
    if "flight" not in df.columns:
        raise ValueError("Missing required column in arrivals CSV: 'flight'")
    if "eta" not in df.columns and "start" not in df.columns:
        raise ValueError("Arrivals CSV needs an 'eta' or a 'start' column")
    return df


def load_arrivals(source, filename=None):
    """Dispatch on the file extension; JSON sources keep their meta block."""
    name = filename or (source if isinstance(source, (str, os.PathLike)) else getattr(source, "name", ""))
    if str(name).lower().endswith(".json"):
        return load_assignments(source)
    return dict(META_DEFAULTS, source=os.path.basename(str(name))), load_schedule_csv(source)


def _iso(value):
    if value is None or value is pd.NaT or value is pd.NA:
        return None
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, float) and math.isnan(value):
        return None
    if hasattr(value, "item"):
        return value.item()
    return value


def build_assignments_document(meta, rows_df):
    out = {key: meta.get(key, default) for key, default in META_DEFAULTS.items()}
    rows = []
    if rows_df is not None and not rows_df.empty:
        for record in rows_df.to_dict(orient="records"):
            rows.append({key: _iso(value) for key, value in record.items()})
    out["rows"] = rows
    return out
