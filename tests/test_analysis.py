import pandas as pd

from brs_belts.analysis import analyze_hourly_belt_demand, generate_advisory_messages, summarize_belt_usage


def _ts(text):
    return pd.Timestamp(text, tz="UTC")


def _allocated_rows():
    return pd.DataFrame([
        {"flight": "U2228", "belt": 1, "start": _ts("2025-06-23 10:15"), "end": _ts("2025-06-23 10:45"), "reason": "spread"},
        {"flight": "BY100", "belt": 5, "start": _ts("2025-06-23 10:20"), "end": _ts("2025-06-23 11:00"), "reason": "heavy_pref"},
        {"flight": "FR300", "belt": 1, "start": _ts("2025-06-23 11:30"), "end": _ts("2025-06-23 12:00"), "reason": "forced:earliest_clearing"},
        {"flight": "XX999", "belt": "", "start": _ts("2025-06-23 11:30"), "end": _ts("2025-06-23 12:00"), "reason": ""},
    ])


def test_summarize_belt_usage():
    summary = summarize_belt_usage(_allocated_rows())
    assert summary["belt"].tolist() == [1, 5]
    assert summary["flights"].tolist() == [2, 1]
    assert summary["busy_minutes"].tolist() == [60.0, 40.0]
    assert summary["forced"].tolist() == [1, 0]


def test_summarize_belt_usage_empty():
    assert summarize_belt_usage(pd.DataFrame()).empty


def test_hourly_belt_demand():
    demand = analyze_hourly_belt_demand(_allocated_rows())
    assert list(demand.columns) == ["belt_1", "belt_5"]
    assert demand["belt_1"].tolist() == [1, 1]
    assert demand["belt_5"].tolist() == [1, 0]


def test_advisories_warn_on_forced_placements():
    summary = summarize_belt_usage(_allocated_rows())
    advisories = generate_advisory_messages(1, summary)
    assert advisories[0]["type"] == "warning"
    assert "belts: 1" in advisories[0]["body"]
    assert advisories[1]["title"] == "BUSIEST BELT"
    assert all(a["type"] != "success" for a in advisories)


def test_advisories_normal_status():
    advisories = generate_advisory_messages(0, summarize_belt_usage(pd.DataFrame()))
    assert advisories == [{"type": "success", "title": "STATUS: NORMAL", "body": "Every flight fits on a belt without stacking."}]


def test_hourly_belt_demand_across_autumn_clock_change():
    rows = pd.DataFrame([
        {"flight": "BY1", "belt": 1, "start": _ts("2026-10-25 00:30"), "end": _ts("2026-10-25 01:00")},
        {"flight": "BY2", "belt": 1, "start": _ts("2026-10-25 01:30"), "end": _ts("2026-10-25 02:00")},
    ])
    demand = analyze_hourly_belt_demand(rows, timezone="Europe/London")
    assert len(demand) == 2, "01:00 BST and 01:00 GMT are separate hours"
    assert demand["belt_1"].tolist() == [1, 1]
    assert demand.index.is_unique
    assert demand.index.is_monotonic_increasing
