import pandas as pd
import pytest

from brs_belts.allocator import allocate_belts
from brs_belts.flight_processing import (
    allocation_to_dataframe,
    belt_window,
    classify_flow,
    flights_from_dataframe,
    is_heavy,
    process_arrival_rows,
)
from brs_belts.models import CTA, DOMESTIC, INTERNATIONAL, InvalidFlowKind


def _ts(text):
    return pd.Timestamp(text, tz="UTC")


def _raw_rows():
    return pd.DataFrame([
        {"flight": "BY100", "origin_iata": "ams", "eta": "2025-06-23T10:00:00Z", "status": "Estimated", "belt": ""},
        {"flight": "U2 200", "origin_iata": "CDG", "eta": "2025-06-23T10:00:00Z", "status": "en route", "belt": ""},
        {"flight": "EI300", "origin_iata": "DUB", "eta": "2025-06-23T10:05:00Z", "status": "scheduled", "belt": ""},
        {"flight": "LM400", "origin_iata": "EDI", "eta": "2025-06-23T10:10:00Z", "status": "landed", "belt": ""},
        {"flight": "FR500", "origin_iata": "AGP", "eta": "2025-06-23T10:20:00Z", "status": "Cancelled", "belt": ""},
        {"flight": "", "origin_iata": "FAO", "eta": "2025-06-23T10:25:00Z", "status": "scheduled", "belt": ""},
        {"flight": "KL600", "origin_iata": "AMS", "eta": None, "status": "scheduled", "belt": ""},
    ])


def test_classify_flow():
    assert classify_flow("DUB") == CTA
    assert classify_flow(" jer ") == CTA
    assert classify_flow("EDI") == DOMESTIC
    assert classify_flow("AMS") == INTERNATIONAL
    assert classify_flow(None) == INTERNATIONAL


def test_is_heavy():
    assert is_heavy("BY1234")
    assert is_heavy("TOM4321")
    assert is_heavy("U21234", airline="tom")
    assert is_heavy("U21234", pax_estimate=180)
    assert not is_heavy("U21234", pax_estimate=150)
    assert not is_heavy("U21234", pax_estimate=float("nan"))
    assert not is_heavy("BYX12")


def test_belt_window_uses_flow_buffers():
    start, end = belt_window(_ts("2025-06-23 10:00"), INTERNATIONAL)
    assert start == _ts("2025-06-23 10:15")
    assert end == _ts("2025-06-23 10:50")
    start, end = belt_window(_ts("2025-06-23 10:00"), "UNKNOWN")
    assert (start, end) == (_ts("2025-06-23 10:00"), _ts("2025-06-23 10:30"))


def test_process_arrival_rows_normalises_and_filters():
    rows = process_arrival_rows(_raw_rows())
    assert rows["flight"].tolist() == ["BY100", "U2200", "EI300", "LM400"]
    assert rows["flow"].tolist() == [INTERNATIONAL, INTERNATIONAL, CTA, DOMESTIC]
    assert rows["heavy"].tolist() == [True, False, False, False]
    assert rows["origin_iata"].iloc[0] == "AMS"
    assert rows["start"].iloc[0] == _ts("2025-06-23 10:15")
    assert rows["end"].iloc[3] == _ts("2025-06-23 10:45")


def test_process_arrival_rows_keeps_supplied_windows():
    raw = pd.DataFrame([{
        "flight": "U2300", "origin_iata": "FAO", "flow": "international",
        "eta": "2025-06-23T10:00:00Z", "start": "2025-06-23T10:05:00Z", "end": "2025-06-23T10:25:00Z",
    }])
    rows = process_arrival_rows(raw)
    assert rows["flow"].iloc[0] == INTERNATIONAL
    assert rows["start"].iloc[0] == _ts("2025-06-23 10:05")
    assert rows["end"].iloc[0] == _ts("2025-06-23 10:25")


def test_process_arrival_rows_horizon_filter():
    rows = process_arrival_rows(_raw_rows(), now="2025-06-23T09:00:00Z", horizon_minutes=60)
    assert rows["flight"].tolist() == ["BY100", "U2200"]


def test_process_arrival_rows_empty_input():
    assert process_arrival_rows(None).empty
    assert process_arrival_rows(pd.DataFrame()).empty


def test_rows_round_trip_through_allocator():
    rows = process_arrival_rows(_raw_rows())
    result = allocate_belts(flights_from_dataframe(rows))
    res = allocation_to_dataframe(result, rows)
    belts = dict(zip(res["flight"], res["belt"]))
    assert belts == {"BY100": 5, "U2200": 1, "EI300": 6, "LM400": 7}
    assert not res["forced"].any()
    assert res.loc[res["flight"] == "BY100", "reason"].iloc[0] == "heavy_pref"


def test_preset_belt_from_rows_is_kept():
    raw = _raw_rows()
    raw.loc[1, "belt"] = "3"
    rows = process_arrival_rows(raw)
    res = allocation_to_dataframe(allocate_belts(flights_from_dataframe(rows)), rows)
    assert res.loc[res["flight"] == "U2200", "belt"].iloc[0] == 3
    assert res.loc[res["flight"] == "U2200", "reason"].iloc[0] == "preset"


def test_unrecognised_flow_reaches_the_allocator():
    raw = pd.DataFrame([{"flight": "U2300", "origin_iata": "FAO", "flow": "schengen", "eta": "2025-06-23T10:00:00Z"}])
    rows = process_arrival_rows(raw)
    assert rows["flow"].iloc[0] == "SCHENGEN"
    with pytest.raises(InvalidFlowKind):
        allocate_belts(flights_from_dataframe(rows))


def test_missing_heavy_flag_is_not_heavy():
    rows = process_arrival_rows(_raw_rows())
    rows["heavy"] = float("nan")
    flights = flights_from_dataframe(rows)
    assert [f.heavy for f in flights] == [False] * 4
    assert flights_from_dataframe(rows.drop(columns="heavy"))[0].heavy is False


def test_process_arrival_rows_status_include():
    rows = process_arrival_rows(_raw_rows(), status_include=["estimated", "en route"])
    assert rows["flight"].tolist() == ["BY100", "U2200"]
    assert process_arrival_rows(_raw_rows(), status_include=[])["flight"].tolist() == ["BY100", "U2200", "EI300", "LM400"]
