# brs_belts/generate_data.py

import logging
import os
import random
from datetime import timedelta

import pandas as pd

from .config import FLOW_RULES

# Origins served from BRS (IATA)
INTERNATIONAL_ORIGINS = ["AMS", "CDG", "FAO", "ALC", "AGP", "PMI", "TFS", "ACE", "BCN", "GVA", "IST", "DLM", "KRK", "BUD"]

# (IATA code, ICAO code)
AIRLINES = [("U2", "EZY"), ("FR", "RYR"), ("BY", "TOM"), ("KL", "KLM"), ("EI", "EIN"), ("LS", "EXS"), ("TK", "THY")]

AIRCRAFT_SEATS = {"A319": 156, "A320": 186, "A20N": 186, "A321": 235, "B738": 189, "B38M": 197, "E190": 100, "AT76": 72}

STATUSES = ["scheduled", "estimated", "en route", "approaching", "landed", "cancelled"]


def generate_sample_arrivals(num_flights=40, start=None, seed=None):
    """
    Build a reproducible set of synthetic BRS arrivals rows with an empty belt column.
    """
    rng = random.Random(seed)
    start = pd.Timestamp(start if start is not None else "2025-06-23 06:00")
    start = start.tz_localize("UTC") if start.tzinfo is None else start.tz_convert("UTC")

    domestic = FLOW_RULES["DOMESTIC"]["iata_origins"]
    cta = FLOW_RULES["CTA"]["iata_origins"]

    used_designators = set()
    records = []
    for _ in range(num_flights):
        roll = rng.random()
        if roll < 0.15:
            origin = rng.choice(domestic)
        elif roll < 0.3:
            origin = rng.choice(cta)
        else:
            origin = rng.choice(INTERNATIONAL_ORIGINS)

        iata, _icao = rng.choice(AIRLINES)
        while True:
            designator = f"{iata}{rng.randint(100, 9999)}"
            if designator not in used_designators:
                used_designators.add(designator)
                break

        aircraft = rng.choice(list(AIRCRAFT_SEATS))
        load_factor = rng.uniform(0.6, 0.95)
        eta = start + timedelta(minutes=rng.randint(0, 6 * 60))

        records.append({
            "flight": designator,
            "origin_iata": origin,
            "airline": iata,
            "aircraft": aircraft,
            "pax_estimate": int(AIRCRAFT_SEATS[aircraft] * load_factor),
            "eta": eta.isoformat(),
            "status": rng.choice(STATUSES),
            "belt": "",
        })

    df = pd.DataFrame(records)
    return df.sort_values(by="eta", kind="stable").reset_index(drop=True)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    out_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, "brs_arrivals.csv")
    generate_sample_arrivals(num_flights=60, seed=23).to_csv(out_path, index=False)
    logging.info("Wrote sample arrivals to %s", out_path)
