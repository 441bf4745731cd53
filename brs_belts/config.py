# brs_belts/config.py
import pandas as pd

BRS_CONFIG = {
    "IATA_CODE": "BRS",
    "GENERAL_BELTS": (1, 2, 3, 5),
    "DISABLED_BELTS": (4,),
    "CTA_BELT": 6,
    "DOMESTIC_BELT": 7,
    "LARGE_BELT": 5,
    "MIN_GAP_MINUTES": 1,
    "DEFAULT_BELT_WINDOW_MINUTES": 30,
    "HORIZON_MINUTES": 180,
    "HEAVY_PAX_THRESHOLD": 150,
    "TIMEZONE": "Europe/London",
}

# IATA / ICAO operator codes of carriers that usually fly high-capacity aircraft into BRS
HEAVY_CARRIERS = ("BY", "TOM", "LS", "EXS", "TK", "THY", "KL", "KLM")

FLOW_RULES = {
    "DOMESTIC": {
        "iata_origins": ["EDI", "GLA", "ABZ", "INV", "NCL", "BHD", "BFS", "LDY", "NQY", "MAN", "LBA"],
        "buffers": {"start": 10, "dwell": 20, "cleanup": 5},
    },
    "CTA": {
        "iata_origins": ["DUB", "ORK", "SNN", "NOC", "KIR", "IOM", "JER", "GCI", "ACI"],
        "buffers": {"start": 10, "dwell": 20, "cleanup": 5},
    },
    "INTERNATIONAL": {
        "iata_origins": [],
        "buffers": {"start": 15, "dwell": 30, "cleanup": 5},
    },
}

STATUS_EXCLUDE = ["cancelled", "diverted", "not departed"]
# empty = every status not excluded
STATUS_INCLUDE = []


def get_rows_dataframe_schema():
    columns_with_types = {
        'flight': str, 'origin_iata': str, 'airline': str, 'status': str,
        'pax_estimate': float, 'eta': 'datetime64[ns, UTC]',
        'start': 'datetime64[ns, UTC]', 'end': 'datetime64[ns, UTC]',
        'flow': str, 'belt': object, 'heavy': bool, 'reason': str
    }
    return pd.DataFrame({col: pd.Series(dtype=dtype) for col, dtype in columns_with_types.items()})
