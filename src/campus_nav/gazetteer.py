# gazetteer.py
# Fixed, in-memory table of campus points of interest.
#
# Usage:
#   gaz = Gazetteer.default()
#   poi = gaz["cse"]
#
#   gaz = load_gazetteer("campus_pois.csv")     # key,name,lat,lon,keywords

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

import pandas as pd

from .models import Coord, PointOfInterest

logger = logging.getLogger(__name__)

KEYWORD_SEPARATOR = ";"
CSV_COLUMNS = ("key", "name", "lat", "lon", "keywords")


# ---------------------------------------------------------------------------
# Built-in campus table
# ---------------------------------------------------------------------------

# key → (name, lat, lon, keywords)
_CAMPUS: Dict[str, Tuple[str, float, float, Tuple[str, ...]]] = {
    "gate":       ("Gate",                  12.193100, 79.084515, ("gate", "entrance", "main gate")),
    "center":     ("Arunai Center",         12.192708, 79.083666, ("center", "arunai center", "main building")),
    "gateway":    ("Arunai Gateway",        12.192414, 79.083265, ("gateway", "arunai gateway")),
    "acaudi":     ("AC Auditorium",         12.192382, 79.083698, ("ac auditorium", "auditorium", "ac audi", "hall")),
    "canteen":    ("Arunai Canteen",        12.192030, 79.083649, ("canteen", "food", "dining", "cafeteria")),
    "hostel1":    ("Mother Theresa Hostel", 12.191600, 79.082926, ("mother theresa hostel", "hostel", "girls hostel", "ladies hostel")),
    "temple":     ("Arunai Temple",         12.192394, 79.082822, ("temple", "arunai temple", "prayer")),
    "guest":      ("Guest House",           12.192339, 79.082307, ("guest house", "guest", "accommodation")),
    "mens":       ("Mens Hostel",           12.192641, 79.082147, ("mens hostel", "boys hostel", "men hostel")),
    "openaudi":   ("Open Auditorium",       12.192992, 79.082720, ("open auditorium", "outdoor auditorium", "open air")),
    "mess":       ("Boys Mess",             12.193069, 79.082069, ("boys mess", "mess", "dining hall")),
    "mech":       ("Mechanical Dept",       12.193446, 79.082622, ("mechanical", "mech", "mechanical department", "mechanical block")),
    "civil":      ("Civil Block",           12.193459, 79.082442, ("civil", "civil block", "civil engineering")),
    "it":         ("IT Block",              12.193521, 79.083236, ("it", "it block", "information technology")),
    "biotech":    ("Biotech Block",         12.193817, 79.082816, ("biotech", "biotechnology", "biotech block")),
    "wrestroom":  ("Womens Restroom",       12.193818, 79.083408, ("womens restroom", "ladies restroom", "women toilet")),
    "brestroom1": ("Boys Restroom 1",       12.192795, 79.082949, ("boys restroom", "mens restroom", "toilet")),
    "ece":        ("ECE Block",             12.192571, 79.082783, ("ece", "ece block", "electronics", "communication")),
    "eee":        ("EEE Block",             12.193138, 79.083092, ("eee", "eee block", "electrical", "electronics")),
    "cse":        ("CSE Block",             12.192838, 79.083230, ("cse", "cse block", "computer science", "computer")),
    "has":        ("H A S Block",           12.193401, 79.083641, ("has", "has block", "humanities")),
    "store":      ("Store",                 12.192168, 79.084514, ("store", "shop", "supplies")),
    "parking":    ("Parking Area",          12.192153, 79.084343, ("parking", "parking area", "car park")),
    "security":   ("Security Block",        12.193018, 79.084381, ("security", "security block", "guard")),
}


# ---------------------------------------------------------------------------
# Gazetteer
# ---------------------------------------------------------------------------

class Gazetteer(Mapping):
    """
    Read-only mapping of key → PointOfInterest.

    Loaded once and treated as static for the lifetime of the process.
    Iteration follows insertion order.
    """

    def __init__(self, points: Iterable[PointOfInterest]) -> None:
        table: Dict[str, PointOfInterest] = {}
        for poi in points:
            if poi.key in table:
                raise ValueError(f"Duplicate gazetteer key: '{poi.key}'")
            table[poi.key] = poi
        self._points = MappingProxyType(table)

    @classmethod
    def default(cls) -> "Gazetteer":
        """The built-in campus table."""
        return cls(
            PointOfInterest(
                key=key,
                name=name,
                coord=Coord(lat, lon),
                keywords=frozenset(k.lower() for k in keywords),
            )
            for key, (name, lat, lon, keywords) in _CAMPUS.items()
        )

    def __getitem__(self, key: str) -> PointOfInterest:
        return self._points[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def get_by_name(self, name: str) -> Optional[PointOfInterest]:
        """Case-insensitive display-name lookup."""
        wanted = name.strip().lower()
        for poi in self._points.values():
            if poi.name.lower() == wanted:
                return poi
        return None


# ---------------------------------------------------------------------------
# CSV loader
# ---------------------------------------------------------------------------

def load_gazetteer(csv_path: str) -> Gazetteer:
    """
    Load points of interest from a CSV file.

    Expected columns: key, name, lat, lon, keywords
    (keywords separated by ';', may be empty).

    Raises:
        FileNotFoundError: If csv_path does not exist.
        ValueError: On missing columns, bad coordinates or duplicate keys.
    """
    df = pd.read_csv(
        csv_path,
        dtype={"key": str, "name": str, "keywords": str},
        float_precision="round_trip",
    )
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path}: missing columns {missing}")

    df["keywords"] = df["keywords"].fillna("")
    if df[["key", "name"]].isna().any().any():
        raise ValueError(f"{csv_path}: every row needs a key and a name")
    if df[["lat", "lon"]].isna().any().any():
        raise ValueError(f"{csv_path}: every row needs lat and lon")

    points = []
    for row in df.itertuples(index=False):
        key, name = row.key.strip(), row.name.strip()
        if not key or not name:
            raise ValueError(f"{csv_path}: every row needs a key and a name")
        keywords = frozenset(
            k.strip().lower()
            for k in row.keywords.split(KEYWORD_SEPARATOR)
            if k.strip()
        )
        points.append(PointOfInterest(
            key=key,
            name=name,
            coord=Coord(float(row.lat), float(row.lon)),
            keywords=keywords,
        ))

    gaz = Gazetteer(points)
    logger.info(f"Gazetteer loaded from {csv_path} ({len(gaz)} points).")
    return gaz
