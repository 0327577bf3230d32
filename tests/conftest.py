"""Shared fixtures: builders for rows of the semicolon-delimited country dataset."""

from typing import List, Sequence, Tuple

import pytest

HEADER = (
    "Geo Point;Geo Shape;ISO 3 territory code;Status;ISO 3 country code;English Name;"
    "Continent of the territory;Region of the territory;ISO-3166-alpha2 code;French Name"
)

LonLat = Tuple[float, float]


def ring_json(ring: Sequence[LonLat]) -> str:
    return "[" + ", ".join(f"[{lon}, {lat}]" for lon, lat in ring) + "]"


def polygon_shape(*rings: Sequence[LonLat]) -> str:
    """Unescaped `{"coordinates": ...}` text for a Polygon."""
    body = "[" + ", ".join(ring_json(r) for r in rings) + "]"
    return '{"coordinates": ' + body + ', "type": "Polygon"}'


def multipolygon_shape(*polygons: Sequence[LonLat]) -> str:
    """Unescaped text for a MultiPolygon whose polygons each have one ring."""
    body = "[" + ", ".join("[" + ring_json(p) + "]" for p in polygons) + "]"
    return '{"coordinates": ' + body + ', "type": "MultiPolygon"}'


def quote_field(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def csv_row(
    name: str,
    shape: str,
    geo_point: str = "0.5, 0.5",
    code: str = "XXX",
    alpha2: str = "XX",
    continent: str = "Europe",
    region: str = "Western Europe",
) -> str:
    fields: List[str] = [
        geo_point,
        quote_field(shape),
        code,
        "Member State",
        code,
        name,
        continent,
        region,
        alpha2,
        name + " (fr)",
    ]
    return ";".join(fields)


def square(lon: float, lat: float, size: float = 1.0) -> List[LonLat]:
    return [(lon, lat), (lon + size, lat), (lon + size, lat + size), (lon, lat + size)]


@pytest.fixture
def two_country_csv() -> str:
    rows = [
        HEADER,
        csv_row("Westland", polygon_shape(square(0.0, 0.0)), geo_point="0.5, 0.5", code="WST", alpha2="WL"),
        csv_row("Eastland", polygon_shape(square(3.0, 0.0)), geo_point="0.5, 3.5", code="EST", alpha2="EL"),
    ]
    return "\n".join(rows) + "\n"


@pytest.fixture
def two_country_file(tmp_path, two_country_csv):
    path = tmp_path / "countries.csv"
    path.write_text(two_country_csv, encoding="utf-8")
    return path
