"""In-memory country database built from the semicolon-delimited world countries dataset."""

from countrygeo.config import LoaderConfig
from countrygeo.geometry import DistanceMode, border_distance, country_distance, point_distance, segment_distance
from countrygeo.loader import LoadError, load_database, parse_database
from countrygeo.models import CountryDatabase, CountryEntry, GeoPoint, LoadReport, Ring, lookup_by_name, search_by_name

__all__ = [
    "CountryDatabase",
    "CountryEntry",
    "DistanceMode",
    "GeoPoint",
    "LoadError",
    "LoadReport",
    "LoaderConfig",
    "Ring",
    "border_distance",
    "country_distance",
    "load_database",
    "lookup_by_name",
    "parse_database",
    "point_distance",
    "search_by_name",
    "segment_distance",
]

__version__ = "0.1.0"
