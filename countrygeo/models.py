from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class Ring:
    """Closed loop of boundary points; the last point connects back to the first."""

    points: Tuple[GeoPoint, ...]

    def __post_init__(self):
        if len(self.points) < 3:
            raise ValueError(f"Ring must have at least 3 points, got {len(self.points)}")

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[GeoPoint]:
        return iter(self.points)


@dataclass(frozen=True)
class CountryEntry:
    name: str
    territory_code: str = ''
    status: str = ''
    country_code: str = ''
    continent: str = ''
    region: str = ''
    alpha2: str = ''
    centroid: GeoPoint = GeoPoint(0.0, 0.0)
    boundary: Tuple[Ring, ...] = ()

    @property
    def vertex_count(self) -> int:
        return sum(len(ring) for ring in self.boundary)


@dataclass
class LoadReport:
    """Data-quality diagnostics collected while building a database."""

    rows_read: int = 0
    rows_skipped: int = 0
    default_centroids: int = 0
    degenerate_rings: int = 0
    truncated_rings: int = 0
    decode_errors: int = 0
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CountryDatabase:
    """Insertion-ordered, read-only collection of countries."""

    entries: Tuple[CountryEntry, ...] = ()
    report: LoadReport = field(default_factory=LoadReport, compare=False)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CountryEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> CountryEntry:
        return self.entries[index]


def lookup_by_name(db: CountryDatabase, name: str, case_insensitive: bool = True) -> Optional[CountryEntry]:
    """Returns the first entry whose English name matches, or None."""
    if case_insensitive:
        wanted = name.casefold()
        for entry in db:
            if entry.name.casefold() == wanted:
                return entry
        return None
    for entry in db:
        if entry.name == name:
            return entry
    return None


def search_by_name(db: CountryDatabase, fragment: str, limit: Optional[int] = None) -> List[CountryEntry]:
    """Case-insensitive substring search, in database order."""
    needle = fragment.strip().casefold()
    matches = []
    for entry in db:
        if needle in entry.name.casefold():
            matches.append(entry)
            if limit is not None and len(matches) >= limit:
                break
    return matches
