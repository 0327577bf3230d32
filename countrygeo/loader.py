import logging
import os
from typing import List, Optional, Tuple

from countrygeo.boundary import parse_boundary
from countrygeo.config import EMPTY_QUOTED_PLACEHOLDER, HEADER_NAME_LABEL, LoaderConfig
from countrygeo.fields import RecordReader
from countrygeo.models import CountryDatabase, CountryEntry, GeoPoint, LoadReport

logger = logging.getLogger(__name__)

# Column order of the dataset; the trailing French name is read and dropped
COLUMNS = (
    'geo_point',
    'geo_shape',
    'territory_code',
    'status',
    'country_code',
    'name',
    'continent',
    'region',
    'alpha2',
    'french_name',
)


class LoadError(Exception):
    """The dataset file could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load country data from '{path}': {reason}")
        self.path = path
        self.reason = reason


def parse_centroid(text: str) -> Optional[GeoPoint]:
    """Parses a "lat, lon" pair; None when the text is not two numbers."""
    if not text or ',' not in text:
        return None
    lat_text, lon_text = text.split(',', 1)
    try:
        return GeoPoint(lat=float(lat_text), lon=float(lon_text))
    except ValueError:
        return None


def _is_skipped_name(name: str) -> bool:
    return not name or name == HEADER_NAME_LABEL or name == EMPTY_QUOTED_PLACEHOLDER


def _record_columns(fields: List[str]) -> dict:
    padded = list(fields[:len(COLUMNS)]) + [''] * (len(COLUMNS) - len(fields))
    return dict(zip(COLUMNS, padded))


def build_entry(columns: dict, config: LoaderConfig, report: LoadReport) -> CountryEntry:
    """Turns one record's columns into a CountryEntry, recording any data-quality issues."""
    name = columns['name']
    parsed = parse_boundary(
        columns['geo_shape'],
        max_ring_numbers=config.max_ring_numbers,
        min_ring_points=config.min_ring_points,
        label=name,
    )
    report.degenerate_rings += parsed.degenerate_rings
    report.truncated_rings += parsed.truncated_rings
    report.warnings.extend(parsed.warnings)

    centroid = parse_centroid(columns['geo_point'])
    if centroid is None:
        centroid = GeoPoint(0.0, 0.0)
        report.default_centroids += 1
        message = f"Invalid centroid '{columns['geo_point']}' for {name}, using (0, 0)."
        logger.warning(message)
        report.warnings.append(message)

    return CountryEntry(
        name=name,
        territory_code=columns['territory_code'],
        status=columns['status'],
        country_code=columns['country_code'],
        continent=columns['continent'],
        region=columns['region'],
        alpha2=columns['alpha2'],
        centroid=centroid,
        boundary=tuple(parsed.rings),
    )


def parse_database(data: str, config: Optional[LoaderConfig] = None) -> CountryDatabase:
    """Builds a database from the full text of a dataset."""
    config = config or LoaderConfig()
    report = LoadReport()
    entries: List[CountryEntry] = []

    for row_number, fields in enumerate(RecordReader(data), start=1):
        report.rows_read += 1
        columns = _record_columns(fields)
        if row_number == 1 or _is_skipped_name(columns['name']):
            report.rows_skipped += 1
            logger.debug(f"Skipping row {row_number} (name: '{columns['name']}').")
            continue

        entries.append(build_entry(columns, config, report))

        if config.progress_every and len(entries) % config.progress_every == 0:
            logger.info(f"Loaded {len(entries)} countries...")

    logger.info(f"Total countries loaded: {len(entries)}")
    return CountryDatabase(entries=tuple(entries), report=report)


def decode_dataset(raw: bytes, path: str = '<data>') -> Tuple[str, int]:
    """Decodes the dataset as UTF-8, replacing undecodable bytes.

    Returns the text and the number of replacement characters introduced.
    """
    try:
        return raw.decode('utf-8'), 0
    except UnicodeDecodeError as e:
        text = raw.decode('utf-8', errors='replace')
        replaced = text.count('\ufffd') - raw.decode('utf-8', errors='ignore').count('\ufffd')
        logger.warning(f"{path} is not valid UTF-8 (first bad byte at offset {e.start}); "
                       f"{replaced} characters replaced.")
        return text, replaced


def read_dataset(path: str) -> Tuple[str, int]:
    if not os.path.exists(path):
        raise LoadError(path, "file not found")
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise LoadError(path, str(e)) from e
    return decode_dataset(raw, path)


def load_database(path: str, config: Optional[LoaderConfig] = None) -> CountryDatabase:
    """Loads the country dataset at `path`.

    Raises LoadError when the file is missing or unreadable. Malformed rows
    never fail the load: they are skipped or loaded with defaults, and the
    issues are listed in the returned database's `report`. Bytes that are not
    valid UTF-8 are replaced and counted in `report.decode_errors`.
    """
    logger.info(f"Loading country data from {path}...")
    data, decode_errors = read_dataset(path)
    db = parse_database(data, config)
    if decode_errors:
        db.report.decode_errors = decode_errors
        db.report.warnings.append(f"{decode_errors} undecodable characters replaced in {path}.")
    return db
