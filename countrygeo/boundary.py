"""
Boundary parsing for the geo-shape column.

The column holds `{"coordinates": <GEOM>}` where GEOM is either a Polygon
(`[[[lon,lat],...]]`) or a MultiPolygon (`[[[[lon,lat],...]],[[[...]]]]`).
The two are told apart by counting consecutive brackets rather than by a full
JSON parse: `[[[` not followed by `[` opens a ring, `[[[[` opens the first
ring of a MultiPolygon, and `]]]` not followed by `]` closes a ring.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from countrygeo.config import DEFAULT_MAX_RING_NUMBERS, DEFAULT_MIN_RING_POINTS, GEOMETRY_PREFIX
from countrygeo.coordinates import is_number_start, scan_number
from countrygeo.models import GeoPoint, Ring

logger = logging.getLogger(__name__)

_COORDINATES_KEY = '"coordinates":'


@dataclass
class BoundaryParse:
    rings: List[Ring] = field(default_factory=list)
    degenerate_rings: int = 0
    truncated_rings: int = 0
    warnings: List[str] = field(default_factory=list)


def _geometry_start(text: str) -> Optional[int]:
    if text.startswith(GEOMETRY_PREFIX):
        return len(GEOMETRY_PREFIX)
    key_at = text.find(_COORDINATES_KEY)
    if key_at < 0:
        return None
    return key_at + len(_COORDINATES_KEY)


def _is_run(text: str, pos: int, char: str, length: int) -> bool:
    """True if exactly `length` copies of `char` start at `pos` (no more)."""
    end = pos + length
    return text.startswith(char * length, pos) and (end >= len(text) or text[end] != char)


def find_ring_start(text: str, pos: int) -> Optional[int]:
    """Position where the next ring's numbers begin, or None at a closing quote or end of text."""
    size = len(text)
    while pos < size:
        c = text[pos]
        if c == '"':
            return None
        if c == '[' and text.startswith('[[[', pos):
            if text.startswith('[[[[', pos):
                # MultiPolygon wrapper; the first ring follows directly
                return pos + 4
            return pos
        pos += 1
    return None


def _skip_to_ring_end(text: str, pos: int) -> int:
    size = len(text)
    while pos < size:
        if _is_run(text, pos, ']', 3):
            return pos + 3
        pos += 1
    return size


def read_ring_numbers(text: str, pos: int, max_numbers: int = DEFAULT_MAX_RING_NUMBERS) -> Tuple[List[float], int, bool]:
    """Collects the numbers of one ring starting at `pos`.

    Returns the numbers, the position just past the ring-end marker, and
    whether the ring was truncated at `max_numbers`.
    """
    size = len(text)
    numbers: List[float] = []
    while pos < size:
        c = text[pos]
        if is_number_start(c):
            value, after = scan_number(text, pos)
            if value is not None:
                if len(numbers) >= max_numbers:
                    return numbers, _skip_to_ring_end(text, pos), True
                numbers.append(value)
            pos = after
        elif c == ']' and text.startswith(']]]', pos):
            if _is_run(text, pos, ']', 3):
                return numbers, pos + 3, False
            # Part of a longer closing run between polygons
            pos += 1
        else:
            pos += 1
    return numbers, pos, False


def _pair_points(numbers: List[float]) -> Tuple[GeoPoint, ...]:
    # Pairs are (lon, lat); a dangling odd number is dropped
    return tuple(
        GeoPoint(lat=numbers[i + 1], lon=numbers[i])
        for i in range(0, len(numbers) - 1, 2)
    )


def parse_boundary(
    geo_shape: str,
    max_ring_numbers: int = DEFAULT_MAX_RING_NUMBERS,
    min_ring_points: int = DEFAULT_MIN_RING_POINTS,
    label: str = '',
) -> BoundaryParse:
    """Parses every ring of one country's geo-shape text."""
    result = BoundaryParse()
    pos = _geometry_start(geo_shape)
    if pos is None:
        if geo_shape.strip():
            message = f"No coordinates found in geo shape for '{label}'."
            logger.warning(message)
            result.warnings.append(message)
        return result

    size = len(geo_shape)
    while pos < size:
        start = find_ring_start(geo_shape, pos)
        if start is None:
            break

        numbers, pos, truncated = read_ring_numbers(geo_shape, start, max_ring_numbers)
        if truncated:
            result.truncated_rings += 1
            message = f"Ring {len(result.rings) + 1} of '{label}' truncated at {max_ring_numbers} numbers."
            logger.warning(message)
            result.warnings.append(message)

        points = _pair_points(numbers)
        if len(points) >= min_ring_points:
            result.rings.append(Ring(points))
        elif points:
            result.degenerate_rings += 1
            logger.debug(f"Discarded degenerate ring with {len(points)} point(s) for '{label}'.")

        if pos >= size or geo_shape[pos] == '"':
            break

    return result
