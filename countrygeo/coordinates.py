import re
from typing import Optional, Tuple

# Decimal float with optional sign and exponent, anchored at the scan position
_NUMBER_RE = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def is_number_start(c: str) -> bool:
    """Numbers may begin with a digit or a minus sign, never a bare '.'."""
    return c == '-' or '0' <= c <= '9'


def scan_number(text: str, pos: int) -> Tuple[Optional[float], int]:
    """Parses the number starting at `pos`.

    Returns (value, end) on success. When nothing numeric starts here, e.g. a
    stray '-', returns (None, pos + 1) so the caller resumes one character on.
    """
    match = _NUMBER_RE.match(text, pos)
    if match is None:
        return None, pos + 1
    return float(match.group()), match.end()

