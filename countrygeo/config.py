import os
from dataclasses import dataclass

# --- Loader defaults (overridable through LoaderConfig.from_env) ---
DEFAULT_MAX_RING_NUMBERS = 50_000_000
DEFAULT_MIN_RING_POINTS = 3
DEFAULT_PROGRESS_EVERY = 50

HEADER_NAME_LABEL = 'English Name'
EMPTY_QUOTED_PLACEHOLDER = '""'
GEOMETRY_PREFIX = '{"coordinates": '

EARTH_RADIUS_KM = 6371.0
TOUCHING_DISTANCE_KM = 5.0
SEGMENT_SAMPLES = 20


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'") from None


@dataclass(frozen=True)
class LoaderConfig:
    """Limits applied while parsing the country dataset."""

    max_ring_numbers: int = DEFAULT_MAX_RING_NUMBERS
    min_ring_points: int = DEFAULT_MIN_RING_POINTS
    progress_every: int = DEFAULT_PROGRESS_EVERY

    def __post_init__(self):
        if self.max_ring_numbers < 2:
            raise ValueError(f"max_ring_numbers must be at least 2, got {self.max_ring_numbers}")
        if self.min_ring_points < 3:
            raise ValueError(f"min_ring_points must be at least 3, got {self.min_ring_points}")
        if self.progress_every < 0:
            raise ValueError(f"progress_every cannot be negative, got {self.progress_every}")

    @classmethod
    def from_env(cls) -> "LoaderConfig":
        """Reads the limits from the current environment.

        Raises ValueError when a variable is set but is not an integer.
        """
        return cls(
            max_ring_numbers=_env_int('COUNTRYGEO_MAX_RING_NUMBERS', DEFAULT_MAX_RING_NUMBERS),
            min_ring_points=_env_int('COUNTRYGEO_MIN_RING_POINTS', DEFAULT_MIN_RING_POINTS),
            progress_every=_env_int('COUNTRYGEO_PROGRESS_EVERY', DEFAULT_PROGRESS_EVERY),
        )
