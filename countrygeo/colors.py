from typing import Tuple

RGB = Tuple[int, int, int]

MAX_DISTANCE_KM = 20000.0  # roughly half the Earth's circumference

GREEN: RGB = (0, 228, 48)
WHITE: RGB = (255, 255, 255)
BLUE: RGB = (100, 149, 237)    # cornflower blue
YELLOW: RGB = (255, 255, 0)
ORANGE: RGB = (255, 165, 0)
RED: RGB = (220, 20, 60)       # crimson


def _blend(base: RGB, other: RGB, weight: float) -> RGB:
    # Truncates like an 8-bit channel cast
    return tuple(int(b + (o - b) * weight) for b, o in zip(base, other))


def distance_color(distance_km: float, max_distance_km: float = MAX_DISTANCE_KM) -> RGB:
    """Colour for a guess: green on target, red when close, fading to white far away."""
    if distance_km < 1.0:
        return GREEN

    t = min(distance_km / max_distance_km, 1.0)
    if t > 0.8:
        return _blend(WHITE, BLUE, 1 - (t - 0.8) / 0.2)
    if t > 0.6:
        return _blend(YELLOW, BLUE, (t - 0.6) / 0.2)
    if t > 0.4:
        return _blend(ORANGE, YELLOW, (t - 0.4) / 0.2)
    if t > 0.2:
        return _blend(RED, ORANGE, (t - 0.2) / 0.2)
    return RED


def color_hex(rgb: RGB) -> str:
    return '#{:02x}{:02x}{:02x}'.format(*rgb)
