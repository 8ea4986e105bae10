"""Unit conversions between hub and Matter value ranges."""

from typing import Optional

from constants import HUB_BRIGHTNESS_MAX, MATTER_LEVEL_MAX, MATTER_LEVEL_MIN


def adjust_percentage(percent: Optional[float], invert: bool) -> Optional[float]:
    """Flip a 0-100 percentage when ``invert`` is set. Applying it twice is a no-op."""
    if percent is None:
        return None
    return 100 - percent if invert else percent


def brightness_to_percent(brightness: float) -> float:
    """Hub brightness (0-255) to a 0..1 fraction."""
    return brightness / HUB_BRIGHTNESS_MAX


def percent_to_brightness(percent: float) -> int:
    """0..1 fraction to hub brightness (0-255)."""
    return round(percent * HUB_BRIGHTNESS_MAX)


def percent_to_level(
    percent: float, min_level: int = MATTER_LEVEL_MIN, max_level: int = MATTER_LEVEL_MAX
) -> int:
    """0..1 fraction to a Matter level, clamped to the cluster's range."""
    level = round(percent * MATTER_LEVEL_MAX)
    return max(min_level, min(max_level, level))


def level_to_percent(level: int) -> float:
    """Matter level to a 0..1 fraction."""
    return level / MATTER_LEVEL_MAX


def on_level_to_brightness(on_level: int) -> int:
    """Matter onLevel (1-254) to hub brightness (0-255)."""
    return round(((on_level - 1) / (MATTER_LEVEL_MAX - 1)) * HUB_BRIGHTNESS_MAX)


def kelvin_to_mireds(kelvin: Optional[float]) -> Optional[int]:
    """Kelvin to mireds; None for missing or non-positive input."""
    if kelvin is None or kelvin <= 0:
        return None
    return round(1_000_000 / kelvin)


def mireds_to_kelvin(mireds: Optional[float]) -> Optional[int]:
    """Mireds to Kelvin; None for missing or non-positive input."""
    if mireds is None or mireds <= 0:
        return None
    return round(1_000_000 / mireds)


def percent_to_100ths(percent: Optional[float]) -> Optional[int]:
    """Percentage to Matter's percent100ths unit."""
    if percent is None:
        return None
    return round(percent * 100)


def percent100ths_to_percent(value: int) -> float:
    """Matter percent100ths to a percentage."""
    return value / 100
