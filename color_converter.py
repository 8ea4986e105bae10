"""Color conversion between hub color encodings and Matter color attributes."""

import colorsys
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from constants import MATTER_HS_MAX, MATTER_XY_MAX

logger = logging.getLogger(__name__)

# D65 white point, reported for black where xy is undefined
_WHITE_XY = (0.3127, 0.3290)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _gamma(c: float) -> float:
    return 12.92 * c if c <= 0.0031308 else 1.055 * c ** (1 / 2.4) - 0.055


def _inverse_gamma(c: float) -> float:
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


@dataclass(frozen=True)
class Color:
    """A color as hue (0-360 degrees), saturation and value (0-100 percent)."""
    hue: float
    saturation: float
    value: float = 100.0

    @classmethod
    def from_hs(cls, hue: float, saturation: float) -> "Color":
        """Hub hs_color: hue 0-360, saturation 0-100."""
        return cls(hue=float(hue) % 360, saturation=_clamp(float(saturation), 0, 100))

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        h, s, v = colorsys.rgb_to_hsv(
            _clamp(r, 0, 255) / 255.0, _clamp(g, 0, 255) / 255.0, _clamp(b, 0, 255) / 255.0
        )
        return cls(hue=h * 360, saturation=s * 100, value=v * 100)

    @classmethod
    def from_rgbw(cls, r: int, g: int, b: int, w: int) -> "Color":
        # white channel desaturates every primary equally
        return cls.from_rgb(min(255, r + w), min(255, g + w), min(255, b + w))

    @classmethod
    def from_rgbww(cls, r: int, g: int, b: int, cw: int, ww: int) -> "Color":
        return cls.from_rgbw(r, g, b, round((cw + ww) / 2))

    @classmethod
    def from_xy(cls, x: float, y: float) -> "Color":
        """CIE 1931 xy chromaticity at full brightness."""
        if y <= 0:
            return cls(hue=0.0, saturation=0.0)
        big_y = 1.0
        big_x = (big_y / y) * x
        big_z = (big_y / y) * (1 - x - y)

        r = big_x * 1.656492 - big_y * 0.354851 - big_z * 0.255038
        g = -big_x * 0.707196 + big_y * 1.655397 + big_z * 0.036152
        b = big_x * 0.051713 - big_y * 0.121364 + big_z * 1.011530

        r, g, b = (_gamma(max(0.0, c)) for c in (r, g, b))
        brightest = max(r, g, b)
        if brightest <= 0:
            return cls(hue=0.0, saturation=0.0)
        return cls.from_rgb(*(round(c / brightest * 255) for c in (r, g, b)))

    @classmethod
    def from_matter_hs(cls, hue: int, saturation: int) -> "Color":
        """Matter currentHue / currentSaturation, both 0-254."""
        return cls.from_hs(hue * 360 / MATTER_HS_MAX, saturation * 100 / MATTER_HS_MAX)

    def to_rgb(self) -> Tuple[int, int, int]:
        r, g, b = colorsys.hsv_to_rgb(self.hue / 360.0, self.saturation / 100.0, self.value / 100.0)
        return (round(r * 255), round(g * 255), round(b * 255))

    def to_xy(self) -> Tuple[float, float]:
        r, g, b = (_inverse_gamma(c / 255.0) for c in self.to_rgb())
        big_x = r * 0.664511 + g * 0.154324 + b * 0.162028
        big_y = r * 0.283881 + g * 0.668433 + b * 0.047685
        big_z = r * 0.000088 + g * 0.072310 + b * 0.986039
        total = big_x + big_y + big_z
        if total == 0:
            return _WHITE_XY
        return (round(big_x / total, 4), round(big_y / total, 4))

    def to_matter_hs(self) -> Tuple[int, int]:
        hue = round(self.hue * MATTER_HS_MAX / 360)
        saturation = round(self.saturation * MATTER_HS_MAX / 100)
        return (hue, saturation)

    def to_matter_xy(self) -> Tuple[int, int]:
        x, y = self.to_xy()
        return (min(MATTER_XY_MAX, round(x * 65536)), min(MATTER_XY_MAX, round(y * 65536)))


def color_from_hub_attributes(attributes: Mapping[str, Any]) -> Optional[Color]:
    """
    Resolve the one color a hub light reports.

    The hub may carry several encodings at once; they are checked in a fixed
    order (hs, rgbww, rgbw, rgb, xy) and the first present one wins.
    """
    try:
        if attributes.get("hs_color") is not None:
            hue, saturation = attributes["hs_color"]
            return Color.from_hs(hue, saturation)
        if attributes.get("rgbww_color") is not None:
            r, g, b, cw, ww = attributes["rgbww_color"]
            return Color.from_rgbww(r, g, b, cw, ww)
        if attributes.get("rgbw_color") is not None:
            r, g, b, w = attributes["rgbw_color"]
            return Color.from_rgbw(r, g, b, w)
        if attributes.get("rgb_color") is not None:
            r, g, b = attributes["rgb_color"]
            return Color.from_rgb(r, g, b)
        if attributes.get("xy_color") is not None:
            x, y = attributes["xy_color"]
            return Color.from_xy(x, y)
    except (TypeError, ValueError) as e:
        logger.debug(f"Ignoring malformed color attributes: {e}")
    return None


def color_to_hub_hs(color: Color) -> Tuple[float, float]:
    """The hs_color pair sent back to the hub."""
    return (round(color.hue, 2), round(color.saturation, 2))
