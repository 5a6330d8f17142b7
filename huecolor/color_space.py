"""Color-space conversions between RGB, angular HSB and CIE 1931 xy.

All RGB channels, saturations and brightnesses are fractions in [0, 1];
angles are degrees in [0, 360).
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

from .validation import clamp, require_finite, require_fraction

logger = logging.getLogger(__name__)


class RGB(NamedTuple):
    red: float
    green: float
    blue: float


class HSB(NamedTuple):
    angle: float
    saturation: float
    brightness: float


class XYPoint(NamedTuple):
    x: float
    y: float


# sRGB D65 <-> CIE XYZ, http://www.brucelindbloom.com/index.html?Eqn_RGB_XYZ_Matrix.html
RGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)
XYZ_TO_RGB = (
    (3.2404542, -1.5371385, -0.4985314),
    (-0.9692660, 1.8760108, 0.0415560),
    (0.0556434, -0.2040259, 1.0572252),
)


def normalize_angle(angle: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    angle = require_finite("angle", angle)
    angle = angle % 360
    # -1e-14 + 360 rounds to 360.0 in floating point
    return 0.0 if angle >= 360 else angle


def rgb_to_hsb(red: float, green: float, blue: float) -> HSB:
    red = require_fraction("red", red)
    green = require_fraction("green", green)
    blue = require_fraction("blue", blue)

    low = min(red, green, blue)
    high = max(red, green, blue)
    if high == low:
        # Achromatic: hue is undefined, report 0
        return HSB(0.0, 0.0, high)

    span = high - low
    if red == high:
        angle = ((green - blue) / span) * 60
    elif green == high:
        angle = (2 + (blue - red) / span) * 60
    else:
        angle = (4 + (red - green) / span) * 60
    return HSB(normalize_angle(angle), span / high, high)


def hsb_to_rgb(angle: float, saturation: float, brightness: float) -> RGB:
    angle = require_finite("angle", angle)
    saturation = require_fraction("saturation", saturation)
    brightness = require_fraction("brightness", brightness)

    if saturation == 0:
        return RGB(brightness, brightness, brightness)

    sector = math.floor(angle / 60) % 6
    fraction = angle / 60 - math.floor(angle / 60)
    p = brightness * (1 - saturation)
    q = brightness * (1 - saturation * fraction)
    t = brightness * (1 - saturation * (1 - fraction))

    if sector == 0:
        return RGB(brightness, t, p)
    elif sector == 1:
        return RGB(q, brightness, p)
    elif sector == 2:
        return RGB(p, brightness, t)
    elif sector == 3:
        return RGB(p, q, brightness)
    elif sector == 4:
        return RGB(t, p, brightness)
    else:
        return RGB(brightness, p, q)


def hue_to_angle(hue: float) -> float:
    """Convert a device hue (0..65535) to a perceptual angle in degrees.

    Color bulbs render the yellow/green band narrower than the red band, so
    angles below 180 are pulled back towards red.
    """
    hue = require_finite("hue", hue)
    angle = 360 * hue / 65535
    if 0 < angle < 90:
        angle = angle - angle * 0.17 * (angle / 90)
    elif 90 <= angle < 180:
        angle = angle - (180 - angle) * 0.17 * ((180 - angle) / 90)
    return angle


def srgb_to_linear(c: float) -> float:
    if c > 0.04045:
        return ((c + 0.055) / 1.055) ** 2.4
    return c / 12.92


def linear_to_srgb(c: float) -> float:
    if c <= 0.0031308:
        return 12.92 * c
    return 1.055 * (c ** (1 / 2.4)) - 0.055


def rgb_to_xy(red: float, green: float, blue: float) -> XYPoint:
    """Convert gamma-encoded sRGB to a CIE 1931 chromaticity point."""
    r = srgb_to_linear(require_fraction("red", red))
    g = srgb_to_linear(require_fraction("green", green))
    b = srgb_to_linear(require_fraction("blue", blue))

    X = r * RGB_TO_XYZ[0][0] + g * RGB_TO_XYZ[0][1] + b * RGB_TO_XYZ[0][2]
    Y = r * RGB_TO_XYZ[1][0] + g * RGB_TO_XYZ[1][1] + b * RGB_TO_XYZ[1][2]
    Z = r * RGB_TO_XYZ[2][0] + g * RGB_TO_XYZ[2][1] + b * RGB_TO_XYZ[2][2]
    total = X + Y + Z
    if total == 0:
        return XYPoint(0.0, 0.0)
    return XYPoint(X / total, Y / total)


def _limit_rgb(r: float, g: float, b: float) -> RGB:
    """Scale by an over-range dominant channel, then floor negatives at 0."""
    if r > b and r > g and r > 1.0:
        g, b, r = g / r, b / r, 1.0
    r = max(0.0, r)
    if g > b and g > r and g > 1.0:
        r, b, g = r / g, b / g, 1.0
    g = max(0.0, g)
    if b > r and b > g and b > 1.0:
        r, g, b = r / b, g / b, 1.0
    b = max(0.0, b)
    # Ties between over-range channels fall through the rules above
    return RGB(clamp(r, 0.0, 1.0), clamp(g, 0.0, 1.0), clamp(b, 0.0, 1.0))


def xy_to_rgb(x: float, y: float, luminance: float = 1.0) -> RGB:
    """Convert a chromaticity point at the given luminance to sRGB.

    No gamut correction is applied; see ``gamut.xy_to_rgb_for_model``.
    """
    x = require_finite("x", x)
    y = require_finite("y", y)
    Y = require_finite("luminance", luminance)
    if y == 0:
        logger.debug("xy_to_rgb: y == 0, returning black")
        return RGB(0.0, 0.0, 0.0)

    z = 1.0 - x - y
    X = (Y / y) * x
    Z = (Y / y) * z

    r = X * XYZ_TO_RGB[0][0] + Y * XYZ_TO_RGB[0][1] + Z * XYZ_TO_RGB[0][2]
    g = X * XYZ_TO_RGB[1][0] + Y * XYZ_TO_RGB[1][1] + Z * XYZ_TO_RGB[1][2]
    b = X * XYZ_TO_RGB[2][0] + Y * XYZ_TO_RGB[2][1] + Z * XYZ_TO_RGB[2][2]

    r, g, b = _limit_rgb(r, g, b)
    r, g, b = linear_to_srgb(r), linear_to_srgb(g), linear_to_srgb(b)
    return _limit_rgb(r, g, b)
