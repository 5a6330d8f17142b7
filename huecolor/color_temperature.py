"""Color temperature helpers: Kelvin/mired and an approximate RGB curve."""

from __future__ import annotations

import math

from .color_space import RGB
from .const import KELVIN_MAX, KELVIN_MIN, MIRED_FACTOR
from .validation import clamp, require_positive


def kelvin_to_mired(kelvin: float) -> float:
    return MIRED_FACTOR / require_positive("kelvin", kelvin)


def mired_to_kelvin(mired: float) -> float:
    return MIRED_FACTOR / require_positive("mired", mired)


def kelvin_to_rgb(kelvin: float) -> RGB:
    """Approximate the RGB color of a black body at ``kelvin``.

    Tanner Helland's curve fit, http://www.tannerhelland.com/4435/convert-temperature-rgb-algorithm-code/
    It is not colorimetrically exact; lights that cannot take a mired value
    get this RGB pushed through ``rgb_to_xy`` and the gamut clip instead.
    """
    kelvin = require_positive("kelvin", kelvin)
    temp = clamp(kelvin, KELVIN_MIN, KELVIN_MAX) / 100.0

    # Red
    if temp <= 66:
        red = 255.0
    else:
        red = 329.698727446 * ((temp - 60) ** -0.1332047592)

    # Green
    if temp <= 66:
        green = 99.4708025861 * math.log(temp) - 161.1195681661
    else:
        green = 288.1221695283 * ((temp - 60) ** -0.0755148492)

    # Blue
    if temp >= 66:
        blue = 255.0
    elif temp <= 19:
        blue = 0.0
    else:
        blue = 138.5177312231 * math.log(temp - 10) - 305.0447927307

    return RGB(
        clamp(red, 0, 255) / 255,
        clamp(green, 0, 255) / 255,
        clamp(blue, 0, 255) / 255,
    )

