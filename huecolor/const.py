"""Constants for light-state payloads."""
from typing import Final

# Payload field names
ATTR_ON: Final = "on"
ATTR_HUE: Final = "hue"
ATTR_SAT: Final = "sat"
ATTR_BRI: Final = "bri"
ATTR_CT: Final = "ct"
ATTR_XY: Final = "xy"
ATTR_ALERT: Final = "alert"
ATTR_EFFECT: Final = "effect"
ATTR_TRANSITION_TIME: Final = "transitiontime"

# Device-native ranges
HUE_MAX: Final = 65535
SAT_MAX: Final = 255
BRI_MAX: Final = 255

# Color temperature domain (Kelvin)
KELVIN_MIN: Final = 1000
KELVIN_MAX: Final = 40000

MIRED_FACTOR: Final = 1_000_000
MIRED_MIN: Final = MIRED_FACTOR // KELVIN_MAX
MIRED_MAX: Final = MIRED_FACTOR // KELVIN_MIN

# Alert and effect values
ALERT_NONE: Final = "none"
ALERT_SELECT: Final = "select"
ALERT_LONG_SELECT: Final = "lselect"
EFFECT_NONE: Final = "none"
EFFECT_COLORLOOP: Final = "colorloop"
