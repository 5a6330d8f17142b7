"""Light-state commands: what a light should be told, in its own units.

``LightStateBuilder`` collects requested changes (on/off, color in any
representation, alert, effect, transition time) and converts them into the
device-native fields of an immutable ``LightCommand``. Only fields that were
explicitly requested are serialized; the light keeps or defaults the rest.

Setters that take device units (``set_hsb``, ``set_hue``, ...) store their
values as given, rounded and clamped, with no gamut correction. Setters that
take angles, fractions, RGB or xy know the target model and are clipped to
its gamut.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import voluptuous as vol

from .color_space import hsb_to_rgb, normalize_angle, rgb_to_hsb, rgb_to_xy
from .color_temperature import kelvin_to_mired, kelvin_to_rgb, mired_to_kelvin
from .const import (
    ALERT_LONG_SELECT,
    ALERT_NONE,
    ALERT_SELECT,
    ATTR_ALERT,
    ATTR_BRI,
    ATTR_CT,
    ATTR_EFFECT,
    ATTR_HUE,
    ATTR_ON,
    ATTR_SAT,
    ATTR_TRANSITION_TIME,
    ATTR_XY,
    BRI_MAX,
    EFFECT_COLORLOOP,
    EFFECT_NONE,
    HUE_MAX,
    MIRED_MAX,
    MIRED_MIN,
    SAT_MAX,
)
from .gamut import clip_xy_for_model, supports_color_temperature
from .validation import (
    InvalidArgument,
    clamp,
    require_finite,
    require_fraction,
    require_positive,
    round_half_away,
)

logger = logging.getLogger(__name__)


class Alert(Enum):
    NONE = ALERT_NONE
    SELECT = ALERT_SELECT            # single blink
    LONG_SELECT = ALERT_LONG_SELECT  # blink for 15 seconds


class Effect(Enum):
    NONE = EFFECT_NONE
    COLORLOOP = EFFECT_COLORLOOP


def _fraction_schema():
    return vol.All(vol.Coerce(float), vol.Range(min=0.0, max=1.0))


PAYLOAD_SCHEMA = vol.Schema({
    vol.Optional(ATTR_ON): bool,
    vol.Optional(ATTR_HUE): vol.All(int, vol.Range(min=0, max=HUE_MAX)),
    vol.Optional(ATTR_SAT): vol.All(int, vol.Range(min=0, max=SAT_MAX)),
    vol.Optional(ATTR_BRI): vol.All(int, vol.Range(min=0, max=BRI_MAX)),
    vol.Optional(ATTR_CT): vol.All(int, vol.Range(min=MIRED_MIN, max=MIRED_MAX)),
    vol.Optional(ATTR_XY): vol.All(
        [_fraction_schema()], vol.Length(min=2, max=2)
    ),
    vol.Optional(ATTR_ALERT): vol.In([alert.value for alert in Alert]),
    vol.Optional(ATTR_EFFECT): vol.In([effect.value for effect in Effect]),
    vol.Optional(ATTR_TRANSITION_TIME): vol.All(int, vol.Range(min=0)),
})


@dataclass(frozen=True)
class LightCommand:
    """Light state to send; ``None`` fields are left unset."""
    on: Optional[bool] = None
    hue: Optional[int] = None  # 0-65535
    sat: Optional[int] = None  # 0-255
    bri: Optional[int] = None  # 0-255
    ct: Optional[int] = None  # mired
    xy: Optional[Tuple[float, float]] = None
    alert: Optional[Alert] = None
    effect: Optional[Effect] = None
    transitiontime: Optional[int] = None  # multiples of 100 ms

    def serialize(self) -> Dict[str, Any]:
        """Return the explicitly set fields as a flat payload dict.

        Raises:
            InvalidArgument: a field holds a value the light cannot accept.
        """
        payload: Dict[str, Any] = {}
        if self.on is not None:
            payload[ATTR_ON] = self.on
        if self.hue is not None:
            payload[ATTR_HUE] = self.hue
        if self.sat is not None:
            payload[ATTR_SAT] = self.sat
        if self.bri is not None:
            payload[ATTR_BRI] = self.bri
        if self.ct is not None:
            payload[ATTR_CT] = self.ct
        if self.xy is not None:
            payload[ATTR_XY] = list(self.xy)
        if self.alert is not None:
            payload[ATTR_ALERT] = getattr(self.alert, "value", self.alert)
        if self.effect is not None:
            payload[ATTR_EFFECT] = getattr(self.effect, "value", self.effect)
        if self.transitiontime is not None:
            payload[ATTR_TRANSITION_TIME] = self.transitiontime

        try:
            return PAYLOAD_SCHEMA(payload)
        except vol.Invalid as err:
            raise InvalidArgument(f"Invalid light state {payload}: {err}") from err

    def to_json(self) -> str:
        return json.dumps(self.serialize())


class LightStateBuilder:
    """Accumulate light-state changes for one light.

    Args:
        model_id: Model identifier of the target light (e.g. ``LCT001``).
            Selects the gamut for xy clipping and whether color temperature
            is sent as mired. ``None`` targets no particular model: angle and
            RGB requests are then stored as device hue/sat/bri.

    Every setter validates its arguments before storing anything and returns
    the builder, so calls chain::

        LightStateBuilder("LCT001").on().set_rgb(1, 0.5, 0).set_transition_time(4).serialize()
    """

    def __init__(self, model_id: Optional[str] = None) -> None:
        self.model_id = model_id
        self._command = LightCommand()

    def _update(self, **fields: Any) -> "LightStateBuilder":
        self._command = replace(self._command, **fields)
        return self

    # on / off ---------------------------------------------------------
    def on(self) -> "LightStateBuilder":
        return self._update(on=True)

    def off(self) -> "LightStateBuilder":
        return self._update(on=False)

    # device units -----------------------------------------------------
    def set_hsb(self, hue: float, saturation: float, brightness: float) -> "LightStateBuilder":
        """Set hue (0-65535), saturation (0-255) and brightness (0-255)."""
        return self._update(
            hue=_to_units("hue", hue, HUE_MAX),
            sat=_to_units("saturation", saturation, SAT_MAX),
            bri=_to_units("brightness", brightness, BRI_MAX),
        )

    def set_hue(self, hue: float) -> "LightStateBuilder":
        return self._update(hue=_to_units("hue", hue, HUE_MAX))

    def set_saturation(self, saturation: float) -> "LightStateBuilder":
        return self._update(sat=_to_units("saturation", saturation, SAT_MAX))

    def set_brightness(self, brightness: float) -> "LightStateBuilder":
        return self._update(bri=_to_units("brightness", brightness, BRI_MAX))

    # perceptual color -------------------------------------------------
    def set_hue_angle_sat_bri(self, angle: float, saturation: float, brightness: float) -> "LightStateBuilder":
        """Set color from an angle in degrees and saturation/brightness in [0, 1]."""
        angle = normalize_angle(angle)
        saturation = require_fraction("saturation", saturation)
        brightness = require_fraction("brightness", brightness)

        if self.model_id is None:
            return self._update(
                hue=round_half_away(angle / 360 * HUE_MAX),
                sat=round_half_away(saturation * SAT_MAX),
                bri=round_half_away(brightness * BRI_MAX),
            )

        red, green, blue = hsb_to_rgb(angle, saturation, brightness)
        x, y = rgb_to_xy(red, green, blue)
        return self._update(
            bri=round_half_away(brightness * BRI_MAX),
            xy=self._clip(x, y),
        )

    def set_rgb(self, red: float, green: float, blue: float) -> "LightStateBuilder":
        """Set color from gamma-encoded RGB fractions."""
        red = require_fraction("red", red)
        green = require_fraction("green", green)
        blue = require_fraction("blue", blue)

        hsb = rgb_to_hsb(red, green, blue)
        if self.model_id is None:
            return self.set_hue_angle_sat_bri(*hsb)

        x, y = rgb_to_xy(red, green, blue)
        return self._update(
            bri=round_half_away(hsb.brightness * BRI_MAX),
            xy=self._clip(x, y),
        )

    def set_xy(self, x: float, y: float) -> "LightStateBuilder":
        """Set a CIE 1931 chromaticity point, clipped to the model's gamut."""
        x = require_fraction("x", x)
        y = require_fraction("y", y)
        return self._update(xy=self._clip(x, y))

    # color temperature ------------------------------------------------
    def set_ct(self, mired: float) -> "LightStateBuilder":
        """Set color temperature in mired.

        Models without native color temperature get the approximate xy of the
        temperature instead.
        """
        mired = require_positive("mired", mired)
        if supports_color_temperature(self.model_id):
            return self._update(ct=int(clamp(round_half_away(mired), MIRED_MIN, MIRED_MAX)))

        red, green, blue = kelvin_to_rgb(mired_to_kelvin(mired))
        x, y = rgb_to_xy(red, green, blue)
        logger.debug("Model %s has no ct, sending %.1f mired as xy", self.model_id, mired)
        return self._update(xy=self._clip(x, y))

    def set_color_temperature(self, kelvin: float) -> "LightStateBuilder":
        return self.set_ct(kelvin_to_mired(kelvin))

    # alert / effect ---------------------------------------------------
    def alert_select(self) -> "LightStateBuilder":
        return self._update(alert=Alert.SELECT)

    def alert_long_select(self) -> "LightStateBuilder":
        return self._update(alert=Alert.LONG_SELECT)

    def alert_none(self) -> "LightStateBuilder":
        return self._update(alert=Alert.NONE)

    def effect_colorloop(self) -> "LightStateBuilder":
        return self._update(effect=Effect.COLORLOOP)

    def effect_none(self) -> "LightStateBuilder":
        return self._update(effect=Effect.NONE)

    # transition -------------------------------------------------------
    def set_transition_time(self, deciseconds: Optional[float] = None) -> "LightStateBuilder":
        """Set the transition time in multiples of 100 ms.

        ``None`` leaves it unset so the light uses its own default (400 ms).
        """
        if deciseconds is None:
            return self
        deciseconds = require_finite("transition time", deciseconds)
        if deciseconds < 0:
            raise InvalidArgument(f"transition time must be non-negative, got {deciseconds!r}")
        return self._update(transitiontime=round_half_away(deciseconds))

    # output -----------------------------------------------------------
    def build(self) -> LightCommand:
        """Return the accumulated state; later builder calls do not affect it."""
        return self._command

    def serialize(self) -> Dict[str, Any]:
        return self._command.serialize()

    def _clip(self, x: float, y: float) -> Tuple[float, float]:
        clipped = clip_xy_for_model(x, y, self.model_id)
        return (clamp(clipped.x, 0.0, 1.0), clamp(clipped.y, 0.0, 1.0))


def _to_units(name: str, value: float, maximum: int) -> int:
    value = require_finite(name, value)
    return int(clamp(round_half_away(value), 0, maximum))
