#!/usr/bin/env python3
"""Test suite for light_state.py - light-state builder and commands."""

import dataclasses
import json

import pytest

from huecolor.color_space import XYPoint, rgb_to_xy
from huecolor.gamut import GAMUT_PROFILES, ModelClass, in_gamut
from huecolor.light_state import Alert, Effect, LightCommand, LightStateBuilder
from huecolor.validation import InvalidArgument

HUE_BULB = GAMUT_PROFILES[ModelClass.HUE_BULB]
LIVING_COLORS = GAMUT_PROFILES[ModelClass.LIVING_COLORS]


class TestLightCommand:
    """Test cases for the LightCommand value object."""

    def test_light_command_defaults(self):
        """Every field starts unset."""
        cmd = LightCommand()

        assert cmd.on is None
        assert cmd.hue is None
        assert cmd.sat is None
        assert cmd.bri is None
        assert cmd.ct is None
        assert cmd.xy is None
        assert cmd.alert is None
        assert cmd.effect is None
        assert cmd.transitiontime is None
        assert cmd.serialize() == {}

    def test_serialize_only_set_fields(self):
        cmd = LightCommand(on=True, bri=200, xy=(0.4, 0.3), alert=Alert.SELECT, transitiontime=0)

        assert cmd.serialize() == {
            "on": True,
            "bri": 200,
            "xy": [0.4, 0.3],
            "alert": "select",
            "transitiontime": 0,
        }

    def test_frozen(self):
        cmd = LightCommand(bri=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cmd.bri = 20

    @pytest.mark.parametrize("fields", [
        {"hue": 70000},
        {"sat": -1},
        {"bri": 256},
        {"ct": 5},
        {"xy": (1.5, 0.2)},
        {"xy": (0.1, 0.2, 0.3)},
        {"alert": "blink"},
        {"effect": "strobe"},
        {"transitiontime": -4},
        {"on": "yes"},
    ])
    def test_serialize_rejects_out_of_range(self, fields):
        with pytest.raises(InvalidArgument):
            LightCommand(**fields).serialize()

    def test_to_json(self):
        cmd = LightCommand(on=False, effect=Effect.COLORLOOP)
        assert json.loads(cmd.to_json()) == {"on": False, "effect": "colorloop"}


class TestDeviceUnitSetters:
    """Direct device-unit setters round and clamp, without gamut correction."""

    def test_on_off(self):
        assert LightStateBuilder().on().serialize() == {"on": True}
        assert LightStateBuilder().off().serialize() == {"on": False}

    def test_set_hsb_rounds_half_away_from_zero(self):
        payload = LightStateBuilder().set_hsb(1000.4, 127.5, 12.5).serialize()
        assert payload == {"hue": 1000, "sat": 128, "bri": 13}

    def test_set_hsb_clamps(self):
        payload = LightStateBuilder().set_hsb(-5, 300, 1000).serialize()
        assert payload == {"hue": 0, "sat": 255, "bri": 255}

    def test_single_fields(self):
        builder = LightStateBuilder("LCT001").set_hue(70000).set_saturation(10).set_brightness(0.4)
        assert builder.serialize() == {"hue": 65535, "sat": 10, "bri": 0}

    def test_direct_hue_is_not_gamut_corrected(self):
        payload = LightStateBuilder("LCT001").set_hsb(25000, 255, 255).serialize()
        assert "xy" not in payload
        assert payload["hue"] == 25000

    def test_rejects_nan(self):
        builder = LightStateBuilder().set_brightness(100)
        with pytest.raises(InvalidArgument):
            builder.set_hsb(0, float("nan"), 10)
        assert builder.serialize() == {"bri": 100}


class TestPerceptualSetters:
    """Angle, fraction and RGB setters."""

    def test_angle_without_model_gives_device_hsb(self):
        payload = LightStateBuilder().set_hue_angle_sat_bri(-90, 0.5, 1).serialize()
        assert payload == {"hue": 49151, "sat": 128, "bri": 255}

    @pytest.mark.parametrize("angle", [0, 360, 720, -360])
    def test_angle_wraps_to_zero(self, angle):
        payload = LightStateBuilder().set_hue_angle_sat_bri(angle, 1, 1).serialize()
        assert payload["hue"] == 0

    def test_huge_negative_angle_returns(self):
        payload = LightStateBuilder().set_hue_angle_sat_bri(-1e20, 0.5, 0.5).serialize()
        assert 0 <= payload["hue"] <= 65535
        assert payload["sat"] == 128

    def test_angle_with_model_gives_clipped_xy(self):
        payload = LightStateBuilder("LCT001").set_hue_angle_sat_bri(120, 1, 0.5).serialize()
        assert set(payload) == {"bri", "xy"}
        assert payload["bri"] == 128
        assert in_gamut(XYPoint(*payload["xy"]), HUE_BULB)

    @pytest.mark.parametrize("sat,bri", [(1.5, 0.5), (-0.1, 0.5), (0.5, 2)])
    def test_fraction_out_of_range(self, sat, bri):
        builder = LightStateBuilder()
        with pytest.raises(InvalidArgument):
            builder.set_hue_angle_sat_bri(10, sat, bri)
        assert builder.serialize() == {}

    def test_rgb_without_model(self):
        assert LightStateBuilder().set_rgb(1, 0, 0).serialize() == {"hue": 0, "sat": 255, "bri": 255}

    def test_rgb_with_model(self):
        payload = LightStateBuilder("LCT001").set_rgb(0, 1, 0).serialize()
        assert payload["bri"] == 255
        assert "hue" not in payload
        x, y = payload["xy"]
        assert in_gamut(XYPoint(x, y), HUE_BULB)
        # sRGB green lies outside the bulb's triangle
        assert (x, y) != pytest.approx(rgb_to_xy(0, 1, 0))

    def test_rgb_inside_gamut_is_unchanged(self):
        payload = LightStateBuilder("LCT001").set_rgb(1, 0, 0).serialize()
        assert payload["xy"] == pytest.approx(list(rgb_to_xy(1, 0, 0)))

    def test_rgb_rejects_out_of_range(self):
        with pytest.raises(InvalidArgument):
            LightStateBuilder("LCT001").set_rgb(1.2, 0, 0)


class TestXySetter:
    """xy requests are always gamut-clipped."""

    def test_clipped_for_hue_bulb(self):
        x, y = LightStateBuilder("LCT001").set_xy(0.9, 0.9).serialize()["xy"]
        assert x == pytest.approx(0.5454, abs=1e-3)
        assert y == pytest.approx(0.4163, abs=1e-3)

    def test_unknown_model_uses_full_triangle(self):
        assert LightStateBuilder("ZZZ").set_xy(0.9, 0.9).serialize()["xy"] == pytest.approx([0.5, 0.5])
        assert LightStateBuilder().set_xy(0.9, 0.9).serialize()["xy"] == pytest.approx([0.5, 0.5])

    def test_inside_point_is_kept(self):
        payload = LightStateBuilder("LCT001").set_xy(0.4, 0.3).serialize()
        assert payload == {"xy": [0.4, 0.3]}

    def test_rejects_out_of_range(self):
        with pytest.raises(InvalidArgument):
            LightStateBuilder().set_xy(1.2, 0.3)


class TestColorTemperature:
    """ct requests are sent as mired or converted to xy."""

    def test_kelvin_to_ct(self):
        assert LightStateBuilder("LCT001").set_color_temperature(2700).serialize() == {"ct": 370}

    def test_ct_rounds(self):
        assert LightStateBuilder().set_ct(153.5).serialize() == {"ct": 154}

    def test_ct_clamped_to_kelvin_domain(self):
        assert LightStateBuilder().set_ct(5000).serialize() == {"ct": 1000}
        assert LightStateBuilder().set_ct(10).serialize() == {"ct": 25}

    def test_rgb_only_model_gets_xy(self):
        payload = LightStateBuilder("LLC010").set_color_temperature(2700).serialize()
        assert "ct" not in payload
        assert in_gamut(XYPoint(*payload["xy"]), LIVING_COLORS)

    def test_warm_xy_is_redder_than_cool_xy(self):
        warm = LightStateBuilder("LST001").set_color_temperature(2000).serialize()["xy"]
        cool = LightStateBuilder("LST001").set_color_temperature(6500).serialize()["xy"]
        assert warm[0] > cool[0]

    @pytest.mark.parametrize("kelvin", [0, -2700, float("inf")])
    def test_invalid_kelvin(self, kelvin):
        builder = LightStateBuilder("LCT001")
        with pytest.raises(InvalidArgument):
            builder.set_color_temperature(kelvin)
        assert builder.serialize() == {}

    def test_invalid_mired(self):
        with pytest.raises(InvalidArgument):
            LightStateBuilder().set_ct(0)


class TestAlertEffectTransition:
    """Alert, effect and transition time fields."""

    def test_alerts(self):
        assert LightStateBuilder().alert_select().serialize() == {"alert": "select"}
        assert LightStateBuilder().alert_long_select().serialize() == {"alert": "lselect"}
        assert LightStateBuilder().alert_none().serialize() == {"alert": "none"}

    def test_effects(self):
        assert LightStateBuilder().effect_colorloop().serialize() == {"effect": "colorloop"}
        assert LightStateBuilder().effect_none().serialize() == {"effect": "none"}

    def test_transition_time_optional(self):
        assert LightStateBuilder().on().set_transition_time().serialize() == {"on": True}
        assert LightStateBuilder().on().set_transition_time(None).serialize() == {"on": True}

    def test_transition_time(self):
        assert LightStateBuilder().set_transition_time(4).serialize() == {"transitiontime": 4}
        assert LightStateBuilder().set_transition_time(2.5).serialize() == {"transitiontime": 3}

    def test_negative_transition_time(self):
        with pytest.raises(InvalidArgument):
            LightStateBuilder().set_transition_time(-1)


class TestBuild:
    """Built commands are snapshots."""

    def test_build_is_not_affected_by_later_calls(self):
        builder = LightStateBuilder("LCT001").on().set_brightness(100)
        cmd = builder.build()
        builder.set_brightness(10).off()

        assert cmd.bri == 100
        assert cmd.on is True
        assert builder.build().bri == 10

    def test_chaining(self):
        payload = (
            LightStateBuilder("LCT001")
            .on()
            .set_xy(0.4, 0.3)
            .set_brightness(254)
            .alert_select()
            .set_transition_time(10)
            .serialize()
        )
        assert payload == {
            "on": True,
            "bri": 254,
            "xy": [0.4, 0.3],
            "alert": "select",
            "transitiontime": 10,
        }
