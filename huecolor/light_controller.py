"""
Light controller: per-light color operations on top of a model registry and a
payload sink.

The controller never talks to the network itself. It asks a model resolver
which model a light is (to pick its gamut), builds the light state and hands
the serialized payload to a sink.
"""

import inspect
import logging
from typing import Any, Dict, Optional

from .light_state import LightCommand, LightStateBuilder

logger = logging.getLogger(__name__)


class HueLightController:
    """Build and send light states for individual lights.

    Args:
        sink: Object with an ``async send_light_state(light_id, payload)``
            method that delivers a payload dict to the light.
        model_resolver: Object with a ``resolve_model_id(light_id)`` method,
            plain or async, returning the light's model identifier.
    """

    def __init__(self, sink, model_resolver):
        self.sink = sink
        self.model_resolver = model_resolver

    async def resolve_model_id(self, light_id: str) -> Optional[str]:
        """Get the model identifier of a light."""
        model_id = self.model_resolver.resolve_model_id(light_id)
        if inspect.isawaitable(model_id):
            model_id = await model_id
        return model_id

    async def set_state(self, light_id: str, command: LightCommand) -> bool:
        """Send a prebuilt light state.

        Returns False if the sink failed to deliver it.
        """
        payload = command.serialize()
        try:
            await self.sink.send_light_state(light_id, payload)
        except Exception as e:
            logger.error(f"Failed to set state of light {light_id}: {e}")
            return False

        logger.info(f"Light {light_id} state set: {payload}")
        return True

    async def _send(self, light_id: str, builder: LightStateBuilder,
                    transition_time: Optional[float]) -> bool:
        builder.set_transition_time(transition_time)
        return await self.set_state(light_id, builder.build())

    async def _model_builder(self, light_id: str) -> LightStateBuilder:
        return LightStateBuilder(await self.resolve_model_id(light_id))

    async def turn_on(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().on(), transition_time)

    async def turn_off(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().off(), transition_time)

    async def set_hsb(self, light_id: str, hue: float, saturation: float, brightness: float,
                      transition_time: Optional[float] = None) -> bool:
        """Set gamut-corrected color from device hue (0-65535), sat and bri (0-255).

        The light receives brightness and the clipped xy of the color.
        """
        builder = await self._model_builder(light_id)
        builder.set_hue_angle_sat_bri(hue * 360 / 65535, saturation / 255, brightness / 255)
        return await self._send(light_id, builder, transition_time)

    async def set_hue(self, light_id: str, hue: float,
                      transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().set_hue(hue), transition_time)

    async def set_saturation(self, light_id: str, saturation: float,
                             transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().set_saturation(saturation), transition_time)

    async def set_brightness(self, light_id: str, brightness: float,
                             transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().set_brightness(brightness), transition_time)

    async def set_hue_angle_sat_bri(self, light_id: str, angle: float, saturation: float,
                                    brightness: float, transition_time: Optional[float] = None) -> bool:
        """Set color from an angle in degrees and saturation/brightness in [0, 1]."""
        builder = await self._model_builder(light_id)
        builder.set_hue_angle_sat_bri(angle, saturation, brightness)
        return await self._send(light_id, builder, transition_time)

    async def set_rgb(self, light_id: str, red: float, green: float, blue: float,
                      transition_time: Optional[float] = None) -> bool:
        builder = await self._model_builder(light_id)
        builder.set_rgb(red, green, blue)
        return await self._send(light_id, builder, transition_time)

    async def set_ct(self, light_id: str, mired: float,
                     transition_time: Optional[float] = None) -> bool:
        builder = await self._model_builder(light_id)
        builder.set_ct(mired)
        return await self._send(light_id, builder, transition_time)

    async def set_color_temperature(self, light_id: str, kelvin: float,
                                    transition_time: Optional[float] = None) -> bool:
        builder = await self._model_builder(light_id)
        builder.set_color_temperature(kelvin)
        return await self._send(light_id, builder, transition_time)

    async def set_xy(self, light_id: str, x: float, y: float,
                     transition_time: Optional[float] = None) -> bool:
        builder = await self._model_builder(light_id)
        builder.set_xy(x, y)
        return await self._send(light_id, builder, transition_time)

    async def alert_select(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().alert_select(), transition_time)

    async def alert_long_select(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().alert_long_select(), transition_time)

    async def alert_none(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().alert_none(), transition_time)

    async def effect_colorloop(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().effect_colorloop(), transition_time)

    async def effect_none(self, light_id: str, transition_time: Optional[float] = None) -> bool:
        return await self._send(light_id, LightStateBuilder().effect_none(), transition_time)


class RecordingSink:
    """Sink that keeps every payload in memory, newest last.

    Useful for dry runs and for inspecting what a controller would send.
    """

    def __init__(self):
        self.sent: list = []

    async def send_light_state(self, light_id: str, payload: Dict[str, Any]) -> None:
        self.sent.append((light_id, payload))


class StaticModelResolver:
    """Resolve model identifiers from a fixed ``{light_id: model_id}`` mapping.

    Lights missing from the mapping resolve to None (no particular model).
    """

    def __init__(self, models: Optional[Dict[str, str]] = None):
        self.models = dict(models or {})

    def resolve_model_id(self, light_id: str) -> Optional[str]:
        return self.models.get(light_id)
