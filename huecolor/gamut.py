"""Per-model color gamuts and clipping of CIE xy points into them.

Each light model class reproduces a triangle of the CIE 1931 chromaticity
diagram. Points outside the triangle are moved to the closest point on its
boundary before being sent to a light.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .color_space import RGB, XYPoint, xy_to_rgb
from .validation import require_finite

logger = logging.getLogger(__name__)

# Model used when a caller asks for an RGB rendering without naming a light
DEFAULT_MODEL_ID = os.getenv("HUECOLOR_DEFAULT_MODEL", "LCT001")

# Model prefixes that take color temperature as xy instead of mired. Every
# other model gets mired, including LCT bulbs newer than LCT001, LWB white
# bulbs and unknown models.
RGB_ONLY_MODEL_PREFIXES: Tuple[str, ...] = tuple(
    prefix.strip().upper()
    for prefix in os.getenv("HUECOLOR_RGB_ONLY_MODELS", "LLC,LST").split(",")
    if prefix.strip()
)

# Signed area below which a point counts as lying on a gamut edge
EDGE_TOLERANCE = 1e-12


class ModelClass(Enum):
    """Gamut family of a light model."""
    HUE_BULB = "hue_bulb"           # LCT* bulbs
    LIVING_COLORS = "living_colors"  # LivingColors Bloom, Aura, Iris and LightStrips
    DEFAULT = "default"


@dataclass(frozen=True)
class GamutProfile:
    """Corners of the reachable color triangle."""
    red: XYPoint
    green: XYPoint
    blue: XYPoint


GAMUT_PROFILES: Mapping[ModelClass, GamutProfile] = MappingProxyType({
    ModelClass.HUE_BULB: GamutProfile(
        red=XYPoint(0.674, 0.322),
        green=XYPoint(0.408, 0.517),
        blue=XYPoint(0.168, 0.041),
    ),
    ModelClass.LIVING_COLORS: GamutProfile(
        red=XYPoint(0.703, 0.296),
        green=XYPoint(0.214, 0.709),
        blue=XYPoint(0.139, 0.081),
    ),
    ModelClass.DEFAULT: GamutProfile(
        red=XYPoint(1.0, 0.0),
        green=XYPoint(0.0, 1.0),
        blue=XYPoint(0.0, 0.0),
    ),
})

MODEL_PREFIXES: Dict[str, ModelClass] = {
    "LCT": ModelClass.HUE_BULB,
    "LLC": ModelClass.LIVING_COLORS,
    "LST": ModelClass.LIVING_COLORS,
}


def model_class_for(model_id: Optional[str]) -> ModelClass:
    """Map a model identifier such as ``LCT001`` to its gamut family.

    Unknown or missing identifiers map to ``ModelClass.DEFAULT``; that is not
    an error, the full triangle still yields a usable color.
    """
    if model_id:
        model_class = MODEL_PREFIXES.get(model_id[:3].upper())
        if model_class is not None:
            return model_class
    logger.debug("No gamut known for model %r, using default", model_id)
    return ModelClass.DEFAULT


def gamut_for_model(model_id: Optional[str]) -> GamutProfile:
    return GAMUT_PROFILES[model_class_for(model_id)]


def supports_color_temperature(model_id: Optional[str]) -> bool:
    """Whether the model accepts a native mired value."""
    if not model_id:
        return True
    return not model_id.upper().startswith(RGB_ONLY_MODEL_PREFIXES)


def _cross(origin: XYPoint, edge: Tuple[float, float], point: XYPoint) -> float:
    """Signed area of ``point`` relative to the edge starting at ``origin``."""
    return (point.x - origin.x) * edge[1] - (point.y - origin.y) * edge[0]


def _edges(profile: GamutProfile):
    """(start, end, opposite vertex) for Blue->Red, Red->Green, Green->Blue."""
    return (
        (profile.blue, profile.red, profile.green),
        (profile.red, profile.green, profile.blue),
        (profile.green, profile.blue, profile.red),
    )


def _outside_edge(start: XYPoint, end: XYPoint, opposite: XYPoint, point: XYPoint) -> bool:
    """True if ``point`` is on the far side of the edge from ``opposite``.

    Points within EDGE_TOLERANCE of the edge line count as on it, so a point
    already projected onto the edge stays put.
    """
    edge = (end.x - start.x, end.y - start.y)
    side = math.copysign(1.0, _cross(start, edge, opposite))
    return side * _cross(start, edge, point) < -EDGE_TOLERANCE


def in_gamut(point: XYPoint, profile: GamutProfile) -> bool:
    """True if ``point`` lies inside the triangle or on its boundary."""
    return not any(
        _outside_edge(start, end, opposite, point)
        for start, end, opposite in _edges(profile)
    )


def clip_to_gamut(point: XYPoint, profile: GamutProfile) -> XYPoint:
    """Return ``point`` if reachable, else the closest point on the boundary.

    The first edge whose half-plane excludes the point, checked Blue->Red,
    Red->Green, Green->Blue, receives the projection. A projection that falls
    past either end of the edge snaps to that end's vertex.
    """
    point = XYPoint(require_finite("x", point[0]), require_finite("y", point[1]))

    for start, end, opposite in _edges(profile):
        if not _outside_edge(start, end, opposite, point):
            continue

        edge = (end.x - start.x, end.y - start.y)
        norm_dot = (
            (point.x - start.x) * edge[0] + (point.y - start.y) * edge[1]
        ) / (edge[0] * edge[0] + edge[1] * edge[1])
        if norm_dot < 0.0:
            clipped = start
        elif norm_dot > 1.0:
            clipped = end
        else:
            clipped = XYPoint(start.x + norm_dot * edge[0], start.y + norm_dot * edge[1])
        logger.debug("Clipped xy %s to %s", tuple(point), tuple(clipped))
        return clipped

    return point


def clip_xy_for_model(x: float, y: float, model_id: Optional[str]) -> XYPoint:
    return clip_to_gamut(XYPoint(x, y), gamut_for_model(model_id))


def xy_to_rgb_for_model(
    x: float,
    y: float,
    model_id: Optional[str] = None,
    brightness: Optional[float] = None,
) -> RGB:
    """Render what a light of ``model_id`` shows for xy at ``brightness``.

    The point is clipped into the model's gamut first. Defaults to the
    ``HUECOLOR_DEFAULT_MODEL`` model at full brightness.
    """
    clipped = clip_xy_for_model(x, y, model_id or DEFAULT_MODEL_ID)
    return xy_to_rgb(clipped.x, clipped.y, 1.0 if brightness is None else brightness)
