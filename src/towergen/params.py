"""Tower parameter snapshots.

A :class:`ParameterSet` is an immutable snapshot of every knob that drives
one synthesis pass.  The presentation layer creates a fresh snapshot on each
control change (:meth:`ParameterSet.replace`) and hands it to the
synthesizer.

Malformed input never raises.  :meth:`ParameterSet.from_mapping` coerces
loosely typed values (YAML, ``NAME=VALUE`` strings) and falls back to the
field default when a value cannot be read; :meth:`ParameterSet.clamped`
moves every field to the nearest valid value before geometry is built.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from towergen.colors import RGB, parse_color
from towergen.curves import CurveKind, curve_kind

logger = logging.getLogger(__name__)


class ShapeKind(str, Enum):
    BOX = "box"
    ROUNDED_BOX = "roundedBox"
    CIRCLE = "circle"
    CYLINDER = "cylinder"
    POLYGON = "polygon"
    STAR = "star"


def shape_kind(value: Union[ShapeKind, str, None]) -> ShapeKind:
    """Resolve ``value`` to a :class:`ShapeKind`, defaulting to box."""

    if isinstance(value, ShapeKind):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return ShapeKind(text)
        except ValueError:
            pass
        key = text.upper().replace("-", "_")
        if key in ShapeKind.__members__:
            return ShapeKind[key]
        for kind in ShapeKind:
            if kind.value.lower() == text.lower():
                return kind
    logger.warning("Unknown shape kind %r, using %s", value, ShapeKind.BOX.value)
    return ShapeKind.BOX


# Documented bounds; see ParameterSet.clamped()
MIN_SEGMENTS = 1
MIN_TOWER_HEIGHT = 1.0
MIN_EXTENT = 1e-3
MIN_RING_SEGMENTS = 3
MAX_IRREGULARITY = 0.6
MIN_STAR_POINTS = 3
STAR_RATIO_BOUNDS = (0.05, 0.49)
MAX_CORNER_RADIUS = 0.49
MIN_CORNER_SEGMENTS = 1

DEFAULT_BOTTOM_COLOR: RGB = parse_color("#f2a365")
DEFAULT_TOP_COLOR: RGB = parse_color("#4dd0e1")

_ALIASES = {
    "twist_min": ("twist_range", 0),
    "twist_max": ("twist_range", 1),
    "scale_min": ("scale_range", 0),
    "scale_max": ("scale_range", 1),
}


@dataclass(frozen=True)
class ParameterSet:
    """Immutable snapshot of the tower parameters."""

    segment_count: int = 40
    tower_height: float = 20.0
    segment_thickness: float = 0.25
    cross_section_width: float = 4.0
    cross_section_depth: float = 0.5
    shape_kind: ShapeKind = ShapeKind.BOX

    # shape-specific knobs
    ring_segments: int = 32
    polygon_irregularity: float = 0.0
    star_point_count: int = 5
    star_inner_radius_ratio: float = 0.25
    rounded_corner_radius: float = 0.1
    rounded_corner_segments: int = 2

    twist_range: Tuple[float, float] = (0.0, 180.0)
    scale_range: Tuple[float, float] = (1.0, 0.5)
    twist_curve: CurveKind = CurveKind.LINEAR
    scale_curve: CurveKind = CurveKind.EASE_IN_OUT

    bottom_color: RGB = DEFAULT_BOTTOM_COLOR
    top_color: RGB = DEFAULT_TOP_COLOR

    # seeds the polygon jitter when no generator is passed explicitly
    seed: Optional[int] = None

    @property
    def twist_min(self) -> float:
        return self.twist_range[0]

    @property
    def twist_max(self) -> float:
        return self.twist_range[1]

    @property
    def scale_min(self) -> float:
        return self.scale_range[0]

    @property
    def scale_max(self) -> float:
        return self.scale_range[1]

    def replace(self, **changes: Any) -> "ParameterSet":
        """Return a copy with ``changes`` applied (aliases accepted)."""

        data = self.to_dict()
        data.update(changes)
        return ParameterSet.from_mapping(data)

    def clamped(self) -> "ParameterSet":
        """Return the nearest valid parameter set.

        Counts are floored and raised to their minimum, ratios and radii are
        clamped to their bounds, enums resolved.  Every adjustment is logged
        at DEBUG level; nothing here raises for numeric input.
        """

        changes: Dict[str, Any] = {}

        def _set(name: str, value: Any) -> None:
            current = getattr(self, name)
            # type check first so array-valued fields never reach ==
            if type(value) is type(current) and value == current:
                return
            logger.debug("Clamped %s: %r -> %r", name, current, value)
            changes[name] = value

        _set("segment_count", _floor_at_least(self.segment_count, MIN_SEGMENTS))
        _set("tower_height", _at_least(self.tower_height, MIN_TOWER_HEIGHT))
        _set("segment_thickness", _at_least(self.segment_thickness, MIN_EXTENT))
        _set("cross_section_width", _at_least(self.cross_section_width, MIN_EXTENT))
        _set("cross_section_depth", _at_least(self.cross_section_depth, MIN_EXTENT))
        _set("shape_kind", shape_kind(self.shape_kind))
        _set("ring_segments", _floor_at_least(self.ring_segments, MIN_RING_SEGMENTS))
        _set("polygon_irregularity", _between(self.polygon_irregularity, 0.0, MAX_IRREGULARITY))
        _set("star_point_count", _floor_at_least(self.star_point_count, MIN_STAR_POINTS))
        _set("star_inner_radius_ratio", _between(self.star_inner_radius_ratio, *STAR_RATIO_BOUNDS))
        _set("rounded_corner_radius", _between(self.rounded_corner_radius, 0.0, MAX_CORNER_RADIUS))
        _set("rounded_corner_segments",
             _floor_at_least(self.rounded_corner_segments, MIN_CORNER_SEGMENTS))
        _set("twist_range", (_finite(self.twist_range[0]), _finite(self.twist_range[1])))
        _set("scale_range", (_finite(self.scale_range[0], 1.0), _finite(self.scale_range[1], 1.0)))
        _set("twist_curve", curve_kind(self.twist_curve))
        _set("scale_curve", curve_kind(self.scale_curve))
        _set("bottom_color", parse_color(self.bottom_color, DEFAULT_BOTTOM_COLOR))
        _set("top_color", parse_color(self.top_color, DEFAULT_TOP_COLOR))

        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view, suitable for YAML/JSON and ``from_mapping``."""

        return {
            "segment_count": self.segment_count,
            "tower_height": self.tower_height,
            "segment_thickness": self.segment_thickness,
            "cross_section_width": self.cross_section_width,
            "cross_section_depth": self.cross_section_depth,
            "shape_kind": _enum_value(self.shape_kind),
            "ring_segments": self.ring_segments,
            "polygon_irregularity": self.polygon_irregularity,
            "star_point_count": self.star_point_count,
            "star_inner_radius_ratio": self.star_inner_radius_ratio,
            "rounded_corner_radius": self.rounded_corner_radius,
            "rounded_corner_segments": self.rounded_corner_segments,
            "twist_range": list(self.twist_range),
            "scale_range": list(self.scale_range),
            "twist_curve": _enum_value(self.twist_curve),
            "scale_curve": _enum_value(self.scale_curve),
            "bottom_color": _color_out(self.bottom_color),
            "top_color": _color_out(self.top_color),
            "seed": self.seed,
        }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ParameterSet":
        """Build a parameter set from loosely typed values.

        Unknown keys are ignored (with a warning) and values that cannot be
        coerced fall back to the field default.  The result is *not*
        clamped; call :meth:`clamped` before building geometry.
        """

        defaults = cls()
        values: Dict[str, Any] = {}
        ranges: Dict[str, list] = {}
        names = {f.name for f in dataclasses.fields(cls)}

        for key, raw in mapping.items():
            if key in _ALIASES:
                target, slot = _ALIASES[key]
                ranges.setdefault(target, list(getattr(defaults, target)))[slot] = raw
                continue
            if key not in names:
                logger.warning("Ignoring unknown tower parameter %r", key)
                continue
            if key in ("twist_range", "scale_range"):
                current = ranges.setdefault(key, list(getattr(defaults, key)))
                pair = _coerce_pair(raw)
                if pair is None:
                    logger.warning("Bad value for %s: %r, using default", key, raw)
                else:
                    current[0], current[1] = pair
                continue
            values[key] = raw

        for key, pair in ranges.items():
            values[key] = pair

        kwargs: Dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if f.name not in values:
                continue
            default = getattr(defaults, f.name)
            kwargs[f.name] = _coerce(f.name, values[f.name], default)
        return cls(**kwargs)


_INT_FIELDS = {"segment_count", "ring_segments", "star_point_count", "rounded_corner_segments"}
_FLOAT_FIELDS = {
    "tower_height", "segment_thickness", "cross_section_width", "cross_section_depth",
    "polygon_irregularity", "star_inner_radius_ratio", "rounded_corner_radius",
}


def _coerce(name: str, raw: Any, default: Any) -> Any:
    try:
        if name in _INT_FIELDS:
            # floats are kept so that clamped() can floor them
            value = float(raw)
            return int(value) if value.is_integer() else value
        if name in _FLOAT_FIELDS:
            return float(raw)
        if name in ("twist_range", "scale_range"):
            return (float(raw[0]), float(raw[1]))
        if name == "shape_kind":
            return shape_kind(raw)
        if name in ("twist_curve", "scale_curve"):
            return curve_kind(raw)
        if name in ("bottom_color", "top_color"):
            return parse_color(raw, default)
        if name == "seed":
            return None if raw is None or raw == "" else int(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Bad value for %s: %r, using default %r", name, raw, default)
        return default
    return raw


def _coerce_pair(raw: Any) -> Optional[Tuple[Any, Any]]:
    if isinstance(raw, str):
        parts = [p for p in raw.replace(",", " ").split() if p]
    else:
        try:
            parts = list(raw)
        except TypeError:
            return None
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _finite(x: float, fallback: float = 0.0) -> float:
    x = float(x)
    return x if math.isfinite(x) else fallback


def _at_least(x: float, lo: float) -> float:
    x = float(x)
    if not math.isfinite(x):
        return lo
    return max(lo, x)


def _between(x: float, lo: float, hi: float) -> float:
    x = float(x)
    if math.isnan(x):
        return lo
    return min(hi, max(lo, x))


def _floor_at_least(x: Union[int, float], lo: int) -> int:
    x = float(x)
    if not math.isfinite(x):
        return lo
    return max(lo, int(math.floor(x)))


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _color_out(color: Any) -> Any:
    if isinstance(color, (tuple, list)):
        return [float(c) for c in color]
    return color


__all__ = [
    "ParameterSet",
    "ShapeKind",
    "shape_kind",
    "MIN_TOWER_HEIGHT",
    "MAX_IRREGULARITY",
    "STAR_RATIO_BOUNDS",
    "MAX_CORNER_RADIUS",
]
