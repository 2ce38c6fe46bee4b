"""Shape families for tower cross-sections.

Each family is a small frozen dataclass carrying only the knobs that
family uses.  :func:`shape_from_params` picks the variant named by
``ParameterSet.shape_kind``; the profile generator dispatches on the
variant type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from towergen.params import ParameterSet, ShapeKind


@dataclass(frozen=True)
class BoxShape:
    kind = ShapeKind.BOX


@dataclass(frozen=True)
class RoundedBoxShape:
    radius: float = 0.1
    segments: int = 2
    kind = ShapeKind.ROUNDED_BOX


@dataclass(frozen=True)
class CircleShape:
    ring_segments: int = 32
    kind = ShapeKind.CIRCLE

    # circles need a few more sides than cylinders to read as round
    min_segments = 8

    @property
    def radial_segments(self) -> int:
        return max(self.min_segments, self.ring_segments)


@dataclass(frozen=True)
class CylinderShape:
    ring_segments: int = 32
    kind = ShapeKind.CYLINDER
    min_segments = 6

    @property
    def radial_segments(self) -> int:
        return max(self.min_segments, self.ring_segments)


@dataclass(frozen=True)
class PolygonShape:
    ring_segments: int = 6
    irregularity: float = 0.0
    kind = ShapeKind.POLYGON

    @property
    def sides(self) -> int:
        return max(3, self.ring_segments)


@dataclass(frozen=True)
class StarShape:
    points: int = 5
    inner_radius: float = 0.25
    kind = ShapeKind.STAR


Shape = Union[BoxShape, RoundedBoxShape, CircleShape, CylinderShape, PolygonShape, StarShape]


def shape_from_params(params: ParameterSet) -> Shape:
    """Return the shape variant described by ``params`` (clamped first)."""

    p = params.clamped()
    kind = p.shape_kind
    if kind == ShapeKind.ROUNDED_BOX:
        return RoundedBoxShape(radius=p.rounded_corner_radius,
                               segments=p.rounded_corner_segments)
    if kind == ShapeKind.CIRCLE:
        return CircleShape(ring_segments=p.ring_segments)
    if kind == ShapeKind.CYLINDER:
        return CylinderShape(ring_segments=p.ring_segments)
    if kind == ShapeKind.POLYGON:
        return PolygonShape(ring_segments=p.ring_segments,
                            irregularity=p.polygon_irregularity)
    if kind == ShapeKind.STAR:
        return StarShape(points=p.star_point_count,
                         inner_radius=p.star_inner_radius_ratio)
    return BoxShape()


__all__ = [
    "Shape",
    "BoxShape",
    "RoundedBoxShape",
    "CircleShape",
    "CylinderShape",
    "PolygonShape",
    "StarShape",
    "shape_from_params",
]
