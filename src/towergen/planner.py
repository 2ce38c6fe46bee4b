"""Per-segment placement of a tower.

For ``N`` segments the planner samples the twist and scale curves at the
normalized position ``t = i / (N - 1)`` (``0`` for a single segment) and
stacks segments at an even spacing of ``tower_height / N`` starting from
``-tower_height / 2``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from towergen.curves import evaluate, lerp
from towergen.params import ParameterSet
from towergen.xform import Matrix, SegmentTransform

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class SegmentPlanEntry:
    """Placement of one segment: centre height, twist (radians) and scale."""

    index: int
    t: float
    offset: float
    twist: float
    scale_factor: float
    scale: Vec3

    @property
    def twist_degrees(self) -> float:
        return math.degrees(self.twist)

    def matrix(self) -> Matrix:
        """Scale, then rotate about +Y, then translate to ``offset``."""
        return SegmentTransform(self.offset, self.twist, self.scale)


def segment_positions(count: int) -> List[float]:
    """Normalized positions of ``count`` segments along the tower."""

    if count <= 1:
        return [0.0] * max(count, 0)
    return [i / (count - 1) for i in range(count)]


def plan(params: ParameterSet) -> List[SegmentPlanEntry]:
    """Compute the placement of every segment of ``params``.

    ``params`` is clamped first, so a zero or negative segment count yields
    a single segment and a non-positive tower height is raised to the
    minimum height.
    """

    p = params.clamped()
    count = p.segment_count
    height = p.tower_height
    spacing = height / count
    base = -height / 2.0

    entries = []
    for i, t in enumerate(segment_positions(count)):
        twist = math.radians(lerp(p.twist_min, p.twist_max, evaluate(p.twist_curve, t)))
        factor = lerp(p.scale_min, p.scale_max, evaluate(p.scale_curve, t))
        entries.append(SegmentPlanEntry(
            index=i,
            t=t,
            offset=base + i * spacing,
            twist=twist,
            scale_factor=factor,
            scale=(p.cross_section_width * factor,
                   p.segment_thickness,
                   p.cross_section_depth * factor),
        ))
    return entries


def vertical_span(entries: List[SegmentPlanEntry]) -> Tuple[float, float]:
    """Lowest and highest point reached by the planned segments."""

    if not entries:
        return 0.0, 0.0
    lo = min(e.offset - e.scale[1] / 2.0 for e in entries)
    hi = max(e.offset + e.scale[1] / 2.0 for e in entries)
    return lo, hi


__all__ = ["SegmentPlanEntry", "plan", "segment_positions", "vertical_span"]
