"""Tower synthesis: profile, plan, color and merge.

:func:`synthesize` builds the merged, per-vertex colored mesh.
:func:`synthesize_instances` builds the instanced form, one unit profile
plus a matrix and a color per segment, for renderers that draw the
segments as separate instances.

Every call regenerates the whole tower from the parameter snapshot; no
state is kept between calls.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from towergen.colors import ColorGradient
from towergen.mesh import Mesh, compute_normals, merge_meshes
from towergen.params import ParameterSet
from towergen.planner import SegmentPlanEntry, plan, vertical_span
from towergen.profiles import Profile, generate
from towergen.shapes import shape_from_params

logger = logging.getLogger(__name__)


def _rng_for(params: ParameterSet, rng: Optional[random.Random]) -> Optional[random.Random]:
    if rng is not None:
        return rng
    if params.seed is not None:
        return random.Random(params.seed)
    return None


def build_profile(params: ParameterSet, rng: Optional[random.Random] = None) -> Profile:
    """Generate the single profile shared by every segment of ``params``."""

    p = params.clamped()
    return generate(shape_from_params(p), _rng_for(p, rng))


def synthesize(params: ParameterSet, rng: Optional[random.Random] = None) -> Mesh:
    """Build the merged tower mesh for ``params``.

    The profile is generated once (polygon jitter included) and copied
    into every segment.  Colors are assigned per vertex from each vertex's
    height over the full vertical extent of the tower, and normals are
    recomputed over the merged mesh, which smooths shading across each
    segment's edges.
    """

    p = params.clamped()
    profile = build_profile(p, rng)
    entries = plan(p)
    gradient = ColorGradient(p.bottom_color, p.top_color)
    lo, hi = vertical_span(entries)

    parts = []
    for entry in entries:
        positions = entry.matrix().apply(profile.vertices)
        colors = gradient.vertex_colors(positions[:, 1], lo, hi)
        parts.append((positions, colors, profile.faces))

    mesh = merge_meshes(parts, normals=True)
    logger.debug("Synthesized %s tower: %d segments, %d vertices, %d triangles",
                 profile.kind.value, len(entries), mesh.vertex_count, mesh.triangle_count)
    return mesh


@dataclass(frozen=True, eq=False)
class InstancedTower:
    """One unit profile drawn once per segment.

    ``matrices`` is ``(N, 4, 4)`` (row-major, column vectors), ``colors``
    is ``(N, 3)`` with one color per segment.
    """

    profile: Profile
    normals: np.ndarray
    matrices: np.ndarray
    colors: np.ndarray
    plan: List[SegmentPlanEntry]

    @property
    def instance_count(self) -> int:
        return int(self.matrices.shape[0])


def synthesize_instances(params: ParameterSet, rng: Optional[random.Random] = None) -> InstancedTower:
    """Build the instanced form of the tower for ``params``.

    Colors use each segment's normalized position, so the gradient steps
    from segment to segment; that is only appropriate while segments are
    drawn as separate instances.
    """

    p = params.clamped()
    profile = build_profile(p, rng)
    entries = plan(p)
    gradient = ColorGradient(p.bottom_color, p.top_color)

    matrices = np.stack([e.matrix().as_array() for e in entries])
    colors = gradient.segment_colors(e.t for e in entries)
    return InstancedTower(profile=profile,
                          normals=compute_normals(profile.vertices, profile.faces),
                          matrices=matrices,
                          colors=colors,
                          plan=entries)


class TowerSynthesizer:
    """Entry point for a preview shell that rebuilds on every change.

    Holds no geometry between calls; ``rng`` is optional and only affects
    irregular polygons.
    """

    def __init__(self, rng: Optional[random.Random] = None, instanced: bool = False):
        self.rng = rng
        self.instanced = instanced

    def rebuild(self, params: ParameterSet):
        start = time.perf_counter()
        if self.instanced:
            result = synthesize_instances(params, self.rng)
        else:
            result = synthesize(params, self.rng)
        logger.info("Rebuilt tower in %.1f ms", (time.perf_counter() - start) * 1000.0)
        return result


__all__ = [
    "InstancedTower",
    "TowerSynthesizer",
    "build_profile",
    "synthesize",
    "synthesize_instances",
]
