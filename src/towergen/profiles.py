"""Cross-section profiles for tower segments.

A :class:`Profile` is a closed triangulated solid in a unit frame: the
cross-section lies in the XZ plane within ``[-0.5, 0.5]`` and the solid is
extruded along +Y over ``[-0.5, 0.5]``.  Segment transforms then scale it
non-uniformly without knowing which family produced it.

Families and their vertex counts:

============  =====================================  =====================
family        construction                           vertices
============  =====================================  =====================
box           square outline, extruded               ``8``
roundedBox    stack of rounded-rectangle loops       ``8 s (s + 1) + 8``
circle        ``max(8, n)`` ring, fan caps           ``2 N + 2``
cylinder      ``max(6, n)`` ring, fan caps           ``2 N + 2``
polygon       ``max(3, n)`` ring, jittered radii     ``2 N``
star          ``2 p`` alternating radii              ``4 p``
============  =====================================  =====================

Polygon jitter is the only source of randomness in the pipeline.  It is
drawn from the ``rng`` argument so callers can fix a seed; when the
irregularity is zero the generator is not touched at all.
Jittered outlines can reach past the unit frame; they are shrunk
uniformly after recentering so every profile fits it.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from towergen.geometry_utils import Face, outward_faces
from towergen.params import MAX_CORNER_RADIUS, ShapeKind
from towergen.shapes import (
    BoxShape,
    CircleShape,
    CylinderShape,
    PolygonShape,
    RoundedBoxShape,
    Shape,
    StarShape,
)
from towergen.triangulator import triangulate_loop

logger = logging.getLogger(__name__)

HALF = 0.5
OUTER_RADIUS = 0.5
# first outline vertex of polygons and stars points along +Z
_START_ANGLE = math.pi / 2.0


@dataclass(frozen=True, eq=False)
class Profile:
    """A unit cross-section solid, tagged with the family that made it.

    ``outline`` holds the cross-section ring in its construction frame
    (before recentering) for extruded families, ``offset`` the XZ shift
    that was applied to recenter the solid on its bounding box and ``fit``
    the uniform XZ factor applied afterwards, below 1 only for jittered
    outlines that outgrow the unit frame.
    """

    kind: ShapeKind
    vertices: np.ndarray
    faces: np.ndarray
    outline: Optional[np.ndarray] = None
    offset: Tuple[float, float] = (0.0, 0.0)
    fit: float = 1.0

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def outline_radii(self) -> np.ndarray:
        """Distance of each outline vertex from the construction centre."""
        if self.outline is None:
            return np.zeros(0)
        return np.hypot(self.outline[:, 0], self.outline[:, 1])


def generate(shape: Shape, rng: Optional[random.Random] = None) -> Profile:
    """Build the profile for ``shape``.

    ``rng`` is only consulted for irregular polygons; if it is omitted a
    fresh, unseeded :class:`random.Random` is used for that call.
    """

    builder = _BUILDERS.get(type(shape))
    if builder is None:
        raise TypeError(f"unsupported shape variant: {shape!r}")
    profile = builder(shape, rng)
    logger.debug("Generated %s profile: %d vertices, %d faces",
                 profile.kind.value, profile.vertex_count, profile.face_count)
    return profile


def vertex_count_for(shape: Shape) -> int:
    """Number of vertices :func:`generate` produces for ``shape``."""

    if isinstance(shape, BoxShape):
        return 8
    if isinstance(shape, RoundedBoxShape):
        s = max(1, shape.segments)
        return 8 * s * (s + 1) + 8
    if isinstance(shape, (CircleShape, CylinderShape)):
        return 2 * shape.radial_segments + 2
    if isinstance(shape, PolygonShape):
        return 2 * shape.sides
    if isinstance(shape, StarShape):
        return 4 * max(3, shape.points)
    raise TypeError(f"unsupported shape variant: {shape!r}")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _box(shape: BoxShape, rng: Optional[random.Random]) -> Profile:
    square = [(HALF, HALF), (-HALF, HALF), (-HALF, -HALF), (HALF, -HALF)]
    vertices, faces = _extrude(square, fan_caps=False)
    return Profile(ShapeKind.BOX, vertices, faces)


def _rounded_box(shape: RoundedBoxShape, rng: Optional[random.Random]) -> Profile:
    s = max(1, int(shape.segments))
    r = min(max(0.0, shape.radius), MAX_CORNER_RADIUS)
    a = HALF - r  # half extent of the flat faces

    # elevation angles along the vertical corner arc, poles excluded
    lower = [-math.pi / 2.0 + (math.pi / 2.0) * k / s for k in range(1, s + 1)]
    upper = [(math.pi / 2.0) * k / s for k in range(s)]
    levels = [(-a + r * math.sin(phi), r * math.cos(phi)) for phi in lower]
    levels += [(a + r * math.sin(phi), r * math.cos(phi)) for phi in upper]

    corners = [(a, a), (-a, a), (-a, -a), (a, -a)]
    vertices: List[Tuple[float, float, float]] = [(cx, -HALF, cz) for cx, cz in corners]
    for y, rho in levels:
        for q, (cx, cz) in enumerate(corners):
            for j in range(s + 1):
                theta = (math.pi / 2.0) * (q + j / s)
                vertices.append((cx + rho * math.cos(theta), y, cz + rho * math.sin(theta)))
    top = len(vertices)
    vertices.extend((cx, HALF, cz) for cx, cz in corners)

    loop = 4 * (s + 1)
    first = 4
    last = first + (len(levels) - 1) * loop

    faces: List[Face] = [(0, 1, 2), (0, 2, 3), (top, top + 1, top + 2), (top, top + 2, top + 3)]
    faces.extend(_pole_strip(0, first, s))
    for k in range(len(levels) - 1):
        faces.extend(_strip(first + k * loop, first + (k + 1) * loop, loop))
    faces.extend(_pole_strip(top, last, s))

    return Profile(ShapeKind.ROUNDED_BOX,
                   np.asarray(vertices, dtype=np.float64),
                   _face_array(outward_faces(vertices, faces)))


def _round(shape, rng: Optional[random.Random]) -> Profile:
    n = shape.radial_segments
    ring = [(OUTER_RADIUS * math.cos(2.0 * math.pi * i / n),
             OUTER_RADIUS * math.sin(2.0 * math.pi * i / n)) for i in range(n)]
    vertices, faces = _extrude(ring, fan_caps=True)
    return Profile(shape.kind, vertices, faces, outline=np.asarray(ring, dtype=np.float64))


def _polygon(shape: PolygonShape, rng: Optional[random.Random]) -> Profile:
    n = shape.sides
    irregularity = min(max(0.0, shape.irregularity), 0.6)
    if irregularity > 0.0 and rng is None:
        rng = random.Random()

    ring = []
    for i in range(n):
        radius = OUTER_RADIUS
        if irregularity > 0.0:
            radius *= rng.uniform(1.0 - irregularity, 1.0 + irregularity)
        theta = _START_ANGLE + 2.0 * math.pi * i / n
        ring.append((radius * math.cos(theta), radius * math.sin(theta)))
    return _centered(ShapeKind.POLYGON, ring)


def _star(shape: StarShape, rng: Optional[random.Random]) -> Profile:
    points = max(3, int(shape.points))
    inner = min(max(0.05, shape.inner_radius), 0.49)
    ring = []
    for i in range(2 * points):
        radius = OUTER_RADIUS if i % 2 == 0 else inner
        theta = _START_ANGLE + math.pi * i / points
        ring.append((radius * math.cos(theta), radius * math.sin(theta)))
    return _centered(ShapeKind.STAR, ring)


_BUILDERS: Dict[type, Callable[..., Profile]] = {
    BoxShape: _box,
    RoundedBoxShape: _rounded_box,
    CircleShape: _round,
    CylinderShape: _round,
    PolygonShape: _polygon,
    StarShape: _star,
}


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def _centered(kind: ShapeKind, ring: Sequence[Tuple[float, float]]) -> Profile:
    """Extrude ``ring``, recenter it on its XZ bounding box and shrink it
    uniformly when the box is wider than the unit frame."""

    vertices, faces = _extrude(ring, fan_caps=False)
    outline = np.asarray(ring, dtype=np.float64)
    lo, hi = outline.min(axis=0), outline.max(axis=0)
    center = (lo + hi) / 2.0
    extent = float((hi - lo).max())
    fit = 1.0 / extent if extent > 2.0 * HALF else 1.0
    vertices[:, 0] = (vertices[:, 0] - center[0]) * fit
    vertices[:, 2] = (vertices[:, 2] - center[1]) * fit
    return Profile(kind, vertices, faces, outline=outline,
                   offset=(float(-center[0]), float(-center[1])), fit=fit)


def _extrude(ring: Sequence[Tuple[float, float]], fan_caps: bool) -> Tuple[np.ndarray, np.ndarray]:
    """Extrude an XZ outline over ``y`` in ``[-0.5, 0.5]``.

    Vertex layout: bottom ring, top ring, then (with ``fan_caps``) the
    bottom and top cap centres.  Without fan caps the caps are ear-clipped.
    """

    n = len(ring)
    vertices = [(x, -HALF, z) for x, z in ring] + [(x, HALF, z) for x, z in ring]
    faces: List[Face] = list(_strip(0, n, n))

    if fan_caps:
        bottom = len(vertices)
        vertices.append((0.0, -HALF, 0.0))
        top = len(vertices)
        vertices.append((0.0, HALF, 0.0))
        for i in range(n):
            i2 = (i + 1) % n
            faces.append((bottom, i, i2))
            faces.append((top, n + i, n + i2))
    else:
        for a, b, c in triangulate_loop(ring):
            faces.append((a, b, c))
            faces.append((n + a, n + b, n + c))

    # orient while the outline is still star-shaped about the origin
    oriented = outward_faces(vertices, faces)
    return np.asarray(vertices, dtype=np.float64), _face_array(oriented)


def _strip(lower: int, upper: int, count: int) -> List[Face]:
    """Quads joining two rings of ``count`` vertices starting at the given indices."""

    faces: List[Face] = []
    for i in range(count):
        i2 = (i + 1) % count
        faces.append((lower + i, upper + i, lower + i2))
        faces.append((lower + i2, upper + i, upper + i2))
    return faces


def _pole_strip(pole: int, ring: int, s: int) -> List[Face]:
    """Join the four flat-face corners at ``pole`` to a rounded loop at ``ring``."""

    faces: List[Face] = []
    for q in range(4):
        q2 = (q + 1) % 4
        base = ring + q * (s + 1)
        for j in range(s):
            faces.append((pole + q, base + j, base + j + 1))
        faces.append((pole + q, base + s, ring + q2 * (s + 1)))
        faces.append((pole + q, ring + q2 * (s + 1), pole + q2))
    return faces


def _face_array(faces: Sequence[Face]) -> np.ndarray:
    if not faces:
        return np.zeros((0, 3), dtype=np.int64)
    return np.asarray(faces, dtype=np.int64)


__all__ = [
    "Profile",
    "generate",
    "vertex_count_for",
]
