import math
import random

import numpy as np
import pytest

from towergen.geometry_utils import triangle_centroid, triangle_normal
from towergen.params import ParameterSet, ShapeKind
from towergen.profiles import generate, vertex_count_for
from towergen.shapes import (
    BoxShape,
    CircleShape,
    CylinderShape,
    PolygonShape,
    RoundedBoxShape,
    StarShape,
    shape_from_params,
)

ALL_SHAPES = [
    BoxShape(),
    RoundedBoxShape(radius=0.15, segments=3),
    CircleShape(ring_segments=12),
    CylinderShape(ring_segments=5),
    PolygonShape(ring_segments=7, irregularity=0.3),
    StarShape(points=5, inner_radius=0.2),
]


def _signed_volume(profile):
    v = profile.vertices
    f = profile.faces
    return float(np.einsum('ij,ij->i', v[f[:, 0]], np.cross(v[f[:, 1]], v[f[:, 2]])).sum() / 6.0)


def _edge_counts(profile):
    counts = {}
    for a, b, c in profile.faces:
        for e in ((a, b), (b, c), (c, a)):
            key = (min(e), max(e))
            counts[key] = counts.get(key, 0) + 1
    return counts


@pytest.mark.parametrize("shape", ALL_SHAPES, ids=lambda s: s.kind.value)
def test_vertex_count_matches_prediction(shape):
    profile = generate(shape, random.Random(1))
    assert profile.vertex_count == vertex_count_for(shape)
    assert profile.kind is shape.kind


@pytest.mark.parametrize("shape", ALL_SHAPES, ids=lambda s: s.kind.value)
def test_profiles_fit_unit_frame(shape):
    profile = generate(shape, random.Random(1))
    lo, hi = profile.bounding_box()
    assert math.isclose(lo[1], -0.5) and math.isclose(hi[1], 0.5)
    assert np.all(lo >= -0.5 - 1e-9) and np.all(hi <= 0.5 + 1e-9)
    # recentred on the cross-section bounding box
    assert math.isclose(lo[0] + hi[0], 0.0, abs_tol=1e-9)
    assert math.isclose(lo[2] + hi[2], 0.0, abs_tol=1e-9)


@pytest.mark.parametrize("shape", ALL_SHAPES, ids=lambda s: s.kind.value)
def test_profiles_are_closed_and_outward(shape):
    profile = generate(shape, random.Random(1))
    assert _signed_volume(profile) > 0
    assert all(n == 2 for n in _edge_counts(profile).values())


def test_box():
    profile = generate(BoxShape())
    assert profile.vertex_count == 8
    assert profile.face_count == 12
    assert math.isclose(_signed_volume(profile), 1.0)
    assert set(map(tuple, np.abs(profile.vertices))) == {(0.5, 0.5, 0.5)}


def test_box_faces_point_away_from_centre():
    profile = generate(BoxShape())
    for face in profile.faces:
        tri = [tuple(profile.vertices[i]) for i in face]
        n = triangle_normal(*tri)
        c = triangle_centroid(*tri)
        assert sum(a * b for a, b in zip(n, c)) > 0


def test_rounded_box_volume_between_sphere_and_cube():
    profile = generate(RoundedBoxShape(radius=0.2, segments=4))
    volume = _signed_volume(profile)
    assert math.pi / 6 < volume < 1.0
    lo, hi = profile.bounding_box()
    np.testing.assert_allclose(lo, [-0.5, -0.5, -0.5], atol=1e-9)
    np.testing.assert_allclose(hi, [0.5, 0.5, 0.5], atol=1e-9)


def test_rounded_box_zero_radius_is_a_cube():
    profile = generate(RoundedBoxShape(radius=0.0, segments=2))
    assert profile.vertex_count == vertex_count_for(RoundedBoxShape(radius=0.0, segments=2))
    assert math.isclose(_signed_volume(profile), 1.0)


def test_circle_and_cylinder_minimum_segments():
    assert generate(CircleShape(ring_segments=3)).vertex_count == 2 * 8 + 2
    assert generate(CylinderShape(ring_segments=3)).vertex_count == 2 * 6 + 2
    assert generate(CylinderShape(ring_segments=40)).vertex_count == 2 * 40 + 2


def test_cylinder_radius():
    profile = generate(CylinderShape(ring_segments=16))
    np.testing.assert_allclose(profile.outline_radii(), 0.5)


def test_regular_polygon_ignores_random_source():
    class Exploding(random.Random):
        def uniform(self, a, b):
            raise AssertionError("generator must not be used")

    profile = generate(PolygonShape(ring_segments=5, irregularity=0.0), Exploding())
    np.testing.assert_allclose(profile.outline_radii(), 0.5, rtol=0, atol=1e-15)
    # recentering only translates
    assert profile.fit == 1.0
    ring = profile.vertices[:5, [0, 2]] - np.asarray(profile.offset)
    np.testing.assert_allclose(np.hypot(ring[:, 0], ring[:, 1]), 0.5, atol=1e-15)


def test_polygon_jitter_is_seeded():
    shape = PolygonShape(ring_segments=9, irregularity=0.4)
    a = generate(shape, random.Random(42))
    b = generate(shape, random.Random(42))
    c = generate(shape, random.Random(43))
    np.testing.assert_array_equal(a.vertices, b.vertices)
    assert not np.array_equal(a.vertices, c.vertices)
    radii = a.outline_radii()
    assert np.all(radii >= 0.5 * 0.6 - 1e-12)
    assert np.all(radii <= 0.5 * 1.4 + 1e-12)
    assert not np.allclose(radii, 0.5)


def test_star_radii_alternate():
    profile = generate(StarShape(points=4, inner_radius=0.3))
    radii = profile.outline_radii()
    assert len(radii) == 8
    np.testing.assert_allclose(radii[0::2], 0.5)
    np.testing.assert_allclose(radii[1::2], 0.3)
    assert profile.vertex_count == 16


def test_shape_from_params_carries_only_its_knobs():
    p = ParameterSet(shape_kind=ShapeKind.STAR, star_point_count=7,
                     star_inner_radius_ratio=0.9, ring_segments=50)
    shape = shape_from_params(p)
    assert shape == StarShape(points=7, inner_radius=0.49)
    assert shape_from_params(ParameterSet(shape_kind=ShapeKind.BOX)) == BoxShape()
    rb = shape_from_params(ParameterSet(shape_kind='roundedBox', rounded_corner_radius=0.7))
    assert rb == RoundedBoxShape(radius=0.49, segments=2)


def test_unknown_variant_is_a_type_error():
    with pytest.raises(TypeError):
        generate("box")
    with pytest.raises(TypeError):
        vertex_count_for(object())


@pytest.mark.parametrize("seed", range(20))
def test_jittered_polygon_fits_unit_frame(seed):
    profile = generate(PolygonShape(ring_segments=6, irregularity=0.6), random.Random(seed))
    lo, hi = profile.bounding_box()
    extent = hi - lo
    assert extent[0] <= 1.0 + 1e-12 and extent[2] <= 1.0 + 1e-12
    assert math.isclose(lo[0] + hi[0], 0.0, abs_tol=1e-9)
    assert math.isclose(lo[2] + hi[2], 0.0, abs_tol=1e-9)
    if profile.fit < 1.0:
        assert math.isclose(max(extent[0], extent[2]), 1.0)
    # the shrink is uniform, so the outline keeps its proportions
    ring = profile.vertices[:6, [0, 2]] / profile.fit - np.asarray(profile.offset)
    np.testing.assert_allclose(ring, profile.outline, atol=1e-12)


def test_rounded_box_radius_stays_below_half():
    profile = generate(RoundedBoxShape(radius=0.5, segments=2))
    assert all(n == 2 for n in _edge_counts(profile).values())
    # flat faces keep a finite width
    top = profile.vertices[np.isclose(profile.vertices[:, 1], 0.5)]
    assert np.ptp(top[:, 0]) > 0.0
    assert _signed_volume(profile) > 0
