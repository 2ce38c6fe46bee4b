"""Common triangle helpers shared by the profile builders and mesh code."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

Vec3 = Tuple[float, float, float]
Face = Tuple[int, int, int]

epsilon = 1e-9


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point-like sequence as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = _cross(_sub(v1, v0), _sub(v2, v0))
    length = math.sqrt(_dot(n, n))
    if length <= epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Vec3, v1: Vec3, v2: Vec3) -> float:
    """Return the area of a triangle."""

    n = _cross(_sub(v1, v0), _sub(v2, v0))
    return 0.5 * math.sqrt(_dot(n, n))


def triangle_is_degenerate(v0: Vec3, v1: Vec3, v2: Vec3, tol: float = epsilon) -> bool:
    """Return ``True`` if a triangle collapses under the given tolerance."""

    return triangle_area(v0, v1, v2) <= tol


def triangle_centroid(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3:
    """Return the centroid of a triangle."""

    return (
        (v0[0] + v1[0] + v2[0]) / 3.0,
        (v0[1] + v1[1] + v2[1]) / 3.0,
        (v0[2] + v1[2] + v2[2]) / 3.0,
    )


def orient_face(vertices: Sequence[Vec3], face: Face, preferred_normal: Vec3) -> Face:
    """Swap the winding of ``face`` if its normal opposes ``preferred_normal``."""

    i, j, k = face
    current = triangle_normal(vertices[i], vertices[j], vertices[k])
    if current is not None and _dot(current, preferred_normal) < 0:
        return (i, k, j)
    return (i, j, k)


def outward_faces(vertices: Sequence[Vec3], faces: Iterable[Face]) -> List[Face]:
    """Drop zero-area faces and wind the rest away from the origin.

    Valid for solids that are star-shaped about the origin: every face
    plane then has the origin on its inner side, so the outward normal
    points along the face centroid.
    """

    result: List[Face] = []
    for face in faces:
        v0, v1, v2 = (vertices[face[0]], vertices[face[1]], vertices[face[2]])
        if triangle_is_degenerate(v0, v1, v2):
            continue
        result.append(orient_face(vertices, face, triangle_centroid(v0, v1, v2)))
    return result


__all__ = [
    "Vec3",
    "Face",
    "epsilon",
    "to_vec3",
    "triangle_normal",
    "triangle_area",
    "triangle_is_degenerate",
    "triangle_centroid",
    "orient_face",
    "outward_faces",
]
