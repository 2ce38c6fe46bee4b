"""Indexed triangle meshes and the buffers handed to a renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from towergen.geometry_utils import Vec3, to_vec3, triangle_normal

TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


@dataclass(frozen=True)
class MeshBuffers:
    """Flat, fixed-stride arrays: three floats per vertex, three indices per triangle."""

    positions: np.ndarray
    colors: np.ndarray
    normals: np.ndarray
    indices: np.ndarray

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3


@dataclass(frozen=True, eq=False)
class Mesh:
    """A merged, colored tower mesh.

    ``positions``, ``colors`` and ``normals`` are ``(V, 3)`` float arrays,
    ``indices`` is an ``(F, 3)`` integer array.  Vertices are laid out
    segment by segment, ``vertices_per_segment`` each.
    """

    positions: np.ndarray
    colors: np.ndarray
    normals: np.ndarray
    indices: np.ndarray
    segment_count: int = 1
    vertices_per_segment: int = 0

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0])

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.vertex_count == 0:
            zero = np.zeros(3)
            return zero, zero
        return self.positions.min(axis=0), self.positions.max(axis=0)

    def segment_slice(self, index: int) -> slice:
        """Vertex range belonging to segment ``index``."""
        if index < 0 or index >= self.segment_count:
            raise IndexError(f"segment index out of range: {index}")
        start = index * self.vertices_per_segment
        return slice(start, start + self.vertices_per_segment)

    def triangles(self) -> Iterator[TriTuple]:
        """Yield triangles as ``(normal, v0, v1, v2)``.

        Faces with degenerate geometry (zero area) are skipped silently.
        """
        for i0, i1, i2 in self.indices:
            v0 = to_vec3(self.positions[i0])
            v1 = to_vec3(self.positions[i1])
            v2 = to_vec3(self.positions[i2])
            n = triangle_normal(v0, v1, v2)
            if n is None:
                continue
            yield n, v0, v1, v2

    def surface_area(self) -> float:
        v0 = self.positions[self.indices[:, 0]]
        v1 = self.positions[self.indices[:, 1]]
        v2 = self.positions[self.indices[:, 2]]
        return float(0.5 * np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1).sum())

    def buffers(self, dtype=np.float32) -> MeshBuffers:
        """Flatten into renderer-ready buffers (``uint32`` indices)."""
        return MeshBuffers(
            positions=np.ascontiguousarray(self.positions, dtype=dtype).ravel(),
            colors=np.ascontiguousarray(self.colors, dtype=dtype).ravel(),
            normals=np.ascontiguousarray(self.normals, dtype=dtype).ravel(),
            indices=np.ascontiguousarray(self.indices, dtype=np.uint32).ravel(),
        )


def compute_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Accumulate area-weighted face normals into unit per-vertex normals.

    Vertices that belong to no (or only degenerate) faces get a zero normal.
    """
    positions = np.asarray(positions, dtype=np.float64)
    normals = np.zeros_like(positions)
    if len(indices) == 0:
        return normals
    v0 = positions[indices[:, 0]]
    v1 = positions[indices[:, 1]]
    v2 = positions[indices[:, 2]]
    fn = np.cross(v1 - v0, v2 - v0)

    for i in range(3):
        np.add.at(normals, indices[:, i], fn)

    nlen = np.linalg.norm(normals, axis=1, keepdims=True)
    nlen = np.where(nlen == 0, 1.0, nlen)
    return normals / nlen


def merge_meshes(parts: Sequence[Tuple[np.ndarray, np.ndarray, np.ndarray]],
                 normals: bool = True,
                 segment_count: Optional[int] = None) -> Mesh:
    """Concatenate ``(positions, colors, indices)`` parts into one mesh.

    Indices are offset per part.  When ``normals`` is true the vertex
    normals are recomputed over the merged topology; original per-part
    face normals are not kept.
    """
    if not parts:
        empty = np.zeros((0, 3))
        return Mesh(empty, empty.copy(), empty.copy(), np.zeros((0, 3), dtype=np.int64),
                    segment_count=0, vertices_per_segment=0)

    all_p, all_c, all_i = [], [], []
    offset = 0
    for pos, col, idx in parts:
        all_p.append(np.asarray(pos, dtype=np.float64))
        all_c.append(np.asarray(col, dtype=np.float64))
        all_i.append(np.asarray(idx, dtype=np.int64) + offset)
        offset += len(pos)

    positions = np.concatenate(all_p, axis=0)
    colors = np.concatenate(all_c, axis=0)
    indices = np.concatenate(all_i, axis=0)
    if normals:
        vnormals = compute_normals(positions, indices)
    else:
        vnormals = np.zeros_like(positions)

    sizes = {len(p) for p in all_p}
    per_segment = sizes.pop() if len(sizes) == 1 else 0
    return Mesh(positions, colors, vnormals, indices,
                segment_count=len(parts) if segment_count is None else segment_count,
                vertices_per_segment=per_segment)


__all__ = ["Mesh", "MeshBuffers", "compute_normals", "merge_meshes"]
