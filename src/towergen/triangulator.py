"""Cap triangulation for extruded tower profiles.

We delegate to ``mapbox-earcut`` (the fast ear clipping implementation
used by Mapbox GL) so that non-convex outlines such as stars get correct
caps.  The helper here takes one closed outline and returns index
triples into that outline; winding is left to the caller.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate profile caps"
    ) from exc


def triangulate_loop(outline: Sequence[Sequence[float]]) -> List[Tuple[int, int, int]]:
    """Return triangles covering the simple polygon ``outline``.

    ``outline`` is a sequence of XY-like points without a repeated
    closing point.  The returned triples index into ``outline``.
    Outlines with fewer than three points produce no triangles.
    """

    if len(outline) < 3:
        return []

    vertices = np.asarray([(float(p[0]), float(p[1])) for p in outline], dtype=np.float64)
    rings = np.asarray([len(vertices)], dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, rings)
    return [(int(indices[i]), int(indices[i + 1]), int(indices[i + 2]))
            for i in range(0, len(indices), 3)]


__all__ = ["triangulate_loop"]
