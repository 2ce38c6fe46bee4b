"""Vertical color gradients for towers.

Colors are plain ``(r, g, b)`` float tuples with channels in ``[0, 1]``.
Two granularities are provided: one color per segment
(:meth:`ColorGradient.segment_colors`), used while segments stay separate
instances, and one color per vertex (:meth:`ColorGradient.vertex_colors`),
used whenever segments are merged into a single mesh so that the gradient
stays continuous across the seams.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]
ColorLike = Union[str, int, Sequence[float]]


def _clamp01(x: float) -> float:
    return min(1.0, max(0.0, float(x)))


def parse_color(value: ColorLike, default: Optional[RGB] = None) -> RGB:
    """Convert ``value`` into an RGB float triple.

    Accepted forms are ``"#rgb"``, ``"#rrggbb"``, ``"0xrrggbb"``, a packed
    integer ``0xrrggbb`` and any three-element sequence of numbers (channels
    are clamped to ``[0, 1]``).  If ``value`` cannot be interpreted and a
    ``default`` is given, the default is returned; otherwise ``ValueError``
    is raised.
    """

    try:
        if isinstance(value, str):
            text = value.strip().lower()
            if text.startswith("#"):
                text = text[1:]
            elif text.startswith("0x"):
                text = text[2:]
            if len(text) == 3:
                text = "".join(c * 2 for c in text)
            if len(text) != 6:
                raise ValueError(f"bad color string: {value!r}")
            packed = int(text, 16)
            return _unpack(packed)
        if isinstance(value, bool):
            raise ValueError(f"bad color value: {value!r}")
        if isinstance(value, int):
            if not 0 <= value <= 0xFFFFFF:
                raise ValueError(f"packed color out of range: {value!r}")
            return _unpack(value)
        channels = [float(c) for c in value]
        if len(channels) != 3:
            raise ValueError(f"color needs three channels: {value!r}")
        return (_clamp01(channels[0]), _clamp01(channels[1]), _clamp01(channels[2]))
    except (TypeError, ValueError):
        if default is None:
            raise
        logger.warning("Could not parse color %r, using %s", value, to_hex(default))
        return default


def _unpack(packed: int) -> RGB:
    return (((packed >> 16) & 0xFF) / 255.0,
            ((packed >> 8) & 0xFF) / 255.0,
            (packed & 0xFF) / 255.0)


def to_hex(color: RGB) -> str:
    """Format an RGB float triple as ``#rrggbb``."""

    return "#" + "".join(f"{int(round(_clamp01(c) * 255)):02x}" for c in color)


def lerp_color(a: RGB, b: RGB, t: float) -> RGB:
    return (a[0] + (b[0] - a[0]) * t,
            a[1] + (b[1] - a[1]) * t,
            a[2] + (b[2] - a[2]) * t)


@dataclass(frozen=True)
class ColorGradient:
    """Linear gradient between a bottom and a top color."""

    bottom: RGB
    top: RGB

    def color_at(self, normalized_height: float) -> RGB:
        """Color at ``normalized_height``, clamped to ``[0, 1]``."""

        return lerp_color(self.bottom, self.top, _clamp01(normalized_height))

    def segment_colors(self, positions: Iterable[float]) -> np.ndarray:
        """One color per segment from each segment's normalized position."""

        ts = np.clip(np.fromiter(positions, dtype=np.float64), 0.0, 1.0)
        return self._interpolate(ts)

    def vertex_colors(self, heights: np.ndarray, lo: float, hi: float) -> np.ndarray:
        """One color per vertex from absolute ``heights`` over ``[lo, hi]``.

        A zero-height span maps every vertex to the bottom color.
        """

        heights = np.asarray(heights, dtype=np.float64)
        span = hi - lo
        if span <= 0.0:
            ts = np.zeros_like(heights)
        else:
            ts = np.clip((heights - lo) / span, 0.0, 1.0)
        return self._interpolate(ts)

    def _interpolate(self, ts: np.ndarray) -> np.ndarray:
        bottom = np.asarray(self.bottom, dtype=np.float64)
        top = np.asarray(self.top, dtype=np.float64)
        return bottom[np.newaxis, :] + (top - bottom)[np.newaxis, :] * ts[:, np.newaxis]


__all__ = [
    "RGB",
    "ColorGradient",
    "parse_color",
    "to_hex",
    "lerp_color",
]
