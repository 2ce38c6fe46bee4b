"""Easing curves used to bias the twist and scale sweeps of a tower.

Every curve maps a normalized position ``t`` in ``[0, 1]`` onto an eased
position in the same interval.  Unknown curve names quietly fall back to
:data:`CurveKind.LINEAR`; a typo in a preset should still produce a tower.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Union


class CurveKind(str, Enum):
    LINEAR = "linear"
    EASE_IN = "easeIn"
    EASE_OUT = "easeOut"
    EASE_IN_OUT = "easeInOut"


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return 1.0 - (1.0 - t) * (1.0 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0


CURVES: Dict[CurveKind, Callable[[float], float]] = {
    CurveKind.LINEAR: linear,
    CurveKind.EASE_IN: ease_in,
    CurveKind.EASE_OUT: ease_out,
    CurveKind.EASE_IN_OUT: ease_in_out,
}


def curve_kind(value: Union[CurveKind, str, None]) -> CurveKind:
    """Resolve ``value`` to a :class:`CurveKind`, defaulting to linear.

    Accepts enum members, their values (``"easeInOut"``) and their names
    in any case (``"EASE_IN_OUT"``).
    """

    if isinstance(value, CurveKind):
        return value
    if isinstance(value, str):
        try:
            return CurveKind(value)
        except ValueError:
            pass
        key = value.strip().upper().replace("-", "_")
        if key in CurveKind.__members__:
            return CurveKind[key]
        # camelCase spelled in lower case, e.g. "easeinout"
        for kind in CurveKind:
            if kind.value.lower() == value.strip().lower():
                return kind
    return CurveKind.LINEAR


def get_curve(kind: Union[CurveKind, str, None]) -> Callable[[float], float]:
    return CURVES[curve_kind(kind)]


def evaluate(kind: Union[CurveKind, str, None], t: float) -> float:
    """Return the eased value of ``t`` for the curve named by ``kind``."""

    return get_curve(kind)(t)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


__all__ = [
    "CurveKind",
    "CURVES",
    "curve_kind",
    "get_curve",
    "evaluate",
    "lerp",
    "linear",
    "ease_in",
    "ease_out",
    "ease_in_out",
]
