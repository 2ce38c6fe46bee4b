import math

import pytest

from towergen.curves import CurveKind, curve_kind, evaluate, get_curve, lerp


@pytest.mark.parametrize("kind", list(CurveKind))
def test_curves_fix_endpoints(kind):
    assert math.isclose(evaluate(kind, 0.0), 0.0, abs_tol=1e-12)
    assert math.isclose(evaluate(kind, 1.0), 1.0, abs_tol=1e-12)


def test_curve_formulas():
    assert evaluate(CurveKind.LINEAR, 0.3) == 0.3
    assert math.isclose(evaluate(CurveKind.EASE_IN, 0.5), 0.25)
    assert math.isclose(evaluate(CurveKind.EASE_OUT, 0.5), 0.75)
    assert math.isclose(evaluate(CurveKind.EASE_IN_OUT, 0.25), 0.125)
    assert math.isclose(evaluate(CurveKind.EASE_IN_OUT, 0.75), 0.875)
    assert math.isclose(evaluate(CurveKind.EASE_IN_OUT, 0.5), 0.5)


def test_ease_in_out_is_monotonic():
    samples = [evaluate("easeInOut", i / 100) for i in range(101)]
    assert all(b >= a for a, b in zip(samples, samples[1:]))


def test_curve_kind_accepts_values_and_names():
    assert curve_kind("easeInOut") is CurveKind.EASE_IN_OUT
    assert curve_kind("EASE_OUT") is CurveKind.EASE_OUT
    assert curve_kind("easein") is CurveKind.EASE_IN
    assert curve_kind(CurveKind.LINEAR) is CurveKind.LINEAR


def test_unknown_curve_falls_back_to_linear():
    assert curve_kind("bounce") is CurveKind.LINEAR
    assert curve_kind(None) is CurveKind.LINEAR
    assert evaluate("bounce", 0.37) == 0.37
    assert get_curve(42)(0.8) == 0.8


def test_lerp():
    assert lerp(0.0, 90.0, 0.5) == 45.0
    assert lerp(1.0, 0.5, 1.0) == 0.5
