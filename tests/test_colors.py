import math

import numpy as np
import pytest

from towergen.colors import ColorGradient, lerp_color, parse_color, to_hex


def test_parse_hex_forms():
    assert parse_color("#ff0000") == (1.0, 0.0, 0.0)
    assert parse_color("0x0000ff") == (0.0, 0.0, 1.0)
    assert parse_color("#0f0") == (0.0, 1.0, 0.0)
    assert parse_color(0xFFFFFF) == (1.0, 1.0, 1.0)


def test_parse_sequence_clamps_channels():
    assert parse_color([1.5, -0.2, 0.5]) == (1.0, 0.0, 0.5)


def test_parse_bad_color():
    with pytest.raises(ValueError):
        parse_color("#12345")
    assert parse_color("not a color", default=(0.1, 0.2, 0.3)) == (0.1, 0.2, 0.3)
    assert parse_color([1, 2], default=(0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)


def test_to_hex_roundtrip():
    assert to_hex(parse_color("#f2a365")) == "#f2a365"


def test_color_at_clamps_height():
    grad = ColorGradient((1.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    assert grad.color_at(-1.0) == (1.0, 0.0, 0.0)
    assert grad.color_at(2.0) == (0.0, 0.0, 1.0)
    mid = grad.color_at(0.5)
    assert mid == (0.5, 0.0, 0.5)
    assert lerp_color((0, 0, 0), (1, 1, 1), 0.25) == (0.25, 0.25, 0.25)


def test_segment_colors():
    grad = ColorGradient((1.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    colors = grad.segment_colors([0.0, 0.5, 1.0])
    np.testing.assert_allclose(colors, [[1, 0, 0], [0.5, 0, 0.5], [0, 0, 1]])


def test_vertex_colors_span():
    grad = ColorGradient((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
    colors = grad.vertex_colors(np.array([-1.0, 0.0, 1.0, 5.0]), -1.0, 1.0)
    np.testing.assert_allclose(colors[:, 0], [0.0, 0.5, 1.0, 1.0])


def test_vertex_colors_zero_span_uses_bottom():
    grad = ColorGradient((0.2, 0.4, 0.6), (1.0, 1.0, 1.0))
    colors = grad.vertex_colors(np.array([3.0, 3.0]), 3.0, 3.0)
    np.testing.assert_allclose(colors, [[0.2, 0.4, 0.6]] * 2)


def test_gradient_never_overshoots():
    bottom = (0.9, 0.1, 0.4)
    top = (0.2, 0.8, 0.4)
    grad = ColorGradient(bottom, top)
    previous = grad.color_at(0.0)
    for i in range(1, 51):
        c = grad.color_at(i / 50)
        for ch in range(3):
            lo, hi = min(bottom[ch], top[ch]), max(bottom[ch], top[ch])
            assert lo - 1e-12 <= c[ch] <= hi + 1e-12
            step = c[ch] - previous[ch]
            direction = top[ch] - bottom[ch]
            assert step * direction >= -1e-12
        previous = c
    assert math.isclose(previous[0], top[0])
