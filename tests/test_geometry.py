import math

import numpy as np
import pytest

from phantom.geometry import (
    BoundingBox,
    Ellipse,
    EllipseOnCanvas,
    Rectangle,
    RectangleOnCanvas,
    canvas_frame,
)


def test_canvas_frame_uses_smaller_dimension():
    assert canvas_frame(256, 320) == (128.0, 128.0, 160.0)
    assert canvas_frame(320, 256) == (128.0, 160.0, 128.0)
    assert canvas_frame(0, 10) == (0.0, 0.0, 5.0)


def test_bounding_box_from_tuple_roundtrip():
    bbox = BoundingBox.from_tuple((1, 5, 2, 7))
    assert bbox == BoundingBox(1, 5, 2, 7)
    assert bbox.as_tuple() == (1, 5, 2, 7)
    assert bbox != BoundingBox(1, 5, 2, 8)


def test_bounding_box_from_extent_floors_ceils_and_clamps():
    assert BoundingBox.from_extent(1.2, 3.1, 0.5, 2.0, 10, 10) == BoundingBox(1, 4, 0, 2)
    assert BoundingBox.from_extent(-4.0, 25.0, -1e300, 1e300, 10, 20) == BoundingBox(0, 9, 0, 19)
    assert BoundingBox.from_extent(-np.inf, np.inf, np.nan, 3.0, 10, 20) == BoundingBox(0, 9, 0, 3)
    # Entirely right of the canvas collapses onto the last column
    assert BoundingBox.from_extent(12.0, 14.0, 1.0, 2.0, 10, 10) == BoundingBox(9, 9, 1, 2)


def test_bounding_box_grid_runs_top_down():
    X, Y = BoundingBox(2, 4, 1, 2).grid()
    assert X.shape == (2, 3)
    np.testing.assert_array_equal(X[0], [2.0, 3.0, 4.0])
    np.testing.assert_array_equal(Y[:, 0], [2.0, 1.0])


def test_ellipse_on_canvas_precomputes_scaled_values():
    e = Ellipse(0.1, -0.4, 0.6, 0.2, 20.0).on_canvas(100, 50)
    scale = 25.0
    assert isinstance(e, EllipseOnCanvas)
    assert e.center_x == pytest.approx(0.1 * scale + 50.0)
    assert e.center_y == pytest.approx(-0.4 * scale + 25.0)
    assert e.major_axis_squared == pytest.approx((0.6 * scale) ** 2)
    assert e.minor_axis_squared == pytest.approx((0.2 * scale) ** 2)
    assert e.theta_sin == pytest.approx(math.sin(math.radians(20.0)))
    assert e.theta_cos == pytest.approx(math.cos(math.radians(20.0)))


def test_ellipse_bounding_box_matches_rotated_extent():
    theta = math.radians(30.0)
    a, b = 0.5, 0.2
    halfwidth = math.sqrt((a * math.cos(theta)) ** 2 + (b * math.cos(theta + math.pi / 2)) ** 2)
    halfheight = math.sqrt((a * math.sin(theta)) ** 2 + (b * math.sin(theta + math.pi / 2)) ** 2)

    bbox = Ellipse(0.0, 0.0, a, b, 30.0).on_canvas(200, 200).bounding_box()
    assert bbox == BoundingBox(
        math.floor(100 - halfwidth * 100),
        math.ceil(100 + halfwidth * 100),
        math.floor(100 - halfheight * 100),
        math.ceil(100 + halfheight * 100),
    )


def test_ellipse_inside_is_boundary_inclusive():
    # Circle of radius 2 pixels around (4, 4)
    e = Ellipse(0.0, 0.0, 0.5, 0.5, 0.0).on_canvas(8, 8)
    assert e.inside(4.0, 4.0)
    assert e.inside(6.0, 4.0)
    assert e.inside(4.0, 2.0)
    assert not e.inside(6.0, 5.0)
    assert not e.inside(7.0, 4.0)
    assert isinstance(e.inside(4.0, 4.0), bool)


def test_ellipse_inside_accepts_arrays():
    e = Ellipse(0.0, 0.0, 0.5, 0.25, 0.0).on_canvas(8, 8)
    mask = e.inside(np.array([4.0, 6.0, 4.0]), np.array([4.0, 4.0, 2.5]))
    np.testing.assert_array_equal(mask, [True, True, False])


def test_degenerate_ellipse_contains_nothing():
    e = Ellipse(0.0, 0.0, 0.0, 0.0, 0.0).on_canvas(8, 8)
    assert not e.inside(4.0, 4.0)
    assert not e.inside(5.0, 4.0)
    X, Y = e.bounding_box().grid()
    assert not e.inside(X, Y).any()


@pytest.mark.parametrize(
    "kind", [Ellipse(0.0, 0.0, -0.5, 0.5, 0.0), Rectangle(0.0, 0.0, 0.5, -0.5, 0.0)]
)
def test_negative_sizes_contain_nothing(kind):
    shape = kind.on_canvas(20, 20)
    assert shape.empty
    assert not shape.inside(10.0, 10.0)
    X, Y = shape.bounding_box().grid()
    assert not shape.inside(X, Y).any()


def test_zero_width_rectangle_contains_nothing():
    r = Rectangle(0.0, 0.0, 0.0, 1.0, 0.0).on_canvas(20, 20)
    assert r.empty
    # The remaining edge runs through the center
    assert not r.inside(10.0, 10.0)
    assert not r.inside(np.array([10.0, 10.0]), np.array([5.0, 15.0])).any()


def test_ellipse_half_rotation_symmetry(rng):
    points = rng.uniform(0.0, 64.0, size=(2, 2000))
    for _ in range(20):
        cx, cy = rng.uniform(-0.8, 0.8, size=2)
        a, b = rng.uniform(0.05, 0.9, size=2)
        theta = rng.uniform(-360.0, 360.0)
        first = Ellipse(cx, cy, a, b, theta).on_canvas(64, 64)
        second = Ellipse(cx, cy, a, b, theta + 180.0).on_canvas(64, 64)
        np.testing.assert_array_equal(first.inside(*points), second.inside(*points))


def test_rectangle_corners_are_consecutive():
    a, b, c, d = Rectangle(0.5, 0.25, 0.4, 0.2, 0.0).corners()
    assert a == pytest.approx((0.3, 0.15))
    assert b == pytest.approx((0.3, 0.35))
    assert c == pytest.approx((0.7, 0.35))
    assert d == pytest.approx((0.7, 0.15))


def test_rectangle_on_canvas_edges():
    r = Rectangle(0.0, 0.0, 0.5, 1.0, 0.0).on_canvas(20, 20)
    assert isinstance(r, RectangleOnCanvas)
    assert r.a == pytest.approx((7.5, 5.0))
    assert r.b == pytest.approx((7.5, 15.0))
    assert r.ab == pytest.approx((0.0, 10.0))
    assert r.bc == pytest.approx((5.0, 0.0))
    assert r.abab == pytest.approx(100.0)
    assert r.bcbc == pytest.approx(25.0)
    assert r.bounding_box() == BoundingBox(7, 13, 5, 15)


def test_rectangle_inside_is_boundary_inclusive():
    r = Rectangle(0.0, 0.0, 0.5, 1.0, 0.0).on_canvas(20, 20)
    assert r.inside(10.0, 10.0)
    assert r.inside(7.5, 5.0)
    assert r.inside(12.5, 15.0)
    assert not r.inside(7.0, 10.0)
    assert not r.inside(10.0, 15.5)


def test_rectangle_rotates_about_origin():
    # A quarter turn moves the rectangle from the right half to the top half
    r = Rectangle(0.5, 0.0, 0.2, 0.2, 90.0).on_canvas(100, 100)
    assert r.inside(50.0, 75.0)
    assert not r.inside(75.0, 50.0)


def test_rotated_rectangle_contains_its_center():
    r = Rectangle(0.0, 0.0, 0.6, 0.2, 33.0).on_canvas(100, 100)
    assert r.inside(50.0, 50.0)
    # Long side now points at 33 degrees
    t = math.radians(33.0)
    assert r.inside(50.0 + 12.0 * math.cos(t), 50.0 + 12.0 * math.sin(t))
    assert not r.inside(50.0 - 12.0 * math.sin(t), 50.0 + 12.0 * math.cos(t))


@pytest.mark.parametrize("kind", [Ellipse, Rectangle])
def test_bounding_box_always_inside_canvas(rng, kind):
    for _ in range(500):
        nx, ny = (int(n) for n in rng.integers(1, 300, size=2))
        cx, cy = rng.uniform(-5.0, 5.0, size=2)
        sx, sy = rng.uniform(-3.0, 3.0, size=2)
        theta = rng.uniform(-720.0, 720.0)
        bbox = kind(cx, cy, sx, sy, theta).on_canvas(nx, ny).bounding_box()
        assert 0 <= bbox.x_low <= bbox.x_high < nx
        assert 0 <= bbox.y_low <= bbox.y_high < ny


@pytest.mark.parametrize("kind", [Ellipse, Rectangle])
@pytest.mark.parametrize("value", [1e6, -1e6, 1e200, -1e200])
def test_bounding_box_extreme_values(kind, value):
    bbox = kind(value, -value, abs(value), abs(value), 45.0).on_canvas(64, 32).bounding_box()
    assert 0 <= bbox.x_low <= bbox.x_high < 64
    assert 0 <= bbox.y_low <= bbox.y_high < 32
