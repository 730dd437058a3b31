"""Tests for the stateless crop geometry helpers."""

import math

import pytest

from threadcrop.crop.geometry import (
    Point,
    Rect,
    Size,
    clamp_offset,
    clamp_scale,
    clamp_state,
    fit,
    image_rect,
    max_offset,
    min_coverage_scale,
)
from threadcrop.errors import DegenerateGeometryError, GeometryError


def test_fit_wide_source_is_width_constrained():
    rendered = fit(Size(3000, 2000), Size(390, 600))
    assert rendered.width == pytest.approx(390.0)
    assert rendered.height == pytest.approx(260.0)


def test_fit_tall_source_is_height_constrained():
    rendered = fit(Size(1000, 3000), Size(390, 600))
    assert rendered.width == pytest.approx(200.0)
    assert rendered.height == pytest.approx(600.0)


def test_fit_square_source_in_landscape_viewport():
    rendered = fit(Size(500, 500), Size(800, 600))
    assert rendered == Size(600.0, 600.0)


def test_fit_never_exceeds_viewport():
    for source in (Size(3000, 2000), Size(2000, 3000), Size(1, 1000), Size(4000, 10)):
        rendered = fit(source, Size(390, 600))
        assert rendered.width <= 390.0 + 1e-9
        assert rendered.height <= 600.0 + 1e-9
        assert rendered.aspect == pytest.approx(source.aspect)


@pytest.mark.parametrize(
    "source, viewport",
    [
        (Size(0, 2000), Size(390, 600)),
        (Size(3000, 2000), Size(390, 0)),
        (Size(-1, 10), Size(390, 600)),
        (Size(math.nan, 10), Size(390, 600)),
    ],
)
def test_fit_rejects_zero_dimensions(source, viewport):
    with pytest.raises(DegenerateGeometryError):
        fit(source, viewport)


def test_degenerate_geometry_is_a_geometry_error():
    with pytest.raises(GeometryError):
        min_coverage_scale(Size(0, 0), Size(350, 350))


def test_min_coverage_scale_wardrobe_photo():
    scale = min_coverage_scale(Size(390, 260), Size(350, 350))
    assert scale == pytest.approx(350 / 260)
    assert scale == pytest.approx(1.346, abs=1e-3)


def test_max_offset_is_zero_when_image_matches_frame():
    limit = max_offset(Size(390, 260), 350 / 260, Size(350, 350))
    assert limit.x == pytest.approx(87.5)
    assert limit.y == pytest.approx(0.0, abs=1e-9)


def test_max_offset_never_negative():
    limit = max_offset(Size(390, 260), 0.5, Size(350, 350))
    assert limit == Point(0.0, 0.0)


def test_clamp_offset_bounds_each_axis():
    scale = 2.0
    bounded = clamp_offset(Size(390, 260), scale, Size(350, 350), Point(500.0, -500.0))
    assert bounded.x == pytest.approx((780 - 350) / 2)
    assert bounded.y == pytest.approx(-(520 - 350) / 2)


def test_clamp_offset_keeps_values_already_inside():
    raw = Point(10.0, -5.0)
    assert clamp_offset(Size(390, 260), 2.0, Size(350, 350), raw) == raw


def test_clamp_scale_raises_to_coverage_floor():
    assert clamp_scale(Size(390, 260), Size(350, 350), 0.2) == pytest.approx(350 / 260)


def test_clamp_scale_caps_at_max_zoom():
    floor = 350 / 260
    assert clamp_scale(Size(390, 260), Size(350, 350), 100.0, max_zoom=5.0) == pytest.approx(floor * 5)
    assert clamp_scale(Size(390, 260), Size(350, 350), 100.0, max_zoom=None) == 100.0


def test_clamp_scale_treats_non_finite_as_floor():
    assert clamp_scale(Size(390, 260), Size(350, 350), math.inf) == pytest.approx(350 / 260)
    assert clamp_scale(Size(390, 260), Size(350, 350), math.nan) == pytest.approx(350 / 260)


def test_clamp_state_reclamps_offset_against_new_scale():
    scale, offset = clamp_state(Size(390, 260), Size(350, 350), 0.5, Point(300.0, 40.0))
    assert scale == pytest.approx(350 / 260)
    assert offset.x == pytest.approx(87.5)
    assert offset.y == pytest.approx(0.0, abs=1e-9)


def test_image_rect_is_centred_on_viewport_plus_offset():
    placed = image_rect(Size(390, 600), Size(390, 260), 2.0, Point(10.0, -20.0))
    assert placed.center == Point(205.0, 280.0)
    assert placed.size == Size(780.0, 520.0)


def test_rect_contains_rect_with_tolerance():
    outer = Rect(0.0, 0.0, 100.0, 100.0)
    assert outer.contains_rect(Rect(0.0, 0.0, 100.0, 100.0))
    assert outer.contains_rect(Rect(-1e-9, 0.0, 100.0, 100.0))
    assert not outer.contains_rect(Rect(-1.0, 0.0, 100.0, 100.0))
