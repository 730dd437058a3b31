"""Tests for mapping the crop frame onto source pixels."""

import numpy as np
import pytest

from threadcrop.crop.frame import CropFramePolicy, CropLayout
from threadcrop.crop.geometry import Point, Size
from threadcrop.crop.pixel_mapper import (
    PixelRect,
    frame_inside_image,
    map_crop_frame,
    transform_for_source_rect,
    viewport_to_source_matrix,
)
from threadcrop.crop.reducer import InteractionState
from threadcrop.errors import DegenerateGeometryError


def _assert_rect_close(actual: PixelRect, expected: PixelRect, rel: float = 1e-3) -> None:
    assert (actual.x, actual.y, actual.width, actual.height) == pytest.approx(
        (expected.x, expected.y, expected.width, expected.height), rel=rel, abs=1e-6
    )


def test_initial_frame_maps_to_central_square(wardrobe_layout):
    state = InteractionState.at(wardrobe_layout.coverage_scale)
    mapping = map_crop_frame(wardrobe_layout, state)
    _assert_rect_close(mapping.source_rect, PixelRect(500.0, 0.0, 2000.0, 2000.0))
    assert mapping.normalised.left == pytest.approx(1 / 6)
    assert mapping.normalised.right == pytest.approx(5 / 6)
    assert mapping.normalised.height == pytest.approx(1.0)
    assert mapping.normalised.is_inside_unit(tolerance=1e-9)


def test_zoom_and_pan_move_the_sampled_window(wardrobe_layout):
    scale = wardrobe_layout.coverage_scale * 2.0
    mapping = map_crop_frame(wardrobe_layout, InteractionState.at(scale, Point(-50.0, 0.0)))
    # Twice the zoom halves the sampled side; panning left reveals pixels to the right.
    assert mapping.source_rect.width == pytest.approx(1000.0)
    assert mapping.source_rect.height == pytest.approx(1000.0)
    assert mapping.source_rect.x > 1000.0
    assert mapping.source_rect.y == pytest.approx(500.0)


def test_matrix_maps_image_corners_to_source_corners(wardrobe_layout):
    scale = wardrobe_layout.coverage_scale
    matrix = viewport_to_source_matrix(wardrobe_layout, scale, Point())
    placed_left = 195.0 - 390.0 * scale / 2
    placed_top = 300.0 - 260.0 * scale / 2
    corner = matrix @ np.array([placed_left, placed_top, 1.0])
    assert corner[:2] == pytest.approx([0.0, 0.0], abs=1e-6)


def test_matrix_rejects_non_positive_scale(wardrobe_layout):
    with pytest.raises(DegenerateGeometryError):
        viewport_to_source_matrix(wardrobe_layout, 0.0, Point())


@pytest.mark.parametrize(
    "rect",
    [
        PixelRect(500.0, 0.0, 2000.0, 2000.0),
        PixelRect(0.0, 0.0, 800.0, 800.0),
        PixelRect(1234.5, 678.25, 640.0, 640.0),
        PixelRect(2600.0, 1600.0, 400.0, 400.0),
    ],
)
def test_source_rect_round_trips_through_synthesised_transform(wardrobe_layout, rect):
    state = transform_for_source_rect(wardrobe_layout, rect)
    _assert_rect_close(map_crop_frame(wardrobe_layout, state).source_rect, rect)


def test_round_trip_in_portrait_source():
    layout = CropLayout.build(Size(2000, 3000), Size(390, 600), CropFramePolicy())
    rect = PixelRect(300.0, 900.0, 1200.0, 1200.0)
    state = transform_for_source_rect(layout, rect)
    _assert_rect_close(map_crop_frame(layout, state).source_rect, rect)


def test_transform_rejects_empty_rect(wardrobe_layout):
    with pytest.raises(DegenerateGeometryError):
        transform_for_source_rect(wardrobe_layout, PixelRect(10.0, 10.0, 0.0, 0.0))


def test_frame_inside_image_detects_out_of_bounds_pan(wardrobe_layout):
    scale = wardrobe_layout.coverage_scale
    assert frame_inside_image(wardrobe_layout, InteractionState.at(scale))
    assert not frame_inside_image(wardrobe_layout, InteractionState.at(scale, Point(120.0, 0.0)))
    assert not frame_inside_image(wardrobe_layout, InteractionState.at(1.0))


def test_pixel_rect_clamped_to_bounds():
    rect = PixelRect(-10.0, 50.0, 120.0, 80.0).clamped(Size(100, 100))
    assert rect == PixelRect(0.0, 50.0, 100.0, 50.0)
    assert rect.as_box() == (0.0, 50.0, 100.0, 100.0)
