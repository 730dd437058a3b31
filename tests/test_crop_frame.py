"""Tests for crop frame policies and layout construction."""

import pytest

from threadcrop.crop.frame import CropFramePolicy, CropLayout, FrameSizing, resolve_crop_frame
from threadcrop.crop.geometry import Point, Size
from threadcrop.errors import DegenerateGeometryError


def test_default_policy_is_seventy_percent_of_shorter_side():
    frame = resolve_crop_frame(Size(390, 600), CropFramePolicy())
    assert frame.width == pytest.approx(273.0)
    assert frame.height == pytest.approx(273.0)
    assert frame.x == pytest.approx(58.5)
    assert frame.y == pytest.approx(163.5)


def test_margin_policy_subtracts_from_shorter_side():
    frame = resolve_crop_frame(Size(390, 600), CropFramePolicy.margin(40))
    assert (frame.x, frame.y, frame.width, frame.height) == pytest.approx((20.0, 125.0, 350.0, 350.0))


def test_frame_is_centred_in_landscape_viewport():
    frame = resolve_crop_frame(Size(1024, 768), CropFramePolicy.fraction(0.5))
    assert frame.center == Point(512.0, 384.0)
    assert frame.width == pytest.approx(384.0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("fraction:0.8", CropFramePolicy(FrameSizing.FRACTION, 0.8)),
        ("margin:40", CropFramePolicy(FrameSizing.MARGIN, 40.0)),
        ("MARGIN", CropFramePolicy(FrameSizing.MARGIN, 40.0)),
        ("fraction", CropFramePolicy(FrameSizing.FRACTION, 0.7)),
    ],
)
def test_parse_policy_strings(text, expected):
    assert CropFramePolicy.parse(text) == expected


@pytest.mark.parametrize("text", ["circle:3", "margin:wide"])
def test_parse_rejects_unknown_policies(text):
    with pytest.raises(ValueError):
        CropFramePolicy.parse(text)


def test_margin_larger_than_viewport_is_degenerate():
    with pytest.raises(DegenerateGeometryError):
        resolve_crop_frame(Size(30, 600), CropFramePolicy.margin(40))


def test_zero_viewport_is_degenerate():
    with pytest.raises(DegenerateGeometryError):
        resolve_crop_frame(Size(0, 600), CropFramePolicy())


def test_layout_bundles_rendered_size_and_coverage(wardrobe_layout):
    assert wardrobe_layout.rendered_size.width == pytest.approx(390.0)
    assert wardrobe_layout.rendered_size.height == pytest.approx(260.0)
    assert wardrobe_layout.frame.size == Size(350.0, 350.0)
    assert wardrobe_layout.coverage_scale == pytest.approx(350 / 260)


def test_layout_rejects_zero_sized_source():
    with pytest.raises(DegenerateGeometryError):
        CropLayout.build(Size(0, 0), Size(390, 600), CropFramePolicy())
