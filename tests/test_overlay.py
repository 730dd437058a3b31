import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for overlay tests", exc_type=ImportError)

from PySide6.QtCore import QSize

from threadcrop.crop.geometry import Point, Rect
from threadcrop.overlay import grid_lines, render_overlay

FRAME = Rect(20.0, 125.0, 350.0, 350.0)


def test_grid_lines_split_frame_into_thirds():
    lines = grid_lines(FRAME)
    assert len(lines) == 4
    verticals, horizontals = lines[:2], lines[2:]
    assert [start.x for start, _ in verticals] == pytest.approx([20.0 + 350 / 3, 20.0 + 700 / 3])
    assert all(start.y == 125.0 and end.y == 475.0 for start, end in verticals)
    assert [start.y for start, _ in horizontals] == pytest.approx([125.0 + 350 / 3, 125.0 + 700 / 3])
    assert horizontals[0][0] == Point(20.0, horizontals[0][0].y)
    assert horizontals[0][1].x == 370.0


def test_grid_lines_with_custom_divisions():
    assert len(grid_lines(FRAME, divisions=4)) == 6
    assert grid_lines(FRAME, divisions=1) == []


def test_overlay_dims_outside_and_leaves_frame_clear(qapp):
    image = render_overlay(QSize(390, 600), FRAME)
    assert image.size() == QSize(390, 600)

    outside = image.pixelColor(5, 5)
    assert outside.alpha() == pytest.approx(153, abs=2)
    assert outside.red() == 0

    inside = image.pixelColor(100, 200)
    assert inside.alpha() == 0

    # Aliased 1px stroke lands on one row next to the top edge.
    border = [image.pixelColor(195, y) for y in (124, 125, 126)]
    assert any(color.red() > 200 and color.alpha() > 200 for color in border)
