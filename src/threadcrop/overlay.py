"""Dimming mask and rule-of-thirds grid drawn over the crop viewport."""

from __future__ import annotations

from PySide6.QtCore import QLineF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen

from .config import (
    OVERLAY_BORDER_WIDTH,
    OVERLAY_DIM_OPACITY,
    OVERLAY_GRID_DIVISIONS,
    OVERLAY_GRID_OPACITY,
    OVERLAY_GRID_WIDTH,
)
from .crop.geometry import Point, Rect


def grid_lines(frame: Rect, divisions: int = OVERLAY_GRID_DIVISIONS) -> list[tuple[Point, Point]]:
    """Return the interior grid segments of *frame*, verticals first."""
    lines: list[tuple[Point, Point]] = []
    for index in range(1, divisions):
        x = frame.x + frame.width * index / divisions
        lines.append((Point(x, frame.y), Point(x, frame.bottom)))
    for index in range(1, divisions):
        y = frame.y + frame.height * index / divisions
        lines.append((Point(frame.x, y), Point(frame.right, y)))
    return lines


def _qrect(rect: Rect) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


def paint_crop_overlay(painter: QPainter, viewport: QRectF, frame: Rect) -> None:
    """Dim everything outside *frame*, then stroke its border and grid."""
    painter.save()
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)

    dim = QColor(0, 0, 0)
    dim.setAlphaF(OVERLAY_DIM_OPACITY)
    mask = QPainterPath()
    mask.setFillRule(Qt.FillRule.OddEvenFill)
    mask.addRect(viewport)
    mask.addRect(_qrect(frame))
    painter.fillPath(mask, dim)

    border_pen = QPen(QColor(255, 255, 255))
    border_pen.setWidthF(OVERLAY_BORDER_WIDTH)
    painter.setPen(border_pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawRect(_qrect(frame))

    grid_color = QColor(255, 255, 255)
    grid_color.setAlphaF(OVERLAY_GRID_OPACITY)
    grid_pen = QPen(grid_color)
    grid_pen.setWidthF(OVERLAY_GRID_WIDTH)
    painter.setPen(grid_pen)
    for start, end in grid_lines(frame):
        painter.drawLine(QLineF(start.x, start.y, end.x, end.y))

    painter.restore()


def render_overlay(size: QSize, frame: Rect) -> QImage:
    """Return a transparent image of *size* with the overlay painted on it."""
    image = QImage(size, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    painter = QPainter(image)
    try:
        paint_crop_overlay(painter, QRectF(0.0, 0.0, size.width(), size.height()), frame)
    finally:
        painter.end()
    return image


__all__ = ["grid_lines", "paint_crop_overlay", "render_overlay"]
