"""Tests for the snap-back animator."""

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for animator tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test utilities unavailable", exc_type=ImportError)

from PySide6.QtTest import QTest

from threadcrop.crop.animator import SettleAnimator, ease_out_cubic
from threadcrop.crop.geometry import Point


@pytest.fixture
def recorder():
    class Recorder:
        def __init__(self):
            self.frames = []
            self.completed = 0

        def on_frame(self, scale, offset):
            self.frames.append((scale, offset))

        def on_complete(self):
            self.completed += 1

    return Recorder()


def _animator(recorder) -> SettleAnimator:
    return SettleAnimator(
        on_animation_frame=recorder.on_frame,
        on_animation_complete=recorder.on_complete,
    )


def test_ease_out_cubic_endpoints():
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(1.0) == 1.0
    assert ease_out_cubic(0.5) == pytest.approx(0.875)


def test_zero_duration_completes_synchronously(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.0, 2.0, Point(), Point(10.0, 0.0), duration=0.0)
    assert not animator.is_animating()
    assert recorder.frames == [(2.0, Point(10.0, 0.0))]
    assert recorder.completed == 1


def test_unchanged_target_completes_synchronously(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.5, 1.5, Point(3.0, 4.0), Point(3.0, 4.0))
    assert not animator.is_animating()
    assert recorder.completed == 1


def test_frame_at_interpolates_with_easing(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.0, 3.0, Point(0.0, 0.0), Point(100.0, -40.0), duration=10.0)
    assert animator.is_animating()

    assert animator.frame_at(0.0) == (1.0, Point(0.0, 0.0))
    scale, offset = animator.frame_at(0.5)
    assert scale == pytest.approx(2.75)
    assert offset.x == pytest.approx(87.5)
    assert offset.y == pytest.approx(-35.0)
    assert animator.frame_at(2.0) == animator.frame_at(1.0)
    animator.stop_animation()


def test_finish_jumps_to_target(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.0, 2.0, Point(), Point(5.0, 5.0), duration=10.0)
    animator.finish_animation()
    assert not animator.is_animating()
    assert recorder.frames[-1] == (2.0, Point(5.0, 5.0))
    assert recorder.completed == 1


def test_stop_leaves_animation_incomplete(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.0, 2.0, Point(), Point(5.0, 5.0), duration=10.0)
    animator.stop_animation()
    assert not animator.is_animating()
    assert recorder.completed == 0
    animator.finish_animation()
    assert recorder.completed == 0


def test_timer_drives_animation_to_completion(qapp, recorder):
    animator = _animator(recorder)
    animator.start_animation(1.0, 2.0, Point(), Point(20.0, 0.0), duration=0.05)
    QTest.qWait(400)
    assert not animator.is_animating()
    assert recorder.completed == 1
    assert recorder.frames[-1] == (2.0, Point(20.0, 0.0))
