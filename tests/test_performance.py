"""
Tests for render time tracking.
"""

from lottiekit.model.composition import Composition, Rect
from lottiekit.utils.performance import MeanCalculator, PerformanceTracker


class TestMeanCalculator:
    def test_mean(self):
        calculator = MeanCalculator()
        assert calculator.mean == 0.0
        for value in (1.0, 2.0, 6.0):
            calculator.add(value)
        assert calculator.mean == 3.0


class TestPerformanceTracker:
    """Test recording and listeners."""

    def test_disabled_by_default(self):
        tracker = PerformanceTracker()
        tracker.record_render_time("shape", 5.0)
        assert not tracker.enabled
        assert tracker.sorted_render_times() == []

    def test_sorted_slowest_first(self):
        tracker = PerformanceTracker()
        tracker.enabled = True
        tracker.record_render_time("fast", 1.0)
        tracker.record_render_time("slow", 8.0)
        tracker.record_render_time("slow", 4.0)
        assert tracker.sorted_render_times() == [("slow", 6.0), ("fast", 1.0)]

    def test_clear(self):
        tracker = PerformanceTracker()
        tracker.enabled = True
        tracker.record_render_time("layer", 1.0)
        tracker.clear_render_times()
        assert tracker.sorted_render_times() == []

    def test_frame_listener(self):
        tracker = PerformanceTracker()
        tracker.enabled = True
        frames = []
        tracker.add_frame_listener(frames.append)

        tracker.record_render_time("layer", 2.0)
        tracker.record_render_time("__container", 16.0)
        assert frames == [16.0]

        tracker.remove_frame_listener(frames.append)
        tracker.record_render_time("__container", 20.0)
        assert frames == [16.0]

    def test_failing_listener_does_not_stop_recording(self):
        tracker = PerformanceTracker()
        tracker.enabled = True

        def broken(millis):
            raise RuntimeError("boom")

        tracker.add_frame_listener(broken)
        tracker.record_render_time("__container", 10.0)
        assert tracker.sorted_render_times() == [("__container", 10.0)]


class TestCompositionTracking:
    def test_toggle(self):
        composition = Composition(Rect(0, 0, 10, 10), 0.0, 30.0, 30.0)
        assert not composition.performance_tracker.enabled
        composition.set_performance_tracking_enabled(True)
        assert composition.performance_tracker.enabled
