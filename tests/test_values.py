"""
Unit tests for keyframes and animatable values.
"""

import pytest

from lottiekit.animation import (
    AnimatableFloatValue,
    AnimatableIntegerValue,
    AnimatablePointValue,
    AnimatableSplitDimensionValue,
    AnimatableStepValue,
    Easing,
    Keyframe,
)
from lottiekit.animation.shape_data import GradientColor, ShapeData
from lottiekit.errors import InvalidFieldError
from lottiekit.parser.reader import JsonReader
from lottiekit.parser.values import (
    EXPRESSIONS_WARNING,
    ParseContext,
    parse_color_value,
    parse_float_value,
    parse_integer_value,
    parse_position_value,
    parse_shape_value,
)


def float_value(prop, context=None):
    return parse_float_value(JsonReader(prop), context or ParseContext())


class TestKeyframe:
    """Test single keyframe behavior."""

    def test_static_value(self):
        keyframe = Keyframe.static_value(5.0)
        assert keyframe.static
        assert keyframe.is_final
        assert keyframe.contains(-100.0)

    def test_easing_mode(self):
        assert Keyframe(0.0, 1.0, 0.0, 10.0).easing_mode is Easing.LINEAR
        assert Keyframe(0.0, 1.0, 0.0, 10.0, hold=True).easing_mode is Easing.HOLD
        bezier = Keyframe(0.0, 1.0, 0.0, 10.0, out_tangent=(0.4, 0.0), in_tangent=(0.6, 1.0))
        assert bezier.easing_mode is Easing.BEZIER

    def test_contains_is_half_open(self):
        keyframe = Keyframe(0.0, 1.0, 10.0, 20.0)
        assert keyframe.contains(10.0)
        assert keyframe.contains(19.99)
        assert not keyframe.contains(20.0)
        assert not keyframe.contains(9.99)

    def test_linear_progress(self):
        keyframe = Keyframe(0.0, 1.0, 10.0, 20.0)
        assert keyframe.linear_progress(15.0) == 0.5
        assert keyframe.linear_progress(0.0) == 0.0
        assert keyframe.linear_progress(30.0) == 1.0

    def test_hold_progress_is_zero(self):
        keyframe = Keyframe(0.0, 1.0, 0.0, 10.0, hold=True)
        assert keyframe.progress(9.0) == 0.0


class TestAnimatableValue:
    """Test evaluation of keyframe sequences."""

    def test_empty_keyframes_rejected(self):
        with pytest.raises(ValueError, match="no keyframes"):
            AnimatableFloatValue([])

    def test_static(self):
        value = AnimatableFloatValue.static(7.0)
        assert value.is_static
        assert value.value_at(-1000.0) == 7.0
        assert value.value_at(1000.0) == 7.0

    def test_linear_interpolation(self):
        value = float_value({"a": 1, "k": [{"t": 0, "s": [0]}, {"t": 10, "s": [100]}]})
        assert value.value_at(5) == pytest.approx(50.0)
        assert value.value_at(2.5) == pytest.approx(25.0)

    def test_keyframe_endpoints_exact(self):
        value = float_value({"a": 1, "k": [{"t": 0, "s": [0]}, {"t": 10, "s": [100]}]})
        assert value.value_at(0) == 0.0
        assert value.value_at(10) == 100.0

    def test_clamps_outside_range(self):
        """Test frames before the first or after the last keyframe clamp."""
        value = float_value({"a": 1, "k": [{"t": 5, "s": [10]}, {"t": 15, "s": [20]}]})
        assert value.value_at(-50) == 10.0
        assert value.value_at(500) == 20.0

    def test_bezier_easing(self):
        value = float_value({"a": 1, "k": [
            {"t": 0, "s": [0], "o": {"x": [0.42], "y": [0]}, "i": {"x": [0.58], "y": [1]}},
            {"t": 10, "s": [100]},
        ]})
        assert value.value_at(5) == pytest.approx(50.0, abs=0.05)
        assert value.value_at(2) < 20.0

    def test_hold_keyframe_freezes_start_value(self):
        value = float_value({"a": 1, "k": [
            {"t": 0, "s": [0], "h": 1},
            {"t": 10, "s": [100]},
        ]})
        assert value.value_at(9.9) == 0.0
        assert value.value_at(10) == 100.0

    def test_multiple_segments(self):
        value = float_value({"a": 1, "k": [
            {"t": 0, "s": [0]},
            {"t": 10, "s": [100]},
            {"t": 20, "s": [50]},
        ]})
        assert value.value_at(15) == pytest.approx(75.0)
        assert value.start_frame == 0
        assert value.end_frame == 20

    def test_legacy_end_values(self):
        """Test older exports with "e" values and a time-only last keyframe."""
        value = float_value({"a": 1, "k": [
            {"t": 0, "s": [0], "e": [40]},
            {"t": 10},
        ]})
        assert value.value_at(5) == pytest.approx(20.0)
        assert value.value_at(10) == 40.0

    def test_single_keyframe_array_is_static(self):
        value = float_value({"a": 1, "k": [{"t": 3, "s": [42]}]})
        assert value.is_static
        assert value.keyframes[0].static
        assert value.value_at(0) == 42.0

    def test_decreasing_times_rejected(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            float_value({"a": 1, "k": [{"t": 10, "s": [0]}, {"t": 5, "s": [1]}]})
        assert exc_info.value.path == "$.k"

    def test_keyframe_without_time_rejected(self):
        with pytest.raises(InvalidFieldError, match="no time"):
            float_value({"a": 1, "k": [{"s": [0]}, {"t": 5, "s": [1]}]})

    def test_missing_k_rejected(self):
        with pytest.raises(InvalidFieldError):
            float_value({"a": 0})

    def test_expression_adds_warning(self):
        context = ParseContext()
        value = float_value({"a": 0, "k": 3, "x": "var $bm_rt = time;"}, context)
        assert value.value_at(0) == 3.0
        assert EXPRESSIONS_WARNING in context.warnings

    def test_density_scale(self):
        context = ParseContext(scale=2.0)
        value = parse_float_value(JsonReader({"a": 0, "k": 5}), context, scale_by_density=True)
        assert value.value_at(0) == 10.0

    def test_integer_rounding(self):
        value = parse_integer_value(
            JsonReader({"a": 1, "k": [{"t": 0, "s": [0]}, {"t": 3, "s": [100]}]}),
            ParseContext(),
        )
        assert value.value_at(1) == 33
        assert isinstance(value.value_at(1), int)

    def test_step_value_never_blends(self):
        value = AnimatableStepValue([
            Keyframe("a", "b", 0.0, 10.0),
            Keyframe("b", None, 10.0, None),
        ])
        assert value.value_at(9.9) == "a"
        assert value.value_at(10) == "b"

    def test_concurrent_reads(self):
        """Test evaluation leaves the value untouched."""
        from concurrent.futures import ThreadPoolExecutor

        value = float_value({"a": 1, "k": [{"t": 0, "s": [0]}, {"t": 100, "s": [100]}]})
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(value.value_at, range(100)))
        assert results == pytest.approx([float(i) for i in range(100)])


class TestPointValues:
    """Test points, colors and positions."""

    def test_point_interpolation(self):
        value = AnimatablePointValue([
            Keyframe((0.0, 0.0), (10.0, 20.0), 0.0, 10.0),
            Keyframe((10.0, 20.0), None, 10.0, None),
        ])
        assert value.value_at(5) == pytest.approx((5.0, 10.0))

    def test_color_scaling_from_255(self):
        value = parse_color_value(JsonReader({"a": 0, "k": [255, 0, 0]}), ParseContext())
        assert value.value_at(0) == (1.0, 0.0, 0.0, 1.0)

    def test_color_interpolation(self):
        value = parse_color_value(
            JsonReader({"a": 1, "k": [
                {"t": 0, "s": [0, 0, 0, 1]},
                {"t": 10, "s": [1, 1, 1, 1]},
            ]}),
            ParseContext(),
        )
        assert value.value_at(5) == pytest.approx((0.5, 0.5, 0.5, 1.0))

    def test_spatial_position_hits_endpoints(self):
        prop = {"a": 1, "k": [
            {"t": 0, "s": [0, 0, 0], "to": [0, 50, 0], "ti": [0, 50, 0]},
            {"t": 10, "s": [100, 0, 0]},
        ]}
        value = parse_position_value(JsonReader(prop), ParseContext())
        assert value.value_at(0) == (0.0, 0.0)
        assert value.value_at(10) == (100.0, 0.0)

    def test_spatial_position_follows_curve(self):
        prop = {"a": 1, "k": [
            {"t": 0, "s": [0, 0], "to": [0, 50], "ti": [0, 50]},
            {"t": 10, "s": [100, 0]},
        ]}
        x, y = parse_position_value(JsonReader(prop), ParseContext()).value_at(5)
        assert x == pytest.approx(50.0, abs=0.5)
        assert y > 30.0

    def test_position_without_tangents_is_linear(self):
        prop = {"a": 1, "k": [{"t": 0, "s": [0, 0]}, {"t": 10, "s": [100, 50]}]}
        value = parse_position_value(JsonReader(prop), ParseContext())
        assert value.value_at(5) == pytest.approx((50.0, 25.0))

    def test_split_position(self):
        prop = {
            "s": True,
            "x": {"a": 1, "k": [{"t": 0, "s": [0]}, {"t": 10, "s": [100]}]},
            "y": {"a": 0, "k": 30},
        }
        value = parse_position_value(JsonReader(prop), ParseContext(scale=2.0))
        assert isinstance(value, AnimatableSplitDimensionValue)
        assert not value.is_static
        assert value.value_at(5) == pytest.approx((100.0, 60.0))


class TestShapeValues:
    """Test path and gradient values."""

    SQUARE = {"c": True, "v": [[0, 0], [10, 0], [10, 10], [0, 10]],
              "i": [[0, 0]] * 4, "o": [[0, 0]] * 4}
    WIDE = {"c": True, "v": [[0, 0], [20, 0], [20, 10], [0, 10]],
            "i": [[0, 0]] * 4, "o": [[0, 0]] * 4}
    TRIANGLE = {"c": True, "v": [[0, 0], [10, 0], [5, 10]],
                "i": [[0, 0]] * 3, "o": [[0, 0]] * 3}

    def test_static_shape_scaled(self):
        value = parse_shape_value(JsonReader({"a": 0, "k": self.SQUARE}), ParseContext(scale=2.0))
        shape = value.value_at(0)
        assert shape.closed
        assert len(shape) == 4
        assert shape.initial_point == (0.0, 0.0)
        assert tuple(shape.vertices[2]) == (20.0, 20.0)

    def test_closed_shape_curves(self):
        shape = parse_shape_value(JsonReader({"a": 0, "k": self.SQUARE}), ParseContext()).value_at(0)
        curves = shape.curves()
        assert len(curves) == 4
        assert curves[-1].vertex == (0.0, 0.0)

    def test_shape_interpolation(self):
        prop = {"a": 1, "k": [{"t": 0, "s": [self.SQUARE]}, {"t": 10, "s": [self.WIDE]}]}
        shape = parse_shape_value(JsonReader(prop), ParseContext()).value_at(5)
        assert tuple(shape.vertices[1]) == pytest.approx((15.0, 0.0))

    def test_mismatched_vertex_counts_rejected(self):
        prop = {"a": 1, "k": [{"t": 0, "s": [self.SQUARE]}, {"t": 10, "s": [self.TRIANGLE]}]}
        with pytest.raises(InvalidFieldError, match="points"):
            parse_shape_value(JsonReader(prop), ParseContext())

    def test_shape_data_interpolate_mismatch(self):
        square = ShapeData.from_lists([[0, 0], [1, 0]], [[0, 0]] * 2, [[0, 0]] * 2)
        point = ShapeData.from_lists([[0, 0]], [[0, 0]], [[0, 0]])
        with pytest.raises(ValueError):
            square.interpolate(point, 0.5)

    def test_gradient_from_raw(self):
        gradient = GradientColor.from_raw([0, 1, 0, 0, 1, 0, 0, 1, 0, 1, 1, 0.5], 2)
        assert len(gradient) == 2
        assert tuple(gradient.positions) == (0.0, 1.0)
        assert tuple(gradient.colors[0]) == (1.0, 0.0, 0.0, 1.0)
        assert gradient.colors[1][3] == pytest.approx(0.5)

    def test_gradient_too_short(self):
        with pytest.raises(ValueError):
            GradientColor.from_raw([0, 1, 0], 2)


class TestIntegerStatic:
    def test_static_opacity(self):
        assert AnimatableIntegerValue.static(100).value_at(5) == 100
