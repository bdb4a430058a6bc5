"""
Tests for shape layer content parsing.
"""

import numpy as np
import pytest

from conftest import make_document, make_layer, static
from lottiekit.errors import InvalidFieldError
from lottiekit.model.layer import ShapePayload
from lottiekit.model.shape import (
    DashType,
    EllipseShape,
    FillRule,
    GradientFill,
    GradientStroke,
    GradientType,
    LineCap,
    LineJoin,
    MergePaths,
    MergePathsMode,
    PolystarShape,
    PolystarType,
    RectangleShape,
    ShapeFill,
    ShapeGroup,
    ShapePath,
    ShapeStroke,
    ShapeTransform,
    ShapeTrimPath,
    TrimPathType,
)

TRIANGLE = {"c": True, "v": [[0, 0], [10, 0], [0, 10]], "i": [[0, 0]] * 3, "o": [[0, 0]] * 3}


@pytest.fixture
def parse_shapes(parse_doc):
    """Parse a list of shape items inside one shape layer."""
    def _parse(shapes, scale=1.0):
        composition = parse_doc(make_document(layers=[make_layer(1, shapes=shapes)]), scale=scale)
        payload = composition.layers[0].payload
        assert isinstance(payload, ShapePayload)
        return payload.shapes
    return _parse


class TestGroups:
    """Test group nesting and item dispatch."""

    def test_nested_group(self, parse_shapes):
        shapes = parse_shapes([
            {"ty": "gr", "nm": "Outer", "it": [
                {"ty": "gr", "nm": "Inner", "hd": True, "it": [
                    {"ty": "sh", "nm": "Path", "ks": static(TRIANGLE)},
                ]},
                {"ty": "fl", "c": static([1, 0.5, 0]), "o": static(100)},
                {"ty": "tr", "p": static([5, 5]), "s": static([100, 100])},
            ]},
        ])
        assert len(shapes) == 1
        outer = shapes[0]
        assert isinstance(outer, ShapeGroup)
        assert outer.name == "Outer"
        inner, fill, transform = outer.items
        assert isinstance(inner, ShapeGroup) and inner.hidden
        assert isinstance(inner.items[0], ShapePath)
        assert inner.items[0].path.value_at(0).closed
        assert isinstance(fill, ShapeFill)
        assert isinstance(transform, ShapeTransform)
        assert transform.position.value_at(0) == (5.0, 5.0)
        assert transform.rotation.value_at(0) == 0.0

    def test_field_order_does_not_matter(self, parse_shapes):
        shapes = parse_shapes([{"it": [], "nm": "Late type", "ty": "gr"}])
        assert shapes[0].name == "Late type"

    def test_unknown_types_skipped(self, parse_shapes):
        shapes = parse_shapes([
            {"ty": "rp", "nm": "Repeater", "c": static(3)},
            {"nm": "No type"},
            {"ty": "el", "p": static([0, 0]), "s": static([4, 4])},
        ])
        assert len(shapes) == 1
        assert isinstance(shapes[0], EllipseShape)

    def test_missing_required_field(self, parse_shapes):
        with pytest.raises(InvalidFieldError, match="'ks'"):
            parse_shapes([{"ty": "sh", "nm": "Empty"}])


class TestPrimitives:
    """Test rectangles, ellipses and polystars."""

    def test_rectangle(self, parse_shapes):
        shapes = parse_shapes(
            [{"ty": "rc", "nm": "Box", "p": static([10, 20]), "s": static([30, 40]), "r": static(4)}],
            scale=2.0,
        )
        rect = shapes[0]
        assert isinstance(rect, RectangleShape)
        assert rect.position.value_at(0) == (20.0, 40.0)
        assert rect.size.value_at(0) == (60.0, 80.0)
        assert rect.corner_radius.value_at(0) == 8.0

    def test_rectangle_without_radius(self, parse_shapes):
        rect = parse_shapes([{"ty": "rc", "p": static([0, 0]), "s": static([1, 1])}])[0]
        assert rect.corner_radius.value_at(0) == 0.0

    def test_star(self, parse_shapes):
        star = parse_shapes([{
            "ty": "sr", "sy": 1, "pt": static(5), "p": static([0, 0]), "r": static(0),
            "or": static(50), "os": static(0), "ir": static(20), "is": static(10),
        }])[0]
        assert isinstance(star, PolystarShape)
        assert star.type is PolystarType.STAR
        assert star.points.value_at(0) == 5.0
        assert star.inner_radius.value_at(0) == 20.0
        assert star.inner_roundness.value_at(0) == 10.0

    def test_polygon_drops_inner_values(self, parse_shapes):
        polygon = parse_shapes([{
            "ty": "sr", "sy": 2, "pt": static(6), "p": static([0, 0]),
            "or": static(50), "ir": static(20), "is": static(10),
        }])[0]
        assert polygon.type is PolystarType.POLYGON
        assert polygon.inner_radius is None
        assert polygon.inner_roundness is None


class TestPaint:
    """Test fills, strokes and gradients."""

    def test_fill(self, parse_shapes):
        fill = parse_shapes([{"ty": "fl", "c": static([255, 0, 0, 255]), "r": 2}])[0]
        assert fill.color.value_at(0) == pytest.approx((1.0, 0.0, 0.0, 1.0))
        assert fill.opacity.value_at(0) == 100
        assert fill.fill_rule is FillRule.EVEN_ODD

    def test_stroke_with_dashes(self, parse_shapes):
        stroke = parse_shapes([{
            "ty": "st", "c": static([0, 0, 1]), "o": static(80), "w": static(3),
            "lc": 2, "lj": 3, "ml": 10,
            "d": [
                {"n": "d", "v": static(4)},
                {"n": "g", "v": static(2)},
                {"n": "o", "v": static(1)},
            ],
        }], scale=2.0)[0]
        assert isinstance(stroke, ShapeStroke)
        assert stroke.width.value_at(0) == 6.0
        assert stroke.cap is LineCap.ROUND
        assert stroke.join is LineJoin.BEVEL
        assert stroke.miter_limit == 10.0
        assert [dash.type for dash in stroke.dashes] == [DashType.DASH, DashType.GAP, DashType.OFFSET]
        assert stroke.dashes[0].value.value_at(0) == 8.0

    def test_unknown_line_cap_defaults(self, parse_shapes):
        stroke = parse_shapes([{"ty": "st", "c": static([0, 0, 0]), "w": static(1), "lc": 9}])[0]
        assert stroke.cap is LineCap.BUTT

    def test_gradient_fill(self, parse_shapes):
        fill = parse_shapes([{
            "ty": "gf", "t": 2, "o": static(100),
            "s": static([0, 0]), "e": static([100, 0]),
            "g": {"p": 2, "k": static([0, 1, 0, 0, 1, 0, 0, 1])},
        }])[0]
        assert isinstance(fill, GradientFill)
        assert fill.gradient_type is GradientType.RADIAL
        gradient = fill.colors.value_at(0)
        np.testing.assert_allclose(gradient.positions, [0.0, 1.0])
        np.testing.assert_allclose(gradient.colors[0], [1.0, 0.0, 0.0, 1.0])
        np.testing.assert_allclose(gradient.colors[1], [0.0, 0.0, 1.0, 1.0])

    def test_gradient_stroke(self, parse_shapes):
        stroke = parse_shapes([{
            "ty": "gs", "w": static(2), "lc": 3,
            "s": static([0, 0]), "e": static([10, 10]),
            "g": {"k": static([0, 0, 0, 0, 1, 1, 1, 1]), "p": 2},
        }])[0]
        assert isinstance(stroke, GradientStroke)
        assert stroke.gradient_type is GradientType.LINEAR
        assert stroke.cap is LineCap.SQUARE
        assert stroke.width.value_at(0) == 2.0

    def test_gradient_without_stop_count(self, parse_shapes):
        with pytest.raises(InvalidFieldError, match="'p'"):
            parse_shapes([{
                "ty": "gf", "s": static([0, 0]), "e": static([1, 1]),
                "g": {"k": static([0, 1, 1, 1])},
            }])


class TestModifiers:
    """Test trim paths and merge paths."""

    def test_trim_path(self, parse_shapes):
        trim = parse_shapes([{"ty": "tm", "s": static(10), "e": static(90), "m": 2}])[0]
        assert isinstance(trim, ShapeTrimPath)
        assert trim.type is TrimPathType.INDIVIDUALLY
        assert trim.start.value_at(0) == 10.0
        assert trim.end.value_at(0) == 90.0
        assert trim.offset.value_at(0) == 0.0

    def test_merge_paths(self, parse_shapes):
        merge = parse_shapes([{"ty": "mm", "mm": 4, "nm": "Merge"}])[0]
        assert isinstance(merge, MergePaths)
        assert merge.mode is MergePathsMode.INTERSECT
