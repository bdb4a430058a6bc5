"""Path and gradient value types backed by numpy arrays."""

from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

import numpy as np
from numpy.typing import NDArray


class CubicCurve(NamedTuple):
    """One cubic segment of a path, with absolute control points."""
    control_point1: Tuple[float, float]
    control_point2: Tuple[float, float]
    vertex: Tuple[float, float]


@dataclass(frozen=True, eq=False)
class ShapeData:
    """A Bezier path as exported by Bodymovin.

    Attributes:
        vertices: (n, 2) vertex positions
        in_tangents: (n, 2) in handles, relative to their vertex
        out_tangents: (n, 2) out handles, relative to their vertex
        closed: Whether the last vertex connects back to the first
    """

    vertices: NDArray[np.float64]
    in_tangents: NDArray[np.float64]
    out_tangents: NDArray[np.float64]
    closed: bool = False

    def __post_init__(self) -> None:
        n = len(self.vertices)
        if self.in_tangents.shape != (n, 2) or self.out_tangents.shape != (n, 2):
            raise ValueError(
                f"Tangent arrays must match vertices: {self.vertices.shape}, "
                f"{self.in_tangents.shape}, {self.out_tangents.shape}"
            )

    @classmethod
    def from_lists(
        cls,
        vertices: List[List[float]],
        in_tangents: List[List[float]],
        out_tangents: List[List[float]],
        closed: bool = False,
        scale: float = 1.0,
    ) -> "ShapeData":
        """Build from nested lists, applying the density scale."""
        def as_array(points: List[List[float]]) -> NDArray[np.float64]:
            array = np.asarray(points, dtype=np.float64).reshape(-1, 2)
            return array * scale

        return cls(as_array(vertices), as_array(in_tangents), as_array(out_tangents), closed)

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def initial_point(self) -> Tuple[float, float]:
        if not len(self.vertices):
            return (0.0, 0.0)
        x, y = self.vertices[0]
        return (float(x), float(y))

    def curves(self) -> List[CubicCurve]:
        """Segments with absolute control points, including the closing one."""
        n = len(self.vertices)
        if n == 0:
            return []
        count = n if self.closed else n - 1
        curves = []
        for i in range(count):
            j = (i + 1) % n
            cp1 = self.vertices[i] + self.out_tangents[i]
            cp2 = self.vertices[j] + self.in_tangents[j]
            vertex = self.vertices[j]
            curves.append(CubicCurve(
                (float(cp1[0]), float(cp1[1])),
                (float(cp2[0]), float(cp2[1])),
                (float(vertex[0]), float(vertex[1])),
            ))
        return curves

    def interpolate(self, other: "ShapeData", t: float) -> "ShapeData":
        """Pointwise interpolation of vertices and handles.

        Raises:
            ValueError: If the two paths have different vertex counts
        """
        if len(self) != len(other):
            raise ValueError(
                f"Cannot interpolate paths with {len(self)} and {len(other)} vertices"
            )
        return ShapeData(
            self.vertices + (other.vertices - self.vertices) * t,
            self.in_tangents + (other.in_tangents - self.in_tangents) * t,
            self.out_tangents + (other.out_tangents - self.out_tangents) * t,
            self.closed or other.closed,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShapeData):
            return NotImplemented
        return (
            self.closed == other.closed
            and np.array_equal(self.vertices, other.vertices)
            and np.array_equal(self.in_tangents, other.in_tangents)
            and np.array_equal(self.out_tangents, other.out_tangents)
        )


@dataclass(frozen=True, eq=False)
class GradientColor:
    """Gradient stops.

    Attributes:
        positions: (n,) stop positions in 0..1
        colors: (n, 4) RGBA colors in 0..1
    """

    positions: NDArray[np.float64]
    colors: NDArray[np.float64]

    @classmethod
    def from_raw(cls, raw: List[float], color_points: int) -> "GradientColor":
        """Decode Bodymovin's flat gradient array.

        The array holds color_points groups of (position, r, g, b), optionally
        followed by (position, alpha) opacity stops which are sampled at the
        color stop positions.
        """
        values = np.asarray(raw, dtype=np.float64)
        color_len = color_points * 4
        if color_points <= 0 or len(values) < color_len:
            raise ValueError(f"Gradient needs {color_len} values, got {len(values)}")

        stops = values[:color_len].reshape(color_points, 4)
        positions = stops[:, 0]
        rgb = stops[:, 1:]
        if rgb.size and rgb.max() > 1.0:
            rgb = rgb / 255.0

        alpha = np.ones(color_points)
        opacity = values[color_len:]
        if len(opacity) >= 2:
            opacity = opacity[: len(opacity) - len(opacity) % 2].reshape(-1, 2)
            alpha = np.interp(positions, opacity[:, 0], opacity[:, 1])

        return cls(positions.copy(), np.column_stack([rgb, alpha]))

    def __len__(self) -> int:
        return len(self.positions)

    def interpolate(self, other: "GradientColor", t: float) -> "GradientColor":
        if len(self) != len(other):
            raise ValueError(
                f"Cannot interpolate gradients with {len(self)} and {len(other)} stops"
            )
        return GradientColor(
            self.positions + (other.positions - self.positions) * t,
            self.colors + (other.colors - self.colors) * t,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GradientColor):
            return NotImplemented
        return (
            np.array_equal(self.positions, other.positions)
            and np.array_equal(self.colors, other.colors)
        )
