# triangle.py

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

Color = Tuple[int, int, int]
COLOR_WHITE: Color = (255, 255, 255)


class RenderMode(IntEnum):
    """How a triangle is drawn.

    The grey and textured modes go through back-face culling and lighting.
    The two wireframe modes skip culling so both faces show up.
    """
    UNKNOWN = -1
    INVISIBLE = 0         # keep the geometry alive but draw nothing (e.g. bounding boxes)
    GREY_FILLED = 1
    GREY_FILLED_PLUS = 2  # filled plus outline
    WIREFRAME = 3         # outline in the frame colour
    WIREFRAME_RGB = 4     # outline in the triangle's own colour
    TEXTURED = 5
    TEXTURED_PLUS = 6

    @property
    def is_wireframe(self) -> bool:
        return self in (RenderMode.WIREFRAME, RenderMode.WIREFRAME_RGB)

    @property
    def is_filled(self) -> bool:
        return self in (RenderMode.GREY_FILLED, RenderMode.GREY_FILLED_PLUS,
                        RenderMode.TEXTURED, RenderMode.TEXTURED_PLUS)

    @property
    def has_outline(self) -> bool:
        return self in (RenderMode.GREY_FILLED_PLUS, RenderMode.TEXTURED_PLUS,
                        RenderMode.WIREFRAME, RenderMode.WIREFRAME_RGB)


def _frozen_array(values, shape) -> NDArray[np.float64]:
    arr = np.array(values, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"Expected shape {shape}, got {arr.shape}")
    arr.flags.writeable = False
    return arr


_DEFAULT_TEX = ((0.0, 0.0, 1.0), (0.0, 0.0, 1.0), (0.0, 0.0, 1.0))


@dataclass(frozen=True, slots=True, eq=False)
class Triangle:
    """A triangle as it travels through the pipeline.

    Every stage builds a new Triangle; the arrays are copied on construction and
    locked, so a triangle handed to a stage can never change under the caller.
    `sprite` is a borrowed reference into the texture store and is passed along
    as-is (never copied).
    """
    points: NDArray[np.float64]  # (3, 4) homogeneous vertices, clockwise
    """Three (x, y, z, w) vertices. Model/world/view space early on, screen space at the end."""
    tex: NDArray[np.float64] = field(default=_DEFAULT_TEX)  # (3, 3) u, v, w
    """Texture coordinates. After screen mapping `w` holds 1/w of the projected vertex."""
    color: Color = COLOR_WHITE
    render_mode: RenderMode = RenderMode.UNKNOWN
    sprite: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, "points", _frozen_array(self.points, (3, 4)))
        object.__setattr__(self, "tex", _frozen_array(self.tex, (3, 3)))
        object.__setattr__(self, "color", tuple(int(c) for c in self.color))
        object.__setattr__(self, "render_mode", RenderMode(self.render_mode))

    @staticmethod
    def from_points(p0, p1, p2, tex=None, color: Color = COLOR_WHITE,
                    render_mode: RenderMode = RenderMode.UNKNOWN, sprite=None) -> "Triangle":
        """Builds a triangle from three (x, y, z) or (x, y, z, w) points."""
        pts = []
        for p in (p0, p1, p2):
            p = list(p)
            if len(p) == 3:
                p.append(1.0)
            pts.append(p)
        return Triangle(pts, tex if tex is not None else _DEFAULT_TEX, color, render_mode, sprite)

    def with_points(self, points) -> "Triangle":
        return Triangle(points, self.tex, self.color, self.render_mode, self.sprite)

    def with_tex(self, tex) -> "Triangle":
        return Triangle(self.points, tex, self.color, self.render_mode, self.sprite)

    def with_color(self, color: Color) -> "Triangle":
        return Triangle(self.points, self.tex, color, self.render_mode, self.sprite)

    def with_render_mode(self, render_mode: RenderMode) -> "Triangle":
        return Triangle(self.points, self.tex, self.color, render_mode, self.sprite)

    def same_as(self, other: "Triangle", atol: float = 0.0) -> bool:
        """Vertex-for-vertex comparison including appearance."""
        return (np.allclose(self.points, other.points, rtol=0.0, atol=atol)
                and np.allclose(self.tex, other.tex, rtol=0.0, atol=atol)
                and self.color == other.color
                and self.render_mode == other.render_mode
                and self.sprite is other.sprite)


def transform_triangle(tri: Triangle, matrix: NDArray[np.float64]) -> Triangle:
    """Multiplies each vertex (row vector) by `matrix`. Texture and appearance are propagated."""
    return tri.with_points(tri.points @ matrix)


def signed_area(tri: Triangle) -> float:
    """
    Half the z component of (p1 - p0) x (p2 - p0).

    The sign flips when the winding flips, which is what the clip tests look at.
    """
    a = tri.points[1, :2] - tri.points[0, :2]
    b = tri.points[2, :2] - tri.points[0, :2]
    return float(0.5 * (a[0] * b[1] - a[1] * b[0]))


def centroid_depth(tri: Triangle) -> float:
    return float(tri.points[:, 2].sum() / 3.0)


def is_finite(tri: Triangle) -> bool:
    return bool(np.isfinite(tri.points).all())


def triangle_to_string(header: str, tri: Triangle) -> str:
    lines = [header]
    for p, t in zip(tri.points, tri.tex):
        lines.append(" ".join(f"{c:.3f}" for c in p) + " | " + " ".join(f"{c:.3f}" for c in t))
    lines.append(f"color={tri.color} mode={tri.render_mode.name}")
    return "\n".join(lines) + "\n"
