# vertex_helpers.py

# Points are homogeneous (x, y, z, w) numpy arrays. Every helper here works on
# the x, y, z part only and hands back a fresh point with w = 1, the same way a
# point behaves after the perspective divide. Nothing mutates its operands.

import numpy as np
from numpy.typing import NDArray

Point = NDArray[np.float64]  # (4,)
TexCoord = NDArray[np.float64]  # (3,) u, v, w


def point(x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0) -> Point:
    return np.array([x, y, z, w], dtype=np.float64)


def tex_coord(u: float = 0.0, v: float = 0.0, w: float = 1.0) -> TexCoord:
    return np.array([u, v, w], dtype=np.float64)


def as_point(values) -> Point:
    """
    Converts a 3 or 4 element sequence into a homogeneous point.

    Parameters:
        values:
            (x, y, z) or (x, y, z, w). A missing w becomes 1.

    Returns:
        np.ndarray:
            A new (4,) float64 array.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape == (4,):
        return arr.copy()
    if arr.shape == (3,):
        return np.append(arr, 1.0)
    raise ValueError(f"Expected 3 or 4 components, got shape {arr.shape}")


def _with_unit_w(xyz: NDArray[np.float64]) -> Point:
    return np.append(xyz, 1.0)


def vector_add(v1: Point, v2: Point) -> Point:
    return _with_unit_w(v1[:3] + v2[:3])


def vector_sub(v1: Point, v2: Point) -> Point:
    return _with_unit_w(v1[:3] - v2[:3])


def vector_mul(v: Point, k: float) -> Point:
    return _with_unit_w(v[:3] * k)


def vector_div(v: Point, k: float) -> Point:
    # Dividing by zero is allowed to produce inf/nan. Callers guard degenerate input.
    with np.errstate(divide='ignore', invalid='ignore'):
        return _with_unit_w(v[:3] / k)


def vector_dot(v1: Point, v2: Point) -> float:
    return float(np.dot(v1[:3], v2[:3]))


def vector_length(v: Point) -> float:
    return float(np.sqrt(vector_dot(v, v)))


def vector_normalize(v: Point) -> Point:
    return vector_div(v, vector_length(v))


def vector_cross(v1: Point, v2: Point) -> Point:
    return _with_unit_w(np.cross(v1[:3], v2[:3]))


def get_normal(a: Point, b: Point, c: Point) -> Point:
    """
    Computes the unit normal of a triangle.

    Parameters:
        a, b, c (np.ndarray):
            Triangle vertices in clockwise order.

    Returns:
        np.ndarray:
            normalize((b - a) x (c - a)). A degenerate triangle gives nan components.
    """
    line1 = vector_sub(b, a)
    line2 = vector_sub(c, a)
    return vector_normalize(vector_cross(line1, line2))


def distance_to_plane(plane_n: Point, plane_p: Point, p: Point) -> float:
    """Signed distance from `p` to the plane. `plane_n` must already be a unit vector."""
    return vector_dot(vector_sub(p, plane_p), plane_n)


def intersect_plane(plane_p: Point, plane_n: Point, line_start: Point, line_end: Point) -> tuple[Point, float]:
    """
    Finds where the segment from `line_start` to `line_end` crosses a plane.

    Parameters:
        plane_p (np.ndarray):
            Any point on the plane.
        plane_n (np.ndarray):
            Plane normal. Normalized here, so any length is accepted.
        line_start, line_end (np.ndarray):
            Segment end points (homogeneous).

    Returns:
        tuple[np.ndarray, float]:
            The intersection point and the parametric `t` along the segment.
            The same `t` is used to interpolate any per-vertex attribute.

    Notes:
        - A segment parallel to the plane divides by zero and yields inf/nan.
        - All four homogeneous components are interpolated, so two points with
          w = 1 give an intersection with w = 1.
    """
    plane_n = vector_normalize(plane_n)
    plane_d = vector_dot(plane_n, plane_p)
    ad = vector_dot(line_start, plane_n)
    bd = vector_dot(line_end, plane_n)
    with np.errstate(divide='ignore', invalid='ignore'):
        t = (plane_d - ad) / np.float64(bd - ad)
    return lerp(line_start, line_end, float(t)), float(t)


def lerp(a: NDArray[np.float64], b: NDArray[np.float64], t: float) -> NDArray[np.float64]:
    with np.errstate(invalid='ignore'):
        return a + (b - a) * t


def vector_to_string(header: str, v: NDArray[np.float64]) -> str:
    return header + " ".join(f"{c:.6f}" for c in v) + "\n"
