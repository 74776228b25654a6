# matrix_helpers.py

# All matrices are 4x4 and meant for ROW vectors: v' = v @ M. That is why the
# rotation matrices look transposed compared to most textbooks, and why
# composition reads left to right (the left-most matrix is applied first).

import numpy as np
from numpy.typing import NDArray

import vertex_helpers as v
from vertex_helpers import Point

Matrix = NDArray[np.float64]  # (4, 4)


def make_identity() -> Matrix:
    return np.eye(4, dtype=np.float64)


def matrix_buildup(*values: float) -> Matrix:
    """Builds a matrix from 16 values given row by row."""
    if len(values) != 16:
        raise ValueError(f"A 4x4 matrix needs 16 values, got {len(values)}")
    return np.array(values, dtype=np.float64).reshape(4, 4)


def make_rotation_x(angle: float) -> Matrix:
    c, s = np.cos(angle), np.sin(angle)
    m = make_identity()
    m[1, 1], m[1, 2] = c, s
    m[2, 1], m[2, 2] = -s, c
    return m


def make_rotation_y(angle: float) -> Matrix:
    c, s = np.cos(angle), np.sin(angle)
    m = make_identity()
    m[0, 0], m[0, 2] = c, s
    m[2, 0], m[2, 2] = -s, c
    return m


def make_rotation_z(angle: float) -> Matrix:
    c, s = np.cos(angle), np.sin(angle)
    m = make_identity()
    m[0, 0], m[0, 1] = c, s
    m[1, 0], m[1, 1] = -s, c
    return m


def make_translation(dx: float, dy: float, dz: float) -> Matrix:
    m = make_identity()
    m[3, :3] = (dx, dy, dz)
    return m


def make_scaling(sx: float, sy: float, sz: float) -> Matrix:
    return np.diag([sx, sy, sz, 1.0]).astype(np.float64)


def make_projection(fov_degrees: float, aspect: float, near: float, far: float) -> Matrix:
    """
    Builds the perspective projection matrix.

    Parameters:
        fov_degrees (float):
            Vertical field of view in degrees.
        aspect (float):
            Viewport height / viewport width.
        near, far (float):
            Clip plane distances along view-space +z.

    Returns:
        np.ndarray:
            Projection matrix. After `v @ P` the w component holds the view-space
            z, and after the divide a view-space z of `near` lands on 0 and `far`
            lands on 1. The depth terms are far/(far-near) and -far*near/(far-near);
            the plainer 1/(far-near) and -near/(far-near) would not reach 1 at `far`.
    """
    f = 1.0 / np.tan(np.radians(fov_degrees) * 0.5)
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = aspect * f
    m[1, 1] = f
    m[2, 2] = far / (far - near)
    m[3, 2] = (-far * near) / (far - near)
    m[2, 3] = 1.0
    m[3, 3] = 0.0
    return m


def multiply_vector(m: Matrix, p: Point) -> Point:
    """Row vector times matrix, all four components."""
    return np.asarray(p, dtype=np.float64) @ m


def multiply_matrix(m1: Matrix, m2: Matrix) -> Matrix:
    return m1 @ m2


def make_transform_complete(scale, angles, translation) -> Matrix:
    """
    Creates a full model->world matrix.

    Parameters:
        scale: (sx, sy, sz) scale factors.
        angles: (ax, ay, az) rotation angles in radians.
        translation: (tx, ty, tz) offsets.

    Returns:
        np.ndarray:
            S @ Rz @ Rx @ Ry @ T, so a row vector is scaled first, then rotated
            around z, x and y, then translated.
    """
    sx, sy, sz = scale
    ax, ay, az = angles
    tx, ty, tz = translation
    return (make_scaling(sx, sy, sz)
            @ make_rotation_z(az)
            @ make_rotation_x(ax)
            @ make_rotation_y(ay)
            @ make_translation(tx, ty, tz))


def point_at(pos: Point, target: Point, up: Point) -> Matrix:
    """
    Camera-to-world matrix for a camera at `pos` looking at `target`.

    The forward axis is `target - pos`, `up` is re-orthogonalised against it
    (Gram-Schmidt) and right = up x forward. Rows are right, up, forward, pos.
    """
    new_forward = v.vector_normalize(v.vector_sub(target, pos))

    a = v.vector_mul(new_forward, v.vector_dot(up, new_forward))
    new_up = v.vector_normalize(v.vector_sub(up, a))

    new_right = v.vector_cross(new_up, new_forward)

    m = np.zeros((4, 4), dtype=np.float64)
    m[0, :3] = new_right[:3]
    m[1, :3] = new_up[:3]
    m[2, :3] = new_forward[:3]
    m[3, :3] = np.asarray(pos, dtype=np.float64)[:3]
    m[3, 3] = 1.0
    return m


def quick_inverse(m: Matrix) -> Matrix:
    """
    Inverse of a rotation + translation matrix.

    NOTE: Only valid when there is no scale in `m`. This is not checked.
    """
    inv = np.zeros((4, 4), dtype=np.float64)
    inv[:3, :3] = m[:3, :3].T
    inv[3, :3] = -(m[3, :3] @ inv[:3, :3])
    inv[3, 3] = 1.0
    return inv


def matrix_to_string(header: str, m: Matrix) -> str:
    lines = [header]
    for r in range(4):
        lines.append("".join(f" (row {r} col {c} ) {m[r, c]:.6f}" for c in range(4)))
    return "\n".join(lines) + "\n"
