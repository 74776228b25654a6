"""Tests for the 4x4 matrix helpers (row vector convention)."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

import matrix_helpers as mh
import vertex_helpers as v


def test_identity_leaves_points_unchanged() -> None:
    """p @ I == p."""
    p = v.point(1.5, -2, 3)
    assert_allclose(mh.multiply_vector(mh.make_identity(), p), p)


def test_matrix_buildup_is_row_major() -> None:
    """Values are read row by row."""
    m = mh.matrix_buildup(*range(16))
    assert m[0, 3] == 3
    assert m[3, 0] == 12
    with pytest.raises(ValueError):
        mh.matrix_buildup(1, 2, 3)


def test_translation_lives_in_row_three() -> None:
    """A translation moves points with w = 1."""
    m = mh.make_translation(1, 2, 3)
    assert_allclose(m[3, :3], [1, 2, 3])
    assert_allclose(mh.multiply_vector(m, v.point(1, 1, 1)), [2, 3, 4, 1])


def test_scaling() -> None:
    m = mh.make_scaling(2, 3, 4)
    assert_allclose(mh.multiply_vector(m, v.point(1, 1, 1)), [2, 3, 4, 1])


@pytest.mark.parametrize("make_rotation", [mh.make_rotation_x, mh.make_rotation_y, mh.make_rotation_z])
def test_rotations_are_orthonormal(make_rotation) -> None:
    """R @ R^T == I for any angle."""
    r = make_rotation(0.7)
    assert_allclose(r @ r.T, np.eye(4), atol=1e-12)


def test_rotation_directions() -> None:
    """Quarter turns map the axes the way the row vector forms define."""
    quarter = np.pi / 2
    assert_allclose(mh.multiply_vector(mh.make_rotation_z(quarter), v.point(1, 0, 0)), [0, 1, 0, 1], atol=1e-12)
    assert_allclose(mh.multiply_vector(mh.make_rotation_x(quarter), v.point(0, 1, 0)), [0, 0, 1, 1], atol=1e-12)
    assert_allclose(mh.multiply_vector(mh.make_rotation_y(quarter), v.point(0, 0, 1)), [-1, 0, 0, 1], atol=1e-12)


def test_projection_maps_near_and_far() -> None:
    """After the divide, view z == near lands on 0 and z == far on 1, and w holds view z."""
    near, far = 0.1, 20.0
    p = mh.make_projection(90.0, 0.75, near, far)

    at_near = mh.multiply_vector(p, v.point(0, 0, near))
    at_far = mh.multiply_vector(p, v.point(0, 0, far))
    assert at_near[3] == pytest.approx(near)
    assert at_far[3] == pytest.approx(far)
    assert at_near[2] / at_near[3] == pytest.approx(0.0, abs=1e-12)
    assert at_far[2] / at_far[3] == pytest.approx(1.0)


def test_projection_depth_terms() -> None:
    near, far = 0.1, 20.0
    p = mh.make_projection(90.0, 1.0, near, far)
    assert p[2, 2] == pytest.approx(far / (far - near))
    assert p[3, 2] == pytest.approx(-far * near / (far - near))
    assert p[2, 3] == 1.0 and p[3, 3] == 0.0


def test_projection_fov_and_aspect() -> None:
    """With fov 90 a point at 45 degrees lands on the edge of the unit square (x scaled by aspect)."""
    p = mh.make_projection(90.0, 0.5, 0.1, 100.0)
    out = mh.multiply_vector(p, v.point(2, 2, 2))
    assert out[0] / out[3] == pytest.approx(0.5)
    assert out[1] / out[3] == pytest.approx(1.0)


def test_transform_complete_identity() -> None:
    """Unit scale with no rotation or translation is the identity."""
    assert_allclose(mh.make_transform_complete((1, 1, 1), (0, 0, 0), (0, 0, 0)), np.eye(4))


def test_transform_complete_scales_before_translating() -> None:
    """Row vectors are scaled first, then translated."""
    m = mh.make_transform_complete((2, 2, 2), (0, 0, 0), (1, 0, 0))
    assert_allclose(mh.multiply_vector(m, v.point(1, 1, 1)), [3, 2, 2, 1])


def test_transform_complete_rotation_order() -> None:
    """The composition is S @ Rz @ Rx @ Ry @ T."""
    scale, angles, offset = (1, 2, 3), (0.3, -0.4, 1.1), (5, -6, 7)
    expected = (mh.make_scaling(*scale) @ mh.make_rotation_z(angles[2]) @ mh.make_rotation_x(angles[0])
                @ mh.make_rotation_y(angles[1]) @ mh.make_translation(*offset))
    assert_allclose(mh.make_transform_complete(scale, angles, offset), expected)


def test_quick_inverse_undoes_rigid_transform() -> None:
    """For rotation + translation, M @ quick_inverse(M) == I."""
    m = mh.make_rotation_y(0.4) @ mh.make_rotation_x(-1.2) @ mh.make_translation(3, -2, 5)
    assert_allclose(m @ mh.quick_inverse(m), np.eye(4), atol=1e-12)


def test_quick_inverse_round_trips() -> None:
    """Inverting twice gives M back, and M followed by its inverse returns the point."""
    m = (mh.make_rotation_z(0.7) @ mh.make_rotation_x(-0.3) @ mh.make_rotation_y(1.9)
         @ mh.make_translation(4, -1, 2))
    assert_allclose(mh.quick_inverse(mh.quick_inverse(m)), m, atol=1e-12)

    p = v.point(1.5, -2.25, 3.0)
    moved = mh.multiply_vector(m, p)
    assert not np.allclose(moved, p)
    assert_allclose(mh.multiply_vector(mh.quick_inverse(m), moved), p, atol=1e-12)


def test_point_at_rows() -> None:
    """Looking down +z with +y up gives the identity rotation and the position in row 3."""
    m = mh.point_at(v.point(1, 2, 3), v.point(1, 2, 4), v.point(0, 1, 0))
    assert_allclose(m[:3, :3], np.eye(3), atol=1e-12)
    assert_allclose(m[3], [1, 2, 3, 1])


def test_point_at_orthogonalises_up() -> None:
    """A tilted up vector is made perpendicular to the forward axis."""
    m = mh.point_at(v.point(0, 0, 0), v.point(0, 0, 1), v.point(0, 1, 1))
    up, forward = m[1, :3], m[2, :3]
    assert np.dot(up, forward) == pytest.approx(0.0, abs=1e-12)
    assert np.linalg.norm(up) == pytest.approx(1.0)


def test_matrix_to_string_lists_every_cell() -> None:
    text = mh.matrix_to_string("m", mh.make_identity())
    assert text.startswith("m\n")
    assert text.count("(row") == 16
