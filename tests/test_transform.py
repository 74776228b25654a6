"""Tests for the editable model->world transform."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

import matrix_helpers as mh
from transform import ANGLE_ROW, SCALE_ROW, TRANSLATION_ROW, Transform


def test_default_is_identity() -> None:
    """A fresh transform has unit scale, no rotation and no offset."""
    assert_allclose(Transform().get_matrix(), np.eye(4))


def test_matrix_matches_transform_complete() -> None:
    """The matrix is built from scale, angles and translation in that order."""
    t = Transform(scale=[1, 2, 3], rotation=[0.1, 0.2, 0.3], translation=[4, 5, 6])
    expected = mh.make_transform_complete([1, 2, 3], [0.1, 0.2, 0.3], [4, 5, 6])
    assert_allclose(t.get_matrix(), expected)


def test_in_place_edits() -> None:
    """rotate and translate add, scale multiplies."""
    t = Transform()
    t.rotate([0, np.pi / 2, 0])
    t.rotate([0, np.pi / 2, 0])
    t.scale([2, 2, 2])
    t.scale([1, 3, 1])
    t.translate([1, 0, 0])
    assert_allclose(t.angles, [0, np.pi, 0])
    assert_allclose(t.scale_factors, [2, 6, 2])
    assert_allclose(t.offset, [1, 0, 0])


def test_with_methods_return_new_transforms() -> None:
    """with_* replaces one component and leaves the original alone."""
    t = Transform(translation=[1, 2, 3])
    r = t.with_rotation([0, 1, 0])
    s = t.with_scale([2, 2, 2])
    assert_allclose(t.angles, [0, 0, 0])
    assert_allclose(r.angles, [0, 1, 0])
    assert_allclose(r.offset, [1, 2, 3])
    assert_allclose(s.scale_factors, [2, 2, 2])
    assert_allclose(t.with_translation([0, 0, 0]).offset, [0, 0, 0])


def test_grid_components() -> None:
    """The demo edits single cells of the scale / angle / translation grid."""
    t = Transform()
    t.set_component(SCALE_ROW, 1, 0.5)
    t.set_component(ANGLE_ROW, 2, 0.25)
    t.set_component(TRANSLATION_ROW, 0, -3.0)
    assert t.get_component(SCALE_ROW, 1) == pytest.approx(0.5)
    assert t.get_component(ANGLE_ROW, 2) == pytest.approx(0.25)
    assert t.get_component(TRANSLATION_ROW, 0) == pytest.approx(-3.0)
    assert_allclose(t.get_matrix()[3, :3], [-3, 0, 0])


def test_copy_is_independent() -> None:
    t = Transform(translation=[1, 0, 0])
    c = t.copy()
    c.translate([1, 0, 0])
    assert_allclose(t.offset, [1, 0, 0])
    assert_allclose(c.offset, [2, 0, 0])


def test_matmul_combines_matrices() -> None:
    """a @ b applies a first, then b."""
    a = Transform(scale=[2, 2, 2])
    b = Transform(translation=[1, 0, 0])
    combined = a @ b
    assert_allclose(combined.get_matrix(), a.get_matrix() @ b.get_matrix())
    with pytest.raises(ValueError):
        combined.translate([1, 0, 0])


def test_bad_vectors_are_rejected() -> None:
    with pytest.raises(ValueError):
        Transform(scale=[1, 2])
    with pytest.raises(ValueError):
        Transform().rotate([1, 2, 3, 4])
