# transform.py

import numpy as np
from numpy.typing import NDArray

import matrix_helpers as mh

# Rows of the editing grid (scale / angle / translation) used by the demo keys.
SCALE_ROW = 0
ANGLE_ROW = 1
TRANSLATION_ROW = 2


class Transform:
    """
    Represents a model->world transform made of a scale, Euler rotation angles and a translation.

    Unlike a cached matrix, the three components are stored as plain 3-vectors so the
    values can be edited one at a time (the demo nudges them with the keyboard).
    The full matrix is computed on demand as:
        Transform = Scale @ RotZ @ RotX @ RotY @ Translation
    which, for row vectors, means scale first and translate last.

    Methods with_*(...) return a new Transform with the given component replaced.
    Methods rotate(...), scale(...), translate(...) modify this Transform *in-place*:
        - scale multiplies the current factors
        - rotate adds to the current angles (radians)
        - translate adds to the current offset

    Use copy() to create a new independent copy.

    Supports matrix multiplication (@) to combine two Transforms by multiplying their
    full matrices. `a @ b` applies `a` first, then `b`.

    Example usage:
        t = Transform()
        t.rotate([0, np.pi/2, 0])     # modifies t in place
        t.translate([1,0,0])
        t2 = t.copy()                 # independent copy of t
    """
    def __init__(self, scale=None, rotation=None, translation=None):
        self._scale = self._parse_vector(scale, "Scale") if scale is not None else np.ones(3)
        self._rotation = self._parse_vector(rotation, "Rotation") if rotation is not None else np.zeros(3)
        self._translation = self._parse_vector(translation, "Translation") if translation is not None else np.zeros(3)
        self._matrix: NDArray[np.float64] | None = None

    @property
    def scale_factors(self) -> NDArray[np.float64]:
        return self._scale.copy()

    @property
    def angles(self) -> NDArray[np.float64]:
        return self._rotation.copy()

    @property
    def offset(self) -> NDArray[np.float64]:
        return self._translation.copy()

    def get_matrix(self) -> NDArray[np.float64]:
        """Compute and return the combined 4x4 transform matrix."""
        if self._matrix is not None:
            return self._matrix.copy()
        return mh.make_transform_complete(self._scale, self._rotation, self._translation)

    def with_rotation(self, R) -> "Transform":
        """Return a new Transform with rotation replaced by R."""
        return Transform(scale=self._scale, rotation=R, translation=self._translation)

    def with_scale(self, S) -> "Transform":
        """Return a new Transform with scale replaced by S."""
        return Transform(scale=S, rotation=self._rotation, translation=self._translation)

    def with_translation(self, T) -> "Transform":
        """Return a new Transform with translation replaced by T."""
        return Transform(scale=self._scale, rotation=self._rotation, translation=T)

    def rotate(self, R) -> None:
        """In-place composition: adds the angles R to the current rotation."""
        self._rows()
        self._rotation = self._rotation + self._parse_vector(R, "Rotation")

    def scale(self, S) -> None:
        """In-place composition: multiplies the current scale by S."""
        self._rows()
        self._scale = self._scale * self._parse_vector(S, "Scale")

    def translate(self, T) -> None:
        """In-place composition: adds T to the current translation."""
        self._rows()
        self._translation = self._translation + self._parse_vector(T, "Translation")

    def get_component(self, row: int, axis: int) -> float:
        return float(self._rows()[row][axis])

    def set_component(self, row: int, axis: int, value: float) -> None:
        """Sets one cell of the scale/angle/translation grid."""
        self._rows()[row][axis] = value

    def copy(self) -> "Transform":
        """Return a deep copy of this Transform."""
        new_transform = Transform(self._scale.copy(), self._rotation.copy(), self._translation.copy())
        if self._matrix is not None:
            new_transform._matrix = self._matrix.copy()
        return new_transform

    def __matmul__(self, other: "Transform") -> "Transform":
        """Combine two Transforms by multiplying their full matrices."""
        if not isinstance(other, Transform):
            return NotImplemented
        combined = Transform()
        # No decomposition; the combined transform only knows its matrix
        combined._matrix = self.get_matrix() @ other.get_matrix()
        return combined

    def __repr__(self) -> str:
        return (f"Transform(scale={self._scale.tolist()}, rotation={self._rotation.tolist()}, "
                f"translation={self._translation.tolist()})")

    def _rows(self):
        if self._matrix is not None:
            raise ValueError("A combined Transform has no editable components")
        return (self._scale, self._rotation, self._translation)

    @staticmethod
    def _parse_vector(value, label: str) -> NDArray[np.float64]:
        arr = np.array(value, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError(f"{label} must be a 3-vector")
        return arr
