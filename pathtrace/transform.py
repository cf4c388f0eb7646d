# transform.py

"""
Matrix transformations used to place shapes and the camera in a scene.

Example:

    >>> t = Transform.translate(3.0, 5.0, 6.0)
    >>> t.eval_point(Vector3f(1.0, 1.0, 1.0))
    Vector3f(x=4.0, y=6.0, z=7.0)
"""

import logging
from dataclasses import dataclass, field
from numpy import radians as np_radians
from numpy import cos as np_cos
from numpy import sin as np_sin
from numpy import ndarray
from pathtrace.number import Float
from pathtrace.matrix4x4 import Matrix4x4
from pathtrace.vector3 import Vector3f, VectorLike
from pathtrace.kernels import transform_point, transform_vector, transform_normal

logger = logging.getLogger(__name__)


def _as_float3(value: VectorLike) -> ndarray:
    if isinstance(value, Vector3f):
        return value.v
    return Vector3f.from_array(value).v


@dataclass(frozen=True, slots=True)
class Transform:
    """
    An immutable 4x4 homogeneous transformation in 3D space.

    Points are treated as column vectors, so `a * b` applies `b` first and
    then `a`.

    Attributes:
        m (Matrix4x4): the Float matrix of the transform.
    """

    m: Matrix4x4 = field(default_factory=lambda: Matrix4x4.new_ident(1.0))

    def __post_init__(self):
        # own a private, read-only Float copy
        source = self.m.m if isinstance(self.m, Matrix4x4) else self.m
        m = Matrix4x4(source, dtype=Float)
        m.m.flags.writeable = False
        object.__setattr__(self, "m", m)

    @classmethod
    def identity(cls) -> "Transform":
        """
        Create an identity Transform.

        Returns:
            A Transform that maps every point and vector to itself.
        """
        return cls()

    @property
    def matrix(self) -> ndarray:
        """A copy of the underlying (4, 4) array."""
        return self.m.m.copy()

    ########
    # Evaluation
    #

    def eval_point(self, p: VectorLike) -> Vector3f:
        """
        Apply this transform to a point (w = 1).

        Translation is applied and the result is divided by w when w != 1.

        Args:
            p: the point, a Vector3f or any length-3 array-like.

        Returns:
            The transformed point.

        Raises:
            ZeroDivisionError: if the point maps to w = 0.
        """
        return Vector3f.from_unsafe(transform_point(self.m.m, _as_float3(p)))

    def eval_vector(self, v: VectorLike) -> Vector3f:
        """
        Apply this transform to a free vector (w = 0).

        Only the upper-left 3x3 block is used. This is wrong for surface
        normals, which need eval_normal.
        """
        return Vector3f.from_unsafe(transform_vector(self.m.m, _as_float3(v)))

    def eval_normal(self, n: VectorLike) -> Vector3f:
        """
        Apply this transform to a surface normal.

        Uses the inverse-transpose of the upper-left 3x3 block so the result
        stays perpendicular to transformed surfaces. The result is not
        renormalized.

        Raises:
            ZeroDivisionError: if the linear part is singular.
        """
        return Vector3f.from_unsafe(transform_normal(self.m.m, _as_float3(n)))

    ########
    # Algebra
    #

    def inverse(self) -> "Transform":
        """
        Returns:
            The Transform undoing this one.

        Raises:
            ZeroDivisionError: if the matrix is singular.
        """
        return Transform(self.m.inverse())

    def compose(self, other: "Transform") -> "Transform":
        """
        Compose two transforms.

        Args:
            other: the transform applied first.

        Returns:
            A Transform equivalent to applying `other`, then `self`.
        """
        return Transform(self.m @ other.m)

    def allclose(self, other: "Transform", atol: float = 1e-6) -> bool:
        return self.m.allclose(other.m, atol=atol)

    def __mul__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        return self.compose(other)

    __matmul__ = __mul__

    ########
    # Named constructors
    #

    @classmethod
    def translate(cls, x: float, y: float, z: float) -> "Transform":
        """Identity with (x, y, z) in the translation column."""
        return cls(Matrix4x4.new(
            1.0, 0.0, 0.0, x,
            0.0, 1.0, 0.0, y,
            0.0, 0.0, 1.0, z,
            0.0, 0.0, 0.0, 1.0))

    @classmethod
    def scale(cls, x: float, y: float, z: float) -> "Transform":
        """Diagonal (x, y, z, 1)."""
        return cls(Matrix4x4.new(
            x, 0.0, 0.0, 0.0,
            0.0, y, 0.0, 0.0,
            0.0, 0.0, z, 0.0,
            0.0, 0.0, 0.0, 1.0))

    @classmethod
    def rotate_x(cls, theta: float) -> "Transform":
        """
        Right-handed rotation about the x axis.

        Args:
            theta: angle in degrees.
        """
        theta = np_radians(theta)
        cost = np_cos(theta)
        sint = np_sin(theta)
        return cls(Matrix4x4.new(
            1.0, 0.0, 0.0, 0.0,
            0.0, cost, -sint, 0.0,
            0.0, sint, cost, 0.0,
            0.0, 0.0, 0.0, 1.0))

    @classmethod
    def rotate_y(cls, theta: float) -> "Transform":
        """
        Right-handed rotation about the y axis.

        Args:
            theta: angle in degrees.
        """
        theta = np_radians(theta)
        cost = np_cos(theta)
        sint = np_sin(theta)
        return cls(Matrix4x4.new(
            cost, 0.0, sint, 0.0,
            0.0, 1.0, 0.0, 0.0,
            -sint, 0.0, cost, 0.0,
            0.0, 0.0, 0.0, 1.0))

    @classmethod
    def rotate_z(cls, theta: float) -> "Transform":
        """
        Right-handed rotation about the z axis.

        Args:
            theta: angle in degrees.
        """
        theta = np_radians(theta)
        cost = np_cos(theta)
        sint = np_sin(theta)
        return cls(Matrix4x4.new(
            cost, -sint, 0.0, 0.0,
            sint, cost, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0))

    @classmethod
    def look_at(cls, pos: VectorLike, look: VectorLike, up: VectorLike) -> "Transform":
        """
        Build a camera-to-world frame at `pos` whose z axis points at `look`.

        The columns of the matrix are right, up, forward and pos, where
        forward = norm(look - pos), right = norm(norm(up) x forward) and
        up = forward x right.

        Args:
            pos: camera position.
            look: point the camera looks at.
            up: approximate up direction, need not be unit length.

        Returns:
            An orthonormal rotation plus translation to `pos`. When `up` is
            parallel to the view direction (or `pos == look`) the affected
            columns are zero vectors.
        """
        pos = Vector3f.from_array(pos)
        look = Vector3f.from_array(look)
        up = Vector3f.from_array(up)

        forward = (look - pos).norm()  # where the z axis maps to
        right = up.norm().cross(forward).norm()
        newup = forward.cross(right)

        if right.len_squared() == 0.0:
            logger.debug(
                "Degenerate look_at frame: pos=%s look=%s up=%s", pos, look, up)

        return cls(Matrix4x4.new(
            right.x, newup.x, forward.x, pos.x,
            right.y, newup.y, forward.y, pos.y,
            right.z, newup.z, forward.z, pos.z,
            0.0, 0.0, 0.0, 1.0))
