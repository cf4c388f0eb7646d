# matrix4x4.py

import numpy as np
from numpy import array as np_array
from numpy import array_equal as np_array_equal
from numpy import allclose as np_allclose
from numpy import array2string as np_array2string
from numpy import ndarray
from typing import Union
from pathtrace.number import Float, Scalar, as_number, is_float
from pathtrace.kernels import det4, inv4, matmul4


class Matrix4x4:
    """
    A 4x4 matrix of a Number scalar type, indexed row-major as m[row][col].

    Attributes:
        m (np.ndarray): (4, 4) array of scalars.
    """
    __slots__ = ('m',)

    def __init__(self, matrix: Union[ndarray, list, tuple], dtype=Float):
        matrix = np_array(matrix, dtype=as_number(dtype))
        if matrix.shape != (4, 4):
            raise ValueError(f"Invalid matrix shape: {matrix.shape}")
        self.m = matrix

    @classmethod
    def new(cls, *values: Scalar, dtype=Float) -> "Matrix4x4":
        """
        Create a matrix from 16 scalars given in row-major order.

        Args:
            *values: m00, m01, m02, m03, m10, ..., m33.
            dtype: scalar type of the matrix.

        Returns:
            A new Matrix4x4.
        """
        if len(values) != 16:
            raise ValueError(f"Expected 16 values, got {len(values)}")
        return cls(np.array(values, dtype=as_number(dtype)).reshape((4, 4)), dtype=dtype)

    @classmethod
    def new_ident(cls, diag: Scalar = 1.0, dtype=Float) -> "Matrix4x4":
        """
        Create a diagonal matrix with `diag` on every diagonal entry.

        A `diag` of 1 gives the identity; any other value gives a uniform
        scale of the homogeneous coordinates.
        """
        dt = as_number(dtype)
        return cls.from_unsafe(np.eye(4, dtype=dt) * dt.type(diag))

    @classmethod
    def from_unsafe(cls, matrix: ndarray) -> "Matrix4x4":
        """Wrap a (4, 4) array of a supported dtype without checking it."""
        instance = object.__new__(cls)
        instance.m = matrix
        return instance

    @property
    def dtype(self) -> np.dtype:
        return self.m.dtype

    def determinant(self):
        return det4(self.m)

    def transpose(self) -> "Matrix4x4":
        return self.from_unsafe(self.m.T.copy())

    def inverse(self) -> "Matrix4x4":
        """
        Invert via the adjugate over the determinant.

        Returns:
            The matrix whose product with this one is the identity.

        Raises:
            ZeroDivisionError: if the matrix is singular.
            TypeError: if the matrix holds integers.
        """
        if not is_float(self.m.dtype):
            raise TypeError("Only floating point matrices can be inverted")
        return self.from_unsafe(inv4(self.m))

    def allclose(self, other: "Matrix4x4", atol: float = 1e-6) -> bool:
        return bool(np_allclose(self.m, other.m, atol=atol))

    #########
    # Dunder methods
    #

    def __matmul__(self, other: "Matrix4x4") -> "Matrix4x4":
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        if other.m.dtype != self.m.dtype:
            raise TypeError(
                f"Cannot multiply {self.m.dtype} and {other.m.dtype} matrices")
        return self.from_unsafe(matmul4(self.m, other.m))

    __mul__ = __matmul__

    def __getitem__(self, index):
        return self.m[index]

    def __eq__(self, other: "Matrix4x4") -> bool:
        return isinstance(other, Matrix4x4) and np_array_equal(self.m, other.m)

    __hash__ = None

    def __copy__(self) -> "Matrix4x4":
        return self.from_unsafe(self.m.copy())

    def __repr__(self) -> str:
        return f"Matrix4x4({np_array2string(self.m, separator=', ')}, dtype={self.m.dtype})"
