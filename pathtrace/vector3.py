# vector3.py

import numpy as np
from numpy import array as np_array
from numpy import asarray as np_asarray
from numpy import array_equal as np_array_equal
from numpy import allclose as np_allclose
from numpy import dot as np_dot
from numpy import sqrt as np_sqrt
from numpy import ndarray
from typing import Iterator, Union
from pathtrace.number import Float, Int, Scalar, as_number, is_float
from pathtrace.kernels import cross3


class Vector3:
    """
    A 3-component value of a Number scalar type.

    The same type is used for points and for free vectors; the distinction is
    made by the Transform method that consumes it. Concrete scalar types are
    provided by the subclasses Vector3f (Float) and Vector3i (Int).

    Attributes:
        v (np.ndarray): length-3 array holding x, y and z.
    """
    __slots__ = ("v",)
    dtype: np.dtype = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.dtype = as_number(cls.dtype)

    def __init__(self, x: Scalar = 0, y: Scalar = 0, z: Scalar = 0):
        if self.dtype is None:
            raise TypeError(
                "Vector3 is generic over its scalar, use Vector3f or Vector3i")
        self.v = np_array([x, y, z], dtype=self.dtype)

    @classmethod
    def new(cls, initial: Scalar) -> "Vector3":
        """
        Create a vector with all three components set to `initial`.

        Args:
            initial: value for x, y and z.

        Returns:
            A new vector.
        """
        return cls(initial, initial, initial)

    @classmethod
    def new_xyz(cls, x: Scalar, y: Scalar, z: Scalar) -> "Vector3":
        """Create a vector from explicit components."""
        return cls(x, y, z)

    @classmethod
    def from_array(cls, array: Union[ndarray, list, tuple, "Vector3"]) -> "Vector3":
        """
        Create a vector from any length-3 array-like.

        Raises:
            ValueError: if the input does not hold exactly three values.
        """
        if isinstance(array, Vector3):
            array = array.v
        arr = np_asarray(array)
        if arr.shape != (3,):
            raise ValueError(f"Invalid vector shape: {arr.shape}")
        return cls.from_unsafe(arr.astype(cls.dtype))

    @classmethod
    def from_unsafe(cls, array: ndarray) -> "Vector3":
        """Wrap a length-3 array of the right dtype without checking it."""
        instance = object.__new__(cls)
        instance.v = array
        return instance

    @property
    def x(self):
        return self.v[0]

    @property
    def y(self):
        return self.v[1]

    @property
    def z(self):
        return self.v[2]

    def copy(self) -> "Vector3":
        return self.from_unsafe(self.v.copy())

    def to_array(self) -> ndarray:
        """Return a copy of the components as a length-3 array."""
        return self.v.copy()

    def to_tuple(self) -> tuple:
        return tuple(self.v.tolist())

    #########
    # Arithmetic
    #

    def __add__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.from_unsafe(self.v + other.v)

    def __sub__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.from_unsafe(self.v - other.v)

    def __neg__(self) -> "Vector3":
        return self.from_unsafe(-self.v)

    def __mul__(self, scalar: Scalar) -> "Vector3":
        if not np.isscalar(scalar):
            return NotImplemented
        return self.from_unsafe((self.v * scalar).astype(self.dtype))

    __rmul__ = __mul__

    def __itruediv__(self, scalar: Scalar) -> "Vector3":
        """
        Divide each component in place.

        Float vectors follow IEEE semantics, so a zero divisor gives inf/nan
        components. Int vectors truncate toward zero and reject a zero divisor.
        """
        if not np.isscalar(scalar):
            return NotImplemented
        if is_float(self.dtype):
            with np.errstate(divide="ignore", invalid="ignore"):
                self.v /= self.dtype.type(scalar)
        else:
            if scalar == 0:
                raise ZeroDivisionError("Integer vector division by zero")
            self.v[:] = np.trunc(self.v / scalar)
        return self

    def __truediv__(self, scalar: Scalar) -> "Vector3":
        out = self.copy()
        out /= scalar
        return out

    #########
    # Dunder methods
    #

    def __eq__(self, other: "Vector3") -> bool:
        return type(self) == type(other) and np_array_equal(self.v, other.v)

    # mutable through /=, so unhashable
    __hash__ = None

    def __iter__(self) -> Iterator:
        return iter(self.v)

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int):
        return self.v[index]

    def __array__(self, dtype=None, copy=None) -> ndarray:
        if dtype is None or np.dtype(dtype) == self.v.dtype:
            return self.v if copy is False else self.v.copy()
        if copy is False:
            raise ValueError(f"Cannot view {self.v.dtype} components as {np.dtype(dtype)} without a copy")
        return self.v.astype(dtype)

    def __copy__(self) -> "Vector3":
        return self.copy()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(x={self.x}, y={self.y}, z={self.z})"


class Vector3i(Vector3):
    """Vector3 over the Int scalar."""
    __slots__ = ()
    dtype = Int


class Vector3f(Vector3):
    """Vector3 over the Float scalar, with the geometric operations."""
    __slots__ = ()
    dtype = Float

    def len_squared(self):
        """x² + y² + z²"""
        return np_dot(self.v, self.v)

    def len(self):
        """Euclidean length."""
        return np_sqrt(self.len_squared())

    def dot(self, other: "Vector3f"):
        return np_dot(self.v, other.v)

    def cross(self, other: "Vector3f") -> "Vector3f":
        """
        Right-handed cross product, (y z' - z y', z x' - x z', x y' - y x').

        Returns:
            A new vector orthogonal to both operands.
        """
        return self.from_unsafe(cross3(self.v, other.v))

    def norm_in(self) -> None:
        """
        Normalize in place.

        The zero vector stays the zero vector instead of turning into nan.
        Components are first scaled by the largest magnitude so the squared
        length cannot overflow or underflow float32.
        """
        peak = np.abs(self.v).max()
        if peak == 0.0:
            self.v[:] = 0.0
            return
        self /= peak
        self /= self.len()

    def norm(self) -> "Vector3f":
        """Return a unit-length copy, leaving this vector untouched."""
        new = self.copy()
        new.norm_in()
        return new

    def allclose(self, other: Union["Vector3f", ndarray, list, tuple], atol: float = 1e-6) -> bool:
        if isinstance(other, Vector3):
            other = other.v
        return bool(np_allclose(self.v, np_asarray(other, dtype=self.dtype), atol=atol))


VectorLike = Union[Vector3f, ndarray, list, tuple]
