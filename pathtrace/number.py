# number.py

import numpy as np
from numpy import float32 as np_float32
from numpy import int32 as np_int32
from typing import Union

# scalar type used for all geometric computation
Float = np_float32

# integer scalar, used for index/count style vectors
Int = np_int32

# the closed set of scalar types a Vector3 or Matrix4x4 may hold
NUMBER_TYPES = (np.dtype(Int), np.dtype(Float))

Scalar = Union[int, float, np.integer, np.floating]


def as_number(dtype) -> np.dtype:
    """
    Validate a dtype against the supported Number types.

    Args:
        dtype: anything accepted by np.dtype.

    Returns:
        The normalized np.dtype.

    Raises:
        TypeError: if the dtype is not one of NUMBER_TYPES.
    """
    dt = np.dtype(dtype)
    if dt not in NUMBER_TYPES:
        raise TypeError(
            f"Unsupported scalar type {dt}, expected one of {[str(t) for t in NUMBER_TYPES]}")
    return dt


def is_float(dtype) -> bool:
    """True if the dtype belongs to the floating point specialization."""
    return np.issubdtype(np.dtype(dtype), np.floating)
