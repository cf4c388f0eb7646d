# kernels.py

import numpy as np
from numba import njit
from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(cache=True)
def cross3(a, b):
    """Right-handed cross product of two length-3 arrays."""
    out = np.empty_like(a)
    out[0] = a[1] * b[2] - a[2] * b[1]
    out[1] = a[2] * b[0] - a[0] * b[2]
    out[2] = a[0] * b[1] - a[1] * b[0]
    return out


@njit(cache=True)
def matmul4(a, b):
    """Product of two 4x4 matrices, r[i, j] = sum_k a[i, k] * b[k, j]."""
    out = np.zeros((4, 4), dtype=a.dtype)
    for i in range(4):
        for j in range(4):
            for k in range(4):
                out[i, j] += a[i, k] * b[k, j]
    return out


@njit(cache=True)
def det3(M):
    """Determinant of the upper-left 3 x 3 block."""
    return (
        M[0, 0] * (M[1, 1] * M[2, 2] - M[1, 2] * M[2, 1])
        - M[0, 1] * (M[1, 0] * M[2, 2] - M[1, 2] * M[2, 0])
        + M[0, 2] * (M[1, 0] * M[2, 1] - M[1, 1] * M[2, 0])
    )


@njit(cache=True)
def det4(m):
    """
    Determinant of a 4x4 matrix using the 12-subfactor scheme.

    Parameters
    ----------
    m : (4,4) float array

    Returns
    -------
    float
        det(m)
    """
    # sub-factors from the first two rows
    s0 = m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]
    s1 = m[0, 0] * m[1, 2] - m[1, 0] * m[0, 2]
    s2 = m[0, 0] * m[1, 3] - m[1, 0] * m[0, 3]
    s3 = m[0, 1] * m[1, 2] - m[1, 1] * m[0, 2]
    s4 = m[0, 1] * m[1, 3] - m[1, 1] * m[0, 3]
    s5 = m[0, 2] * m[1, 3] - m[1, 2] * m[0, 3]

    # complementary sub-factors from the last two rows
    c5 = m[2, 2] * m[3, 3] - m[3, 2] * m[2, 3]
    c4 = m[2, 1] * m[3, 3] - m[3, 1] * m[2, 3]
    c3 = m[2, 1] * m[3, 2] - m[3, 1] * m[2, 2]
    c2 = m[2, 0] * m[3, 3] - m[3, 0] * m[2, 3]
    c1 = m[2, 0] * m[3, 2] - m[3, 0] * m[2, 2]
    c0 = m[2, 0] * m[3, 1] - m[3, 0] * m[2, 1]

    return (
        s0 * c5 - s1 * c4 + s2 * c3
        + s3 * c2 - s4 * c1 + s5 * c0
    )


@njit(cache=True)
def inv4(m):
    """
    Analytic (adjugate over determinant) inverse of a 4x4 matrix.
    Raises ZeroDivisionError if the matrix is singular.
    """
    s0 = m[0, 0]*m[1, 1] - m[1, 0]*m[0, 1]
    s1 = m[0, 0]*m[1, 2] - m[1, 0]*m[0, 2]
    s2 = m[0, 0]*m[1, 3] - m[1, 0]*m[0, 3]
    s3 = m[0, 1]*m[1, 2] - m[1, 1]*m[0, 2]
    s4 = m[0, 1]*m[1, 3] - m[1, 1]*m[0, 3]
    s5 = m[0, 2]*m[1, 3] - m[1, 2]*m[0, 3]

    c5 = m[2, 2]*m[3, 3] - m[3, 2]*m[2, 3]
    c4 = m[2, 1]*m[3, 3] - m[3, 1]*m[2, 3]
    c3 = m[2, 1]*m[3, 2] - m[3, 1]*m[2, 2]
    c2 = m[2, 0]*m[3, 3] - m[3, 0]*m[2, 3]
    c1 = m[2, 0]*m[3, 2] - m[3, 0]*m[2, 2]
    c0 = m[2, 0]*m[3, 1] - m[3, 0]*m[2, 1]

    det = (s0*c5 - s1*c4 + s2*c3 + s3*c2 - s4*c1 + s5*c0)
    if det == 0.0:
        raise ZeroDivisionError("Matrix is singular and cannot be inverted")
    inv_det = 1.0 / det

    # adjugate (transposed cofactor matrix)
    out = np.empty((4, 4), dtype=m.dtype)

    out[0, 0] = (m[1, 1]*c5 - m[1, 2]*c4 + m[1, 3]*c3) * inv_det
    out[0, 1] = (-m[0, 1]*c5 + m[0, 2]*c4 - m[0, 3]*c3) * inv_det
    out[0, 2] = (m[3, 1]*s5 - m[3, 2]*s4 + m[3, 3]*s3) * inv_det
    out[0, 3] = (-m[2, 1]*s5 + m[2, 2]*s4 - m[2, 3]*s3) * inv_det

    out[1, 0] = (-m[1, 0]*c5 + m[1, 2]*c2 - m[1, 3]*c1) * inv_det
    out[1, 1] = (m[0, 0]*c5 - m[0, 2]*c2 + m[0, 3]*c1) * inv_det
    out[1, 2] = (-m[3, 0]*s5 + m[3, 2]*s2 - m[3, 3]*s1) * inv_det
    out[1, 3] = (m[2, 0]*s5 - m[2, 2]*s2 + m[2, 3]*s1) * inv_det

    out[2, 0] = (m[1, 0]*c4 - m[1, 1]*c2 + m[1, 3]*c0) * inv_det
    out[2, 1] = (-m[0, 0]*c4 + m[0, 1]*c2 - m[0, 3]*c0) * inv_det
    out[2, 2] = (m[3, 0]*s4 - m[3, 1]*s2 + m[3, 3]*s0) * inv_det
    out[2, 3] = (-m[2, 0]*s4 + m[2, 1]*s2 - m[2, 3]*s0) * inv_det

    out[3, 0] = (-m[1, 0]*c3 + m[1, 1]*c1 - m[1, 2]*c0) * inv_det
    out[3, 1] = (m[0, 0]*c3 - m[0, 1]*c1 + m[0, 2]*c0) * inv_det
    out[3, 2] = (-m[3, 0]*s3 + m[3, 1]*s1 - m[3, 2]*s0) * inv_det
    out[3, 3] = (m[2, 0]*s3 - m[2, 1]*s1 + m[2, 2]*s0) * inv_det

    return out


@njit(cache=True)
def transform_point(m, p):
    """
    Apply a 4x4 matrix to a point with an implicit w of 1.
    The result is divided by the resulting w unless it is exactly 1.
    Raises ZeroDivisionError if the resulting w is 0.
    """
    x = m[0, 0]*p[0] + m[0, 1]*p[1] + m[0, 2]*p[2] + m[0, 3]
    y = m[1, 0]*p[0] + m[1, 1]*p[1] + m[1, 2]*p[2] + m[1, 3]
    z = m[2, 0]*p[0] + m[2, 1]*p[1] + m[2, 2]*p[2] + m[2, 3]
    w = m[3, 0]*p[0] + m[3, 1]*p[1] + m[3, 2]*p[2] + m[3, 3]

    out = np.empty_like(p)
    if w == 1.0:
        out[0] = x
        out[1] = y
        out[2] = z
        return out

    if w == 0.0:
        raise ZeroDivisionError("Point maps to w = 0 and has no euclidean image")
    out[0] = x / w
    out[1] = y / w
    out[2] = z / w
    return out


@njit(cache=True)
def transform_vector(m, v):
    """Apply the upper-left 3x3 block of a 4x4 matrix to a free vector."""
    out = np.empty_like(v)
    out[0] = m[0, 0]*v[0] + m[0, 1]*v[1] + m[0, 2]*v[2]
    out[1] = m[1, 0]*v[0] + m[1, 1]*v[1] + m[1, 2]*v[2]
    out[2] = m[2, 0]*v[0] + m[2, 1]*v[1] + m[2, 2]*v[2]
    return out


@njit(cache=True)
def transform_normal(m, n):
    """
    Apply the inverse-transpose of the upper-left 3x3 block to a normal.
    Raises ZeroDivisionError if that block is singular.
    """
    d = det3(m)
    if d == 0.0:
        raise ZeroDivisionError("Linear part is singular, normals are undefined")
    invd = 1.0 / d

    # inverse of the 3x3 block, cofactor form
    i00 = (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1]) * invd
    i01 = -(m[0, 1] * m[2, 2] - m[0, 2] * m[2, 1]) * invd
    i02 = (m[0, 1] * m[1, 2] - m[0, 2] * m[1, 1]) * invd
    i10 = -(m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0]) * invd
    i11 = (m[0, 0] * m[2, 2] - m[0, 2] * m[2, 0]) * invd
    i12 = -(m[0, 0] * m[1, 2] - m[0, 2] * m[1, 0]) * invd
    i20 = (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0]) * invd
    i21 = -(m[0, 0] * m[2, 1] - m[0, 1] * m[2, 0]) * invd
    i22 = (m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]) * invd

    # transposed product
    out = np.empty_like(n)
    out[0] = i00*n[0] + i10*n[1] + i20*n[2]
    out[1] = i01*n[0] + i11*n[1] + i21*n[2]
    out[2] = i02*n[0] + i12*n[1] + i22*n[2]
    return out


if __name__ == "__main__":
    import timeit
    from scipy.spatial.transform import Rotation as R

    mat4 = np.eye(4, dtype=np.float32)
    mat4[:3, :3] = R.from_euler('xyz', [45, 45, 45], degrees=True).as_matrix() * 2.0
    mat4[:3, 3] = [1.0, 2.0, 3.0]
    p = np.array([1.0, 1.0, 1.0], dtype=np.float32)

    inv4(mat4)
    matmul4(mat4, mat4)
    transform_point(mat4, p)

    N = 1_000_000
    print("inv4:", timeit.timeit(lambda: inv4(mat4), number=N))
    print("np.linalg.inv:", timeit.timeit(lambda: np.linalg.inv(mat4), number=N))
    print("matmul4:", timeit.timeit(lambda: matmul4(mat4, mat4), number=N))
    print("transform_point:", timeit.timeit(lambda: transform_point(mat4, p), number=N))

    np.testing.assert_allclose(
        inv4(mat4) @ mat4, np.eye(4), atol=1e-5, err_msg="inv4 failed"
    )
