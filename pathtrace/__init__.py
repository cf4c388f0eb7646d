"""
pathtrace: the affine geometry kernel of a path tracer. Vectors, 4x4 homogeneous
matrices and composable transforms used to place shapes and a camera in a scene.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from pathtrace.number import Float, Int
from pathtrace.vector3 import Vector3, Vector3f, Vector3i
from pathtrace.matrix4x4 import Matrix4x4
from pathtrace.transform import Transform

__all__ = [
    "Float",
    "Int",
    "Vector3",
    "Vector3f",
    "Vector3i",
    "Matrix4x4",
    "Transform",
]
