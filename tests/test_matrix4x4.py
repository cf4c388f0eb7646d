import unittest
import copy
import numpy as np
from pathtrace import Matrix4x4, Float, Int


class TestMatrixCreation(unittest.TestCase):
    def test_new_row_major(self):
        m = Matrix4x4.new(*range(16))
        np.testing.assert_array_equal(m.m, np.arange(16).reshape(4, 4))
        self.assertEqual(m[1][2], 6)
        self.assertEqual(m[3, 0], 12)
        self.assertEqual(m.dtype, np.float32)

    def test_new_needs_sixteen_values(self):
        with self.assertRaises(ValueError):
            Matrix4x4.new(*range(15))
        with self.assertRaises(ValueError):
            Matrix4x4.new(*range(17))

    def test_wrap_array(self):
        m = Matrix4x4(np.eye(4))
        self.assertEqual(m.dtype, np.float32)
        np.testing.assert_array_equal(m.m, np.eye(4))

        with self.assertRaises(ValueError):
            Matrix4x4(np.eye(3))

    def test_unsupported_scalar_type(self):
        with self.assertRaises(TypeError):
            Matrix4x4(np.eye(4), dtype=np.float64)
        with self.assertRaises(TypeError):
            Matrix4x4.new_ident(1.0, dtype=np.complex64)

    def test_new_ident(self):
        np.testing.assert_array_equal(Matrix4x4.new_ident(1.0).m, np.eye(4))

        # other diagonal values give a uniform scale, not an identity
        m = Matrix4x4.new_ident(2.0)
        np.testing.assert_array_equal(m.m, np.eye(4) * 2.0)
        self.assertEqual(m[3][3], 2.0)

        i = Matrix4x4.new_ident(1, dtype=Int)
        self.assertEqual(i.dtype, np.int32)
        np.testing.assert_array_equal(i.m, np.eye(4, dtype=np.int32))


class TestMatrixAlgebra(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(3)
        self.a = Matrix4x4(rng.uniform(-2, 2, (4, 4)))
        self.b = Matrix4x4(rng.uniform(-2, 2, (4, 4)))
        self.c = Matrix4x4(rng.uniform(-2, 2, (4, 4)))
        self.I = Matrix4x4.new_ident(1.0)

    def test_product_matches_numpy(self):
        np.testing.assert_allclose((self.a * self.b).m, self.a.m @ self.b.m, atol=1e-5)
        np.testing.assert_allclose((self.a @ self.b).m, self.a.m @ self.b.m, atol=1e-5)

    def test_identity_is_neutral(self):
        self.assertTrue((self.a * self.I).allclose(self.a))
        self.assertTrue((self.I * self.a).allclose(self.a))

    def test_associative_not_commutative(self):
        left = (self.a * self.b) * self.c
        right = self.a * (self.b * self.c)
        self.assertTrue(left.allclose(right, atol=1e-4))
        self.assertFalse((self.a * self.b).allclose(self.b * self.a, atol=1e-3))

    def test_integer_product(self):
        a = Matrix4x4(np.arange(16).reshape(4, 4), dtype=Int)
        b = Matrix4x4.new_ident(2, dtype=Int)
        out = a * b
        self.assertEqual(out.dtype, np.int32)
        np.testing.assert_array_equal(out.m, np.arange(16).reshape(4, 4) * 2)

    def test_mixed_dtype_product_rejected(self):
        with self.assertRaises(TypeError):
            Matrix4x4.new_ident(1, dtype=Int) * self.I

    def test_inverse(self):
        inv = self.a.inverse()
        np.testing.assert_allclose((inv * self.a).m, np.eye(4), atol=1e-3)
        np.testing.assert_allclose((self.a * inv).m, np.eye(4), atol=1e-3)
        np.testing.assert_allclose(inv.m, np.linalg.inv(self.a.m.astype(np.float64)), rtol=1e-3, atol=1e-4)
        self.assertEqual(inv.dtype, np.float32)

    def test_inverse_of_uniform_scale(self):
        inv = Matrix4x4.new_ident(4.0).inverse()
        np.testing.assert_allclose(inv.m, np.eye(4) * 0.25)

    def test_singular_inverse_raises(self):
        singular = Matrix4x4.new(
            1, 2, 3, 4,
            2, 4, 6, 8,
            0, 0, 1, 0,
            0, 0, 0, 1)
        with self.assertRaises(ZeroDivisionError):
            singular.inverse()
        with self.assertRaises(ZeroDivisionError):
            Matrix4x4.new_ident(0.0).inverse()

    def test_integer_inverse_rejected(self):
        with self.assertRaises(TypeError):
            Matrix4x4.new_ident(1, dtype=Int).inverse()

    def test_determinant_and_transpose(self):
        self.assertAlmostEqual(float(Matrix4x4.new_ident(2.0).determinant()), 16.0, places=5)
        np.testing.assert_allclose(
            float(self.a.determinant()), np.linalg.det(self.a.m.astype(np.float64)), rtol=1e-4, atol=1e-4)
        np.testing.assert_array_equal(self.a.transpose().m, self.a.m.T)


class TestMatrixDunders(unittest.TestCase):
    def test_eq(self):
        self.assertEqual(Matrix4x4.new_ident(1.0), Matrix4x4(np.eye(4)))
        self.assertNotEqual(Matrix4x4.new_ident(1.0), Matrix4x4.new_ident(2.0))
        self.assertFalse(Matrix4x4.new_ident(1.0) == np.eye(4))

    def test_array_input_is_copied(self):
        for dtype in (np.float32, np.int32):
            arr = np.eye(4, dtype=dtype)
            m = Matrix4x4(arr, dtype=dtype)
            arr[0, 0] = 7
            self.assertEqual(m[0][0], 1)

    def test_copy_is_independent(self):
        m = Matrix4x4.new_ident(1.0)
        c = copy.copy(m)
        c.m[0, 3] = 5.0
        self.assertEqual(m[0][3], 0.0)

    def test_repr(self):
        r = repr(Matrix4x4.new_ident(1.0, dtype=Float))
        self.assertIn("Matrix4x4", r)
        self.assertIn("float32", r)


if __name__ == "__main__":
    unittest.main()
