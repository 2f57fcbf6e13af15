import unittest

import numpy as np

from tridiagonalization import ContractViolation, HouseholderSequence, NotInitializedError, Tridiagonalization

from ._matrices import make_random_hermitian, reconstruction_tol


def off_band_mask(n: int) -> np.ndarray:
    rows, cols = np.indices((n, n))
    return np.abs(rows - cols) > 1


class TestTridiagonalization(unittest.TestCase):
    def _run_case(self, n: int, dtype) -> None:
        A = make_random_hermitian(n, dtype, seed=1000 + n)
        tri = Tridiagonalization(size=n).compute(A)

        Q = tri.matrix_q().materialize()
        T = tri.matrix_t()
        tol = reconstruction_tol(A)

        # Reconstruction and orthogonality.
        np.testing.assert_allclose(Q @ T @ Q.conj().T, A, atol=tol)
        np.testing.assert_allclose(Q.conj().T @ Q, np.eye(n), atol=tol)

        # T is tridiagonal, Hermitian, with a real band.
        self.assertEqual(T.shape, (n, n))
        np.testing.assert_array_equal(T[off_band_mask(n)], 0)
        np.testing.assert_array_equal(np.imag(T), 0)
        np.testing.assert_array_equal(T, T.conj().T)
        np.testing.assert_array_equal(T.diagonal(), tri.diagonal())
        np.testing.assert_array_equal(np.diagonal(T, -1), tri.sub_diagonal())

        self.assertEqual(tri.householder_coefficients().shape, (n - 1,))
        self.assertEqual(tri.diagonal().shape, (n,))
        self.assertEqual(tri.sub_diagonal().shape, (n - 1,))

    def test_float64(self):
        for n in (1, 2, 3, 4, 8, 17, 40):
            self._run_case(n, np.float64)

    def test_complex128(self):
        for n in (1, 2, 3, 6, 19):
            self._run_case(n, np.complex128)

    def test_complex64(self):
        A = make_random_hermitian(10, np.complex64, seed=9)
        tri = Tridiagonalization(A)
        self.assertEqual(tri.packed_matrix().dtype, np.complex64)
        self.assertEqual(tri.diagonal().dtype, np.float32)
        Q = tri.matrix_q().materialize()
        np.testing.assert_allclose(Q @ tri.matrix_t() @ Q.conj().T, A, atol=1e-4)

    def test_one_by_one(self):
        tri = Tridiagonalization([[7.0]])
        np.testing.assert_array_equal(tri.diagonal(), [7.0])
        self.assertEqual(tri.sub_diagonal().shape, (0,))
        np.testing.assert_array_equal(tri.matrix_q().materialize(), [[1.0]])
        np.testing.assert_array_equal(tri.matrix_t(), [[7.0]])

    def test_scenario_matches_closed_form(self):
        A = np.array([[4.0, 1.0, -2.0], [1.0, 2.0, 0.0], [-2.0, 0.0, 3.0]])
        tri = Tridiagonalization(A)
        np.testing.assert_allclose(tri.diagonal(), [4.0, 2.8, 2.2], atol=1e-14)
        np.testing.assert_allclose(tri.sub_diagonal(), [np.sqrt(5.0), 0.4], atol=1e-14)

    def test_compute_returns_self(self):
        tri = Tridiagonalization()
        self.assertIs(tri.compute(np.eye(3)), tri)
        self.assertTrue(tri.is_initialized)

    def test_constructor_with_matrix_computes(self):
        A = make_random_hermitian(5, np.float64, seed=2)
        tri = Tridiagonalization(A)
        self.assertTrue(tri.is_initialized)
        self.assertEqual(tri.size, 5)

    def test_input_is_copied(self):
        A = make_random_hermitian(5, np.float64, seed=3)
        before = A.copy()
        tri = Tridiagonalization(A)
        np.testing.assert_array_equal(A, before)
        A[:] = 0
        self.assertNotEqual(np.abs(tri.diagonal()).sum(), 0)

    def test_packed_matrix_layout(self):
        A = make_random_hermitian(6, np.float64, seed=4)
        tri = Tridiagonalization(A)
        packed = tri.packed_matrix()
        np.testing.assert_array_equal(np.triu(packed, 1), np.triu(A, 1))
        np.testing.assert_array_equal(packed.diagonal(), tri.diagonal())
        np.testing.assert_array_equal(np.diagonal(packed, -1), tri.sub_diagonal())

        # Reflector k is [1, packed[k+2:, k]] acting from row k+1.
        seq = tri.matrix_q()
        for k in range(len(seq)):
            np.testing.assert_array_equal(seq.essential_vector(k), packed[k + 2 :, k])

    def test_accessors_are_idempotent(self):
        tri = Tridiagonalization(make_random_hermitian(7, np.complex128, seed=5))
        d1, e1, p1, h1 = tri.diagonal().copy(), tri.sub_diagonal().copy(), tri.packed_matrix().copy(), tri.householder_coefficients()
        tri.matrix_t()
        tri.matrix_q().materialize()
        np.testing.assert_array_equal(tri.diagonal(), d1)
        np.testing.assert_array_equal(tri.sub_diagonal(), e1)
        np.testing.assert_array_equal(tri.packed_matrix(), p1)
        np.testing.assert_array_equal(tri.householder_coefficients(), h1)

    def test_views_are_read_only(self):
        tri = Tridiagonalization(make_random_hermitian(4, np.float64, seed=6))
        for view in (tri.diagonal(), tri.sub_diagonal(), tri.packed_matrix()):
            with self.assertRaises(ValueError):
                view[0] = 1.0

    def test_returned_values_are_independent(self):
        tri = Tridiagonalization(make_random_hermitian(4, np.float64, seed=7))
        h = tri.householder_coefficients()
        h[:] = 0
        self.assertFalse(np.all(tri.householder_coefficients() == 0))
        T = tri.matrix_t()
        T[:] = 0
        self.assertFalse(np.all(tri.matrix_t() == 0))

    def test_matrix_q_is_lazy_and_survives_recompute(self):
        A = make_random_hermitian(6, np.float64, seed=8)
        tri = Tridiagonalization(A)
        q = tri.matrix_q()
        self.assertIsInstance(q, HouseholderSequence)
        Q = q.materialize()

        x = np.arange(6.0)
        np.testing.assert_allclose(q @ x, Q @ x, atol=1e-13)
        np.testing.assert_allclose(q.H @ (q @ x), x, atol=1e-12)

        tri.compute(make_random_hermitian(6, np.float64, seed=9))
        np.testing.assert_array_equal(q.materialize(), Q)

    def test_resize_between_computes(self):
        tri = Tridiagonalization(size=3)
        for n in (8, 3, 12, 1, 5):
            A = make_random_hermitian(n, np.float64, seed=300 + n)
            tri.compute(A)
            self.assertEqual(tri.size, n)
            self.assertEqual(tri.householder_coefficients().shape, (n - 1,))
            fresh = Tridiagonalization(A)
            np.testing.assert_array_equal(tri.packed_matrix(), fresh.packed_matrix())
            np.testing.assert_array_equal(tri.householder_coefficients(), fresh.householder_coefficients())
            Q = tri.matrix_q().materialize()
            np.testing.assert_allclose(Q @ tri.matrix_t() @ Q.T, A, atol=reconstruction_tol(A))

    def test_dtype_change_between_computes(self):
        tri = Tridiagonalization(make_random_hermitian(4, np.float64, seed=10))
        A = make_random_hermitian(4, np.complex128, seed=11)
        tri.compute(A)
        self.assertEqual(tri.packed_matrix().dtype, np.complex128)
        Q = tri.matrix_q().materialize()
        np.testing.assert_allclose(Q @ tri.matrix_t() @ Q.conj().T, A, atol=reconstruction_tol(A))

    def test_uninitialized_access_fails(self):
        tri = Tridiagonalization(size=4)
        self.assertFalse(tri.is_initialized)
        for accessor in (
            tri.householder_coefficients,
            tri.packed_matrix,
            tri.matrix_q,
            tri.matrix_t,
            tri.diagonal,
            tri.sub_diagonal,
        ):
            with self.assertRaises(NotInitializedError):
                accessor()

    def test_rejects_non_square_input(self):
        tri = Tridiagonalization()
        for bad in (np.zeros((2, 3)), np.zeros(3), np.zeros((0, 0))):
            with self.assertRaises(ContractViolation):
                tri.compute(bad)
        with self.assertRaises(ContractViolation):
            Tridiagonalization(size=0)

    def test_failed_compute_keeps_previous_state(self):
        tri = Tridiagonalization(np.eye(3))
        with self.assertRaises(ContractViolation):
            tri.compute(np.zeros((2, 3)))
        self.assertTrue(tri.is_initialized)
        np.testing.assert_array_equal(tri.diagonal(), [1.0, 1.0, 1.0])


if __name__ == "__main__":
    unittest.main()
