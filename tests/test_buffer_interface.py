"""Tests for the caller-provided buffer interface (get_eigen)."""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from spectral_eigen.matrices import random_symmetric_matrix
from spectral_eigen.solver import get_eigen

SENTINEL = -7.0


def buffers(n, k):
    return np.full(k, SENTINEL), np.full(n * k, SENTINEL)


class TestGetEigen:
    def test_writes_descending_values(self):
        M = np.diag([1.0, 4.0, 2.0, 3.0])
        vals, vecs = buffers(4, 2)
        assert get_eigen(4, M.ravel(), vals, vecs, 2)
        np.testing.assert_allclose(vals, [4.0, 3.0], atol=1e-10)

    def test_eigenvector_layout(self):
        """Eigenvector i occupies N consecutive entries."""
        M = np.diag([1.0, 4.0, 2.0, 3.0])
        vals, vecs = buffers(4, 2)
        assert get_eigen(4, M, vals, vecs, 2)
        np.testing.assert_allclose(np.abs(vecs[0:4]), [0.0, 1.0, 0.0, 0.0], atol=1e-8)
        np.testing.assert_allclose(np.abs(vecs[4:8]), [0.0, 0.0, 0.0, 1.0], atol=1e-8)

    def test_matches_eigen_equation(self):
        n, k = 20, 3
        M = random_symmetric_matrix(n, seed=6)
        vals, vecs = buffers(n, k)
        assert get_eigen(n, M.ravel(), vals, vecs, k)
        for i in range(k):
            v = vecs[i * n:(i + 1) * n]
            np.testing.assert_allclose(M @ v, vals[i] * v, atol=1e-7)

    def test_larger_buffers_keep_tail(self):
        vals = np.full(5, SENTINEL)
        vecs = np.full(20, SENTINEL)
        assert get_eigen(3, np.eye(3), vals, vecs, 2)
        np.testing.assert_array_equal(vals[2:], SENTINEL)
        np.testing.assert_array_equal(vecs[6:], SENTINEL)

    def test_two_dimensional_buffers(self):
        """Buffers of any shape are filled in flat order."""
        vals = np.full((1, 2), SENTINEL)
        vecs = np.full((2, 3), SENTINEL)
        assert get_eigen(3, np.diag([3.0, 2.0, 1.0]), vals, vecs, 2)
        np.testing.assert_allclose(vals.ravel(), [3.0, 2.0], atol=1e-10)
        np.testing.assert_allclose(np.abs(vecs), np.eye(3)[:2], atol=1e-8)


class TestGetEigenInvalid:
    def assert_untouched(self, vals, vecs):
        np.testing.assert_array_equal(vals, SENTINEL)
        np.testing.assert_array_equal(vecs, SENTINEL)

    def test_zero_range(self):
        vals, vecs = buffers(3, 1)
        assert not get_eigen(3, np.eye(3), vals, vecs, 0)
        self.assert_untouched(vals, vecs)

    def test_range_exceeds_dimension(self):
        vals, vecs = buffers(3, 4)
        assert not get_eigen(3, np.eye(3), vals, vecs, 4)
        self.assert_untouched(vals, vecs)

    def test_bool_dimension(self):
        vals, vecs = buffers(1, 1)
        assert not get_eigen(True, np.ones(1), vals, vecs, 1)
        self.assert_untouched(vals, vecs)

    def test_zero_dimension(self):
        vals, vecs = buffers(1, 1)
        assert not get_eigen(0, np.zeros(0), vals, vecs, 1)
        self.assert_untouched(vals, vecs)

    def test_none_buffers(self):
        vals, vecs = buffers(3, 1)
        assert not get_eigen(3, np.eye(3), None, vecs, 1)
        assert not get_eigen(3, np.eye(3), vals, None, 1)
        self.assert_untouched(vals, vecs)

    def test_none_matrix(self):
        vals, vecs = buffers(3, 1)
        assert not get_eigen(3, None, vals, vecs, 1)
        self.assert_untouched(vals, vecs)

    def test_undersized_buffers(self):
        vals, vecs = np.full(1, SENTINEL), np.full(6, SENTINEL)
        assert not get_eigen(3, np.eye(3), vals, vecs, 2)
        self.assert_untouched(vals, vecs)

    def test_read_only_buffer(self):
        vals, vecs = buffers(3, 1)
        vals.setflags(write=False)
        assert not get_eigen(3, np.eye(3), vals, vecs, 1)
        self.assert_untouched(vals, vecs)

    def test_list_buffer_rejected(self):
        vals = [SENTINEL]
        assert not get_eigen(3, np.eye(3), vals, np.full(3, SENTINEL), 1)
        assert vals == [SENTINEL]

    def test_failed_solve_leaves_buffers(self):
        vals, vecs = buffers(3, 2)
        M = np.full((3, 3), np.nan)
        assert not get_eigen(3, M, vals, vecs, 2)
        self.assert_untouched(vals, vecs)
