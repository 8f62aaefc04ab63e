"""Symmetric test matrices with known or realistic spectra."""

import numpy as np
import scipy.sparse as sp
from scipy.stats import ortho_group
from sklearn.neighbors import kneighbors_graph


def random_symmetric_matrix(n, seed=0):
    """Dense symmetric matrix ``(A + A^T) / 2`` with standard normal entries."""
    rng = np.random.RandomState(seed)
    A = rng.randn(n, n)
    return 0.5 * (A + A.T)


def matrix_with_spectrum(eigenvalues, seed=0):
    """Symmetric matrix ``Q diag(eigenvalues) Q^T`` for a random orthogonal Q.

    Parameters
    ----------
    eigenvalues : array_like of shape (N,)
    seed : int

    Returns
    -------
    ndarray of shape (N, N)
    """
    eigenvalues = np.asarray(eigenvalues, dtype=np.float64)
    n = eigenvalues.shape[0]
    if n == 1:
        return eigenvalues.reshape(1, 1).copy()
    Q = ortho_group.rvs(n, random_state=seed)
    M = (Q * eigenvalues) @ Q.T
    return 0.5 * (M + M.T)


def near_degenerate_matrix(n, k, gap=1e-8, seed=0):
    """Matrix whose top ``k`` eigenvalues form a tight cluster above the rest.

    The cluster sits at ``1 + i * gap`` for ``i < k`` and the remaining
    eigenvalues are spread over ``[-1, 1 - 10 * gap]``, which makes Lanczos
    separate the leading eigenpairs slowly.

    Returns
    -------
    M : ndarray of shape (n, n)
    eigenvalues : ndarray of shape (n,), descending
    """
    if not 0 < k < n:
        raise ValueError(f"need 0 < k < n, got k={k}, n={n}")
    cluster = 1.0 + gap * np.arange(k)[::-1]
    bulk = np.linspace(1.0 - 10 * gap, -1.0, n - k)
    eigenvalues = np.concatenate([cluster, bulk])
    return matrix_with_spectrum(eigenvalues, seed=seed), eigenvalues


def knn_affinity_matrix(points, n_neighbors=12, sigma=None):
    """Symmetric Gaussian k-NN affinity matrix of a point cloud.

    Parameters
    ----------
    points : ndarray of shape (N, D)
    n_neighbors : int
    sigma : float or None
        Kernel bandwidth. If None, uses the median of nonzero distances.

    Returns
    -------
    W : sparse CSR matrix of shape (N, N)
        ``W[i, j] = exp(-d_ij^2 / (2 sigma^2))`` for k-NN pairs, zero elsewhere.
    """
    n_points = points.shape[0]
    k = min(n_neighbors, n_points - 1)
    A = kneighbors_graph(points, n_neighbors=k, mode="distance", include_self=False)
    A = sp.csr_matrix(A)
    A = A.maximum(A.T)  # symmetrize via element-wise max
    A = sp.csr_matrix(A)
    if sigma is None:
        sigma = float(np.median(A.data)) if A.nnz else 1.0
    A.data = np.exp(-(A.data**2) / (2.0 * sigma**2))
    return A
