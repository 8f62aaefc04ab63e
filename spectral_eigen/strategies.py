"""Dense and iterative eigendecomposition strategies.

Both strategies take a symmetric matrix and an ``EigenRequest`` and return
either an ``EigenResult`` holding the top-k eigenpairs in descending order,
or a ``Failure``. Library exceptions from LAPACK/ARPACK are converted to
``Failure`` here so the orchestrator can decide whether to fall back.
"""

import logging

import numpy as np
import scipy.linalg as la
import scipy.sparse as sp
import scipy.sparse.linalg as sla
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence

from .results import EigenResult, Failure, FailureKind, sort_descending

logger = logging.getLogger(__name__)


def _all_finite(*arrays):
    return all(np.all(np.isfinite(a)) for a in arrays)


class EigenStrategy:
    """Interface shared by the decomposition strategies."""

    name = "strategy"

    def applicable(self, request):
        """Whether this strategy should be tried for ``request``."""
        return True

    def attempt(self, matrix, request):
        """Compute the top ``request.k`` eigenpairs of ``matrix``.

        Returns
        -------
        EigenResult or Failure
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class DenseFullSolver(EigenStrategy):
    """Full LAPACK decomposition (``scipy.linalg.eigh``), truncated to k.

    O(N^3) and deterministic; only fails on numerically anomalous input such
    as NaN or inf entries.
    """

    name = "dense"

    def attempt(self, matrix, request):
        dense = matrix.toarray() if sp.issparse(matrix) else matrix
        try:
            # eigh returns all N eigenvalues in ascending order
            eigenvalues, eigenvectors = la.eigh(dense)
        except (la.LinAlgError, ValueError) as exc:
            return Failure(FailureKind.COMPUTATION_FAILED, f"dense eigh failed: {exc}")

        if not _all_finite(eigenvalues, eigenvectors):
            return Failure(FailureKind.COMPUTATION_FAILED, "dense eigh returned non-finite values")

        eigenvalues, eigenvectors = sort_descending(eigenvalues, eigenvectors, request.k)
        return EigenResult(eigenvalues, eigenvectors)


class IterativePartialSolver(EigenStrategy):
    """Implicitly restarted Lanczos (ARPACK ``eigsh``) for the k largest eigenpairs.

    The Lanczos subspace holds ``min(subspace_factor * k, N)`` vectors. The
    start vector is drawn from ``np.random.RandomState(request.random_state)``
    so that repeated solves of the same matrix give the same answer.
    Only defined for a strict partial spectrum (k < N).
    """

    name = "iterative"

    def applicable(self, request):
        return request.method == "auto" and request.is_partial

    def attempt(self, matrix, request):
        n, k = request.dimension, request.k
        if k >= n:
            raise ValueError(f"iterative solver requires k < N, got k={k}, N={n}")

        entries = matrix.data if sp.issparse(matrix) else matrix
        if not _all_finite(entries):
            return Failure(FailureKind.CONVERGENCE_FAILED, "matrix has non-finite entries")

        rng = np.random.RandomState(request.random_state)
        v0 = rng.uniform(-1.0, 1.0, size=n).astype(matrix.dtype)
        # tolerance is floored at the working precision
        tol = request.tolerance
        if tol > 0:
            tol = max(tol, float(np.finfo(matrix.dtype).eps))

        logger.debug(
            "eigsh N=%d k=%d ncv=%d tol=%g maxiter=%d",
            n, k, request.subspace_size, tol, request.max_iter,
        )
        try:
            eigenvalues, eigenvectors = sla.eigsh(
                matrix,
                k=k,
                which="LA",
                ncv=request.subspace_size,
                tol=tol,
                maxiter=request.max_iter,
                v0=v0,
            )
        except ArpackNoConvergence as exc:
            n_converged = len(exc.eigenvalues)
            return Failure(
                FailureKind.CONVERGENCE_FAILED,
                f"{n_converged}/{k} eigenpairs converged: {exc}",
                n_converged=n_converged,
            )
        except ArpackError as exc:
            return Failure(FailureKind.CONVERGENCE_FAILED, f"ARPACK failed: {exc}")

        if len(eigenvalues) < k:
            return Failure(
                FailureKind.CONVERGENCE_FAILED,
                f"{len(eigenvalues)}/{k} eigenpairs converged",
                n_converged=len(eigenvalues),
            )
        if not _all_finite(eigenvalues, eigenvectors):
            return Failure(FailureKind.CONVERGENCE_FAILED, "ARPACK returned non-finite values")

        eigenvalues, eigenvectors = sort_descending(eigenvalues, eigenvectors, k)
        return EigenResult(eigenvalues, eigenvectors)


DEFAULT_STRATEGIES = (IterativePartialSolver(), DenseFullSolver())
