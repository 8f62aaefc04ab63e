"""Top-k eigenpairs of a symmetric matrix with iterative-first dispatch.

``EigenSolver.solve`` validates its input, then walks the applicable
strategies in order: ARPACK for a strict partial spectrum (k < N), then the
full LAPACK decomposition. A convergence shortfall in the iterative attempt
is logged and recovered by the dense fallback; only exhaustion of every
strategy is returned to the caller as a ``Failure``.
"""

import logging
import numbers
import time

import numpy as np
import scipy.sparse as sp

from .config import SolverConfig
from .results import EigenRequest, Failure, FailureKind, SolveReport, StrategyAttempt
from .strategies import DEFAULT_STRATEGIES

logger = logging.getLogger(__name__)


def _invalid(message):
    logger.debug("rejected solve request: %s", message)
    return Failure(FailureKind.INVALID_ARGUMENT, message)


def _is_positive_int(value):
    return (
        isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1
    )


def _working_dtype(dtype):
    return np.float32 if dtype == np.float32 else np.float64


def _as_square_matrix(matrix, dimension):
    """Coerce ``matrix`` to an N x N real array or sparse matrix.

    Returns ``(matrix, n)`` or a ``Failure``.
    """
    if matrix is None:
        return _invalid("matrix is None")
    if dimension is not None and not _is_positive_int(dimension):
        return _invalid(f"dimension must be a positive integer, got {dimension!r}")

    if sp.issparse(matrix):
        if matrix.dtype.kind not in "biuf":
            return _invalid(f"matrix must be real-valued, got dtype {matrix.dtype}")
        shape = matrix.shape
        if len(shape) != 2 or shape[0] != shape[1]:
            return _invalid(f"matrix must be square, got shape {shape}")
        arr = sp.csr_matrix(matrix, dtype=_working_dtype(matrix.dtype))
    else:
        arr = np.asarray(matrix)
        if arr.dtype.kind not in "biuf":
            return _invalid(f"matrix must be real-valued, got dtype {arr.dtype}")
        if arr.ndim == 1:
            if dimension is None:
                return _invalid("a flat matrix buffer needs an explicit dimension")
            if arr.size != dimension * dimension:
                return _invalid(
                    f"flat matrix buffer has {arr.size} entries, expected {dimension}^2"
                )
            arr = arr.reshape(dimension, dimension)
        elif arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            return _invalid(f"matrix must be square, got shape {arr.shape}")
        arr = arr.astype(_working_dtype(arr.dtype), copy=False)

    n = arr.shape[0]
    if n == 0:
        return _invalid("matrix dimension must be >= 1")
    if dimension is not None and dimension != n:
        return _invalid(f"dimension {dimension} does not match matrix shape {arr.shape}")
    return arr, n


class EigenSolver:
    """Compute the k largest eigenpairs of a symmetric matrix.

    The solver holds only immutable configuration, so one instance can be
    shared across threads.

    Parameters
    ----------
    config : SolverConfig or None
        Defaults for tolerance, iteration cap, subspace factor and method.
    on_report : callable or None
        Called with the ``SolveReport`` of every solve that reached a
        strategy, whether or not it succeeded.
    strategies : sequence of EigenStrategy or None
        Ordered strategies to try. Defaults to iterative then dense.
    """

    def __init__(self, config=None, on_report=None, strategies=None):
        self.config = config if config is not None else SolverConfig()
        self.on_report = on_report
        self.strategies = tuple(strategies) if strategies is not None else DEFAULT_STRATEGIES

    def solve(self, matrix, k, dimension=None, **options):
        """Return the ``k`` largest eigenpairs of ``matrix``.

        Parameters
        ----------
        matrix : ndarray of shape (N, N), flat ndarray of length N * N, or sparse matrix
            Symmetric real matrix. Symmetry is assumed, not checked.
        k : int
            Number of eigenpairs, 1 <= k <= N.
        dimension : int or None
            N. Required for a flat buffer, checked against the shape otherwise.
        **options
            Per-call ``SolverConfig`` overrides (``tolerance``, ``max_iter``,
            ``subspace_factor``, ``method``, ``random_state``).

        Returns
        -------
        EigenResult or Failure
        """
        config = self.config.with_overrides(**options)
        problems = config.problems()
        if problems:
            return _invalid("; ".join(problems))

        prepared = _as_square_matrix(matrix, dimension)
        if isinstance(prepared, Failure):
            return prepared
        arr, n = prepared

        if not isinstance(k, numbers.Integral) or isinstance(k, bool):
            return _invalid(f"k must be an integer, got {k!r}")
        if k < 1 or k > n:
            return _invalid(f"k must satisfy 1 <= k <= N={n}, got {k}")

        request = EigenRequest(
            dimension=n,
            k=int(k),
            tolerance=float(config.tolerance),
            max_iter=int(config.max_iter),
            subspace_factor=int(config.subspace_factor),
            method=config.method,
            random_state=int(config.random_state),
        )
        return self._dispatch(arr, request)

    def _dispatch(self, matrix, request):
        report = SolveReport(dimension=request.dimension, k=request.k)
        candidates = [s for s in self.strategies if s.applicable(request)]
        remaining = len(candidates)
        last_failure = None

        for strategy in candidates:
            remaining -= 1
            start = time.perf_counter()
            outcome = strategy.attempt(matrix, request)
            elapsed = time.perf_counter() - start

            if outcome.ok:
                report.attempts.append(
                    StrategyAttempt(strategy.name, True, elapsed, n_converged=request.k)
                )
                logger.debug(
                    "%s solver: N=%d k=%d in %.4fs",
                    strategy.name, request.dimension, request.k, elapsed,
                )
                outcome.report = report
                self._emit(report)
                return outcome

            report.attempts.append(
                StrategyAttempt(
                    strategy.name, False, elapsed,
                    n_converged=outcome.n_converged, message=outcome.message,
                )
            )
            last_failure = outcome
            if remaining:
                logger.warning(
                    "%s solver failed for N=%d k=%d after %.4fs (%s); falling back",
                    strategy.name, request.dimension, request.k, elapsed, outcome.message,
                )

        message = last_failure.message if last_failure is not None else "no applicable strategy"
        logger.warning(
            "eigendecomposition failed for N=%d k=%d: %s",
            request.dimension, request.k, message,
        )
        self._emit(report)
        return Failure(FailureKind.COMPUTATION_FAILED, message, report=report)

    def _emit(self, report):
        if self.on_report is not None:
            self.on_report(report)


def solve(matrix, k, dimension=None, on_report=None, **options):
    """Module-level shortcut for ``EigenSolver(on_report=on_report).solve(...)``."""
    return EigenSolver(on_report=on_report).solve(matrix, k, dimension=dimension, **options)


def compute_top_eigenpairs(matrix, k, dimension=None, **options):
    """Compute the k largest eigenpairs, raising on failure.

    Parameters
    ----------
    matrix : ndarray or sparse matrix
    k : int
    dimension : int or None
    **options
        ``SolverConfig`` overrides.

    Returns
    -------
    eigenvalues : ndarray of shape (k,), descending
    eigenvectors : ndarray of shape (N, k)

    Raises
    ------
    InvalidArgumentError
        Bad matrix, dimension, k or option values.
    ComputationFailedError
        Every strategy failed.
    """
    result = solve(matrix, k, dimension=dimension, **options)
    if not result.ok:
        raise result.to_exception()
    return result.eigenvalues, result.eigenvectors


def _writable_buffer(buf, size):
    return isinstance(buf, np.ndarray) and buf.flags.writeable and buf.size >= size


def _buffer_problem(dimension, eigenvalues_out, eigenvectors_out, max_range):
    """Describe what is wrong with a ``get_eigen`` call, or return None."""
    if eigenvalues_out is None or eigenvectors_out is None:
        return "output buffer is None"
    if not _is_positive_int(max_range):
        return f"max_range must be a positive integer, got {max_range!r}"
    if not _is_positive_int(dimension):
        return f"dimension must be a positive integer, got {dimension!r}"
    if not _writable_buffer(eigenvalues_out, max_range):
        return f"eigenvalue buffer must be a writable ndarray with >= {max_range} entries"
    if not _writable_buffer(eigenvectors_out, max_range * dimension):
        return (
            "eigenvector buffer must be a writable ndarray with "
            f">= {max_range * dimension} entries"
        )
    return None


def get_eigen(dimension, matrix, eigenvalues_out, eigenvectors_out, max_range, **options):
    """Buffer interface: write the ``max_range`` largest eigenpairs into caller storage.

    ``eigenvalues_out`` receives ``max_range`` values in descending order.
    ``eigenvectors_out`` receives ``max_range * dimension`` values where
    eigenvector ``i`` occupies ``[i * dimension, (i + 1) * dimension)``.
    Buffers are only written when the solve succeeds.

    Returns
    -------
    bool
        True on success.
    """
    problem = _buffer_problem(dimension, eigenvalues_out, eigenvectors_out, max_range)
    if problem is not None:
        logger.debug("rejected get_eigen call: %s", problem)
        return False

    result = solve(matrix, max_range, dimension=dimension, **options)
    if not result.ok:
        return False

    k, n = result.k, result.dimension
    eigenvalues_out.flat[:k] = result.eigenvalues
    eigenvectors_out.flat[:k * n] = result.eigenvectors.T.ravel()
    return True
