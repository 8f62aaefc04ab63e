"""Request, result and failure types for eigenpair solves."""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np


class FailureKind(enum.Enum):
    """Why a solve (or a single strategy attempt) did not produce a result."""
    INVALID_ARGUMENT = "invalid_argument"
    CONVERGENCE_FAILED = "convergence_failed"
    COMPUTATION_FAILED = "computation_failed"


class EigenSolverError(Exception):
    """Base class for errors raised by the exception-style interface."""


class InvalidArgumentError(EigenSolverError, ValueError):
    pass


class ConvergenceFailedError(EigenSolverError):
    def __init__(self, message, n_converged=0):
        super().__init__(message)
        self.n_converged = n_converged


class ComputationFailedError(EigenSolverError):
    pass


@dataclass(frozen=True)
class EigenRequest:
    """A validated solve request.

    ``dimension`` is N, ``k`` the number of eigenpairs wanted (1 <= k <= N).
    """
    dimension: int
    k: int
    tolerance: float
    max_iter: int
    subspace_factor: int = 2
    method: str = "auto"
    random_state: int = 0

    @property
    def is_partial(self):
        return self.k < self.dimension

    @property
    def subspace_size(self):
        """Number of Lanczos vectors, ``min(subspace_factor * k, N)``."""
        return min(self.subspace_factor * self.k, self.dimension)


@dataclass
class StrategyAttempt:
    """Outcome of one strategy run inside a solve."""
    strategy: str
    succeeded: bool
    elapsed: float
    n_converged: int = 0
    message: str = ""


@dataclass
class SolveReport:
    """Diagnostics for a solve: which strategies ran and how long they took."""
    dimension: int
    k: int
    attempts: List[StrategyAttempt] = field(default_factory=list)

    @property
    def strategy(self):
        """Name of the strategy that produced the result, or None."""
        for attempt in self.attempts:
            if attempt.succeeded:
                return attempt.strategy
        return None

    @property
    def fell_back(self):
        return len(self.attempts) > 1

    @property
    def elapsed(self):
        return sum(a.elapsed for a in self.attempts)


@dataclass
class EigenResult:
    """Top-k eigenpairs in descending eigenvalue order.

    Attributes
    ----------
    eigenvalues : ndarray of shape (k,)
        Sorted so that ``eigenvalues[i] >= eigenvalues[i + 1]``.
    eigenvectors : ndarray of shape (N, k)
        Column ``i`` is the unit eigenvector of ``eigenvalues[i]``.
    report : SolveReport or None
    """
    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    report: Optional[SolveReport] = None

    ok = True

    @property
    def k(self):
        return self.eigenvalues.shape[0]

    @property
    def dimension(self):
        return self.eigenvectors.shape[0]

    def __iter__(self):
        # Allows ``vals, vecs = result``
        yield self.eigenvalues
        yield self.eigenvectors


@dataclass
class Failure:
    """Returned instead of an ``EigenResult`` when a solve fails."""
    kind: FailureKind
    message: str = ""
    n_converged: int = 0
    report: Optional[SolveReport] = None

    ok = False

    def to_exception(self):
        if self.kind is FailureKind.INVALID_ARGUMENT:
            return InvalidArgumentError(self.message)
        if self.kind is FailureKind.CONVERGENCE_FAILED:
            return ConvergenceFailedError(self.message, n_converged=self.n_converged)
        return ComputationFailedError(self.message)


def sort_descending(eigenvalues, eigenvectors, k=None):
    """Reorder eigenpairs by descending eigenvalue and keep the first ``k``.

    Parameters
    ----------
    eigenvalues : ndarray of shape (m,)
    eigenvectors : ndarray of shape (N, m)
    k : int or None
        Number of leading pairs to keep. None keeps all of them.

    Returns
    -------
    eigenvalues : ndarray of shape (k,)
    eigenvectors : ndarray of shape (N, k)
    """
    # Stable sort keeps LAPACK/ARPACK order among exactly repeated values
    order = np.argsort(-eigenvalues, kind="stable")
    if k is not None:
        order = order[:k]
    return (
        np.ascontiguousarray(eigenvalues[order]),
        np.ascontiguousarray(eigenvectors[:, order]),
    )
