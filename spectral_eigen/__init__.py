"""Top-k eigenpairs of symmetric matrices with dense/iterative dispatch."""

from .config import DEFAULT_MAX_ITER, DEFAULT_SUBSPACE_FACTOR, DEFAULT_TOLERANCE, SolverConfig
from .results import (
    ComputationFailedError,
    ConvergenceFailedError,
    EigenRequest,
    EigenResult,
    EigenSolverError,
    Failure,
    FailureKind,
    InvalidArgumentError,
    SolveReport,
    StrategyAttempt,
)
from .solver import EigenSolver, compute_top_eigenpairs, get_eigen, solve
from .strategies import DenseFullSolver, EigenStrategy, IterativePartialSolver

__all__ = [
    "EigenSolver",
    "solve",
    "compute_top_eigenpairs",
    "get_eigen",
    "DenseFullSolver",
    "IterativePartialSolver",
    "EigenStrategy",
    "SolverConfig",
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITER",
    "DEFAULT_SUBSPACE_FACTOR",
    "EigenRequest",
    "EigenResult",
    "Failure",
    "FailureKind",
    "SolveReport",
    "StrategyAttempt",
    "EigenSolverError",
    "InvalidArgumentError",
    "ConvergenceFailedError",
    "ComputationFailedError",
]
