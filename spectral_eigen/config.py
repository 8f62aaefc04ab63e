"""Solver configuration and defaults."""

import numbers
from dataclasses import dataclass, fields, replace

DEFAULT_TOLERANCE = 1e-10
DEFAULT_MAX_ITER = 1000
# Lanczos subspace is this multiple of k, capped at N
DEFAULT_SUBSPACE_FACTOR = 2

METHODS = ("auto", "dense")
# RandomState seed range
MAX_SEED = 2**32 - 1


def _is_int(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class SolverConfig:
    """Tunable parameters of an ``EigenSolver``.

    Parameters
    ----------
    tolerance : float
        Relative convergence tolerance passed to ARPACK (0 means machine
        precision).
    max_iter : int
        Maximum number of Lanczos restarts before the iterative attempt is
        declared unconverged.
    subspace_factor : int
        The iterative solver keeps ``min(subspace_factor * k, N)`` Lanczos
        vectors. Must be at least 2 so the subspace is larger than k.
    method : str
        ``"auto"`` tries the iterative solver first whenever k < N and falls
        back to the dense solver. ``"dense"`` always runs the full
        decomposition.
    random_state : int
        Seed for the ARPACK start vector, so repeated solves are reproducible.
    """
    tolerance: float = DEFAULT_TOLERANCE
    max_iter: int = DEFAULT_MAX_ITER
    subspace_factor: int = DEFAULT_SUBSPACE_FACTOR
    method: str = "auto"
    random_state: int = 0

    def with_overrides(self, **overrides):
        """Return a copy with the non-None ``overrides`` applied."""
        names = {f.name for f in fields(self)}
        unknown = set(overrides) - names
        if unknown:
            raise TypeError(f"Unknown solver option(s): {', '.join(sorted(unknown))}")
        changes = {name: value for name, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def problems(self):
        """List human-readable problems with this configuration (empty if valid)."""
        problems = []
        if (
            not isinstance(self.tolerance, numbers.Real)
            or isinstance(self.tolerance, bool)
            or not self.tolerance >= 0
        ):
            problems.append(f"tolerance must be a real number >= 0, got {self.tolerance!r}")
        if not _is_int(self.max_iter) or self.max_iter < 1:
            problems.append(f"max_iter must be a positive integer, got {self.max_iter}")
        if not _is_int(self.subspace_factor) or self.subspace_factor < 2:
            problems.append(
                f"subspace_factor must be an integer >= 2, got {self.subspace_factor}"
            )
        if not isinstance(self.method, str) or self.method not in METHODS:
            problems.append(f"method must be one of {METHODS}, got {self.method!r}")
        if not _is_int(self.random_state) or not 0 <= self.random_state <= MAX_SEED:
            problems.append(
                f"random_state must be an integer in [0, {MAX_SEED}], got {self.random_state!r}"
            )
        return problems
