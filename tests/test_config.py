"""Tests for SolverConfig."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from spectral_eigen.config import DEFAULT_MAX_ITER, DEFAULT_TOLERANCE, SolverConfig
from spectral_eigen.solver import EigenSolver


class TestSolverConfig:
    def test_defaults(self):
        config = SolverConfig()
        assert config.tolerance == DEFAULT_TOLERANCE == 1e-10
        assert config.max_iter == DEFAULT_MAX_ITER == 1000
        assert config.subspace_factor == 2
        assert config.method == "auto"
        assert config.problems() == []

    def test_overrides_ignore_none(self):
        config = SolverConfig()
        assert config.with_overrides(tolerance=None) is config
        changed = config.with_overrides(max_iter=5, tolerance=None)
        assert changed.max_iter == 5
        assert changed.tolerance == DEFAULT_TOLERANCE
        assert config.max_iter == DEFAULT_MAX_ITER

    def test_unknown_override(self):
        with pytest.raises(TypeError):
            SolverConfig().with_overrides(maxiter=3)

    def test_problems(self):
        config = SolverConfig(
            tolerance=-1, max_iter=2.5, subspace_factor=1, method="x", random_state=-1
        )
        assert len(config.problems()) == 5

    @pytest.mark.parametrize("overrides", [
        {"tolerance": "1e-3"},
        {"tolerance": True},
        {"random_state": -1},
        {"random_state": 2**32},
        {"random_state": 1.5},
        {"max_iter": True},
        {"subspace_factor": True},
        {"method": ["auto"]},
    ])
    def test_bad_types_reported(self, overrides):
        assert len(SolverConfig().with_overrides(**overrides).problems()) == 1

    def test_seed_bounds_accepted(self):
        assert SolverConfig(random_state=0).problems() == []
        assert SolverConfig(random_state=2**32 - 1).problems() == []

    def test_numpy_integers_accepted(self):
        config = SolverConfig(max_iter=np.int64(10), subspace_factor=np.int32(3))
        assert config.problems() == []


class TestSolverUsesConfig:
    def test_instance_config_applies(self):
        solver = EigenSolver(config=SolverConfig(method="dense"))
        result = solver.solve(np.diag([1.0, 2.0, 3.0]), 1)
        assert result.report.strategy == "dense"

    def test_call_override_wins(self):
        solver = EigenSolver(config=SolverConfig(method="dense"))
        rng = np.random.RandomState(0)
        A = rng.randn(20, 20)
        result = solver.solve(A + A.T, 2, method="auto")
        assert result.report.attempts[0].strategy == "iterative"
