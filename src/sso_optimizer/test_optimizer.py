"""
End-to-end tests for the multi-process SSO coordinator.
"""

import numpy as np
import pytest

from sso_optimizer.data_structures import PopulationMatrix
from sso_optimizer.objectives import ObjectiveFunction
from sso_optimizer.optimizer import (
    build_worker_tasks,
    make_worker_seeds,
    sample_population,
    sso_optimize,
)
from sso_optimizer.parameters import get_problem_config

# Documented convergence tolerance for the elliptic paraboloid scenario
ELLIPTIC_MINIMUM = -1.0
ELLIPTIC_TOLERANCE = 0.5


# Module-level so it can be pickled into pool workers
class ExplodingObjective(ObjectiveFunction):
    """Fails as soon as it sees a candidate in the upper half of the box."""

    name = "exploding"

    def evaluate(self, x):
        if x[0] > 0.0:
            raise MemoryError("cannot allocate scratch buffer")
        return float(np.sum(x * x))


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_elliptic_paraboloid_converges(seed):
    """
    x^2 - 4xy + 5y^2 - 4y + 3 has its minimum -1 at (4, 2); the reported
    global best must come within ELLIPTIC_TOLERANCE of it.
    """
    config = get_problem_config(0)

    result = sso_optimize(config, 40, n_workers=2, seed=seed, verbose=False)

    assert result.best.value >= ELLIPTIC_MINIMUM - 1e-9
    assert abs(result.best.value - ELLIPTIC_MINIMUM) <= ELLIPTIC_TOLERANCE
    assert result.best.value == pytest.approx(config.objective(result.best.solution))
    assert result.n_workers == 2
    assert len(result.worker_results) == 2


def test_fixed_seed_reproducible():
    config = get_problem_config(3).replace(k_max=10)

    first = sso_optimize(config, 12, n_workers=3, seed=42, verbose=False)
    second = sso_optimize(config, 12, n_workers=3, seed=42, verbose=False)

    assert first.best == second.best
    assert np.array_equal(first.initial_population, second.initial_population)
    for a, b in zip(first.worker_results, second.worker_results):
        assert a.record == b.record


def test_pool_and_in_process_runs_agree():
    config = get_problem_config(0).replace(k_max=8)

    pooled = sso_optimize(config, 10, n_workers=2, seed=7, use_pool=True, verbose=False)
    local = sso_optimize(config, 10, n_workers=2, seed=7, use_pool=False, verbose=False)

    assert pooled.best == local.best


def test_tree_and_gather_reduction_agree():
    config = get_problem_config(1).replace(k_max=6)

    tree = sso_optimize(config, 15, n_workers=4, seed=5, reduction="tree", verbose=False)
    gather = sso_optimize(config, 15, n_workers=4, seed=5, reduction="gather", verbose=False)

    assert tree.best == gather.best


def test_global_best_is_best_local_best():
    config = get_problem_config(2).replace(k_max=5)

    result = sso_optimize(config, 9, n_workers=3, seed=9, verbose=False)

    local_values = [r.record.value for r in result.worker_results]
    assert result.best.value == max(local_values)


def test_initial_positions_are_used_and_not_modified():
    config = get_problem_config(0).replace(k_max=0)
    start = np.array([[1.0, 1.0], [4.0, 2.0], [10.0, -3.0]])
    start_copy = start.copy()

    result = sso_optimize(config, 3, n_workers=1, initial_positions=start, verbose=False)

    assert np.array_equal(start, start_copy)
    assert np.array_equal(result.best.solution, [4.0, 2.0])
    assert result.best.value == pytest.approx(-1.0)


def test_initial_positions_shape_checked():
    config = get_problem_config(0)
    with pytest.raises(ValueError):
        sso_optimize(config, 4, n_workers=1, initial_positions=np.zeros((3, 2)), verbose=False)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"population_size": 0, "n_workers": 1},
        {"population_size": 2, "n_workers": 3},
        {"population_size": 4, "n_workers": 0},
        {"population_size": 4, "n_workers": 1, "reduction": "allreduce"},
        {"population_size": 4, "n_workers": 1, "seed": -1},
    ],
)
def test_invalid_run_arguments_rejected(kwargs):
    with pytest.raises(ValueError):
        sso_optimize(get_problem_config(0), verbose=False, **kwargs)


def test_worker_failure_aborts_whole_run():
    config = get_problem_config(0).replace(objective=ExplodingObjective(), low=-1.0, high=1.0)
    # Only the last worker's rows are in the failing half of the box
    start = np.array([[-0.5, 0.1], [-0.4, 0.2], [-0.3, 0.3], [0.9, 0.4]])

    with pytest.raises(MemoryError):
        sso_optimize(config, 4, n_workers=2, initial_positions=start, verbose=False)


def test_sampled_population_matches_run_population():
    config = get_problem_config(1).replace(k_max=0)

    population = sample_population(config, 6, seed=11)
    result = sso_optimize(config, 6, n_workers=1, seed=11, verbose=False)

    assert np.array_equal(population.as_array(), result.initial_population)
    assert np.all(population.as_array() >= config.low)
    assert np.all(population.as_array() <= config.high)


def test_sample_population_rejects_negative_seed():
    with pytest.raises(ValueError):
        sample_population(get_problem_config(0), 4, seed=-3)


def test_worker_seeds_distinct():
    seeds = make_worker_seeds(4, seed=123)

    assert seeds == [[123, 0], [123, 1], [123, 2], [123, 3]]
    assert len({tuple(s) for s in make_worker_seeds(4)}) == 4


def test_tasks_cover_population_without_sharing_memory():
    config = get_problem_config(0)
    population = PopulationMatrix.from_array(np.arange(20.0).reshape(10, 2))

    tasks = build_worker_tasks(config, population, 3, seed=0)

    assert [t.row_offset for t in tasks] == [0, 3, 6]
    assert np.array_equal(np.vstack([t.positions for t in tasks]), population.as_array())
    for task in tasks:
        assert not np.shares_memory(task.positions, population.storage)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
