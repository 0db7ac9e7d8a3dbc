"""
Shark smell optimization (SSO) with multi-process partitioned populations.

The population is split into disjoint blocks, one per worker process. Every
worker moves its candidates with a gradient-informed velocity plus a
stochastic local search, and the workers' local bests are merged into a
single global best by an associative reduction.
"""

from .core import initialize_velocities, movement_step, run_movement, select_velocity
from .data_structures import (
    MAX_GOAL,
    MIN_GOAL,
    PopulationMatrix,
    ProblemConfig,
    ResultRecord,
    SSOResult,
)
from .gradient import GRADIENT_STEP, central_difference_gradient
from .objectives import (
    EllipticParaboloid,
    FlippedGoldsteinPrice,
    GoldsteinPrice,
    LinearFunction,
    ObjectiveFunction,
    Rastrigin,
)
from .optimizer import sample_population, sso_optimize
from .parameters import NUM_TEST_CASES, get_problem_config, list_test_cases
from .partition import block_high, block_low, block_owner, block_size, partition_rows
from .reduction import (
    gather_reduce,
    make_merge,
    merge_arrays,
    merge_results,
    reduce_results,
    select_local_best,
    tree_reduce,
)

__all__ = [
    'sso_optimize',
    'sample_population',
    'ProblemConfig',
    'PopulationMatrix',
    'ResultRecord',
    'SSOResult',
    'MAX_GOAL',
    'MIN_GOAL',
    'ObjectiveFunction',
    'EllipticParaboloid',
    'GoldsteinPrice',
    'FlippedGoldsteinPrice',
    'Rastrigin',
    'LinearFunction',
    'NUM_TEST_CASES',
    'get_problem_config',
    'list_test_cases',
    'GRADIENT_STEP',
    'central_difference_gradient',
    'initialize_velocities',
    'select_velocity',
    'movement_step',
    'run_movement',
    'select_local_best',
    'merge_results',
    'merge_arrays',
    'make_merge',
    'tree_reduce',
    'gather_reduce',
    'reduce_results',
    'block_low',
    'block_high',
    'block_size',
    'block_owner',
    'partition_rows',
]
