"""
Benchmark catalog: objective functions and their tuning parameters.
"""

from .data_structures import MAX_GOAL, MIN_GOAL, ProblemConfig
from .objectives import (
    EllipticParaboloid,
    FlippedGoldsteinPrice,
    GoldsteinPrice,
    Rastrigin,
)

# (objective class, nd, low, high, goal, eta, alpha, beta, delta_t, m_points, k_max, initial_velocity)
_TEST_CASES = (
    (EllipticParaboloid, 2, -100.0, 100.0, MIN_GOAL, 0.3, 0.1, 4.0, 1.0, 20, 30, 0.5),
    (GoldsteinPrice, 2, -2.0, 2.0, MIN_GOAL, 0.002, 0.1, 3.0, 1.0, 20, 30, 0.5),
    (FlippedGoldsteinPrice, 2, -2.0, 2.0, MAX_GOAL, 0.002, 0.1, 3.0, 1.0, 20, 30, 0.5),
    (Rastrigin, 2, -20.0, 20.0, MIN_GOAL, 0.9, 0.1, 4.0, 1.0, 20, 30, 0.5),
)

NUM_TEST_CASES = len(_TEST_CASES)


def get_problem_config(tc: int) -> ProblemConfig:
    """
    Build the configuration of benchmark ``tc``.

    Args:
        tc: Index into the benchmark table, ``0 <= tc < NUM_TEST_CASES``

    Returns:
        A fresh, immutable ProblemConfig

    Raises:
        ValueError: If ``tc`` is out of range
    """
    if not 0 <= tc < NUM_TEST_CASES:
        raise ValueError(f"test case must be in [0, {NUM_TEST_CASES - 1}], got {tc}")

    (objective_cls, nd, low, high, goal, eta, alpha, beta,
     delta_t, m_points, k_max, initial_velocity) = _TEST_CASES[tc]

    return ProblemConfig(
        name=objective_cls.name,
        nd=nd,
        low=low,
        high=high,
        goal=goal,
        objective=objective_cls(),
        eta=eta,
        alpha=alpha,
        beta=beta,
        delta_t=delta_t,
        m_points=m_points,
        k_max=k_max,
        initial_velocity=initial_velocity,
    )


def list_test_cases():
    """Return ``(tc, name, goal_name)`` for every benchmark."""
    cases = []
    for tc in range(NUM_TEST_CASES):
        config = get_problem_config(tc)
        cases.append((tc, config.name, config.goal_name))
    return cases
