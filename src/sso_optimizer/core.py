"""
Core shark smell optimization (SSO) movement engine.

Each step moves every candidate of a partition forward along a
gradient-informed velocity, then samples a few rotational points around the
forward position (local search) and keeps whichever is best.
"""

import logging

import numpy as np

from .data_structures import ProblemConfig
from .gradient import central_difference_gradient

logger = logging.getLogger(__name__)


def initialize_velocities(n_rows: int, nd: int, initial_velocity: float) -> np.ndarray:
    """Velocity matrix of shape (n_rows, nd) filled with ``initial_velocity``."""
    return np.full((n_rows, nd), initial_velocity, dtype=np.float64)


def select_velocity(vel, vel_limit):
    """
    Pick whichever of ``vel`` and ``vel_limit`` has the smaller absolute value.

    On a tie (``|vel| == |vel_limit|``) the gradient-informed ``vel`` is kept.
    Works element-wise on arrays.
    """
    return np.where(np.abs(vel) <= np.abs(vel_limit), vel, vel_limit)


def evaluate_rows(config: ProblemConfig, X: np.ndarray) -> np.ndarray:
    """Objective value of every row of ``X``."""
    return np.array([config.objective(x) for x in X], dtype=np.float64)


def movement_step(
    config: ProblemConfig,
    X: np.ndarray,
    V: np.ndarray,
    best_values: np.ndarray,
    rng: np.random.Generator,
) -> None:
    """
    Advance every candidate of the partition by one step, in place.

    Args:
        config: Problem configuration
        X: (n, nd) positions, overwritten with the selected positions
        V: (n, nd) velocities, overwritten with the clamped velocities
        best_values: (n,) objective values, overwritten with the value at
            the selected position of each candidate
        rng: Worker-local random generator

    Random draws are made in a fixed order (R1, R2, then the R3 values of
    candidate 0, 1, ...), so the same generator state gives the same result.
    """
    n, nd = X.shape
    goal = config.goal
    objective = config.objective

    # Shared by every candidate of this step
    R1 = rng.random()
    R2 = rng.random()

    gradient = np.empty(nd, dtype=np.float64)

    for i in range(n):
        central_difference_gradient(objective, X[i], out=gradient)

        vel = goal * config.eta * R1 * gradient + config.alpha * R2 * V[i]
        vel_limit = config.beta * V[i]
        V[i] = select_velocity(vel, vel_limit)

        # Forward movement
        Y = X[i] + V[i] * config.delta_t

        # Rotational movement (local search), R3 in [-1, 1]
        R3 = 2.0 * rng.random(config.m_points) - 1.0
        Z = Y + R3[:, np.newaxis] * Y

        X[i] = Y
        best_values[i] = objective(Y)

        for m in range(config.m_points):
            current_value = objective(Z[m])
            if goal * current_value > goal * best_values[i]:
                X[i] = Z[m]
                best_values[i] = current_value


def run_movement(
    config: ProblemConfig,
    X: np.ndarray,
    rng: np.random.Generator,
    worker_id: int = 0,
) -> np.ndarray:
    """
    Run ``config.k_max`` movement steps on a partition.

    Args:
        config: Problem configuration
        X: (n, nd) positions of the partition, mutated in place
        rng: Worker-local random generator
        worker_id: Only used for log messages

    Returns:
        (n,) objective value at the final position of each candidate
    """
    if X.ndim != 2 or X.shape[1] != config.nd:
        raise ValueError(
            f"positions must have shape (n, {config.nd}), got {X.shape}"
        )

    n = X.shape[0]
    V = initialize_velocities(n, config.nd, config.initial_velocity)
    best_values = evaluate_rows(config, X)

    for k in range(config.k_max):
        movement_step(config, X, V, best_values, rng)

        if logger.isEnabledFor(logging.DEBUG):
            best_idx = int(np.argmax(config.goal * best_values))
            logger.debug(
                f"worker {worker_id} step {k + 1}/{config.k_max}: "
                f"best {best_values[best_idx]:.6e} at candidate {best_idx}"
            )

    return best_values
