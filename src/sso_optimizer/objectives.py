"""
Objective functions for the shark smell optimizer.

Every function is written in its natural form. Whether it is minimized or
maximized is decided by the ``goal`` of the problem configuration, never by
negating the function.
"""

import math

import numpy as np


class ObjectiveFunction:
    """Base class: maps a real vector to a scalar, no internal state."""

    name = "objective"

    def evaluate(self, x: np.ndarray) -> float:
        raise NotImplementedError

    def __call__(self, x) -> float:
        return self.evaluate(np.asarray(x, dtype=np.float64))

    def __repr__(self):
        return f"{type(self).__name__}()"


class EllipticParaboloid(ObjectiveFunction):
    """f(x, y) = x^2 - 4xy + 5y^2 - 4y + 3, minimum -1 at (4, 2)."""

    name = "elliptic_paraboloid"

    def evaluate(self, x):
        return float(x[0] * x[0] - 4 * x[0] * x[1] + 5 * x[1] * x[1] - 4 * x[1] + 3)


def _goldstein_price(x):
    a = 1 + (x[0] + x[1] + 1) ** 2 * (
        19 - 14 * x[0] + 3 * x[0] ** 2 - 14 * x[1] + 6 * x[0] * x[1] + 3 * x[1] ** 2
    )
    b = 30 + (2 * x[0] - 3 * x[1]) ** 2 * (
        18 - 32 * x[0] + 12 * x[0] ** 2 + 48 * x[1] - 36 * x[0] * x[1] + 27 * x[1] ** 2
    )
    return float(a * b)


class GoldsteinPrice(ObjectiveFunction):
    """Goldstein-Price function, minimum 3 at (0, -1)."""

    name = "goldstein_price"

    def evaluate(self, x):
        return _goldstein_price(x)


class FlippedGoldsteinPrice(ObjectiveFunction):
    """The Goldstein-Price surface turned upside down, maximum -3 at (0, -1)."""

    name = "flipped_goldstein_price"

    def evaluate(self, x):
        return -_goldstein_price(x)


class Rastrigin(ObjectiveFunction):
    """Rastrigin function for any dimension, minimum 0 at the origin."""

    name = "rastrigin"

    def evaluate(self, x):
        x = np.asarray(x, dtype=np.float64)
        return float(10 * x.size + np.sum(x * x - 10 * np.cos(2 * math.pi * x)))


class LinearFunction(ObjectiveFunction):
    """f(x) = c . x"""

    name = "linear"

    def __init__(self, coefficients):
        self.coefficients = np.asarray(coefficients, dtype=np.float64)

    def evaluate(self, x):
        return float(np.dot(self.coefficients, x))

    def __repr__(self):
        return f"LinearFunction({self.coefficients.tolist()})"
