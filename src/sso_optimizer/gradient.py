"""
Numeric differentiation for the movement engine.
"""

import numpy as np

GRADIENT_STEP = 1e-6  # Central difference increment h


def central_difference_gradient(objective, x, h=GRADIENT_STEP, out=None):
    """
    Approximate the gradient of ``objective`` at ``x`` by central differences.

    For each coordinate ``i``::

        g[i] = (f(x + h*e_i) - f(x - h*e_i)) / (2h)

    Parameters
    ----------
    objective : callable
        Maps a 1-D array to a scalar.
    x : np.ndarray
        Point of length nd. Not modified.
    h : float
        Perturbation size, must be positive.
    out : np.ndarray, optional
        Buffer of length nd to write the result into.

    Returns
    -------
    np.ndarray
        Gradient estimate of length nd (``out`` when given).
    """
    if h <= 0:
        raise ValueError(f"h must be positive, got {h}")

    x = np.asarray(x, dtype=np.float64)
    nd = x.shape[0]

    if out is None:
        out = np.empty(nd, dtype=np.float64)
    elif out.shape != (nd,):
        raise ValueError(f"out has shape {out.shape}, expected ({nd},)")

    scratch = x.copy()
    for i in range(nd):
        original = scratch[i]

        scratch[i] = original + h
        f_plus = objective(scratch)

        scratch[i] = original - h
        f_minus = objective(scratch)

        scratch[i] = original
        out[i] = (f_plus - f_minus) / (2.0 * h)

    return out
