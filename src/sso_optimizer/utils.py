"""
Utility functions for the SSO optimizer.

This module provides the shared Rich console, logging setup, matrix
formatting, and multiprocessing pool cleanup.
"""

import logging

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .partition import block_owner

console = Console(
    log_path=False,
    highlight=False,
)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level="INFO"):
    """Configure root logging the same way for every entry point."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=level,
        datefmt=LOG_DATEFMT,
    )


def format_vector(vector, precision=6):
    return "[" + ", ".join(f"{v:.{precision}f}" for v in vector) + "]"


def _format_row(label, i, row):
    return " ".join(f"({label}) [{i},{j}]: {value:9.6f}" for j, value in enumerate(row))


def format_matrix(matrix, rank=0):
    """
    Format an (m, n) matrix one row per line, ``(rank) [i,j]: value`` per entry.
    """
    return "\n".join(_format_row(rank, i, row) for i, row in enumerate(matrix))


def format_population(matrix, n_workers):
    """Like ``format_matrix``, but each row is labelled with the worker that owns it."""
    n = len(matrix)
    return "\n".join(
        _format_row(block_owner(i, n_workers, n), i, row) for i, row in enumerate(matrix)
    )


def result_panel(result):
    """
    Build the Rich panel reporting the outcome of a run.

    Parameters
    ----------
    result : SSOResult
        Outcome of ``sso_optimize``

    Returns
    -------
    rich.panel.Panel
    """
    text = Text()
    text.append("Benchmark:       ", style="cyan")
    text.append(f"{result.config.name} ({result.config.goal_name})\n")
    text.append("Population:      ", style="cyan")
    text.append(f"{result.population_size} candidates on {result.n_workers} workers\n")
    text.append("Best solution:   ", style="cyan")
    text.append(f"{format_vector(result.best.solution)}\n")
    text.append("Best value:      ", style="cyan")
    text.append(f"{result.best.value:.6f}\n", style="bold green")
    text.append("Elapsed time (s): ", style="magenta")
    text.append(f"{result.elapsed:8.6f}")

    return Panel(text, title="SSO result", border_style="green", padding=(1, 2))


def cleanup_pool(pool, terminate=False):
    """
    Shut down a multiprocessing pool.

    With ``terminate`` the workers are killed immediately instead of being
    allowed to finish their current task.
    """
    if pool is None:
        return

    if terminate:
        logging.warning("Terminating all worker processes")
        pool.terminate()
    else:
        pool.close()
    pool.join()
    logging.debug("Multiprocessing pool cleaned up")
