"""
Block decomposition of the population across workers.

Worker ``id`` out of ``p`` owns rows ``block_low(id, p, n)`` to
``block_high(id, p, n)`` inclusive. Blocks never overlap and together cover
all ``n`` rows; sizes differ by at most one.
"""

from typing import List, Tuple


def block_low(worker_id: int, n_workers: int, n: int) -> int:
    return worker_id * n // n_workers


def block_high(worker_id: int, n_workers: int, n: int) -> int:
    return block_low(worker_id + 1, n_workers, n) - 1


def block_size(worker_id: int, n_workers: int, n: int) -> int:
    return block_high(worker_id, n_workers, n) - block_low(worker_id, n_workers, n) + 1


def block_owner(row: int, n_workers: int, n: int) -> int:
    """Worker that owns global row ``row``."""
    return (n_workers * (row + 1) - 1) // n


def partition_rows(n: int, n_workers: int) -> List[Tuple[int, int]]:
    """
    Inclusive ``(low, high)`` row range of every worker.

    Raises:
        ValueError: If there are no workers or more workers than rows
    """
    if n_workers < 1:
        raise ValueError(f"n_workers must be >= 1, got {n_workers}")
    if n < n_workers:
        raise ValueError(
            f"population size ({n}) must be >= number of workers ({n_workers})"
        )

    return [
        (block_low(i, n_workers, n), block_high(i, n_workers, n))
        for i in range(n_workers)
    ]
