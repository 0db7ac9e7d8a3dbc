"""
Data structures for the shark smell optimizer.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .objectives import ObjectiveFunction

MAX_GOAL = 1
MIN_GOAL = -1


@dataclass(frozen=True)
class ProblemConfig:
    """Immutable description of one optimization problem and its tuning."""

    name: str
    nd: int                       # Number of decision variables
    low: float                    # Lower bound (all dimensions)
    high: float                   # Upper bound (all dimensions)
    goal: int                     # MAX_GOAL (+1) or MIN_GOAL (-1)
    objective: ObjectiveFunction

    # Movement coefficients
    eta: float                    # Gradient weight
    alpha: float                  # Momentum weight
    beta: float                   # Velocity limit factor
    delta_t: float                # Step size
    m_points: int                 # Local search samples per candidate
    k_max: int                    # Number of movement steps
    initial_velocity: float

    def __post_init__(self):
        if self.nd < 1:
            raise ValueError(f"nd must be >= 1, got {self.nd}")
        if not self.low < self.high:
            raise ValueError(
                f"Invalid bounds for '{self.name}': low ({self.low}) >= high ({self.high})"
            )
        if self.goal not in (MAX_GOAL, MIN_GOAL):
            raise ValueError(f"goal must be +1 (max) or -1 (min), got {self.goal}")
        if self.m_points < 0:
            raise ValueError(f"m_points must be >= 0, got {self.m_points}")
        if self.k_max < 0:
            raise ValueError(f"k_max must be >= 0, got {self.k_max}")

    def replace(self, **changes) -> "ProblemConfig":
        """Return a validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    @property
    def goal_name(self) -> str:
        return "maximize" if self.goal == MAX_GOAL else "minimize"


class PopulationMatrix:
    """
    Population of candidate solutions stored in one contiguous buffer.

    Row ``i`` lives at ``storage[i * nd:(i + 1) * nd]``. Rows are handed out
    as numpy views, so writing through a row mutates the matrix.
    """

    def __init__(self, storage: np.ndarray, n_rows: int, nd: int):
        if n_rows < 1:
            raise ValueError(f"population size must be >= 1, got {n_rows}")
        if nd < 1:
            raise ValueError(f"nd must be >= 1, got {nd}")
        if storage.ndim != 1 or storage.size != n_rows * nd:
            raise ValueError(
                f"storage has {storage.size} elements, expected {n_rows} * {nd}"
            )

        self.storage = np.ascontiguousarray(storage, dtype=np.float64)
        self.n_rows = n_rows
        self.nd = nd

    @classmethod
    def zeros(cls, n_rows: int, nd: int) -> "PopulationMatrix":
        return cls(np.zeros(max(n_rows, 0) * max(nd, 0)), n_rows, nd)

    @classmethod
    def uniform(cls, n_rows: int, nd: int, low: float, high: float,
                rng: np.random.Generator) -> "PopulationMatrix":
        """Sample every entry uniformly from ``[low, high]``."""
        matrix = cls.zeros(n_rows, nd)
        matrix.storage[:] = low + (high - low) * rng.random(n_rows * nd)
        return matrix

    @classmethod
    def from_array(cls, array) -> "PopulationMatrix":
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2:
            raise ValueError(f"expected a 2-D array, got {array.ndim} dimensions")
        return cls(array.reshape(-1).copy(), array.shape[0], array.shape[1])

    @property
    def shape(self):
        return (self.n_rows, self.nd)

    def as_array(self) -> np.ndarray:
        """2-D view over the storage (no copy)."""
        return self.storage.reshape(self.n_rows, self.nd)

    def row(self, i: int) -> np.ndarray:
        if not 0 <= i < self.n_rows:
            raise IndexError(f"row {i} out of range for {self.n_rows} rows")
        start = i * self.nd
        return self.storage[start:start + self.nd]

    def block(self, lo: int, hi: int) -> np.ndarray:
        """Rows ``lo..hi`` inclusive as a 2-D view."""
        if not 0 <= lo <= hi < self.n_rows:
            raise IndexError(f"block [{lo}, {hi}] out of range for {self.n_rows} rows")
        return self.storage[lo * self.nd:(hi + 1) * self.nd].reshape(hi - lo + 1, self.nd)

    def __len__(self):
        return self.n_rows

    def __iter__(self):
        for i in range(self.n_rows):
            yield self.row(i)


@dataclass(frozen=True, eq=False)
class ResultRecord:
    """A solution vector paired with its objective value."""

    solution: np.ndarray
    value: float

    def to_array(self) -> np.ndarray:
        """Pack as ``[x_0, ..., x_{nd-1}, value]``."""
        return np.append(np.asarray(self.solution, dtype=np.float64), self.value)

    @classmethod
    def from_array(cls, packed) -> "ResultRecord":
        packed = np.asarray(packed, dtype=np.float64)
        if packed.ndim != 1 or packed.size < 2:
            raise ValueError(f"packed record needs at least 2 elements, got shape {packed.shape}")
        return cls(solution=packed[:-1].copy(), value=float(packed[-1]))

    @property
    def nd(self) -> int:
        return len(self.solution)

    def __eq__(self, other):
        if not isinstance(other, ResultRecord):
            return NotImplemented
        return self.value == other.value and np.array_equal(self.solution, other.solution)

    # The solution array is mutable, so records are not hashable
    __hash__ = None


@dataclass
class WorkerTask:
    """Everything one worker process needs to optimize its partition."""

    worker_id: int
    row_offset: int               # Global index of the first row
    positions: np.ndarray         # (partition_size, nd), owned by the worker
    config: ProblemConfig
    seed: Optional[list] = None   # Entropy for np.random.default_rng


@dataclass
class WorkerResult:
    """Local best of one worker, returned to the coordinator."""

    worker_id: int
    record: ResultRecord
    n_candidates: int
    elapsed: float


@dataclass
class SSOResult:
    """Outcome of a full run."""

    best: ResultRecord
    config: ProblemConfig
    worker_results: list
    n_workers: int
    population_size: int
    elapsed: float
    reduction: str
    initial_population: Optional[np.ndarray] = None
