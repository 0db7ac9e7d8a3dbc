"""
Coordinator for multi-process shark smell optimization.

The coordinator samples the initial population, hands one contiguous block of
rows to each worker process, lets every worker run the movement engine on its
own block, and reduces the workers' local bests into one global best.
"""

import logging
import time
from multiprocessing import Pool, cpu_count

import numpy as np
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.rule import Rule

from .core import run_movement
from .data_structures import (
    PopulationMatrix,
    ProblemConfig,
    SSOResult,
    WorkerResult,
    WorkerTask,
)
from .partition import partition_rows
from .reduction import REDUCTION_METHODS, reduce_results, select_local_best
from .utils import cleanup_pool, console, format_vector

logger = logging.getLogger(__name__)


def default_worker_count(population_size=None):
    """One worker per CPU minus one, never more than the population size."""
    n_workers = max(1, cpu_count() - 1)
    if population_size is not None:
        n_workers = min(n_workers, max(1, population_size))
    return n_workers


def make_worker_seeds(n_workers, seed=None):
    """
    Seed entropy for every worker.

    Worker ``i`` gets ``[base_seed, i]``, so workers draw independent streams.
    Without a seed the base is taken from the wall clock.
    """
    base_seed = seed if seed is not None else time.time_ns()
    return [[base_seed, worker_id] for worker_id in range(n_workers)]


def sample_population(config, population_size, seed=None):
    """Uniform initial population in [low, high], drawn from ``seed`` or the wall clock."""
    if seed is not None and seed < 0:
        raise ValueError(f"seed must be >= 0, got {seed}")
    rng = np.random.default_rng(seed if seed is not None else time.time_ns())
    return PopulationMatrix.uniform(population_size, config.nd, config.low, config.high, rng)


# Module-level function for multiprocessing (must be picklable)
def _run_worker(task: WorkerTask) -> WorkerResult:
    """
    Optimize one partition and return its local best.

    The task's positions are copied, so the caller's population is never
    written to from a worker.
    """
    start = time.time()
    rng = np.random.default_rng(task.seed)

    positions = np.array(task.positions, dtype=np.float64, copy=True)
    best_values = run_movement(task.config, positions, rng, worker_id=task.worker_id)
    record = select_local_best(positions, best_values, task.config.goal)

    return WorkerResult(
        worker_id=task.worker_id,
        record=record,
        n_candidates=len(positions),
        elapsed=time.time() - start,
    )


def build_worker_tasks(config, population, n_workers, seed=None):
    """Split ``population`` into one WorkerTask per worker."""
    seeds = make_worker_seeds(n_workers, seed)
    tasks = []
    for worker_id, (low, high) in enumerate(partition_rows(population.n_rows, n_workers)):
        tasks.append(
            WorkerTask(
                worker_id=worker_id,
                row_offset=low,
                positions=population.block(low, high).copy(),
                config=config,
                seed=seeds[worker_id],
            )
        )
    return tasks


def _collect_results(results, n_workers, verbose):
    """Place worker results by worker id, with a progress bar when verbose."""
    worker_results = [None] * n_workers

    if not verbose:
        for result in results:
            worker_results[result.worker_id] = result
        return worker_results

    with Progress(
        SpinnerColumn(spinner_name="dots12"),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=None),
        "•",
        TaskProgressColumn(),
        "•",
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Waiting for workers...", total=n_workers)
        for result in results:
            worker_results[result.worker_id] = result
            progress.update(
                task,
                advance=1,
                description=f"Worker {result.worker_id} done | local best {result.record.value:.6e}",
            )

    return worker_results


def sso_optimize(
    config: ProblemConfig,
    population_size: int,
    n_workers=None,
    seed=None,
    reduction="tree",
    use_pool=None,
    initial_positions=None,
    verbose=True,
) -> SSOResult:
    """
    Run shark smell optimization of ``config`` across worker processes.

    Args:
        config: Problem configuration
        population_size: Number of candidates (NP)
        n_workers: Worker processes (default: cpu_count - 1, capped at NP)
        seed: Non-negative base seed for the initial population and every worker;
            None seeds from the wall clock
        reduction: "tree" or "gather"
        use_pool: Run workers in a multiprocessing pool (default: only when
            there is more than one worker)
        initial_positions: Optional (NP, nd) starting population instead of
            uniform sampling in [low, high]
        verbose: Show Rich progress output on the console

    Returns:
        SSOResult with the global best record and per-worker results

    Raises:
        ValueError: On invalid sizes or reduction method, before any worker
            is started
        Exception: Whatever a worker raised; all workers are terminated first
    """
    if population_size < 1:
        raise ValueError(f"population size must be >= 1, got {population_size}")
    if reduction not in REDUCTION_METHODS:
        raise ValueError(f"unknown reduction method '{reduction}', expected one of {REDUCTION_METHODS}")
    if seed is not None and seed < 0:
        raise ValueError(f"seed must be >= 0, got {seed}")
    if n_workers is None:
        n_workers = default_worker_count(population_size)
    partition_rows(population_size, n_workers)  # validates n_workers
    if use_pool is None:
        use_pool = n_workers > 1

    start = time.time()

    if initial_positions is not None:
        population = PopulationMatrix.from_array(initial_positions)
        if population.shape != (population_size, config.nd):
            raise ValueError(
                f"initial positions have shape {population.shape}, "
                f"expected ({population_size}, {config.nd})"
            )
    else:
        population = sample_population(config, population_size, seed)

    if verbose:
        console.print(Rule(f"[bold cyan]Shark Smell Optimization: {config.name}[/bold cyan]"))

    logger.info("=" * 80)
    logger.info(f"SSO run: {config.name} ({config.goal_name})")
    logger.info("=" * 80)
    logger.info(f"Population size: {population_size}, nd: {config.nd}, bounds: [{config.low}, {config.high}]")
    logger.info(f"Workers: {n_workers} ({'pool' if use_pool else 'in-process'}), reduction: {reduction}")
    logger.info(
        f"eta={config.eta} alpha={config.alpha} beta={config.beta} delta_t={config.delta_t} "
        f"m_points={config.m_points} k_max={config.k_max} v0={config.initial_velocity}"
    )

    tasks = build_worker_tasks(config, population, n_workers, seed)

    if use_pool:
        pool = Pool(processes=n_workers)
        failed = False
        try:
            worker_results = _collect_results(
                pool.imap_unordered(_run_worker, tasks), n_workers, verbose
            )
        except BaseException as e:
            failed = True
            logger.error(f"Worker failed, aborting the whole run: {e!r}")
            raise
        finally:
            cleanup_pool(pool, terminate=failed)
    else:
        worker_results = _collect_results(map(_run_worker, tasks), n_workers, verbose)

    for result in worker_results:
        logger.info(
            f"Worker {result.worker_id}: {result.n_candidates} candidates, "
            f"local best {result.record.value:.6e} in {result.elapsed:.3f}s"
        )

    best = reduce_results(
        [result.record for result in worker_results], config.goal, method=reduction
    )
    elapsed = time.time() - start

    logger.info(f"Global best {best.value:.6e} at {format_vector(best.solution)}")
    logger.info(f"Total elapsed time: {elapsed:.6f}s")

    return SSOResult(
        best=best,
        config=config,
        worker_results=worker_results,
        n_workers=n_workers,
        population_size=population_size,
        elapsed=elapsed,
        reduction=reduction,
        initial_population=population.as_array(),
    )
