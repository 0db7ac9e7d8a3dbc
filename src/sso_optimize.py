import argparse
import logging
import sys

from rich.traceback import install

from sso_optimizer import NUM_TEST_CASES, get_problem_config, list_test_cases, sso_optimize
from sso_optimizer.optimizer import default_worker_count, sample_population
from sso_optimizer.reduction import REDUCTION_METHODS
from sso_optimizer.utils import console, format_population, result_panel, setup_logging


def build_parser():
    cases = ", ".join(f"{tc}={name} ({goal})" for tc, name, goal in list_test_cases())
    parser = argparse.ArgumentParser(
        prog="sso-optimize",
        description="run shark smell optimization on a benchmark function",
    )
    parser.add_argument("NP", type=int, help="population size")
    parser.add_argument("TC", type=int, help=f"test case: {cases}")
    parser.add_argument(
        "-w", "--workers", type=int, default=None,
        help="number of worker processes (default: cpu_count - 1, at most NP)",
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="base random seed")
    parser.add_argument(
        "-r", "--reduction", choices=REDUCTION_METHODS, default="tree",
        help="how worker results are combined (default: tree)",
    )
    parser.add_argument(
        "--show-population", action="store_true", help="print the initial population"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: INFO)",
    )
    return parser


def validate_args(parser, args):
    """Check sizes before any worker is started; exits with usage on error."""
    if args.NP < 1:
        parser.error(f"NP must be >= 1, got {args.NP}")
    if not 0 <= args.TC < NUM_TEST_CASES:
        parser.error(f"TC must be in [0, {NUM_TEST_CASES - 1}], got {args.TC}")
    if args.workers is None:
        args.workers = default_worker_count(args.NP)
    if args.workers < 1:
        parser.error(f"number of workers must be >= 1, got {args.workers}")
    if args.workers > args.NP:
        parser.error(f"too many workers ({args.workers}) for population size {args.NP}")
    if args.seed is not None and args.seed < 0:
        parser.error(f"seed must be >= 0, got {args.seed}")
    return args


def main(argv=None):
    parser = build_parser()
    args = validate_args(parser, parser.parse_args(argv))

    install()
    setup_logging(args.log_level)

    config = get_problem_config(args.TC)
    population = sample_population(config, args.NP, args.seed)
    if args.show_population:
        console.print("Initial positions:")
        console.print(format_population(population.as_array(), args.workers))

    try:
        result = sso_optimize(
            config,
            args.NP,
            n_workers=args.workers,
            seed=args.seed,
            reduction=args.reduction,
            initial_positions=population.as_array(),
        )
    except Exception as e:
        logging.error(f"Optimization aborted: {e}")
        return 1

    console.print(result_panel(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
