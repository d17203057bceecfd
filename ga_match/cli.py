"""
CLI module for GA match.

Handles configuration loading, the startup banner, run dispatch and the
result report.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from .config import ConfigValidationError, RunConfig, load_run_config
from .data_models import Individual, SearchResult, SearchStatus
from .scheduler import GenerationalScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ga-match",
        description="Evolve a population of byte strings toward an exact target match"
    )
    parser.add_argument("--config", help="Run configuration YAML (built-in defaults when omitted)")
    parser.add_argument("--seed", type=int, help="Random seed (overrides config)")
    parser.add_argument("--workers", type=int, help="Worker pool size (overrides config)")
    parser.add_argument("--report-every", type=int, dest="report_every",
                        help="Print progress every N generations (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_banner(config: RunConfig) -> None:
    """Print the startup summary, one line per setting."""
    print(f"Target: {config.target_text}")
    print(f"Population size: {config.population_size}")
    print(f"Mutation rate: {config.mutation_rate}")
    cap = f"{config.generation_cap} (not enforced)" if config.unbounded else f"{config.generation_cap}"
    print(f"Generations: {cap}")
    print(f"Select from top: {config.elite_percent}%")


def make_progress_reporter(config: RunConfig) -> Optional[Callable[[int, Individual, int], None]]:
    """Return a callback printing a progress line every report_interval generations."""
    interval = config.report_interval
    if interval <= 0:
        return None

    def report(generation: int, best: Individual, best_fitness: int) -> None:
        if generation % interval == 0:
            print(f"  Generation {generation}: best {best_fitness}/{config.target_length} "
                  f"{best.decode()!r}")

    return report


def print_result(result: SearchResult) -> None:
    if result.status is SearchStatus.SOLVED:
        print(f"Solution found in generation {result.generation}!, Genes: {result.solution}")
    elif result.status is SearchStatus.EXHAUSTED:
        print("No exact solution found.")
    else:
        print(f"Search cancelled at generation {result.generation}.")


def run_search(config: RunConfig) -> SearchResult:
    """
    Run a search with the given configuration and report the outcome.

    This is the main entry point called by ga_match_cli.py.

    Args:
        config: Validated run configuration

    Returns:
        SearchResult of the run

    Raises:
        EmptyPopulationError: If selection runs on an empty population
    """
    print_banner(config)
    scheduler = GenerationalScheduler(config, on_generation=make_progress_reporter(config))
    result = scheduler.run()
    print_result(result)
    return result


def run_from_args(argv: Optional[List[str]] = None) -> SearchResult:
    """
    Parse arguments, load configuration and execute the search.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = load_run_config(args.config) if args.config else RunConfig()
    try:
        config = config.with_overrides(
            random_seed=args.seed,
            max_workers=args.workers,
            report_interval=args.report_every
        )
    except ConfigValidationError as e:
        raise ConfigValidationError(f"Invalid command-line override: {e}") from e

    return run_search(config)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point; exits 0 on a solved or exhausted run, 1 otherwise."""
    try:
        run_from_args(argv)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    sys.exit(0)
