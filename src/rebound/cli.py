"""CLI interface for Rebound"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Tuple

import click

from rebound.domain.backoff import BackoffPolicy
from rebound.domain.config import BackoffConfig, JitterConfig
from rebound.domain.jitter import Jitter
from rebound.domain.models import RetryContext
from rebound.infrastructure.config.config_manager import ConfigManager, ConfigurationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def compute_schedule(
    policy: BackoffPolicy,
    jitter: Jitter,
    attempts: int,
) -> List[Tuple[int, timedelta, timedelta]]:
    """Evaluate a policy for consecutive attempts the way a retry loop would

    Each applied delay is fed back as the previous backoff of the next attempt.

    Args:
        policy: Backoff policy
        jitter: Jitter applied to each computed delay
        attempts: Number of retries to simulate

    Returns:
        List of (iteration, computed delay, applied delay)
    """
    schedule = []
    context = RetryContext(iteration=1)
    for _ in range(attempts):
        backoff = policy.evaluate(context)
        applied = jitter.apply(backoff)
        schedule.append((context.iteration, backoff.delay, applied))
        context = context.next(applied)
    return schedule


def _apply_overrides(
    config_manager: ConfigManager,
    strategy: Optional[str],
    interval: Optional[float],
    first_backoff: Optional[float],
    max_backoff: Optional[float],
    factor: Optional[int],
    based_on_previous: Optional[bool],
    jitter_factor: Optional[float],
    seed: Optional[int],
) -> None:
    """Apply CLI option overrides on top of the loaded configuration"""
    backoff_updates = {
        "strategy": strategy,
        "interval": interval,
        "first_backoff": first_backoff,
        "max_backoff": max_backoff,
        "factor": factor,
        "based_on_previous_value": based_on_previous,
    }
    backoff_updates = {k: v for k, v in backoff_updates.items() if v is not None}
    if backoff_updates:
        merged = config_manager.config.backoff.model_dump() | backoff_updates
        config_manager.config.backoff = BackoffConfig(**merged)

    if jitter_factor is not None or seed is not None:
        merged = config_manager.config.jitter.model_dump()
        if jitter_factor is not None:
            merged.update(enabled=True, factor=jitter_factor)
        if seed is not None:
            merged["seed"] = seed
        config_manager.config.jitter = JitterConfig(**merged)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .rebound.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """Rebound - retry backoff policies"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--attempts", "-n", type=click.IntRange(min=1), default=5, show_default=True,
              help="Number of retries to show")
@click.option(
    "--strategy",
    type=click.Choice(["zero", "fixed", "exponential"], case_sensitive=False),
    help="Backoff strategy. Overrides config.",
)
@click.option("--interval", type=float, help="Fixed strategy delay in seconds")
@click.option("--first-backoff", type=float, help="First exponential delay in seconds")
@click.option("--max-backoff", type=float, help="Maximum exponential delay in seconds")
@click.option("--factor", type=click.IntRange(min=1), help="Exponential multiplier")
@click.option("--based-on-previous/--absolute", default=None,
              help="Grow from the previously applied delay instead of the iteration")
@click.option("--jitter", "jitter_factor", type=click.FloatRange(0.0, 1.0),
              help="Enable random jitter with this factor")
@click.option("--seed", type=int, help="Random seed for jitter")
@click.pass_context
def schedule(
    ctx,
    attempts: int,
    strategy: Optional[str],
    interval: Optional[float],
    first_backoff: Optional[float],
    max_backoff: Optional[float],
    factor: Optional[int],
    based_on_previous: Optional[bool],
    jitter_factor: Optional[float],
    seed: Optional[int],
):
    """Print the delays a backoff policy produces for consecutive retries."""
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        _apply_overrides(
            config_manager,
            strategy.lower() if strategy else None,
            interval,
            first_backoff,
            max_backoff,
            factor,
            based_on_previous,
            jitter_factor,
            seed,
        )
        policy = config_manager.build_backoff_policy()
        jitter = config_manager.build_jitter()
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    except ValueError as e:
        _die(f"Invalid option: {e}", verbose=verbose, exc=e)

    logger.debug(f"Using backoff policy: {policy!r}")
    click.echo(f"{'attempt':>7}  {'computed (s)':>14}  {'applied (s)':>14}")
    for iteration, computed, applied in compute_schedule(policy, jitter, attempts):
        click.echo(
            f"{iteration:>7}  {computed.total_seconds():>14.3f}  {applied.total_seconds():>14.3f}"
        )


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
