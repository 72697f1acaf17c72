"""CLI interface for lendcycle"""

import logging
import re
from pathlib import Path
from typing import List, Optional

import click
from web3 import Web3

from lendcycle.application.cycle_scheduler import CycleScheduler
from lendcycle.domain.errors import FatalStartupFailure
from lendcycle.domain.models.cycle import CycleOutcome, CyclePlan
from lendcycle.infrastructure.cancellation import CancellationToken
from lendcycle.infrastructure.chain.base import StakingActions
from lendcycle.infrastructure.chain.lending_pool import LendingPoolClient
from lendcycle.infrastructure.chain.mock import MockStakingClient
from lendcycle.infrastructure.config.config_manager import ConfigManager
from lendcycle.infrastructure.retry import RetryExecutor

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


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
    # web3 and urllib3 are noisy at DEBUG
    if not verbose:
        for noisy in ("web3", "urllib3"):
            logging.getLogger(noisy).setLevel(logging.WARNING)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_cycle_count(answer: str) -> int:
    """Parse the answer to the cycle prompt

    A leading integer is used as-is, so "0" or a negative number gives an empty
    plan. Empty or non-numeric input falls back to a single cycle.

    Args:
        answer: Raw console input

    Returns:
        Number of cycles to run
    """
    match = _LEADING_INT.match(answer or "")
    if match is None:
        return 1
    return int(match.group(1))


def _create_actions(config_manager: ConfigManager, dry_run: bool) -> StakingActions:
    """Create the stake/unstake collaborator

    Raises:
        FatalStartupFailure: If the signing key is missing or the RPC is unreachable
    """
    if dry_run:
        logger.info("Dry run: no transactions will be sent")
        return MockStakingClient()

    private_key = config_manager.get_private_key()
    return LendingPoolClient(config_manager.config, private_key)


def _output_outcomes(outcomes: List[CycleOutcome], plan: CyclePlan) -> None:
    """Output cycle results to console"""
    succeeded = [o for o in outcomes if o.is_success]
    failed = [o for o in outcomes if not o.is_success]

    click.echo("\n" + "=" * 80)
    click.echo("Cycle Statistics")
    click.echo("=" * 80)
    click.echo(f"Cycles planned: {max(plan.total_cycles, 0)}")
    click.echo(f"Cycles run: {len(outcomes)}")
    click.echo(f"Succeeded: {len(succeeded)}")
    if failed:
        click.echo(f"Failed: {len(failed)}", err=True)
        for outcome in failed:
            click.echo(f"  - Cycle {outcome.cycle} ({outcome.stage}): {outcome.reason}", err=True)

    if len(outcomes) < max(plan.total_cycles, 0):
        click.echo("\nStopped before all cycles completed.")
    else:
        click.echo("\nAll done!")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .lendcycle.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """lendcycle - randomized lending pool stake/unstake cycles"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--dry-run", is_flag=True, help="Use a simulated client instead of sending transactions")
@click.pass_context
def run(ctx, dry_run: bool):
    """Run stake/unstake cycles against the lending pool."""
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        actions = _create_actions(config_manager, dry_run)

        answer = click.prompt("How many cycles to run?", default="", show_default=False)
        plan = CyclePlan(total_cycles=parse_cycle_count(answer))

        cancel_token = CancellationToken()
        executor = RetryExecutor(config_manager.get_retry_policy(), cancel_token=cancel_token)
        scheduler = CycleScheduler(executor, config_manager.get_delay_range(), cancel_token=cancel_token)

        outcomes = []
        with cancel_token.stop_on_signal():
            for outcome in scheduler.run(plan, actions):
                outcomes.append(outcome)

        _output_outcomes(outcomes, plan)

    except click.Abort:
        # Ctrl+C at the prompt is a normal shutdown
        click.echo("\nShutting down...")
    except click.ClickException:
        raise
    except FatalStartupFailure as e:
        _die(str(e), verbose=verbose, exc=e)
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


@cli.command()
@click.pass_context
def balances(ctx):
    """Show native and token balances of the configured wallet."""
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        client = LendingPoolClient(config_manager.config, config_manager.get_private_key())
        current = client.get_balances()

        click.echo(f"Wallet: {client.address}")
        click.echo(f"- Native: {Web3.from_wei(current.native_wei, 'ether')}")
        click.echo(f"- Token: {Web3.from_wei(current.token_wei, 'ether')}")

    except click.ClickException:
        raise
    except FatalStartupFailure as e:
        _die(str(e), verbose=verbose, exc=e)
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
