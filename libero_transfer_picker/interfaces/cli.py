"""Command line entry point for transfer recommendations.

Usage:
    # Defaults from config (season split, budget cap, greedy)
    libero-transfers

    # Brute force over the top 30 incoming players, at most 3 transfers
    libero-transfers --strategy brute_force --pool-size 30 --max-transfers 3

    # Integer program with a 20 second limit on custom data
    libero-transfers --strategy ilp --time-limit 20 --players data/players.json
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from libero_transfer_picker.adapters.json_repositories import (
    JsonMatchdayScoreRepository,
    JsonPlayerRepository,
    JsonRosterStore,
)
from libero_transfer_picker.config import config
from libero_transfer_picker.domain.models.transfer_plan import SelectionStrategy
from libero_transfer_picker.domain.services.transfer_optimization_service import (
    TransferOptimizationService,
)
from libero_transfer_picker.interfaces.display_utils import LoggingReportSink

app = typer.Typer(help="Libero Transfer Picker - transfers between two scoring periods")


def _round_range(start: Optional[int], end: Optional[int], default: tuple) -> tuple:
    return (
        default[0] if start is None else start,
        default[1] if end is None else end,
    )


@app.command()
def main(
    strategy: Optional[SelectionStrategy] = typer.Option(
        None, "--strategy", "-s", help="greedy, brute_force or ilp"
    ),
    max_transfers: Optional[int] = typer.Option(
        None, "--max-transfers", "-k", help="Maximum number of transfers"
    ),
    budget_cap: Optional[int] = typer.Option(
        None, "--budget-cap", "-b", help="Maximum roster value after transfers"
    ),
    pool_size: Optional[int] = typer.Option(
        None, "--pool-size", "-n", help="Top-N incoming players by target score"
    ),
    lineup_aware: Optional[bool] = typer.Option(
        None,
        "--lineup-aware/--raw-gain",
        help="Judge swaps by starting lineup improvement",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Brute force worker processes"
    ),
    time_limit: Optional[float] = typer.Option(
        None, "--time-limit", "-t", help="Seconds for brute force or ILP"
    ),
    source_start: Optional[int] = typer.Option(None, "--source-start"),
    source_end: Optional[int] = typer.Option(None, "--source-end"),
    target_start: Optional[int] = typer.Option(None, "--target-start"),
    target_end: Optional[int] = typer.Option(None, "--target-end"),
    players_path: Optional[Path] = typer.Option(None, "--players", help="Player metadata file"),
    matchday_dir: Optional[Path] = typer.Option(
        None, "--matchdays", help="Directory of NN.json matchday files"
    ),
    roster_path: Optional[Path] = typer.Option(None, "--roster", help="Roster file"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Recommend transfers for the current roster and log the report."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO")

    service = TransferOptimizationService(
        player_provider=JsonPlayerRepository(players_path),
        score_provider=JsonMatchdayScoreRepository(matchday_dir),
        roster_store=JsonRosterStore(roster_path),
        report_sink=LoggingReportSink(),
    )
    result = service.run(
        source_range=_round_range(source_start, source_end, config.season.source_range),
        target_range=_round_range(target_start, target_end, config.season.target_range),
        strategy=strategy,
        budget_cap=budget_cap,
        max_transfers=max_transfers,
        lineup_aware=lineup_aware,
        candidate_pool_size=pool_size,
        workers=workers,
        time_limit_seconds=time_limit,
    )
    if result.is_failure:
        logger.error(f"❌ {result.error.message}")
        raise typer.Exit(1)

    plan = result.value.plan
    typer.echo(
        f"{plan.status.value}: {plan.num_transfers} transfer(s), "
        f"{plan.total_gain:+d} pts, budget after {plan.budget_after}"
    )
    for transfer in plan.transfers:
        typer.echo(f"  {transfer}")


if __name__ == "__main__":
    app()
