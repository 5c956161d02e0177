"""
Command-line interface for rideassign using Typer.
"""

from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from rideassign import __version__
from rideassign.api import assign as api_assign
from rideassign.config import load_rideassign_params
from rideassign.core_types import AssignmentResult, InvalidRecordError
from rideassign.routing.osrm_client import DEFAULT_OSRM_URL, OSRMClient
from rideassign.utils.data_processing import write_records
from rideassign.utils.logging import (
    LogLevel,
    ProgressTracker,
    log_debug,
    log_error,
    log_success,
    setup_logging,
)
from rideassign.utils.synthetic import generate_drivers, generate_rides
from rideassign.utils.time_codec import MalformedTimeError

app = typer.Typer(
    help="Rideassign: greedy minimum-cost assignment of scheduled rides to drivers",
    add_completion=False,
)
console = Console()


def _summary_table(result: AssignmentResult) -> Table:
    table = Table(title="Assignment Results", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Cost", f"{result.total_cost:,}")
    table.add_row("Base Cost", f"{result.real_base_cost:,.2f}")
    table.add_row("Fairness Penalty", f"{result.total_penalty:,.2f}")
    table.add_row("Assigned Rides", str(result.assigned_count))
    table.add_row("Unassigned Rides", str(len(result.unassigned_ride_ids)))
    table.add_row("Drivers Used", str(len(result.assignments)))
    if result.fairness is not None:
        table.add_row(
            "Rides per Driver",
            f"min {result.fairness.min} / max {result.fairness.max} / "
            f"avg {result.fairness.avg:.2f} / std {result.fairness.std_dev:.2f}",
        )
    return table


@app.command()
def assign(
    drivers: Path = typer.Option(
        ..., "--drivers", "-d", help="Path to drivers JSON or CSV file"
    ),
    rides: Path = typer.Option(..., "--rides", "-r", help="Path to rides JSON or CSV file"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    output: Path = typer.Option("results", "--output", "-o", help="Output directory"),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Output format (json, csv); defaults to the config"
    ),
    backend: str | None = typer.Option(
        None, "--backend", "-b", help="Routing backend (osrm, straight_line)"
    ),
    air_filter: bool | None = typer.Option(
        None,
        "--air-filter/--no-air-filter",
        help="Skip routing lookups for pairs farther apart than --max-air-km",
    ),
    max_air_km: float | None = typer.Option(
        None, "--max-air-km", help="Air-distance cutoff in km for the filter"
    ),
    fairness: bool | None = typer.Option(
        None, "--fairness/--no-fairness", help="Blend a load penalty into the driver choice"
    ),
    fairness_weight: float | None = typer.Option(
        None, "--fairness-weight", help="Weight of the fairness penalty"
    ),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Parallel driver evaluations per ride"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Assign rides to drivers.

    Rides are processed in start-time order and each goes to the feasible
    driver with the lowest incremental cost. Rides no driver can reach in
    time are reported as unassigned.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    for label, path in (("Drivers", drivers), ("Rides", rides)):
        if not path.exists():
            log_error(f"{label} file not found: {path}")
            raise typer.Exit(1)

    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)

    if format is not None and format not in ["json", "csv"]:
        log_error("Invalid format. Choose 'json' or 'csv'")
        raise typer.Exit(1)

    if config is not None:
        try:
            load_rideassign_params(config)
        except ValueError as e:
            log_error(str(e))
            raise typer.Exit(1)

    overrides = {
        "routing_backend": backend,
        "use_air_distance_filter": air_filter,
        "max_air_distance_km": max_air_km,
        "fairness_mode": fairness,
        "fairness_weight": fairness_weight,
        "max_workers": workers,
        "debug": debug or None,
    }

    def _run() -> AssignmentResult:
        return api_assign(
            drivers=drivers,
            rides=rides,
            config=config,
            output_dir=output,
            format=format,
            verbose=verbose,
            **overrides,
        )

    try:
        if not quiet:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Assigning rides...", total=None)
                result = _run()
                progress.update(task, completed=True)
        else:
            result = _run()

        if not quiet:
            console.print(_summary_table(result))
            if result.unassigned_ride_ids:
                console.print(
                    f"[yellow]Unassigned:[/yellow] {', '.join(result.unassigned_ride_ids)}"
                )
        log_success(f"Results saved to {output}/")

    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except (MalformedTimeError, InvalidRecordError) as e:
        log_error(f"Invalid input: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        log_error(f"Unexpected error: {e}")
        if debug:
            import traceback

            log_debug(traceback.format_exc())
        raise typer.Exit(1)


@app.command()
def generate(
    drivers: int = typer.Option(50, "--drivers", help="Number of drivers to generate"),
    rides: int = typer.Option(200, "--rides", help="Number of rides to generate"),
    output: Path = typer.Option(
        Path("data"), "--output", "-o", help="Directory for drivers.json and rides.json"
    ),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Random seed"),
    snap: bool = typer.Option(
        False, "--snap", help="Snap points to the road network via OSRM nearest"
    ),
    osrm_url: str = typer.Option(DEFAULT_OSRM_URL, "--osrm-url", help="OSRM server URL"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Generate synthetic drivers and rides for demos and load tests.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if drivers < 0 or rides < 0:
        log_error("Counts must be non-negative")
        raise typer.Exit(1)

    rng = np.random.default_rng(seed)
    snapper = OSRMClient(base_url=osrm_url) if snap else None

    progress = ProgressTracker(["Generate drivers", "Generate rides", "Write files"])

    driver_list = generate_drivers(drivers, rng=rng, snapper=snapper)
    progress.advance(f"Generated {len(driver_list)} drivers")

    ride_list = generate_rides(rides, rng=rng, snapper=snapper)
    progress.advance(f"Generated {len(ride_list)} rides")

    drivers_path = write_records(output / "drivers.json", driver_list)
    rides_path = write_records(output / "rides.json", ride_list)
    progress.advance(f"Wrote {drivers_path} and {rides_path}")
    progress.close()

    log_success(f"Synthetic data saved to {output}/")


@app.command()
def version() -> None:
    """
    Show the rideassign version.
    """
    console.print(f"rideassign version {__version__}")


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        setup_logging()


if __name__ == "__main__":
    app()
