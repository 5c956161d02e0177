"""
save_results.py - persistence of assignment results

Single exit point for anything that hits disk after an assignment run, so the
scheduler and cost model stay free of side effects.

• JSON: the result wire shape plus the run parameters and timing spans.
• CSV: one row per (driver, ride) in commit order.
"""

import json
from datetime import datetime
from pathlib import Path

from rideassign.config.params import RideassignParams
from rideassign.core_types import AssignmentResult
from rideassign.utils.logging import RideassignLogger

logger = RideassignLogger.get_logger(__name__)


def _output_path(params: RideassignParams, filename: str | Path | None, format: str) -> Path:
    if filename is not None:
        return Path(filename)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return params.io.results_dir / f"assignment_results_{timestamp}.{format}"


def save_assignment_results(
    result: AssignmentResult,
    params: RideassignParams,
    filename: str | Path | None = None,
    format: str | None = None,
) -> Path:
    """Save an assignment result as JSON or CSV and return the written path."""
    format = format or params.io.format
    if format not in {"json", "csv"}:
        raise ValueError(f"Unsupported output format '{format}'; use 'json' or 'csv'")

    output_path = _output_path(params, filename, format)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "json":
        payload = {
            "Generated": datetime.now().isoformat(timespec="seconds"),
            "Result": result.to_dict(),
            "Summary": {
                "Assigned Rides": result.assigned_count,
                "Unassigned Rides": len(result.unassigned_ride_ids),
                "Drivers Used": len(result.assignments),
            },
            "Parameters": params.to_dict(),
        }
        if result.time_measurements:
            payload["Time Measurements"] = [m.to_dict() for m in result.time_measurements]
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
    else:
        result.to_dataframe().to_csv(output_path, index=False)

    logger.info(f"Results saved to {output_path}")
    return output_path
