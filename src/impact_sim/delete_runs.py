"""
Prune recorded impact runs.

Only directories that look like RunLogger output (they hold a timeseries
file) are touched. The newest ``keep`` runs survive, and the last-run marker
is pointed at the newest survivor or removed when nothing is left.
"""
from __future__ import annotations

import argparse
import shutil
from pathlib import Path
from typing import Sequence

from impact_sim.core.logging_utils import DEFAULT_RUNS_DIR, LAST_RUN_MARKER, TIMESERIES_FILENAME


def find_run_dirs(runs_dir: Path) -> list[Path]:
    """Recorded runs, oldest first (run ids start with their timestamp)."""
    return sorted(d for d in runs_dir.iterdir() if d.is_dir() and (d / TIMESERIES_FILENAME).exists())


def _update_marker(runs_dir: Path, survivors: list[Path], keep_last_run_file: bool) -> None:
    marker = runs_dir / LAST_RUN_MARKER
    if keep_last_run_file:
        return
    if survivors:
        marker.write_text(survivors[-1].name, encoding="utf-8")
        print(f"{LAST_RUN_MARKER} now points at {survivors[-1].name}")
    elif marker.exists():
        try:
            marker.unlink()
            print(f"Deleted: {LAST_RUN_MARKER}")
        except OSError as e:
            print(f"Error deleting {LAST_RUN_MARKER}: {e}")


def delete_all_runs(
    runs_dir: Path,
    dry_run: bool = False,
    keep_last_run_file: bool = False,
    skip_confirm: bool = False,
    keep: int = 0,
) -> tuple[int, int]:
    """
    Delete recorded runs from ``runs_dir``.

    Parameters
    ----------
    runs_dir : Path
        Directory RunLogger writes into (e.g. data/runs)
    dry_run : bool
        Only report what would be deleted
    keep_last_run_file : bool
        Leave the last-run marker untouched
    skip_confirm : bool
        Do not prompt before deleting
    keep : int
        Number of newest runs to keep

    Returns
    -------
    tuple[int, int]
        Number of runs deleted and number that failed.
    """
    if keep < 0:
        raise ValueError("keep must be non-negative")
    if not runs_dir.exists():
        print(f"Error: Directory {runs_dir} does not exist.")
        return 0, 0

    run_dirs = find_run_dirs(runs_dir)
    survivors = run_dirs[max(0, len(run_dirs) - keep):] if keep else []
    doomed = run_dirs[: len(run_dirs) - len(survivors)]
    if not doomed:
        print(f"Nothing to delete in {runs_dir}")
        return 0, 0

    print(f"Deleting {len(doomed)} of {len(run_dirs)} runs:")
    for run_dir in doomed:
        print(f"  - {run_dir.name}")

    if dry_run:
        print("\n[DRY RUN] Nothing was deleted.")
        return 0, 0

    if not skip_confirm:
        response = input(f"\nDelete {len(doomed)} run directories? (yes/no): ")
        if response.lower() not in ["yes", "y"]:
            print("Deletion cancelled.")
            return 0, 0

    deleted_count = 0
    failed_count = 0
    for run_dir in doomed:
        try:
            shutil.rmtree(run_dir)
            deleted_count += 1
        except OSError as e:
            print(f"Error deleting {run_dir.name}: {e}")
            failed_count += 1
            survivors.insert(0, run_dir)

    _update_marker(runs_dir, survivors, keep_last_run_file)
    print(f"\nSummary: {deleted_count} runs deleted, {failed_count} failed.")
    return deleted_count, failed_count


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Delete recorded impact runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  impact-lab-delete-runs --dry-run
  impact-lab-delete-runs --keep 3 --yes
        """,
    )
    parser.add_argument("--runs-dir", type=Path, default=DEFAULT_RUNS_DIR, help="Directory holding runs")
    parser.add_argument("--dry-run", action="store_true", help="Preview what would be deleted")
    parser.add_argument("--keep", type=int, default=0, help="Keep the newest N runs")
    parser.add_argument(
        "--keep-last-run-file",
        action="store_true",
        help=f"Leave {LAST_RUN_MARKER} untouched",
    )
    parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt")
    args = parser.parse_args(argv)
    if args.keep < 0:
        parser.error("--keep must be non-negative")
    delete_all_runs(
        args.runs_dir,
        args.dry_run,
        args.keep_last_run_file,
        skip_confirm=args.yes,
        keep=args.keep,
    )


if __name__ == "__main__":
    main()
