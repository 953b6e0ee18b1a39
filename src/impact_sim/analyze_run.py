"""Analyze a recorded impact run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from impact_sim.core.logging_utils import (
    DEFAULT_RUNS_DIR,
    EVENTS_FILENAME,
    LAST_RUN_MARKER,
    META_FILENAME,
    TIMESERIES_FILENAME,
)


FIGS_SUBDIR = "figs"
TEXT_COLUMNS = {"stage"}
PLANET_RADIUS = 10.0


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, list] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(value if key in TEXT_COLUMNS else float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "frame": int(float(row["frame"])),
                "type": row["type"],
                "progress": float(row["progress"]),
                "altitude_km": float(row["altitude_km"]),
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def find_event(events: List[dict], kind: str) -> dict | None:
    for event in events:
        if event["type"] == kind:
            return event
    return None


def _mark_events(ax, events: List[dict]) -> None:
    styles = {
        "entry": ("#f59f00", "--", "Atmospheric entry"),
        "impact": ("#e03131", "-", "Impact"),
    }
    for event in events:
        style = styles.get(event["type"])
        if style is None:
            continue
        color, linestyle, label = style
        ax.axvline(event["frame"], color=color, linestyle=linestyle, alpha=0.7, label=label)


def plot_altitude(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["frame"], ts["altitude_km"], color="#4dabf7")
    _mark_events(ax, events)
    if ax.get_legend_handles_labels()[0]:
        ax.legend()
    ax.set_xlabel("frame")
    ax.set_ylabel("altitude [km]")
    ax.set_title("Displayed altitude over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "altitude.png", dpi=150)
    plt.close(fig)


def plot_progress(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["frame"], ts["progress"], color="#94d82d", label="progress")
    ax.plot(ts["frame"], ts["intensity"], color="#ffa94d", label="entry intensity")
    _mark_events(ax, events)
    ax.legend()
    ax.set_xlabel("frame")
    ax.set_ylabel("[-]")
    ax.set_title("Trajectory progress and entry effects")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "progress.png", dpi=150)
    plt.close(fig)


def plot_trajectory(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    """Projection of the flight path onto the x-z and x-y planes."""

    fig, axes = plt.subplots(1, 2, figsize=(10, 5))
    theta = np.linspace(0, 2 * np.pi, 256)
    for ax, (h_key, v_key) in zip(axes, (("x", "z"), ("x", "y"))):
        ax.plot(ts[h_key], ts[v_key], color="#6bc5c0", lw=1.5, label="Meteor")
        ax.plot(PLANET_RADIUS * np.cos(theta), PLANET_RADIUS * np.sin(theta), color="#4a86f7", alpha=0.6)
        ax.scatter([0.0], [0.0], color="#4a86f7", s=20, label="Planet centre")
        ax.set_aspect("equal", "box")
        ax.set_xlabel(f"{h_key} [scene units]")
        ax.set_ylabel(f"{v_key} [scene units]")
        ax.set_title(f"Trajectory ({h_key}-{v_key})")
        ax.legend(loc="upper right")
    fig.tight_layout()
    fig.savefig(fig_dir / "trajectory.png", dpi=150)
    plt.close(fig)


def print_summary(run_dir: Path, meta: dict, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    print(f"Run: {run_dir.name}")
    if "planet" in meta:
        print(f" Target: {meta['planet']}")
    if "size_m" in meta:
        print(
            f" Impactor: {meta['size_m']:g} m at {meta['speed_km_s']:g} km/s, "
            f"{meta['angle_deg']:g} deg"
        )
    print(f" Frames recorded: {len(ts.get('frame', []))}")
    entry = find_event(events, "entry")
    impact = find_event(events, "impact")
    if entry is not None:
        print(f" Entry at frame {entry['frame']} (altitude {entry['altitude_km']:.1f} km)")
    else:
        print(" Entry: not recorded")
    if impact is not None:
        print(f" Impact at frame {impact['frame']}")
    else:
        print(" Impact: not recorded (run ended early)")
    report = meta.get("report")
    if report:
        print(f" Mass: {report['mass_kg']:.2e} kg")
        print(f" Energy: {report['energy_j']:.2e} J")
        print(f" Yield: {report['megatons']:.2f} MT TNT")
        print(f" Crater diameter: {report['crater_km']:.2f} km")


def resolve_run_dir(run_dir: str | None, base_runs_dir: Path) -> Path:
    if run_dir:
        run_path = Path(run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / run_dir
        return run_path
    last_run_file = base_runs_dir / LAST_RUN_MARKER
    if not last_run_file.exists():
        raise FileNotFoundError(f"No run given and {LAST_RUN_MARKER} is missing.")
    return base_runs_dir / last_run_file.read_text(encoding="utf-8").strip()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded impact run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path or id of a specific run directory")
    parser.add_argument("--runs-dir", type=Path, default=DEFAULT_RUNS_DIR, help="Directory holding runs")
    args = parser.parse_args(argv)

    try:
        run_path = resolve_run_dir(args.run_dir, args.runs_dir)
    except FileNotFoundError as exc:
        parser.error(str(exc))

    if not run_path.is_dir():
        parser.error(f"Could not find run directory: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run directory is missing required files (meta/timeseries/events).")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)

    if not ts or not len(ts.get("frame", [])):
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    plot_altitude(fig_dir, ts, events)
    plot_progress(fig_dir, ts, events)
    plot_trajectory(fig_dir, ts)

    print_summary(run_path, meta, ts, events)


if __name__ == "__main__":
    main()
