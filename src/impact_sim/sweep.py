"""Parameter sweep of crater size and impact energy over impactor size and speed."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import LogNorm

from impact_sim.core.model import ImpactorConfig
from impact_sim.core.physics import analyze_impact
from impact_sim.data.presets import SIZE_RANGE, SPEED_RANGE

# ===========================
# SWEEP SETTINGS
# ===========================
SIZE_POINTS = 120    # vertical resolution (y-axis), log spaced
SPEED_POINTS = 62    # horizontal resolution (x-axis)
SWEEP_ANGLE = 45.0   # the estimate does not depend on the entry angle

FIGURES_DIR = Path("figures")


# ===========================
# MAIN SWEEP
# ===========================
def run_sweep(
    size_points: int = SIZE_POINTS,
    speed_points: int = SPEED_POINTS,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    sizes = np.geomspace(SIZE_RANGE.minimum, SIZE_RANGE.maximum, size_points)
    speeds = np.linspace(SPEED_RANGE.minimum, SPEED_RANGE.maximum, speed_points)
    craters = np.zeros((sizes.size, speeds.size), dtype=float)
    megatons = np.zeros_like(craters)

    total = sizes.size * speeds.size
    print("\n--- Running impact sweep ---")
    print(f"Total {total} points ({speed_points} speeds × {size_points} sizes)")

    processed = 0
    for i, size in enumerate(sizes):
        for j, speed in enumerate(speeds):
            report = analyze_impact(ImpactorConfig(float(size), float(speed), SWEEP_ANGLE))
            craters[i, j] = report.crater_diameter_km
            megatons[i, j] = report.megatons_tnt
            processed += 1
        if i % 20 == 0:
            pct = 100 * processed / total
            print(f"  {i+1}/{sizes.size} rows done ({pct:.1f}%)")

    return sizes, speeds, craters, megatons


# ===========================
# PLOTTING
# ===========================
def plot_heatmap(
    sizes: np.ndarray,
    speeds: np.ndarray,
    craters: np.ndarray,
    megatons: np.ndarray,
    out_dir: Path = FIGURES_DIR,
) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 6))
    mesh = ax.pcolormesh(speeds, sizes, craters, shading="auto", cmap="inferno",
                         norm=LogNorm(vmin=craters.min(), vmax=craters.max()))
    cbar = fig.colorbar(mesh)
    cbar.set_label("Crater diameter [km]")
    levels = [10.0 ** p for p in range(-2, 9, 2) if megatons.min() <= 10.0 ** p <= megatons.max()]
    if levels:
        contours = ax.contour(speeds, sizes, megatons, levels=levels, colors="white", linewidths=0.8)
        ax.clabel(contours, fmt=lambda v: f"{v:g} MT", fontsize=8)
    ax.set_yscale("log")
    ax.set_xlabel("Impact speed [km/s]")
    ax.set_ylabel("Impactor diameter [m]")
    ax.set_title("Crater diameter by impactor size and speed")
    fig.tight_layout()
    out = out_dir / "crater_sweep.png"
    fig.savefig(out, dpi=180)
    plt.close(fig)
    print(f"\nHeatmap saved to {out}")
    return out


# ===========================
# MAIN
# ===========================
def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Sweep impactor size and speed and plot crater estimates.")
    parser.add_argument("--size-points", type=int, default=SIZE_POINTS)
    parser.add_argument("--speed-points", type=int, default=SPEED_POINTS)
    parser.add_argument("--out-dir", type=Path, default=FIGURES_DIR)
    args = parser.parse_args(argv)

    sizes, speeds, craters, megatons = run_sweep(args.size_points, args.speed_points)
    print(f"Crater range: {craters.min():.3f} km to {craters.max():.2f} km")
    print(f"Yield range: {megatons.min():.2e} MT to {megatons.max():.2e} MT")
    plot_heatmap(sizes, speeds, craters, megatons, args.out_dir)


if __name__ == "__main__":
    main()
