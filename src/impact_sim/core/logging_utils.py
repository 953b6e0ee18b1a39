"""Run recording for impact sessions."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .model import ImpactorConfig, ImpactReport, SimulationListener, SimulationState

DEFAULT_RUNS_DIR = Path("data") / "runs"
LAST_RUN_MARKER = "last_run.txt"
TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"


class RunLogger(SimulationListener):
    """Buffered logger that stores per-frame telemetry and events to CSV files."""

    TIMESERIES_HEADER = [
        "frame",
        "progress",
        "x",
        "y",
        "z",
        "distance",
        "altitude_km",
        "intensity",
        "stage",
    ]
    EVENTS_HEADER = ["frame", "type", "progress", "altitude_km", "details"]

    def __init__(
        self,
        root_dir: str | Path = DEFAULT_RUNS_DIR,
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 10,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        def make_candidate(suffix: Optional[int] = None) -> str:
            base = run_id or f"{timestamp}_run"
            if suffix is None:
                return base
            if run_id:
                return f"{run_id}_{suffix}"
            return f"{base}_{suffix:02d}"

        candidate_id = make_candidate()
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = make_candidate(suffix)
            suffix += 1

        self.run_id = candidate_id
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / TIMESERIES_FILENAME
        self.events_path = self.run_dir / EVENTS_FILENAME
        self.meta_path = self.run_dir / META_FILENAME

        self._ts_file = self.timeseries_path.open("w", newline="")
        self._ts_file.write(",".join(self.TIMESERIES_HEADER) + "\n")
        self._ev_file = self.events_path.open("w", newline="")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")

        self._ts_buffer: list[str] = []
        self._ev_buffer: list[str] = []
        self._ts_threshold = max(1, timeseries_flush_threshold)
        self._ev_threshold = max(1, events_flush_threshold)
        self._meta: dict = {"run_id": self.run_id}
        self.closed = False

        last_run_marker = self.root_dir / LAST_RUN_MARKER
        last_run_marker.write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        self._meta.update(meta)
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(self._meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[object]) -> None:
        self._ts_buffer.append(",".join(self._format_event_value(v) for v in values))
        if len(self._ts_buffer) >= self._ts_threshold:
            self._flush_timeseries()

    def log_event(self, values: Sequence[object]) -> None:
        self._ev_buffer.append(",".join(self._format_event_value(v) for v in values))
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    # Session events

    def on_start(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        self.write_meta(
            {
                "size_m": impactor.size_m,
                "speed_km_s": impactor.speed_km_s,
                "angle_deg": impactor.angle_deg,
                "started_at": datetime.now().isoformat(timespec="seconds"),
            }
        )
        self._log_state_event("start", state)

    def on_tick(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        x, y, z = (float(c) for c in state.position)
        self.log_ts(
            [
                state.frame_count,
                state.progress,
                x,
                y,
                z,
                state.distance,
                state.altitude_km,
                state.effect_intensity,
                state.stage.label,
            ]
        )

    def on_entry(self, state: SimulationState) -> None:
        self._log_state_event("entry", state)

    def on_impact(self, state: SimulationState, report: ImpactReport) -> None:
        details = {
            "energy_j": report.kinetic_energy_j,
            "megatons": report.megatons_tnt,
            "crater_km": report.crater_diameter_km,
        }
        self._log_state_event("impact", state, details)
        self.write_meta({"report": {**details, "mass_kg": report.mass_kg}})
        self.flush()

    def _log_state_event(
        self, kind: str, state: SimulationState, details: dict | None = None
    ) -> None:
        details_text = json.dumps(details, sort_keys=True) if details else ""
        # details is JSON and may contain commas
        quoted = '"' + details_text.replace('"', '""') + '"' if details_text else ""
        self.log_event([state.frame_count, kind, state.progress, state.altitude_km, quoted])

    def flush(self) -> None:
        self._flush_timeseries()
        self._flush_events()

    def close(self) -> None:
        if self.closed:
            return
        self.flush()
        self._ts_file.close()
        self._ev_file.close()
        self.closed = True

    def _flush_timeseries(self) -> None:
        if self._ts_buffer:
            self._ts_file.write("\n".join(self._ts_buffer) + "\n")
            self._ts_file.flush()
            self._ts_buffer.clear()

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    @staticmethod
    def _format_event_value(value: object) -> str:
        if isinstance(value, (int, float)):
            return f"{value:.10g}"
        return str(value)

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = [
    "DEFAULT_RUNS_DIR",
    "EVENTS_FILENAME",
    "LAST_RUN_MARKER",
    "META_FILENAME",
    "RunLogger",
    "TIMESERIES_FILENAME",
]
