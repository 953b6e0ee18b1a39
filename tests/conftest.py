import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from impact_sim.core.model import SimulationListener


class RecordingListener(SimulationListener):
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.stages: list[int] = []
        self.progress: list[float] = []
        self.reports: list = []

    def on_start(self, state, impactor) -> None:
        self.calls.append("start")

    def on_tick(self, state, impactor) -> None:
        self.calls.append("tick")
        self.stages.append(state.stage.value)
        self.progress.append(state.progress)

    def on_entry(self, state) -> None:
        self.calls.append("entry")

    def on_impact(self, state, report) -> None:
        self.calls.append("impact")
        self.reports.append(report)

    def on_restart_available(self) -> None:
        self.calls.append("restart_available")


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()
