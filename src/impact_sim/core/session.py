"""Impact session state machine and the command dispatcher driving it."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

import numpy as np

from .config import SIM_CFG, SimulationCfg
from .errors import SessionStateError
from .model import (
    CameraShake,
    ImpactorConfig,
    ImpactReport,
    PlanetConfig,
    SimulationListener,
    SimulationState,
    Stage,
)
from .physics import analyze_impact, clamp, display_altitude_km, distance_between, shake_intensity_for_energy
from .timekeeping import DeferredTask, FrameScheduler
from .trajectory import Trajectory, build_trajectory

logger = logging.getLogger(__name__)


class ImpactSession:
    """One run of the approach, entry and impact sequence.

    Created when the user starts an impact, ticked once per rendered frame and
    discarded on restart. Listeners receive the per-tick HUD values, the entry
    transition, the impact report and the delayed restart signal.
    """

    def __init__(
        self,
        planet: PlanetConfig,
        impactor: ImpactorConfig,
        *,
        cfg: SimulationCfg = SIM_CFG,
        scheduler: FrameScheduler | None = None,
        rng: random.Random | None = None,
        listeners: Iterable[SimulationListener] = (),
    ) -> None:
        self.planet = planet
        self.impactor = impactor
        self.cfg = cfg
        self.scheduler = scheduler or FrameScheduler()
        self.rng = rng or random.Random()
        self.listeners: list[SimulationListener] = list(listeners)
        self.state = SimulationState()
        self.camera_shake = CameraShake(decay=cfg.shake_decay, cutoff=cfg.shake_cutoff)
        self.shake_offset = np.zeros(3, dtype=float)
        self.planet_center = np.zeros(3, dtype=float)
        self.trajectory: Trajectory | None = None
        self.report: ImpactReport | None = None
        self.restart_available = False
        self._restart_task: DeferredTask | None = None

    @property
    def stage(self) -> Stage:
        return self.state.stage

    @property
    def finished(self) -> bool:
        return self.state.stage is Stage.IMPACT

    def start(self, *, azimuth: float | None = None) -> Trajectory:
        if self.state.stage is not Stage.IDLE:
            raise SessionStateError(f"Session already started (stage={self.state.stage.label})")
        self.trajectory = build_trajectory(
            self.cfg.impact_point,
            self.impactor.angle_deg,
            self.cfg.start_distance,
            azimuth=azimuth,
            rng=self.rng,
            up=self.cfg.up_axis,
            arc_offset=self.cfg.arc_offset,
        )
        state = self.state
        state.position = self.trajectory.position(0.0)
        state.tangent = self.trajectory.tangent(0.0)
        state.distance = distance_between(state.position, self.planet_center)
        state.altitude_km = display_altitude_km(state.distance, self.cfg)
        state.stage = Stage.APPROACH
        self.scheduler.add_callback(self.tick)
        logger.info(
            "Impact started on %s: size=%.0f m speed=%.1f km/s angle=%.0f deg",
            self.planet.display_name,
            self.impactor.size_m,
            self.impactor.speed_km_s,
            self.impactor.angle_deg,
        )
        for listener in self.listeners:
            listener.on_start(state, self.impactor)
        return self.trajectory

    def tick(self) -> None:
        state = self.state
        state.frame_count += 1
        if state.stage in (Stage.APPROACH, Stage.ENTRY):
            self._advance()
        self.shake_offset = self.camera_shake.step(self.rng)

    def _advance(self) -> None:
        state = self.state
        cfg = self.cfg
        if self.trajectory is None:
            raise SessionStateError("Session advanced before start()")

        step = self.impactor.speed_km_s / cfg.speed_scale
        state.progress = clamp(state.progress + step, 0.0, 1.0)
        state.position = self.trajectory.position(state.progress)
        state.tangent = self.trajectory.tangent(state.progress)
        state.distance = distance_between(state.position, self.planet_center)
        state.altitude_km = display_altitude_km(state.distance, cfg)
        for listener in self.listeners:
            listener.on_tick(state, self.impactor)

        if state.stage is Stage.APPROACH and state.distance < cfg.entry_threshold:
            state.stage = Stage.ENTRY
            logger.debug("Atmospheric entry at frame %d", state.frame_count)
            for listener in self.listeners:
                listener.on_entry(state)

        if state.stage is Stage.ENTRY:
            state.effect_intensity += cfg.effect_intensity_step
            state.sheath_opacity = min(
                cfg.sheath_max_opacity, state.sheath_opacity + cfg.sheath_opacity_step
            )
            state.sheath_scale *= cfg.sheath_growth

        if state.progress >= 1.0:
            self._impact()

    def _impact(self) -> None:
        state = self.state
        state.stage = Stage.IMPACT
        state.progress = 1.0
        self.report = analyze_impact(self.impactor, self.cfg)
        self.camera_shake.start(shake_intensity_for_energy(self.report.kinetic_energy_j, self.cfg))
        logger.info(
            "Impact at frame %d: %.3e J, %.2f Mt, crater %.3f km",
            state.frame_count,
            self.report.kinetic_energy_j,
            self.report.megatons_tnt,
            self.report.crater_diameter_km,
        )
        for listener in self.listeners:
            listener.on_impact(state, self.report)
        self._restart_task = self.scheduler.call_later(self.cfg.restart_delay, self._reveal_restart)

    def _reveal_restart(self) -> None:
        self.restart_available = True
        for listener in self.listeners:
            listener.on_restart_available()

    def close(self) -> None:
        self.scheduler.remove_callback(self.tick)
        if self._restart_task is not None:
            self._restart_task.cancel()


class View(Enum):
    DESIGNER = "designer"
    SETUP = "setup"
    SIMULATION = "simulation"


@dataclass
class AppState:
    view: View = View.DESIGNER
    planet: PlanetConfig | None = None
    impactor: ImpactorConfig | None = None
    session: ImpactSession | None = None

    @property
    def target_name(self) -> str:
        return self.planet.display_name if self.planet is not None else ""


@dataclass
class CommandDispatcher:
    """Maps discrete user actions onto the app state.

    The renderer and audio layers never mutate the state directly; they send
    commands here and observe the session through listeners.
    """

    scheduler: FrameScheduler = field(default_factory=FrameScheduler)
    cfg: SimulationCfg = SIM_CFG
    rng: random.Random = field(default_factory=random.Random)
    listeners: list[SimulationListener] = field(default_factory=list)
    state: AppState = field(default_factory=AppState)

    def __post_init__(self) -> None:
        self._handlers: dict[str, Callable[..., Any]] = {
            "use_default_planet": self.use_default_planet,
            "confirm_planet": self.confirm_planet,
            "start_impact": self.start_impact,
            "restart": self.restart,
        }

    def dispatch(self, command: str, **kwargs: Any) -> Any:
        handler = self._handlers.get(command)
        if handler is None:
            raise SessionStateError(f"Unknown command '{command}'")
        logger.debug("Dispatching %s %s", command, kwargs)
        return handler(**kwargs)

    def use_default_planet(self) -> PlanetConfig:
        return self._set_planet(PlanetConfig.default_earth())

    def confirm_planet(
        self,
        planet_type: str,
        color: tuple[int, int, int] | str,
        diameter_km: float,
        atmosphere: float,
    ) -> PlanetConfig:
        return self._set_planet(PlanetConfig.custom(planet_type, color, diameter_km, atmosphere))

    def _set_planet(self, planet: PlanetConfig) -> PlanetConfig:
        if self.state.view is not View.DESIGNER:
            raise SessionStateError("A planet can only be chosen in the designer view")
        self.state.planet = planet
        self.state.view = View.SETUP
        return planet

    def start_impact(
        self,
        size_m: float,
        speed_km_s: float,
        angle_deg: float,
        *,
        azimuth: float | None = None,
    ) -> ImpactSession:
        if self.state.planet is None or self.state.view is not View.SETUP:
            raise SessionStateError("Choose a planet before starting an impact")
        impactor = ImpactorConfig(size_m, speed_km_s, angle_deg)
        session = ImpactSession(
            self.state.planet,
            impactor,
            cfg=self.cfg,
            scheduler=self.scheduler,
            rng=self.rng,
            listeners=self.listeners,
        )
        session.start(azimuth=azimuth)
        self.state.impactor = impactor
        self.state.session = session
        self.state.view = View.SIMULATION
        return session

    def restart(self) -> AppState:
        if self.state.session is not None:
            self.state.session.close()
        logger.info("Restarting from the designer")
        self.state = AppState()
        return self.state


__all__ = ["AppState", "CommandDispatcher", "ImpactSession", "View"]
