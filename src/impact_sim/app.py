# src/impact_sim/app.py
"""
Impact Lab - Interactive Impact Simulator
=========================================

Design a planet, configure an impactor and watch it strike, with an energy
and crater estimate at the end of the run.
"""
from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace
from pathlib import Path
from typing import Callable, Sequence

import pygame

from impact_sim.core.config import AUDIO_CFG, RENDER_CFG, SIM_CFG, AudioCfg, RenderCfg, SimulationCfg
from impact_sim.core.logging_utils import DEFAULT_RUNS_DIR, RunLogger
from impact_sim.core.model import (
    ImpactorConfig,
    ImpactReport,
    PlanetConfig,
    PlanetType,
    SimulationListener,
    SimulationState,
)
from impact_sim.core.session import CommandDispatcher, ImpactSession, View
from impact_sim.core.timekeeping import DeferredTask, FrameScheduler
from impact_sim.data.presets import (
    ANGLE_RANGE,
    ATMOSPHERE_RANGE,
    COLOR_SWATCHES,
    CUSTOM_TYPES,
    DEFAULT_CUSTOM_COLOR,
    DIAMETER_RANGE,
    SIZE_RANGE,
    SPEED_RANGE,
    get_preset,
)
from impact_sim.logging_config import setup_logging
from impact_sim.render import (
    AssetLibrary,
    Button,
    ButtonVisualStyle,
    ImpactScene,
    Slider,
    SwatchRow,
    build_text_panel,
    draw_starfield,
    generate_starfield,
    get_text_surface,
    load_font,
    render_sphere,
    set_hud_alpha,
)
from impact_sim.render.audio import AudioEngine

logger = logging.getLogger(__name__)

FONT_NAMES = ["Inter", "Segoe UI", "Helvetica Neue", "Helvetica", "Arial"]
PREVIEW_TEXTURE_SIZE = (96, 48)
PREVIEW_RADIUS = 110


class HudPresenter(SimulationListener):
    """Holds what the HUD shows; fed by the running session."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.altitude_km = 0.0
        self.speed_km_s = 0.0
        self.stage_label = ""
        self.report_lines: list[str] = []
        self.restart_visible = False

    def on_start(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        self.reset()
        self.altitude_km = state.altitude_km
        self.speed_km_s = impactor.speed_km_s
        self.stage_label = state.stage.label

    def on_tick(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        self.altitude_km = state.altitude_km
        self.speed_km_s = impactor.speed_km_s
        self.stage_label = state.stage.label

    def on_entry(self, state: SimulationState) -> None:
        self.stage_label = state.stage.label

    def on_impact(self, state: SimulationState, report: ImpactReport) -> None:
        self.altitude_km = 0.0
        self.stage_label = state.stage.label
        self.report_lines = report.format_lines()

    def on_restart_available(self) -> None:
        self.restart_visible = True

    def hud_lines(self) -> list[str]:
        return [
            f"Altitude: {self.altitude_km:,.0f} km",
            f"Velocity: {self.speed_km_s:g} km/s",
        ]


class ImpactLabApp:
    def __init__(
        self,
        *,
        render_cfg: RenderCfg = RENDER_CFG,
        sim_cfg: SimulationCfg = SIM_CFG,
        audio_cfg: AudioCfg = AUDIO_CFG,
        seed: int | None = None,
        log_runs: bool = False,
        runs_dir: Path = DEFAULT_RUNS_DIR,
    ) -> None:
        self.render_cfg = render_cfg
        self.sim_cfg = sim_cfg
        self.seed = seed if seed is not None else random.randint(0, 999_999)
        self.log_runs = log_runs
        self.runs_dir = runs_dir

        pygame.init()
        pygame.display.set_caption("Impact Lab")
        self.screen = pygame.display.set_mode((render_cfg.width, render_cfg.height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()

        self.title_font = load_font(FONT_NAMES, 34, bold=True)
        self.font = load_font(FONT_NAMES, 20)
        self.small_font = load_font(FONT_NAMES, 16)

        self.scheduler = FrameScheduler()
        self.presenter = HudPresenter()
        self.audio = AudioEngine(audio_cfg, seed=self.seed)
        self.dispatcher = CommandDispatcher(
            scheduler=self.scheduler,
            cfg=sim_cfg,
            rng=random.Random(self.seed),
            listeners=[self.presenter, self.audio],
        )
        self.assets = AssetLibrary()
        self.scene: ImpactScene | None = None
        self.run_logger: RunLogger | None = None
        self.menu_stars = generate_starfield(render_cfg.star_count, size=self.screen.get_size())

        self.design_type: PlanetType = CUSTOM_TYPES[0]
        self.design_color = DEFAULT_CUSTOM_COLOR
        self._transition: DeferredTask | None = None
        self._transition_start = 0.0
        self._dragging_camera = False
        self.running = True

        self.button_style = ButtonVisualStyle(
            base_color=render_cfg.button_color,
            hover_color=render_cfg.button_hover_color,
            text_color=render_cfg.button_text_color,
            radius=render_cfg.button_radius,
            border_color=render_cfg.button_border_color,
            border_width=1,
        )
        self.selected_style = replace(self.button_style, base_color=render_cfg.button_selected_color)
        self._build_widgets()

    # ------------------------------------------------------------------
    # Layout

    def _build_widgets(self) -> None:
        width, height = self.screen.get_size()
        left = max(40, width // 10)
        top = max(110, height // 6)
        column = min(420, width // 2 - left)

        self.type_buttons: list[tuple[PlanetType, Button]] = []
        button_width = (column - 3 * 10) // 4
        for i, planet_type in enumerate(CUSTOM_TYPES):
            rect = (left + i * (button_width + 10), top, button_width, 40)
            self.type_buttons.append(
                (
                    planet_type,
                    Button(rect, get_preset(planet_type).name, self._make_type_setter(planet_type), style=self.button_style),
                )
            )
        self.swatches = SwatchRow((left, top + 90), COLOR_SWATCHES, on_select=self._set_design_color)
        self.diameter_slider = Slider((left, top + 180, column, 20), DIAMETER_RANGE)
        self.atmosphere_slider = Slider((left, top + 260, column, 20), ATMOSPHERE_RANGE)
        self.confirm_button = Button(
            (left, top + 320, column, 48), "Confirm Planet", self._confirm_planet, style=self.button_style
        )
        self.default_earth_button = Button(
            (left, top + 380, column, 48), "Use Default Earth", self._use_default_earth, style=self.button_style
        )

        self.size_slider = Slider((left, top + 90, column, 20), SIZE_RANGE)
        self.speed_slider = Slider((left, top + 170, column, 20), SPEED_RANGE)
        self.angle_slider = Slider((left, top + 250, column, 20), ANGLE_RANGE)
        self.start_button = Button((left, top + 310, column, 48), "Start Impact", self._start_impact, style=self.button_style)

        self.restart_button = Button(
            (width // 2 - 110, height - 90, 220, 52), "Restart", self._restart, style=self.button_style
        )

    def _make_type_setter(self, planet_type: PlanetType) -> Callable[[], None]:
        def setter() -> None:
            self.design_type = planet_type

        return setter

    def _set_design_color(self, color: tuple[int, int, int]) -> None:
        self.design_color = color

    # ------------------------------------------------------------------
    # Commands

    @property
    def view(self) -> View:
        return self.dispatcher.state.view

    @property
    def session(self) -> ImpactSession | None:
        return self.dispatcher.state.session

    def _begin_transition(self, action: Callable[[], None]) -> None:
        if self._transition is not None and self._transition.pending:
            return

        def finish() -> None:
            action()
            set_hud_alpha(255)

        self._transition_start = self.scheduler.time
        self._transition = self.scheduler.call_later(self.sim_cfg.view_fade_duration, finish)

    def _design_config(self) -> PlanetConfig:
        return PlanetConfig.custom(
            self.design_type,
            self.design_color,
            self.diameter_slider.value,
            self.atmosphere_slider.value,
        )

    def _confirm_planet(self) -> None:
        def action() -> None:
            planet = self.dispatcher.dispatch(
                "confirm_planet",
                planet_type=self.design_type.value,
                color=self.design_color,
                diameter_km=self.diameter_slider.value,
                atmosphere=self.atmosphere_slider.value,
            )
            self._prepare_scene(planet)

        self._begin_transition(action)

    def _use_default_earth(self) -> None:
        def action() -> None:
            self._prepare_scene(self.dispatcher.dispatch("use_default_planet"))

        self._begin_transition(action)

    def _prepare_scene(self, planet: PlanetConfig) -> None:
        self.scene = ImpactScene(
            planet,
            self.screen.get_size(),
            assets=self.assets,
            render_cfg=self.render_cfg,
            sim_cfg=self.sim_cfg,
            seed=self.seed,
        )

    def _start_impact(self) -> None:
        def action() -> None:
            if self.log_runs:
                self.run_logger = RunLogger(self.runs_dir)
                self.run_logger.write_meta(
                    {
                        "planet": self.dispatcher.state.target_name,
                        "seed": self.seed,
                    }
                )
                self.dispatcher.listeners.append(self.run_logger)
            self.dispatcher.dispatch(
                "start_impact",
                size_m=self.size_slider.value,
                speed_km_s=self.speed_slider.value,
                angle_deg=self.angle_slider.value,
            )

        self._begin_transition(action)

    def _close_run_logger(self) -> None:
        if self.run_logger is None:
            return
        if self.run_logger in self.dispatcher.listeners:
            self.dispatcher.listeners.remove(self.run_logger)
        self.run_logger.close()
        logger.info("Run saved to %s", self.run_logger.run_dir)
        self.run_logger = None

    def _restart(self) -> None:
        if not self.presenter.restart_visible:
            return
        self._close_run_logger()
        self.audio.stop()
        self.dispatcher.dispatch("restart")
        self.presenter.reset()
        self.scene = None

    # ------------------------------------------------------------------
    # Events

    def _handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
            return
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False
            return
        if event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            self._build_widgets()
            self.menu_stars = generate_starfield(self.render_cfg.star_count, size=(event.w, event.h))
            if self.scene is not None:
                self.scene.resize((event.w, event.h))
            return
        if self._transition is not None and self._transition.pending:
            return

        view = self.view
        if view is View.DESIGNER:
            for _, button in self.type_buttons:
                button.handle_event(event)
            self.swatches.handle_event(event)
            self.diameter_slider.handle_event(event)
            self.atmosphere_slider.handle_event(event)
            self.confirm_button.handle_event(event)
            self.default_earth_button.handle_event(event)
        elif view is View.SETUP:
            self.size_slider.handle_event(event)
            self.speed_slider.handle_event(event)
            self.angle_slider.handle_event(event)
            self.start_button.handle_event(event)
        elif view is View.SIMULATION:
            self._handle_simulation_event(event)

    def _handle_simulation_event(self, event: pygame.event.Event) -> None:
        if self.presenter.restart_visible:
            self.restart_button.handle_event(event)
        if self.scene is None:
            return
        camera = self.scene.camera
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            camera.begin_drag(event.pos)
        elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
            camera.drag(event.pos, self.render_cfg.camera_rotate_speed)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            camera.end_drag()
        elif event.type == pygame.MOUSEWHEEL:
            step = self.render_cfg.camera_zoom_step
            camera.zoom_by_factor(1.0 / step if event.y > 0 else step)

    # ------------------------------------------------------------------
    # Drawing

    def _update_fade(self) -> None:
        if self._transition is None or not self._transition.pending:
            return
        elapsed = self.scheduler.time - self._transition_start
        duration = max(1e-6, self.sim_cfg.view_fade_duration)
        set_hud_alpha(max(0.0, 255.0 * (1.0 - elapsed / duration)))

    def _draw_text(self, text: str, font: pygame.font.Font, color: tuple[int, int, int], pos: tuple[int, int]) -> None:
        self.screen.blit(get_text_surface(font, text, color), pos)

    def _draw_slider(self, slider: Slider) -> None:
        cfg = self.render_cfg
        slider.draw(
            self.screen,
            self.font,
            track_color=cfg.slider_track_color,
            fill_color=cfg.slider_fill_color,
            knob_color=cfg.slider_knob_color,
            text_color=cfg.hud_text_color,
        )

    def _draw_preview(self, planet: PlanetConfig, center: tuple[int, int]) -> None:
        cfg = self.render_cfg
        texture = self.assets.get_planet_texture(planet, PREVIEW_TEXTURE_SIZE, seed=self.seed)
        geometry = self.assets.get_sphere_geometry(PREVIEW_RADIUS, cfg.light_direction, cfg.ambient_light)
        rotation = self.scheduler.frame_index * self.sim_cfg.planet_spin * 4.0
        sprite = render_sphere(texture, geometry, rotation, rotation * 1.4)
        self.screen.blit(sprite, sprite.get_rect(center=center))

    def _draw_menu_background(self) -> None:
        self.screen.fill(self.render_cfg.background_color)
        draw_starfield(self.screen, self.menu_stars, (0.0, 0.0))

    def _draw_designer(self) -> None:
        cfg = self.render_cfg
        self._draw_menu_background()
        width, height = self.screen.get_size()
        left = self.confirm_button.rect.left
        self._draw_text("Design Your Planet", self.title_font, cfg.title_color, (left, 40))
        self._draw_text("Planet type", self.font, cfg.hud_label_color, (left, self.type_buttons[0][1].rect.top - 28))
        for planet_type, button in self.type_buttons:
            style = self.selected_style if planet_type is self.design_type else self.button_style
            button.draw(self.screen, self.small_font, style=style)
        self._draw_text("Colour", self.font, cfg.hud_label_color, (left, self.swatches.rects[0].top - 28))
        self.swatches.draw(self.screen, outline_color=cfg.hud_text_color)
        self._draw_slider(self.diameter_slider)
        self._draw_slider(self.atmosphere_slider)
        self.confirm_button.draw(self.screen, self.font)
        self.default_earth_button.draw(self.screen, self.font)

        preview_center = (width * 3 // 4, height // 2)
        self._draw_preview(self._design_config(), preview_center)
        description = get_preset(self.design_type).description
        text = get_text_surface(self.small_font, description, cfg.hud_label_color)
        self.screen.blit(text, text.get_rect(midtop=(preview_center[0], preview_center[1] + PREVIEW_RADIUS + 20)))

    def _draw_setup(self) -> None:
        cfg = self.render_cfg
        self._draw_menu_background()
        width, height = self.screen.get_size()
        left = self.start_button.rect.left
        self._draw_text("Configure Impactor", self.title_font, cfg.title_color, (left, 40))
        self._draw_text(
            f"Target: {self.dispatcher.state.target_name}",
            self.font,
            cfg.hud_text_color,
            (left, self.size_slider.rect.top - 70),
        )
        self._draw_slider(self.size_slider)
        self._draw_slider(self.speed_slider)
        self._draw_slider(self.angle_slider)
        self.start_button.draw(self.screen, self.font)
        if self.dispatcher.state.planet is not None:
            self._draw_preview(self.dispatcher.state.planet, (width * 3 // 4, height // 2))

    def _draw_simulation(self) -> None:
        cfg = self.render_cfg
        if self.scene is None:
            self._draw_menu_background()
            return
        self.scene.draw(self.screen, self.session)

        hud_lines = [(line, cfg.hud_text_color) for line in self.presenter.hud_lines()]
        if self.presenter.stage_label:
            hud_lines.append((f"Stage: {self.presenter.stage_label}", cfg.hud_label_color))
        panel = build_text_panel(self.font, hud_lines, background_color=cfg.panel_color)
        self.screen.blit(panel, (20, 20))

        if self.presenter.report_lines:
            lines = [("Impact Analysis", cfg.title_color), ("", cfg.hud_text_color)]
            lines.extend((line, cfg.hud_text_color) for line in self.presenter.report_lines)
            report = build_text_panel(self.font, lines, background_color=cfg.panel_color, padding=(22, 18))
            width, _ = self.screen.get_size()
            self.screen.blit(report, report.get_rect(midtop=(width // 2, 30)))

        if self.presenter.restart_visible:
            self.restart_button.draw(self.screen, self.font)

    def _draw(self) -> None:
        view = self.view
        if view is View.DESIGNER:
            self._draw_designer()
        elif view is View.SETUP:
            self._draw_setup()
        else:
            self._draw_simulation()

    # ------------------------------------------------------------------
    # Main loop

    def run(self) -> None:
        try:
            while self.running:
                dt = self.clock.tick(self.render_cfg.fps) / 1000.0
                for event in pygame.event.get():
                    self._handle_event(event)
                self.scheduler.tick(dt)
                self.audio.update(dt)
                if self.scene is not None and self.view is View.SIMULATION:
                    self.scene.update(dt, self.session)
                self._update_fade()
                self._draw()
                pygame.display.flip()
        finally:
            self.scheduler.clear()
            self._close_run_logger()
            self.audio.stop()
            pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Design a planet and watch an impactor hit it.")
    parser.add_argument("--width", type=int, default=RENDER_CFG.width, help="Window width in pixels")
    parser.add_argument("--height", type=int, default=RENDER_CFG.height, help="Window height in pixels")
    parser.add_argument("--fps", type=int, default=RENDER_CFG.fps, help="Frame rate cap (one simulation tick per frame)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for textures and the entry azimuth")
    parser.add_argument("--log-run", action="store_true", help="Record each impact under --runs-dir")
    parser.add_argument("--runs-dir", type=Path, default=DEFAULT_RUNS_DIR, help="Directory for recorded runs")
    parser.add_argument("--log-file", default=None, help="Also write diagnostic logs to this file")
    parser.add_argument("--debug", action="store_true", help="Verbose diagnostic logging")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)
    render_cfg = replace(RENDER_CFG, width=args.width, height=args.height, fps=args.fps)
    app = ImpactLabApp(
        render_cfg=render_cfg,
        seed=args.seed,
        log_runs=args.log_run,
        runs_dir=args.runs_dir,
    )
    app.run()


if __name__ == "__main__":
    main()
