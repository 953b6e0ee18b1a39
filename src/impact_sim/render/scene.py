"""Draws the planet, its shells and the meteor for the current session state."""
from __future__ import annotations

import math
import random

import numpy as np
import pygame

from impact_sim.core.config import RENDER_CFG, SIM_CFG, RenderCfg, SimulationCfg
from impact_sim.core.model import PlanetConfig, Stage
from impact_sim.core.session import ImpactSession

from .assets import AssetLibrary
from .camera import OrbitCamera
from .draw import (
    draw_atmosphere_shell,
    draw_heating_glow,
    draw_meteor,
    draw_planet,
    draw_shock_ring,
    draw_starfield,
    draw_trajectory_line,
    generate_starfield,
    is_occluded,
)
from .textures import render_sphere

_MAX_SPRITE_RADIUS = 420
_MAX_SHEATH_RADIUS = 160


class ImpactScene:
    def __init__(
        self,
        planet: PlanetConfig,
        size: tuple[int, int],
        *,
        assets: AssetLibrary,
        render_cfg: RenderCfg = RENDER_CFG,
        sim_cfg: SimulationCfg = SIM_CFG,
        seed: int = 0,
    ) -> None:
        self.planet = planet
        self.render_cfg = render_cfg
        self.sim_cfg = sim_cfg
        self.assets = assets
        self.camera = OrbitCamera(
            size,
            render_cfg.camera_position,
            fov_deg=render_cfg.field_of_view_deg,
            near=render_cfg.near_plane,
            min_distance=render_cfg.camera_min_distance,
            max_distance=render_cfg.camera_max_distance,
        )
        self.texture = assets.get_planet_texture(planet, render_cfg.texture_size, seed=seed)
        self.starfield = generate_starfield(render_cfg.star_count, size=size, rng=random.Random(seed))
        self.rotation = 0.0
        self.cloud_rotation = 0.0
        self.impact_elapsed: float | None = None

    def resize(self, size: tuple[int, int]) -> None:
        self.camera.update_size(size)
        self.starfield = generate_starfield(self.render_cfg.star_count, size=size)

    def update(self, dt: float, session: ImpactSession | None) -> None:
        self.rotation += self.sim_cfg.planet_spin
        self.cloud_rotation += self.sim_cfg.cloud_spin
        if session is not None:
            self.camera.nudge(session.shake_offset)
            if session.finished:
                self.impact_elapsed = (self.impact_elapsed or 0.0) + dt
        self.camera.update(self.render_cfg.camera_damping)

    def _planet_screen(self) -> tuple[tuple[int, int], float, float] | None:
        projected = self.camera.project(np.zeros(3))
        if projected is None:
            return None
        sx, sy, depth = projected
        return (sx, sy), depth, self.camera.projected_radius(self.sim_cfg.planet_radius, depth)

    def draw(self, surface: pygame.Surface, session: ImpactSession | None) -> None:
        cfg = self.render_cfg
        surface.fill(cfg.background_color)
        width, height = surface.get_size()
        draw_starfield(
            surface,
            self.starfield,
            (self.camera.theta / (2.0 * math.pi) * width, self.camera.phi / math.pi * height),
        )

        planet_screen = self._planet_screen()
        if planet_screen is None:
            return
        center, planet_depth, radius_px = planet_screen

        shell = self.planet.atmosphere_radius(self.sim_cfg.planet_radius, self.sim_cfg)
        if shell is not None:
            shell_px = int(self.camera.projected_radius(shell, planet_depth))
            color = cfg.earth_atmosphere_color if self.planet.is_earth else cfg.atmosphere_color
            draw_atmosphere_shell(
                surface, center, int(radius_px), shell_px, color=color, alpha=cfg.atmosphere_alpha
            )

        clouds = self.planet.cloud_radius(self.sim_cfg.planet_radius, self.sim_cfg)
        if clouds is not None:
            cloud_px = int(self.camera.projected_radius(clouds, planet_depth))
            draw_atmosphere_shell(
                surface, center, int(radius_px), cloud_px, color=cfg.cloud_shell_color, alpha=cfg.cloud_shell_alpha
            )

        sprite_radius = int(min(_MAX_SPRITE_RADIUS, max(2, radius_px)))
        geometry = self.assets.get_sphere_geometry(sprite_radius, cfg.light_direction, cfg.ambient_light)
        sprite = render_sphere(
            self.texture,
            geometry,
            self.rotation - self.camera.theta,
            self.cloud_rotation - self.camera.theta,
        )
        if sprite_radius != int(radius_px) and radius_px > 2:
            diameter = int(radius_px * 2)
            sprite = pygame.transform.smoothscale(sprite, (diameter, diameter))
        draw_planet(surface, sprite, center)

        if session is None or session.trajectory is None:
            return

        self._draw_trajectory(surface, session, center, radius_px, planet_depth)

        state = session.state
        if state.stage in (Stage.APPROACH, Stage.ENTRY):
            self._draw_meteor(surface, session, center, radius_px, planet_depth)
        elif state.stage is Stage.IMPACT and self.impact_elapsed is not None:
            projected = self.camera.project(session.trajectory.target)
            if projected is not None:
                draw_shock_ring(
                    surface,
                    projected[:2],
                    max(4, int(radius_px * 0.05)),
                    self.impact_elapsed,
                    render_cfg=cfg,
                )

    def _draw_trajectory(
        self,
        surface: pygame.Surface,
        session: ImpactSession,
        center: tuple[int, int],
        radius_px: float,
        planet_depth: float,
    ) -> None:
        runs: list[list[tuple[int, int]]] = [[]]
        for point in session.trajectory.sample(self.render_cfg.trajectory_samples):
            projected = self.camera.project(point)
            if projected is None or is_occluded(projected[:2], projected[2], center, radius_px, planet_depth):
                if runs[-1]:
                    runs.append([])
                continue
            runs[-1].append(projected[:2])
        for run in runs:
            draw_trajectory_line(surface, self.render_cfg.trajectory_color, run, 1)

    def _draw_meteor(
        self,
        surface: pygame.Surface,
        session: ImpactSession,
        center: tuple[int, int],
        radius_px: float,
        planet_depth: float,
    ) -> None:
        cfg = self.render_cfg
        state = session.state
        projected = self.camera.project(state.position)
        if projected is None:
            return
        sx, sy, depth = projected
        if is_occluded((sx, sy), depth, center, radius_px, planet_depth):
            return
        scale = session.impactor.meteor_scale(self.sim_cfg)
        meteor_px = max(cfg.meteor_min_pixels, int(self.camera.projected_radius(scale, depth)))
        if state.sheath_opacity > 0.0:
            sheath_px = max(
                meteor_px,
                int(self.camera.projected_radius(scale * cfg.plasma_radius_factor * state.sheath_scale, depth)),
            )
            sheath_px = min(sheath_px, _MAX_SHEATH_RADIUS)
            draw_heating_glow(
                surface,
                (sx, sy),
                sheath_px,
                state.sheath_opacity,
                color=cfg.plasma_color,
                outer_alpha=cfg.plasma_outer_alpha,
                inner_alpha=cfg.plasma_inner_alpha,
                radius_factor=cfg.plasma_radius_factor,
            )
        draw_meteor(surface, (sx, sy), meteor_px, color=cfg.meteor_color)


__all__ = ["ImpactScene"]
