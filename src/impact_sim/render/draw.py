from __future__ import annotations

import random
from typing import Iterable, Sequence, TYPE_CHECKING

import pygame

if TYPE_CHECKING:  # pragma: no cover
    from impact_sim.core.config import RenderCfg


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def is_occluded(
    point: tuple[int, int],
    depth: float,
    planet_center: tuple[int, int],
    planet_radius_px: float,
    planet_depth: float,
) -> bool:
    """True when *point* lies behind the planet disc as seen by the camera."""

    dx = point[0] - planet_center[0]
    dy = point[1] - planet_center[1]
    return depth > planet_depth and dx * dx + dy * dy < planet_radius_px * planet_radius_px


def draw_planet(surface: pygame.Surface, sprite: pygame.Surface, position: tuple[int, int]) -> None:
    rect = sprite.get_rect(center=position)
    surface.blit(sprite, rect)


def draw_atmosphere_shell(
    surface: pygame.Surface,
    position: tuple[int, int],
    planet_radius: int,
    shell_radius: int,
    *,
    color: tuple[int, int, int],
    alpha: int,
) -> None:
    if shell_radius <= planet_radius or alpha <= 0:
        return
    halo = max(shell_radius, int(shell_radius * 1.06))
    glow_surface = pygame.Surface((halo * 2, halo * 2), pygame.SRCALPHA)
    rings = max(1, halo - planet_radius)
    for i in range(rings):
        radius = halo - i
        fade = (i + 1) / rings
        pygame.draw.circle(glow_surface, (*color, int(alpha * fade * 0.35)), (halo, halo), radius, 1)
    surface.blit(glow_surface, glow_surface.get_rect(center=position))


def draw_meteor(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    *,
    color: tuple[int, int, int],
) -> None:
    if radius <= 0:
        return
    pygame.draw.circle(surface, color, position, radius)
    highlight = tuple(min(255, int(c * 1.4)) for c in color)
    pygame.draw.circle(
        surface,
        highlight,
        (position[0] - radius // 3, position[1] - radius // 3),
        max(1, radius // 3),
    )


def draw_heating_glow(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    intensity: float,
    *,
    color: tuple[int, int, int],
    outer_alpha: int,
    inner_alpha: int,
    radius_factor: float,
) -> None:
    if intensity <= 0.0 or radius <= 0:
        return
    intensity = _clamp(intensity, 0.0, 1.0)
    glow_radius = max(2, int(radius * (1.8 + radius_factor * intensity)))
    glow_surface = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
    center = glow_radius
    outer = int(outer_alpha * intensity)
    inner = int(inner_alpha * intensity)
    if outer > 0:
        pygame.draw.circle(glow_surface, (*color, outer), (center, center), glow_radius)
    if inner > 0:
        pygame.draw.circle(
            glow_surface,
            (*color, inner),
            (center, center),
            max(1, int(glow_radius * 0.55)),
        )
    glow_rect = glow_surface.get_rect(center=position)
    surface.blit(glow_surface, glow_rect)


def draw_shock_ring(
    surface: pygame.Surface,
    position: tuple[int, int],
    base_radius: int,
    elapsed: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    duration = render_cfg.shock_ring_duration
    if elapsed < 0.0 or elapsed > duration or duration <= 0.0:
        return
    t = elapsed / duration
    radius = max(2, int(base_radius * (1.0 + render_cfg.shock_ring_expansion_factor * t)))
    alpha = int(255 * (1.0 - t))
    ring_surface = pygame.Surface((radius * 2 + 4, radius * 2 + 4), pygame.SRCALPHA)
    pygame.draw.circle(
        ring_surface,
        (*render_cfg.shock_ring_color, alpha),
        (radius + 2, radius + 2),
        radius,
        max(1, int(render_cfg.shock_ring_width * (1.0 - t))),
    )
    surface.blit(ring_surface, ring_surface.get_rect(center=position))


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    rng = rng or random.Random()
    width, height = size
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        x = rng.uniform(0, width)
        y = rng.uniform(0, height)
        radius = rng.choice([1, 1, 1, 2])
        alpha = rng.randint(80, 150)
        base = rng.randint(200, 240)
        color = (
            max(0, base - rng.randint(10, 25)),
            max(0, base - rng.randint(5, 15)),
            base,
        )
        star_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(star_surface, (*color, alpha), (radius, radius), radius)
        stars.append({"pos": (x, y), "surface": star_surface, "radius": radius})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    offset: tuple[float, float],
) -> None:
    width, height = surface.get_size()
    offset_x, offset_y = offset
    for star in starfield:
        base_x, base_y = star["pos"]  # type: ignore[index]
        star_surface = star["surface"]  # type: ignore[index]
        radius = star["radius"]  # type: ignore[index]
        sx = int((base_x - offset_x) % width)
        sy = int((base_y + offset_y) % height)
        surface.blit(star_surface, (sx - radius, sy - radius))


def draw_trajectory_line(
    surface: pygame.Surface,
    color: tuple[int, int, int] | tuple[int, int, int, int],
    points: Sequence[tuple[int, int]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    if width <= 1:
        pygame.draw.aalines(overlay, color, False, points)
    else:
        pygame.draw.lines(overlay, color, False, points, width)
        pygame.draw.aalines(overlay, color, False, points)
    surface.blit(overlay, (0, 0))


__all__ = [
    "draw_atmosphere_shell",
    "draw_heating_glow",
    "draw_meteor",
    "draw_planet",
    "draw_shock_ring",
    "draw_starfield",
    "draw_trajectory_line",
    "generate_starfield",
    "is_occluded",
]
