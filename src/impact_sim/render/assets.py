from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame

from impact_sim.core.model import PlanetConfig

from .textures import PlanetTexture, SphereGeometry, generate_planet_texture, precompute_sphere


Color = tuple[int, int, int] | tuple[int, int, int, int]


class AssetLibrary:
    """Cache for generated planet textures and sphere geometry."""

    def __init__(self, *, max_geometries: int = 24) -> None:
        self._textures: dict[tuple[object, ...], PlanetTexture] = {}
        self._geometries: OrderedDict[int, SphereGeometry] = OrderedDict()
        self._max_geometries = max(1, max_geometries)

    def get_planet_texture(
        self,
        planet: PlanetConfig,
        size: tuple[int, int],
        *,
        seed: int,
    ) -> PlanetTexture:
        key = (planet.planet_type, planet.color, size, seed)
        cached = self._textures.get(key)
        if cached is not None:
            return cached
        texture = generate_planet_texture(planet, size, seed=seed)
        self._textures[key] = texture
        return texture

    def get_sphere_geometry(
        self,
        radius: int,
        light_direction: tuple[float, float, float],
        ambient: float,
    ) -> SphereGeometry:
        if radius <= 0:
            raise ValueError("Sphere radius must be positive")
        cached = self._geometries.get(radius)
        if cached is not None:
            self._geometries.move_to_end(radius)
            return cached
        geometry = precompute_sphere(radius, light_direction, ambient)
        self._geometries[radius] = geometry
        if len(self._geometries) > self._max_geometries:
            self._geometries.popitem(last=False)
        return geometry


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        try:
            match = pygame.font.match_font(name, bold=bold)
        except (OSError, ValueError):
            match = None
        if match:
            return pygame.font.Font(match, size)
    fallback = names[0] if names else None
    return pygame.font.SysFont(fallback, size, bold=bold)
