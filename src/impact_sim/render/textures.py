"""Procedural planet textures and numpy sphere shading."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pygame
from opensimplex import OpenSimplex

from impact_sim.core.model import PlanetConfig, PlanetType
from impact_sim.data.presets import get_preset


@dataclass(frozen=True)
class PlanetTexture:
    """Equirectangular maps indexed ``[x, y]`` like :mod:`pygame.surfarray`."""

    albedo: np.ndarray
    emission: np.ndarray
    clouds: np.ndarray | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self.albedo.shape[0], self.albedo.shape[1]


@dataclass(frozen=True)
class SphereGeometry:
    radius: int
    mask: np.ndarray
    intensity: np.ndarray
    norm_x: np.ndarray
    norm_z: np.ndarray
    v_coords: np.ndarray


def sample_noise_map(size: tuple[int, int], seed: int, scale: float) -> np.ndarray:
    """3D noise sampled on a cylinder so the map wraps seamlessly along x."""

    width, height = size
    gen = OpenSimplex(seed=seed)
    values = np.zeros((width, height), dtype=float)
    for x in range(width):
        angle = x / width * 2.0 * math.pi
        nx = math.cos(angle)
        ny = math.sin(angle)
        for y in range(height):
            nz = y / height * scale
            values[x, y] = gen.noise3(nx, ny, nz)
    return values


def _palette_lookup(values: np.ndarray, palette: tuple[tuple[int, int, int], ...], bounds: list[float]) -> np.ndarray:
    colors = np.array(palette, dtype=float)
    indices = np.digitize(values, bounds)
    return colors[np.clip(indices, 0, len(colors) - 1)]


def generate_planet_texture(planet: PlanetConfig, size: tuple[int, int], *, seed: int = 0) -> PlanetTexture:
    preset = get_preset(planet.planet_type)
    width, height = size
    values = sample_noise_map(size, seed, preset.noise_scale)
    emission = np.zeros((width, height, 3), dtype=float)
    clouds = None

    if planet.planet_type is PlanetType.EARTH:
        albedo = _palette_lookup(values, preset.palette, [-0.1, 0.05, 0.35, 0.55])
        latitude = np.abs(np.linspace(-1.0, 1.0, height))[np.newaxis, :]
        polar = np.broadcast_to(latitude > 0.88, (width, height))
        albedo[polar] = preset.palette[-1]
        cloud_values = sample_noise_map(size, seed + 1, preset.noise_scale * 2.0)
        clouds = np.clip((cloud_values - 0.1) * 2.0, 0.0, 1.0) * 0.5
    elif preset.banded:
        rows = np.linspace(0.0, 1.0, height)[np.newaxis, :]
        bands = np.sin(rows * math.pi * 14.0 + values * 3.0)
        albedo = _palette_lookup(bands, preset.palette, [-0.6, -0.2, 0.2, 0.85])
    elif planet.planet_type is PlanetType.LAVA:
        crust = _palette_lookup(values, preset.palette[:2], [0.0])
        lava = _palette_lookup(np.abs(values), preset.palette[2:], [0.05, 0.09])
        cracks = (np.abs(values) < 0.12)[..., np.newaxis]
        albedo = np.where(cracks, lava, crust)
        emission = np.where(cracks, lava, 0.0)
    else:
        albedo = _palette_lookup(values, preset.palette, [-0.3, -0.05, 0.2, 0.45])

    if planet.color is not None:
        tint = np.array(planet.color, dtype=float) / 255.0
        albedo = albedo * tint * preset.tint_factor
        if preset.emissive is None and preset.emissive_strength > 0.0:
            emission = emission + np.array(planet.color, dtype=float) * preset.emissive_strength
    if preset.emissive is not None:
        glow = np.array(preset.emissive, dtype=float) * preset.emissive_strength
        if planet.planet_type is PlanetType.LAVA:
            emission = emission * preset.emissive_strength + np.where(cracks, glow, 0.0)
        else:
            emission = emission + glow

    return PlanetTexture(
        albedo=np.clip(albedo, 0, 255).astype(np.uint8),
        emission=np.clip(emission, 0, 255).astype(np.uint8),
        clouds=clouds,
    )


def precompute_sphere(
    radius: int,
    light_direction: tuple[float, float, float],
    ambient: float,
) -> SphereGeometry:
    """Depth, normals and lighting of a sphere, computed once per pixel radius."""

    x, y = np.ogrid[-radius:radius, -radius:radius]
    x = x + 0.5
    y = y + 0.5
    mask = x**2 + y**2 < radius**2
    z = np.sqrt(np.maximum(radius**2 - x**2 - y**2, 0.0))

    norm_x = np.broadcast_to(x / radius, mask.shape)
    norm_y = np.broadcast_to(-y / radius, mask.shape)
    norm_z = z / radius

    light = np.asarray(light_direction, dtype=float)
    light = light / np.linalg.norm(light)
    normals = np.dstack((norm_x, norm_y, norm_z))
    intensity = np.maximum(np.dot(normals, light), ambient)

    v_coords = 0.5 - np.arcsin(np.clip(norm_y, -1.0, 1.0)) / np.pi
    return SphereGeometry(
        radius=radius,
        mask=mask,
        intensity=intensity,
        norm_x=np.array(norm_x),
        norm_z=norm_z,
        v_coords=v_coords,
    )


def shade_sphere(
    texture: PlanetTexture,
    geometry: SphereGeometry,
    rotation: float,
    cloud_rotation: float = 0.0,
) -> np.ndarray:
    """Lit RGB pixels of the textured sphere; *rotation* is in radians."""

    width, height = texture.size
    raw_u = np.arctan2(geometry.norm_x, geometry.norm_z) / (2.0 * np.pi)
    tex_y = (geometry.v_coords * (height - 1)).astype(int)

    def lookup(turn: float) -> np.ndarray:
        u_coords = (raw_u + turn / (2.0 * np.pi)) % 1.0
        return (u_coords * (width - 1)).astype(int)

    tex_x = lookup(rotation)
    lit = texture.albedo[tex_x, tex_y] * geometry.intensity[:, :, np.newaxis]
    if texture.clouds is not None:
        cloud_x = lookup(cloud_rotation)
        alpha = texture.clouds[cloud_x, tex_y][:, :, np.newaxis]
        lit = lit * (1.0 - alpha) + 255.0 * alpha * geometry.intensity[:, :, np.newaxis]
    lit = lit + texture.emission[tex_x, tex_y]
    return np.clip(lit, 0, 255).astype(np.uint8)


def render_sphere(
    texture: PlanetTexture,
    geometry: SphereGeometry,
    rotation: float,
    cloud_rotation: float = 0.0,
) -> pygame.Surface:
    diameter = geometry.radius * 2
    pixels = shade_sphere(texture, geometry, rotation, cloud_rotation)
    surface = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
    pygame.surfarray.blit_array(surface, pixels)
    alpha = pygame.surfarray.pixels_alpha(surface)
    alpha[:] = np.where(geometry.mask, 255, 0).astype(np.uint8)
    del alpha
    return surface


__all__ = [
    "PlanetTexture",
    "SphereGeometry",
    "generate_planet_texture",
    "precompute_sphere",
    "render_sphere",
    "sample_noise_map",
    "shade_sphere",
]
