"""Physics helpers for the impact simulation."""
from __future__ import annotations

import math

import numpy as np

from .config import SIM_CFG, SimulationCfg
from .errors import InvalidConfiguration
from .model import ImpactorConfig, ImpactReport


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def sphere_mass(diameter_m: float, density: float) -> float:
    """Mass of a homogeneous sphere with the given diameter."""

    if diameter_m <= 0.0:
        raise InvalidConfiguration(f"diameter must be positive, got {diameter_m}")
    return density * (4.0 / 3.0) * math.pi * (diameter_m / 2.0) ** 3


def kinetic_energy(mass_kg: float, velocity_m_s: float) -> float:
    if velocity_m_s <= 0.0:
        raise InvalidConfiguration(f"velocity must be positive, got {velocity_m_s}")
    return 0.5 * mass_kg * velocity_m_s**2


def joules_to_megatons(energy_j: float, cfg: SimulationCfg = SIM_CFG) -> float:
    return energy_j / cfg.joules_per_megaton


def crater_diameter_km(megatons: float, cfg: SimulationCfg = SIM_CFG) -> float:
    """Scaled crater diameter, ``D = 25 * MT^(1/3.4)`` metres, returned in km."""

    return cfg.crater_coefficient * megatons ** (1.0 / cfg.crater_exponent) / 1000.0


def analyze_impact(impactor: ImpactorConfig, cfg: SimulationCfg = SIM_CFG) -> ImpactReport:
    """Energy and crater estimate for *impactor*. Values keep full precision."""

    mass = sphere_mass(impactor.size_m, cfg.impactor_density)
    velocity = impactor.velocity_m_s
    energy = kinetic_energy(mass, velocity)
    megatons = joules_to_megatons(energy, cfg)
    return ImpactReport(
        mass_kg=mass,
        velocity_m_s=velocity,
        kinetic_energy_j=energy,
        megatons_tnt=megatons,
        crater_diameter_km=crater_diameter_km(megatons, cfg),
    )


def display_altitude_km(distance: float, cfg: SimulationCfg = SIM_CFG) -> float:
    """Convert a scene distance from the planet centre to a HUD altitude."""

    return max(0.0, (distance - cfg.planet_radius) * cfg.altitude_scale)


def shake_intensity_for_energy(energy_j: float, cfg: SimulationCfg = SIM_CFG) -> float:
    if energy_j <= 0.0:
        return 0.0
    return math.log10(energy_j) / cfg.shake_energy_divisor * cfg.shake_scale


def distance_between(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


__all__ = [
    "analyze_impact",
    "clamp",
    "crater_diameter_km",
    "display_altitude_km",
    "distance_between",
    "joules_to_megatons",
    "kinetic_energy",
    "shake_intensity_for_energy",
    "sphere_mass",
]
