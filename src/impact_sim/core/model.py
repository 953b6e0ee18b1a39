"""Data models for the impact simulation state."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .config import SIM_CFG, SimulationCfg
from .errors import InvalidConfiguration


RGB = tuple[int, int, int]


class PlanetType(Enum):
    EARTH = "earth"
    ROCKY = "rocky"
    GASEOUS = "gaseous"
    ICY = "icy"
    LAVA = "lava"

    @classmethod
    def parse(cls, value: "PlanetType | str") -> "PlanetType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            available = ", ".join(member.value for member in cls)
            raise InvalidConfiguration(
                f"Unknown planet type '{value}'. Available: {available}"
            ) from None


def parse_color(value: RGB | str) -> RGB:
    """Accept an ``(r, g, b)`` tuple or a ``#rrggbb`` string."""

    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise InvalidConfiguration(f"Colour must look like #rrggbb, got '{value}'")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise InvalidConfiguration(f"Colour must look like #rrggbb, got '{value}'") from None
    if len(value) != 3 or any(not 0 <= int(c) <= 255 for c in value):
        raise InvalidConfiguration(f"Colour channels must be in 0..255, got {value!r}")
    return (int(value[0]), int(value[1]), int(value[2]))


def _require_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidConfiguration(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class PlanetConfig:
    """Planet chosen in the designer. Never mutated once confirmed."""

    planet_type: PlanetType
    color: RGB | None = None
    diameter_km: float | None = None
    atmosphere: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "planet_type", PlanetType.parse(self.planet_type))
        if self.planet_type is PlanetType.EARTH:
            return
        if self.color is None:
            raise InvalidConfiguration("Custom planets need a colour")
        object.__setattr__(self, "color", parse_color(self.color))
        if self.diameter_km is not None:
            diameter = _require_finite("diameter", self.diameter_km)
            if diameter <= 0.0:
                raise InvalidConfiguration(f"diameter must be positive, got {diameter}")
        atmosphere = _require_finite("atmosphere", self.atmosphere)
        if atmosphere < 0.0:
            raise InvalidConfiguration(f"atmosphere must not be negative, got {atmosphere}")

    @classmethod
    def default_earth(cls) -> "PlanetConfig":
        return cls(PlanetType.EARTH)

    @classmethod
    def custom(
        cls,
        planet_type: PlanetType | str,
        color: RGB | str,
        diameter_km: float,
        atmosphere: float,
    ) -> "PlanetConfig":
        planet_type = PlanetType.parse(planet_type)
        if planet_type is PlanetType.EARTH:
            return cls.default_earth()
        return cls(planet_type, color, float(diameter_km), float(atmosphere))

    @property
    def is_earth(self) -> bool:
        return self.planet_type is PlanetType.EARTH

    @property
    def display_name(self) -> str:
        if self.is_earth:
            return "Default Earth"
        return f"Custom {self.planet_type.value.capitalize()} Planet"

    @property
    def has_atmosphere(self) -> bool:
        return self.is_earth or self.atmosphere > 0.0

    def atmosphere_radius(self, radius: float, cfg: SimulationCfg = SIM_CFG) -> float | None:
        if not self.has_atmosphere:
            return None
        if self.is_earth:
            return radius + cfg.earth_atmosphere_margin
        return radius * (1.0 + self.atmosphere / cfg.atmosphere_divisor)

    def cloud_radius(self, radius: float, cfg: SimulationCfg = SIM_CFG) -> float | None:
        if self.is_earth:
            return radius + cfg.cloud_margin
        return None


@dataclass(frozen=True)
class ImpactorConfig:
    """Impactor chosen on the setup screen."""

    size_m: float
    speed_km_s: float
    angle_deg: float

    def __post_init__(self) -> None:
        size = _require_finite("size", self.size_m)
        speed = _require_finite("speed", self.speed_km_s)
        angle = _require_finite("angle", self.angle_deg)
        if size <= 0.0:
            raise InvalidConfiguration(f"Impactor size must be positive, got {size}")
        if speed <= 0.0:
            raise InvalidConfiguration(f"Impactor speed must be positive, got {speed}")
        if not 0.0 <= angle <= 90.0:
            raise InvalidConfiguration(f"Entry angle must be within [0, 90] degrees, got {angle}")
        object.__setattr__(self, "size_m", size)
        object.__setattr__(self, "speed_km_s", speed)
        object.__setattr__(self, "angle_deg", angle)

    @property
    def velocity_m_s(self) -> float:
        return self.speed_km_s * 1000.0

    def meteor_scale(self, cfg: SimulationCfg = SIM_CFG) -> float:
        return self.size_m / cfg.meteor_scale_divisor


class Stage(Enum):
    IDLE = 0
    APPROACH = 1
    ENTRY = 2
    IMPACT = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class SimulationState:
    """Per-tick state of a running impact."""

    stage: Stage = Stage.IDLE
    progress: float = 0.0
    frame_count: int = 0
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    tangent: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    distance: float = 0.0
    altitude_km: float = 0.0
    effect_intensity: float = 0.0
    sheath_opacity: float = 0.0
    sheath_scale: float = 1.0


@dataclass(frozen=True)
class ImpactReport:
    mass_kg: float
    velocity_m_s: float
    kinetic_energy_j: float
    megatons_tnt: float
    crater_diameter_km: float

    def format_lines(self) -> list[str]:
        return [
            f"Impact Energy (J): {self.kinetic_energy_j:.2e}",
            f"Impact Energy (MT): {self.megatons_tnt:.2f}",
            f"Est. Crater Diameter: {self.crater_diameter_km:.2f} km",
        ]


@dataclass
class CameraShake:
    """Geometric decay of the post-impact camera jitter."""

    decay: float = SIM_CFG.shake_decay
    cutoff: float = SIM_CFG.shake_cutoff
    active: bool = False
    intensity: float = 0.0

    def start(self, intensity: float) -> None:
        self.intensity = max(0.0, intensity)
        self.active = self.intensity >= self.cutoff

    def step(self, rng: random.Random) -> np.ndarray:
        if not self.active:
            return np.zeros(3, dtype=float)
        offset = np.array(
            [(rng.random() - 0.5) * self.intensity for _ in range(3)],
            dtype=float,
        )
        self.intensity *= self.decay
        if self.intensity < self.cutoff:
            self.active = False
        return offset

    def remaining_ticks(self) -> int:
        if not self.active:
            return 0
        return math.floor(math.log(self.cutoff / self.intensity) / math.log(self.decay)) + 1


class SimulationListener:
    """Receives session events. Override only what you need."""

    def on_start(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        pass

    def on_tick(self, state: SimulationState, impactor: ImpactorConfig) -> None:
        pass

    def on_entry(self, state: SimulationState) -> None:
        pass

    def on_impact(self, state: SimulationState, report: ImpactReport) -> None:
        pass

    def on_restart_available(self) -> None:
        pass


__all__ = [
    "CameraShake",
    "ImpactReport",
    "ImpactorConfig",
    "PlanetConfig",
    "PlanetType",
    "RGB",
    "SimulationListener",
    "SimulationState",
    "Stage",
    "parse_color",
]
