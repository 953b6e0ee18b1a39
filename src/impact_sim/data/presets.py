"""Planet presets and the bounded ranges of the designer and setup controls."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from impact_sim.core.model import PlanetType, RGB


@dataclass(frozen=True)
class PlanetPreset:
    key: PlanetType
    name: str
    description: str
    palette: tuple[RGB, ...]
    tint_factor: float = 1.0
    emissive: RGB | None = None
    emissive_strength: float = 0.0
    noise_scale: float = 2.0
    banded: bool = False


PRESET_DEFINITIONS: tuple[PlanetPreset, ...] = (
    PlanetPreset(
        key=PlanetType.EARTH,
        name="Earth",
        description="Oceans, continents, clouds and a thin blue atmosphere.",
        palette=(
            (20, 60, 140),    # deep ocean
            (40, 110, 170),   # shallow ocean
            (70, 140, 60),    # lowland
            (140, 120, 80),   # highland
            (245, 245, 250),  # snow
        ),
    ),
    PlanetPreset(
        key=PlanetType.ROCKY,
        name="Rocky",
        description="Dusty, cratered surface darkened by the chosen colour.",
        palette=(
            (139, 90, 43),
            (205, 133, 63),
            (101, 67, 33),
            (169, 169, 169),
            (120, 80, 50),
        ),
        tint_factor=0.55,
        noise_scale=3.0,
    ),
    PlanetPreset(
        key=PlanetType.GASEOUS,
        name="Gaseous",
        description="Banded gas giant glowing faintly in its own colour.",
        palette=(
            (201, 144, 57),
            (166, 124, 82),
            (234, 214, 183),
            (139, 90, 43),
            (255, 87, 51),
        ),
        emissive_strength=0.2,
        noise_scale=4.0,
        banded=True,
    ),
    PlanetPreset(
        key=PlanetType.ICY,
        name="Icy",
        description="Polished ice sheets with a pale cyan sheen.",
        palette=(
            (176, 224, 230),
            (135, 206, 250),
            (220, 240, 255),
            (100, 149, 237),
            (255, 255, 255),
        ),
        emissive=(0xAA, 0xEE, 0xFF),
        emissive_strength=0.15,
        noise_scale=2.5,
    ),
    PlanetPreset(
        key=PlanetType.LAVA,
        name="Lava",
        description="Charred crust split by glowing lava flows.",
        palette=(
            (30, 30, 30),
            (50, 40, 35),
            (255, 69, 0),
            (255, 140, 0),
            (255, 215, 0),
        ),
        emissive=(0xFF, 0x45, 0x00),
        emissive_strength=0.8,
        noise_scale=3.5,
    ),
)

PRESETS: dict[PlanetType, PlanetPreset] = {preset.key: preset for preset in PRESET_DEFINITIONS}
CUSTOM_TYPES: list[PlanetType] = [p.key for p in PRESET_DEFINITIONS if p.key is not PlanetType.EARTH]

COLOR_SWATCHES: tuple[RGB, ...] = (
    (0x4A, 0x86, 0xF7),
    (0x2F, 0x9E, 0x44),
    (0xC9, 0x90, 0x39),
    (0xF0, 0x3E, 0x3E),
    (0xB0, 0xE0, 0xE6),
    (0xFF, 0xFF, 0xFF),
)
DEFAULT_CUSTOM_COLOR = COLOR_SWATCHES[0]


def get_preset(planet_type: PlanetType | str) -> PlanetPreset:
    return PRESETS[PlanetType.parse(planet_type)]


def format_size_label(value: float) -> str:
    if value < 1000:
        return f"{value:g} m"
    return f"{value / 1000:.1f} km"


def format_speed_label(value: float) -> str:
    return f"{value:g} km/s"


def format_angle_label(value: float) -> str:
    return f"{value:g}°"


def format_diameter_label(value: float) -> str:
    return f"{value:,.0f} km"


def format_atmosphere_label(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class InputRange:
    """Bounds of a slider. Values outside are clamped, never rejected."""

    key: str
    label: str
    minimum: float
    maximum: float
    step: float
    default: float
    formatter: Callable[[float], str]

    def clamp(self, value: float) -> float:
        value = min(self.maximum, max(self.minimum, value))
        if self.step > 0:
            steps = round((value - self.minimum) / self.step)
            value = min(self.maximum, self.minimum + steps * self.step)
        return value

    def fraction(self, value: float) -> float:
        span = self.maximum - self.minimum
        return 0.0 if span <= 0 else (self.clamp(value) - self.minimum) / span

    def value_at(self, fraction: float) -> float:
        fraction = min(1.0, max(0.0, fraction))
        return self.clamp(self.minimum + fraction * (self.maximum - self.minimum))

    def format(self, value: float) -> str:
        return self.formatter(self.clamp(value))


SIZE_RANGE = InputRange("size", "Impactor size", 10, 10_000, 10, 50, format_size_label)
SPEED_RANGE = InputRange("speed", "Speed", 11, 72, 1, 20, format_speed_label)
ANGLE_RANGE = InputRange("angle", "Entry angle", 0, 90, 1, 45, format_angle_label)
DIAMETER_RANGE = InputRange("diameter", "Diameter", 1_000, 50_000, 100, 12_742, format_diameter_label)
ATMOSPHERE_RANGE = InputRange("atmosphere", "Atmosphere", 0, 100, 1, 20, format_atmosphere_label)


__all__ = [
    "ANGLE_RANGE",
    "ATMOSPHERE_RANGE",
    "COLOR_SWATCHES",
    "CUSTOM_TYPES",
    "DEFAULT_CUSTOM_COLOR",
    "DIAMETER_RANGE",
    "InputRange",
    "PRESETS",
    "PRESET_DEFINITIONS",
    "PlanetPreset",
    "SIZE_RANGE",
    "SPEED_RANGE",
    "format_angle_label",
    "format_atmosphere_label",
    "format_diameter_label",
    "format_size_label",
    "format_speed_label",
    "get_preset",
]
