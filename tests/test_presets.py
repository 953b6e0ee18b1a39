import pytest

from impact_sim.core.model import PlanetType
from impact_sim.data.presets import (
    ANGLE_RANGE,
    CUSTOM_TYPES,
    DIAMETER_RANGE,
    PRESETS,
    SIZE_RANGE,
    SPEED_RANGE,
    format_angle_label,
    format_diameter_label,
    format_size_label,
    format_speed_label,
    get_preset,
)


def test_every_planet_type_has_a_preset():
    assert set(PRESETS) == set(PlanetType)
    assert CUSTOM_TYPES == [PlanetType.ROCKY, PlanetType.GASEOUS, PlanetType.ICY, PlanetType.LAVA]


def test_lava_and_icy_glow():
    assert get_preset("lava").emissive == (0xFF, 0x45, 0x00)
    assert get_preset("lava").emissive_strength == pytest.approx(0.8)
    assert get_preset("icy").emissive_strength == pytest.approx(0.15)
    assert get_preset("gaseous").banded


@pytest.mark.parametrize(
    "formatter, value, text",
    [
        (format_size_label, 50, "50 m"),
        (format_size_label, 1500, "1.5 km"),
        (format_speed_label, 20, "20 km/s"),
        (format_angle_label, 45, "45°"),
        (format_diameter_label, 12742, "12,742 km"),
    ],
)
def test_labels(formatter, value, text):
    assert formatter(value) == text


def test_slider_ranges():
    assert (SIZE_RANGE.minimum, SIZE_RANGE.maximum, SIZE_RANGE.default) == (10, 10_000, 50)
    assert (SPEED_RANGE.minimum, SPEED_RANGE.maximum, SPEED_RANGE.default) == (11, 72, 20)
    assert (ANGLE_RANGE.minimum, ANGLE_RANGE.maximum, ANGLE_RANGE.default) == (0, 90, 45)


def test_clamp_snaps_to_step_and_bounds():
    assert SIZE_RANGE.clamp(5) == 10
    assert SIZE_RANGE.clamp(123) == 120
    assert SIZE_RANGE.clamp(1e9) == 10_000
    assert SPEED_RANGE.clamp(100) == 72
    assert DIAMETER_RANGE.clamp(12_742) == 12_700


def test_fraction_round_trip():
    assert ANGLE_RANGE.value_at(0.5) == 45
    assert ANGLE_RANGE.fraction(45) == pytest.approx(0.5)
    assert SPEED_RANGE.value_at(2.0) == 72
    assert SIZE_RANGE.format(1234) == "1.2 km"
