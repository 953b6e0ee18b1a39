import math

import pytest

from impact_sim.core.errors import ImpactSimError, InvalidConfiguration
from impact_sim.core.model import (
    ImpactorConfig,
    PlanetConfig,
    PlanetType,
    Stage,
    parse_color,
)


def test_default_earth():
    earth = PlanetConfig.default_earth()

    assert earth.is_earth
    assert earth.display_name == "Default Earth"
    assert earth.has_atmosphere
    assert earth.atmosphere_radius(10.0) == pytest.approx(10.25)
    assert earth.cloud_radius(10.0) == pytest.approx(10.05)


@pytest.mark.parametrize(
    "kind, name",
    [("rocky", "Custom Rocky Planet"), ("GASEOUS", "Custom Gaseous Planet"), (PlanetType.ICY, "Custom Icy Planet")],
)
def test_custom_display_names(kind, name):
    assert PlanetConfig.custom(kind, "#4a86f7", 12000, 0).display_name == name


def test_custom_atmosphere_shell():
    planet = PlanetConfig.custom("icy", (176, 224, 230), 5000, 20)

    assert planet.atmosphere_radius(10.0) == pytest.approx(11.0)
    assert planet.cloud_radius(10.0) is None


def test_custom_planet_without_atmosphere_has_no_shell():
    planet = PlanetConfig.custom("rocky", "#c99039", 5000, 0)

    assert not planet.has_atmosphere
    assert planet.atmosphere_radius(10.0) is None


def test_custom_earth_request_yields_default_earth():
    assert PlanetConfig.custom("earth", "#ffffff", 1, 50) == PlanetConfig.default_earth()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"planet_type": "rocky"},
        {"planet_type": "rocky", "color": "#12345"},
        {"planet_type": "rocky", "color": (0, 0, 300)},
        {"planet_type": "rocky", "color": "#ffffff", "diameter_km": -5.0},
        {"planet_type": "rocky", "color": "#ffffff", "atmosphere": -1.0},
        {"planet_type": "rocky", "color": "#ffffff", "atmosphere": math.inf},
        {"planet_type": "volcanic", "color": "#ffffff"},
    ],
)
def test_invalid_planets_are_rejected(kwargs):
    with pytest.raises(InvalidConfiguration):
        PlanetConfig(**kwargs)


def test_parse_color():
    assert parse_color("#FF8000") == (255, 128, 0)
    assert parse_color((1, 2, 3)) == (1, 2, 3)
    with pytest.raises(InvalidConfiguration):
        parse_color("#zzzzzz")


def test_impactor_bounds():
    assert ImpactorConfig(50, 20, 0).angle_deg == 0.0
    assert ImpactorConfig(50, 20, 90).angle_deg == 90.0
    assert ImpactorConfig(50, 20, 45).velocity_m_s == 20_000
    assert ImpactorConfig(1000, 20, 45).meteor_scale() == pytest.approx(0.1)


@pytest.mark.parametrize("size, speed, angle", [(-1, 20, 45), (50, 0, 45), (50, 20, -0.1), (50, math.nan, 45)])
def test_invalid_impactors_are_rejected(size, speed, angle):
    with pytest.raises(InvalidConfiguration):
        ImpactorConfig(size, speed, angle)


def test_errors_share_a_base_class():
    assert issubclass(InvalidConfiguration, ImpactSimError)
    assert issubclass(InvalidConfiguration, ValueError)


def test_stage_order_and_labels():
    assert [stage.value for stage in Stage] == [0, 1, 2, 3]
    assert Stage.ENTRY.label == "entry"
