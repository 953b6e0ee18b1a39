import math

import pytest

from impact_sim.core.errors import InvalidConfiguration
from impact_sim.core.model import ImpactorConfig
from impact_sim.core.physics import (
    analyze_impact,
    clamp,
    crater_diameter_km,
    display_altitude_km,
    joules_to_megatons,
    kinetic_energy,
    shake_intensity_for_energy,
    sphere_mass,
)


def test_reference_impactor_report():
    report = analyze_impact(ImpactorConfig(50, 20, 45))

    assert report.mass_kg == pytest.approx(9.8175e7, rel=1e-4)
    assert report.velocity_m_s == 20_000
    assert report.kinetic_energy_j == pytest.approx(1.9635e16, rel=1e-4)
    assert report.megatons_tnt == pytest.approx(4.6929, rel=1e-4)
    assert report.crater_diameter_km == pytest.approx(0.0394, abs=5e-5)


def test_report_lines_are_rounded_for_display():
    lines = analyze_impact(ImpactorConfig(50, 20, 45)).format_lines()

    assert lines == [
        "Impact Energy (J): 1.96e+16",
        "Impact Energy (MT): 4.69",
        "Est. Crater Diameter: 0.04 km",
    ]


def test_analysis_is_pure_and_ignores_angle():
    first = analyze_impact(ImpactorConfig(500, 30, 10))
    second = analyze_impact(ImpactorConfig(500, 30, 80))

    assert first == second
    assert analyze_impact(ImpactorConfig(500, 30, 10)) == first


def test_energy_scales_with_square_of_speed():
    slow = analyze_impact(ImpactorConfig(100, 20, 45))
    fast = analyze_impact(ImpactorConfig(100, 40, 45))

    assert fast.kinetic_energy_j == pytest.approx(4 * slow.kinetic_energy_j)
    assert fast.mass_kg == slow.mass_kg


def test_crater_formula():
    assert crater_diameter_km(1.0) == pytest.approx(0.025)
    assert crater_diameter_km(2.0 ** 3.4) == pytest.approx(0.05)


def test_joules_to_megatons():
    assert joules_to_megatons(4.184e15) == pytest.approx(1.0)


@pytest.mark.parametrize("diameter", [0.0, -1.0])
def test_sphere_mass_rejects_non_positive_diameter(diameter):
    with pytest.raises(InvalidConfiguration):
        sphere_mass(diameter, 1500.0)


def test_kinetic_energy_rejects_non_positive_velocity():
    with pytest.raises(InvalidConfiguration):
        kinetic_energy(1.0, 0.0)


def test_altitude_is_never_negative():
    assert display_altitude_km(9.5) == 0.0
    assert display_altitude_km(10.0) == 0.0
    assert display_altitude_km(11.0) == pytest.approx(637.1)
    assert display_altitude_km(60.0) == pytest.approx(50 * 637.1)


def test_shake_intensity_from_energy():
    assert shake_intensity_for_energy(1e16) == pytest.approx(16 / 5 * 0.5)
    assert shake_intensity_for_energy(0.0) == 0.0


def test_clamp():
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert math.isclose(clamp(0.25, 0, 1), 0.25)
