import math
import random

import numpy as np
import pytest

from impact_sim.core.errors import DegenerateGeometry, InvalidConfiguration
from impact_sim.core.trajectory import (
    Trajectory,
    build_trajectory,
    entry_direction,
    rotate_about_axis,
)

TARGET = (10.0, 0.0, 0.0)


def test_curve_ends_exactly_on_target():
    trajectory = build_trajectory(TARGET, 45, azimuth=1.3)

    end = trajectory.position(1.0)
    assert end.tolist() == list(TARGET)
    assert end is not trajectory.target


def test_start_is_fifty_units_from_target():
    trajectory = build_trajectory(TARGET, 30, azimuth=0.4)

    assert trajectory.start_distance == pytest.approx(50.0)
    assert np.allclose(trajectory.position(0.0), trajectory.start)


def test_vertical_entry_starts_above_target():
    trajectory = build_trajectory(TARGET, 90, azimuth=2.0)

    assert np.allclose(trajectory.start, [60.0, 0.0, 0.0])


def test_grazing_entry_starts_tangent_to_surface():
    trajectory = build_trajectory(TARGET, 0, azimuth=0.7)

    offset = trajectory.start - trajectory.target
    assert float(np.dot(offset, [1.0, 0.0, 0.0])) == pytest.approx(0.0, abs=1e-9)
    assert float(np.linalg.norm(offset)) == pytest.approx(50.0)


def test_control_point_is_pulled_towards_planet():
    trajectory = build_trajectory(TARGET, 45, azimuth=0.0)

    midpoint = (trajectory.start + trajectory.target) / 2.0
    assert np.linalg.norm(trajectory.control) == pytest.approx(np.linalg.norm(midpoint) - 15.0)


def test_azimuth_from_seeded_rng_is_reproducible():
    first = build_trajectory(TARGET, 45, rng=random.Random(3))
    second = build_trajectory(TARGET, 45, rng=random.Random(3))

    assert np.allclose(first.start, second.start)
    assert np.allclose(first.control, second.control)


def test_tangent_is_unit_length_along_curve():
    trajectory = build_trajectory(TARGET, 45, azimuth=0.0)

    for t in np.linspace(0.0, 1.0, 11):
        assert float(np.linalg.norm(trajectory.tangent(t))) == pytest.approx(1.0)


def test_tangent_falls_back_to_chord_when_derivative_vanishes():
    trajectory = Trajectory(start=(0, 0, 5), control=(0, 0, 5), target=(0, 0, 1))

    assert np.allclose(trajectory.tangent(0.0), [0.0, 0.0, -1.0])


def test_progress_outside_unit_interval_is_clamped():
    trajectory = build_trajectory(TARGET, 45, azimuth=0.0)

    assert np.allclose(trajectory.position(-0.5), trajectory.start)
    assert np.allclose(trajectory.position(1.5), trajectory.target)


def test_sample_includes_both_ends():
    trajectory = build_trajectory(TARGET, 45, azimuth=0.0)

    points = trajectory.sample(5)
    assert len(points) == 5
    assert np.allclose(points[0], trajectory.start)
    assert np.allclose(points[-1], trajectory.target)


def test_target_parallel_to_up_axis_is_degenerate():
    with pytest.raises(DegenerateGeometry):
        build_trajectory((0.0, 10.0, 0.0), 45, azimuth=0.0)


def test_target_at_origin_is_degenerate():
    with pytest.raises(DegenerateGeometry):
        build_trajectory((0.0, 0.0, 0.0), 45, azimuth=0.0)


def test_start_equal_to_target_is_rejected():
    with pytest.raises(DegenerateGeometry):
        Trajectory(start=TARGET, control=(5.0, 0.0, 0.0), target=TARGET)


@pytest.mark.parametrize("angle", [-1.0, 90.5, 180.0])
def test_angle_outside_range_is_rejected(angle):
    with pytest.raises(InvalidConfiguration):
        build_trajectory(TARGET, angle, azimuth=0.0)


def test_rotation_about_axis():
    rotated = rotate_about_axis(np.array([1.0, 0.0, 0.0]), np.array([0.0, 0.0, 1.0]), math.pi / 2)

    assert np.allclose(rotated, [0.0, 1.0, 0.0])


def test_entry_direction_points_into_the_planet():
    normal = np.array([1.0, 0.0, 0.0])
    up = np.array([0.0, 1.0, 0.0])

    direction = entry_direction(normal, 45, 0.0, up)

    assert float(np.linalg.norm(direction)) == pytest.approx(1.0)
    assert float(np.dot(direction, normal)) == pytest.approx(-math.sin(math.radians(45)))
