"""Quadratic Bézier approach path from deep space to the impact point."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .config import SIM_CFG
from .errors import DegenerateGeometry, InvalidConfiguration

_EPS = 1e-9


def _as_vector(value: Sequence[float] | np.ndarray) -> np.ndarray:
    vector = np.array(value, dtype=float)
    if vector.shape != (3,):
        raise InvalidConfiguration(f"Expected a 3D vector, got shape {vector.shape}")
    return vector


def _normalized(vector: np.ndarray, what: str) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length < _EPS:
        raise DegenerateGeometry(f"Cannot normalise zero-length {what}")
    return vector / length


def rotate_about_axis(vector: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rodrigues rotation of *vector* about the unit *axis*."""

    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (
        vector * cos_a
        + np.cross(axis, vector) * sin_a
        + axis * float(np.dot(axis, vector)) * (1.0 - cos_a)
    )


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Curve through ``start``, bowed by ``control``, ending on ``target``."""

    start: np.ndarray
    control: np.ndarray
    target: np.ndarray

    def __post_init__(self) -> None:
        for name in ("start", "control", "target"):
            vector = _as_vector(getattr(self, name))
            vector.setflags(write=False)
            object.__setattr__(self, name, vector)
        if float(np.linalg.norm(self.target - self.start)) < _EPS:
            raise DegenerateGeometry("Trajectory start coincides with its target")

    def position(self, t: float) -> np.ndarray:
        t = min(1.0, max(0.0, float(t)))
        if t == 1.0:
            return self.target.copy()
        u = 1.0 - t
        return u * u * self.start + 2.0 * u * t * self.control + t * t * self.target

    def derivative(self, t: float) -> np.ndarray:
        t = min(1.0, max(0.0, float(t)))
        return 2.0 * (1.0 - t) * (self.control - self.start) + 2.0 * t * (self.target - self.control)

    def tangent(self, t: float) -> np.ndarray:
        """Unit direction of travel at *t*."""

        d = self.derivative(t)
        length = float(np.linalg.norm(d))
        if length < _EPS:
            # control sits on an end point; fall back to the chord
            d = self.target - self.start
            length = float(np.linalg.norm(d))
        return d / length

    def sample(self, count: int) -> list[np.ndarray]:
        if count < 2:
            raise ValueError("count must be at least 2")
        return [self.position(i / (count - 1)) for i in range(count)]

    @property
    def start_distance(self) -> float:
        return float(np.linalg.norm(self.start - self.target))


def entry_direction(
    normal: np.ndarray,
    angle_deg: float,
    azimuth: float,
    up: np.ndarray,
) -> np.ndarray:
    """Unit direction of travel at the end of the approach.

    The surface tangent ``normal x up`` is spun by *azimuth* around the normal
    and then tilted downwards by the entry angle: 0 degrees grazes the
    surface, 90 degrees falls straight down the normal.
    """

    tangent = _normalized(np.cross(normal, up), "surface tangent (target parallel to up axis)")
    spun = rotate_about_axis(tangent, normal, azimuth)
    angle = math.radians(angle_deg)
    return spun * math.cos(angle) - normal * math.sin(angle)


def build_trajectory(
    target: Sequence[float] | np.ndarray,
    angle_deg: float,
    start_distance: float = SIM_CFG.start_distance,
    *,
    azimuth: float | None = None,
    rng: random.Random | None = None,
    up: Sequence[float] = SIM_CFG.up_axis,
    arc_offset: float = SIM_CFG.arc_offset,
) -> Trajectory:
    """Build the approach curve for an impactor hitting *target*.

    The azimuth is the only random input; pass it explicitly (or seed *rng*)
    to get a reproducible curve.
    """

    if not 0.0 <= angle_deg <= 90.0:
        raise InvalidConfiguration(f"Entry angle must be within [0, 90] degrees, got {angle_deg}")
    if start_distance <= 0.0:
        raise InvalidConfiguration(f"start_distance must be positive, got {start_distance}")

    target_vec = _as_vector(target)
    up_vec = _normalized(_as_vector(up), "up axis")
    normal = _normalized(target_vec, "impact normal (target at the origin)")

    if azimuth is None:
        azimuth = (rng or random.Random()).uniform(0.0, 2.0 * math.pi)

    direction = entry_direction(normal, angle_deg, azimuth, up_vec)
    start = target_vec - direction * start_distance

    control = (start + target_vec) * 0.5
    midpoint_length = float(np.linalg.norm(control))
    if midpoint_length > _EPS:
        control = control - control / midpoint_length * arc_offset

    return Trajectory(start=start, control=control, target=target_vec)


__all__ = [
    "Trajectory",
    "build_trajectory",
    "entry_direction",
    "rotate_about_axis",
]
