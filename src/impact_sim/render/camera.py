from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


_MIN_POLAR = 0.05


@dataclass
class CameraState:
    theta: float
    phi: float
    distance: float
    theta_target: float
    phi_target: float
    distance_target: float


class OrbitCamera:
    """Perspective camera orbiting a target, with drag to rotate and wheel to zoom."""

    def __init__(
        self,
        size: tuple[int, int],
        position: tuple[float, float, float],
        *,
        target: tuple[float, float, float] = (0.0, 0.0, 0.0),
        fov_deg: float = 45.0,
        near: float = 0.1,
        min_distance: float,
        max_distance: float,
    ) -> None:
        self._size = size
        self._target = np.array(target, dtype=float)
        self._fov = math.radians(fov_deg)
        self._near = near
        self._min_distance = min_distance
        self._max_distance = max_distance
        offset = np.array(position, dtype=float) - self._target
        distance = _clamp(float(np.linalg.norm(offset)), min_distance, max_distance)
        theta = math.atan2(offset[0], offset[2])
        phi = math.acos(_clamp(offset[1] / float(np.linalg.norm(offset)), -1.0, 1.0))
        self._state = CameraState(theta, phi, distance, theta, phi, distance)
        self._shake = np.zeros(3, dtype=float)
        self._drag_anchor: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def theta(self) -> float:
        return self._state.theta

    @property
    def phi(self) -> float:
        return self._state.phi

    @property
    def distance(self) -> float:
        return self._state.distance

    @property
    def focal_length(self) -> float:
        return (self._size[1] / 2.0) / math.tan(self._fov / 2.0)

    @property
    def position(self) -> np.ndarray:
        s = self._state
        direction = np.array(
            [
                math.sin(s.phi) * math.sin(s.theta),
                math.cos(s.phi),
                math.sin(s.phi) * math.cos(s.theta),
            ]
        )
        return self._target + direction * s.distance + self._shake

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        forward = self._target - self.position
        forward = forward / np.linalg.norm(forward)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right = right / np.linalg.norm(right)
        up = np.cross(right, forward)
        return forward, right, up

    def nudge(self, offset: np.ndarray) -> None:
        """Displace the camera by this frame's shake offset."""

        self._shake = np.asarray(offset, dtype=float)

    def rotate_by(self, d_theta: float, d_phi: float) -> None:
        s = self._state
        s.theta_target += d_theta
        s.phi_target = _clamp(s.phi_target + d_phi, _MIN_POLAR, math.pi - _MIN_POLAR)

    def zoom_by_factor(self, factor: float) -> None:
        s = self._state
        s.distance_target = _clamp(s.distance_target * factor, self._min_distance, self._max_distance)

    def update(self, smoothing: float = 0.05) -> None:
        s = self._state
        s.theta += (s.theta_target - s.theta) * smoothing
        s.phi += (s.phi_target - s.phi) * smoothing
        s.distance += (s.distance_target - s.distance) * smoothing

    def begin_drag(self, position: tuple[int, int]) -> None:
        self._drag_anchor = position

    def drag(self, position: tuple[int, int], speed: float) -> None:
        if self._drag_anchor is None:
            return
        dx = position[0] - self._drag_anchor[0]
        dy = position[1] - self._drag_anchor[1]
        if dx == 0 and dy == 0:
            return
        self.rotate_by(-dx * speed, -dy * speed)
        self._drag_anchor = position

    def end_drag(self) -> None:
        self._drag_anchor = None

    def project(self, point: np.ndarray) -> tuple[int, int, float] | None:
        """Screen position and view depth of *point*, or ``None`` behind the camera."""

        forward, right, up = self.basis()
        rel = np.asarray(point, dtype=float) - self.position
        depth = float(np.dot(rel, forward))
        if depth <= self._near:
            return None
        f = self.focal_length
        width, height = self._size
        sx = width / 2.0 + f * float(np.dot(rel, right)) / depth
        sy = height / 2.0 - f * float(np.dot(rel, up)) / depth
        return int(round(sx)), int(round(sy)), depth

    def projected_radius(self, radius: float, depth: float) -> float:
        if depth <= 0.0:
            return 0.0
        return self.focal_length * radius / depth
