"""Eased camera fly-to animation.

Interpolates camera position and focal point over a fixed number of
frames with a smoothstep curve. Pure numpy; the scene applies the
returned pose to the plotter camera each tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from utils.constants import CAMERA_FOCUS_FRAMES


def smoothstep(t: float) -> float:
    """Ease-in/ease-out on [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)


@dataclass(frozen=True, slots=True)
class CameraPose:
    position: np.ndarray
    focal_point: np.ndarray


class CameraAnimator:
    """Frame-stepped camera interpolation towards a target pose."""

    def __init__(self, frames: int = CAMERA_FOCUS_FRAMES):
        if frames < 1:
            raise ValueError(f"frames must be >= 1, got {frames}")
        self._frames = frames
        self._start: Optional[CameraPose] = None
        self._end: Optional[CameraPose] = None
        self._frame: int = 0
        self._target_key: Optional[str] = None

    def start(
        self,
        from_position: np.ndarray,
        from_focal: np.ndarray,
        to_position: np.ndarray,
        to_focal: np.ndarray,
        target_key: Optional[str] = None,
    ) -> None:
        """Begin a fly-to, replacing any animation in progress."""
        self._start = CameraPose(
            np.asarray(from_position, dtype=np.float64),
            np.asarray(from_focal, dtype=np.float64),
        )
        self._end = CameraPose(
            np.asarray(to_position, dtype=np.float64),
            np.asarray(to_focal, dtype=np.float64),
        )
        self._frame = 0
        self._target_key = target_key

    def retarget(self, to_position: np.ndarray, to_focal: np.ndarray) -> None:
        """Move the destination (the focused body keeps orbiting)."""
        if self._end is None:
            return
        self._end = CameraPose(
            np.asarray(to_position, dtype=np.float64),
            np.asarray(to_focal, dtype=np.float64),
        )

    def step(self) -> Optional[CameraPose]:
        """Advance one frame; returns the pose to apply, None when idle."""
        if self._start is None or self._end is None:
            return None

        self._frame += 1
        t = smoothstep(self._frame / self._frames)
        pose = CameraPose(
            self._start.position + (self._end.position - self._start.position) * t,
            self._start.focal_point + (self._end.focal_point - self._start.focal_point) * t,
        )

        if self._frame >= self._frames:
            self._start = None
            self._end = None
        return pose

    @property
    def active(self) -> bool:
        return self._start is not None

    @property
    def target_key(self) -> Optional[str]:
        return self._target_key


def focus_pose(
    target: np.ndarray,
    camera_position: np.ndarray,
    body_radius: float,
    distance_factor: float,
    min_distance: float,
) -> CameraPose:
    """Pose looking at ``target`` from the current viewing direction.

    The camera backs off along the existing line of sight to
    ``distance_factor`` body radii (at least ``min_distance``).
    """
    target = np.asarray(target, dtype=np.float64)
    direction = np.asarray(camera_position, dtype=np.float64) - target
    norm = np.linalg.norm(direction)
    if norm < 1e-9:
        direction = np.array([0.0, -1.0, 0.5])
        norm = np.linalg.norm(direction)
    distance = max(body_radius * distance_factor, min_distance)
    return CameraPose(target + direction / norm * distance, target)
