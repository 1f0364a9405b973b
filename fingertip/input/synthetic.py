#!/usr/bin/env python3
"""Synthetic depth scenes used in headless mode, tests and the demo.

``SyntheticDepthCamera`` mimics the frame/skeleton source the pipeline
consumes so that everything runs without sensor hardware.
"""

from __future__ import annotations

import time
from typing import List, Optional, Tuple
import numpy as np
import cv2

from fingertip.constants import (
    DEFAULT_DEPTH_WIDTH, DEFAULT_DEPTH_HEIGHT,
    SYNTHETIC_HAND_DEPTH_MM, SYNTHETIC_TORSO_OFFSET_M,
    SYNTHETIC_DISK_RADIUS_PX, SYNTHETIC_STAR_OUTER_RADIUS_PX, SYNTHETIC_STAR_INNER_RADIUS_PX,
)
from fingertip.data_types import FrameData, HandPoint, JointPosition, UserSkeleton

__all__ = [
    "SCENES",
    "SyntheticDepthCamera",
    "create_empty_depth",
    "create_disk_depth",
    "create_star_depth",
    "star_vertices",
]

SCENES = ("disk", "star", "empty")

_DEFAULT_CENTER = (DEFAULT_DEPTH_WIDTH // 2, DEFAULT_DEPTH_HEIGHT // 2)


def create_empty_depth(
    width: int = DEFAULT_DEPTH_WIDTH,
    height: int = DEFAULT_DEPTH_HEIGHT,
    background_mm: int = 0,
) -> np.ndarray:
    """Depth frame with a constant value (0 = no reading)."""
    return np.full((height, width), background_mm, dtype=np.uint16)


def create_disk_depth(
    center: Tuple[int, int] = _DEFAULT_CENTER,
    radius: int = SYNTHETIC_DISK_RADIUS_PX,
    depth_mm: int = SYNTHETIC_HAND_DEPTH_MM,
    width: int = DEFAULT_DEPTH_WIDTH,
    height: int = DEFAULT_DEPTH_HEIGHT,
    background_mm: int = 0,
) -> np.ndarray:
    """Filled disk at constant depth (a closed fist)."""
    depth = create_empty_depth(width, height, background_mm)
    cv2.circle(depth, center, radius, int(depth_mm), thickness=cv2.FILLED)
    return depth


def star_vertices(
    center: Tuple[int, int] = _DEFAULT_CENTER,
    outer_radius: float = SYNTHETIC_STAR_OUTER_RADIUS_PX,
    inner_radius: float = SYNTHETIC_STAR_INNER_RADIUS_PX,
    num_points: int = 5,
) -> np.ndarray:
    """Vertices of a star with one point straight up (image y grows downwards).

    Returns an (2 * num_points, 2) int32 array alternating outer and inner
    vertices; even rows are the tips.
    """
    cx, cy = center
    vertices = []
    for k in range(2 * num_points):
        theta = -np.pi / 2 + k * np.pi / num_points
        r = outer_radius if k % 2 == 0 else inner_radius
        vertices.append((cx + r * np.cos(theta), cy + r * np.sin(theta)))
    return np.round(np.array(vertices)).astype(np.int32)


def create_star_depth(
    center: Tuple[int, int] = _DEFAULT_CENTER,
    outer_radius: float = SYNTHETIC_STAR_OUTER_RADIUS_PX,
    inner_radius: float = SYNTHETIC_STAR_INNER_RADIUS_PX,
    num_points: int = 5,
    depth_mm: int = SYNTHETIC_HAND_DEPTH_MM,
    width: int = DEFAULT_DEPTH_WIDTH,
    height: int = DEFAULT_DEPTH_HEIGHT,
    background_mm: int = 0,
) -> np.ndarray:
    """Filled star-shaped blob at constant depth (a hand with splayed fingers)."""
    depth = create_empty_depth(width, height, background_mm)
    vertices = star_vertices(center, outer_radius, inner_radius, num_points)
    cv2.fillPoly(depth, [vertices.reshape(-1, 1, 2)], int(depth_mm))
    return depth


class SyntheticDepthCamera:
    """Very small stand-in for a depth sensor plus skeleton tracker.

    The right hand of user 1 sits at the scene centre, raised above and
    extended in front of the torso. The left hand is reported with low
    confidence so gating skips it.
    """

    def __init__(
        self,
        scene: str = "star",
        width: int = DEFAULT_DEPTH_WIDTH,
        height: int = DEFAULT_DEPTH_HEIGHT,
        hand_center: Optional[Tuple[int, int]] = None,
        hand_depth_mm: int = SYNTHETIC_HAND_DEPTH_MM,
    ):
        if scene not in SCENES:
            raise ValueError(f"Unknown scene '{scene}', expected one of {SCENES}")
        self.scene = scene
        self.width = width
        self.height = height
        self.hand_center = hand_center or (width // 2, height // 2)
        self.hand_depth_mm = hand_depth_mm
        self._frame_counter: int = 0
        self._depth = self._render()

    def _render(self) -> np.ndarray:
        if self.scene == "disk":
            return create_disk_depth(self.hand_center, depth_mm=self.hand_depth_mm,
                                     width=self.width, height=self.height)
        if self.scene == "star":
            return create_star_depth(self.hand_center, depth_mm=self.hand_depth_mm,
                                     width=self.width, height=self.height)
        return create_empty_depth(self.width, self.height)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_frame(self) -> FrameData:
        """Return the next synthetic depth frame (a fresh copy every call)."""
        self._frame_counter += 1
        return FrameData(
            depth_image=self._depth.copy(),
            timestamp_ms=time.perf_counter() * 1000.0,
            frame_number=self._frame_counter,
        )

    def get_skeletons(self) -> List[UserSkeleton]:
        """Return the tracked users for the current frame."""
        u, v = self.hand_center
        hand_z = self.hand_depth_mm / 1000.0
        torso_z = hand_z + SYNTHETIC_TORSO_OFFSET_M
        torso = JointPosition(HandPoint(float(u), float(v + 150), torso_z), confidence=1.0)
        right = JointPosition(HandPoint(float(u), float(v), hand_z), confidence=1.0)
        left = JointPosition(HandPoint(float(u - 200), float(v), hand_z), confidence=0.5)
        return [UserSkeleton(user_id=1, torso=torso, right_hand=right, left_hand=left)]

    def start(self) -> bool:  # noqa: D401
        return True

    def stop(self) -> None:  # noqa: D401
        return None

    # Context manager helpers -------------------------------------------------
    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
