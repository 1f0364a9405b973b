"""HandRegionSelector

Carve the pixels that plausibly belong to a hand out of a depth frame:
a filled disk around the projected hand centre intersected with a depth
band around the hand depth.
"""

from __future__ import annotations

from typing import Optional, Tuple
import numpy as np
import cv2

from fingertip import get_logger
from fingertip.constants import (
    DEFAULT_DEPTH_SCALE, MAX_HAND_RADIUS_PX, HAND_DEPTH_HALF_RANGE_MM, MASK_FOREGROUND,
)
from fingertip.data_types import HandPoint

__all__ = ["HandRegionSelector", "extract_hand_mask", "depth_band"]

logger = get_logger(__name__)


def depth_band(hand_point: HandPoint, depth_half_range: int, depth_scale: float) -> Tuple[int, int]:
    """Return the exclusive (near, far) depth limits around *hand_point*.

    ``near`` never drops below zero, so invalid (zero) depth samples are
    always rejected.
    """
    depth = hand_point.depth_units(depth_scale)
    return max(depth - depth_half_range, 0), depth + depth_half_range


def extract_hand_mask(
    depth_image: np.ndarray,
    hand_point: HandPoint,
    max_hand_radius: int = MAX_HAND_RADIUS_PX,
    depth_half_range: int = HAND_DEPTH_HALF_RANGE_MM,
    depth_scale: float = DEFAULT_DEPTH_SCALE,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Build the hand mask for one hand.

    Parameters
    ----------
    depth_image : np.ndarray (H, W) uint16
        Depth frame in depth units (mm by default). Not modified.
    hand_point : HandPoint
        Hand centre in image coordinates plus depth in metres.
    max_hand_radius : int
        Disk radius in pixels.
    depth_half_range : int
        Half width of the accepted depth band, in depth units.
    depth_scale : float
        Depth units per metre.
    out : np.ndarray (H, W) uint8, optional
        Scratch buffer to overwrite. A new one is allocated when omitted.

    Returns
    -------
    mask : np.ndarray (H, W) uint8
        255 where the pixel lies inside the disk and strictly inside the
        depth band, 0 elsewhere. All zero for a non-finite point or one
        with ``z <= 0``. This is ``out`` when it was given.
    """
    if depth_image.ndim != 2:
        raise ValueError(f"depth_image must be 2-D, got shape {depth_image.shape}")

    height, width = depth_image.shape
    if out is None:
        out = np.zeros((height, width), dtype=np.uint8)
    else:
        if out.shape != (height, width) or out.dtype != np.uint8:
            raise ValueError(
                f"mask buffer must be uint8 {(height, width)}, got {out.dtype} {out.shape}"
            )
        out.fill(0)

    if not hand_point.is_finite or hand_point.z <= 0:
        logger.debug(f"Invalid hand point {hand_point}, returning empty mask")
        return out

    cu = int(round(hand_point.u))
    cv = int(round(hand_point.v))
    r = int(max_hand_radius)

    # disk completely outside the frame
    if cu + r < 0 or cu - r >= width or cv + r < 0 or cv - r >= height:
        return out

    cv2.circle(out, (cu, cv), r, MASK_FOREGROUND, thickness=cv2.FILLED)

    near, far = depth_band(hand_point, depth_half_range, depth_scale)
    depth = depth_image.astype(np.int32, copy=False)
    out[(depth <= near) | (depth >= far)] = 0

    return out


class HandRegionSelector:  # pylint: disable=too-few-public-methods
    """Region selector owning its own mask buffer.

    One instance must only be used by one pipeline at a time; parallel
    workers each create their own selector.

    Parameters
    ----------
    max_hand_radius : int, default 128
        Disk radius in pixels.
    depth_half_range : int, default 100
        Depth band half width in depth units (mm).
    depth_scale : float, default 1000.0
        Depth units per metre.
    frame_size : (width, height), default (640, 480)
        Initial buffer size; the buffer follows the frame size if it changes.
    """

    def __init__(
        self,
        max_hand_radius: int = MAX_HAND_RADIUS_PX,
        depth_half_range: int = HAND_DEPTH_HALF_RANGE_MM,
        depth_scale: float = DEFAULT_DEPTH_SCALE,
        frame_size: Tuple[int, int] = (640, 480),
    ) -> None:
        self.max_hand_radius = max_hand_radius
        self.depth_half_range = depth_half_range
        self.depth_scale = depth_scale
        width, height = frame_size
        self._mask = np.zeros((height, width), dtype=np.uint8)

    # ------------------------------------------------------------------
    def select(self, depth_image: np.ndarray, hand_point: HandPoint) -> np.ndarray:
        """Overwrite the internal buffer with the mask for *hand_point*.

        The returned array is the shared buffer; copy it before the next
        call if it must survive.
        """
        if self._mask.shape != depth_image.shape[:2]:
            logger.debug(f"Resizing mask buffer {self._mask.shape} -> {depth_image.shape[:2]}")
            self._mask = np.zeros(depth_image.shape[:2], dtype=np.uint8)

        return extract_hand_mask(
            depth_image,
            hand_point,
            max_hand_radius=self.max_hand_radius,
            depth_half_range=self.depth_half_range,
            depth_scale=self.depth_scale,
            out=self._mask,
        )
