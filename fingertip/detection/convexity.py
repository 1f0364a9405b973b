#!/usr/bin/env python3
"""
凸性スコア
輪郭面積と凸包面積の比から把持（握り拳）状態を判定
"""

import numpy as np

from fingertip.constants import GRASP_CONVEXITY_THRESHOLD
from fingertip.errors import InsufficientGeometryError
from .hull import as_polygon, convex_hull_indices, polygon_area


def convexity(contour: np.ndarray) -> float:
    """
    輪郭の凸性 = 輪郭面積 / 凸包面積

    開いた手（指を広げた状態）は凸包との差が大きく値が小さくなり、
    握り拳は 1 に近づく。

    Args:
        contour: 輪郭 (N, 2)

    Returns:
        (0, 1] の凸性

    Raises:
        InsufficientGeometryError: 頂点が3未満、または凸包面積が0の場合
    """
    polygon = as_polygon(contour)
    hull_indices = convex_hull_indices(polygon)
    hull_area = polygon_area(polygon[hull_indices])

    if hull_area <= 0.0:
        raise InsufficientGeometryError(len(polygon), "convex hull has zero area")

    return polygon_area(polygon) / hull_area


def is_grasp(convexity_value: float, threshold: float = GRASP_CONVEXITY_THRESHOLD) -> bool:
    """凸性が閾値を超えれば握り拳（把持）とみなす"""
    return convexity_value > threshold
