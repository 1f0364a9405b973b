#!/usr/bin/env python3
"""
凸包ユーティリティ
指先解析と凸性スコアで共有する凸包計算
"""

import numpy as np
import cv2

from fingertip.constants import MIN_POLYGON_POINTS
from fingertip.errors import InsufficientGeometryError


def as_polygon(contour: np.ndarray) -> np.ndarray:
    """輪郭を (N, 2) int32 に正規化し、頂点数を検証"""
    polygon = np.asarray(contour, dtype=np.int32).reshape(-1, 2)
    if len(polygon) < MIN_POLYGON_POINTS:
        raise InsufficientGeometryError(len(polygon))
    return polygon


def convex_hull_indices(polygon: np.ndarray) -> np.ndarray:
    """
    凸包頂点の輪郭インデックスを取得

    Args:
        polygon: (N, 2) int32 輪郭（N >= 3）

    Returns:
        (M,) int32 インデックス（一貫した巻き方向）
    """
    hull = cv2.convexHull(polygon.reshape(-1, 1, 2), returnPoints=False)
    return hull.reshape(-1).astype(np.int32)


def polygon_area(polygon: np.ndarray) -> float:
    """多角形の面積（絶対値）"""
    return float(cv2.contourArea(polygon.reshape(-1, 1, 2)))
