#!/usr/bin/env python3
"""
指先候補検出
近似輪郭の凸包頂点の内角と縦方向位置から指先候補を分類
"""

from typing import List, Optional, Tuple
import numpy as np

from fingertip import get_logger
from fingertip.constants import FINGERTIP_MAX_ANGLE_RAD, FINGERTIP_CUTOFF_FRACTION
from fingertip.data_types import FingertipDetection, Point2D
from .hull import as_polygon, convex_hull_indices

logger = get_logger(__name__)


def compute_cutoff(
    polygon: np.ndarray,
    hull_indices: np.ndarray,
    cutoff_fraction: float = FINGERTIP_CUTOFF_FRACTION
) -> Tuple[int, int, float]:
    """
    凸包頂点の上端・下端と指先判定の閾値を計算

    下側 cutoff_fraction の範囲（手首・前腕）は指先とみなさない。

    Returns:
        (upper, lower, cutoff)
    """
    ys = polygon[hull_indices, 1]
    upper = int(ys.min())
    lower = int(ys.max())
    cutoff = lower - (lower - upper) * cutoff_fraction
    return upper, lower, float(cutoff)


def hull_vertex_angles(polygon: np.ndarray, hull_indices: np.ndarray) -> List[Optional[float]]:
    """
    凸包頂点ごとの内角（rad）を計算

    前後の輪郭点（端はラップ）へのベクトルのなす角。
    長さ0のベクトルを含む頂点は None とする。
    """
    n = len(polygon)
    points = polygon.astype(np.float64)

    current = points[hull_indices]
    succ = points[(hull_indices + 1) % n]
    pred = points[(hull_indices - 1) % n]

    v1 = succ - current
    v2 = pred - current

    norms = np.linalg.norm(v1, axis=1) * np.linalg.norm(v2, axis=1)
    dots = np.einsum('ij,ij->i', v1, v2)
    valid = norms > 0

    cosines = np.zeros_like(dots)
    np.divide(dots, norms, out=cosines, where=valid)
    angles = np.arccos(np.clip(cosines, -1.0, 1.0))

    return [float(a) if ok else None for a, ok in zip(angles, valid)]


def detect_fingertips(
    contour: np.ndarray,
    max_angle: float = FINGERTIP_MAX_ANGLE_RAD,
    cutoff_fraction: float = FINGERTIP_CUTOFF_FRACTION
) -> FingertipDetection:
    """
    近似輪郭から指先候補を検出

    凸包頂点のうち、内角が max_angle 未満かつ y が cutoff 未満
    （手の縦幅の上側 90%）のものを指先候補とする。

    Args:
        contour: 近似輪郭 (N, 2)
        max_angle: 最大内角（rad）
        cutoff_fraction: 指先から除外する下側の割合

    Returns:
        指先検出結果

    Raises:
        InsufficientGeometryError: 輪郭の頂点が3未満の場合
    """
    polygon = as_polygon(contour)
    hull_indices = convex_hull_indices(polygon)
    _, _, cutoff = compute_cutoff(polygon, hull_indices, cutoff_fraction)
    angles = hull_vertex_angles(polygon, hull_indices)

    fingertips: List[Point2D] = []
    for idx, angle in zip(hull_indices, angles):
        if angle is None:
            logger.debug(f"Skipping degenerate hull vertex {idx}")
            continue

        x, y = int(polygon[idx, 0]), int(polygon[idx, 1])
        # 鋭角 + 上側90% -> 指
        if angle < max_angle and y < cutoff:
            fingertips.append((x, y))

    return FingertipDetection(
        fingertips=fingertips,
        hull_indices=hull_indices,
        cutoff=cutoff,
        angles=angles
    )
