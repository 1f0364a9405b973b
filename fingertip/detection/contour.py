#!/usr/bin/env python3
"""
手輪郭抽出
手領域マスクから手のシルエット輪郭を選び、多角形に近似する
"""

from typing import List, Optional
import numpy as np
import cv2

from fingertip import get_logger
from fingertip.config import ContourSelection
from fingertip.constants import CONTOUR_APPROX_EPSILON_PX
from fingertip.data_types import HandPoint
from fingertip.errors import HandContourNotFoundError

logger = get_logger(__name__)


def find_contours(mask: np.ndarray) -> List[np.ndarray]:
    """
    マスク内の全ての閉輪郭を取得（階層情報なしのフラットなリスト）

    Args:
        mask: 二値マスク (uint8, 0/255)

    Returns:
        輪郭のリスト（各要素は (N, 2) int32）
    """
    contours, _ = cv2.findContours(mask, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
    return [c.reshape(-1, 2) for c in contours]


def select_hand_contour(
    contours: List[np.ndarray],
    selection: ContourSelection = ContourSelection.POINT_COUNT,
    hand_point: Optional[HandPoint] = None
) -> int:
    """
    手の輪郭とみなす輪郭のインデックスを選択

    デフォルトは境界点数最大の輪郭（面積最大ではない）。
    同点の場合は先に見つかった輪郭を採用する。

    Args:
        contours: 輪郭リスト
        selection: 選択ルール
        hand_point: NEAREST_TO_HAND で使用する手の中心

    Returns:
        選択された輪郭のインデックス（輪郭がなければ -1）
    """
    if selection == ContourSelection.NEAREST_TO_HAND and hand_point is None:
        raise ValueError("NEAREST_TO_HAND selection requires a hand point")

    best_index = -1
    best_score = -np.inf

    for i, contour in enumerate(contours):
        if selection == ContourSelection.POINT_COUNT:
            score = len(contour)
        elif selection == ContourSelection.AREA:
            score = cv2.contourArea(contour)
        else:
            # 符号付き距離（内側で正）
            score = cv2.pointPolygonTest(
                contour, (float(hand_point.u), float(hand_point.v)), True
            )

        if score > best_score:
            best_score = score
            best_index = i

    return best_index


def approximate_contour(contour: np.ndarray, epsilon: float = CONTOUR_APPROX_EPSILON_PX) -> np.ndarray:
    """Douglas-Peucker 法による閉曲線の多角形近似"""
    approx = cv2.approxPolyDP(contour.reshape(-1, 1, 2), epsilon, True)
    return approx.reshape(-1, 2).astype(np.int32)


def extract_hand_contour(
    mask: np.ndarray,
    epsilon: float = CONTOUR_APPROX_EPSILON_PX,
    selection: ContourSelection = ContourSelection.POINT_COUNT,
    hand_point: Optional[HandPoint] = None
) -> np.ndarray:
    """
    マスクから手の近似輪郭を抽出

    Args:
        mask: 手領域マスク (uint8, 0/255)
        epsilon: 近似精度（元輪郭と近似多角形の最大距離, px）
        selection: 輪郭選択ルール
        hand_point: 手の中心（NEAREST_TO_HAND 用）

    Returns:
        近似輪郭 (N, 2) int32

    Raises:
        HandContourNotFoundError: マスクに前景領域がない場合
    """
    contours = find_contours(mask)
    if not contours:
        raise HandContourNotFoundError("no foreground region in hand mask")

    index = select_hand_contour(contours, selection, hand_point)
    hand_contour = approximate_contour(contours[index], epsilon)

    logger.debug(
        f"Selected contour {index}/{len(contours)} "
        f"({len(contours[index])} points -> {len(hand_contour)} vertices)"
    )
    return hand_contour
