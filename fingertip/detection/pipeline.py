#!/usr/bin/env python3
"""
指先検出パイプライン
手領域抽出 → 輪郭抽出 → 凸包・角度解析 / 凸性スコア を1フレームずつ実行
"""

import copy
import time
from typing import Any, Dict, List, Optional
import numpy as np

from fingertip import get_logger
from fingertip.config import PipelineConfig, get_config
from fingertip.constants import STATS_REPORT_INTERVAL
from fingertip.data_types import (
    AnalysisStatus, FrameAnalysis, FrameData, HandAnalysis, HandednessType,
    HandPoint, UserSkeleton
)
from fingertip.errors import HandContourNotFoundError, InsufficientGeometryError
from .contour import extract_hand_contour
from .convexity import convexity, is_grasp
from .fingertips import detect_fingertips
from .gating import select_hands
from .region import HandRegionSelector, extract_hand_mask

logger = get_logger(__name__)


def _analyze_mask(
    mask: np.ndarray,
    hand_point: HandPoint,
    config: PipelineConfig,
    user_id: Optional[int] = None,
    handedness: Optional[HandednessType] = None
) -> HandAnalysis:
    """マスク以降の段を実行し、失敗は状態として記録する"""
    result = HandAnalysis(
        hand_point=hand_point,
        status=AnalysisStatus.OK,
        handedness=handedness,
        user_id=user_id
    )

    try:
        contour = extract_hand_contour(
            mask,
            epsilon=config.contour.approx_epsilon,
            selection=config.contour.selection,
            hand_point=hand_point
        )
    except HandContourNotFoundError as e:
        logger.debug(f"Hand at {hand_point}: {e.message}")
        result.status = AnalysisStatus.NOT_FOUND
        result.error_message = e.message
        return result

    result.contour = contour

    try:
        detection = detect_fingertips(
            contour,
            max_angle=config.fingertip.max_angle,
            cutoff_fraction=config.fingertip.cutoff_fraction
        )
        score = convexity(contour)
    except InsufficientGeometryError as e:
        logger.debug(f"Hand at {hand_point}: {e.message}")
        result.status = AnalysisStatus.INSUFFICIENT_GEOMETRY
        result.error_message = e.message
        return result

    result.hull_indices = detection.hull_indices
    result.cutoff = detection.cutoff
    result.fingertips = detection.fingertips
    result.convexity = score
    result.grasp = is_grasp(score, config.grasp.convexity_threshold)
    return result


def analyze_hand(
    depth_image: np.ndarray,
    hand_point: HandPoint,
    config: Optional[PipelineConfig] = None,
    mask_buffer: Optional[np.ndarray] = None
) -> HandAnalysis:
    """
    1つの手を解析する純粋関数

    Args:
        depth_image: 深度画像 (uint16, mm)
        hand_point: 手の中心 (u, v: px, z: m)
        config: パイプライン設定（Noneならデフォルト値）
        mask_buffer: 再利用するマスクバッファ（呼び出し側が所有）

    Returns:
        手解析結果（失敗時も status 付きで返す）
    """
    config = config if config is not None else PipelineConfig()
    mask = extract_hand_mask(
        depth_image,
        hand_point,
        max_hand_radius=config.region.max_hand_radius,
        depth_half_range=config.region.depth_half_range,
        depth_scale=config.region.depth_scale,
        out=mask_buffer
    )
    return _analyze_mask(mask, hand_point, config)


class FingertipPipeline:
    """フレーム単位の指先・把持検出パイプライン

    マスクバッファをインスタンスごとに保持するため、
    1インスタンスを複数スレッドから同時に使用しないこと。
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        """
        初期化

        Args:
            config: パイプライン設定（Noneならグローバル設定）。インスタンスごとに複製して保持する
        """
        self.config = copy.deepcopy(config if config is not None else get_config())
        self.config.validate()

        self.region_selector = HandRegionSelector(
            max_hand_radius=self.config.region.max_hand_radius,
            depth_half_range=self.config.region.depth_half_range,
            depth_scale=self.config.region.depth_scale,
            frame_size=(self.config.region.frame_width, self.config.region.frame_height)
        )

        self.reset_stats()

    def analyze_hand(
        self,
        depth_image: np.ndarray,
        hand_point: HandPoint,
        user_id: Optional[int] = None,
        handedness: Optional[HandednessType] = None
    ) -> HandAnalysis:
        """
        1つの手を解析

        Args:
            depth_image: 深度画像 (uint16, mm)
            hand_point: 手の中心
            user_id: ユーザーID（結果に記録）
            handedness: 左右（結果に記録）

        Returns:
            手解析結果
        """
        mask = self.region_selector.select(depth_image, hand_point)
        result = _analyze_mask(mask, hand_point, self.config, user_id, handedness)

        self.performance_stats['hands_analyzed'] += 1
        self.performance_stats['status_counts'][result.status.value] += 1
        return result

    def process_frame(
        self,
        depth_image: np.ndarray,
        skeletons: List[UserSkeleton],
        frame_number: int = 0
    ) -> FrameAnalysis:
        """
        1フレーム分の全ユーザー・全ての手を処理

        手ごとの失敗は他の手・ユーザーに影響しない。

        Args:
            depth_image: 深度画像 (uint16, mm)
            skeletons: ユーザーごとの関節情報
            frame_number: フレーム番号

        Returns:
            フレーム解析結果
        """
        start_time = time.perf_counter()

        accepted, skipped = select_hands(skeletons, self.config.gating)
        frame_result = FrameAnalysis(frame_number=frame_number, skipped=skipped)

        for user_id, handedness, hand_point in accepted:
            frame_result.hands.append(
                self.analyze_hand(depth_image, hand_point, user_id, handedness)
            )

        processing_time = (time.perf_counter() - start_time) * 1000
        frame_result.processing_time_ms = processing_time
        self._update_stats(processing_time, len(skipped))

        return frame_result

    def process(self, frame: FrameData, skeletons: List[UserSkeleton]) -> FrameAnalysis:
        """FrameData を処理"""
        return self.process_frame(frame.depth_image, skeletons, frame.frame_number)

    def _update_stats(self, processing_time_ms: float, num_skipped: int) -> None:
        """統計情報を更新"""
        self.performance_stats['total_frames'] += 1
        self.performance_stats['processing_time_ms'] = processing_time_ms
        self.performance_stats['hands_skipped'] += num_skipped

        # 移動平均計算
        total_frames = self.performance_stats['total_frames']
        prev_avg = self.performance_stats['avg_processing_time_ms']
        self.performance_stats['avg_processing_time_ms'] = (
            (prev_avg * (total_frames - 1) + processing_time_ms) / total_frames
        )

        if total_frames % STATS_REPORT_INTERVAL == 0:
            logger.debug(
                f"Processed {total_frames} frames, "
                f"avg {self.performance_stats['avg_processing_time_ms']:.2f}ms, "
                f"status {self.performance_stats['status_counts']}"
            )

    def get_performance_stats(self) -> Dict[str, Any]:
        """パフォーマンス統計を取得"""
        stats = self.performance_stats.copy()
        stats['status_counts'] = dict(self.performance_stats['status_counts'])
        return stats

    def reset_stats(self) -> None:
        """統計をリセット"""
        self.performance_stats = {
            'total_frames': 0,
            'hands_analyzed': 0,
            'hands_skipped': 0,
            'processing_time_ms': 0.0,
            'avg_processing_time_ms': 0.0,
            'status_counts': {status.value: 0 for status in AnalysisStatus}
        }

    def update_parameters(self, section: str, **kwargs) -> None:
        """
        設定セクションのパラメータを動的更新

        複製に適用して検証し、成功した場合のみ差し替える。

        Raises:
            ConfigurationError: 更新後の設定が不正な場合（設定は変更されない）
        """
        updated = copy.deepcopy(self.config)
        target = getattr(updated, section)
        for key, value in kwargs.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.warning(f"Unknown config key: {section}.{key}")
        updated.validate()

        self.config = updated
        logger.debug(f"Updated config section '{section}': {kwargs}")

        if section == 'region':
            self.region_selector.max_hand_radius = self.config.region.max_hand_radius
            self.region_selector.depth_half_range = self.config.region.depth_half_range
            self.region_selector.depth_scale = self.config.region.depth_scale
