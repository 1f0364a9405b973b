#!/usr/bin/env python3
"""
共通型定義

パイプライン全体で使用される型定義を一元管理し、
モジュール間の循環依存を解消します。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional
import numpy as np

from .constants import DEFAULT_DEPTH_WIDTH, DEFAULT_DEPTH_HEIGHT

# 型エイリアス
Point2D = Tuple[int, int]


# =============================================================================
# 入力システム型定義
# =============================================================================

class HandednessType(Enum):
    """手の種類"""
    LEFT = "Left"
    RIGHT = "Right"


@dataclass(frozen=True)
class HandPoint:
    """画像座標に投影された手の中心 (u, v: px, z: m)"""
    u: float
    v: float
    z: float

    @property
    def is_finite(self) -> bool:
        """全成分が有限値か"""
        return bool(np.all(np.isfinite([self.u, self.v, self.z])))

    def depth_units(self, depth_scale: float) -> int:
        """深度画像の単位に変換（小数部は切り捨て）"""
        return max(int(self.z * depth_scale), 0)


@dataclass(frozen=True)
class JointPosition:
    """投影済み関節位置と信頼度"""
    point: HandPoint
    confidence: float


@dataclass
class UserSkeleton:
    """1ユーザー分の関節情報（トラッカーから供給）"""
    user_id: int
    torso: JointPosition
    right_hand: Optional[JointPosition] = None
    left_hand: Optional[JointPosition] = None

    def hand(self, handedness: HandednessType) -> Optional[JointPosition]:
        """指定した側の手の関節を取得"""
        if handedness == HandednessType.RIGHT:
            return self.right_hand
        return self.left_hand


@dataclass
class FrameData:
    """フレームデータ構造"""
    depth_image: np.ndarray
    timestamp_ms: float = 0.0
    frame_number: int = 0


@dataclass
class CameraIntrinsics:
    """カメラ内部パラメータ"""
    fx: float
    fy: float
    cx: float
    cy: float
    width: int = DEFAULT_DEPTH_WIDTH
    height: int = DEFAULT_DEPTH_HEIGHT

    def project_joint(self, position_m: np.ndarray, confidence: float) -> JointPosition:
        """
        カメラ座標系の関節位置（m, y下向き）をHandPointに投影

        画像外でもクリップしない。z <= 0 の場合は信頼度0とする。
        """
        x, y, z = (float(c) for c in position_m)
        if z <= 0:
            return JointPosition(point=HandPoint(-1.0, -1.0, 0.0), confidence=0.0)

        u = self.fx * x / z + self.cx
        v = self.fy * y / z + self.cy
        return JointPosition(point=HandPoint(u, v, z), confidence=confidence)


# =============================================================================
# 検出システム型定義
# =============================================================================

class AnalysisStatus(Enum):
    """手解析の結果状態"""
    OK = "ok"
    NOT_FOUND = "not_found"
    INSUFFICIENT_GEOMETRY = "insufficient_geometry"


class SkipReason(Enum):
    """解析をスキップした理由"""
    TORSO_NOT_TRACKED = "torso_not_tracked"
    LOW_CONFIDENCE = "low_confidence"
    NOT_EXTENDED = "not_extended"
    NOT_RAISED = "not_raised"


@dataclass
class FingertipDetection:
    """凸包・角度解析の結果"""
    fingertips: List[Point2D]
    hull_indices: np.ndarray  # (M,) 輪郭へのインデックス
    cutoff: float
    angles: List[Optional[float]]  # 凸包頂点ごとの内角（退化時はNone）

    @property
    def num_fingertips(self) -> int:
        """指先候補数"""
        return len(self.fingertips)


@dataclass
class HandAnalysis:
    """1つの (ユーザー, 手, フレーム) に対する解析結果"""
    hand_point: HandPoint
    status: AnalysisStatus
    handedness: Optional[HandednessType] = None
    user_id: Optional[int] = None
    contour: Optional[np.ndarray] = None  # (N, 2) int32
    hull_indices: Optional[np.ndarray] = None
    cutoff: Optional[float] = None
    fingertips: List[Point2D] = field(default_factory=list)
    convexity: Optional[float] = None
    grasp: Optional[bool] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        """解析に成功したか"""
        return self.status == AnalysisStatus.OK

    @property
    def hull_points(self) -> Optional[np.ndarray]:
        """凸包頂点座標 (M, 2)"""
        if self.contour is None or self.hull_indices is None:
            return None
        return self.contour[self.hull_indices]


@dataclass
class SkippedHand:
    """解析対象外となった手"""
    user_id: int
    handedness: HandednessType
    reason: SkipReason


@dataclass
class FrameAnalysis:
    """1フレーム分の解析結果"""
    frame_number: int
    hands: List[HandAnalysis] = field(default_factory=list)
    skipped: List[SkippedHand] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def successful_hands(self) -> List[HandAnalysis]:
        """成功した手のみ"""
        return [hand for hand in self.hands if hand.success]

    @property
    def all_fingertips(self) -> List[Point2D]:
        """全ての手の指先候補"""
        tips: List[Point2D] = []
        for hand in self.successful_hands:
            tips.extend(hand.fingertips)
        return tips
