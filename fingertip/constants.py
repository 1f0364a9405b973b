#!/usr/bin/env python3
"""
共通定数・設定値

指先検出パイプラインで使用される定数や閾値を一元管理し、
モジュール間の循環依存を解消します。
"""

from typing import Final

# =============================================================================
# 入力処理関連
# =============================================================================

# 深度画像解像度
DEFAULT_DEPTH_WIDTH: Final[int] = 640
DEFAULT_DEPTH_HEIGHT: Final[int] = 480

# 深度スケール（m → mm）
DEFAULT_DEPTH_SCALE: Final[float] = 1000.0

# =============================================================================
# 手領域抽出関連
# =============================================================================

MAX_HAND_RADIUS_PX: Final[int] = 128        # 手領域の最大半径（px）
HAND_DEPTH_HALF_RANGE_MM: Final[int] = 100  # 深度帯の片幅（mm）
MASK_FOREGROUND: Final[int] = 255

# =============================================================================
# 輪郭抽出関連
# =============================================================================

# 近似精度（元輪郭と近似多角形の最大距離, px）
CONTOUR_APPROX_EPSILON_PX: Final[float] = 17.5

# =============================================================================
# 指先・把持判定関連
# =============================================================================

FINGERTIP_MAX_ANGLE_RAD: Final[float] = 1.0   # 約57°
FINGERTIP_CUTOFF_FRACTION: Final[float] = 0.1  # 下側10%は手首とみなす
GRASP_CONVEXITY_THRESHOLD: Final[float] = 0.8
MIN_POLYGON_POINTS: Final[int] = 3

# =============================================================================
# 手ゲーティング関連
# =============================================================================

REQUIRED_JOINT_CONFIDENCE: Final[float] = 1.0
MIN_HAND_EXTENSION_M: Final[float] = 0.2  # 20cm（胴体より手前）

# =============================================================================
# 合成シーン（テスト・デモ用）
# =============================================================================

SYNTHETIC_HAND_DEPTH_MM: Final[int] = 500
SYNTHETIC_TORSO_OFFSET_M: Final[float] = 0.4
SYNTHETIC_DISK_RADIUS_PX: Final[int] = 60
SYNTHETIC_STAR_OUTER_RADIUS_PX: Final[int] = 100
SYNTHETIC_STAR_INNER_RADIUS_PX: Final[int] = 40

# =============================================================================
# パフォーマンス監視
# =============================================================================

STATS_REPORT_INTERVAL: Final[int] = 30  # フレーム
