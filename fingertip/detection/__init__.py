"""
指先検出フェーズパッケージ
深度マップの手領域抽出 → 輪郭抽出 → 凸包・角度による指先分類 / 凸性による把持判定
"""

from .region import (
    HandRegionSelector,
    extract_hand_mask,
    depth_band
)

from .contour import (
    find_contours,
    select_hand_contour,
    approximate_contour,
    extract_hand_contour
)

from .fingertips import (
    compute_cutoff,
    hull_vertex_angles,
    detect_fingertips
)

from .convexity import (
    convexity,
    is_grasp
)

from .gating import (
    check_hand,
    select_hands
)

from .pipeline import (
    FingertipPipeline,
    analyze_hand
)

__all__ = [
    # 手領域抽出
    'HandRegionSelector',
    'extract_hand_mask',
    'depth_band',

    # 輪郭抽出
    'find_contours',
    'select_hand_contour',
    'approximate_contour',
    'extract_hand_contour',

    # 指先検出
    'compute_cutoff',
    'hull_vertex_angles',
    'detect_fingertips',

    # 把持判定
    'convexity',
    'is_grasp',

    # ゲーティング
    'check_hand',
    'select_hands',

    # パイプライン
    'FingertipPipeline',
    'analyze_hand'
]
