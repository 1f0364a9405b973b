"""
入力フェーズパッケージ
テスト・デモ用の合成深度フレームと骨格情報
"""

from .synthetic import (
    SCENES,
    SyntheticDepthCamera,
    create_empty_depth,
    create_disk_depth,
    create_star_depth,
    star_vertices
)

__all__ = [
    'SCENES',
    'SyntheticDepthCamera',
    'create_empty_depth',
    'create_disk_depth',
    'create_star_depth',
    'star_vertices'
]
