#!/usr/bin/env python3
"""
pytest共通設定とフィクスチャ

テスト実行時の共通設定、合成深度フレーム、計測ユーティリティを提供します。
"""

import pytest
import logging
import sys
import os
import numpy as np
from typing import Optional
from dataclasses import dataclass

# パッケージのパス追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fingertip import setup_logging, get_logger
from fingertip.config import PipelineConfig
from fingertip.data_types import HandPoint
from fingertip.detection.pipeline import FingertipPipeline
from fingertip.input.synthetic import create_disk_depth, create_star_depth, create_empty_depth

# =============================================================================
# テストロギング設定
# =============================================================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """テスト全体のロギング設定"""
    setup_logging(level="DEBUG")
    logger = get_logger("test")
    logger.info("=== テストセッション開始 ===")
    yield
    logger.info("=== テストセッション終了 ===")


@pytest.fixture
def test_logger():
    """テスト用ロガー"""
    return get_logger("test")


# =============================================================================
# パフォーマンス計測
# =============================================================================

@dataclass
class PerformanceMeasurement:
    """パフォーマンス計測結果"""
    execution_time_ms: float
    memory_usage_mb: float
    operations_per_second: Optional[float] = None
    target_met: bool = False

    def log_results(self, logger: logging.Logger, test_name: str, target_ms: float = None):
        """結果をログ出力"""
        logger.info(f"=== {test_name} パフォーマンス結果 ===")
        logger.info(f"実行時間: {self.execution_time_ms:.3f}ms")
        logger.info(f"メモリ使用量: {self.memory_usage_mb:.2f}MB")
        if self.operations_per_second:
            logger.info(f"処理速度: {self.operations_per_second:.1f} ops/sec")
        if target_ms:
            self.target_met = self.execution_time_ms <= target_ms
            status = "✓ 達成" if self.target_met else "✗ 未達成"
            logger.info(f"目標時間: {target_ms}ms {status}")


@pytest.fixture
def performance_tracker():
    """パフォーマンス計測ユーティリティ"""
    import time
    import psutil
    import gc

    class PerformanceTracker:
        def __init__(self):
            self.start_time = None
            self.start_memory = None

        def start(self):
            """計測開始"""
            gc.collect()
            self.start_time = time.perf_counter()
            self.start_memory = psutil.Process().memory_info().rss / 1024 / 1024

        def stop(self, operations_count: int = None) -> PerformanceMeasurement:
            """計測終了"""
            end_time = time.perf_counter()
            end_memory = psutil.Process().memory_info().rss / 1024 / 1024

            execution_time_ms = (end_time - self.start_time) * 1000
            memory_usage_mb = end_memory - self.start_memory

            ops_per_sec = None
            if operations_count and execution_time_ms > 0:
                ops_per_sec = operations_count / (execution_time_ms / 1000)

            return PerformanceMeasurement(
                execution_time_ms=execution_time_ms,
                memory_usage_mb=memory_usage_mb,
                operations_per_second=ops_per_sec
            )

    return PerformanceTracker()


# =============================================================================
# テストデータフィクスチャ
# =============================================================================

@pytest.fixture
def default_config() -> PipelineConfig:
    """デフォルト設定"""
    return PipelineConfig()


@pytest.fixture
def pipeline(default_config) -> FingertipPipeline:
    """デフォルト設定のパイプライン"""
    return FingertipPipeline(default_config)


@pytest.fixture
def hand_point() -> HandPoint:
    """画像中央・深度0.5mの手"""
    return HandPoint(320.0, 240.0, 0.5)


@pytest.fixture
def disk_depth() -> np.ndarray:
    """握り拳（半径60pxの円盤, 500mm）"""
    return create_disk_depth((320, 240), radius=60, depth_mm=500)


@pytest.fixture
def star_depth() -> np.ndarray:
    """指を広げた手（五芒星, 500mm）"""
    return create_star_depth((320, 240), outer_radius=100, inner_radius=40, depth_mm=500)


@pytest.fixture
def empty_depth() -> np.ndarray:
    """深度値なし"""
    return create_empty_depth()


@pytest.fixture
def random_depth() -> np.ndarray:
    """乱数深度画像（シード固定）"""
    rng = np.random.default_rng(42)
    return rng.integers(0, 1200, size=(480, 640), dtype=np.uint16)


# =============================================================================
# テストスイート選択
# =============================================================================

def pytest_configure(config):
    """pytest設定時に実行"""
    config.addinivalue_line(
        "markers", "unit_slow: 実行時間が長いユニットテスト"
    )


def pytest_collection_modifyitems(config, items):
    """テスト収集時の自動マーカー付与"""
    for item in items:
        if "performance" in item.nodeid:
            item.add_marker(pytest.mark.performance)
            item.add_marker(pytest.mark.slow)
        elif "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        elif "test_" in item.name:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# アサーション拡張
# =============================================================================

class TestAssertions:
    """拡張アサーション関数"""

    __test__ = False

    @staticmethod
    def assert_performance_target(measurement: PerformanceMeasurement, target_ms: float, operation_name: str):
        """パフォーマンス目標のアサーション"""
        assert measurement.execution_time_ms <= target_ms, (
            f"{operation_name} パフォーマンス目標未達成: "
            f"{measurement.execution_time_ms:.3f}ms > {target_ms}ms"
        )

    @staticmethod
    def assert_mask_subset(mask: np.ndarray, allowed: np.ndarray, description: str = "マスク"):
        """マスクの前景が allowed の範囲内にあることをアサーション"""
        outside = np.count_nonzero((mask > 0) & ~allowed)
        assert outside == 0, f"{description}: 許可範囲外のピクセルが {outside} 個"

    @staticmethod
    def assert_within_tolerance(actual: float, expected: float, tolerance: float, description: str = "値"):
        """許容誤差内アサーション"""
        diff = abs(actual - expected)
        assert diff <= tolerance, (
            f"{description}が許容誤差を超過: |{actual} - {expected}| = {diff} > {tolerance}"
        )


@pytest.fixture
def assert_helper():
    """アサーション拡張のヘルパー"""
    return TestAssertions()
