#!/usr/bin/env python3
"""
設定管理のテスト
デフォルト値・YAML保存/読込・検証
"""

import logging
import pytest
import yaml
from pathlib import Path

from fingertip.config import ConfigManager, ContourSelection, PipelineConfig
from fingertip.constants import (
    MAX_HAND_RADIUS_PX, HAND_DEPTH_HALF_RANGE_MM, CONTOUR_APPROX_EPSILON_PX,
    FINGERTIP_MAX_ANGLE_RAD, FINGERTIP_CUTOFF_FRACTION, GRASP_CONVEXITY_THRESHOLD,
)
from fingertip.errors import ConfigurationError


class TestPipelineConfig:
    """設定データクラスのテスト"""

    def test_defaults(self):
        """デフォルト値は既定の閾値"""
        config = PipelineConfig()
        assert config.region.max_hand_radius == MAX_HAND_RADIUS_PX == 128
        assert config.region.depth_half_range == HAND_DEPTH_HALF_RANGE_MM == 100
        assert config.contour.approx_epsilon == CONTOUR_APPROX_EPSILON_PX == 17.5
        assert config.contour.selection == ContourSelection.POINT_COUNT
        assert config.fingertip.max_angle == FINGERTIP_MAX_ANGLE_RAD == 1.0
        assert config.fingertip.cutoff_fraction == FINGERTIP_CUTOFF_FRACTION == 0.1
        assert config.grasp.convexity_threshold == GRASP_CONVEXITY_THRESHOLD == 0.8
        assert config.gating.required_confidence == 1.0
        config.validate()

    @pytest.mark.parametrize("section,key,value", [
        ("region", "max_hand_radius", 0),
        ("region", "depth_half_range", -5),
        ("contour", "approx_epsilon", 0.0),
        ("fingertip", "cutoff_fraction", 1.0),
        ("grasp", "convexity_threshold", 0.0),
        ("gating", "required_confidence", 1.5),
        ("gating", "min_hand_extension", -0.1),
    ])
    def test_validate_rejects_invalid(self, section, key, value):
        """不正値は ConfigurationError"""
        config = PipelineConfig()
        setattr(getattr(config, section), key, value)
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.details['key'] == f"{section}.{key}"


class TestConfigManager:
    """設定マネージャーのテスト"""

    def test_save_and_load(self, tmp_path: Path):
        """YAMLへの保存と読み込み"""
        manager = ConfigManager()
        config = PipelineConfig()
        config.region.max_hand_radius = 96
        config.contour.selection = ContourSelection.AREA
        config.grasp.convexity_threshold = 0.75
        manager.set_config(config)

        path = tmp_path / "conf" / "fingertip.yaml"
        assert manager.save_config(path)

        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
        assert raw['contour']['selection'] == 'area'

        loaded = ConfigManager().load_config(path)
        assert loaded.region.max_hand_radius == 96
        assert loaded.contour.selection == ContourSelection.AREA
        assert loaded.grasp.convexity_threshold == 0.75
        assert loaded.fingertip.max_angle == 1.0

    def test_partial_file_and_unknown_keys(self, tmp_path: Path, caplog):
        """未知のキーは警告して無視"""
        path = tmp_path / "fingertip.yaml"
        path.write_text(
            "fingertip:\n  max_angle: 0.8\n  bogus: 1\nunknown_section: {}\nlog_level: DEBUG\n",
            encoding='utf-8'
        )
        with caplog.at_level(logging.WARNING, logger="fingertip.config"):
            loaded = ConfigManager().load_config(path)

        assert loaded.fingertip.max_angle == 0.8
        assert loaded.log_level == "DEBUG"
        assert loaded.region.max_hand_radius == 128
        assert "fingertip.bogus" in caplog.text
        assert "unknown_section" in caplog.text

    def test_invalid_file_falls_back_to_defaults(self, tmp_path: Path, caplog):
        """不正な設定ファイルはデフォルトにフォールバック"""
        path = tmp_path / "fingertip.yaml"
        path.write_text("grasp:\n  convexity_threshold: 3.0\n", encoding='utf-8')
        with caplog.at_level(logging.WARNING, logger="fingertip.config"):
            loaded = ConfigManager().load_config(path)

        assert loaded.grasp.convexity_threshold == 0.8
        assert "Failed to load config" in caplog.text

    def test_empty_file(self, tmp_path: Path):
        """空ファイルはデフォルト"""
        path = tmp_path / "fingertip.yaml"
        path.write_text("", encoding='utf-8')
        loaded = ConfigManager().load_config(path)
        assert loaded == PipelineConfig()

    def test_save_without_config(self, tmp_path: Path):
        """未読込の設定は保存できない"""
        assert not ConfigManager().save_config(tmp_path / "x.yaml")
