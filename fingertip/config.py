#!/usr/bin/env python3
"""
Fingertip 設定管理システム

パイプライン全体で使用される閾値を統一管理し、
Magic Numberのハードコーディングを解消します。
"""

import yaml
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional, Dict, Any
from pathlib import Path

from fingertip import get_logger
from fingertip.constants import (
    DEFAULT_DEPTH_WIDTH, DEFAULT_DEPTH_HEIGHT, DEFAULT_DEPTH_SCALE,
    MAX_HAND_RADIUS_PX, HAND_DEPTH_HALF_RANGE_MM,
    CONTOUR_APPROX_EPSILON_PX,
    FINGERTIP_MAX_ANGLE_RAD, FINGERTIP_CUTOFF_FRACTION,
    GRASP_CONVEXITY_THRESHOLD,
    REQUIRED_JOINT_CONFIDENCE, MIN_HAND_EXTENSION_M,
)
from fingertip.errors import ConfigurationError

logger = get_logger(__name__)


class ContourSelection(Enum):
    """輪郭選択ルール"""
    POINT_COUNT = "point_count"          # 境界点数最大（互換動作）
    AREA = "area"                        # 面積最大
    NEAREST_TO_HAND = "nearest_to_hand"  # 手の中心に最も近い


@dataclass
class RegionConfig:
    """手領域抽出設定"""
    frame_width: int = DEFAULT_DEPTH_WIDTH
    frame_height: int = DEFAULT_DEPTH_HEIGHT
    depth_scale: float = DEFAULT_DEPTH_SCALE       # m → 深度単位
    max_hand_radius: int = MAX_HAND_RADIUS_PX      # px
    depth_half_range: int = HAND_DEPTH_HALF_RANGE_MM  # mm


@dataclass
class ContourConfig:
    """輪郭抽出設定"""
    approx_epsilon: float = CONTOUR_APPROX_EPSILON_PX
    selection: ContourSelection = ContourSelection.POINT_COUNT


@dataclass
class FingertipConfig:
    """指先判定設定"""
    max_angle: float = FINGERTIP_MAX_ANGLE_RAD      # rad
    cutoff_fraction: float = FINGERTIP_CUTOFF_FRACTION


@dataclass
class GraspConfig:
    """把持判定設定"""
    convexity_threshold: float = GRASP_CONVEXITY_THRESHOLD


@dataclass
class GatingConfig:
    """手ゲーティング設定"""
    required_confidence: float = REQUIRED_JOINT_CONFIDENCE
    min_hand_extension: float = MIN_HAND_EXTENSION_M  # m
    require_extension: bool = True
    require_raised_hand: bool = True


@dataclass
class PipelineConfig:
    """プロジェクト全体設定"""
    region: RegionConfig = field(default_factory=RegionConfig)
    contour: ContourConfig = field(default_factory=ContourConfig)
    fingertip: FingertipConfig = field(default_factory=FingertipConfig)
    grasp: GraspConfig = field(default_factory=GraspConfig)
    gating: GatingConfig = field(default_factory=GatingConfig)

    # ログ設定
    log_level: str = "INFO"
    log_format_style: str = "detailed"

    def validate(self) -> None:
        """設定値を検証（不正値は ConfigurationError）"""
        positive = {
            'region.frame_width': self.region.frame_width,
            'region.frame_height': self.region.frame_height,
            'region.depth_scale': self.region.depth_scale,
            'region.max_hand_radius': self.region.max_hand_radius,
            'region.depth_half_range': self.region.depth_half_range,
            'contour.approx_epsilon': self.contour.approx_epsilon,
            'fingertip.max_angle': self.fingertip.max_angle,
        }
        for key, value in positive.items():
            if value <= 0:
                raise ConfigurationError(key, value, "must be positive")

        if not 0.0 <= self.fingertip.cutoff_fraction < 1.0:
            raise ConfigurationError(
                'fingertip.cutoff_fraction', self.fingertip.cutoff_fraction, "must be in [0, 1)"
            )
        if not 0.0 < self.grasp.convexity_threshold <= 1.0:
            raise ConfigurationError(
                'grasp.convexity_threshold', self.grasp.convexity_threshold, "must be in (0, 1]"
            )
        if not 0.0 <= self.gating.required_confidence <= 1.0:
            raise ConfigurationError(
                'gating.required_confidence', self.gating.required_confidence, "must be in [0, 1]"
            )
        if self.gating.min_hand_extension < 0:
            raise ConfigurationError(
                'gating.min_hand_extension', self.gating.min_hand_extension, "must not be negative"
            )


_SECTIONS = ('region', 'contour', 'fingertip', 'grasp', 'gating')
_TOP_LEVEL_KEYS = ('log_level', 'log_format_style')


class ConfigManager:
    """設定管理クラス"""

    def __init__(self):
        self._config: Optional[PipelineConfig] = None
        self._config_file_path: Optional[Path] = None

    def load_config(self, config_file: Optional[Path] = None) -> PipelineConfig:
        """
        設定ファイルを読み込み

        Args:
            config_file: 設定ファイルパス（Noneの場合はデフォルト設定）

        Returns:
            読み込まれた設定
        """
        if config_file is None:
            project_root = Path(__file__).parent.parent
            default_paths = [
                Path.cwd() / "fingertip.yaml",
                project_root / "fingertip.yaml",
                Path.home() / ".fingertip" / "config.yaml"
            ]

            for path in default_paths:
                if path.exists():
                    config_file = path
                    break

        if config_file and config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    config_dict = yaml.safe_load(f) or {}

                config = self._dict_to_config(config_dict)
                config.validate()
                self._config = config
                self._config_file_path = config_file
                logger.info(f"Configuration loaded from {config_file}")

            except (OSError, yaml.YAMLError, ValueError, TypeError, ConfigurationError) as e:
                logger.warning(f"Failed to load config from {config_file}: {e}")
                logger.info("Using default configuration")
                self._config = PipelineConfig()
        else:
            logger.info("No config file found, using default configuration")
            self._config = PipelineConfig()

        return self._config

    def save_config(self, config_file: Optional[Path] = None) -> bool:
        """
        設定をファイルに保存

        Args:
            config_file: 保存先ファイルパス

        Returns:
            保存成功したかどうか
        """
        if self._config is None:
            logger.error("No configuration to save")
            return False

        if config_file is None:
            config_file = self._config_file_path or Path("fingertip.yaml")

        try:
            config_dict = self._config_to_dict(self._config)

            config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(config_file, 'w', encoding='utf-8') as f:
                yaml.dump(config_dict, f, default_flow_style=False,
                          allow_unicode=True, indent=2)

            logger.info(f"Configuration saved to {config_file}")
            return True

        except OSError as e:
            logger.error(f"Failed to save config to {config_file}: {e}")
            return False

    def get_config(self) -> PipelineConfig:
        """現在の設定を取得"""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def set_config(self, config: PipelineConfig) -> None:
        """設定を差し替え"""
        config.validate()
        self._config = config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> PipelineConfig:
        """辞書を設定オブジェクトに変換"""
        if not isinstance(config_dict, dict):
            raise TypeError(f"Configuration root must be a mapping, got {type(config_dict).__name__}")

        config = PipelineConfig()

        for section_name in _SECTIONS:
            section_dict = config_dict.get(section_name)
            if section_dict is None:
                continue
            if not isinstance(section_dict, dict):
                logger.warning(f"Ignoring non-mapping section '{section_name}'")
                continue

            section = getattr(config, section_name)
            for key, value in section_dict.items():
                if not hasattr(section, key):
                    logger.warning(f"Unknown config key: {section_name}.{key}")
                    continue
                if isinstance(getattr(section, key), Enum):
                    value = type(getattr(section, key))(value)
                setattr(section, key, value)

        for key in _TOP_LEVEL_KEYS:
            if key in config_dict:
                setattr(config, key, config_dict[key])

        unknown = set(config_dict) - set(_SECTIONS) - set(_TOP_LEVEL_KEYS)
        for key in sorted(unknown):
            logger.warning(f"Unknown config section: {key}")

        return config

    def _config_to_dict(self, config: PipelineConfig) -> Dict[str, Any]:
        """設定オブジェクトを辞書に変換"""
        result: Dict[str, Any] = {}
        for section_name in _SECTIONS:
            section = getattr(config, section_name)
            section_dict = {}
            for f in fields(section):
                value = getattr(section, f.name)
                section_dict[f.name] = value.value if isinstance(value, Enum) else value
            result[section_name] = section_dict
        for key in _TOP_LEVEL_KEYS:
            result[key] = getattr(config, key)
        return result


# グローバル設定マネージャー
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """グローバル設定マネージャーを取得"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def get_config() -> PipelineConfig:
    """現在の設定を取得"""
    return get_config_manager().get_config()

def load_config(config_file: Optional[Path] = None) -> PipelineConfig:
    """設定を読み込み"""
    return get_config_manager().load_config(config_file)

def save_config(config_file: Optional[Path] = None) -> bool:
    """設定を保存"""
    return get_config_manager().save_config(config_file)
