#!/usr/bin/env python3
"""
デモランナーのテスト
"""

import logging

import numpy as np
import pytest

from fingertip import LOG_FORMATS, get_logger, setup_logging
from fingertip.cli import main, parse_arguments_to_config
from fingertip.input.synthetic import create_star_depth


@pytest.fixture(autouse=True)
def restore_logging():
    """DemoRunner がルートロガーを再設定するため元に戻す"""
    yield
    setup_logging(level="DEBUG")


def test_parse_arguments():
    """引数解析"""
    config = parse_arguments_to_config(["--scene", "disk", "--hand", "1", "2", "0.5", "--frames", "0"])
    assert config.scene == "disk"
    assert config.hand == (1.0, 2.0, 0.5)
    assert config.frames == 1
    assert config.depth_file is None


@pytest.mark.parametrize("scene", ["disk", "star", "empty"])
def test_synthetic_scenes(scene):
    """合成シーンは正常終了"""
    assert main(["--scene", scene, "--frames", "2"]) == 0


def test_depth_file(tmp_path):
    """保存済み深度画像"""
    path = tmp_path / "depth.npy"
    np.save(path, create_star_depth())
    assert main(["--depth-file", str(path), "--hand", "320", "240", "0.5"]) == 0


def test_depth_file_requires_hand(tmp_path):
    """--depth-file には --hand が必要"""
    path = tmp_path / "depth.npy"
    np.save(path, create_star_depth())
    assert main(["--depth-file", str(path)]) == 1


def test_missing_config_file(tmp_path):
    """存在しない設定ファイルはエラー終了"""
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_setup_logging_format_and_file(tmp_path):
    """書式の選択とファイル出力"""
    log_file = tmp_path / "fingertip.log"
    root = setup_logging(level="warning", log_file=log_file, format_style="simple")

    assert root.level == logging.WARNING
    assert len(root.handlers) == 2
    assert all(h.formatter._fmt == LOG_FORMATS["simple"] for h in root.handlers)

    get_logger("fingertip.test").warning("configured")
    for handler in root.handlers:
        handler.flush()
    assert "WARNING: configured" in log_file.read_text(encoding="utf-8")


def test_setup_logging_invalid_level():
    """未知のログレベルはエラー"""
    with pytest.raises(ValueError):
        setup_logging(level="LOUD")
